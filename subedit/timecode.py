"""Conversion between float seconds and the SRT, WebVTT and editor time-code formats."""

import math
import re
from decimal import Decimal, ROUND_FLOOR

from .exceptions import MalformedTimeCode

EDITOR_PATTERN = re.compile(r"^\s*(\d+):([0-5]\d)\.(\d{3})\s*$")
# HH:MM:SS,mmm (SRT), HH:MM:SS.mmm and MM:SS.mmm (WebVTT)
TIMESTAMP_PATTERN = re.compile(r"^\s*(?:(\d+):)?([0-5]\d):([0-5]\d)[,.](\d{3})\s*$")


def to_milliseconds(seconds: float) -> int:
    """
    Floors a seconds value to whole milliseconds.

    The float is read through its shortest decimal representation, so a value
    such as 3.001 (stored as 3.00099999...) yields 3001 and not 3000.

    Args:
        seconds: Non-negative, finite time in seconds.

    Returns:
        The number of whole milliseconds.

    Raises:
        ValueError: If seconds is negative, NaN or infinite.
    """
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"Time value must be a finite, non-negative number of seconds: {seconds!r}")
    scaled = Decimal(repr(float(seconds))) * 1000
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def _split_hms(seconds: float):
    milliseconds = to_milliseconds(seconds)
    hrs, milliseconds = divmod(milliseconds, 3600000)
    mins, milliseconds = divmod(milliseconds, 60000)
    secs, milliseconds = divmod(milliseconds, 1000)
    return hrs, mins, secs, milliseconds


def format_srt(seconds: float) -> str:
    """Formats seconds into SRT time format HH:MM:SS,mmm."""
    hrs, mins, secs, ms = _split_hms(seconds)
    return f"{hrs:02d}:{mins:02d}:{secs:02d},{ms:03d}"


def format_vtt(seconds: float) -> str:
    """Formats seconds into WebVTT time format HH:MM:SS.mmm."""
    hrs, mins, secs, ms = _split_hms(seconds)
    return f"{hrs:02d}:{mins:02d}:{secs:02d}.{ms:03d}"


def format_editor(seconds: float) -> str:
    """Formats seconds for the caption editor as MM:SS.mmm, minutes unbounded."""
    mins, milliseconds = divmod(to_milliseconds(seconds), 60000)
    secs, milliseconds = divmod(milliseconds, 1000)
    return f"{mins:02d}:{secs:02d}.{milliseconds:03d}"


def parse_editor(text: str) -> float:
    """
    Parses an editor time-code (MM:SS.mmm) back into seconds.

    Args:
        text: The time-code typed into the editor.

    Returns:
        Time in seconds.

    Raises:
        MalformedTimeCode: If the text is not minutes:seconds.milliseconds.
    """
    if not isinstance(text, str):
        raise MalformedTimeCode(f"Time code must be a string, got {type(text).__name__}")
    match = EDITOR_PATTERN.match(text)
    if not match:
        raise MalformedTimeCode(f"Expected MM:SS.mmm, got {text!r}")
    mins, secs, ms = (int(group) for group in match.groups())
    return (mins * 60000 + secs * 1000 + ms) / 1000


def parse_timestamp(text: str) -> float:
    """
    Parses an SRT or WebVTT cue timestamp into seconds.

    Accepts HH:MM:SS,mmm, HH:MM:SS.mmm and the hour-less WebVTT form MM:SS.mmm.

    Raises:
        MalformedTimeCode: If the text is not a cue timestamp.
    """
    match = TIMESTAMP_PATTERN.match(text)
    if not match:
        raise MalformedTimeCode(f"Invalid cue timestamp {text!r}")
    hrs, mins, secs, ms = match.groups()
    total_ms = int(hrs or 0) * 3600000 + int(mins) * 60000 + int(secs) * 1000 + int(ms)
    return total_ms / 1000
