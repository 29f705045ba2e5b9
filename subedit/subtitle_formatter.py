"""Handles encoding timelines into subtitle text (SRT, WebVTT) and decoding it back."""

import logging
import re
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import List, Tuple

import srt

from .timeline import Timeline
from .timecode import format_srt, format_vtt, parse_timestamp
from .exceptions import (
    ExportError,
    FileSystemError,
    InvalidCaptionError,
    MalformedTimeCode,
    SubtitleParseError,
)

logger = logging.getLogger(__name__)

VTT_HEADER = "WEBVTT"
VTT_TIMING = re.compile(r"^(\S+)\s+-->\s+(\S+)(?:\s+.*)?$")
VTT_SKIPPED_BLOCKS = ("NOTE", "STYLE", "REGION")
ONE_MILLISECOND = timedelta(milliseconds=1)


def _encode_blocks(timeline: Timeline, format_time) -> str:
    blocks = []
    for number, entry in enumerate(timeline.sorted_entries(), start=1):
        blocks.append(f"{number}\n{format_time(entry.start)} --> {format_time(entry.end)}\n{entry.text}\n")
    return "\n".join(blocks)


def encode_srt(timeline: Timeline) -> str:
    """Serializes a timeline as SRT; cue numbers follow output order, not entry ids."""
    return _encode_blocks(timeline, format_srt)


def encode_vtt(timeline: Timeline) -> str:
    """Serializes a timeline as WebVTT. The output always starts with 'WEBVTT\\n\\n'."""
    return f"{VTT_HEADER}\n\n" + _encode_blocks(timeline, format_vtt)


def _build_timeline(triples: List[Tuple[float, float, str]], source: str) -> Timeline:
    try:
        return Timeline.from_segments(triples)
    except InvalidCaptionError as e:
        raise SubtitleParseError(f"Invalid cue in {source} input: {e}") from e


def decode_srt(text: str) -> Timeline:
    """
    Parses SRT text into a Timeline with ids numbered from 1 in file order.

    Raises:
        SubtitleParseError: If the text is not valid SRT or a cue is invalid.
    """
    try:
        subtitles = list(srt.parse(text))
    except (srt.SRTParseError, ValueError) as e:
        raise SubtitleParseError(f"Invalid SRT input: {e}") from e
    triples = [
        (
            (sub.start // ONE_MILLISECOND) / 1000,
            (sub.end // ONE_MILLISECOND) / 1000,
            sub.content,
        )
        for sub in subtitles
    ]
    logger.debug(f"Decoded {len(triples)} SRT cues.")
    return _build_timeline(triples, "SRT")


def decode_vtt(text: str) -> Timeline:
    """
    Parses WebVTT text into a Timeline with ids numbered from 1 in file order.

    NOTE, STYLE and REGION blocks are skipped, cue identifiers and cue settings
    are ignored.

    Raises:
        SubtitleParseError: If the header is missing or a cue is malformed.
    """
    normalized = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    blocks = [block for block in re.split(r"\n[ \t]*\n", normalized) if block.strip()]
    if not blocks:
        raise SubtitleParseError("Empty WebVTT input, missing WEBVTT header")
    header_lines = blocks[0].split("\n")
    if not re.match(r"^WEBVTT(?:[ \t].*)?$", header_lines[0]):
        raise SubtitleParseError(f"WebVTT input must start with {VTT_HEADER!r}, got {header_lines[0]!r}")
    if any("-->" in line for line in header_lines[1:]):
        raise SubtitleParseError("WebVTT header must be followed by a blank line")

    triples = []
    for lines in (block.split("\n") for block in blocks[1:]):
        first_word = lines[0].split(" ", 1)[0].split("\t", 1)[0]
        if first_word in VTT_SKIPPED_BLOCKS:
            continue
        timing_at = 0 if "-->" in lines[0] else 1
        if timing_at >= len(lines) or "-->" not in lines[timing_at]:
            raise SubtitleParseError(f"WebVTT cue without timing line: {lines[0]!r}")
        match = VTT_TIMING.match(lines[timing_at].strip())
        if not match:
            raise SubtitleParseError(f"Malformed WebVTT timing line: {lines[timing_at]!r}")
        try:
            start = parse_timestamp(match.group(1))
            end = parse_timestamp(match.group(2))
        except MalformedTimeCode as e:
            raise SubtitleParseError(f"Malformed WebVTT timing line {lines[timing_at]!r}: {e}") from e
        triples.append((start, end, "\n".join(lines[timing_at + 1:])))

    logger.debug(f"Decoded {len(triples)} WebVTT cues.")
    return _build_timeline(triples, "WebVTT")


class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    extension: str = ""
    mime_type: str = ""

    @abstractmethod
    def encode(self, timeline: Timeline) -> str:
        """Serializes the timeline into subtitle text."""
        pass

    @abstractmethod
    def decode(self, text: str) -> Timeline:
        """
        Parses subtitle text into a Timeline.

        Raises:
            SubtitleParseError: If the text cannot be parsed.
        """
        pass

    def write(self, timeline: Timeline, output_path: str) -> None:
        """
        Encodes the timeline and writes it to output_path as UTF-8.

        Raises:
            ExportError: If the file cannot be written.
        """
        logger.info(f"Writing {len(timeline)} captions as {self.extension.upper()}: {output_path}")
        content = self.encode(timeline)
        try:
            with open(output_path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(content)
        except IOError as e:
            logger.error(f"Failed to write {self.extension.upper()} file to {output_path}: {e}", exc_info=True)
            raise ExportError(f"Could not write {self.extension.upper()} file: {e}") from e

    def read(self, input_path: str) -> Timeline:
        """
        Reads and decodes a subtitle file.

        Raises:
            FileSystemError: If the file cannot be read.
            SubtitleParseError: If its contents cannot be parsed.
        """
        logger.info(f"Reading {self.extension.upper()} captions from: {input_path}")
        try:
            with open(input_path, 'r', encoding='utf-8-sig') as f:
                content = f.read()
        except (IOError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read subtitle file {input_path}: {e}", exc_info=True)
            raise FileSystemError(f"Could not read subtitle file {input_path}: {e}") from e
        return self.decode(content)


class SRTFormatter(SubtitleFormatter):
    """Formats subtitles into the SRT (SubRip Text) format."""

    extension = "srt"
    mime_type = "text/plain"

    def encode(self, timeline: Timeline) -> str:
        return encode_srt(timeline)

    def decode(self, text: str) -> Timeline:
        return decode_srt(text)


class VTTFormatter(SubtitleFormatter):
    """Formats subtitles into the VTT (Web Video Text Tracks) format."""

    extension = "vtt"
    mime_type = "text/vtt"

    def encode(self, timeline: Timeline) -> str:
        return encode_vtt(timeline)

    def decode(self, text: str) -> Timeline:
        return decode_vtt(text)


FORMATTERS = {
    "srt": SRTFormatter,
    "vtt": VTTFormatter,
}


def get_formatter(name: str) -> SubtitleFormatter:
    """Returns a formatter for 'srt' or 'vtt' (case-insensitive, leading dot allowed)."""
    key = name.lower().lstrip(".")
    try:
        return FORMATTERS[key]()
    except KeyError:
        raise ExportError(f"Unsupported subtitle format '{name}'. Choose one of: {', '.join(FORMATTERS)}") from None
