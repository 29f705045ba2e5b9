"""Data models for SubEdit."""

import math
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .exceptions import InvalidCaptionError
from .timecode import to_milliseconds

if TYPE_CHECKING:
    from .timeline import Timeline

CUE_ARROW = "-->"


def normalize_caption_text(text: str) -> str:
    """
    Normalizes caption text for storage.

    Line endings become '\\n', surrounding whitespace and trailing whitespace on
    each line are removed.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").strip().split("\n")
    return "\n".join(line.rstrip() for line in lines)


@dataclass(frozen=True)
class CaptionEntry:
    """A single timed caption: [start, end] seconds plus its text."""
    id: int
    start: float
    end: float
    text: str

    def __post_init__(self):
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise InvalidCaptionError(f"Caption id must be an integer, got {self.id!r}")
        for name in ("start", "end"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidCaptionError(f"Caption {name} must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0:
                raise InvalidCaptionError(f"Caption {name} must be finite and non-negative, got {value!r}")
            # Stored at the millisecond precision every subtitle format carries.
            object.__setattr__(self, name, to_milliseconds(value) / 1000)
        if self.start >= self.end:
            raise InvalidCaptionError(
                f"Caption {self.id} must start before it ends (start={self.start}, end={self.end})"
            )
        if not isinstance(self.text, str):
            raise InvalidCaptionError(f"Caption text must be a string, got {type(self.text).__name__}")
        text = normalize_caption_text(self.text)
        if not text:
            raise InvalidCaptionError(f"Caption {self.id} has empty text")
        # Neither SRT nor WebVTT can carry these inside a cue payload.
        if "\n\n" in text:
            raise InvalidCaptionError(f"Caption {self.id} text contains an empty line")
        if CUE_ARROW in text:
            raise InvalidCaptionError(f"Caption {self.id} text contains '{CUE_ARROW}'")
        object.__setattr__(self, "text", text)

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, position: float) -> bool:
        """True when position falls inside the closed interval [start, end]."""
        return self.start <= position <= self.end


@dataclass(frozen=True)
class LanguageTrack:
    """A Timeline tagged with the language label it is written in."""
    language: str
    timeline: "Timeline"


@dataclass(frozen=True)
class VideoSource:
    """The video a session captions. Only metadata, never the media itself."""
    path: str
    file_name: str
    size_bytes: int = 0
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class TranscriptionResult:
    """Holds the output of the transcription capability."""
    track: LanguageTrack
    duration: float
