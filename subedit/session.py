"""The editing session: one video, its caption tracks and its shared style."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .history import TimelineHistory
from .models import CaptionEntry, LanguageTrack, TranscriptionResult, VideoSource
from .playback import CaptionFrame, PlaybackSync
from .style import Style
from .timecode import format_editor, parse_editor
from .timeline import Timeline
from .exceptions import SubEditError, TrackNotFound

logger = logging.getLogger(__name__)


class EditingSession:
    """
    Explicit context for editing the captions of one video.

    Owns every (language, Timeline) pair of the video, which of them is current,
    and the single Style shared by all tracks. Timeline edits go through the
    value-producing Timeline operations and are recorded per track so they can
    be undone.
    """

    def __init__(
        self,
        video: VideoSource,
        duration: float,
        tracks: Iterable[LanguageTrack],
        current_language: Optional[str] = None,
        style: Optional[Style] = None,
    ):
        """
        Initializes the session.

        Args:
            video: The video being captioned.
            duration: Video length in seconds.
            tracks: At least one caption track; labels must be unique.
            current_language: Label of the current track. Defaults to the first track.
            style: Caption style. Defaults to Style().

        Raises:
            SubEditError: If no tracks are given or two share a label.
            TrackNotFound: If current_language names no track.
        """
        self.video = video
        self.duration = float(duration)
        self.style = style or Style()
        self._histories: Dict[str, TimelineHistory] = {}
        for track in tracks:
            if track.language in self._histories:
                raise SubEditError(f"Duplicate caption track for language {track.language!r}")
            self._histories[track.language] = TimelineHistory(track.timeline)
        if not self._histories:
            raise SubEditError("An editing session needs at least one caption track.")
        if current_language is None:
            current_language = next(iter(self._histories))
        if current_language not in self._histories:
            raise TrackNotFound(current_language)
        self._current_language = current_language
        logger.info(
            f"Editing session opened for {video.file_name}: {len(self._histories)} track(s), "
            f"current '{current_language}', {len(self.timeline)} captions."
        )

    @classmethod
    def from_transcription(
        cls,
        video: VideoSource,
        result: TranscriptionResult,
        style: Optional[Style] = None,
    ) -> "EditingSession":
        return cls(video, result.duration, [result.track], style=style)

    # --- Tracks ---

    @property
    def languages(self) -> List[str]:
        return list(self._histories)

    @property
    def current_language(self) -> str:
        return self._current_language

    @property
    def timeline(self) -> Timeline:
        """The current track's Timeline."""
        return self._histories[self._current_language].current

    @property
    def current_track(self) -> LanguageTrack:
        return LanguageTrack(language=self._current_language, timeline=self.timeline)

    def track(self, language: str) -> LanguageTrack:
        try:
            return LanguageTrack(language=language, timeline=self._histories[language].current)
        except KeyError:
            raise TrackNotFound(language) from None

    def add_track(self, language: str, timeline: Optional[Timeline] = None) -> LanguageTrack:
        """
        Adds a caption track. Without a timeline the new track copies the
        current one (timings and text) as a starting point for a manual
        translation; nothing is translated here.
        """
        if language in self._histories:
            raise SubEditError(f"Caption track for language {language!r} already exists")
        self._histories[language] = TimelineHistory(timeline if timeline is not None else self.timeline)
        logger.info(f"Added caption track '{language}'.")
        return self.track(language)

    def replace_track(self, language: str, timeline: Timeline) -> LanguageTrack:
        """
        Replaces a track's captions wholesale, e.g. with a re-imported file.

        The track's undo/redo history is discarded.
        """
        if language not in self._histories:
            raise TrackNotFound(language)
        self._histories[language].reset(timeline)
        logger.info(f"Replaced caption track '{language}' with {len(timeline)} captions.")
        return self.track(language)

    def select_language(self, language: str) -> LanguageTrack:
        if language not in self._histories:
            raise TrackNotFound(language)
        self._current_language = language
        logger.info(f"Switched to caption track '{language}'.")
        return self.current_track

    def snapshot(self) -> LanguageTrack:
        """Point-in-time copy of the current track for export."""
        return self.current_track

    # --- Edits on the current track ---

    def _commit(self, description: str, timeline: Timeline) -> Timeline:
        self._histories[self._current_language].push(description, timeline)
        logger.debug(f"[{self._current_language}] {description}")
        return timeline

    def update_entry(self, entry_id: int, **changes) -> CaptionEntry:
        timeline = self._commit(f"Edit caption {entry_id}", self.timeline.update(entry_id, **changes))
        return timeline.get(entry_id)

    def update_entry_times(self, entry_id: int, start_text: str, end_text: str) -> CaptionEntry:
        """
        Applies start/end typed in the editor's MM:SS.mmm format.

        Raises:
            MalformedTimeCode: If either value cannot be parsed; nothing changes.
            InvalidCaptionError: If the parsed times are invalid; nothing changes.
        """
        return self.update_entry(entry_id, start=parse_editor(start_text), end=parse_editor(end_text))

    def insert_entry(self, entry: CaptionEntry) -> CaptionEntry:
        self._commit(f"Insert caption {entry.id}", self.timeline.insert(entry))
        return entry

    def add_entry(self, start: float, end: float, text: str) -> CaptionEntry:
        timeline, entry = self.timeline.add(start, end, text)
        self._commit(f"Add caption {entry.id}", timeline)
        return entry

    def split_entry(self, entry_id: int, at: float) -> Tuple[CaptionEntry, CaptionEntry]:
        timeline, second = self.timeline.split(entry_id, at)
        self._commit(f"Split caption {entry_id}", timeline)
        return timeline.get(entry_id), second

    def remove_entry(self, entry_id: int) -> None:
        self._commit(f"Delete caption {entry_id}", self.timeline.remove(entry_id))

    @property
    def can_undo(self) -> bool:
        return self._histories[self._current_language].can_undo

    @property
    def can_redo(self) -> bool:
        return self._histories[self._current_language].can_redo

    def undo(self) -> bool:
        return self._histories[self._current_language].undo() is not None

    def redo(self) -> bool:
        return self._histories[self._current_language].redo() is not None

    # --- Style ---

    def set_style(self, style: Style) -> Style:
        self.style = style
        logger.debug(f"Caption style changed: {style.to_dict()}")
        return style

    def update_style(self, **changes) -> Style:
        """Replaces individual style fields, e.g. update_style(size="large")."""
        return self.set_style(Style.from_dict({**self.style.to_dict(), **changes}))

    # --- Playback ---

    def caption_at(self, position: float) -> Optional[CaptionFrame]:
        return PlaybackSync.caption_frame(self.timeline, self.style, position)

    def begin_edit(self, entry_id: int) -> float:
        """Returns the position the playback surface should seek to."""
        return PlaybackSync.seek_target(self.timeline, entry_id)

    def describe_position(self, position: float) -> str:
        """Editor status line, e.g. 'Current time: 00:12.500 | Duration: 02:00.000'."""
        return f"Current time: {format_editor(position)} | Duration: {format_editor(self.duration)}"
