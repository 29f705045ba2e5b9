"""Maps playback positions onto the active caption."""

from dataclasses import dataclass
from typing import Optional

from .style import RenderAttributes, Style, resolve_render_attributes
from .timeline import Timeline


@dataclass(frozen=True)
class CaptionFrame:
    """The caption to draw at one playback position."""
    index: int
    entry_id: int
    text: str
    attributes: RenderAttributes


class PlaybackSync:
    """
    Stateless lookups run on every playback-position update.

    Holds no state between calls, so one instance can serve any number of
    sessions and be called on every tick.
    """

    @staticmethod
    def active_index(timeline: Timeline, position: float) -> Optional[int]:
        """Index of the active caption (first in document order), or None."""
        return timeline.find_active(position)

    @staticmethod
    def caption_frame(timeline: Timeline, style: Style, position: float) -> Optional[CaptionFrame]:
        """Combines the active caption with the resolved style, or None between captions."""
        index = timeline.find_active(position)
        if index is None:
            return None
        entry = timeline[index]
        return CaptionFrame(
            index=index,
            entry_id=entry.id,
            text=entry.text,
            attributes=resolve_render_attributes(style),
        )

    @staticmethod
    def seek_target(timeline: Timeline, entry_id: int) -> float:
        """Playback position to jump to when editing of an entry begins."""
        return timeline.get(entry_id).start
