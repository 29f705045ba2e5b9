"""The ordered collection of caption entries for one language track."""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Optional, Tuple

from .models import CaptionEntry
from .exceptions import DuplicateId, EntryNotFound, InvalidCaptionError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("start", "end", "text")


@dataclass(frozen=True)
class Timeline:
    """
    Immutable sequence of CaptionEntry objects in document (insertion) order.

    Every mutation returns a new Timeline and leaves the receiver untouched, so
    a reader holding an older value never observes a half-applied edit.

    Entries may overlap. Nothing here rejects overlapping intervals; lookups
    resolve overlaps by document order.
    """
    entries: Tuple[CaptionEntry, ...] = ()
    next_id: int = 0
    _index: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        entries = tuple(self.entries)
        object.__setattr__(self, "entries", entries)
        index = {}
        for position, entry in enumerate(entries):
            if entry.id in index:
                raise DuplicateId(entry.id)
            index[entry.id] = position
        object.__setattr__(self, "_index", index)
        highest = max(index) + 1 if index else 1
        object.__setattr__(self, "next_id", max(self.next_id, highest, 1))

    @classmethod
    def from_segments(cls, segments: Iterable[Tuple[float, float, str]]) -> "Timeline":
        """Builds a Timeline from (start, end, text) triples, numbering ids from 1."""
        entries = [
            CaptionEntry(id=number, start=start, end=end, text=text)
            for number, (start, end, text) in enumerate(segments, start=1)
        ]
        return cls(entries=tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CaptionEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> CaptionEntry:
        return self.entries[index]

    def __contains__(self, entry_id) -> bool:
        return entry_id in self._index

    def index_of(self, entry_id: int) -> int:
        """Returns the document-order index of an entry id."""
        try:
            return self._index[entry_id]
        except KeyError:
            raise EntryNotFound(entry_id) from None

    def get(self, entry_id: int) -> CaptionEntry:
        return self.entries[self.index_of(entry_id)]

    def sorted_entries(self) -> Tuple[CaptionEntry, ...]:
        """Entries in ascending start order; equal starts keep document order."""
        return tuple(sorted(self.entries, key=lambda entry: entry.start))

    def find_active(self, position: float) -> Optional[int]:
        """
        Finds the caption shown at a playback position.

        Args:
            position: Playback offset in seconds.

        Returns:
            The document-order index of the first entry whose closed interval
            [start, end] contains position, or None when no entry does.
        """
        for index, entry in enumerate(self.entries):
            if entry.contains(position):
                return index
        return None

    def update(self, entry_id: int, **changes) -> "Timeline":
        """
        Returns a Timeline with one entry's start, end and/or text replaced.

        The patched entry stays at its position; neighbours are not re-sorted
        or checked for overlap.

        Raises:
            EntryNotFound: If no entry has entry_id.
            InvalidCaptionError: If a change names a non-editable field or the
                                 patched entry breaks a caption invariant.
        """
        position = self.index_of(entry_id)
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidCaptionError(f"Cannot change caption field(s): {', '.join(sorted(unknown))}")
        updated = replace(self.entries[position], **changes)
        entries = self.entries[:position] + (updated,) + self.entries[position + 1:]
        logger.debug(f"Updated caption {entry_id}: {changes}")
        return Timeline(entries=entries, next_id=self.next_id)

    def insert(self, entry: CaptionEntry) -> "Timeline":
        """
        Returns a Timeline with entry appended.

        Raises:
            DuplicateId: If entry.id is already used in this Timeline.
        """
        if entry.id in self._index:
            raise DuplicateId(entry.id)
        return Timeline(entries=self.entries + (entry,), next_id=max(self.next_id, entry.id + 1))

    def add(self, start: float, end: float, text: str) -> Tuple["Timeline", CaptionEntry]:
        """Appends a new entry under a freshly allocated id."""
        entry = CaptionEntry(id=self.next_id, start=start, end=end, text=text)
        return self.insert(entry), entry

    def remove(self, entry_id: int) -> "Timeline":
        """Returns a Timeline without the entry. Its id is never handed out again."""
        position = self.index_of(entry_id)
        entries = self.entries[:position] + self.entries[position + 1:]
        return Timeline(entries=entries, next_id=self.next_id)

    def split(self, entry_id: int, at: float) -> Tuple["Timeline", CaptionEntry]:
        """
        Splits an entry in two at an interior position.

        The original entry keeps its id and ends at `at`; the second half gets a
        new id, starts at `at`, copies the text and is placed right after it.

        Returns:
            The new Timeline and the newly created second entry.

        Raises:
            EntryNotFound: If no entry has entry_id.
            InvalidCaptionError: If `at` is not strictly inside the entry.
        """
        position = self.index_of(entry_id)
        original = self.entries[position]
        if not original.start < at < original.end:
            raise InvalidCaptionError(
                f"Split point {at} is outside caption {entry_id} ({original.start}-{original.end})"
            )
        first = replace(original, end=at)
        second = CaptionEntry(id=self.next_id, start=at, end=original.end, text=original.text)
        entries = self.entries[:position] + (first, second) + self.entries[position + 1:]
        return Timeline(entries=entries, next_id=self.next_id + 1), second
