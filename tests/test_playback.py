# tests/test_playback.py
import pytest

from subedit.playback import PlaybackSync
from subedit.style import Style
from subedit.exceptions import EntryNotFound


def test_active_index_on_overlap_returns_first(overlapping):
    assert PlaybackSync.active_index(overlapping, 3) == 0


def test_active_index_follows_playback(welcome_timeline):
    positions = [0, 2.5, 3.5, 4, 12, 12.5, 16, 30]
    indexes = [PlaybackSync.active_index(welcome_timeline, p) for p in positions]
    assert indexes == [0, 0, None, 1, 2, None, 3, None]


def test_repeated_calls_are_independent(welcome_timeline):
    first = [PlaybackSync.active_index(welcome_timeline, p / 10) for p in range(200)]
    second = [PlaybackSync.active_index(welcome_timeline, p / 10) for p in range(200)]
    assert first == second


def test_caption_frame_combines_text_and_style(hello_world):
    frame = PlaybackSync.caption_frame(hello_world, Style(size="large", position="top"), 5)
    assert frame.index == 1
    assert frame.entry_id == 2
    assert frame.text == "World"
    assert frame.attributes.font_size_px == 32
    assert frame.attributes.anchor_css["top"] == "10%"


def test_caption_frame_between_captions(hello_world):
    assert PlaybackSync.caption_frame(hello_world, Style(), 3.5) is None


def test_seek_target_is_entry_start(welcome_timeline):
    assert PlaybackSync.seek_target(welcome_timeline, 3) == 8.0
    with pytest.raises(EntryNotFound):
        PlaybackSync.seek_target(welcome_timeline, 99)
