# tests/conftest.py
import pytest

from subedit.models import CaptionEntry, LanguageTrack, VideoSource
from subedit.session import EditingSession
from subedit.style import Style
from subedit.timeline import Timeline

WELCOME_LINES = [
    (0, 3, "Hello and welcome to this video."),
    (4, 7, "Today we're going to talk about AI."),
    (8, 12, "Artificial Intelligence is changing the world."),
    (13, 16, "Let me show you how it works."),
]

@pytest.fixture
def hello_world():
    """The two-caption timeline used for the SRT/VTT reference output."""
    return Timeline.from_segments([(0, 3, "Hello"), (4, 7, "World")])

@pytest.fixture
def welcome_timeline():
    return Timeline.from_segments(WELCOME_LINES)

@pytest.fixture
def overlapping():
    """A(0,5) and B(2,8), in that document order."""
    return Timeline(entries=(
        CaptionEntry(id=1, start=0, end=5, text="A"),
        CaptionEntry(id=2, start=2, end=8, text="B"),
    ))

@pytest.fixture
def video(tmp_path):
    """A tiny placeholder file standing in for an uploaded video (no media needed)."""
    path = tmp_path / "My Talk.mp4"
    path.write_bytes(b"\x00" * 64)
    return VideoSource(path=str(path), file_name=path.name, size_bytes=64, mime_type="video/mp4")

@pytest.fixture
def session(video, welcome_timeline):
    return EditingSession(
        video=video,
        duration=120,
        tracks=[LanguageTrack(language="English", timeline=welcome_timeline)],
        style=Style(),
    )
