# tests/test_transcriber.py
import asyncio
import os

import pytest

from subedit.media_probe import MediaProbe
from subedit.tasks import ProgressReporter, TaskState
from subedit.transcriber import SidecarTranscriber, Transcriber, start_transcription
from subedit.exceptions import MediaProbeError, TranscriptionFailed

SIDECAR_SRT = (
    "1\n00:00:00,000 --> 00:00:03,000\nHello\n\n"
    "2\n00:00:04,000 --> 00:00:07,500\nWorld\n"
)


class StubProbe(MediaProbe):
    def __init__(self, duration=None, error=None):
        self.duration = duration
        self.error = error

    def probe_duration(self, video_path):
        if self.error:
            raise self.error
        return self.duration


def write_sidecar(video, suffix, content=SIDECAR_SRT):
    path = os.path.splitext(video.path)[0] + suffix
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def run(transcriber, video):
    task = start_transcription(transcriber, video)

    async def scenario():
        return await task

    return task, asyncio.run(scenario())


def test_candidate_paths_prefer_language_tagged_files(video):
    stem = os.path.splitext(video.path)[0]
    candidates = SidecarTranscriber(language="English").candidate_paths(video)
    assert candidates[:2] == [f"{stem}.English.srt", f"{stem}.English.vtt"]
    assert candidates[-2:] == [f"{stem}.srt", f"{stem}.vtt"]


def test_language_tagged_sidecar_wins(video):
    write_sidecar(video, ".srt", "1\n00:00:00,000 --> 00:00:01,000\nUntagged\n")
    tagged = write_sidecar(video, ".english.srt")
    assert SidecarTranscriber(language="English").find_caption_file(video) == tagged


def test_transcribe_without_probe_uses_last_caption_end(video):
    write_sidecar(video, ".srt")
    task, result = run(SidecarTranscriber(language="English"), video)
    assert task.state is TaskState.COMPLETED
    assert result.track.language == "English"
    assert [entry.text for entry in result.track.timeline] == ["Hello", "World"]
    assert result.duration == 7.5


def test_transcribe_with_probe_reports_progress(video):
    write_sidecar(video, ".vtt", "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHi\n")
    reporter = ProgressReporter("transcribe")
    events = []
    reporter.add_listener(events.append)

    transcriber = SidecarTranscriber(language="German", probe=StubProbe(duration=60.0))
    result = asyncio.run(transcriber.transcribe(video, reporter))
    assert result.duration == 60.0
    assert result.track.language == "German"
    assert [event.fraction for event in events] == [0.1, 0.6, 0.9]


def test_explicit_caption_path(video, tmp_path):
    path = tmp_path / "elsewhere.srt"
    path.write_text(SIDECAR_SRT, encoding="utf-8")
    _, result = run(SidecarTranscriber(caption_path=str(path)), video)
    assert len(result.track.timeline) == 2


def test_missing_sidecar_fails(video):
    task = start_transcription(SidecarTranscriber(), video)

    async def scenario():
        await task

    with pytest.raises(TranscriptionFailed, match="No sidecar captions"):
        asyncio.run(scenario())
    assert task.state is TaskState.FAILED


def test_empty_sidecar_fails(video):
    write_sidecar(video, ".srt", "")
    with pytest.raises(TranscriptionFailed, match="contains no captions"):
        run(SidecarTranscriber(), video)


def test_malformed_sidecar_becomes_transcription_failed(video):
    write_sidecar(video, ".vtt", "not a caption file\n")
    with pytest.raises(TranscriptionFailed):
        run(SidecarTranscriber(), video)


def test_probe_failure_becomes_transcription_failed(video):
    write_sidecar(video, ".srt")
    transcriber = SidecarTranscriber(probe=StubProbe(error=MediaProbeError("ffprobe failed")))
    with pytest.raises(TranscriptionFailed, match="Could not read duration"):
        run(transcriber, video)


class FailingTranscriber(Transcriber):
    async def transcribe(self, video, progress):
        progress.report(0.3, "Decoding audio")
        raise RuntimeError("speech model crashed")


def test_unexpected_transcriber_error_becomes_transcription_failed(video):
    task = start_transcription(FailingTranscriber(), video)

    async def scenario():
        await task

    with pytest.raises(TranscriptionFailed, match="speech model crashed") as excinfo:
        asyncio.run(scenario())
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert task.state is TaskState.FAILED
