# tests/test_exporter.py
import asyncio
import os

import pytest
import yaml

from subedit.exporter import (
    ExportArtifact,
    ExportFormat,
    Exporter,
    ExportSink,
    FileExportSink,
    RenderJobWriter,
    build_burn_in_request,
    build_text_export,
    burned_in_file_name,
    export_file_name,
)
from subedit.subtitle_formatter import decode_vtt
from subedit.exceptions import ExportError


class MemorySink(ExportSink):
    def __init__(self):
        self.saved = []

    def save(self, artifact):
        self.saved.append(artifact)
        return f"memory://{artifact.file_name}"


def test_export_file_names():
    assert export_file_name("My Talk.mp4", "English", "srt") == "My Talk_English.srt"
    assert export_file_name("talk.v2.webm", "Spanish", "vtt") == "talk.v2_Spanish.vtt"
    assert burned_in_file_name("My Talk.mp4") == "My Talk_with_subtitles.mp4"


def test_text_export_srt(session):
    artifact = build_text_export(session.snapshot(), session.video, ExportFormat.SRT)
    assert artifact.file_name == "My Talk_English.srt"
    assert artifact.mime_type == "text/plain"
    assert artifact.content.startswith("1\n00:00:00,000 --> 00:00:03,000\nHello and welcome")


def test_text_export_vtt_accepts_plain_string(session):
    artifact = build_text_export(session.snapshot(), session.video, "vtt")
    assert artifact.file_name == "My Talk_English.vtt"
    assert artifact.mime_type == "text/vtt"
    assert artifact.content.startswith("WEBVTT\n\n")


@pytest.mark.parametrize("export_format", ["video", "ass"])
def test_text_export_rejects_other_formats(session, export_format):
    with pytest.raises(ExportError):
        build_text_export(session.snapshot(), session.video, export_format)


def test_export_uses_current_language(session):
    session.add_track("Spanish")
    session.select_language("Spanish")
    sink = MemorySink()
    location = Exporter(sink).export_text(session, ExportFormat.VTT)
    assert location == "memory://My Talk_Spanish.vtt"


def test_file_export_sink_writes_utf8(tmp_path, session):
    session.update_entry(1, text="Héllo, ¿qué tal?")
    output_dir = tmp_path / "exports"
    path = Exporter(FileExportSink(str(output_dir))).export_text(session, ExportFormat.SRT)
    assert path == os.path.join(str(output_dir), "My Talk_English.srt")
    with open(path, encoding="utf-8") as f:
        assert "Héllo, ¿qué tal?" in f.read()


def test_file_export_sink_rejects_file_as_directory(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    artifact = ExportArtifact("a.srt", "", "text/plain")
    with pytest.raises(ExportError):
        FileExportSink(str(blocker)).save(artifact)


def test_burn_in_request_is_a_snapshot(session):
    request = build_burn_in_request(session)
    session.update_entry(1, text="Changed after export")
    session.update_style(size="large")
    assert request.track.timeline.get(1).text == "Hello and welcome to this video."
    assert request.style.size.value == "medium"
    assert request.output_name == "My Talk_with_subtitles.mp4"


def test_export_video_writes_render_job(tmp_path, session):
    session.update_style(position="top", size="large")
    exporter = Exporter(MemorySink(), renderer=RenderJobWriter(str(tmp_path / "jobs")))
    task = exporter.export_video(session)
    session.update_entry(1, text="Too late for this export")

    async def scenario():
        return await task

    job_path = asyncio.run(scenario())
    assert job_path == os.path.join(str(tmp_path / "jobs"), "My Talk_with_subtitles.yaml")
    with open(job_path, encoding="utf-8") as f:
        job = yaml.safe_load(f)
    assert job["source"] == session.video.path
    assert job["output"] == "My Talk_with_subtitles.mp4"
    assert job["language"] == "English"
    assert job["style"]["position"] == "top"
    assert job["render"]["font_size_px"] == 32
    assert job["render"]["css"]["top"] == "10%"
    captions = decode_vtt(job["captions"])
    assert captions.get(1).text == "Hello and welcome to this video."
    assert task.progress.fraction == 1.0


def test_export_video_without_renderer(session):
    with pytest.raises(ExportError):
        Exporter(MemorySink()).export_video(session)
