"""Exports a session's captions as subtitle files or as a burn-in render request."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import yaml

from .models import LanguageTrack, VideoSource
from .session import EditingSession
from .style import Style, resolve_render_attributes
from .subtitle_formatter import encode_vtt, get_formatter
from .tasks import ProcessingTask, ProgressReporter
from .utils import base_name, path_in_dir
from .exceptions import ExportError, FileSystemError

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    VIDEO = "video"
    SRT = "srt"
    VTT = "vtt"


def export_file_name(file_name: str, language: str, ext: str) -> str:
    """'<base>_<language>.<ext>' where base is the video file name without its extension."""
    return f"{base_name(file_name)}_{language}.{ext}"


def burned_in_file_name(file_name: str) -> str:
    return f"{base_name(file_name)}_with_subtitles.mp4"


@dataclass(frozen=True)
class ExportArtifact:
    """Encoded subtitle text ready for an export sink."""
    file_name: str
    content: str
    mime_type: str

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")


@dataclass(frozen=True)
class BurnInRequest:
    """Everything an external renderer needs to burn captions into a video."""
    video: VideoSource
    output_name: str
    track: LanguageTrack
    style: Style

    def to_job(self) -> dict:
        """Plain-data form of the request, with the captions as WebVTT text."""
        attributes = resolve_render_attributes(self.style)
        return {
            "source": self.video.path,
            "output": self.output_name,
            "language": self.track.language,
            "style": self.style.to_dict(),
            "render": {
                "font_family": attributes.font_family,
                "font_size_px": attributes.font_size_px,
                "color": attributes.color,
                "background_color": attributes.background_color,
                "css": attributes.to_css(),
            },
            "captions": encode_vtt(self.track.timeline),
        }


def build_text_export(track: LanguageTrack, video: VideoSource, export_format: ExportFormat) -> ExportArtifact:
    """
    Encodes a point-in-time track snapshot as SRT or WebVTT.

    Raises:
        ExportError: If export_format is not srt or vtt.
    """
    try:
        export_format = ExportFormat(export_format)
    except ValueError:
        raise ExportError(f"Unsupported export format {export_format!r}") from None
    if export_format is ExportFormat.VIDEO:
        raise ExportError("Video export produces a render request, not a text file.")
    formatter = get_formatter(export_format.value)
    return ExportArtifact(
        file_name=export_file_name(video.file_name, track.language, formatter.extension),
        content=formatter.encode(track.timeline),
        mime_type=formatter.mime_type,
    )


def build_burn_in_request(session: EditingSession) -> BurnInRequest:
    return BurnInRequest(
        video=session.video,
        output_name=burned_in_file_name(session.video.file_name),
        track=session.snapshot(),
        style=session.style,
    )


class ExportSink(ABC):
    """Abstract base class for destinations of exported files."""

    @abstractmethod
    def save(self, artifact: ExportArtifact) -> str:
        """
        Stores the artifact.

        Returns:
            Where it was stored (path or URL).

        Raises:
            ExportError: If the artifact cannot be stored.
        """
        pass


class FileExportSink(ExportSink):
    """Writes exported files into a local directory."""

    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def save(self, artifact: ExportArtifact) -> str:
        try:
            output_path = path_in_dir(self.output_dir, artifact.file_name)
        except FileSystemError as e:
            raise ExportError(f"Output directory '{self.output_dir}' is not usable: {e}") from e
        try:
            with open(output_path, 'wb') as f:
                f.write(artifact.data)
        except IOError as e:
            logger.error(f"Failed to write {output_path}: {e}", exc_info=True)
            raise ExportError(f"Could not write {artifact.file_name}: {e}") from e
        logger.info(f"Saved {artifact.file_name} ({artifact.mime_type}, {len(artifact.data)} bytes) to {output_path}")
        return output_path


class VideoRenderer(ABC):
    """Abstract base class for the external service that burns captions into video."""

    @abstractmethod
    async def render(self, request: BurnInRequest, progress: ProgressReporter) -> str:
        """
        Produces the captioned video (or hands the request to whatever does).

        Returns:
            Location of the result.

        Raises:
            ExportError: If the request cannot be rendered or handed off.
        """
        pass


class RenderJobWriter(VideoRenderer):
    """
    Hands burn-in requests to an external muxer as YAML job files.

    Writes '<base>_with_subtitles.yaml' into the job directory; the muxer
    picks it up from there. No video is processed here.
    """

    def __init__(self, job_dir: str):
        self.job_dir = job_dir

    async def render(self, request: BurnInRequest, progress: ProgressReporter) -> str:
        progress.report(0.2, "Preparing render job")
        job = request.to_job()
        try:
            job_path = path_in_dir(self.job_dir, os.path.splitext(request.output_name)[0] + ".yaml")
            with open(job_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(job, f, sort_keys=False, allow_unicode=True)
        except (IOError, FileSystemError) as e:
            logger.error(f"Failed to write render job for {request.video.file_name}: {e}", exc_info=True)
            raise ExportError(f"Could not write render job: {e}") from e
        progress.report(1.0, "Render job queued")
        logger.info(f"Render job for {request.output_name} written to {job_path}")
        return job_path


class Exporter:
    """Turns the current state of an editing session into export output."""

    def __init__(self, sink: ExportSink, renderer: Optional[VideoRenderer] = None):
        self.sink = sink
        self.renderer = renderer

    def export_text(self, session: EditingSession, export_format: ExportFormat) -> str:
        """Encodes the current track as SRT/WebVTT and saves it. Returns the sink location."""
        artifact = build_text_export(session.snapshot(), session.video, export_format)
        return self.sink.save(artifact)

    def export_video(self, session: EditingSession) -> ProcessingTask:
        """
        Creates the burn-in task for the current track and style.

        The request is built immediately, so later edits do not affect it.

        Raises:
            ExportError: If no VideoRenderer is configured.
        """
        if self.renderer is None:
            raise ExportError("Video export needs a configured video renderer.")
        request = build_burn_in_request(session)
        renderer = self.renderer

        async def work(progress: ProgressReporter) -> str:
            return await renderer.render(request, progress)

        return ProcessingTask(f"Render {request.output_name}", work)
