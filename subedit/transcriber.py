"""The transcription capability boundary and a sidecar-caption implementation of it."""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import List, Optional

from .media_probe import MediaProbe
from .models import LanguageTrack, TranscriptionResult, VideoSource
from .subtitle_formatter import get_formatter
from .tasks import ProcessingTask, ProgressReporter
from .exceptions import MediaProbeError, TranscriptionFailed

logger = logging.getLogger(__name__)

class Transcriber(ABC):
    """Abstract base class for transcription services."""

    @abstractmethod
    async def transcribe(self, video: VideoSource, progress: ProgressReporter) -> TranscriptionResult:
        """
        Produces the initial caption track for a video.

        Args:
            video: The video to caption.
            progress: Receives progress updates while the work runs.

        Returns:
            A TranscriptionResult with one LanguageTrack and the video duration.

        Raises:
            TranscriptionFailed: If no track can be produced.
        """
        pass


def start_transcription(transcriber: Transcriber, video: VideoSource) -> ProcessingTask:
    """
    Runs a transcriber as a cancelable task.

    Any failure surfaces as TranscriptionFailed so callers can tell it apart
    from their own errors; the caller builds a session only from a successful
    result.
    """
    async def work(progress: ProgressReporter) -> TranscriptionResult:
        try:
            return await transcriber.transcribe(video, progress)
        except TranscriptionFailed:
            raise
        except Exception as e:
            logger.error(f"Transcription of {video.file_name} failed: {e}")
            raise TranscriptionFailed(f"Transcription of {video.file_name} failed: {e}") from e

    return ProcessingTask(f"Transcribe {video.file_name}", work)


class SidecarTranscriber(Transcriber):
    """
    Imports captions that already sit next to the video.

    Looks for <base>.<language>.srt/.vtt, then <base>.srt/.vtt. The video
    duration comes from ffprobe when a MediaProbe is configured, otherwise from
    the end of the last caption.
    """

    def __init__(self, language: str = "English", probe: Optional[MediaProbe] = None,
                 caption_path: Optional[str] = None):
        """
        Initializes the SidecarTranscriber.

        Args:
            language: Label for the produced track.
            probe: Reads the video duration; optional.
            caption_path: Explicit caption file, skipping the sidecar lookup.
        """
        self.language = language
        self.probe = probe
        self.caption_path = caption_path

    def candidate_paths(self, video: VideoSource) -> List[str]:
        stem = os.path.splitext(video.path)[0]
        tags = [self.language, self.language.lower()]
        candidates = []
        for tag in tags:
            candidates.extend(f"{stem}.{tag}.{ext}" for ext in ("srt", "vtt"))
        candidates.extend(f"{stem}.{ext}" for ext in ("srt", "vtt"))
        return list(dict.fromkeys(candidates))

    def find_caption_file(self, video: VideoSource) -> str:
        if self.caption_path:
            if not os.path.isfile(self.caption_path):
                raise TranscriptionFailed(f"Caption file not found: {self.caption_path}")
            return self.caption_path
        for path in self.candidate_paths(video):
            if os.path.isfile(path):
                return path
        raise TranscriptionFailed(f"No sidecar captions found for {video.file_name}")

    async def transcribe(self, video: VideoSource, progress: ProgressReporter) -> TranscriptionResult:
        caption_path = self.find_caption_file(video)
        logger.info(f"Importing captions for {video.file_name} from {caption_path}")
        progress.report(0.1, "Reading captions")

        formatter = get_formatter(os.path.splitext(caption_path)[1])
        timeline = formatter.read(caption_path)
        if not len(timeline):
            raise TranscriptionFailed(f"Caption file {caption_path} contains no captions")
        progress.report(0.6, f"Read {len(timeline)} captions")
        # Cancellation point between the file read and the probe.
        await asyncio.sleep(0)

        last_end = max(entry.end for entry in timeline)
        duration = last_end
        if self.probe is not None:
            try:
                duration = self.probe.probe_duration(video.path)
            except MediaProbeError as e:
                raise TranscriptionFailed(f"Could not read duration of {video.file_name}: {e}") from e
            progress.report(0.9, "Probed video duration")
            if last_end > duration:
                logger.warning(
                    f"Captions in {caption_path} run past the end of the video "
                    f"({last_end:.3f}s > {duration:.3f}s)."
                )

        return TranscriptionResult(
            track=LanguageTrack(language=self.language, timeline=timeline),
            duration=duration,
        )
