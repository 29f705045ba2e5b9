"""Validates uploaded videos and reads their duration with ffprobe."""

import ffmpeg
import mimetypes
import os
import logging
from typing import Optional

from .models import VideoSource
from .exceptions import InvalidVideoFileError, MediaProbeError

logger = logging.getLogger(__name__)

ACCEPTED_VIDEO_TYPES = ("video/mp4", "video/webm", "video/ogg", "video/quicktime")
# Not every platform registers these with mimetypes.
VIDEO_EXTENSIONS = {
    ".mp4": "video/mp4",
    ".m4v": "video/mp4",
    ".webm": "video/webm",
    ".ogv": "video/ogg",
    ".mov": "video/quicktime",
}
DEFAULT_MAX_UPLOAD_BYTES = 200 * 1024 * 1024  # 200 MB


def validate_video_file(video_path: str, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> VideoSource:
    """
    Checks that a file is an accepted video type and not too large.

    Args:
        video_path: Path to the uploaded video.
        max_bytes: Largest accepted file size in bytes.

    Returns:
        A VideoSource describing the file.

    Raises:
        FileNotFoundError: If the path does not exist or is not a file.
        InvalidVideoFileError: If the type is not accepted or the file is too large.
    """
    if not os.path.isfile(video_path):
        raise FileNotFoundError(f"Input video file not found: {video_path}")

    extension = os.path.splitext(video_path)[1].lower()
    mime_type = VIDEO_EXTENSIONS.get(extension) or mimetypes.guess_type(video_path)[0]
    if mime_type not in ACCEPTED_VIDEO_TYPES:
        logger.warning(f"Rejected {video_path}: unsupported type {mime_type}")
        raise InvalidVideoFileError(
            "Invalid file type. Please upload a video file (MP4, WebM, OGG, or MOV)."
        )

    size_bytes = os.path.getsize(video_path)
    if size_bytes > max_bytes:
        logger.warning(f"Rejected {video_path}: {size_bytes} bytes exceeds limit of {max_bytes}")
        raise InvalidVideoFileError(
            f"File is too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )

    return VideoSource(
        path=video_path,
        file_name=os.path.basename(video_path),
        size_bytes=size_bytes,
        mime_type=mime_type,
    )


class MediaProbe:
    """Reads container metadata from video files."""

    def __init__(self, ffprobe_path: Optional[str] = None):
        """
        Initializes the MediaProbe.

        Args:
            ffprobe_path: Optional path to the ffprobe executable.
                          If None, assumes ffprobe is in the system PATH.
        """
        self.ffprobe_cmd = ffprobe_path or 'ffprobe'
        logger.info(f"Using ffprobe command: {self.ffprobe_cmd}")

    def probe_duration(self, video_path: str) -> float:
        """
        Returns the duration of a video in seconds.

        Raises:
            FileNotFoundError: If the video does not exist.
            MediaProbeError: If ffprobe fails or reports no usable duration.
        """
        if not os.path.exists(video_path):
            raise FileNotFoundError(f"Input video file not found: {video_path}")
        try:
            info = ffmpeg.probe(video_path, cmd=self.ffprobe_cmd)
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffprobe failed for {video_path}: {stderr_output}")
            raise MediaProbeError(f"ffprobe failed: {stderr_output}") from e

        duration = info.get('format', {}).get('duration')
        if duration is None:
            # Some containers only carry per-stream durations.
            durations = [s.get('duration') for s in info.get('streams', []) if s.get('duration')]
            duration = max(durations, key=float) if durations else None
        if duration is None:
            raise MediaProbeError(f"ffprobe reported no duration for {video_path}")
        try:
            seconds = float(duration)
        except (TypeError, ValueError) as e:
            raise MediaProbeError(f"Unreadable duration {duration!r} for {video_path}") from e
        logger.debug(f"Probed duration of {video_path}: {seconds:.3f}s")
        return seconds
