"""Custom Exceptions for the SubEdit application."""

class SubEditError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(SubEditError):
    """Exception raised for errors in configuration loading."""
    pass

class FileSystemError(SubEditError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass

class MalformedTimeCode(SubEditError, ValueError):
    """Exception raised when an editor time-code string cannot be parsed."""
    pass

class InvalidCaptionError(SubEditError, ValueError):
    """Exception raised when a caption entry violates its invariants."""
    pass

class EntryNotFound(SubEditError, KeyError):
    """Exception raised when no caption entry has the requested id."""

    def __init__(self, entry_id):
        super().__init__(entry_id)
        self.entry_id = entry_id

    def __str__(self):
        return f"No caption entry with id {self.entry_id!r}"

class DuplicateId(SubEditError):
    """Exception raised when inserting an entry whose id is already in use."""

    def __init__(self, entry_id):
        super().__init__(f"Caption entry id {entry_id!r} already exists")
        self.entry_id = entry_id

class TrackNotFound(SubEditError, KeyError):
    """Exception raised when a session has no track for a language label."""

    def __init__(self, language):
        super().__init__(language)
        self.language = language

    def __str__(self):
        return f"No caption track for language {self.language!r}"

class InvalidStyleError(SubEditError, ValueError):
    """Exception raised for unsupported style values."""
    pass

class SubtitleParseError(SubEditError):
    """Exception raised when SRT or WebVTT text cannot be decoded."""
    pass

class TranscriptionFailed(SubEditError):
    """Exception raised when the transcription capability fails."""
    pass

class InvalidVideoFileError(SubEditError):
    """Exception raised when an uploaded video is of the wrong type or too large."""
    pass

class MediaProbeError(SubEditError):
    """Exception raised when ffprobe cannot read a video's metadata."""
    pass

class ExportError(SubEditError):
    """Exception raised for errors while exporting captions or render jobs."""
    pass
