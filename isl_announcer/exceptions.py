"""Exception types raised by isl_announcer."""


class IslAnnouncerError(Exception):
    """Base exception for ISL announcement errors."""
    pass


class ConcatenationError(IslAnnouncerError):
    """ffmpeg could not join the clips."""
    pass


class ServiceError(IslAnnouncerError):
    """An external translation or speech service is misconfigured or failed."""
    pass


class TranscriptionError(ServiceError):
    """Recorded speech could not be transcribed."""
    pass
