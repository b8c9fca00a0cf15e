# tubely/models/errors.py
"""Error taxonomy shared by the use cases and the HTTP layer.

Each error carries a client-facing message and the HTTP status it maps to.
Server-side errors (status >= 500) may also carry an underlying cause which is
logged but never sent to the client.
"""
from typing import Optional


class TubelyError(Exception):
    """Base class for all service errors"""
    status_code: int = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ValidationError(TubelyError):
    """Bad identifiers, unacceptable content type, malformed multipart"""
    status_code = 400


class RequestBodyTooLarge(ValidationError):
    """Upload body exceeded the configured ceiling"""


class AuthError(TubelyError):
    """Missing or invalid bearer credential"""
    status_code = 401


class AuthorizationError(TubelyError):
    """Valid credential, but the caller does not own the record"""
    status_code = 401


class NotFoundError(TubelyError):
    status_code = 404


class ProcessingError(TubelyError):
    """Internal failure: subprocess, parsing, store or persistence"""
    status_code = 500


class MediaInspectionError(ProcessingError):
    """ffprobe could not be run or exited non-zero"""


class MediaFormatError(ProcessingError):
    """ffprobe output could not be parsed"""


class NoVideoStreamError(ProcessingError):
    """The file has no streams to classify"""


class RemuxError(ProcessingError):
    """ffmpeg faststart remux failed"""


class UploadError(ProcessingError):
    """Object store rejected or failed the PutObject"""


class IssuanceError(ProcessingError):
    """Presigned URL could not be generated"""


class PersistenceError(ProcessingError):
    """Video record could not be read or written"""


class StorageReferenceError(ProcessingError):
    """Stored video reference is not in '<bucket>,<key>' form"""
