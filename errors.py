"""
Error taxonomy for the screenshot capture pipeline.

Every failure the pipeline reports to a caller is a CaptureError subclass.
Each one carries its kind, the HTTP status it maps to, and the pipeline
stage it was raised in.
"""

from enum import Enum
from typing import Optional


class CaptureErrorKind(str, Enum):
    INVALID_URL = "InvalidUrl"
    PASSWORD_REQUIRED = "PasswordRequired"
    NAVIGATION_FAILED = "NavigationFailed"
    CAPTURE_FAILED = "CaptureFailed"
    INTERNAL_ERROR = "InternalError"
    CAPTURE_UNAVAILABLE = "CaptureUnavailable"


class CaptureError(Exception):
    """Base class for failures surfaced by the capture pipeline"""

    kind: CaptureErrorKind = CaptureErrorKind.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message, "stage": self.stage}


class InvalidUrlError(CaptureError):
    """Raised when the supplied URL is missing or cannot be parsed"""

    kind = CaptureErrorKind.INVALID_URL
    status_code = 400


class PasswordRequiredError(CaptureError):
    """Raised when the page is password protected and no password was given"""

    kind = CaptureErrorKind.PASSWORD_REQUIRED
    status_code = 401


class NavigationFailedError(CaptureError):
    """Raised when the page could not be loaded with either wait strategy"""

    kind = CaptureErrorKind.NAVIGATION_FAILED
    status_code = 500


class CaptureFailedError(CaptureError):
    """Raised when the browser fails while taking or encoding the screenshot"""

    kind = CaptureErrorKind.CAPTURE_FAILED
    status_code = 500


class InternalCaptureError(CaptureError):
    """Wraps any unexpected exception raised inside the pipeline"""

    kind = CaptureErrorKind.INTERNAL_ERROR
    status_code = 500


class CaptureUnavailableError(CaptureError):
    """Raised when remote capture is switched off in configuration"""

    kind = CaptureErrorKind.CAPTURE_UNAVAILABLE
    status_code = 501
