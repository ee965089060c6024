"""
Errors raised while preparing or relaying a composition.

Every error carries the HTTP status it is reported with.
"""


class ComposeError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ComposeError):
    """Required input is missing or out of range."""

    status_code = 400


class DecodeError(ComposeError):
    """Uploaded bytes could not be read as an image."""

    status_code = 400


class UpstreamError(ComposeError):
    """The image-editing service failed or returned nothing usable."""

    status_code = 502
