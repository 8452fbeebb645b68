# util/errors.py
from util.enums import ErrorMessage


class AppError(Exception):
    """
    Base error carrying a user-facing message and the HTTP status the local
    API answers with.
    """

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


class TransportError(AppError):
    """The request failed, or the stream never started."""

    def __init__(self, message: str, http_status: int = 502) -> None:
        super().__init__(message, http_status)


class DecodeError(AppError):
    """One NDJSON line could not be decoded. Soft: the stream keeps going."""

    def __init__(self, message: str, line: str = "") -> None:
        super().__init__(message, ErrorMessage.MALFORMED_LINE.value.http_status)
        self.line = line


class UpstreamError(AppError):
    """The server sent an explicit `error` record."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorMessage.STREAM_ERROR.value.http_status)


class UnknownClaim(AppError):
    def __init__(self, claim_id: str) -> None:
        info = ErrorMessage.UNKNOWN_CLAIM.value
        super().__init__(f"{info.message.rstrip('.')}: {claim_id}", info.http_status)
        self.claim_id = claim_id


class ValidationError(AppError):
    """Pre-flight rejection raised before any network call is attempted."""

    def __init__(self, message: str, http_status: int = 400) -> None:
        super().__init__(message, http_status)
