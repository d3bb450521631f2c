"""Error kinds and exception hierarchy for speech synthesis jobs."""

ERROR_KIND_RATE_LIMIT = "rate_limit"
ERROR_KIND_POLICY = "policy"
ERROR_KIND_NETWORK = "network"
ERROR_KIND_UNAVAILABLE = "unavailable"
ERROR_KIND_EMPTY_RESPONSE = "empty_response"
ERROR_KIND_TIMEOUT = "timeout"
ERROR_KIND_CANCELLED = "cancelled"
ERROR_KIND_UNKNOWN = "unknown"


def _normalize_kind(kind: str | None) -> str:
    return str(kind or ERROR_KIND_UNKNOWN).strip().lower() or ERROR_KIND_UNKNOWN


class SpeechError(RuntimeError):
    """Base error. `error_kind` drives user guidance without parsing messages."""

    def __init__(self, message: str, *, error_kind: str = ERROR_KIND_UNKNOWN) -> None:
        super().__init__(message)
        self.error_kind = _normalize_kind(error_kind)


class RemoteError(SpeechError):
    """A remote synthesis attempt failed and may be retried."""


class RateLimitedError(RemoteError):
    def __init__(self, message: str) -> None:
        super().__init__(message, error_kind=ERROR_KIND_RATE_LIMIT)


class TransientRemoteError(RemoteError):
    def __init__(self, message: str, *, error_kind: str = ERROR_KIND_UNKNOWN) -> None:
        super().__init__(message, error_kind=error_kind)


class EmptyResponseError(RemoteError):
    def __init__(self, message: str = "Empty audio response") -> None:
        super().__init__(message, error_kind=ERROR_KIND_EMPTY_RESPONSE)


class PolicyBlockedError(SpeechError):
    """Content withheld by the service's safety filter. Not retried."""

    def __init__(self, message: str = "Content blocked by safety filter") -> None:
        super().__init__(message, error_kind=ERROR_KIND_POLICY)


class SegmentExhaustedError(SpeechError):
    def __init__(self, index: int, attempts: int, last_error: Exception) -> None:
        self.index = index
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Segment {index} failed after {attempts} attempts: {last_error}",
            error_kind=getattr(last_error, "error_kind", ERROR_KIND_UNKNOWN),
        )


class AllSegmentsFailedError(SpeechError):
    def __init__(self, total: int, last_error: Exception | None = None) -> None:
        self.total = total
        self.last_error = last_error
        if last_error is not None:
            message = f"All {total} segment(s) failed. Last error: {last_error}"
        else:
            message = "Could not synthesize audio. Check the connection and try again."
        super().__init__(
            message,
            error_kind=getattr(last_error, "error_kind", ERROR_KIND_UNKNOWN),
        )


class JobCancelledError(SpeechError):
    def __init__(self, completed: int, total: int) -> None:
        self.completed = completed
        self.total = total
        super().__init__(
            f"Job cancelled after {completed}/{total} segments",
            error_kind=ERROR_KIND_CANCELLED,
        )


class JobTimeoutError(SpeechError):
    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            f"Job did not finish within {timeout:g}s",
            error_kind=ERROR_KIND_TIMEOUT,
        )


FRIENDLY_MESSAGES = {
    ERROR_KIND_RATE_LIMIT: (
        "The speech service is rate limiting requests. "
        "Wait a minute or two and try again, or split very long texts into smaller parts."
    ),
    ERROR_KIND_POLICY: (
        "The text was blocked by the service's safety filter. "
        "Remove sensitive, violent or hateful wording and try again."
    ),
    ERROR_KIND_NETWORK: (
        "Could not reach the speech service. Check your internet connection or VPN."
    ),
    ERROR_KIND_UNAVAILABLE: (
        "The speech service is temporarily unavailable. Try again in a few minutes."
    ),
    ERROR_KIND_TIMEOUT: (
        "Synthesis took too long and was stopped. Try again later or use a shorter text."
    ),
    ERROR_KIND_CANCELLED: "Synthesis was cancelled.",
}


def friendly_message(error: BaseException) -> str:
    """User guidance for an error, keyed on its kind."""
    kind = _normalize_kind(getattr(error, "error_kind", None))
    if kind in FRIENDLY_MESSAGES:
        return FRIENDLY_MESSAGES[kind]
    detail = str(error).strip()
    return f"An unexpected error occurred: {detail}" if detail else "An unexpected error occurred."
