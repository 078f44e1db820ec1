"""Error types raised by cloudput."""
from typing import Any, Dict, Optional


class CloudPutError(RuntimeError):
    """Base class for all cloudput errors."""


class NoOperandsError(CloudPutError):
    """Raised when put is called without any source files."""

    def __init__(self, message: str = "missing operands to `put`"):
        super().__init__(message)


class PathValidationError(CloudPutError):
    """Raised when a remote destination path is malformed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"invalid destination path {path!r}: {reason}")


class SourceOpenError(CloudPutError):
    """Raised when a local source file cannot be opened."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"cannot open {path}")


class SourceStatError(CloudPutError):
    """Raised when a local source file cannot be stat'ed or is not a regular file."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"cannot stat {path}")


class StorageAPIError(CloudPutError):
    """Raised when the storage service answers with an error status."""

    def __init__(self, status_code: int, endpoint: str, detail: Any = None):
        self.status_code = status_code
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(f"API error {status_code} on POST {endpoint}: {detail}")


class SessionError(CloudPutError):
    """Base class for failures inside a chunked upload session."""

    phase = "session"

    def __init__(self, message: str, session_id: Optional[str] = None, offset: int = 0):
        self.session_id = session_id
        self.offset = offset
        super().__init__(message)


class SessionStartError(SessionError):
    phase = "start"


class SessionAppendError(SessionError):
    phase = "append"


class SessionFinishError(SessionError):
    phase = "finish"


class SingleShotUploadError(CloudPutError):
    """Raised when a single-request upload fails."""


class AggregateUploadError(CloudPutError):
    """Raised when one or more files of a put failed; keyed by source path."""

    def __init__(self, errors: Dict[str, BaseException]):
        self.errors = dict(errors)
        lines = [f"{src}: {exc}" for src, exc in self.errors.items()]
        noun = "file" if len(self.errors) == 1 else "files"
        super().__init__(
            f"{len(self.errors)} {noun} failed to upload:\n  " + "\n  ".join(lines)
        )


def describe_exception(exc: BaseException) -> str:
    message = str(exc).strip()
    if message:
        return message
    return f"{type(exc).__name__}: {repr(exc)}"
