"""Error taxonomy for the ZenFocus core.

Every error raised by the timer, session and persistence layers derives
from :class:`ZenFocusError` and carries a stable ``code`` string so the
UI can pick a message (or a retry button) without string matching.

ValidationError       bad configuration or completion data; caller must fix
NotFoundError         referenced session id does not exist
AlreadyActiveError    a session is already running on this manager
NoActiveSessionError  pause / resume / complete / cancel with nothing active
PersistenceError      storage failed; wraps the cause, safe to retry
TimerError            the timer engine rejected an operation
"""

from __future__ import annotations


class ZenFocusError(Exception):
    """Base class for all ZenFocus errors."""

    code = "ZENFOCUS_ERROR"
    retryable = False

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ValidationError(ZenFocusError):
    code = "VALIDATION_ERROR"


class NotFoundError(ZenFocusError):
    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class AlreadyActiveError(ZenFocusError):
    code = "SESSION_ALREADY_ACTIVE"

    def __init__(self, active_id: str | None = None) -> None:
        message = "A session is already active"
        if active_id:
            message += f" ({active_id})"
        super().__init__(message)
        self.active_id = active_id


class NoActiveSessionError(ZenFocusError):
    code = "NO_ACTIVE_SESSION"

    def __init__(self, operation: str) -> None:
        super().__init__(f"No active session for operation: {operation}")
        self.operation = operation


class PersistenceError(ZenFocusError):
    """Storage failure.  The original exception is kept as ``cause``
    (and chained with ``raise ... from``)."""

    code = "PERSISTENCE_ERROR"
    retryable = True

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class TimerError(ZenFocusError):
    code = "TIMER_ERROR"
