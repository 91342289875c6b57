"""
Reporting Errors

Failure types raised or recorded by the reporting client.
"""

from typing import Optional


class ReportingError(Exception):
    """Base class for reporting client failures"""


class StorageUnavailable(ReportingError):
    """Persisted identity/counter state could not be read or written"""


class TransportError(ReportingError):
    """Connection-level failure talking to the collector"""


class ServerRejected(ReportingError):
    """Collector answered with a status other than 200/202"""

    def __init__(self, status: int, body: str = "", hint: Optional[str] = None, show_body: bool = False):
        self.status = status
        self.body = body
        self.hint = hint
        message = f"collector rejected request: HTTP {status}"
        if show_body and body:
            message = f"{message}, error detail: {body}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


class InvalidDateFormat(ReportingError, ValueError):
    """Install-age check was given a date that is not ISO-8601"""


class InvalidState(UserWarning):
    """Operation ignored because the client is in the wrong state"""
