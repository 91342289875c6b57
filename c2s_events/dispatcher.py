"""
Request Dispatcher

Signs and POSTs reports in the background, then applies the response
to the persisted session counter.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .backends.http import HTTPBackend
from .errors import ReportingError, ServerRejected, StorageUnavailable, TransportError
from .payload import EventReport, serialize
from .signing import sign

log = logging.getLogger(__name__)

PRODUCTION_HOST = "events.appsflyer.com"
SANDBOX_HOST = "sandbox-events.appsflyer.com"
SUCCESS_STATUSES = (200, 202)
SANDBOX_HINT = (
    f"Please try to send the request to '{SANDBOX_HOST}' instead of "
    f"'{PRODUCTION_HOST}' in order to debug."
)


class RequestKind(Enum):
    """Collector request types; the value is the endpoint path segment"""

    FIRST_OPEN = "first_open"
    SESSION = "session"
    INAPP_EVENT = "inapp"

    @property
    def counts_session(self) -> bool:
        return self is not RequestKind.INAPP_EVENT


def endpoint_url(kind: RequestKind, app_id: str, sandbox: bool = False) -> str:
    host = SANDBOX_HOST if sandbox else PRODUCTION_HOST
    return f"https://{host}/v1.0/c2s/{kind.value}/app/nativepc/{app_id}"


def user_agent(client_name: str, os_descriptor: str) -> str:
    """e.g. "UnityGamesLauncher/ (Windows 10 10.0.19045 64bit)" """
    os_part = os_descriptor.replace("(", "").replace(")", "")
    return f"{client_name}/ ({os_part})"


@dataclass
class DispatchOutcome:
    """Result of one dispatch, as observed by the client"""

    kind: RequestKind
    url: str
    success: bool = False
    status: Optional[int] = None
    body: str = ""
    counter: Optional[int] = None
    error: Optional[ReportingError] = None


class Dispatcher:
    """Background sender for signed collector requests"""

    def __init__(self, config, store, backend=None, executor: Optional[ThreadPoolExecutor] = None):
        """
        Initialize dispatcher

        Args:
            config: ClientConfig (dev key, app id, sandbox flag, timeout)
            store: IdentityStore whose counter is advanced on confirmed sessions
            backend: Transport with post(url, body, headers) (default: HTTPBackend)
            executor: Worker pool for background sends
        """
        self.config = config
        self.store = store
        self.backend = backend or HTTPBackend(timeout=config.timeout)
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="c2s-dispatch"
        )
        self._user_agent = user_agent(config.client_name, config.os_version)

    def send(self, report: EventReport, kind: RequestKind) -> "Future[DispatchOutcome]":
        """
        Queue a report for background delivery

        The body is serialized and signed before this returns, so later
        changes to the caller's data do not reach the wire.

        Returns:
            Future resolving to a DispatchOutcome; never resolves with an exception
            for network or storage failures
        """
        url, body, headers = self._prepare(report, kind)
        log.debug("Queueing %s request %s", kind.name, report.request_id)
        return self._executor.submit(self._post, kind, url, body, headers)

    def deliver(self, report: EventReport, kind: RequestKind) -> DispatchOutcome:
        """Send a report and apply the response (blocking)"""
        return self._post(kind, *self._prepare(report, kind))

    def _prepare(self, report: EventReport, kind: RequestKind) -> Tuple[str, str, Dict[str, str]]:
        url = endpoint_url(kind, self.config.app_id, self.config.is_sandbox)
        body = serialize(report)
        headers = {
            "Content-Type": "application/json",
            "Authorization": sign(body, self.config.dev_key),
            "User-Agent": self._user_agent,
        }
        return url, body, headers

    def _post(self, kind: RequestKind, url: str, body: str, headers: Dict[str, str]) -> DispatchOutcome:
        outcome = DispatchOutcome(kind=kind, url=url)

        try:
            result = self.backend.post(url, body.encode("utf-8"), headers)
        except TransportError as e:
            log.error("Error while sending %s request: %s", kind.name, e)
            outcome.error = e
            return outcome

        outcome.status = result.status
        outcome.body = result.body
        log.info("Request type: %s | Response code: %d", kind.name, result.status)

        if result.status not in SUCCESS_STATUSES:
            outcome.error = self._rejected(kind, result.status, result.body)
            return outcome

        outcome.success = True
        if kind.counts_session:
            try:
                outcome.counter = self.store.increment_counter()
                log.debug("Session counter now %d", outcome.counter)
            except StorageUnavailable as e:
                log.error("Could not persist session counter: %s", e)
                outcome.error = e
        return outcome

    def _rejected(self, kind: RequestKind, status: int, body: str) -> ServerRejected:
        if self.config.is_sandbox:
            error = ServerRejected(status, body, show_body=True)
            log.error("%s request failed: HTTP %d | error detail: %s", kind.name, status, body)
        else:
            error = ServerRejected(status, body, hint=SANDBOX_HINT)
            log.error("%s request failed: HTTP %d", kind.name, status)
            log.info(SANDBOX_HINT)
        return error

    def shutdown(self, wait: bool = True):
        """Stop accepting sends; optionally wait for in-flight requests"""
        self._executor.shutdown(wait=wait)
