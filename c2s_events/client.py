"""
Reporting Client

Public entry point: start/stop sessions, log in-app events, manage the
customer user id and answer install-age questions.
"""

import logging
import warnings
from concurrent.futures import Future
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import QSettings

from . import host
from .config import ClientConfig, load_config
from .dispatcher import DispatchOutcome, Dispatcher, RequestKind
from .errors import InvalidDateFormat, InvalidState, StorageUnavailable
from .payload import InAppEvent, PayloadBuilder
from .store import IdentityStore

log = logging.getLogger(__name__)

FIRST_OPEN_THRESHOLD = 2
SETTINGS_ORGANIZATION = "C2SEvents"
SETTINGS_APPLICATION = "ReportingClient"


def classify_start(counter: int, skip_first_open: bool = False) -> RequestKind:
    """First-open for the first two confirmed launches, session afterwards"""
    if counter < FIRST_OPEN_THRESHOLD and not skip_first_open:
        return RequestKind.FIRST_OPEN
    return RequestKind.SESSION


def parse_iso_date(value: str) -> datetime:
    """
    Parse an ISO-8601 date/time; naive values are taken as local time

    Raises:
        InvalidDateFormat: value is not an ISO-8601 string
    """
    if not isinstance(value, str):
        raise InvalidDateFormat(f"expected an ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateFormat(f"not an ISO-8601 date: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


class ReportingClient:
    """Install/session/event reporter for one app on one machine"""

    def __init__(
        self,
        config: ClientConfig,
        settings,
        backend=None,
        install_time: Optional[Callable[[], Optional[datetime]]] = None,
        executor=None,
    ):
        """
        Initialize reporting client

        Args:
            config: ClientConfig with credentials and device metadata
            settings: QSettings object (or MemorySettings) for persisted state
            backend: Transport adapter (default: HTTPBackend)
            install_time: Callable returning the install timestamp
                (default: creation time of config.install_path)
            executor: Worker pool for background dispatch
        """
        self.config = config
        self.store = IdentityStore(settings)
        self.builder = PayloadBuilder(config)
        self.dispatcher = Dispatcher(config, self.store, backend=backend, executor=executor)
        self._install_time = install_time or (lambda: host.install_time(config.install_path))

        self.started = False
        self.customer_user_id: Optional[str] = None

        device_id = self.store.get_device_id()
        log.info("Device id: %s...", device_id[:8])

    def _reject(self, message: str):
        log.warning(message)
        warnings.warn(message, InvalidState, stacklevel=3)

    def start(self, skip_first_open: bool = False) -> Optional["Future[DispatchOutcome]"]:
        """
        Start the session and report a first-open or session request

        Args:
            skip_first_open: Report a session even while the counter is below the first-open threshold

        Returns:
            Future for the dispatch, or None if persisted state could not be read
        """
        self.started = True
        try:
            device_id = self.store.get_device_id()
            counter = self.store.get_counter()
        except StorageUnavailable as e:
            log.error("Cannot start session: %s", e)
            return None

        kind = classify_start(counter, skip_first_open)
        log.debug("Starting (counter=%d, skip_first_open=%s) -> %s", counter, skip_first_open, kind.name)
        report = self.builder.build(device_id, customer_user_id=self.customer_user_id)
        return self.dispatcher.send(report, kind)

    def stop(self):
        """Stop the session; in-app events are ignored until the next start()"""
        self.started = False
        log.warning("Reporting client has been stopped.")

    def log_event(
        self,
        event_name: str,
        event_parameters: Optional[Dict[str, Any]],
        event_custom_parameters: Optional[Dict[str, Any]] = None,
    ) -> Optional["Future[DispatchOutcome]"]:
        """
        Report an in-app event

        Args:
            event_name: Event name, e.g. "af_purchase"
            event_parameters: Event values, sent unmodified
            event_custom_parameters: Extra app-defined values, sent unmodified

        Returns:
            Future for the dispatch, or None if the event was not sent
        """
        if not self.started:
            self._reject("Cannot send LogEvent, the reporting client is stopped")
            return None

        try:
            device_id = self.store.get_device_id()
        except StorageUnavailable as e:
            log.error("Cannot send %s: %s", event_name, e)
            return None

        event = InAppEvent(event_name, event_parameters, event_custom_parameters)
        report = self.builder.build(device_id, customer_user_id=self.customer_user_id, event=event)
        return self.dispatcher.send(report, RequestKind.INAPP_EVENT)

    def set_customer_user_id(self, customer_user_id: str) -> bool:
        """
        Set the app-level user id sent with every report

        Only allowed while stopped.

        Returns:
            True if the id was set
        """
        if self.started:
            self._reject("Cannot set CustomerUserID while the reporting client has started.")
            return False
        self.customer_user_id = customer_user_id
        log.info("Customer User ID has been set")
        return True

    def get_client_id(self) -> str:
        """Persisted device id reported to the collector"""
        return self.store.get_device_id()

    def is_install_older_than(self, date: str) -> bool:
        """
        Check whether the app was installed before a date

        Args:
            date: ISO-8601 date/time, e.g. "2023-06-13T10:00:00+00:00"

        Returns:
            True iff the install time is strictly earlier than date

        Raises:
            InvalidDateFormat: date can't be parsed
        """
        check_date = parse_iso_date(date)
        created = self._install_time()
        if created is None:
            log.warning("Install time unavailable, treating install as not older than %s", date)
            return False
        if created.tzinfo is None:
            created = created.astimezone()
        return created < check_date

    def get_user_info(self) -> Dict[str, Any]:
        """Get reporting state for display in settings (for transparency)"""
        return {
            "device_id": self.store.get_device_id(),
            "session_counter": self.store.get_counter(),
            "customer_user_id": self.customer_user_id,
            "started": self.started,
            "sandbox": self.config.is_sandbox,
        }

    def shutdown(self, wait: bool = True):
        """Release the dispatch pool, optionally waiting for in-flight requests"""
        self.dispatcher.shutdown(wait=wait)


def get_client(app_version: str, settings=None, backend=None,
               module_name: str = "reporting_config") -> Optional[ReportingClient]:
    """
    Create a ReportingClient from reporting_config.py

    Args:
        app_version: Current app version
        settings: QSettings for persisted state (default: per-user native store)
        backend: Transport adapter (default: HTTPBackend)
        module_name: Config module to read

    Returns:
        ReportingClient, or None if reporting is not configured
    """
    config = load_config(app_version, module_name)
    if config is None:
        return None
    if not config.is_configured():
        log.warning("DEV_KEY or APP_ID missing in %s.py - reporting disabled", module_name)
        return None

    if settings is None:
        settings = QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)
    log.debug("Creating reporting client: %r", config)
    return ReportingClient(config, settings, backend=backend)
