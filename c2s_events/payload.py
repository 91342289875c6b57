"""
Event Payloads

Builds the JSON body sent to the collector for first-open, session and in-app requests.
"""

import json
import re
import time
import uuid
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, List, Optional

MAX_OS_VERSION_LENGTH = 23
DEVICE_ID_TYPE = "custom"

_OS_VERSION_DISALLOWED = re.compile(r"[^0-9.+-]")


def sanitize_os_version(raw: str) -> str:
    """
    Reduce a host OS string to the collector's version token

    "Windows 10 (Build 19045)" -> "10-19045"
    """
    value = raw.replace(" (", "").replace("(", "").replace(")", "")
    value = value.replace("%20", "-").replace(" ", "-")
    value = _OS_VERSION_DISALLOWED.sub("", value)
    if value.startswith("-"):
        value = value[1:]
    return value[:MAX_OS_VERSION_LENGTH]


@dataclass(frozen=True)
class InAppEvent:
    """Named in-app event with opaque parameter maps"""

    name: str
    parameters: Optional[Dict[str, Any]] = None
    custom_parameters: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class EventReport:
    """One request body; field order matches the wire order"""

    timestamp: int
    device_os_version: str
    device_model: str
    app_version: str
    device_ids: List[Dict[str, str]]
    request_id: str
    limit_ad_tracking: bool = False
    customer_user_id: Optional[str] = None
    event_name: Optional[str] = None
    event_parameters: Optional[Dict[str, Any]] = None
    event_custom_parameters: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation; fields without a value are left out"""
        values = ((f.name, getattr(self, f.name)) for f in fields(self))
        return {name: value for name, value in values if value is not None}


def serialize(report: EventReport) -> str:
    """Compact JSON for a report. Sign and send this exact string."""
    return json.dumps(report.to_dict(), separators=(",", ":"), ensure_ascii=False)


class PayloadBuilder:
    """Stamps identity, device metadata and event data into EventReports"""

    def __init__(self, config, clock: Callable[[], float] = time.time):
        """
        Initialize payload builder

        Args:
            config: ClientConfig supplying app version and device metadata
            clock: Wall-clock source in epoch seconds
        """
        self.config = config
        self.clock = clock
        self.os_version = sanitize_os_version(config.os_version)

    def build(
        self,
        device_id: str,
        customer_user_id: Optional[str] = None,
        event: Optional[InAppEvent] = None,
    ) -> EventReport:
        """
        Create a fresh report

        Args:
            device_id: Persisted client id, sent as the single "custom" device id
            customer_user_id: Optional app-level user id
            event: In-app event data (None for first-open/session requests)

        Returns:
            New EventReport with current timestamp and request id
        """
        return EventReport(
            timestamp=int(self.clock() * 1000),
            device_os_version=self.os_version,
            device_model=self.config.device_model,
            app_version=self.config.app_version,
            device_ids=[{"type": DEVICE_ID_TYPE, "value": device_id}],
            request_id=str(uuid.uuid4()),
            customer_user_id=customer_user_id,
            event_name=event.name if event else None,
            event_parameters=_copy(event.parameters) if event else None,
            event_custom_parameters=_copy(event.custom_parameters) if event else None,
        )


def _copy(mapping: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return dict(mapping) if mapping is not None else None
