"""
C2S Events Module

Client-side install/session/in-app event reporting with HMAC-signed requests.
"""

from .client import ReportingClient, get_client
from .config import ClientConfig, configure_logging
from .dispatcher import DispatchOutcome, RequestKind
from .errors import (
    InvalidDateFormat,
    InvalidState,
    ReportingError,
    ServerRejected,
    StorageUnavailable,
    TransportError,
)
from .store import IdentityStore, MemorySettings

__all__ = [
    'ReportingClient',
    'get_client',
    'ClientConfig',
    'configure_logging',
    'DispatchOutcome',
    'RequestKind',
    'IdentityStore',
    'MemorySettings',
    'ReportingError',
    'StorageUnavailable',
    'TransportError',
    'ServerRejected',
    'InvalidDateFormat',
    'InvalidState',
]
