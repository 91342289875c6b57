"""
Pytest configuration and shared fixtures
"""
import pytest
import sys
import os
from concurrent.futures import ThreadPoolExecutor

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from c2s_events.backends.http import HTTPResult
from c2s_events.config import ClientConfig
from c2s_events.errors import TransportError
from c2s_events.store import IdentityStore, MemorySettings


class RecordingBackend:
    """Fake transport: records every POST and answers with a fixed status"""

    def __init__(self, status=200, body="", error=None):
        self.status = status
        self.body = body
        self.error = error
        self.requests = []

    def post(self, url, body, headers):
        self.requests.append({"url": url, "body": body, "headers": headers})
        if self.error is not None:
            raise self.error
        return HTTPResult(self.status, self.body)

    @property
    def last(self):
        return self.requests[-1]


@pytest.fixture
def settings():
    """Empty in-memory settings store"""
    return MemorySettings()


@pytest.fixture
def store(settings):
    return IdentityStore(settings)


@pytest.fixture
def config():
    """Production (non-sandbox) client config"""
    return ClientConfig(
        dev_key="test-dev-key",
        app_id="test-app-id",
        app_version="1.0.0",
        device_model="Windows AMD64",
        os_version="Windows 10  (10.0.19045) 64bit",
    )


@pytest.fixture
def sandbox_config(config):
    from dataclasses import replace
    return replace(config, is_sandbox=True)


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def failing_backend():
    return RecordingBackend(error=TransportError("connection error: [Errno 111] Connection refused"))


@pytest.fixture
def executor():
    """Single worker so dispatches complete in submission order"""
    pool = ThreadPoolExecutor(max_workers=1)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def make_client(config, settings, backend, executor):
    """Factory for ReportingClient with in-memory state and recording backend"""
    from c2s_events.client import ReportingClient

    def _make(**overrides):
        kwargs = {
            "config": config,
            "settings": settings,
            "backend": backend,
            "executor": executor,
        }
        kwargs.update(overrides)
        return ReportingClient(**kwargs)
    return _make
