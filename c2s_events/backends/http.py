"""
HTTP Backend Adapter

POSTs signed request bodies to the collector over HTTPS.
Returns every HTTP status to the caller; only connection-level failures raise.
"""

import http.client
import logging
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Dict, Optional

import certifi

from ..errors import TransportError

log = logging.getLogger(__name__)

SSL_CONTEXT = ssl.create_default_context(cafile=certifi.where())


@dataclass(frozen=True)
class HTTPResult:
    """Status code and decoded body of a collector response"""

    status: int
    body: str = ""


class HTTPBackend:
    """urllib transport for collector requests"""

    def __init__(self, timeout: float = 15.0, ssl_context: Optional[ssl.SSLContext] = None):
        """
        Initialize HTTP backend

        Args:
            timeout: Socket timeout in seconds for one request
            ssl_context: TLS context (default: certifi CA bundle)
        """
        self.timeout = timeout
        self.ssl_context = ssl_context or SSL_CONTEXT

    def post(self, url: str, body: bytes, headers: Dict[str, str]) -> HTTPResult:
        """
        Send one POST request

        Args:
            url: Collector endpoint
            body: Request body, already encoded
            headers: Request headers

        Returns:
            HTTPResult for any HTTP response, including error statuses

        Raises:
            TransportError: DNS, connection, TLS or timeout failure
        """
        req = urllib.request.Request(url, data=body, headers=headers, method='POST')
        log.debug("POST %s (%d bytes)", url, len(body))

        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=self.ssl_context) as response:
                return HTTPResult(response.status, _read_text(response))
        except urllib.error.HTTPError as e:
            # Non-2xx: still a response from the collector
            return HTTPResult(e.code, _read_text(e))
        except urllib.error.URLError as e:
            raise TransportError(f"connection error: {e.reason}") from e
        except (TimeoutError, ConnectionError, http.client.HTTPException) as e:
            raise TransportError(f"connection error: {e}") from e


def _read_text(response) -> str:
    try:
        return response.read().decode('utf-8', errors='replace')
    except OSError:
        return ""
