import json
import requests
import time
from eliot import start_action
from msc.config import REQUEST_RETRIES, REQUEST_TIMEOUT, base_url
from msc.errors import ConnectFailed, DeviceUnreachable, QueryTypeMismatch, RequestTimeout, TransportError
from msc.logging import log_device_request, transport_logger
from typing import Any
from urllib3.util import SKIP_HEADER

METHODS = ("GET", "PUT", "POST", "HEAD")


class DeviceTransport:
    """HTTP transport for the device control surface.

    One instance per invocation. Every request targets ``base/path`` where
    ``path`` carries the resource and an optional query string, e.g.
    ``levels?volume=40``.
    """

    def __init__(
        self,
        base: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
        retries: int = REQUEST_RETRIES,
        session: requests.Session | None = None,
    ):
        """Initialize the transport.

        Args:
            base: Device base URL (default: built from MUSO_HOST/MUSO_PORT)
            timeout: Per-attempt timeout in seconds
            retries: Extra attempts after a connect failure or timeout
            session: Optional pre-built session (tests)
        """
        self.base = (base or base_url()).rstrip("/")
        self.timeout = timeout
        self.retries = retries
        self.session = session or requests.Session()
        # Send no User-Agent header
        self.session.headers["User-Agent"] = SKIP_HEADER

    def request(self, path: str, method: str = "GET") -> bytes:
        """Send one request to the device and return the response body.

        Args:
            path: Resource path relative to the base URL
            method: One of GET, PUT, POST, HEAD

        Returns:
            Response body bytes (empty for HEAD)

        Raises:
            ConnectFailed: Network failure
            DeviceUnreachable: HTTP error status or connection reset
            RequestTimeout: No response within the timeout
            TransportError: Any other requests failure
        """
        method = method.upper()
        if method not in METHODS:
            raise TransportError(method)

        url = f"{self.base}/{path.lstrip('/')}"

        with start_action(transport_logger, "device_request", method=method, path=path):
            last_error = None
            for attempt in range(self.retries + 1):
                log_device_request(method, path, attempt=attempt)
                try:
                    response = self.session.request(method, url, timeout=self.timeout)
                    response.raise_for_status()
                    return response.content
                except requests.exceptions.HTTPError as e:
                    # HTTP status errors are not retried
                    raise DeviceUnreachable() from e
                except requests.exceptions.Timeout as e:
                    last_error = RequestTimeout()
                    last_error.__cause__ = e
                except requests.exceptions.ConnectionError as e:
                    last_error = _connection_error(e)
                    last_error.__cause__ = e
                except requests.exceptions.RequestException as e:
                    raise TransportError(type(e).__name__) from e

                if attempt < self.retries:
                    time.sleep(0.1)

            raise last_error

    def fetch_json(self, path: str) -> Any:
        """GET a resource and decode its JSON body."""
        body = self.request(path)
        try:
            return json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise QueryTypeMismatch(path) from e

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _connection_error(error: requests.exceptions.ConnectionError):
    """Split connection failures into unreachable network vs. a refusing device."""
    reason = error.args[0] if error.args else None
    text = str(reason if reason is not None else error)
    if "Connection reset" in text or "RemoteDisconnected" in text or "Connection aborted" in text:
        return DeviceUnreachable()
    return ConnectFailed()
