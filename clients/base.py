from typing import Any, Dict, Optional

import requests

from journal_config import JOURNAL_API_TIMEOUT
from logging_config import get_logger

logger = get_logger(__name__)


class JournalAPIError(Exception):
    """Raised when a Journal API request fails for any reason."""

    def __init__(self, message: str, status_code: Optional[int] = None, path: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class JSONHTTPClient:
    """Low-level HTTP client for a JSON API under a fixed base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = JOURNAL_API_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = self.base_url + path
        try:
            resp = self.session.request(method, url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise JournalAPIError(f"{method} {path} returned {status}", status, path) from e
        except requests.RequestException as e:
            raise JournalAPIError(f"{method} {path} failed: {e}", None, path) from e

        logger.debug("%s %s -> %s", method, path, resp.status_code)

        # DELETE and some POSTs answer with an empty body
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise JournalAPIError(f"{method} {path} returned a non-JSON body", resp.status_code, path) from e

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, payload: Dict[str, Any]) -> Any:
        return self.request("POST", path, payload)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
