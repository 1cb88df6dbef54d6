"""
Backend Client - Generic JSON collaborator for the institute's REST API.
"""
from typing import Any, Optional

import requests
import structlog

from ..errors import BackendError

logger = structlog.get_logger(__name__)


class BackendClient:
    """Thin wrapper over a requests session that raises BackendError on failure."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        """Send a JSON request and return the decoded body (None when empty)."""
        url = self._url(path)
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("backend_unreachable", method=method, path=path, error=str(e))
            raise BackendError(f"Could not reach backend: {e}") from e

        if not response.ok:
            message = response.reason or "Request failed"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get('message'):
                    message = body['message']
            except ValueError:
                pass
            logger.warning("backend_error", method=method, path=path, status=response.status_code, message=message)
            raise BackendError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    def get(self, path: str) -> Any:
        return self.request('GET', path)

    def post(self, path: str, payload: dict) -> Any:
        return self.request('POST', path, payload)

    def patch(self, path: str, payload: dict) -> Any:
        return self.request('PATCH', path, payload)
