"""HTTP request helper for the storefront API.

Every call goes through `ApiClient.request`, which sends JSON, keeps the
session cookie, and turns the API's JSON error envelope into `ApiRequestError`.
There is no retry or backoff; callers surface the error and let the user retry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ApiRequestError(Exception):
    def __init__(self, status: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.code = code
        self.message = message
        self.details = details or {}


class ApiClient:
    def __init__(self, base_url: str = "", session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def request(self, method: str, path: str, json: Any = None, params: Optional[Dict[str, Any]] = None) -> Any:
        params = {k: v for k, v in (params or {}).items() if v not in (None, "")}
        log.debug("%s %s params=%s", method, path, params)
        resp = self.session.request(
            method,
            self.url(path),
            json=json,
            params=params or None,
            timeout=self.timeout,
        )
        if not resp.ok:
            raise _error_from(resp)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)


def _error_from(resp: requests.Response) -> ApiRequestError:
    try:
        body = resp.json()
    except ValueError:
        body = None

    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict):
        return ApiRequestError(resp.status_code, err.get("code", "http_error"), err.get("message", ""), err.get("details"))
    return ApiRequestError(resp.status_code, "http_error", resp.text or resp.reason or "Request failed")
