from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..core.constants import LOG_BODY_LIMIT
from ..core.exceptions import NotFoundError, RemoteStoreError, TransportError
from .connection import ApiConnection

logger = logging.getLogger(__name__)


def error_message(response: requests.Response) -> str:
    """Extract the API error message.

    The server answers either `{"error": {"message": "..."}}` or
    `{"error": "..."}`; anything else falls back to the reason phrase.
    """
    fallback = response.reason or f"HTTP {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return fallback
    if not isinstance(data, dict):
        return fallback
    err = data.get("error")
    if isinstance(err, dict):
        return str(err.get("message") or fallback)
    if isinstance(err, str) and err:
        return err
    return fallback


def api_request(
    conn: ApiConnection,
    method: str,
    path: str,
    *,
    params: Optional[dict[str, Any]] = None,
    json: Any = None,
) -> Any:
    url = conn.url_for(path)
    try:
        r = conn.session.request(
            method,
            url,
            params=params,
            json=json,
            timeout=conn.config.timeout,
        )
    except requests.RequestException as e:
        logger.error("API %s %s failed: %s", method, url, e)
        raise TransportError(str(e) or "Request failed") from e

    if r.status_code == 404:
        logger.debug("API %s %s returned 404", method, url)
        raise NotFoundError(error_message(r))
    if not r.ok:
        logger.error("API %s %s failed: %s %s", method, url, r.status_code, (r.text or "")[:LOG_BODY_LIMIT])
        raise RemoteStoreError(error_message(r), status=r.status_code)

    if not r.content:
        return None
    try:
        return r.json()
    except ValueError as e:
        logger.error("API %s %s returned a non-JSON body", method, url)
        raise RemoteStoreError("Invalid JSON response", status=r.status_code) from e


def api_get(conn: ApiConnection, path: str, params: Optional[dict[str, Any]] = None) -> Any:
    return api_request(conn, "GET", path, params=params)


def api_post(conn: ApiConnection, path: str, payload: Any = None) -> Any:
    return api_request(conn, "POST", path, json=payload if payload is not None else {})


def api_patch(conn: ApiConnection, path: str, payload: Any = None) -> Any:
    return api_request(conn, "PATCH", path, json=payload if payload is not None else {})


def as_id(value: Any) -> Optional[str]:
    """Ids arrive as strings or numbers; compare them as strings."""
    return None if value is None or value == "" else str(value)
