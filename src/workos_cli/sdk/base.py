"""WorkOSClient base - connection management and error mapping."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from ..config import DEFAULT_ENDPOINT
from ..exceptions import RemoteRequestError, RemoteTimeoutError
from ..logging import safe_log_value

logger = logging.getLogger(__name__)

USER_AGENT = "workos-cli"


def path_segment(value: str) -> str:
    """Percent-encode a value for use as one URL path segment."""
    return quote(str(value), safe="")


def _error_messages(body: Any) -> list[str]:
    """Flatten the ``errors`` list of an API error body into strings."""
    if not isinstance(body, dict):
        return []
    messages = []
    for item in body.get("errors") or []:
        if isinstance(item, str):
            messages.append(item)
        elif isinstance(item, dict):
            messages.append(str(item.get("message") or item.get("code") or item))
        else:
            messages.append(str(item))
    return messages


def error_from_response(response: httpx.Response, operation: str = "") -> RemoteRequestError:
    """Build a RemoteRequestError from a non-2xx response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    message = ""
    if isinstance(body, dict):
        message = str(body.get("message") or body.get("error_description") or body.get("error") or "")
    if not message:
        message = response.text.strip() or response.reason_phrase

    return RemoteRequestError(
        f"{response.status_code} {message}",
        operation=operation,
        status_code=response.status_code,
        errors=_error_messages(body),
        request_id=response.headers.get("x-request-id", ""),
    )


class WorkOSClientBase:
    """Base class for WorkOSClient with connection management."""

    def __init__(
        self,
        api_key: str,
        endpoint: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Secret API key sent as a bearer token.
            endpoint: API base URL; defaults to https://api.workos.com.
            timeout: Deadline in seconds for each request.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self.endpoint = (endpoint or DEFAULT_ENDPOINT).rstrip("/")
        self.timeout = timeout
        self._http = httpx.Client(
            base_url=self.endpoint,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "User-Agent": USER_AGENT,
                "Content-Type": "application/json",
            },
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (None when empty).

        Raises:
            RemoteTimeoutError: the deadline expired.
            RemoteRequestError: transport failure or non-2xx response.
        """
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "", [])}

        logger.debug(
            "%s %s",
            method,
            path,
            extra={"params": safe_log_value(params), "body": safe_log_value(json)},
        )

        try:
            response = self._http.request(method, path, params=params, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise RemoteTimeoutError(
                f"request timed out after {self.timeout}s",
                operation=operation,
            ) from e
        except httpx.HTTPError as e:
            raise RemoteRequestError(str(e) or type(e).__name__, operation=operation) from e

        logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.is_error:
            raise error_from_response(response, operation)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteRequestError(
                f"invalid JSON response: {safe_log_value(response.text, limit=120)}",
                operation=operation,
                status_code=response.status_code,
            ) from e


__all__ = ["WorkOSClientBase", "error_from_response", "path_segment", "logger"]
