"""HTTP transport for the document store REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp
from pydantic_core import to_jsonable_python

from pydocbind._redact import redact_for_log
from pydocbind.config import DocBindConfig
from pydocbind.exceptions import StoreTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :class:`HttpDocumentStore`.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(self, method: str, endpoint: str, payload: Any = None) -> Any:
        ...


def encode_json(payload: Any) -> str:
    """Serialise a document body; ``datetime`` and other rich leaves go through pydantic."""
    return json.dumps(to_jsonable_python(payload), separators=(",", ":"))


class HttpTransport:
    """JSON-over-HTTP transport with bearer authentication."""

    def __init__(self, config: DocBindConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": self._config.user_agent,
        }
        if self._config.api_token:
            headers["authorization"] = f"Bearer {self._config.api_token}"
        return headers

    async def request_json(self, method: str, endpoint: str, payload: Any = None) -> Any:
        """Send *payload* as JSON and return the decoded JSON reply.

        Returns ``None`` for an empty body (e.g. ``204 No Content``).
        Non-2xx replies raise :class:`StoreTransportError` carrying the
        status code so callers can map ``404`` to "missing".
        """
        url = f"{self._config.base_url}{endpoint}"
        body = encode_json(payload) if payload is not None else None

        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled:
            _logger.debug(
                "request %s %s headers=%s body=%s",
                method,
                endpoint,
                redact_for_log(self._headers()),
                redact_for_log(json.loads(body), fields=self._config.redact_fields) if body is not None else None,
            )

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=self._headers(),
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise StoreTransportError(
                        f"HTTP {resp.status} from {method} {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except StoreTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise StoreTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return None

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug(
                "response %s %s status=%s body=%s",
                method,
                endpoint,
                resp.status,
                redact_for_log(result, fields=self._config.redact_fields),
            )
        return result
