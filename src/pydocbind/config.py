"""Client configuration for pydocbind."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pydocbind._constants import BASE_URL, USER_AGENT
from pydocbind._redact import normalise_keys
from pydocbind.exceptions import DocBindConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class DocBindConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Document store API base URL, without a trailing slash.
    api_token : str or None
        Bearer token sent in the ``Authorization`` header. ``None``
        sends no header.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    user_agent : str
        ``User-Agent`` header value.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG level.
    redact_fields : frozenset[str]
        Document keys masked in those traces on top of the built-in
        credential keys. Stored normalised (lowercase, no ``_``/``-``).
    """

    base_url: str = BASE_URL
    api_token: str | None = None
    request_timeout: float = 30.0
    user_agent: str = USER_AGENT
    api_trace_enabled: bool = False
    redact_fields: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise DocBindConfigError("base_url must be non-empty")
        if self.request_timeout <= 0:
            raise DocBindConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        # Normalise once so endpoint joins never double the slash.
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        object.__setattr__(self, "redact_fields", normalise_keys(self.redact_fields))

    @classmethod
    def from_env(cls, **overrides: Any) -> DocBindConfig:
        """Create configuration from environment variables.

        Reads ``DOCBIND_BASE_URL``, ``DOCBIND_API_TOKEN``,
        ``DOCBIND_REQUEST_TIMEOUT``, ``DOCBIND_USER_AGENT``,
        ``DOCBIND_API_TRACE_ENABLED`` and ``DOCBIND_REDACT_FIELDS``
        (comma-separated). Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        DocBindConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "DOCBIND_BASE_URL": "base_url",
            "DOCBIND_API_TOKEN": "api_token",
            "DOCBIND_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("DOCBIND_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise DocBindConfigError(f"DOCBIND_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("DOCBIND_API_TRACE_ENABLED"),
                False,
            )

        fields_env = env.get("DOCBIND_REDACT_FIELDS")
        if fields_env is not None and "redact_fields" not in overrides:
            config_kwargs["redact_fields"] = frozenset(fields_env.split(","))

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
