"""Redaction of request and document payloads for DEBUG traces.

Documents routinely carry personal data and the transport carries bearer
tokens. Credential-like keys are always masked; callers add their own
document field names (``DocBindConfig.redact_fields``) on top. Keys match
case-insensitively and ignore ``_`` and ``-``, so ``api_token``,
``apiToken`` and ``API-TOKEN`` are the same key.
"""

from __future__ import annotations

import datetime as dt
import enum
from collections.abc import Iterable, Mapping
from typing import Any

REDACTED = "<redacted>"
MAX_DEPTH = 20

CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "secret",
        "token",
        "apitoken",
        "accesstoken",
        "refreshtoken",
        "apikey",
        "authorization",
        "cookie",
        "setcookie",
    }
)


def normalise_key(key: object) -> str:
    return str(key).strip().lower().replace("_", "").replace("-", "")


def normalise_keys(keys: Iterable[str]) -> frozenset[str]:
    return frozenset(normalise_key(key) for key in keys if key.strip())


def _leaf(value: Any, max_string: int) -> Any:
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    return repr(value)


def redact_for_log(
    value: Any,
    *,
    fields: frozenset[str] = frozenset(),
    max_string: int = 512,
) -> Any:
    """Return a copy of *value* that is safe to put in a DEBUG log.

    Parameters
    ----------
    value
        A decoded JSON body, header dict or document.
    fields : frozenset[str]
        Extra document keys to mask, already passed through
        :func:`normalise_keys`.
    max_string : int
        Longer strings are cut and marked ``<truncated>``.
    """
    masked = CREDENTIAL_KEYS | fields

    def walk(node: Any, depth: int) -> Any:
        if depth > MAX_DEPTH:
            return "<max-depth>"
        if node is None or isinstance(node, (bool, int, float)):
            return node
        if isinstance(node, Mapping):
            return {
                str(key): REDACTED if normalise_key(key) in masked else walk(item, depth + 1)
                for key, item in node.items()
            }
        if isinstance(node, (list, tuple, set, frozenset)):
            return [walk(item, depth + 1) for item in node]
        return _leaf(node, max_string)

    return walk(value, 0)
