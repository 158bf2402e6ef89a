#!/usr/bin/env python3
"""Fetch a document, apply ``path=value`` edits and write it back.

Usage
-----
Point the client at a store and run::

    export DOCBIND_BASE_URL="https://docs.example.com"
    export DOCBIND_API_TOKEN="..."
    python scripts/edit_document.py users/u1 profile.name='"Ada"' tags.0='"math"'

Values are parsed as JSON; anything that is not valid JSON is taken as a
plain string. Without edits the document is printed and nothing is
written.

Options::

    --dry-run            Print the edited document without saving
    --strict             Refuse to overwrite nodes of the wrong kind
    --verbose            Enable DEBUG logging (with redacted request traces)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydocbind import (  # noqa: E402
    DocBindClient,
    DocBindConfig,
    DocBindError,
    DocumentRef,
    MismatchPolicy,
)


def _parse_ref(text: str) -> DocumentRef:
    collection, sep, doc_id = text.partition("/")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected COLLECTION/ID, got {text!r}")
    return DocumentRef(collection=collection, id=doc_id)


def _parse_edit(text: str) -> tuple[str, Any]:
    path, sep, raw = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected PATH=VALUE, got {text!r}")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return path, value


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a document in place through pydocbind")
    parser.add_argument("ref", type=_parse_ref, help="COLLECTION/ID")
    parser.add_argument("edits", nargs="*", type=_parse_edit, help="PATH=VALUE (JSON)")
    parser.add_argument("--dry-run", action="store_true", help="Do not save")
    parser.add_argument("--strict", action="store_true", help="Use the strict mismatch policy")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    config = DocBindConfig.from_env(api_trace_enabled=args.verbose)
    policy = MismatchPolicy.STRICT if args.strict else MismatchPolicy.REPLACE

    async with DocBindClient(config) as client:
        form = client.form(args.ref, policy=policy)
        state = await form.wait()
        if state.value is None and not args.edits:
            print(f"{args.ref} not found (or fetch failed)", file=sys.stderr)
            return 1

        try:
            for path, value in args.edits:
                form.update(path, value)
        except DocBindError as exc:
            print(f"edit rejected: {exc}", file=sys.stderr)
            return 2

        print(json.dumps(form.state.value, indent=2, default=str))
        if args.edits and not args.dry_run:
            await form.save()
    return 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
