"""Helper utilities for API handlers."""
from __future__ import annotations

import json
from typing import Any, Mapping

from aiohttp import web


def json_error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


# ids are PostgreSQL bigint columns
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1


def _invalid(label: str) -> web.HTTPBadRequest:
    return web.HTTPBadRequest(
        text=json.dumps({"error": f"Invalid {label}"}),
        content_type="application/json",
    )


def parse_int(value: str | None, label: str) -> int | None:
    """Parse a bigint path/query value; ``None`` passes through."""
    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except ValueError as exc:
        raise _invalid(label) from exc
    if not BIGINT_MIN <= parsed <= BIGINT_MAX:
        raise _invalid(label)
    return parsed


def collect_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Flatten request headers into a plain dict with lower-cased names.

    Repeated headers are joined with ``", "``.
    """
    collected: dict[str, str] = {}
    for name, value in headers.items():
        key = name.lower()
        collected[key] = f"{collected[key]}, {value}" if key in collected else value
    return collected


def dump_models(items: list[Any]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]
