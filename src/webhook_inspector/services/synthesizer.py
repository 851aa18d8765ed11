"""Synthetic acknowledgment built from a captured body."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from webhook_inspector.domain.dto import SynthesizedResponse


def _reject_constant(value: str) -> Any:
    # NaN / Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {value}")


def parse_body(body: str | None) -> Any:
    """JSON-decode ``body``; non-JSON text is returned verbatim, ``None`` stays ``None``."""
    if body is None:
        return None
    try:
        parsed = json.loads(body, parse_constant=_reject_constant)
        # must also encode inside the response envelope
        json.dumps({"data": parsed})
    except (ValueError, RecursionError):
        return body
    return parsed


def synthesize_response(body: str | None, *, now: datetime | None = None) -> SynthesizedResponse:
    return SynthesizedResponse(
        data=parse_body(body),
        timestamp=now or datetime.now(timezone.utc),
        processed=True,
    )
