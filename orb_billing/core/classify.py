"""Error Classifier — maps a failed response (or transport exception) to retry class.

Invariants:
    - TRANSIENT: 408, 409, 429, 500, 502, 503, 504 — retried under the RetryPolicy
    - TERMINAL: every other non-2xx status (401/403 included) — never retried
    - classify() never raises: an unparseable error body falls back to a generic
      ApiError with the status and raw body text
    - Pure and deterministic: same inputs, same Classification

Design Decisions:
    - 409 is transient: Orb returns it for concurrent modification of the same resource
      and the same idempotency key makes the retry safe
    - Retry-After parsed here (seconds, integer or fractional): the executor only
      consumes retry_after_ms and never looks at headers itself
"""

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from orb_billing.core.errors import ApiError, ErrorContext

TRANSIENT_STATUS_CODES = frozenset({408, 409, 429, 500, 502, 503, 504})


class ErrorClass(str, Enum):
    TRANSIENT = "transient"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class Classification:
    kind: ErrorClass
    error: ApiError

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorClass.TRANSIENT


def is_transient_status(status_code: int) -> bool:
    return status_code in TRANSIENT_STATUS_CODES


def is_transport_retryable(exc: BaseException) -> bool:
    """Connection resets, timeouts and protocol hiccups are retryable; bad URLs are not."""
    if isinstance(exc, httpx.UnsupportedProtocol):
        return False
    return isinstance(exc, httpx.TransportError)


def parse_retry_after(headers: Mapping[str, str] | None) -> int | None:
    """Extract Retry-After header (returns milliseconds)."""
    if not headers:
        return None
    value = headers.get("retry-after") or headers.get("Retry-After")
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None  # HTTP-date form is not used by Orb
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return int(seconds * 1000)


def _body_text(body: bytes | str | None) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", "replace")
    return body


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def classify(
    status_code: int,
    body: bytes | str | None,
    headers: Mapping[str, str] | None = None,
    context: ErrorContext | None = None,
) -> Classification:
    """Build the ApiError for a non-2xx response and decide whether to retry it."""
    transient = is_transient_status(status_code)
    kind = ErrorClass.TRANSIENT if transient else ErrorClass.TERMINAL
    text = _body_text(body)
    retry_after_ms = parse_retry_after(headers)

    payload: Any = None
    if text.strip():
        try:
            payload = json.loads(text)
        except ValueError:
            payload = None

    if isinstance(payload, dict) and isinstance(payload.get("title"), str):
        validation_errors = payload.get("validation_errors")
        if not isinstance(validation_errors, list):
            validation_errors = []
        error = ApiError(
            status_code,
            title=payload["title"],
            detail=_optional_str(payload, "detail"),
            error_type=_optional_str(payload, "type"),
            validation_errors=validation_errors,
            body=text,
            transient=transient,
            retry_after_ms=retry_after_ms,
            context=context,
        )
    else:
        error = ApiError(
            status_code,
            title="decoding failure" if text.strip() else None,
            detail="unable to decode API error response as JSON" if text.strip() else None,
            body=text or None,
            transient=transient,
            retry_after_ms=retry_after_ms,
            context=context,
        )
    return Classification(kind, error)
