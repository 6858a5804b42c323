"""Wire Codec — JSON encoding of request bodies and schema-driven response decoding.

Invariants:
    - decode() never rounds money: JSON floats parse as Decimal before validation
    - Unknown response fields are ignored; absent or null optional fields decode to None
    - Every decode failure surfaces as DecodeError (never ValidationError/JSONDecodeError)
    - A body encode() cannot serialize is a UsageError (never a raw TypeError)
    - encode() omits fields the caller never set and drops None, except fields a model
      lists in __nullable_fields__ (explicit None means "clear this value" there)
    - Datetimes are written as RFC 3339 in UTC; naive datetimes are taken as UTC
    - Decimals are written as JSON numbers only when the number round-trips exactly;
      otherwise as decimal strings

Design Decisions:
    - pydantic TypeAdapter over hand-written parsers: one path for models, lists, unions
    - Manual model walk instead of model_dump(exclude_none): exclude_none would also
      drop the explicit nulls that clear a value
"""

import json
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from orb_billing.core.errors import DecodeError, UsageError

T = TypeVar("T")

_ADAPTERS: dict[Any, TypeAdapter] = {}


def type_name(response_type: Any) -> str:
    if isinstance(response_type, str):
        return response_type
    return getattr(response_type, "__name__", None) or repr(response_type)


def _adapter_for(response_type: Any) -> TypeAdapter:
    try:
        return _ADAPTERS[response_type]
    except KeyError:
        adapter = _ADAPTERS[response_type] = TypeAdapter(response_type)
        return adapter
    except TypeError:
        # unhashable annotation (e.g. Annotated with FieldInfo metadata)
        return TypeAdapter(response_type)


def parse_json(body: bytes | str, response_type: Any = None) -> Any:
    """Parse JSON text with Decimal floats; raise DecodeError on malformed input."""
    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
        return json.loads(text, parse_float=Decimal)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        preview = body.decode("utf-8", "replace") if isinstance(body, bytes) else body
        raise DecodeError(f"invalid JSON ({e})", type_name(response_type), preview)


def decode(response_type: type[T] | Any, body: bytes | str) -> T:
    """Decode a response body into response_type.

    response_type=None accepts an empty body or any JSON document and returns None.
    """
    if response_type is None:
        if body and body.strip():
            parse_json(body, "empty response")
        return None
    return validate(response_type, parse_json(body, response_type), body)


def validate(response_type: type[T] | Any, data: Any, body: bytes | str | None = None) -> T:
    """Validate already-parsed JSON data into response_type."""
    try:
        return _adapter_for(response_type).validate_python(data)
    except ValidationError as e:
        text = body.decode("utf-8", "replace") if isinstance(body, bytes) else body
        raise DecodeError(
            f"{e.error_count()} validation error(s): {_summarize(e)}",
            type_name(response_type),
            text,
        )


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors()[:3]:
        loc = ".".join(str(p) for p in item["loc"]) or "<root>"
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


# ─── Encoding ────────────────────────────────────────────────────

def format_datetime(value: datetime) -> str:
    """RFC 3339 in UTC — Orb requires supplied datetimes be in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _decimal_to_wire(value: Decimal) -> int | float | str:
    """JSON number when exactly representable, decimal string otherwise."""
    if not value.is_finite():
        return str(value)
    if value == value.to_integral_value():
        return int(value)
    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return str(value)


def to_wire(value: Any) -> Any:
    """Convert a request value into JSON-compatible primitives."""
    if isinstance(value, BaseModel):
        return _model_to_wire(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return _decimal_to_wire(value)
    if isinstance(value, Mapping):
        return {str(k): to_wire(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    return value


def _model_to_wire(model: BaseModel) -> dict[str, Any]:
    nullable = getattr(model, "__nullable_fields__", frozenset())
    always = getattr(model, "__always_sent__", frozenset())
    fields_set = model.model_fields_set
    out: dict[str, Any] = {}
    for name, info in type(model).model_fields.items():
        if info.exclude:
            continue
        if name not in fields_set and name not in always:
            continue
        key = info.serialization_alias or info.alias or name
        value = getattr(model, name)
        if value is None:
            if name in nullable:
                out[key] = None
            continue
        out[key] = to_wire(value)
    return out


def encode(value: Any) -> bytes:
    """Serialize a request body to compact UTF-8 JSON; UsageError if it cannot be."""
    try:
        text = json.dumps(to_wire(value), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise UsageError(f"Request body is not JSON-serializable: {e}") from e
    return text.encode("utf-8")
