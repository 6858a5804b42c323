"""Operation Descriptor — one immutable description of an API call.

Invariants:
    - Operation is frozen; with_query() returns a new descriptor, never mutates
    - Path parameters are URL-escaped; a missing, empty, "." or ".." one raises UsageError
      before any network attempt
    - List-valued query params become repeated keys (status[]=a&status[]=b), never
      comma-joined
    - None-valued query params are skipped; bools are "true"/"false"; datetimes
      are RFC 3339 UTC; enums are their wire value

Design Decisions:
    - Query kept as an ordered tuple of pairs: preserves caller order and repeated keys,
      and is exactly what httpx accepts as `params`
    - Descriptor carries the mutating flag: the executor decides idempotency from it,
      not from the HTTP method (POST /events/search is a read)
"""

import string
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any
from urllib.parse import quote

from orb_billing.core.codec import format_datetime
from orb_billing.core.errors import UsageError

QueryPairs = tuple[tuple[str, str], ...]

_FORMATTER = string.Formatter()


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return format_datetime(value)
    return str(value)


def encode_query(params: Mapping[str, Any] | Iterable[tuple[str, Any]] | None) -> QueryPairs:
    """Flatten query params into ordered (key, value) string pairs."""
    if not params:
        return ()
    items = params.items() if isinstance(params, Mapping) else params
    pairs: list[tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_value(v)) for v in value if v is not None)
        else:
            pairs.append((key, _query_value(value)))
    return tuple(pairs)


@dataclass(frozen=True)
class Operation:
    """A typed API call before it becomes an HTTP request."""
    method: str
    path: str
    path_params: Mapping[str, str] = field(default_factory=dict)
    query: QueryPairs = ()
    body: Any = None
    mutating: bool = False
    idempotency_key: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "path_params", dict(self.path_params))
        object.__setattr__(self, "query", encode_query(self.query))

    def resolve_path(self) -> str:
        """Substitute path parameters into the template."""
        resolved = []
        for literal, name, _spec, _conv in _FORMATTER.parse(self.path):
            resolved.append(literal)
            if name is None:
                continue
            value = self.path_params.get(name)
            if value is None or str(value) == "":
                raise UsageError(
                    f"Missing path parameter '{name}' for {self.method} {self.path}",
                    field=name,
                )
            if str(value) in (".", ".."):
                # dot segments are collapsed by URL normalisation
                raise UsageError(
                    f"Invalid path parameter '{name}'={value!r} for {self.method} {self.path}",
                    field=name,
                )
            resolved.append(quote(str(value), safe=""))
        return "".join(resolved)

    def with_query(self, *pairs: tuple[str, Any]) -> "Operation":
        """Copy of this operation with extra query pairs appended."""
        return replace(self, query=self.query + encode_query(pairs))

    def describe(self) -> str:
        return f"{self.method} {self.path}"
