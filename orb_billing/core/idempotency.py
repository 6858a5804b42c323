"""Idempotency Manager — one key per logical mutating call.

Invariants:
    - A caller-supplied key is used verbatim (non-empty, else UsageError)
    - Otherwise a fresh uuid4 hex is generated once, before the retry loop starts,
      so every attempt of the call carries the same key
    - Read-only operations never get a key

Design Decisions:
    - Stateless: no registry of issued keys, so the client stays shareable across tasks
    - Key factory injectable: tests pin keys without patching uuid
"""

import uuid
from collections.abc import Callable

from orb_billing.core.errors import UsageError
from orb_billing.core.operation import Operation

IDEMPOTENCY_HEADER = "Idempotency-Key"


def _generate() -> str:
    return uuid.uuid4().hex


class IdempotencyManager:
    """Decides the Idempotency-Key for an operation."""

    def __init__(self, factory: Callable[[], str] = _generate):
        self._factory = factory

    def key_for(self, explicit_key: str | None = None) -> str:
        if explicit_key is not None:
            if not explicit_key.strip():
                raise UsageError("idempotency_key must not be empty", field="idempotency_key")
            return explicit_key
        return self._factory()

    def headers_for(self, operation: Operation) -> dict[str, str]:
        """Headers for one logical call — empty for read-only operations."""
        if not operation.mutating:
            return {}
        return {IDEMPOTENCY_HEADER: self.key_for(operation.idempotency_key)}
