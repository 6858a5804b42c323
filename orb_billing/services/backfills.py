"""Backfill Service — event backfill windows.

Invariants:
    - create, close and revert are mutating; list and get are reads
"""

from orb_billing.core.domain_types import BackfillId
from orb_billing.core.operation import Operation
from orb_billing.infrastructure.pager import Pager
from orb_billing.schemas.backfills import Backfill, CreateBackfillRequest
from orb_billing.services.resource import Resource

BACKFILL_PATH = "events/backfills/{backfill_id}"


class BackfillService(Resource):

    async def create(self, request: CreateBackfillRequest, idempotency_key: str | None = None) -> Backfill:
        return await self._call(
            Operation("POST", "events/backfills", body=request, mutating=True, idempotency_key=idempotency_key),
            Backfill,
        )

    async def close(self, backfill_id: BackfillId, idempotency_key: str | None = None) -> Backfill:
        """Close a backfill: its events become reflected in usage."""
        return await self._transition(backfill_id, "close", idempotency_key)

    async def revert(self, backfill_id: BackfillId, idempotency_key: str | None = None) -> Backfill:
        return await self._transition(backfill_id, "revert", idempotency_key)

    def list(self, page_size: int | None = None) -> Pager[Backfill]:
        return self._pager(Operation("GET", "events/backfills"), Backfill, page_size)

    async def get(self, backfill_id: BackfillId) -> Backfill:
        return await self._call(
            Operation("GET", BACKFILL_PATH, {"backfill_id": backfill_id}), Backfill,
        )

    async def _transition(self, backfill_id: BackfillId, action: str, idempotency_key: str | None) -> Backfill:
        return await self._call(
            Operation(
                "POST", f"{BACKFILL_PATH}/{action}", {"backfill_id": backfill_id},
                mutating=True, idempotency_key=idempotency_key,
            ),
            Backfill,
        )
