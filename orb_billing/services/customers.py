"""Customer Service — customers, credit balances, the credit ledger and cost queries.

Invariants:
    - Listing drops customers returned in the deleted shape
    - Create, update, delete and ledger writes are mutating: one Idempotency-Key per call
    - Costs endpoints return {"data": [...]}; the list itself is returned
"""

# `list` is a method name below; postpone annotation evaluation
from __future__ import annotations

from orb_billing.core.domain_types import CustomerId, ExternalCustomerId
from orb_billing.core.operation import Operation
from orb_billing.infrastructure.pager import Pager
from orb_billing.schemas.common import DataList, Deleted
from orb_billing.schemas.costs import CostBucket, CostParams
from orb_billing.schemas.credits import CreditBlock, LedgerEntry, LedgerEntryRequest
from orb_billing.schemas.customers import CreateCustomerRequest, Customer, UpdateCustomerRequest
from orb_billing.services.resource import Resource, drop_deleted_customer

CUSTOMER_PATH = "customers/{customer_id}"
EXTERNAL_CUSTOMER_PATH = "customers/external_customer_id/{external_customer_id}"


class CustomerService(Resource):

    def list(self, page_size: int | None = None) -> Pager[Customer]:
        """All customers, newest first; deleted customers are skipped."""
        return self._pager(
            Operation("GET", "customers"), Customer | Deleted,
            page_size, transform=drop_deleted_customer,
        )

    async def create(self, request: CreateCustomerRequest, idempotency_key: str | None = None) -> Customer:
        return await self._call(
            Operation("POST", "customers", body=request, mutating=True, idempotency_key=idempotency_key),
            Customer,
        )

    async def get(self, customer_id: CustomerId) -> Customer:
        return await self._call(
            Operation("GET", CUSTOMER_PATH, {"customer_id": customer_id}), Customer,
        )

    async def get_by_external_id(self, external_customer_id: ExternalCustomerId) -> Customer:
        return await self._call(
            Operation("GET", EXTERNAL_CUSTOMER_PATH, {"external_customer_id": external_customer_id}),
            Customer,
        )

    async def update(
        self, customer_id: CustomerId, request: UpdateCustomerRequest, idempotency_key: str | None = None,
    ) -> Customer:
        return await self._call(
            Operation(
                "PUT", CUSTOMER_PATH, {"customer_id": customer_id},
                body=request, mutating=True, idempotency_key=idempotency_key,
            ),
            Customer,
        )

    async def update_by_external_id(
        self, external_customer_id: ExternalCustomerId, request: UpdateCustomerRequest,
        idempotency_key: str | None = None,
    ) -> Customer:
        return await self._call(
            Operation(
                "PUT", EXTERNAL_CUSTOMER_PATH, {"external_customer_id": external_customer_id},
                body=request, mutating=True, idempotency_key=idempotency_key,
            ),
            Customer,
        )

    async def delete(self, customer_id: CustomerId, idempotency_key: str | None = None) -> None:
        await self._call(
            Operation(
                "DELETE", CUSTOMER_PATH, {"customer_id": customer_id},
                mutating=True, idempotency_key=idempotency_key,
            ),
            None,
        )

    # ─── Credits ─────────────────────────────────────────────────

    def credit_balance(self, customer_id: CustomerId, page_size: int | None = None) -> Pager[CreditBlock]:
        """Unexpired, non-zero credit blocks of a customer."""
        return self._pager(
            Operation("GET", CUSTOMER_PATH + "/credits", {"customer_id": customer_id}),
            CreditBlock, page_size,
        )

    def credit_balance_by_external_id(
        self, external_customer_id: ExternalCustomerId, page_size: int | None = None,
    ) -> Pager[CreditBlock]:
        return self._pager(
            Operation(
                "GET", EXTERNAL_CUSTOMER_PATH + "/credits",
                {"external_customer_id": external_customer_id},
            ),
            CreditBlock, page_size,
        )

    async def create_ledger_entry(
        self, customer_id: CustomerId, request: LedgerEntryRequest, idempotency_key: str | None = None,
    ) -> LedgerEntry:
        return await self._call(
            Operation(
                "POST", CUSTOMER_PATH + "/credits/ledger_entry", {"customer_id": customer_id},
                body=request, mutating=True, idempotency_key=idempotency_key,
            ),
            LedgerEntry,
        )

    def list_ledger_entries(self, customer_id: CustomerId, page_size: int | None = None) -> Pager[LedgerEntry]:
        return self._pager(
            Operation("GET", CUSTOMER_PATH + "/credits/ledger", {"customer_id": customer_id}),
            LedgerEntry, page_size,
        )

    # ─── Costs ───────────────────────────────────────────────────

    async def costs(self, customer_id: CustomerId, params: CostParams | None = None) -> list[CostBucket]:
        """Day-by-day cost buckets of a customer."""
        params = params or CostParams()
        result = await self._call(
            Operation("GET", CUSTOMER_PATH + "/costs", {"customer_id": customer_id}, params.to_query()),
            DataList[CostBucket],
        )
        return result.data

    async def costs_by_external_id(
        self, external_customer_id: ExternalCustomerId, params: CostParams | None = None,
    ) -> list[CostBucket]:
        params = params or CostParams()
        result = await self._call(
            Operation(
                "GET", EXTERNAL_CUSTOMER_PATH + "/costs",
                {"external_customer_id": external_customer_id}, params.to_query(),
            ),
            DataList[CostBucket],
        )
        return result.data
