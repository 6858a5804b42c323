"""Invoice Service — listing, lookup, upcoming-invoice preview and voiding.

Invariants:
    - The status filter is sent as repeated status[] pairs; default issued, paid, synced
    - void is mutating (Idempotency-Key attached); everything else is a read
"""

from orb_billing.core.domain_types import InvoiceId, SubscriptionId
from orb_billing.core.operation import Operation
from orb_billing.infrastructure.pager import Pager
from orb_billing.schemas.invoices import Invoice, InvoiceListParams, UpcomingInvoice
from orb_billing.services.resource import Resource

INVOICE_PATH = "invoices/{invoice_id}"


class InvoiceService(Resource):

    def list(self, params: InvoiceListParams | None = None) -> Pager[Invoice]:
        params = params or InvoiceListParams()
        return self._pager(
            Operation("GET", "invoices", query=params.to_query()), Invoice, params.page_size,
        )

    async def get(self, invoice_id: InvoiceId) -> Invoice:
        return await self._call(Operation("GET", INVOICE_PATH, {"invoice_id": invoice_id}), Invoice)

    async def upcoming(self, subscription_id: SubscriptionId) -> UpcomingInvoice:
        """Preview the next invoice of a subscription."""
        return await self._call(
            Operation("GET", "invoices/upcoming", query={"subscription_id": subscription_id}),
            UpcomingInvoice,
        )

    async def void(self, invoice_id: InvoiceId, idempotency_key: str | None = None) -> Invoice:
        """Void an issued invoice; returns the invoice with status void."""
        return await self._call(
            Operation(
                "POST", INVOICE_PATH + "/void", {"invoice_id": invoice_id},
                mutating=True, idempotency_key=idempotency_key,
            ),
            Invoice,
        )
