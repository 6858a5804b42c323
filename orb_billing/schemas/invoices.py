"""Invoice Schemas.

Invariants:
    - invoice_pdf / hosted_invoice_url are None when absent or null — never ""
    - total and amount_due are Decimal
    - currency is "credits" or an upper-cased ISO 4217 code
    - InvoiceListParams defaults to statuses issued, paid, synced (draft and void
      only when asked for)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import field_validator, model_validator

from orb_billing.core.domain_types import InvoiceStatus
from orb_billing.schemas.common import ListParams, OpenEnum, OrbModel

CREDITS_CURRENCY = "credits"

DEFAULT_INVOICE_STATUSES = (InvoiceStatus.ISSUED, InvoiceStatus.PAID, InvoiceStatus.SYNCED)


class InvoiceCustomer(OrbModel):
    id: str
    external_customer_id: str | None = None


class InvoiceSubscription(OrbModel):
    id: str


class Invoice(OrbModel):
    """An Orb invoice."""
    id: str
    customer: InvoiceCustomer
    subscription: InvoiceSubscription | None = None
    invoice_date: datetime
    due_date: datetime | None = None
    invoice_pdf: str | None = None
    hosted_invoice_url: str | None = None
    total: Decimal
    amount_due: Decimal | None = None
    created_at: datetime
    status: OpenEnum[InvoiceStatus]
    currency: str
    invoice_number: str | None = None
    memo: str | None = None

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        if v == CREDITS_CURRENCY:
            return v
        if len(v) != 3:
            raise ValueError('either "credits", or a three-character currency code')
        return v.upper()


class UpcomingInvoice(OrbModel):
    """Preview of the next invoice of a subscription (no id until issued)."""
    customer: InvoiceCustomer
    subscription: InvoiceSubscription | None = None
    target_date: datetime
    total: Decimal
    amount_due: Decimal | None = None
    currency: str
    invoice_pdf: str | None = None
    hosted_invoice_url: str | None = None


class InvoiceListParams(ListParams):
    """Filters for listing invoices.

    Set at most one of customer_id / external_customer_id.
    """
    customer_id: str | None = None
    external_customer_id: str | None = None
    subscription_id: str | None = None
    statuses: tuple[InvoiceStatus, ...] = DEFAULT_INVOICE_STATUSES

    @model_validator(mode="after")
    def check_single_customer_filter(self):
        if self.customer_id and self.external_customer_id:
            raise ValueError("set customer_id or external_customer_id, not both")
        return self

    def to_query(self) -> list[tuple[str, object]]:
        return [
            ("customer_id", self.customer_id),
            ("external_customer_id", self.external_customer_id),
            ("subscription_id", self.subscription_id),
            ("status[]", list(self.statuses)),
        ]
