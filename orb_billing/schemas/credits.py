"""Credit Schemas — credit blocks and the customer credit ledger.

Invariants:
    - Every balance/amount is Decimal
    - LedgerEntry is one open model for all entry types: entry types added upstream
      decode instead of failing a discriminated union
    - Ledger entry requests always send their entry_type discriminator
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Literal

from orb_billing.core.domain_types import CreditBlockId, EntryStatus, EntryType, VoidReason
from orb_billing.schemas.common import OpenEnum, OrbModel, RequestModel


class CreditBlock(OrbModel):
    """A block of credit held by a customer."""
    id: str
    balance: Decimal
    expiry_date: datetime | None = None
    per_unit_cost_basis: Decimal | None = None


class CustomerIdentifier(OrbModel):
    id: str
    external_customer_id: str | None = None


class LedgerEntryCreditBlock(OrbModel):
    id: str
    expiry_date: datetime | None = None
    per_unit_cost_basis: Decimal | None = None


class LedgerEntry(OrbModel):
    """A credit ledger entry; type-specific fields are None when not applicable."""
    id: str
    entry_type: OpenEnum[EntryType]
    ledger_sequence_number: int
    entry_status: OpenEnum[EntryStatus]
    customer: CustomerIdentifier
    starting_balance: Decimal
    ending_balance: Decimal
    amount: Decimal
    created_at: datetime
    description: str | None = None
    credit_block: LedgerEntryCreditBlock
    # void / void_initiated
    void_reason: str | None = None
    void_amount: Decimal | None = None
    new_block_expiry_date: datetime | None = None


# ─── Requests ────────────────────────────────────────────────────

class CreditInvoiceSettings(RequestModel):
    """Invoicing settings for a credit purchase."""
    auto_collection: bool
    net_terms: int
    memo: str | None = None
    require_successful_payment: bool | None = None


class IncrementLedgerEntryRequest(RequestModel):
    __always_sent__: ClassVar[frozenset[str]] = frozenset({"entry_type"})

    entry_type: Literal["increment"] = "increment"
    amount: Decimal
    description: str | None = None
    expiry_date: datetime | None = None
    effective_date: datetime | None = None
    per_unit_cost_basis: str | None = None
    invoice_settings: CreditInvoiceSettings | None = None


class DecrementLedgerEntryRequest(RequestModel):
    __always_sent__: ClassVar[frozenset[str]] = frozenset({"entry_type"})

    entry_type: Literal["decrement"] = "decrement"
    amount: Decimal
    description: str | None = None


class VoidLedgerEntryRequest(RequestModel):
    __always_sent__: ClassVar[frozenset[str]] = frozenset({"entry_type"})

    entry_type: Literal["void"] = "void"
    amount: Decimal
    block_id: CreditBlockId
    void_reason: VoidReason | None = None
    description: str | None = None


LedgerEntryRequest = IncrementLedgerEntryRequest | DecrementLedgerEntryRequest | VoidLedgerEntryRequest
