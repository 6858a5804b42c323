"""Domain Types — identifiers and enums shared by schemas and services.

Invariants:
    - CustomerId, PlanId, InvoiceId, ... are NewType wrappers over str — never parsed
    - All known states encoded as str Enums — serialize to their wire value
    - Enums are "open": schemas pair them with str (see schemas.common.OpenEnum) so
      values added server-side still decode

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: json/pydantic serialize them without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CustomerId = NewType("CustomerId", str)
ExternalCustomerId = NewType("ExternalCustomerId", str)
PlanId = NewType("PlanId", str)
ExternalPlanId = NewType("ExternalPlanId", str)
SubscriptionId = NewType("SubscriptionId", str)
InvoiceId = NewType("InvoiceId", str)
EventId = NewType("EventId", str)
BackfillId = NewType("BackfillId", str)
CreditBlockId = NewType("CreditBlockId", str)


# ─── Enums ───────────────────────────────────────────────────────

class PaymentProvider(str, Enum):
    """External payments or invoicing solution connected to a customer."""
    QUICKBOOKS = "quickbooks"
    BILL_DOT_COM = "bill.com"
    STRIPE = "stripe"
    STRIPE_CHARGE = "stripe_charge"
    STRIPE_INVOICE = "stripe_invoice"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states — values of the repeated `status[]` filter."""
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    VOID = "void"
    SYNCED = "synced"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"
    UPCOMING = "upcoming"


class CancelOption(str, Enum):
    """When a subscription cancellation takes effect."""
    END_OF_SUBSCRIPTION_TERM = "end_of_subscription_term"
    IMMEDIATE = "immediate"
    REQUESTED_DATE = "requested_date"


class ExternalMarketplace(str, Enum):
    GOOGLE = "google"
    AWS = "aws"
    AZURE = "azure"


class EntryStatus(str, Enum):
    """Credit ledger entry state."""
    COMMITTED = "committed"
    PENDING = "pending"


class EntryType(str, Enum):
    """Credit ledger entry kinds — discriminator of LedgerEntry."""
    INCREMENT = "increment"
    DECREMENT = "decrement"
    EXPIRATION_CHANGE = "expiration_change"
    CREDIT_BLOCK_EXPIRY = "credit_block_expiry"
    VOID = "void"
    VOID_INITIATED = "void_initiated"
    AMENDMENT = "amendment"


class VoidReason(str, Enum):
    REFUND = "refund"


class CostViewMode(str, Enum):
    """Cost query aggregation mode."""
    PERIODIC = "periodic"
    CUMULATIVE = "cumulative"


class IngestionMode(str, Enum):
    """Debug mode makes the ingest endpoint report duplicate/ingested ids."""
    DEBUG = "debug"
    PRODUCTION = "production"


class BackfillStatus(str, Enum):
    PENDING = "pending"
    REFLECTED = "reflected"
    PENDING_REVERT = "pending_revert"
    REVERTED = "reverted"


class TaxIdType(str, Enum):
    """Tax identifier kinds accepted on invoices (subset; unknown kinds decode as str)."""
    AE_TRN = "ae_trn"
    AU_ABN = "au_abn"
    AU_ARN = "au_arn"
    BR_CNPJ = "br_cnpj"
    BR_CPF = "br_cpf"
    CA_BN = "ca_bn"
    CA_GST_HST = "ca_gst_hst"
    CA_QST = "ca_qst"
    CH_VAT = "ch_vat"
    EU_OSS_VAT = "eu_oss_vat"
    EU_VAT = "eu_vat"
    GB_VAT = "gb_vat"
    IN_GST = "in_gst"
    JP_CN = "jp_cn"
    MX_RFC = "mx_rfc"
    NO_VAT = "no_vat"
    NZ_GST = "nz_gst"
    SG_GST = "sg_gst"
    US_EIN = "us_ein"
    ZA_VAT = "za_vat"
