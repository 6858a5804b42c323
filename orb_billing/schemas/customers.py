"""Customer Schemas — customers, addresses and tax ids.

Invariants:
    - Customer.balance is Decimal (no float rounding of money)
    - Unset optional fields (absent or null on the wire) are None
    - CreateCustomerRequest requires name + email; everything else is sent only if set
    - UpdateCustomerRequest may clear addresses/tax id/provider with an explicit None
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from orb_billing.core.domain_types import PaymentProvider, TaxIdType
from orb_billing.schemas.common import OpenEnum, OrbModel, RequestModel


class Address(OrbModel):
    city: str | None = None
    country: str | None = None
    line1: str | None = None
    line2: str | None = None
    postal_code: str | None = None
    state: str | None = None


class AddressRequest(RequestModel):
    city: str | None = None
    country: str | None = Field(None, min_length=2, max_length=2)
    line1: str | None = None
    line2: str | None = None
    postal_code: str | None = None
    state: str | None = None


class TaxId(OrbModel):
    type: OpenEnum[TaxIdType]
    value: str
    country: str


class TaxIdRequest(RequestModel):
    type: TaxIdType | str
    value: str
    country: str = Field(min_length=2, max_length=2)


class Customer(OrbModel):
    """An Orb customer."""
    id: str
    external_customer_id: str | None = None
    name: str
    email: str
    additional_emails: list[str] | None = None
    timezone: str
    payment_provider: OpenEnum[PaymentProvider] | None = None
    payment_provider_id: str | None = None
    shipping_address: Address | None = None
    billing_address: Address | None = None
    currency: str | None = None
    tax_id: TaxId | None = None
    auto_collection: bool
    balance: Decimal
    created_at: datetime
    portal_url: str | None = None


class CreateCustomerRequest(RequestModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    external_customer_id: str | None = None
    additional_emails: list[str] | None = None
    timezone: str | None = None
    payment_provider: PaymentProvider | str | None = None
    payment_provider_id: str | None = None
    shipping_address: AddressRequest | None = None
    billing_address: AddressRequest | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)
    tax_id: TaxIdRequest | None = None


class UpdateCustomerRequest(RequestModel):
    __nullable_fields__: ClassVar[frozenset[str]] = frozenset({
        "shipping_address", "billing_address", "tax_id",
        "payment_provider", "payment_provider_id",
    })

    name: str | None = None
    email: str | None = None
    additional_emails: list[str] | None = None
    payment_provider: PaymentProvider | str | None = None
    payment_provider_id: str | None = None
    shipping_address: AddressRequest | None = None
    billing_address: AddressRequest | None = None
    tax_id: TaxIdRequest | None = None
