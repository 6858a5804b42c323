"""Subscription Schemas.

Invariants:
    - CreateSubscriptionRequest needs exactly one customer reference and exactly one
      plan reference (Orb id or external id)
    - Subscription.customer may be a Deleted shape on the wire; listings drop those
      (see services.subscriptions)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import model_validator

from orb_billing.core.domain_types import CancelOption, ExternalMarketplace, SubscriptionStatus
from orb_billing.schemas.common import Deleted, ListParams, OpenEnum, OrbModel, RequestModel
from orb_billing.schemas.coupons import RedeemedCoupon
from orb_billing.schemas.customers import Customer
from orb_billing.schemas.plans import Plan, UnitPriceOverride


class FixedFeeQuantity(OrbModel):
    start_date: datetime
    end_date: datetime | None = None
    price_id: str
    quantity: Decimal


class Subscription(OrbModel):
    """An Orb subscription."""
    id: str
    customer: Customer
    plan: Plan
    start_date: datetime
    end_date: datetime | None = None
    status: OpenEnum[SubscriptionStatus]
    current_billing_period_start_date: datetime | None = None
    current_billing_period_end_date: datetime | None = None
    active_plan_phase_order: int | None = None
    fixed_fee_quantity_schedule: list[FixedFeeQuantity] | None = None
    net_terms: int
    auto_collection: bool | None = None
    default_invoice_memo: str | None = None
    redeemed_coupon: RedeemedCoupon | None = None
    created_at: datetime


class SubscriptionRecord(Subscription):
    """Wire form of a listed subscription: the customer may have been deleted."""
    customer: Customer | Deleted


class CreateSubscriptionRequest(RequestModel):
    customer_id: str | None = None
    external_customer_id: str | None = None
    plan_id: str | None = None
    external_plan_id: str | None = None
    start_date: datetime | None = None
    external_marketplace: ExternalMarketplace | None = None
    external_marketplace_reporting_id: str | None = None
    align_billing_with_subscription_start_date: bool | None = None
    minimum_amount: str | None = None
    net_terms: int | None = None
    auto_collection: bool | None = None
    default_invoice_memo: str | None = None
    price_overrides: list[UnitPriceOverride] | None = None

    @model_validator(mode="after")
    def check_references(self):
        if (self.customer_id is None) == (self.external_customer_id is None):
            raise ValueError("exactly one of customer_id / external_customer_id is required")
        if (self.plan_id is None) == (self.external_plan_id is None):
            raise ValueError("exactly one of plan_id / external_plan_id is required")
        if (self.external_marketplace is None) != (self.external_marketplace_reporting_id is None):
            raise ValueError("external_marketplace and its reporting id go together")
        return self


class CancelSubscriptionRequest(RequestModel):
    cancel_option: CancelOption
    cancellation_date: datetime | None = None

    @model_validator(mode="after")
    def check_date(self):
        if (self.cancel_option is CancelOption.REQUESTED_DATE) != (self.cancellation_date is not None):
            raise ValueError("cancellation_date is required exactly when cancel_option is requested_date")
        return self


class SubscriptionListParams(ListParams):
    customer_id: str | None = None
    external_customer_id: str | None = None

    @model_validator(mode="after")
    def check_single_customer_filter(self):
        if self.customer_id and self.external_customer_id:
            raise ValueError("set customer_id or external_customer_id, not both")
        return self

    def to_query(self) -> list[tuple[str, object]]:
        return [
            ("customer_id", self.customer_id),
            ("external_customer_id", self.external_customer_id),
        ]
