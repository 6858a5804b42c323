"""Coupon Schemas."""

from datetime import datetime
from decimal import Decimal

from orb_billing.schemas.common import ListParams, OrbModel


class Discount(OrbModel):
    """Coupon discount. Percentage discounts fill percentage_discount, amount ones amount_discount."""
    discount_type: str
    applies_to_price_ids: list[str] | None = None
    percentage_discount: Decimal | None = None
    amount_discount: Decimal | None = None


class Coupon(OrbModel):
    id: str
    redemption_code: str
    duration_in_months: int | None = None
    max_redemptions: int | None = None
    times_redeemed: int | None = None
    archived_at: datetime | None = None
    discount: Discount


class RedeemedCoupon(OrbModel):
    coupon_id: str
    start_date: datetime
    end_date: datetime | None = None


class CouponListParams(ListParams):
    redemption_code: str | None = None
    show_archived: bool | None = None

    def to_query(self) -> list[tuple[str, object]]:
        return [
            ("redemption_code", self.redemption_code),
            ("show_archived", self.show_archived),
        ]
