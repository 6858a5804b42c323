"""Plan and Price Schemas."""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Literal

from orb_billing.schemas.common import OrbModel, RequestModel


class Tier(OrbModel):
    first_unit: Decimal
    last_unit: Decimal | None = None
    unit_amount: Decimal


class PriceUnitConfig(OrbModel):
    unit_amount: Decimal
    scaling_factor: Decimal | None = None


class PriceTieredConfig(OrbModel):
    tiers: list[Tier]


class Price(OrbModel):
    """A plan price; config fields other than the one matching model_type are None."""
    id: str
    name: str
    model_type: str
    unit_config: PriceUnitConfig | None = None
    tiered_config: PriceTieredConfig | None = None


class Plan(OrbModel):
    """An Orb plan."""
    id: str
    external_plan_id: str | None = None
    name: str | None = None
    description: str
    currency: str | None = None
    prices: list[Price] | None = None
    created_at: datetime


# ─── Price overrides (subscription creation) ─────────────────────

class UnitConfigRequest(RequestModel):
    unit_amount: str
    scaling_factor: Decimal | None = None


class UnitPriceOverride(RequestModel):
    """Replaces the unit amount of one plan price for a subscription."""
    __always_sent__: ClassVar[frozenset[str]] = frozenset({"model_type"})

    id: str
    model_type: Literal["unit"] = "unit"
    fixed_price_quantity: Decimal | None = None
    unit_config: UnitConfigRequest
