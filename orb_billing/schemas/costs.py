"""Cost Schemas — customer cost buckets returned by the costs endpoints.

Invariants:
    - subtotal/total are Decimal (the API sends them as decimal strings)
    - Price models other than unit/matrix still decode (config fields stay None)
"""

from datetime import datetime
from decimal import Decimal

from orb_billing.core.domain_types import CostViewMode
from orb_billing.schemas.common import OrbModel, QueryParams


class CostItem(OrbModel):
    id: str
    name: str


class UnitConfig(OrbModel):
    unit_amount: Decimal
    scaling_factor: Decimal | None = None


class MatrixValue(OrbModel):
    dimension_values: list[str | None]
    unit_amount: Decimal


class MatrixConfig(OrbModel):
    default_unit_amount: Decimal
    dimensions: list[str | None]
    matrix_values: list[MatrixValue]


class CostPrice(OrbModel):
    id: str
    model_type: str
    external_price_id: str | None = None
    item: CostItem
    unit_config: UnitConfig | None = None
    matrix_config: MatrixConfig | None = None


class PriceGroup(OrbModel):
    grouping_key: str
    grouping_value: str | None = None
    secondary_grouping_key: str | None = None
    secondary_grouping_value: str | None = None
    total: Decimal


class PriceCost(OrbModel):
    quantity: Decimal | None = None
    subtotal: Decimal
    total: Decimal
    price: CostPrice
    price_groups: list[PriceGroup] | None = None


class CostBucket(OrbModel):
    subtotal: Decimal
    total: Decimal
    timeframe_start: datetime
    timeframe_end: datetime
    per_price_costs: list[PriceCost] | None = None


class CostParams(QueryParams):
    """Filters for a cost query; every field is optional."""
    timeframe_start: datetime | None = None
    timeframe_end: datetime | None = None
    view_mode: CostViewMode | None = None
    group_by: str | None = None

    def to_query(self) -> list[tuple[str, object]]:
        return [
            ("timeframe_start", self.timeframe_start),
            ("timeframe_end", self.timeframe_end),
            ("view_mode", self.view_mode),
            ("group_by", self.group_by),
        ]
