"""Event Backfill Schemas."""

from datetime import datetime

from pydantic import model_validator

from orb_billing.core.domain_types import BackfillStatus
from orb_billing.schemas.common import OpenEnum, OrbModel, RequestModel


class CreateBackfillRequest(RequestModel):
    """Opens a backfill window. Without a customer it applies to every customer."""
    timeframe_start: datetime
    timeframe_end: datetime
    replace_existing_events: bool
    close_time: datetime | None = None
    customer_id: str | None = None
    external_customer_id: str | None = None

    @model_validator(mode="after")
    def check_window(self):
        if self.timeframe_end <= self.timeframe_start:
            raise ValueError("timeframe_end must be after timeframe_start")
        if self.customer_id is not None and self.external_customer_id is not None:
            raise ValueError("set customer_id or external_customer_id, not both")
        return self


class Backfill(OrbModel):
    id: str
    status: OpenEnum[BackfillStatus]
    close_time: datetime | None = None
    reverted_at: datetime | None = None
    timeframe_start: datetime
    timeframe_end: datetime
    created_at: datetime
    customer_id: str | None = None
