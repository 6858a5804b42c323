"""Usage Event Schemas.

Invariants:
    - Property values are str, bool or number; numbers decode as int or Decimal
    - Ingest/amend requests name exactly one of customer_id / external_customer_id
    - Event search filters travel in the POST body; only page_size is a query parameter
"""

from datetime import datetime
from decimal import Decimal
from typing import Union

from pydantic import Field, model_validator

from orb_billing.schemas.common import ListParams, OrbModel, RequestModel

# JSON property values: strings, booleans and numbers
EventPropertyValue = Union[bool, int, Decimal, str]


class _EventBody(RequestModel):
    customer_id: str | None = None
    external_customer_id: str | None = None
    event_name: str
    properties: dict[str, EventPropertyValue]
    timestamp: datetime

    @model_validator(mode="after")
    def check_customer(self):
        if (self.customer_id is None) == (self.external_customer_id is None):
            raise ValueError("exactly one of customer_id / external_customer_id is required")
        return self


class IngestEventRequest(_EventBody):
    """One usage event. idempotency_key deduplicates the event server-side."""
    idempotency_key: str = Field(min_length=1)


class AmendEventRequest(_EventBody):
    """Replacement body for an existing event."""


class IngestDebugResponse(OrbModel):
    duplicate: list[str] | None = None
    ingested: list[str] | None = None


class IngestEventResponse(OrbModel):
    """debug is only populated in debug ingestion mode."""
    debug: IngestDebugResponse | None = None


class Event(OrbModel):
    id: str
    customer_id: str
    external_customer_id: str | None = None
    event_name: str
    properties: dict[str, EventPropertyValue] | None = None
    timestamp: datetime


class EventSearchParams(ListParams):
    """Search filter; every field is optional."""
    event_ids: tuple[str, ...] | None = None
    invoice_id: str | None = None
    timeframe_start: datetime | None = None
    timeframe_end: datetime | None = None

    def to_body(self) -> dict[str, object]:
        return {
            "event_ids": list(self.event_ids) if self.event_ids is not None else None,
            "invoice_id": self.invoice_id,
            "timeframe_start": self.timeframe_start,
            "timeframe_end": self.timeframe_end,
        }
