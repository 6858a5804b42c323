"""Event Service — usage event ingestion, search, amendment and deprecation.

Invariants:
    - search is a POST but a read: no Idempotency-Key, filters in the body
    - ingest sends debug=true|false on every call and at least one event
    - amend/deprecate return nothing useful; any JSON body is accepted and dropped
"""

from collections.abc import Sequence

from orb_billing.core.domain_types import EventId, IngestionMode
from orb_billing.core.errors import UsageError
from orb_billing.core.operation import Operation
from orb_billing.infrastructure.pager import Pager
from orb_billing.schemas.events import (
    AmendEventRequest,
    Event,
    EventSearchParams,
    IngestEventRequest,
    IngestEventResponse,
)
from orb_billing.services.resource import Resource

EVENT_PATH = "events/{event_id}"

MAX_EVENTS_PER_INGEST = 500


class EventService(Resource):

    def search(self, params: EventSearchParams | None = None) -> Pager[Event]:
        params = params or EventSearchParams()
        return self._pager(
            Operation("POST", "events/search", body=params.to_body()), Event, params.page_size,
        )

    async def ingest(
        self,
        events: Sequence[IngestEventRequest],
        mode: IngestionMode = IngestionMode.PRODUCTION,
        idempotency_key: str | None = None,
    ) -> IngestEventResponse:
        """Ingest a batch of usage events; debug mode reports duplicate/ingested ids."""
        if not events:
            raise UsageError("ingest needs at least one event", field="events")
        if len(events) > MAX_EVENTS_PER_INGEST:
            raise UsageError(
                f"ingest accepts at most {MAX_EVENTS_PER_INGEST} events, got {len(events)}",
                field="events",
            )
        return await self._call(
            Operation(
                "POST", "ingest",
                query={"debug": mode is IngestionMode.DEBUG},
                body={"events": list(events)},
                mutating=True, idempotency_key=idempotency_key,
            ),
            IngestEventResponse,
        )

    async def amend(
        self, event_id: EventId, request: AmendEventRequest, idempotency_key: str | None = None,
    ) -> None:
        """Replace the contents of an existing event."""
        await self._call(
            Operation(
                "PUT", EVENT_PATH, {"event_id": event_id},
                body=request, mutating=True, idempotency_key=idempotency_key,
            ),
            None,
        )

    async def deprecate(self, event_id: EventId, idempotency_key: str | None = None) -> None:
        """Exclude an event from usage and billing."""
        await self._call(
            Operation(
                "PUT", EVENT_PATH + "/deprecate", {"event_id": event_id},
                mutating=True, idempotency_key=idempotency_key,
            ),
            None,
        )
