"""Subscription Service.

Invariants:
    - Listing drops subscriptions whose customer was deleted
    - cancel builds its request body locally: a bad option/date pair is a UsageError
      before any network attempt
"""

from datetime import datetime

from orb_billing.core.domain_types import CancelOption, SubscriptionId
from orb_billing.core.operation import Operation
from orb_billing.infrastructure.pager import Pager
from orb_billing.schemas.common import Deleted
from orb_billing.schemas.subscriptions import (
    CancelSubscriptionRequest,
    CreateSubscriptionRequest,
    Subscription,
    SubscriptionListParams,
    SubscriptionRecord,
)
from orb_billing.services.resource import Resource, build_model, check_deleted

SUBSCRIPTION_PATH = "subscriptions/{subscription_id}"


def drop_deleted_customer_subscription(record: SubscriptionRecord) -> Subscription | None:
    if isinstance(record.customer, Deleted):
        check_deleted(record.customer)
        return None
    return record


class SubscriptionService(Resource):

    def list(self, params: SubscriptionListParams | None = None) -> Pager[Subscription]:
        params = params or SubscriptionListParams()
        return self._pager(
            Operation("GET", "subscriptions", query=params.to_query()),
            SubscriptionRecord, params.page_size,
            transform=drop_deleted_customer_subscription,
        )

    async def create(
        self, request: CreateSubscriptionRequest, idempotency_key: str | None = None,
    ) -> Subscription:
        return await self._call(
            Operation("POST", "subscriptions", body=request, mutating=True, idempotency_key=idempotency_key),
            Subscription,
        )

    async def get(self, subscription_id: SubscriptionId) -> Subscription:
        return await self._call(
            Operation("GET", SUBSCRIPTION_PATH, {"subscription_id": subscription_id}), Subscription,
        )

    async def cancel(
        self,
        subscription_id: SubscriptionId,
        cancel_option: CancelOption,
        cancellation_date: datetime | None = None,
        idempotency_key: str | None = None,
    ) -> Subscription:
        """Cancel a subscription; cancellation_date only with CancelOption.REQUESTED_DATE."""
        body = build_model(
            CancelSubscriptionRequest,
            cancel_option=cancel_option, cancellation_date=cancellation_date,
        )
        return await self._call(
            Operation(
                "POST", SUBSCRIPTION_PATH + "/cancel", {"subscription_id": subscription_id},
                body=body, mutating=True, idempotency_key=idempotency_key,
            ),
            Subscription,
        )
