"""Domain Types — identifier wrappers and wire values of the enums.

Invariants:
    - Service methods take identifiers as their NewType, not bare str
    - Enums compare equal to their wire values
"""

from typing import get_type_hints

import pytest

from orb_billing.core.domain_types import (
    BackfillId,
    BackfillStatus,
    CancelOption,
    CreditBlockId,
    CustomerId,
    EntryType,
    EventId,
    ExternalCustomerId,
    ExternalPlanId,
    IngestionMode,
    InvoiceId,
    InvoiceStatus,
    PaymentProvider,
    PlanId,
    SubscriptionId,
)
from orb_billing.schemas.credits import VoidLedgerEntryRequest
from orb_billing.services.backfills import BackfillService
from orb_billing.services.customers import CustomerService
from orb_billing.services.events import EventService
from orb_billing.services.invoices import InvoiceService
from orb_billing.services.plans import PlanService
from orb_billing.services.subscriptions import SubscriptionService


def test_identity_types_wrap_str():
    assert CustomerId("cus_1") == "cus_1"


@pytest.mark.parametrize("method,param,id_type", [
    (CustomerService.get, "customer_id", CustomerId),
    (CustomerService.get_by_external_id, "external_customer_id", ExternalCustomerId),
    (CustomerService.costs_by_external_id, "external_customer_id", ExternalCustomerId),
    (PlanService.get, "plan_id", PlanId),
    (PlanService.get_by_external_id, "external_plan_id", ExternalPlanId),
    (SubscriptionService.cancel, "subscription_id", SubscriptionId),
    (InvoiceService.void, "invoice_id", InvoiceId),
    (InvoiceService.upcoming, "subscription_id", SubscriptionId),
    (EventService.deprecate, "event_id", EventId),
    (BackfillService.revert, "backfill_id", BackfillId),
])
def test_service_signatures_use_identity_types(method, param, id_type):
    assert get_type_hints(method)[param] is id_type


def test_void_request_block_id_is_credit_block_id():
    assert VoidLedgerEntryRequest.model_fields["block_id"].annotation is CreditBlockId


def test_invoice_status_has_five_states():
    assert {s.value for s in InvoiceStatus} == {"draft", "issued", "paid", "void", "synced"}


def test_enums_compare_equal_to_wire_values():
    assert PaymentProvider.BILL_DOT_COM == "bill.com"
    assert CancelOption.END_OF_SUBSCRIPTION_TERM.value == "end_of_subscription_term"
    assert EntryType.VOID_INITIATED.value == "void_initiated"
    assert BackfillStatus.PENDING_REVERT.value == "pending_revert"
    assert IngestionMode.DEBUG.value == "debug"
