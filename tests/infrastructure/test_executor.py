"""Request Executor — auth, idempotency, retry loop and error surfacing.

Invariants:
    - Transient statuses retried up to max_retries, then the LAST error is raised with
      context.attempt = attempts made
    - Retry-After overrides the computed delay
    - Terminal statuses and decode failures are never retried
    - Transport timeouts are retried; the same Idempotency-Key is sent on every attempt
    - Read-only operations carry no Idempotency-Key
    - The elapsed-time budget stops retries early
    - The API key never reaches logs
"""

import asyncio
import itertools
import logging

import httpx
import pytest
from pydantic import SecretStr

from orb_billing.core.domain_types import InvoiceStatus
from orb_billing.core.errors import ApiError, DecodeError, TransportError, UsageError
from orb_billing.core.idempotency import IdempotencyManager
from orb_billing.core.operation import Operation
from orb_billing.core.retry_policy import RetryPolicy
from orb_billing.infrastructure.executor import RequestExecutor
from orb_billing.schemas.customers import CreateCustomerRequest, Customer

from tests.services.mock_orb import (
    FakeSleep,
    MockOrb,
    customer_payload,
    error_reply,
    reply,
)

API_KEY = "sk-orb-secret-value"


# -- Helpers -------------------------------------------------------------------

class _CountingKeys:
    def __init__(self):
        self.issued = 0

    def __call__(self):
        self.issued += 1
        return f"key-{self.issued}"


def _executor(orb, sleep=None, clock=None, keys=None, **policy):
    policy.setdefault("jitter", lambda low, high: 1.0)
    return RequestExecutor(
        httpx.AsyncClient(base_url="https://api.test/v1/", transport=orb.transport),
        SecretStr(API_KEY),
        policy=RetryPolicy(**policy),
        idempotency=IdempotencyManager(factory=keys or _CountingKeys()),
        sleep=sleep or FakeSleep(),
        **({"clock": clock} if clock else {}),
    )


def _create_customer(key=None):
    return Operation(
        "POST", "customers",
        body=CreateCustomerRequest(name="Ada", email="ada@example.com"),
        mutating=True, idempotency_key=key,
    )


# ==============================================================================
# Success path
# ==============================================================================


async def test_get_sends_auth_and_no_idempotency_key():
    orb = MockOrb([reply(200, customer_payload())])
    executor = _executor(orb)

    customer = await executor.execute(
        Operation("GET", "customers/{customer_id}", {"customer_id": "cus_1"}), Customer,
    )

    assert customer.id == "cus_1"
    request = orb.last
    assert request.url.path == "/v1/customers/cus_1"
    assert request.headers["Authorization"] == f"Bearer {API_KEY}"
    assert request.headers["Accept"] == "application/json"
    assert "Idempotency-Key" not in request.headers


async def test_post_sends_json_body_and_generated_key():
    orb = MockOrb([reply(200, customer_payload())])
    await _executor(orb).execute(_create_customer(), Customer)

    assert orb.last.headers["Idempotency-Key"] == "key-1"
    assert orb.last.headers["Content-Type"] == "application/json"
    assert orb.body() == {"name": "Ada", "email": "ada@example.com"}


async def test_status_filter_is_sent_as_repeated_keys():
    orb = MockOrb([reply(200, {"data": []})])
    op = Operation("GET", "invoices", query=[("status[]", [InvoiceStatus.DRAFT, InvoiceStatus.PAID])])
    await _executor(orb).execute(op, None)

    assert orb.last.url.params.get_list("status[]") == ["draft", "paid"]


async def test_empty_response_type_accepts_no_content():
    orb = MockOrb([reply(204)])
    result = await _executor(orb).execute(
        Operation("DELETE", "customers/{customer_id}", {"customer_id": "cus_1"}, mutating=True), None,
    )
    assert result is None


# ==============================================================================
# Retry behaviour
# ==============================================================================


async def test_rate_limit_retried_until_exhausted_then_last_error():
    sleep = FakeSleep()
    orb = MockOrb([error_reply(429, "Too many requests") for _ in range(3)])
    executor = _executor(orb, sleep=sleep, max_retries=2)

    with pytest.raises(ApiError) as exc:
        await executor.execute(Operation("GET", "plans"), None)

    assert exc.value.status_code == 429
    assert exc.value.transient is True
    assert exc.value.context.attempt == 3
    assert len(orb.requests) == 3
    assert sleep.calls == [1.0, 2.0]


async def test_retry_after_overrides_backoff():
    sleep = FakeSleep()
    orb = MockOrb([
        error_reply(429, "Slow down", headers={"Retry-After": "5"}),
        reply(200, customer_payload()),
    ])
    await _executor(orb, sleep=sleep).execute(Operation("GET", "customers/c", {}), Customer)

    assert sleep.calls == [5.0]


async def test_terminal_status_is_not_retried():
    sleep = FakeSleep()
    orb = MockOrb([error_reply(400, "Invalid request", "email is invalid")])

    with pytest.raises(ApiError) as exc:
        await _executor(orb, sleep=sleep).execute(_create_customer(), Customer)

    assert exc.value.status_code == 400
    assert exc.value.detail == "email is invalid"
    assert exc.value.context.attempt == 1
    assert len(orb.requests) == 1
    assert sleep.calls == []


async def test_timeouts_then_success_reuse_one_idempotency_key():
    keys = _CountingKeys()
    sleep = FakeSleep()
    orb = MockOrb([
        httpx.ConnectTimeout("connect timed out"),
        httpx.ReadTimeout("read timed out"),
        reply(200, customer_payload(id="cus_new")),
    ])

    customer = await _executor(orb, sleep=sleep, keys=keys).execute(_create_customer(), Customer)

    assert customer.id == "cus_new"
    assert len(orb.requests) == 3
    assert {r.headers["Idempotency-Key"] for r in orb.requests} == {"key-1"}
    assert keys.issued == 1
    assert sleep.calls == [1.0, 2.0]


async def test_distinct_calls_get_distinct_keys():
    orb = MockOrb([reply(200, customer_payload()), reply(200, customer_payload())])
    executor = _executor(orb)

    await executor.execute(_create_customer(), Customer)
    await executor.execute(_create_customer(), Customer)

    assert [r.headers["Idempotency-Key"] for r in orb.requests] == ["key-1", "key-2"]


async def test_caller_pinned_key_is_sent_on_every_attempt():
    orb = MockOrb([error_reply(503), reply(200, customer_payload())])
    await _executor(orb).execute(_create_customer("order-42"), Customer)

    assert [r.headers["Idempotency-Key"] for r in orb.requests] == ["order-42", "order-42"]


async def test_transport_failures_exhausted_raise_transport_error():
    orb = MockOrb([httpx.ConnectError("refused") for _ in range(4)])

    with pytest.raises(TransportError) as exc:
        await _executor(orb, max_retries=3).execute(Operation("GET", "plans"), None)

    assert isinstance(exc.value.cause, httpx.ConnectError)
    assert exc.value.context.attempt == 4


async def test_unsupported_protocol_is_not_retried():
    orb = MockOrb([httpx.UnsupportedProtocol("bad scheme")])

    with pytest.raises(TransportError):
        await _executor(orb).execute(Operation("GET", "plans"), None)

    assert len(orb.requests) == 1


async def test_elapsed_budget_stops_retries():
    ticks = itertools.count(0.0, 1.0)
    orb = MockOrb([error_reply(500), error_reply(500)])
    executor = _executor(
        orb, clock=lambda: next(ticks), max_retries=5, max_elapsed_seconds=1.5,
    )

    with pytest.raises(ApiError) as exc:
        await executor.execute(Operation("GET", "plans"), None)

    assert exc.value.context.attempt == 1
    assert len(orb.requests) == 1


# ==============================================================================
# Non-retried failures
# ==============================================================================


async def test_decode_error_is_not_retried():
    orb = MockOrb([reply(200, {"id": "cus_1"})])

    with pytest.raises(DecodeError) as exc:
        await _executor(orb).execute(Operation("GET", "customers/x"), Customer)

    assert exc.value.type_name == "Customer"
    assert exc.value.context.attempt == 1
    assert len(orb.requests) == 1


async def test_missing_path_parameter_fails_before_network():
    orb = MockOrb()

    with pytest.raises(UsageError):
        await _executor(orb).execute(Operation("GET", "customers/{customer_id}"), Customer)

    assert orb.requests == []


async def test_unserializable_body_fails_before_network():
    orb = MockOrb()

    with pytest.raises(UsageError):
        await _executor(orb).execute(
            Operation("POST", "ingest", body={"events": [object()]}, mutating=True), None,
        )

    assert orb.requests == []


async def test_cancellation_propagates_unchanged():
    orb = MockOrb([asyncio.CancelledError()])
    sleep = FakeSleep()

    with pytest.raises(asyncio.CancelledError):
        await _executor(orb, sleep=sleep).execute(Operation("GET", "plans"), None)

    assert sleep.calls == []


async def test_api_key_never_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="orb_billing")
    orb = MockOrb([error_reply(503), reply(200, customer_payload())])

    await _executor(orb).execute(_create_customer(), Customer)

    assert any(r.levelno == logging.WARNING for r in caplog.records)
    assert any(r.getMessage() == "Orb API success" and r.attempt == 2 for r in caplog.records)
    for record in caplog.records:
        assert API_KEY not in record.getMessage()
        assert API_KEY not in repr(record.__dict__)
    assert API_KEY not in repr(_executor(orb))
