"""Orb Client — entry point exposing one namespace per API area.

Invariants:
    - One RequestExecutor shared by every namespace (same auth, retry policy, transport)
    - The client closes its httpx.AsyncClient on aclose()/async with, unless the caller
      passed one in (then the caller owns it)
    - Redirects are never followed
    - Shareable across asyncio tasks; pagers are not

Design Decisions:
    - Explicit Settings argument, no hidden global: from_env() is the environment path
      and the only reader of get_settings()
    - Transport injectable (httpx.MockTransport in tests)
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from orb_billing.config import Settings, get_settings
from orb_billing.core.idempotency import IdempotencyManager
from orb_billing.core.retry_policy import RetryPolicy
from orb_billing.infrastructure.executor import RequestExecutor
from orb_billing.infrastructure.observability import LOGGER_NAME, setup_logging
from orb_billing.infrastructure.pager import check_page_size
from orb_billing.services.backfills import BackfillService
from orb_billing.services.coupons import CouponService
from orb_billing.services.customers import CustomerService
from orb_billing.services.events import EventService
from orb_billing.services.invoices import InvoiceService
from orb_billing.services.plans import PlanService
from orb_billing.services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)


class OrbClient:
    """Async client for the Orb billing API."""

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        idempotency: IdempotencyManager | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=settings.endpoint + "/",
            timeout=settings.timeout_seconds,
            follow_redirects=False,
            transport=transport,
        )
        policy = RetryPolicy(
            max_retries=settings.max_retries,
            base_delay_ms=settings.base_delay_ms,
            max_delay_ms=settings.max_delay_ms,
            max_elapsed_seconds=settings.max_elapsed_seconds,
        )
        self.executor = RequestExecutor(
            self._http,
            settings.api_key,
            policy=policy,
            idempotency=idempotency,
            timeout_seconds=settings.timeout_seconds,
            sleep=sleep,
        )
        page_size = check_page_size(settings.page_size)

        self.customers = CustomerService(self.executor, page_size)
        self.invoices = InvoiceService(self.executor, page_size)
        self.plans = PlanService(self.executor, page_size)
        self.subscriptions = SubscriptionService(self.executor, page_size)
        self.events = EventService(self.executor, page_size)
        self.coupons = CouponService(self.executor, page_size)
        self.backfills = BackfillService(self.executor, page_size)

    @classmethod
    def from_env(cls, *, configure_logging: bool = False, **kwargs) -> "OrbClient":
        """Build a client from the cached ORB_* environment settings (and .env).

        configure_logging attaches a handler to the "orb_billing" logger using
        ORB_LOG_LEVEL / ORB_LOG_FORMAT. Applications with their own logging setup
        leave it off.
        """
        settings = get_settings()
        if configure_logging:
            setup_logging(settings.log_level, settings.log_format, logger_name=LOGGER_NAME)
        return cls(settings, **kwargs)

    def __repr__(self) -> str:
        return f"OrbClient(endpoint={self.settings.endpoint!r})"

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
            logger.debug("Orb client closed")

    async def __aenter__(self) -> "OrbClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
