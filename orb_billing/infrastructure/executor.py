"""Request Executor — turns an Operation into an authenticated, retried HTTP exchange.

Invariants:
    - Path/usage problems raise UsageError before any network attempt
    - Transport failures and TRANSIENT statuses are retried with exponential backoff and
      ±25% jitter, bounded by RetryPolicy.max_attempts and max_elapsed_seconds
    - Retry-After on a transient response overrides the computed delay
    - One idempotency key per logical call, reused on every attempt; none for reads
    - When retries run out the LAST error is raised with context.attempt set
    - TERMINAL responses and DecodeError are never retried
    - The API key is never logged and never placed in an error

Design Decisions:
    - Wrapper over a raw httpx.AsyncClient: isolates retry logic from the resource classes
    - sleep and clock injectable: tests run the full retry loop without waiting
    - asyncio.CancelledError is not caught: cancellation propagates unchanged
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from pydantic import SecretStr

from orb_billing.core.classify import classify, is_transport_retryable
from orb_billing.core.codec import decode, encode
from orb_billing.core.errors import DecodeError, ErrorContext, OrbError, TransportError
from orb_billing.core.idempotency import IDEMPOTENCY_HEADER, IdempotencyManager
from orb_billing.core.operation import Operation
from orb_billing.core.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = "orb-billing-python/0.1.0"


class RequestExecutor:
    """Executes Operations against the Orb API with retry, backoff, and error mapping."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: SecretStr,
        policy: RetryPolicy | None = None,
        idempotency: IdempotencyManager | None = None,
        timeout_seconds: float = 60.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._http = http
        self._api_key = api_key
        self.policy = policy or RetryPolicy()
        self._idempotency = idempotency or IdempotencyManager()
        self._timeout = timeout_seconds
        self._sleep = sleep
        self._clock = clock

    def __repr__(self) -> str:
        return f"RequestExecutor(base_url={str(self._http.base_url)!r}, policy={self.policy!r})"

    async def execute(self, operation: Operation, response_type: type[T] | Any) -> T:
        """Run one logical call; response_type=None for endpoints with no useful body."""
        path = operation.resolve_path()
        headers = self._headers()
        headers.update(self._idempotency.headers_for(operation))
        key = headers.get(IDEMPOTENCY_HEADER)
        content = encode(operation.body) if operation.body is not None else None
        if content is not None:
            headers["Content-Type"] = "application/json"

        started = self._clock()
        for attempt in range(self.policy.max_attempts):
            context = ErrorContext(
                method=operation.method, path=path,
                attempt=attempt + 1, idempotency_key=key,
            )
            logger.debug(
                f"Orb request {operation.method} {path} (attempt {attempt + 1})",
                extra=self._log_fields(context),
            )
            try:
                response = await self._send(operation, path, headers, content)
            except httpx.RequestError as e:
                error: OrbError = TransportError(str(e) or type(e).__name__, cause=e, context=context)
                if not is_transport_retryable(e):
                    raise error from e
                retry_after_ms = None
            else:
                if response.is_success:
                    result = self._decode(response, response_type, context)
                    self._log_success(context, response.status_code, started)
                    return result
                classification = classify(
                    response.status_code, response.content, response.headers, context,
                )
                if not classification.retryable:
                    raise classification.error
                error = classification.error
                retry_after_ms = error.context.retry_after_ms

            delay = self.policy.backoff_ms(attempt, retry_after_ms)
            if not self.policy.should_retry(attempt, self._clock() - started, delay):
                raise error
            logger.warning(
                f"Transient Orb error, retry after {delay}ms (attempt {attempt + 1}): {error.message}",
                extra={**self._log_fields(context), "error_code": error.code,
                       "status_code": getattr(error, "status_code", None)},
            )
            await self._sleep(delay / 1000)

    async def _send(
        self, operation: Operation, path: str, headers: dict[str, str], content: bytes | None,
    ) -> httpx.Response:
        request = self._http.build_request(
            operation.method,
            path,
            params=operation.query or None,
            content=content,
            headers=headers,
            timeout=self._timeout,
        )
        return await self._http.send(request)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key.get_secret_value()}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _decode(self, response: httpx.Response, response_type: Any, context: ErrorContext):
        try:
            return decode(response_type, response.content)
        except DecodeError as e:
            e.context = context
            logger.error(
                f"Orb response decode failed: {e.message}",
                extra={**self._log_fields(context), "error_code": e.code,
                       "status_code": response.status_code},
            )
            raise

    def _log_success(self, context: ErrorContext, status_code: int, started: float) -> None:
        logger.info(
            "Orb API success",
            extra={
                **self._log_fields(context),
                "status_code": status_code,
                "elapsed_ms": int((self._clock() - started) * 1000),
            },
        )

    @staticmethod
    def _log_fields(context: ErrorContext) -> dict[str, Any]:
        return {
            "method": context.method,
            "path": context.path,
            "attempt": context.attempt,
            "idempotency_key": context.idempotency_key,
        }
