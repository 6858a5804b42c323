"""Resource Base — shared plumbing for the per-area service classes.

Invariants:
    - page_size=None means the client default; any explicit value is range-checked by Pager
    - Deleted customer shapes are dropped from listings; deleted=false raises
      UnexpectedResponseError
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from orb_billing.core.errors import UnexpectedResponseError, UsageError
from orb_billing.core.operation import Operation
from orb_billing.infrastructure.executor import RequestExecutor
from orb_billing.infrastructure.pager import DEFAULT_PAGE_SIZE, Pager
from orb_billing.schemas.common import Deleted

M = TypeVar("M", bound=BaseModel)


def build_model(model_type: type[M], **values: Any) -> M:
    """Construct a request model from keyword arguments, mapping validation to UsageError."""
    try:
        return model_type(**{k: v for k, v in values.items() if v is not None})
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or None
        raise UsageError(f"Invalid {model_type.__name__}: {first['msg']}", field=field) from e


def check_deleted(record: Deleted) -> None:
    """Return quietly for a deleted record; raise if the shape contradicts itself."""
    if not record.deleted:
        raise UnexpectedResponseError(
            f"customer {record.id} used deleted response shape but deleted field was `false`",
        )


def drop_deleted_customer(item):
    if isinstance(item, Deleted):
        check_deleted(item)
        return None
    return item


class Resource:
    """One area of the Orb API bound to a shared executor."""

    def __init__(self, executor: RequestExecutor, page_size: int = DEFAULT_PAGE_SIZE):
        self._executor = executor
        self._page_size = page_size

    async def _call(self, operation: Operation, response_type: Any):
        return await self._executor.execute(operation, response_type)

    def _pager(
        self, operation: Operation, item_type: Any,
        page_size: int | None = None, transform=None,
    ) -> Pager:
        return Pager(
            self._executor, operation, item_type,
            page_size=self._page_size if page_size is None else page_size,
            transform=transform,
        )
