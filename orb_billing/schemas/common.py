"""Schema Base Types — response/request model bases and wire envelopes.

Invariants:
    - OrbModel ignores unknown fields (service-side additions never break decoding)
    - Optional response fields default to None: absent and null both mean "unset"
    - RequestModel forbids unknown fields (typos fail locally, before any request)
    - OpenEnum[E] decodes known values to E, unknown values to plain str

Design Decisions:
    - Pydantic v2 models as the schema module: validation + aliases in one place
    - PlainValidator for OpenEnum: stays valid when nested in Optional or list types
"""

from typing import Annotated, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainValidator

T = TypeVar("T")


class OpenEnum:
    """OpenEnum[E] -> E | str: known values become E members, unknown stay str."""

    def __class_getitem__(cls, enum_type):
        def validate(value):
            if isinstance(value, enum_type):
                return value
            if not isinstance(value, str):
                raise ValueError(f"expected a string value for {enum_type.__name__}")
            try:
                return enum_type(value)
            except ValueError:
                return value

        return Annotated[enum_type | str, PlainValidator(validate)]


class OrbModel(BaseModel):
    """Base for decoded resources."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class RequestModel(BaseModel):
    """Base for request bodies.

    __nullable_fields__: fields where an explicit None is sent as JSON null.
    __always_sent__: fields sent even when left at their default (discriminators).
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    __nullable_fields__: ClassVar[frozenset[str]] = frozenset()
    __always_sent__: ClassVar[frozenset[str]] = frozenset()


# ─── Envelopes ───────────────────────────────────────────────────

class PaginationMetadata(OrbModel):
    has_more: bool = False
    next_cursor: str | None = None


class Page(OrbModel, Generic[T]):
    """One page of a cursor-paginated list."""
    data: list[T]
    pagination_metadata: PaginationMetadata | None = None


class DataList(OrbModel, Generic[T]):
    """Non-paginated collection wrapper ({"data": [...]})."""
    data: list[T]


class Deleted(OrbModel):
    """Shape Orb returns in place of a deleted resource."""
    id: str
    deleted: bool


# ─── Query Parameters ────────────────────────────────────────────

class QueryParams(BaseModel):
    """Base for query-string filters. Subclasses list their pairs in to_query()."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    def to_query(self) -> list[tuple[str, object]]:
        return []


class ListParams(QueryParams):
    """Parameters shared by every list operation.

    page_size only changes the size of each HTTP response, not the items yielded.
    None means the client's configured default.
    """
    page_size: int | None = Field(None, ge=1, le=500)
