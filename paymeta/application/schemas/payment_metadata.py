"""Pydantic DTOs (Data Transfer Objects) for the payment metadata feature.

Wire names are camelCase (``podcastGuid``, ``updateToken``); Python code uses
the snake_case field names.
"""

from datetime import datetime
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from paymeta.domain.entities import PaymentType

_OPTIONAL_READ_FIELDS = ("signature", "podcast_guid", "rss_item_guid")


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _PaymentMetadataBody(CamelModel):
    type: PaymentType = Field(..., examples=["bitcoin-lightning"])
    metadata: dict[str, JsonValue] = Field(
        ..., examples=[{"payment_hash": "abc", "amt_paid_msat": "21000"}],
    )
    signature: str | None = None


class PaymentMetadataCreate(_PaymentMetadataBody):
    """Schema for creating a new payment metadata record."""

    podcast_guid: str | None = Field(None, examples=["917393e3-1b1e-5cef-ace4-edaa54e1f810"])
    rss_item_guid: str | None = None


class PaymentMetadataUpdate(_PaymentMetadataBody):
    """Schema for replacing a record's content.

    RSS item guids are not part of an update; any sent are ignored.
    """

    id: UUID
    update_token: UUID


class PaymentMetadataTokenResponse(CamelModel):
    """Returned by create and update — the only place the token is disclosed."""

    id: str
    update_token: str


class PaymentMetadataResponse(CamelModel):
    """Public read shape; never carries the update token."""

    id: str
    type: PaymentType
    metadata: dict[str, JsonValue]
    signature: str | None = None
    podcast_guid: str | None = None
    rss_item_guid: str | None = None
    created_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    @model_serializer(mode="wrap")
    def _omit_absent_optionals(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ):
        data = handler(self)
        for name in _OPTIONAL_READ_FIELDS:
            key = to_camel(name) if info.by_alias else name
            if key in data and data[key] is None:
                del data[key]
        return data


class PaginationSchema(CamelModel):
    limit: int
    offset: int
    total: int
    has_more: bool


class PaymentMetadataPage(CamelModel):
    """Paginated listing response."""

    data: list[PaymentMetadataResponse]
    pagination: PaginationSchema


class DeleteResponse(BaseModel):
    message: str
