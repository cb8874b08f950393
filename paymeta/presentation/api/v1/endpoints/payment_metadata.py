"""Payment metadata endpoints — create, read, update, delete, list, find by RSS item."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from paymeta.application.schemas.payment_metadata import (
    DeleteResponse,
    PaginationSchema,
    PaymentMetadataCreate,
    PaymentMetadataPage,
    PaymentMetadataResponse,
    PaymentMetadataTokenResponse,
    PaymentMetadataUpdate,
)
from paymeta.application.services import PaymentMetadataService
from paymeta.config import Settings
from paymeta.domain.exceptions import EntityNotFoundError, InvalidUpdateTokenError
from paymeta.infrastructure.dependencies import (
    get_app_settings,
    get_payment_metadata_service,
)
from paymeta.presentation.api.v1.errors import map_domain_error

router = APIRouter(prefix="/payment-metadata", tags=["Payment Metadata"])


@router.post(
    "",
    response_model=PaymentMetadataTokenResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment_metadata(
    data: PaymentMetadataCreate,
    service: PaymentMetadataService = Depends(get_payment_metadata_service),
) -> PaymentMetadataTokenResponse:
    """Store new payment metadata; returns its id and update token."""
    record = await service.create_payment(data)
    return PaymentMetadataTokenResponse(id=record.id, update_token=record.update_token)


@router.put("", response_model=PaymentMetadataTokenResponse)
async def update_payment_metadata(
    data: PaymentMetadataUpdate,
    update_token: UUID = Query(..., alias="updateToken"),
    service: PaymentMetadataService = Depends(get_payment_metadata_service),
    settings: Settings = Depends(get_app_settings),
) -> PaymentMetadataTokenResponse:
    """Replace a record's content. The query-string updateToken authorises the change."""
    try:
        record = await service.update_payment(str(data.id), str(update_token), data)
    except (EntityNotFoundError, InvalidUpdateTokenError) as e:
        raise map_domain_error(e, hide_record_existence=settings.hide_record_existence)
    return PaymentMetadataTokenResponse(id=record.id, update_token=record.update_token)


@router.get("/list", response_model=PaymentMetadataPage)
async def list_payment_metadata(
    limit: int | None = Query(None, ge=1, description="Page size (max list_max_limit)"),
    offset: int = Query(0, ge=0),
    service: PaymentMetadataService = Depends(get_payment_metadata_service),
    settings: Settings = Depends(get_app_settings),
) -> PaymentMetadataPage:
    """Retrieve a paginated listing of all payment metadata."""
    if limit is None:
        limit = settings.list_default_limit
    if limit > settings.list_max_limit:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid limit parameter (must be 1-{settings.list_max_limit})",
        )
    page = await service.list_payments(limit=limit, offset=offset)
    return PaymentMetadataPage(
        data=[
            PaymentMetadataResponse.model_validate(r, from_attributes=True)
            for r in page.records
        ],
        pagination=PaginationSchema(
            limit=page.limit,
            offset=page.offset,
            total=page.total,
            has_more=page.has_more,
        ),
    )


@router.get("/findByRSSItem", response_model=list[PaymentMetadataResponse])
async def find_by_rss_item(
    podcast_guid: str = Query(..., alias="podcastGuid", min_length=1),
    rss_item_guid: str = Query(..., alias="rssItemGuid", min_length=1),
    service: PaymentMetadataService = Depends(get_payment_metadata_service),
) -> list[PaymentMetadataResponse]:
    """Retrieve every payment metadata record attached to a podcast episode."""
    try:
        records = await service.find_by_rss_item(podcast_guid, rss_item_guid)
    except EntityNotFoundError as e:
        raise map_domain_error(e)
    return [
        PaymentMetadataResponse.model_validate(r, from_attributes=True) for r in records
    ]


@router.get("/{record_id}", response_model=PaymentMetadataResponse)
async def get_payment_metadata(
    record_id: UUID,
    service: PaymentMetadataService = Depends(get_payment_metadata_service),
) -> PaymentMetadataResponse:
    """Retrieve a single payment metadata record by ID."""
    try:
        record = await service.get_payment(str(record_id))
    except EntityNotFoundError as e:
        raise map_domain_error(e)
    return PaymentMetadataResponse.model_validate(record, from_attributes=True)


@router.delete("/{record_id}", response_model=DeleteResponse)
async def delete_payment_metadata(
    record_id: UUID,
    update_token: UUID = Query(..., alias="updateToken"),
    service: PaymentMetadataService = Depends(get_payment_metadata_service),
    settings: Settings = Depends(get_app_settings),
) -> DeleteResponse:
    """Delete a record; requires its current updateToken."""
    try:
        await service.delete_payment(str(record_id), str(update_token))
    except (EntityNotFoundError, InvalidUpdateTokenError) as e:
        raise map_domain_error(e, hide_record_existence=settings.hide_record_existence)
    return DeleteResponse(message="Payment metadata deleted successfully")
