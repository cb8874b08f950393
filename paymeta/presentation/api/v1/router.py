"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from paymeta.presentation.api.v1.endpoints.health import router as health_router
from paymeta.presentation.api.v1.endpoints.payment_metadata import (
    router as payment_metadata_router,
)

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(payment_metadata_router)
