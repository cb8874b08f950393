"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from paymeta.application.services import PaymentMetadataService
from paymeta.config import Settings
from paymeta.infrastructure.database.session import get_db_session
from paymeta.infrastructure.database.repositories import (
    SQLAlchemyPaymentMetadataRepository,
    SQLAlchemyRSSItemIndex,
)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


async def get_payment_metadata_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[PaymentMetadataService, None]:
    """Provides a PaymentMetadataService with its repository and index wired up."""
    index = SQLAlchemyRSSItemIndex(session)
    repository = SQLAlchemyPaymentMetadataRepository(session, index)
    yield PaymentMetadataService(repository)
