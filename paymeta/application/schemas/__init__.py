from .payment_metadata import (
    CamelModel,
    DeleteResponse,
    PaginationSchema,
    PaymentMetadataCreate,
    PaymentMetadataPage,
    PaymentMetadataResponse,
    PaymentMetadataTokenResponse,
    PaymentMetadataUpdate,
)

__all__ = [
    "CamelModel",
    "DeleteResponse",
    "PaginationSchema",
    "PaymentMetadataCreate",
    "PaymentMetadataPage",
    "PaymentMetadataResponse",
    "PaymentMetadataTokenResponse",
    "PaymentMetadataUpdate",
]
