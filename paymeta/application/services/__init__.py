from .payment_metadata_service import PaymentMetadataService, PaymentPage

__all__ = [
    "PaymentMetadataService",
    "PaymentPage",
]
