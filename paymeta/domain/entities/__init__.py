from .payment_metadata import (
    PaymentMetadata,
    PaymentRevision,
    PaymentType,
    new_identifier,
)

__all__ = [
    "PaymentMetadata",
    "PaymentRevision",
    "PaymentType",
    "new_identifier",
]
