from .payment_metadata import PaymentMetadataModel, RSSItemIndexModel

__all__ = [
    "PaymentMetadataModel",
    "RSSItemIndexModel",
]
