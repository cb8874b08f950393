from .payment_metadata_repository import PaymentMetadataRepository
from .rss_item_index import RSSItemIndex

__all__ = [
    "PaymentMetadataRepository",
    "RSSItemIndex",
]
