from .base import Base
from .session import Database, get_db_session
from .models import PaymentMetadataModel, RSSItemIndexModel

__all__ = [
    "Base",
    "Database",
    "get_db_session",
    "PaymentMetadataModel",
    "RSSItemIndexModel",
]
