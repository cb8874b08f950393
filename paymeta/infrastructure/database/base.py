"""SQLAlchemy ORM base and model registry."""

from typing import Any

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models.

    ``dict[str, Any]`` annotations map to the portable JSON type so the same
    models run on PostgreSQL and SQLite.
    """

    type_annotation_map = {
        dict[str, Any]: JSON,
    }
