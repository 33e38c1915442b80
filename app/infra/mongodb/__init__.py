"""MongoDB infrastructure layer - connection management and repositories."""

from app.infra.mongodb.connection import create_client, get_database, close_client, ensure_indexes
from app.infra.mongodb.base_repository import BaseRepository

__all__ = [
    "create_client",
    "get_database",
    "close_client",
    "ensure_indexes",
    "BaseRepository",
]
