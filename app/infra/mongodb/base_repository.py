"""
Base Repository Pattern

Shared MongoDB access for the per-collection repositories. Each repository
is bound to the Database it is constructed with; nothing here reaches for a
global client.
"""
import logging
from typing import Optional, List, Dict, Any, TypeVar, Generic
from datetime import datetime
from pymongo.collection import Collection
from pymongo.database import Database

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Dict[str, Any])


class BaseRepository(Generic[T]):
    """
    Common reads and writes for one collection.

    Subclasses set `collection_name`. Documents come back with `_id` as a
    string so route handlers can return them as-is.
    """

    collection_name: str = None

    def __init__(self, db: Database):
        if not self.collection_name:
            raise ValueError(f"{self.__class__.__name__} has no collection_name")
        self.db = db

    @property
    def collection(self) -> Collection:
        return self.db[self.collection_name]

    @staticmethod
    def _clean(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if doc and "_id" in doc:
            doc["_id"] = str(doc["_id"])
        return doc

    def insert_one(self, document: Dict[str, Any]) -> str:
        """Insert a document, stamping created_at if the caller did not. Returns the new _id."""
        document.setdefault("created_at", datetime.utcnow())
        result = self.collection.insert_one(document)
        return str(result.inserted_id)

    def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._clean(self.collection.find_one(query))

    def find_many(
        self,
        query: Dict[str, Any] = None,
        skip: int = 0,
        limit: int = 50,
        sort: List[tuple] = None
    ) -> List[Dict[str, Any]]:
        """
        Page through documents matching a query.

        `sort` is a list of (field, direction) pairs applied before skip/limit.
        """
        cursor = self.collection.find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        cursor = cursor.skip(skip).limit(limit)
        return [self._clean(doc) for doc in cursor]

    def delete_one(self, query: Dict[str, Any]) -> bool:
        """True if a document was removed."""
        return self.collection.delete_one(query).deleted_count > 0

    def count(self, query: Dict[str, Any] = None) -> int:
        return self.collection.count_documents(query or {})
