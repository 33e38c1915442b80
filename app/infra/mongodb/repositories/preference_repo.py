"""
Client Preference Repository

Per-(user, client name) writing preferences learned from generated contracts.
Client names are matched exactly (case and whitespace sensitive).
"""
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.infra.mongodb.base_repository import BaseRepository
from app.models.memory_schema import ExtractionResult

logger = logging.getLogger(__name__)


class ClientPreferenceRepository(BaseRepository[Dict[str, Any]]):
    """
    Durable store of client preferences.

    Document fields:
    - user_id, client_name: compound identity (unique index)
    - tone, industry, preferred_style, key_terms: learned preferences
    - contract_count: number of contracts analyzed, only ever increments
    - created_at, updated_at
    """

    collection_name = "client_preferences"

    @staticmethod
    def _key(user_id: str, client_name: str) -> Dict[str, str]:
        return {"user_id": user_id, "client_name": client_name}

    def get(self, user_id: str, client_name: str) -> Optional[Dict[str, Any]]:
        """Get the preference record for a client, or None."""
        return self.find_one(self._key(user_id, client_name))

    def upsert(
        self,
        user_id: str,
        client_name: str,
        patch: ExtractionResult
    ) -> Dict[str, Any]:
        """
        Merge an extraction into the client's record in one atomic update.

        Creates the record with contract_count = 1 if absent. Otherwise
        non-empty extracted fields overwrite the stored ones, empty ones are
        left alone, and contract_count is incremented.

        Returns:
            The record after the update
        """
        now = datetime.utcnow()
        fields = patch.non_empty_fields()

        on_insert = {"created_at": now}
        for column, default in (
            ("tone", None),
            ("industry", None),
            ("preferred_style", None),
            ("key_terms", []),
        ):
            if column not in fields:
                on_insert[column] = default

        update = {
            "$set": {**fields, "updated_at": now},
            "$inc": {"contract_count": 1},
            "$setOnInsert": on_insert,
        }

        try:
            doc = self._find_and_upsert(user_id, client_name, update)
        except DuplicateKeyError:
            # Lost an insert race with a concurrent writer; the row exists now
            doc = self._find_and_upsert(user_id, client_name, update)

        logger.info(
            f"Updated client preference for '{client_name}' "
            f"(user {user_id}, contracts analyzed: {doc.get('contract_count')})"
        )
        return self._clean(doc)

    def _find_and_upsert(self, user_id: str, client_name: str, update: Dict[str, Any]):
        return self.collection.find_one_and_update(
            self._key(user_id, client_name),
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, user_id: str, client_name: str) -> bool:
        """Delete a client's record. Deleting a missing record is not an error."""
        deleted = self.delete_one(self._key(user_id, client_name))
        if deleted:
            logger.info(f"Deleted client preference for '{client_name}' (user {user_id})")
        return deleted

    def list_all(self, user_id: str, limit: int = 500) -> List[Dict[str, Any]]:
        """All of a user's client records, most-analyzed clients first."""
        return self.find_many(
            {"user_id": user_id},
            limit=limit,
            sort=[("contract_count", DESCENDING), ("client_name", 1)]
        )

    def stats(self, user_id: str) -> Dict[str, Any]:
        """Summary figures for the memory center, over all of the user's clients."""
        pipeline = [
            {"$match": {"user_id": user_id}},
            {"$group": {
                "_id": None,
                "total_clients": {"$sum": 1},
                "total_contracts": {"$sum": "$contract_count"},
            }},
        ]
        totals = next(iter(self.collection.aggregate(pipeline)), None) or {}
        industries = self.collection.distinct(
            "industry",
            {"user_id": user_id, "industry": {"$nin": [None, ""]}}
        )
        return {
            "total_clients": totals.get("total_clients", 0),
            "total_contracts": totals.get("total_contracts", 0),
            "industries": sorted(industries),
        }
