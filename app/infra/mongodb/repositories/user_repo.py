"""
User Repository

API-key authenticated users. Keys are stored as sha256 hashes only.
"""
import logging
import uuid
import hashlib
from typing import Optional, Dict, Any
from datetime import datetime

from app.infra.mongodb.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[Dict[str, Any]]):
    """Repository for users."""

    collection_name = "users"

    @staticmethod
    def hash_key(key: str) -> str:
        """Hash API key for secure storage."""
        return hashlib.sha256(key.encode()).hexdigest()

    def create(self, email: str, name: str) -> Dict[str, Any]:
        """Create a new user with auto-generated API key."""
        user_id = f"usr_{uuid.uuid4().hex[:12]}"
        api_key = f"pfk_{uuid.uuid4().hex}"  # pfk = proposalfast key

        doc = {
            "user_id": user_id,
            "email": email.lower(),
            "name": name,
            "api_key_hash": self.hash_key(api_key),
            "api_key_prefix": api_key[:8],  # For identification
            "is_active": True,
            "created_at": datetime.utcnow(),
            "last_login": None
        }
        self.insert_one(doc)
        logger.info(f"Created user: {user_id} ({email})")

        # Return with unhashed key (only time it's visible)
        return {
            "user_id": user_id,
            "api_key": api_key,
            "email": email,
            "name": name,
        }

    def get_by_api_key(self, api_key: str) -> Optional[Dict[str, Any]]:
        """Authenticate user by API key."""
        user = self.find_one({"api_key_hash": self.hash_key(api_key), "is_active": True})
        if user:
            self.collection.update_one(
                {"user_id": user["user_id"]},
                {"$set": {"last_login": datetime.utcnow()}}
            )
        return user
