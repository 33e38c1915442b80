"""
Contract Repository

Generated contracts saved as drafts, plus the AI memory extraction log.
"""
import logging
import uuid
from typing import Optional, List, Dict, Any
from datetime import datetime
from pymongo import DESCENDING

from app.infra.mongodb.base_repository import BaseRepository
from app.domain.constants import DRAFT_STATUS, MEMORY_EXTRACTION_TYPE

logger = logging.getLogger(__name__)


class ContractRepository(BaseRepository[Dict[str, Any]]):
    """Repository for generated contracts (drafts)."""

    collection_name = "contracts"

    def save_draft(
        self,
        user_id: str,
        contract_type: str,
        client_name: str,
        freelancer_name: str,
        project_scope: str,
        budget: str,
        timeline: str,
        contract_text: str,
        source: str,
        memory_applied: bool = False
    ) -> str:
        """
        Save a generated contract as a draft.

        Returns:
            The new contract_id
        """
        contract_id = f"ctr_{uuid.uuid4().hex[:12]}"

        self.insert_one({
            "contract_id": contract_id,
            "user_id": user_id,
            "contract_type": contract_type,
            "client_name": client_name,
            "freelancer_name": freelancer_name,
            "project_scope": project_scope,
            "budget": budget,
            "timeline": timeline,
            "contract_text": contract_text,
            "status": DRAFT_STATUS,
            "source": source,
            "memory_applied": memory_applied,
            "created_at": datetime.utcnow()
        })
        logger.info(f"Saved contract draft {contract_id} for client '{client_name}'")
        return contract_id

    def get_for_user(self, user_id: str, contract_id: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"user_id": user_id, "contract_id": contract_id})

    def list_by_user(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        """A user's contracts, newest first."""
        return self.find_many(
            {"user_id": user_id},
            limit=limit,
            sort=[("created_at", DESCENDING)]
        )


class MemoryLogRepository(BaseRepository[Dict[str, Any]]):
    """Audit trail of preference extractions."""

    collection_name = "ai_memory_logs"

    def log_extraction(
        self,
        user_id: str,
        contract_id: Optional[str],
        client_name: str,
        extracted_data: Dict[str, Any],
        extraction_type: str = MEMORY_EXTRACTION_TYPE
    ) -> str:
        return self.insert_one({
            "user_id": user_id,
            "contract_id": contract_id,
            "client_name": client_name,
            "extraction_type": extraction_type,
            "extracted_data": extracted_data,
            "created_at": datetime.utcnow()
        })

    def list_recent(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        return self.find_many(
            {"user_id": user_id},
            limit=limit,
            sort=[("created_at", DESCENDING)]
        )
