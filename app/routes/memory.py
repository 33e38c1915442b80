"""
AI Memory Center Routes

Read and delete the client preferences learned from generated contracts.
There is no write endpoint: records only change through contract generation.
"""
import logging
from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel
from typing import List, Dict, Any

from app.dependencies import get_preference_repo, get_memory_log_repo
from app.infra.mongodb.repositories import ClientPreferenceRepository, MemoryLogRepository
from app.middleware.auth import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/memory", tags=["memory"])


# ===================== RESPONSE MODELS =====================

class PreferenceListResponse(BaseModel):
    success: bool
    preferences: List[Dict[str, Any]]
    count: int


class MemoryStatsResponse(BaseModel):
    success: bool
    total_clients: int
    total_contracts: int
    industries: List[str]


# ===================== ENDPOINTS =====================

@router.get("/clients", response_model=PreferenceListResponse)
async def list_client_preferences(
    user: dict = Depends(get_current_user),
    repo: ClientPreferenceRepository = Depends(get_preference_repo)
):
    """All remembered clients, most contracts first."""
    try:
        preferences = repo.list_all(user["user_id"])
        return PreferenceListResponse(success=True, preferences=preferences, count=len(preferences))
    except Exception as e:
        logger.error(f"Error loading client preferences: {e}")
        raise HTTPException(500, "Failed to load client memory")


@router.get("/clients/{client_name:path}")
async def get_client_preference(
    client_name: str,
    user: dict = Depends(get_current_user),
    repo: ClientPreferenceRepository = Depends(get_preference_repo)
):
    """Preferences remembered for one client (exact name match, may contain "/")."""
    try:
        preference = repo.get(user["user_id"], client_name)
        if not preference:
            raise HTTPException(404, "No memory for this client")
        return {"success": True, "preference": preference}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching client preference: {e}")
        raise HTTPException(500, str(e))


@router.delete("/clients/{client_name:path}")
async def delete_client_preference(
    client_name: str,
    user: dict = Depends(get_current_user),
    repo: ClientPreferenceRepository = Depends(get_preference_repo)
):
    """Forget a client. Succeeds even if nothing was remembered."""
    try:
        deleted = repo.delete(user["user_id"], client_name)
        return {"success": True, "deleted": deleted}
    except Exception as e:
        logger.error(f"Error deleting client preference: {e}")
        raise HTTPException(500, str(e))


@router.get("/stats", response_model=MemoryStatsResponse)
async def memory_stats(
    user: dict = Depends(get_current_user),
    repo: ClientPreferenceRepository = Depends(get_preference_repo)
):
    try:
        return MemoryStatsResponse(success=True, **repo.stats(user["user_id"]))
    except Exception as e:
        logger.error(f"Error computing memory stats: {e}")
        raise HTTPException(500, str(e))


@router.get("/logs")
async def memory_logs(
    limit: int = Query(20, ge=1, le=100),
    user: dict = Depends(get_current_user),
    repo: MemoryLogRepository = Depends(get_memory_log_repo)
):
    """Recent preference extractions."""
    try:
        logs = repo.list_recent(user["user_id"], limit=limit)
        return {"success": True, "logs": logs, "count": len(logs)}
    except Exception as e:
        logger.error(f"Error loading memory logs: {e}")
        raise HTTPException(500, str(e))
