"""
Admin Routes

Super admin only: provision freelancer accounts and their API keys.
"""
import logging
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from app.dependencies import get_user_repo
from app.infra.mongodb.repositories import UserRepository
from app.middleware.auth import verify_super_admin

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


class CreateUserRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=1, max_length=100)


@router.post("/users", status_code=201)
async def create_user(
    request: CreateUserRequest,
    _: dict = Depends(verify_super_admin),
    repo: UserRepository = Depends(get_user_repo)
):
    """Create a user. The API key is only returned here."""
    try:
        user = repo.create(email=request.email, name=request.name)
        return {"success": True, "user": user}
    except Exception as e:
        logger.error(f"Error creating user: {e}")
        raise HTTPException(500, str(e))
