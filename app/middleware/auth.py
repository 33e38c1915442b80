"""
API Key Auth Middleware

- super_admin: Platform admin (env var ADMIN_API_KEY), may manage users
- user: A freelancer account; every memory/contract query is scoped to its user_id
"""
from typing import Optional
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader
from app.config import settings
from app.dependencies import get_user_repo
from app.infra.mongodb.repositories import UserRepository

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_master_key() -> str:
    return settings.ADMIN_API_KEY or "dev-key"


async def verify_user(
    api_key: Optional[str] = Security(api_key_header),
    user_repo: UserRepository = Depends(get_user_repo)
) -> dict:
    """
    Verify API key and return user context.

    Returns dict with: user_id, name, email
    """
    if not api_key:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "API key required")

    user = user_repo.get_by_api_key(api_key)
    if not user:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Invalid API key")

    return {
        "user_id": user["user_id"],
        "name": user.get("name", "User"),
        "email": user.get("email"),
    }


async def verify_super_admin(api_key: Optional[str] = Security(api_key_header)) -> dict:
    """Only platform super admin (master key from .env)."""
    if not api_key or api_key != get_master_key():
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Super Admin access required")
    return {"role": "super_admin", "name": "Super Admin", "user_id": None}


# Alias used by route modules
get_current_user = verify_user
