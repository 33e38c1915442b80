"""
Middleware modules for authentication and security
"""

from app.middleware.auth import (
    verify_user,
    verify_super_admin,
    get_current_user,
    api_key_header,
)

__all__ = [
    "verify_user",
    "verify_super_admin",
    "get_current_user",
    "api_key_header",
]
