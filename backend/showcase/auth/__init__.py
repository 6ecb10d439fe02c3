"""Auth module exports."""
from showcase.auth.jwt import (
    create_access_token,
    verify_token,
    get_current_admin,
)

__all__ = [
    "create_access_token",
    "verify_token",
    "get_current_admin",
]
