"""Security: JWT creation and verification."""

from app.infrastructure.security.jwt import (
    create_access_token,
    create_principal_token,
    verify_token,
)

__all__ = [
    "create_access_token",
    "create_principal_token",
    "verify_token",
]
