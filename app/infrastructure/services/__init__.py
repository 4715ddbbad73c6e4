"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.principal_resolver import JwtPrincipalProvider

__all__ = ["JwtPrincipalProvider"]
