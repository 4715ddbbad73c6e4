"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IActivityRepository,
    IAssignmentRepository,
    ISiteRepository,
    IUserRepository,
)
from app.application.interfaces.services import IPrincipalProvider, IUnitOfWork

__all__ = [
    "IActivityRepository",
    "IAssignmentRepository",
    "IPrincipalProvider",
    "ISiteRepository",
    "IUnitOfWork",
    "IUserRepository",
]
