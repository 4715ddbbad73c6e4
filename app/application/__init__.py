"""Application layer: ports and policy services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, unit of work,
principal provider).
"""

from app.application.interfaces import (
    IActivityRepository,
    IAssignmentRepository,
    IPrincipalProvider,
    ISiteRepository,
    IUnitOfWork,
    IUserRepository,
)
from app.application.services import AssignmentIndex, PolicyService

__all__ = [
    "AssignmentIndex",
    "IActivityRepository",
    "IAssignmentRepository",
    "IPrincipalProvider",
    "ISiteRepository",
    "IUnitOfWork",
    "IUserRepository",
    "PolicyService",
]
