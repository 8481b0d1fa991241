"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenience.
"""

# Auth
from src.research_hub.api.dependencies.auth import (
    CurrentProfile,
    OptionalProfile,
    get_current_profile,
    get_optional_profile,
)

# Database
from src.research_hub.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.research_hub.api.dependencies.repositories import (
    ApplicationRepo,
    BlogRepo,
    PostingRepo,
    TokenRepo,
    UserRepo,
)

# Services
from src.research_hub.api.dependencies.services import (
    ApplicationServiceDep,
    AttachmentServiceDep,
    BlogServiceDep,
    IdentityServiceDep,
    PostingServiceDep,
)

# Collaborators
from src.research_hub.api.dependencies.storage import OAuth, Store, get_oauth, get_store

__all__ = [
    # Auth
    "CurrentProfile",
    "OptionalProfile",
    "get_current_profile",
    "get_optional_profile",
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "ApplicationRepo",
    "BlogRepo",
    "PostingRepo",
    "TokenRepo",
    "UserRepo",
    # Services
    "ApplicationServiceDep",
    "AttachmentServiceDep",
    "BlogServiceDep",
    "IdentityServiceDep",
    "PostingServiceDep",
    # Collaborators
    "OAuth",
    "Store",
    "get_oauth",
    "get_store",
]
