from src.research_hub.schemas.application import (
    ApplicationCreate,
    ApplicationRead,
    ApplicationStatusUpdate,
)
from src.research_hub.schemas.attachment import AttachmentRead
from src.research_hub.schemas.auth import (
    CompleteSetupRequest,
    LoginRequest,
    RefreshRequest,
    SignUpRequest,
    SignUpResponse,
    TokenPair,
)
from src.research_hub.schemas.blog import BlogPostCreate, BlogPostRead, BlogPostUpdate
from src.research_hub.schemas.posting import PostingCreate, PostingRead, PostingUpdate
from src.research_hub.schemas.user import ProfileRead, ProfileUpdate

__all__ = [
    # Application
    "ApplicationCreate",
    "ApplicationRead",
    "ApplicationStatusUpdate",
    # Attachment
    "AttachmentRead",
    # Auth
    "CompleteSetupRequest",
    "LoginRequest",
    "RefreshRequest",
    "SignUpRequest",
    "SignUpResponse",
    "TokenPair",
    # Blog
    "BlogPostCreate",
    "BlogPostRead",
    "BlogPostUpdate",
    # Posting
    "PostingCreate",
    "PostingRead",
    "PostingUpdate",
    # User
    "ProfileRead",
    "ProfileUpdate",
]
