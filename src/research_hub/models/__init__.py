"""Model exports.

Import from here: `from src.research_hub.models import Posting, UserProfile`
"""

from src.research_hub.models.application import Application
from src.research_hub.models.auth import RefreshToken
from src.research_hub.models.blog import BlogPost
from src.research_hub.models.enums import (
    ApplicationStatus,
    AttachmentKind,
    PostingStatus,
    Role,
)
from src.research_hub.models.posting import Posting
from src.research_hub.models.user import UserProfile

__all__ = [
    # Enums
    "ApplicationStatus",
    "AttachmentKind",
    "PostingStatus",
    "Role",
    # Models
    "Application",
    "BlogPost",
    "Posting",
    "RefreshToken",
    "UserProfile",
]
