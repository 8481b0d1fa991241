from src.research_hub.services.application_service import ApplicationService
from src.research_hub.services.attachment_service import AttachmentService
from src.research_hub.services.blog_service import BlogService
from src.research_hub.services.identity_service import IdentityService
from src.research_hub.services.oauth_client import OAuthClient
from src.research_hub.services.posting_service import PostingService

__all__ = [
    "ApplicationService",
    "AttachmentService",
    "BlogService",
    "IdentityService",
    "OAuthClient",
    "PostingService",
]
