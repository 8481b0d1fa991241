"""Repository layer - data access abstraction."""

from src.research_hub.repositories.application import ApplicationRepository
from src.research_hub.repositories.base import BaseRepository
from src.research_hub.repositories.blog import BlogPostRepository
from src.research_hub.repositories.posting import PostingRepository
from src.research_hub.repositories.token import RefreshTokenRepository
from src.research_hub.repositories.user import UserRepository

__all__ = [
    "ApplicationRepository",
    "BaseRepository",
    "BlogPostRepository",
    "PostingRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
