"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserProfileFactory, PostingFactory, ...
"""

from tests.factories.application import ApplicationFactory
from tests.factories.base import BaseFactory, utc_now
from tests.factories.blog import BlogPostFactory
from tests.factories.posting import PostingFactory
from tests.factories.user import (
    DEFAULT_TEST_PASSWORD,
    INSTITUTION_DOMAIN,
    UserProfileFactory,
)

__all__ = [
    # Base
    "BaseFactory",
    "utc_now",
    # Profiles
    "DEFAULT_TEST_PASSWORD",
    "INSTITUTION_DOMAIN",
    "UserProfileFactory",
    # Content
    "ApplicationFactory",
    "BlogPostFactory",
    "PostingFactory",
]
