"""Collaborator dependencies: object store and OAuth provider.

Tests replace these through `app.dependency_overrides`.
"""

from typing import Annotated

from fastapi import Depends

from src.research_hub.services.oauth_client import OAuthClient, get_oauth_client
from src.research_hub.storage import ObjectStore, get_object_store


def get_store() -> ObjectStore:
    return get_object_store()


def get_oauth() -> OAuthClient:
    return get_oauth_client()


Store = Annotated[ObjectStore, Depends(get_store)]
OAuth = Annotated[OAuthClient, Depends(get_oauth)]
