"""Authorization-code exchange with the external identity provider."""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

import httpx

from src.research_hub.core.config import get_settings
from src.research_hub.core.logging import get_logger

logger = get_logger(__name__)


class OAuthExchangeError(Exception):
    """The provider rejected the code or could not be reached."""


@dataclass(frozen=True)
class OAuthIdentity:
    """Identity returned by the provider after a successful exchange."""

    subject: str
    email: str
    provider: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class OAuthClient:
    """Exchanges an authorization code for the provider's user record."""

    def __init__(
        self,
        token_url: str,
        client_id: str | None = None,
        client_secret: str | None = None,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self._transport = transport

    async def exchange_code(self, code: str) -> OAuthIdentity:
        payload: dict[str, Any] = {"auth_code": code, "code": code}
        if self.client_id:
            payload["client_id"] = self.client_id
        if self.client_secret:
            payload["client_secret"] = self.client_secret

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.token_url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("OAuth provider unreachable", error=str(e))
            raise OAuthExchangeError("Identity provider unreachable") from e

        if response.status_code >= 400:
            raise OAuthExchangeError(_error_message(response))

        try:
            body = response.json()
        except ValueError as e:
            raise OAuthExchangeError("Identity provider returned invalid JSON") from e

        user = body.get("user") if isinstance(body, dict) else None
        if not isinstance(user, dict) or not user.get("id") or not user.get("email"):
            raise OAuthExchangeError("Identity provider returned no user")

        app_metadata = user.get("app_metadata") or {}
        return OAuthIdentity(
            subject=str(user["id"]),
            email=str(user["email"]).strip().lower(),
            provider=app_metadata.get("provider"),
            metadata=user.get("user_metadata") or {},
        )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Identity provider error ({response.status_code})"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"Identity provider error ({response.status_code})"


@lru_cache
def get_oauth_client() -> OAuthClient:
    settings = get_settings()
    return OAuthClient(
        token_url=settings.oauth_token_url,
        client_id=settings.oauth_client_id,
        client_secret=settings.oauth_client_secret,
        timeout=settings.oauth_timeout_seconds,
    )
