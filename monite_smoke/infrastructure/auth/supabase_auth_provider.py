"""Supabase auth adapter — implements the AuthProvider interface.

Wraps the async ``supabase`` client created with the privileged
service-role key. Sessions are neither persisted nor refreshed: the
client is used once per run and then closed.
"""

import logging
from typing import Any

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from monite_smoke.application.interfaces.auth_provider import AuthProvider
from monite_smoke.domain.entities import Identity
from monite_smoke.domain.exceptions import AuthProviderError

logger = logging.getLogger(__name__)


class SupabaseAuthProvider(AuthProvider):
    """Signs in and creates users via Supabase Auth."""

    def __init__(self, client: AsyncClient):
        self._client = client

    @classmethod
    async def connect(cls, url: str, service_role_key: str) -> "SupabaseAuthProvider":
        """Build a stateless admin client for one-shot use."""
        client = await acreate_client(
            url,
            service_role_key,
            options=AsyncClientOptions(
                auto_refresh_token=False,
                persist_session=False,
            ),
        )
        logger.debug("Supabase admin client created for %s", url)
        return cls(client)

    async def aclose(self) -> None:
        """Close the HTTP session held by the auth client."""
        await self._client.auth.close()

    @property
    def provider_name(self) -> str:
        return "supabase"

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        try:
            response = await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as exc:
            # AuthError, transport errors and anything else the SDK raises
            raise AuthProviderError("sign_in", _error_message(exc)) from exc

        return self._to_identity("sign_in", response, email)

    async def create_user(
        self, email: str, password: str, *, email_confirm: bool = True
    ) -> Identity:
        try:
            response = await self._client.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": email_confirm,
                }
            )
        except Exception as exc:
            raise AuthProviderError("create_user", _error_message(exc)) from exc

        return self._to_identity("create_user", response, email)

    @staticmethod
    def _to_identity(operation: str, response: Any, email: str) -> Identity:
        """Extract the user from an auth response, rejecting empty ones."""
        user = getattr(response, "user", None)
        user_id = getattr(user, "id", None)
        if not user_id:
            raise AuthProviderError(operation, "Response contained no user")
        return Identity(user_id=str(user_id), email=getattr(user, "email", None) or email)


def _error_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__
