"""Application service that resolves the test identity.

Signs in with the test credentials and, when that fails for any reason,
creates the account with the email already confirmed. The outcome is
returned as an IdentityResolution instead of being signalled through
exceptions, so the fallback path is an ordinary, testable result.
"""

import logging

from monite_smoke.application.interfaces import AuthProvider
from monite_smoke.domain.entities import Identity, IdentityResolution
from monite_smoke.domain.exceptions import AuthProviderError
from monite_smoke.infrastructure.logging.colored_logger import SmokeStage, StepLogger

logger = logging.getLogger(__name__)
slog = StepLogger("IdentityService")


class IdentityService:
    """Resolves a test identity through an AuthProvider (DI)."""

    def __init__(self, auth_provider: AuthProvider):
        self._auth_provider = auth_provider

    async def resolve(self, email: str, password: str) -> IdentityResolution:
        slog.step_start(SmokeStage.AUTH, "Attempting to sign in", email=email)
        try:
            identity = _require_user_id(
                await self._auth_provider.sign_in_with_password(email, password),
                "sign_in",
            )
        except AuthProviderError as sign_in_error:
            slog.detail(f"Sign in failed: {sign_in_error.message}")
        else:
            slog.step_complete(SmokeStage.AUTH, "Signed in", user_id=identity.user_id)
            return IdentityResolution.signed_in(identity)

        slog.step_start(SmokeStage.AUTH, "Creating test user", email=email)
        try:
            identity = _require_user_id(
                await self._auth_provider.create_user(email, password, email_confirm=True),
                "create_user",
            )
        except AuthProviderError as create_error:
            slog.step_error(SmokeStage.AUTH, "Failed to create user", error=create_error)
            return IdentityResolution.failed(create_error)

        slog.step_complete(SmokeStage.AUTH, "Created test user", user_id=identity.user_id)
        return IdentityResolution.created(identity)


def _require_user_id(identity: Identity, operation: str) -> Identity:
    if not identity.user_id:
        raise AuthProviderError(operation, "Empty user id")
    return identity
