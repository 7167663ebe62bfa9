"""Dependency wiring — builds infrastructure adapters from Settings."""

from monite_smoke.application.interfaces import AuthProvider, EntityService
from monite_smoke.application.services import IdentityService, SmokeTestService
from monite_smoke.config import Settings
from monite_smoke.infrastructure.auth import SupabaseAuthProvider
from monite_smoke.infrastructure.monite import MoniteClient


def build_monite_client(settings: Settings) -> MoniteClient:
    """Provides a MoniteClient configured from settings."""
    return MoniteClient(
        client_id=settings.monite_client_id,
        client_secret=settings.monite_client_secret,
        base_url=settings.monite_api_url,
        api_version=settings.monite_api_version,
        timeout=settings.monite_timeout,
    )


async def build_auth_provider(settings: Settings) -> SupabaseAuthProvider:
    """Provides a stateless Supabase admin auth provider."""
    return await SupabaseAuthProvider.connect(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )


def build_smoke_test_service(
    settings: Settings,
    entity_service: EntityService,
    auth_provider: AuthProvider,
) -> SmokeTestService:
    """Provides a SmokeTestService wired to the given collaborators."""
    return SmokeTestService(
        entity_service,
        IdentityService(auth_provider),
        email=settings.test_user_email,
        password=settings.test_user_password,
        tax_id=settings.test_tax_id,
        cleanup_on_failure=settings.cleanup_on_failure,
    )
