import logging
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from monite_smoke.domain.exceptions import ConfigurationError

_config_logger = logging.getLogger(__name__)

_PROJECT_DIR = Path(__file__).resolve().parents[1]
# Later files win: any .env.local overrides any .env
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
    _PROJECT_DIR / ".env.local",
    ".env.local",
)
_REQUIRED_FIELDS = (
    "monite_client_id",
    "monite_client_secret",
    "supabase_url",
    "supabase_service_role_key",
)


class Settings(BaseSettings):
    """Smoke test settings loaded from environment variables and env files."""

    # Monite entity API
    monite_api_url: str = "https://api.sandbox.monite.com"
    monite_client_id: str = ""
    monite_client_secret: str = ""
    monite_api_version: str = "2024-01-31"
    monite_timeout: float = 30.0

    # Supabase auth backend
    supabase_url: str = Field(
        "",
        validation_alias=AliasChoices("supabase_url", "next_public_supabase_local_url"),
    )
    supabase_service_role_key: str = ""

    # Test fixture
    test_user_email: str = "test@wonderpaid.com"
    test_user_password: str = "Test123!"
    test_tax_id: str = "123456789"
    cleanup_on_failure: bool = False

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_monite: str = "INFO"           # Monite entity client
    log_level_supabase: str = "INFO"         # Supabase auth adapter + SDK
    log_level_smoke: str = "INFO"            # Step-by-step smoke test output

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def missing_credentials(self) -> list[str]:
        """Names of required settings that are empty."""
        return [name for name in _REQUIRED_FIELDS if not str(getattr(self, name)).strip()]

    def require_credentials(self) -> None:
        """Raise ConfigurationError if any collaborator credential is missing."""
        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(missing)
        _config_logger.debug(
            "Settings loaded — monite=%s, supabase=%s",
            self.monite_api_url,
            self.supabase_url,
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance, read from the env files once."""
    return Settings()
