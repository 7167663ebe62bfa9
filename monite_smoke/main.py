"""Smoke test entry point.

Loads settings, configures logging, runs the entity lifecycle against the
live Monite and Supabase backends, and exits 0 on success or 1 on any
failure.

Examples
    $ monite-smoke
    $ monite-smoke --env-file .env.local --log-level DEBUG
    $ python -m monite_smoke.main --cleanup-on-failure
"""

import asyncio
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from monite_smoke.application.interfaces import AuthProvider, EntityService
from monite_smoke.config import Settings, get_settings
from monite_smoke.domain.entities import SmokeTestResult
from monite_smoke.domain.exceptions import SmokeTestError
from monite_smoke.infrastructure.dependencies import (
    build_auth_provider,
    build_monite_client,
    build_smoke_test_service,
)
from monite_smoke.infrastructure.logging.colored_logger import SmokeStage, StepLogger
from monite_smoke.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)
slog = StepLogger("monite_smoke")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


async def run_smoke_test(
    settings: Settings,
    *,
    entity_service: EntityService | None = None,
    auth_provider: AuthProvider | None = None,
) -> SmokeTestResult:
    """Run one smoke test, building any collaborator that was not injected.

    Clients created here are closed before returning.
    """
    owned_client = None
    owned_auth = None
    if entity_service is None:
        owned_client = build_monite_client(settings)
        entity_service = owned_client

    try:
        if auth_provider is None:
            owned_auth = await build_auth_provider(settings)
            auth_provider = owned_auth
        service = build_smoke_test_service(settings, entity_service, auth_provider)
        return await service.run()
    finally:
        if owned_auth is not None:
            await owned_auth.aclose()
        if owned_client is not None:
            await owned_client.aclose()


def load_settings(
    env_file: Path | None = None,
    *,
    log_level: str | None = None,
    cleanup_on_failure: bool | None = None,
) -> Settings:
    """Build Settings once, applying command-line overrides."""
    settings = Settings(_env_file=env_file) if env_file else get_settings()

    overrides: dict[str, object] = {}
    if log_level:
        overrides["log_level"] = log_level.upper()
        overrides["log_level_smoke"] = log_level.upper()
    if cleanup_on_failure is not None:
        overrides["cleanup_on_failure"] = cleanup_on_failure
    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


def main(
    env_file: Path | None = None,
    *,
    log_level: str | None = None,
    cleanup_on_failure: bool | None = None,
) -> int:
    """Run the smoke test and return the process exit code."""
    try:
        settings = load_settings(
            env_file, log_level=log_level, cleanup_on_failure=cleanup_on_failure
        )
    except ValidationError as exc:
        logging.basicConfig()
        logger.error("Invalid settings: %s", exc)
        return 1

    setup_logging(settings)
    slog.step_start(SmokeStage.CONFIG, "Loading configuration")
    slog.detail("Monite API", url=settings.monite_api_url)
    slog.detail("Supabase", url=settings.supabase_url or "<unset>")

    try:
        settings.require_credentials()
    except SmokeTestError as exc:
        slog.step_error(SmokeStage.CONFIG, "Configuration incomplete", error=exc)
        return 1

    try:
        result = asyncio.run(run_smoke_test(settings))
    except Exception as exc:
        slog.step_error(SmokeStage.ERROR, "Test failed during setup", error=exc, exc_info=True)
        return 1

    if not result.ok:
        failed = result.failed_step
        logger.error(
            "Smoke test failed at step '%s' (entity_id=%s)",
            failed.value if failed else "unknown",
            result.entity_id,
        )
    return result.exit_code


@click.command(help="Run the Monite entity lifecycle smoke test.")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Env file to load instead of the default .env/.env.local lookup.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the root and smoke-test log level.",
)
@click.option(
    "--cleanup-on-failure/--no-cleanup-on-failure",
    default=None,
    help="Delete the created entity if a later step fails.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    env_file: Path | None,
    log_level: str | None,
    cleanup_on_failure: bool | None,
) -> None:
    ctx.exit(main(env_file, log_level=log_level, cleanup_on_failure=cleanup_on_failure))


if __name__ == "__main__":
    cli()
