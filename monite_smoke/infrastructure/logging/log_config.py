"""Centralized logging configuration.

Applies per-category log levels from Settings so that noisy loggers
(e.g. httpx/httpcore request lines) can be silenced without affecting
the step-by-step smoke test output.

Usage:
    from monite_smoke.infrastructure.logging.log_config import setup_logging
    setup_logging(settings)   # Call once at startup
"""

import logging
import sys

from monite_smoke.config import Settings


# ── Logger-name → Settings-field mapping ────────────────────────────
#
# Each entry maps one or more Python logger names to a Settings field.
# When setup_logging() runs, it sets the level of each listed logger
# to the value of the corresponding setting.

_CATEGORY_MAP: dict[str, list[str]] = {
    "log_level_http": [
        "httpx",
        "httpcore",
        "hpack",
    ],
    "log_level_monite": [
        "monite_smoke.infrastructure.monite",
    ],
    "log_level_supabase": [
        "monite_smoke.infrastructure.auth",
        "supabase",
        "gotrue",
        "supabase_auth",
    ],
    "log_level_smoke": [
        "monite_smoke.application",
        "IdentityService",
        "SmokeTestService",
    ],
}


def setup_logging(settings: Settings) -> None:
    """Configure Python logging levels from the given settings.

    Call this once before the run starts.
    """
    root_level = _parse_level(settings.log_level)

    # ── Root logger ────────────────────────────────────────────────
    root = logging.getLogger()
    root.setLevel(root_level)

    # Ensure at least one handler exists (pytest or a host process may
    # already have installed one).
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s — %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        root.addHandler(handler)

    # ── Per-category loggers ───────────────────────────────────────
    for settings_field, logger_names in _CATEGORY_MAP.items():
        raw_level: str = getattr(settings, settings_field, "INFO")
        level = _parse_level(raw_level)

        for name in logger_names:
            logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured — root=%s, http=%s, monite=%s, supabase=%s, smoke=%s",
        settings.log_level,
        settings.log_level_http,
        settings.log_level_monite,
        settings.log_level_supabase,
        settings.log_level_smoke,
    )


def _parse_level(raw: str) -> int:
    """Convert a level name string to a logging constant, defaulting to INFO."""
    numeric = getattr(logging, raw.upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO
