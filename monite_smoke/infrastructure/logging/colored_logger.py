"""Colored step logger — ANSI-colored console logging for the smoke test run.

Provides a StepLogger with color-coded output per lifecycle step,
making it easy to follow a run in the terminal.

Color scheme:
    🟢 Green   — Create / Complete
    🟡 Yellow  — Auth
    🔵 Blue    — Retrieve / List
    🟣 Magenta — Update
    🟠 Cyan    — Delete / Verify
    🔴 Red     — Errors
    ⚪ Gray    — Details / Payloads
"""

import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


# ── Stage Definitions ────────────────────────────────────────────────

class SmokeStage:
    """Predefined smoke test stages with colors and icons."""

    CONFIG = ("CONFIG", _Colors.WHITE, "⚙️")
    AUTH = ("AUTH", _Colors.YELLOW, "🔑")
    CREATE = ("CREATE", _Colors.GREEN, "➕")
    RETRIEVE = ("RETRIEVE", _Colors.BLUE, "🔎")
    LIST = ("LIST", _Colors.BLUE, "📋")
    UPDATE = ("UPDATE", _Colors.MAGENTA, "✏️")
    DELETE = ("DELETE", _Colors.CYAN, "🗑️")
    VERIFY = ("VERIFY", _Colors.CYAN, "✔️")
    CLEANUP = ("CLEANUP", _Colors.GRAY, "🧹")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


# ── StepLogger ───────────────────────────────────────────────────────

class StepLogger:
    """Color-coded logger for smoke test steps.

    Usage:
        log = StepLogger("SmokeTestService")
        log.step_start(SmokeStage.CREATE, "Creating entity")
        log.payload("Entity data", payload)
        log.step_complete(SmokeStage.CREATE, "Entity created", id=entity.id)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += f" {_Colors.GRAY}({_format_kwargs(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += f" {_Colors.GRAY}({_format_kwargs(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    def step_error(
        self,
        stage: tuple[str, str, str],
        message: str,
        error: BaseException | None = None,
        *,
        exc_info: bool = False,
    ) -> None:
        """Log a step error in red, optionally with the traceback."""
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted, exc_info=error if exc_info else None)

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        if kwargs:
            formatted += f" {_Colors.DIM}({_format_kwargs(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    def payload(self, title: str, data: Any) -> None:
        """Log a JSON payload at DEBUG level, pretty-printed."""
        if not self._logger.isEnabledFor(logging.DEBUG):
            return
        body = json.dumps(data, indent=2, default=str, ensure_ascii=False)
        self._logger.debug(f"   {_Colors.GRAY}├─ {title}:\n{body}{_Colors.RESET}")

    def separator(self, title: str = "") -> None:
        if title:
            self._logger.info(
                f"{_Colors.GRAY}{'─' * 10} {title} {'─' * max(0, 50 - len(title))}{_Colors.RESET}"
            )
        else:
            self._logger.info(f"{_Colors.GRAY}{'─' * 60}{_Colors.RESET}")

    @asynccontextmanager
    async def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Async context manager that logs start/end with elapsed time.

        The elapsed time is yielded as a one-element list so callers can
        read it after the block finishes.

        Usage:
            async with log.timed_step(SmokeStage.LIST, "Listing entities") as timer:
                entities = await service.list_entities()
        """
        self.step_start(stage, message, **kwargs)
        timer = [0.0]
        start = time.perf_counter()
        try:
            yield timer
        except Exception as e:
            timer[0] = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {timer[0]:.2f}s", error=e)
            raise
        else:
            timer[0] = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {timer[0]:.2f}s")


def _format_kwargs(kwargs: dict[str, Any]) -> str:
    return " | ".join(f"{k}={v}" for k, v in kwargs.items())
