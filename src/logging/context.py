# src/logging/context.py — v2
"""Contextual logging support — attach the analyzed file and orchestrator state to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging — set per analysis invocation.
_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)
_model: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    file_path: str | None = None
    model: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        file_path=_file_path.get(),
        model=_model.get(),
        step=_step.get(),
    )


def set_analysis_context(file_path: str, model: str | None = None) -> None:
    """Set invocation-level context (called once per analyzed file)."""
    _file_path.set(file_path)
    _model.set(model)
    _step.set(None)


def set_step(step: str | None) -> None:
    """Record the orchestrator state the current invocation is in."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _file_path.set(None)
    _model.set(None)
    _step.set(None)
