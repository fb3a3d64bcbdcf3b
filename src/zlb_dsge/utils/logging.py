"""Logging helpers for consistent instrumentation."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO", rich_tracebacks: bool = True) -> None:
    """Configure the root logger with optional rich tracebacks."""

    console = Console()
    handler = RichHandler(console=console, rich_tracebacks=rich_tracebacks)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


@dataclass
class WorkUnitLogger:
    """Count Kalman passes, Lyapunov solves and rejected or failed draws.

    One instance belongs to one caller (a chain, an optimizer run); the
    likelihood never keeps a shared counter of its own.
    """

    kalman_evals: int = 0
    lyapunov_solves: int = 0
    rejected_draws: int = 0
    failed_draws: int = 0
    extras: Dict[str, int] = field(default_factory=dict)

    def incr(self, **kwargs: int) -> None:
        for key, value in kwargs.items():
            if key != "extras" and hasattr(self, key):
                setattr(self, key, getattr(self, key) + int(value))
            else:
                self.extras[key] = self.extras.get(key, 0) + int(value)

    def as_dict(self) -> Dict[str, int]:
        counts = asdict(self)
        extras = counts.pop("extras")
        counts.update(extras)
        return counts


__all__ = ["setup_logging", "WorkUnitLogger"]
