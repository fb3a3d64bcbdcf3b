"""Configuration utilities for posterior evaluation runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import numpy as np
import yaml

FAILURE_POLICIES = ("reject", "raise")


@dataclass
class SettingsConfig:
    """Sample-partition settings for the anticipated-shock model."""

    n_presample_periods: int = 2
    n_anticipated_shocks: int = 0
    anticipated_lags: int = 0


@dataclass
class LikelihoodConfig:
    """How draw-level numerical failures are reported.

    ``on_failure="reject"`` turns a missing model solution or a singular
    Lyapunov equation into a log-likelihood of ``-inf``; ``"raise"`` lets the
    exception reach the caller.
    """

    on_failure: str = "reject"
    imag_tol: float = float(np.sqrt(np.finfo(float).eps))

    def __post_init__(self) -> None:
        if self.on_failure not in FAILURE_POLICIES:
            raise ValueError(
                f"on_failure must be one of {FAILURE_POLICIES}; received {self.on_failure!r}"
            )
        if self.imag_tol <= 0.0:
            raise ValueError("imag_tol must be positive")


@dataclass
class RunConfig:
    """Options for the command-line evaluation script."""

    seed: int = 0
    n_periods: int = 80
    n_draws: int = 10
    proposal_scale: float = 0.01
    results_dir: Path = Path("results")
    run_id_prefix: str = "posterior"


@dataclass
class LoggingConfig:
    """Logging verbosity and formatting options."""

    level: str = "INFO"
    rich_tracebacks: bool = True


@dataclass
class AppConfig:
    """Top-level configuration object composed of sub-configurations."""

    settings: SettingsConfig = field(default_factory=SettingsConfig)
    likelihood: LikelihoodConfig = field(default_factory=LikelihoodConfig)
    run: RunConfig = field(default_factory=RunConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _coerce_path(value: Any) -> Path:
    if isinstance(value, Path):
        return value
    return Path(str(value))


def load_yaml(path: Path) -> Mapping[str, Any]:
    """Load a YAML document and return a mapping."""

    with Path(path).open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_app_config(path: Path) -> AppConfig:
    """Load :class:`AppConfig` from ``path``; missing keys take their defaults."""

    raw = load_yaml(path)
    settings = raw.get("settings", {})
    likelihood = raw.get("likelihood", {})
    run = raw.get("run", {})
    logging_cfg = raw.get("logging", {})

    defaults = LikelihoodConfig()
    return AppConfig(
        settings=SettingsConfig(
            n_presample_periods=int(settings.get("n_presample_periods", 2)),
            n_anticipated_shocks=int(settings.get("n_anticipated_shocks", 0)),
            anticipated_lags=int(settings.get("anticipated_lags", 0)),
        ),
        likelihood=LikelihoodConfig(
            on_failure=str(likelihood.get("on_failure", defaults.on_failure)),
            imag_tol=float(likelihood.get("imag_tol", defaults.imag_tol)),
        ),
        run=RunConfig(
            seed=int(run.get("seed", 0)),
            n_periods=int(run.get("n_periods", 80)),
            n_draws=int(run.get("n_draws", 10)),
            proposal_scale=float(run.get("proposal_scale", 0.01)),
            results_dir=_coerce_path(run.get("results_dir", "results")),
            run_id_prefix=str(run.get("run_id_prefix", "posterior")),
        ),
        logging=LoggingConfig(
            level=str(logging_cfg.get("level", "INFO")),
            rich_tracebacks=bool(logging_cfg.get("rich_tracebacks", True)),
        ),
    )


__all__ = [
    "FAILURE_POLICIES",
    "SettingsConfig",
    "LikelihoodConfig",
    "RunConfig",
    "LoggingConfig",
    "AppConfig",
    "load_yaml",
    "load_app_config",
]
