"""Utilities for persisting posterior evaluation runs."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

import pandas as pd
import yaml


def build_run_id(prefix: str) -> str:
    return f"{prefix}_{datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')}"


def prepare_run_directory(root: Path, run_id: str) -> Path:
    path = Path(root) / run_id / "summary"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _plain(value: Any) -> Any:
    # yaml.safe_dump only accepts builtin types
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if hasattr(value, "tolist"):
        return value.tolist()
    if isinstance(value, Path):
        return str(value)
    return value


def write_summary(path: Path, summary: Dict[str, Any], name: str = "summary.yaml") -> Path:
    """Write ``summary`` as YAML under ``path`` and return the file path."""

    target = Path(path) / name
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(_plain(summary), handle, sort_keys=False)
    return target


def path_frame(records: Iterable[Mapping[str, float]]) -> pd.DataFrame:
    """Convert per-draw records to a tidy :class:`~pandas.DataFrame`."""

    return pd.DataFrame(list(records))


def write_path(path: Path, records: Iterable[Mapping[str, float]], name: str = "path.csv") -> Path:
    target = Path(path) / name
    path_frame(records).to_csv(target, index=False)
    return target


__all__ = ["build_run_id", "prepare_run_directory", "write_summary", "path_frame", "write_path"]
