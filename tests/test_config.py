"""Tests for YAML configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from zlb_dsge.config import AppConfig, LikelihoodConfig, load_app_config

DEFAULTS = Path(__file__).resolve().parents[1] / "configs" / "defaults.yaml"


def test_shipped_defaults_load():
    cfg = load_app_config(DEFAULTS)

    assert cfg.settings.n_presample_periods == 2
    assert cfg.settings.n_anticipated_shocks == 2
    assert cfg.settings.anticipated_lags == 7
    assert cfg.likelihood.on_failure == "reject"
    assert cfg.run.results_dir == Path("results")
    assert cfg.logging.level == "INFO"


def test_missing_sections_take_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("run:\n  seed: 5\n  results_dir: out/runs\n", encoding="utf-8")

    cfg = load_app_config(path)

    assert cfg.run.seed == 5
    assert cfg.run.results_dir == Path("out/runs")
    assert cfg.settings == AppConfig().settings
    assert cfg.likelihood == LikelihoodConfig()


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_app_config(path) == AppConfig()


def test_unknown_failure_policy_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("likelihood:\n  on_failure: ignore\n", encoding="utf-8")
    with pytest.raises(ValueError, match="on_failure"):
        load_app_config(path)


def test_imag_tol_must_be_positive():
    with pytest.raises(ValueError):
        LikelihoodConfig(imag_tol=0.0)
