"""Evaluate the ZLB posterior on simulated data along a random-walk path."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from zlb_dsge.utils import jax_setup  # noqa: F401

import numpy as np

from zlb_dsge import config as app_config
from zlb_dsge import reporting
from zlb_dsge.estimate import find_posterior_mode, posterior
from zlb_dsge.models import ToyZLBModel, simulate
from zlb_dsge.utils import WorkUnitLogger, setup_logging

logger = logging.getLogger("evaluate_posterior")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=Path, default=PROJECT_ROOT / "configs" / "defaults.yaml")
    parser.add_argument("--draws", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--mode", action="store_true", help="search for the posterior mode afterwards")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = app_config.load_app_config(args.config)
    if args.draws is not None:
        config.run.n_draws = args.draws
    if args.seed is not None:
        config.run.seed = args.seed
    setup_logging(config.logging.level, config.logging.rich_tracebacks)

    rng = np.random.default_rng(config.run.seed)
    model = ToyZLBModel(config.settings)
    data = simulate(model, n_periods=config.run.n_periods, rng=rng)
    logger.info(
        "Simulated %d periods of %d observables (%d anticipated shocks)",
        data.shape[0],
        data.shape[1],
        model.spec.n_anticipated_shocks,
    )

    work = WorkUnitLogger()
    current = model.parameters
    current_post, current_like, _ = posterior(
        model, data, current, mh=True, config=config.likelihood, work_logger=work
    )
    free = current.free_indices()
    path: List[Dict[str, float]] = []
    accepted = 0
    for draw in range(config.run.n_draws):
        values = current.values
        values[free] += config.run.proposal_scale * rng.standard_normal(free.size)
        proposal = current.update(values)
        post, like, _ = posterior(
            model, data, proposal, mh=True, config=config.likelihood, work_logger=work
        )
        if np.log(rng.uniform()) < post - current_post:
            current, current_post, current_like = proposal, post, like
            accepted += 1
        path.append({"draw": draw, "log_posterior": float(current_post), "log_likelihood": float(current_like)})
        logger.debug("draw %d: proposal %.4f, current %.4f", draw, post, current_post)

    logger.info(
        "Final log posterior %.4f, acceptance rate %.2f",
        current_post,
        accepted / max(config.run.n_draws, 1),
    )
    logger.info("Work units: %s", work.as_dict())

    summary = {
        "seed": config.run.seed,
        "n_draws": config.run.n_draws,
        "acceptance_rate": accepted / max(config.run.n_draws, 1),
        "final_parameters": current.as_dict(),
        "work_units": work.as_dict(),
    }
    if args.mode:
        mode = find_posterior_mode(model, data, current, config=config.likelihood, work_logger=work)
        summary["mode"] = {
            "log_posterior": mode.log_posterior,
            "success": mode.success,
            "parameters": mode.parameters.as_dict(),
        }

    run_id = reporting.build_run_id(config.run.run_id_prefix)
    summary_dir = reporting.prepare_run_directory(config.run.results_dir, run_id)
    target = reporting.write_summary(summary_dir, summary)
    reporting.write_path(summary_dir, path)
    logger.info("Summary written to %s", target)


if __name__ == "__main__":
    main()
