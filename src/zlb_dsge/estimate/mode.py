"""Posterior-mode search over the free parameters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from scipy.optimize import minimize

from ..config import LikelihoodConfig
from ..models.parameters import ParameterVector
from ..typing import StateSpaceModel
from ..utils.logging import WorkUnitLogger
from .posterior import posterior

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModeResult:
    """Outcome of :func:`find_posterior_mode`."""

    parameters: ParameterVector
    log_posterior: float
    success: bool
    message: str
    n_evaluations: int


def _optimizer_bounds(parameters: ParameterVector, free: np.ndarray) -> List[Tuple[Optional[float], Optional[float]]]:
    bounds = []
    for i in free:
        lower, upper = parameters[int(i)].bounds
        bounds.append((lower if np.isfinite(lower) else None, upper if np.isfinite(upper) else None))
    return bounds


def find_posterior_mode(
    model: StateSpaceModel,
    data: Any,
    x0: Optional[ParameterVector] = None,
    *,
    method: str = "L-BFGS-B",
    config: Optional[LikelihoodConfig] = None,
    penalty: float = 1e10,
    options: Optional[Dict[str, Any]] = None,
    work_logger: Optional[WorkUnitLogger] = None,
) -> ModeResult:
    """Maximise the log posterior with :func:`scipy.optimize.minimize`.

    Only non-fixed parameters are searched, within their bounds. Draws the
    likelihood rejects score ``penalty`` in the minimised objective.
    """

    start = model.parameters if x0 is None else x0
    free = start.free_indices()
    if free.size == 0:
        raise ValueError("All parameters are fixed; there is nothing to optimise")
    template = start.values

    def _vector(x: np.ndarray) -> ParameterVector:
        values = template.copy()
        values[free] = x
        return start.update(values)

    def objective(x: np.ndarray) -> float:
        value = posterior(model, data, _vector(x), config=config, work_logger=work_logger)
        if not np.isfinite(value):
            return penalty
        return -float(value)

    result = minimize(
        objective,
        template[free],
        method=method,
        bounds=_optimizer_bounds(start, free),
        options=options,
    )

    best = _vector(result.x)
    log_post = float(posterior(model, data, best, config=config, work_logger=work_logger))
    if not result.success:
        logger.warning("Posterior-mode search did not converge: %s", result.message)
    logger.info("Posterior mode %.6f after %d evaluations", log_post, int(result.nfev))
    return ModeResult(
        parameters=best,
        log_posterior=log_post,
        success=bool(result.success),
        message=str(result.message),
        n_evaluations=int(result.nfev),
    )


__all__ = ["ModeResult", "find_posterior_mode"]
