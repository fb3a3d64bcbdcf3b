"""Regime-switching log-likelihood.

The sample is filtered in three passes. The presample starts from the
unconditional distribution of the normal-regime state and only conditions the
state; its log-likelihood is kept on its bundle but excluded from the total.
The normal regime continues from the presample's final state. Its final state
is mapped onto the ZLB state vector, with the anticipated-shock states known
to be zero, and the ZLB regime is filtered from there.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple, Union

import numpy as np

from ..config import LikelihoodConfig
from ..errors import LikelihoodError
from ..kalman.filter import kalman_filter
from ..kalman.lyapunov import solve_discrete_lyapunov
from ..models.parameters import ParameterVector
from ..typing import StateSpaceModel
from ..utils.logging import WorkUnitLogger
from .measurement import assemble_measurement, share_measurement
from .regimes import RegimeBundle, RegimeSet, expand_to_zlb, partition_regimes

logger = logging.getLogger(__name__)

LikelihoodValue = Union[float, Tuple[float, Optional[RegimeBundle]]]


def _filter_bundle(bundle: RegimeBundle, z0: np.ndarray, P0: np.ndarray) -> None:
    measurement = bundle.measurement
    bundle.filtered = kalman_filter(
        bundle.data,
        z0,
        P0,
        bundle.transition.TTT,
        measurement.DD,
        measurement.ZZ,
        measurement.VVall,
    )


def filter_regimes(
    model: StateSpaceModel,
    data: Any,
    parameters: ParameterVector,
    *,
    config: Optional[LikelihoodConfig] = None,
    work_logger: Optional[WorkUnitLogger] = None,
) -> RegimeSet:
    """Solve the model at ``parameters`` and filter all three regimes.

    Raises whatever the model, the Lyapunov solver or the filter raise; the
    failure policy is applied by :func:`likelihood`.
    """

    config = config or LikelihoodConfig()
    TTT, RRR, CCC = model.solve(parameters)
    regimes = partition_regimes(data, model.spec, TTT, RRR, CCC)
    assemble_measurement(model, parameters, regimes.normal)
    assemble_measurement(model, parameters, regimes.zlb)
    share_measurement(regimes)

    normal = regimes.normal
    T_normal = normal.transition.TTT
    R_normal = normal.transition.RRR
    z0 = np.zeros(normal.n_states)
    P0 = solve_discrete_lyapunov(
        T_normal,
        R_normal @ normal.measurement.QQ @ R_normal.T,
        imag_tol=config.imag_tol,
    )

    _filter_bundle(regimes.presample, z0, P0)
    _filter_bundle(normal, regimes.presample.filtered.z_end, regimes.presample.filtered.P_end)
    z_zlb, P_zlb = expand_to_zlb(normal.filtered.z_end, normal.filtered.P_end, regimes.indices)
    _filter_bundle(regimes.zlb, z_zlb, P_zlb)

    if work_logger is not None:
        work_logger.incr(lyapunov_solves=1, kalman_evals=3)
    return regimes


def likelihood(
    model: StateSpaceModel,
    data: Any,
    parameters: Optional[ParameterVector] = None,
    *,
    mh: bool = False,
    config: Optional[LikelihoodConfig] = None,
    work_logger: Optional[WorkUnitLogger] = None,
) -> LikelihoodValue:
    """Log-likelihood of ``data`` at ``parameters`` (the model's own when omitted).

    Parameters
    ----------
    model:
        Object following :class:`~zlb_dsge.typing.StateSpaceModel`.
    data:
        Observations, ``(n_periods, n_observables)``; NaN marks a missing entry.
    parameters:
        Parameter snapshot to evaluate. Never modified.
    mh:
        Sampler mode. Out-of-bounds draws return ``(-inf, None)`` before the
        model is solved, and every result is a ``(value, zlb_bundle)`` pair.
    config:
        Failure policy and numerical tolerances.
    work_logger:
        Optional counter of Kalman passes, Lyapunov solves and rejected draws.

    Returns
    -------
    float or tuple
        The normal plus ZLB log-likelihood, or ``(value, zlb_bundle)`` when
        ``mh`` is true. ``zlb_bundle`` is ``None`` for rejected draws.
    """

    config = config or LikelihoodConfig()
    parameters = model.parameters if parameters is None else parameters

    if mh:
        outside = parameters.out_of_bounds()
        if outside:
            logger.debug("Rejecting draw outside bounds: %s", ", ".join(outside))
            if work_logger is not None:
                work_logger.incr(rejected_draws=1)
            return -np.inf, None

    try:
        regimes = filter_regimes(model, data, parameters, config=config, work_logger=work_logger)
    except (LikelihoodError, np.linalg.LinAlgError) as exc:
        if work_logger is not None:
            work_logger.incr(failed_draws=1)
        if config.on_failure == "raise":
            raise
        logger.debug("Likelihood evaluation failed (%s): %s", type(exc).__name__, exc)
        return (-np.inf, None) if mh else -np.inf

    value = regimes.normal.filtered.log_likelihood + regimes.zlb.filtered.log_likelihood
    logger.debug(
        "loglik normal=%.6f zlb=%.6f (presample=%.6f excluded)",
        regimes.normal.filtered.log_likelihood,
        regimes.zlb.filtered.log_likelihood,
        regimes.presample.filtered.log_likelihood,
    )
    if mh:
        return value, regimes.zlb
    return value


__all__ = ["filter_regimes", "likelihood"]
