"""Log posterior = log likelihood + log prior."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple, Union

import numpy as np

from ..config import LikelihoodConfig
from ..models.parameters import ParameterVector
from ..typing import StateSpaceModel
from ..utils.logging import WorkUnitLogger
from .likelihood import likelihood
from .regimes import RegimeBundle

PosteriorValue = Union[float, Tuple[float, float, Optional[RegimeBundle]]]


def posterior(
    model: StateSpaceModel,
    data: Any,
    parameters: Optional[ParameterVector] = None,
    *,
    mh: bool = False,
    config: Optional[LikelihoodConfig] = None,
    work_logger: Optional[WorkUnitLogger] = None,
) -> PosteriorValue:
    """Log posterior of ``data`` at ``parameters``.

    With ``mh=True`` the result is ``(log_posterior, log_likelihood,
    zlb_bundle)``. A rejected draw has a log posterior of ``-inf`` and the
    prior is not evaluated.
    """

    parameters = model.parameters if parameters is None else parameters
    if mh:
        like, zlb = likelihood(
            model, data, parameters, mh=True, config=config, work_logger=work_logger
        )
    else:
        like = likelihood(model, data, parameters, config=config, work_logger=work_logger)
        zlb = None

    post = like + parameters.log_prior() if np.isfinite(like) else -np.inf
    if mh:
        return post, like, zlb
    return post


def posterior_at(
    values: Iterable[float],
    model: StateSpaceModel,
    data: Any,
    *,
    mh: bool = False,
    config: Optional[LikelihoodConfig] = None,
    work_logger: Optional[WorkUnitLogger] = None,
) -> PosteriorValue:
    """Evaluate :func:`posterior` at a raw value vector.

    The values are applied to a fresh copy of ``model.parameters`` (fixed
    parameters keep their value), so the model itself is left untouched and
    concurrent callers never share a parameter vector.
    """

    parameters = model.parameters.update(values)
    return posterior(model, data, parameters, mh=mh, config=config, work_logger=work_logger)


__all__ = ["posterior", "posterior_at"]
