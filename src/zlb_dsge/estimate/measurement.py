"""Measurement equations of the normal and ZLB regimes.

Measurement equation ``X_t = ZZ S_t + DD + u_t`` with ``u_t = η_t + MM ε_t``
and ``var(η_t) = EE``, so that::

    HH = var(u_t)      = EE + MM QQ MMᵀ
    VV = cov(ε_t, u_t) = QQ MMᵀ

The filter writes the transition shock as ``RRR ε_t``; its joint covariance
with ``u_t`` is ``VVall = [[RRR QQ RRRᵀ, RRR VV], [VVᵀ RRRᵀ, HH]]``.
"""

from __future__ import annotations

import numpy as np

from ..models.parameters import ParameterVector
from ..typing import StateSpaceModel
from ..utils.linalg import as_matrix, as_vector
from .regimes import Measurement, Regime, RegimeBundle, RegimeSet


def assemble_measurement(
    model: StateSpaceModel,
    parameters: ParameterVector,
    bundle: RegimeBundle,
) -> Measurement:
    """Build and attach the measurement equation of ``bundle``.

    Only the ZLB regime asks the model for its anticipated-shock observables.
    For the normal regime ``DD`` is shifted by ``ZZ (I - TTT)⁻¹ CCC`` when
    ``CCC`` is non-zero, since the filter runs without a transition constant.
    """

    if bundle.regime is Regime.PRESAMPLE:
        raise ValueError("The presample shares the normal regime's measurement equation")
    if bundle.transition is None:
        raise ValueError(f"{bundle.regime.value} regime has no transition equation")

    TTT, RRR, CCC = bundle.transition.TTT, bundle.transition.RRR, bundle.transition.CCC
    n_obs, n_states, n_shocks = bundle.n_observables, bundle.n_states, RRR.shape[1]

    ZZ, DD, QQ, EE, MM = model.measurement(
        parameters, TTT, RRR, CCC, shocks=bundle.regime is Regime.ZLB
    )
    ZZ = as_matrix(ZZ, "ZZ", (n_obs, n_states))
    DD = as_vector(DD, "DD", n_obs)
    QQ = as_matrix(QQ, "QQ", (n_shocks, n_shocks))
    EE = as_matrix(EE, "EE", (n_obs, n_obs))
    MM = as_matrix(MM, "MM", (n_obs, n_shocks))

    HH = EE + MM @ QQ @ MM.T
    VV = QQ @ MM.T
    VVall = np.block(
        [
            [RRR @ QQ @ RRR.T, RRR @ VV],
            [VV.T @ RRR.T, HH],
        ]
    )

    if bundle.regime is Regime.NORMAL and np.any(CCC != 0):
        DD = DD + ZZ @ np.linalg.solve(np.eye(n_states) - TTT, CCC)

    measurement = Measurement(ZZ=ZZ, DD=DD, QQ=QQ, EE=EE, MM=MM, HH=HH, VV=VV, VVall=VVall)
    bundle.measurement = measurement
    return measurement


def share_measurement(regimes: RegimeSet) -> None:
    """Give the presample the normal regime's transition and measurement."""

    if regimes.normal.measurement is None:
        raise ValueError("Assemble the normal regime's measurement equation first")
    regimes.presample.transition = regimes.normal.transition
    regimes.presample.measurement = regimes.normal.measurement


__all__ = ["assemble_measurement", "share_measurement"]
