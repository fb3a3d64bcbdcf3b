"""A small linear model with anticipated policy shocks.

States (ZLB layout, ``nant`` anticipated shocks)::

    x_t                output gap,    x_t = mu + rho_x x_{t-1} + eps_x
    r_t                policy rate,   r_t = rho_r r_{t-1} + phi x_t + eps_r + ant_1,{t-1}
    ant_1 .. ant_nant  anticipated shocks, ant_k,t = ant_{k+1},{t-1} + eps_ant_k
    x_lag_t            lagged output gap (augmented state)

Observables are output growth ``x_t - x_{t-1} + gamma``, the policy rate
``r_t + r_bar`` and, while anticipated shocks are active, the expected rates
``E_t r_{t+k} + r_bar`` for ``k = 1 .. nant``.

The model exists to exercise the likelihood end to end: its ``solve`` and
``measurement`` methods follow the :class:`~zlb_dsge.typing.StateSpaceModel`
protocol.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..config import SettingsConfig
from ..errors import ModelSolutionError
from ..typing import MeasurementTerms, Transition
from .parameters import Parameter, ParameterVector
from .priors import BetaPrior, InverseGammaPrior, NormalPrior
from .spec import ModelSpec

_X, _R = 0, 1


def default_parameters() -> ParameterVector:
    """Initial values, bounds and priors of the toy model."""

    return ParameterVector(
        [
            Parameter("rho_x", 0.8, (0.0, 1.0), prior=BetaPrior.from_moments(0.75, 0.1),
                      description="output gap persistence"),
            Parameter("rho_r", 0.7, (0.0, 1.0), prior=BetaPrior.from_moments(0.7, 0.1),
                      description="interest rate smoothing"),
            Parameter("phi", 0.5, (-5.0, 5.0), prior=NormalPrior(0.5, 0.25),
                      description="policy response to the output gap"),
            Parameter("sigma_x", 0.5, (1e-4, 5.0), prior=InverseGammaPrior(2.0, 0.5)),
            Parameter("sigma_r", 0.25, (1e-4, 5.0), prior=InverseGammaPrior(2.0, 0.25)),
            Parameter("sigma_ant", 0.1, (1e-4, 5.0), prior=InverseGammaPrior(2.0, 0.1)),
            Parameter("mu", 0.0, (-1.0, 1.0), prior=NormalPrior(0.0, 0.05),
                      description="drift of the output gap"),
            Parameter("gamma", 0.5, (-5.0, 5.0), prior=NormalPrior(0.5, 0.25),
                      description="trend growth"),
            Parameter("r_bar", 1.0, (-5.0, 10.0), prior=NormalPrior(1.0, 0.5),
                      description="steady-state policy rate"),
            Parameter("sigma_me", 0.1, (0.0, 1.0), fixed=True,
                      description="measurement error standard deviation"),
        ]
    )


class ToyZLBModel:
    """Output-gap / policy-rate model with ``nant`` anticipated policy shocks."""

    def __init__(
        self,
        settings: Optional[SettingsConfig] = None,
        parameters: Optional[ParameterVector] = None,
    ) -> None:
        settings = settings or SettingsConfig()
        nant = settings.n_anticipated_shocks
        self.spec = ModelSpec(
            n_observables=2 + nant,
            n_anticipated_shocks=nant,
            n_states=2 + nant,
            n_states_augmented=3 + nant,
            n_exogenous_shocks=2 + nant,
            anticipated_lags=settings.anticipated_lags,
            n_presample_periods=settings.n_presample_periods,
        )
        self.parameters = parameters if parameters is not None else default_parameters()

    def solve(self, parameters: ParameterVector) -> Transition:
        rho_x = parameters["rho_x"].value
        rho_r = parameters["rho_r"].value
        phi = parameters["phi"].value
        mu = parameters["mu"].value
        if not (abs(rho_x) < 1.0 and abs(rho_r) < 1.0):
            raise ModelSolutionError(
                f"No stable solution: rho_x={rho_x:.4f}, rho_r={rho_r:.4f}"
            )

        nant = self.spec.n_anticipated_shocks
        n = self.spec.n_states_augmented
        n_shocks = self.spec.n_exogenous_shocks
        lag = n - 1

        TTT = np.zeros((n, n))
        RRR = np.zeros((n, n_shocks))
        CCC = np.zeros(n)

        TTT[_X, _X] = rho_x
        CCC[_X] = mu
        RRR[_X, 0] = 1.0

        TTT[_R, _R] = rho_r
        TTT[_R, _X] = phi * rho_x
        CCC[_R] = phi * mu
        RRR[_R, 0] = phi
        RRR[_R, 1] = 1.0
        if nant:
            TTT[_R, 2] = 1.0

        for k in range(nant):
            s = 2 + k
            RRR[s, 2 + k] = 1.0
            if k + 1 < nant:
                TTT[s, s + 1] = 1.0

        TTT[lag, _X] = 1.0
        return TTT, RRR, CCC

    def measurement(
        self,
        parameters: ParameterVector,
        TTT: np.ndarray,
        RRR: np.ndarray,
        CCC: np.ndarray,
        *,
        shocks: bool,
    ) -> MeasurementTerms:
        nant = self.spec.n_anticipated_shocks if shocks else 0
        n_states = TTT.shape[0]
        n_shocks = RRR.shape[1]
        if n_shocks != 2 + nant:
            raise ValueError(f"Expected {2 + nant} shocks; received {n_shocks}")
        n_obs = 2 + nant
        lag = n_states - 1

        ZZ = np.zeros((n_obs, n_states))
        ZZ[0, _X] = 1.0
        ZZ[0, lag] = -1.0
        ZZ[1, _R] = 1.0
        T_power = np.eye(n_states)
        for k in range(1, nant + 1):
            T_power = T_power @ TTT
            ZZ[1 + k] = T_power[_R]

        gamma = parameters["gamma"].value
        r_bar = parameters["r_bar"].value
        DD = np.array([gamma, r_bar] + [r_bar] * nant)

        variances = [parameters["sigma_x"].value ** 2, parameters["sigma_r"].value ** 2]
        variances += [parameters["sigma_ant"].value ** 2] * nant
        QQ = np.diag(variances)
        EE = parameters["sigma_me"].value ** 2 * np.eye(n_obs)
        MM = np.zeros((n_obs, n_shocks))
        return ZZ, DD, QQ, EE, MM


def simulate(
    model: ToyZLBModel,
    parameters: Optional[ParameterVector] = None,
    n_periods: int = 80,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Draw ``n_periods`` observations from the full ZLB-regime system.

    Anticipated shocks are switched on only in the trailing
    ``anticipated_lags + 1`` periods; expected-rate columns before that window
    are NaN.
    """

    parameters = model.parameters if parameters is None else parameters
    rng = rng if rng is not None else np.random.default_rng()
    spec = model.spec
    if n_periods < spec.n_presample_periods + spec.n_zlb_periods:
        raise ValueError("n_periods is shorter than the presample plus the ZLB window")

    TTT, RRR, CCC = model.solve(parameters)
    ZZ, DD, QQ, EE, MM = model.measurement(parameters, TTT, RRR, CCC, shocks=True)
    nant = spec.n_anticipated_shocks
    n_obs, n_shocks = ZZ.shape[0], RRR.shape[1]
    zlb_start = n_periods - spec.n_zlb_periods

    state = np.linalg.solve(np.eye(TTT.shape[0]) - TTT, CCC)
    data = np.empty((n_periods, n_obs))
    for t in range(n_periods):
        eps = rng.multivariate_normal(np.zeros(n_shocks), QQ, method="eigh")
        if t < zlb_start and nant:
            eps[n_shocks - nant:] = 0.0
        eta = rng.multivariate_normal(np.zeros(n_obs), EE, method="eigh")
        state = CCC + TTT @ state + RRR @ eps
        data[t] = ZZ @ state + DD + MM @ eps + eta

    if nant:
        data[:zlb_start, n_obs - nant:] = np.nan
    return data


__all__ = ["ToyZLBModel", "default_parameters", "simulate"]
