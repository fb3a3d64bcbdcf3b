"""Presample / normal / ZLB partition of the sample and the state space.

The ZLB regime carries the full augmented state vector. The presample and the
normal regime drop the anticipated-shock states, shocks and observables; their
transition matrices are exact sub-matrices of the ZLB ones.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple

import numpy as np

from ..kalman.filter import KalmanResult
from ..models.spec import ModelSpec
from ..utils.linalg import as_matrix, as_vector


class Regime(enum.Enum):
    PRESAMPLE = "presample"
    NORMAL = "normal"
    ZLB = "zlb"


@dataclass(frozen=True)
class RegimeIndices:
    """Index sets derived once from :class:`ModelSpec`.

    ``after_zlb`` and ``after_normal`` address the same augmented states in
    the ZLB and normal layouts respectively.
    """

    before: np.ndarray
    anticipated: np.ndarray
    after_zlb: np.ndarray
    after_normal: np.ndarray
    normal_states: np.ndarray
    normal_shocks: np.ndarray
    normal_observables: np.ndarray
    n_states_zlb: int

    @classmethod
    def from_spec(cls, spec: ModelSpec) -> "RegimeIndices":
        nant = spec.n_anticipated_shocks
        n_states = spec.n_states
        n_aug = spec.n_states_augmented
        before = np.arange(0, n_states - nant)
        after_zlb = np.arange(n_states, n_aug)
        return cls(
            before=before,
            anticipated=np.arange(n_states - nant, n_states),
            after_zlb=after_zlb,
            after_normal=np.arange(n_states - nant, n_aug - nant),
            normal_states=np.concatenate([before, after_zlb]),
            normal_shocks=np.arange(0, spec.n_exogenous_shocks - nant),
            normal_observables=np.arange(0, spec.n_observables - nant),
            n_states_zlb=n_aug,
        )


@dataclass(frozen=True)
class Transition:
    """``S_t = CCC + TTT S_{t-1} + RRR ε_t``."""

    TTT: np.ndarray
    RRR: np.ndarray
    CCC: np.ndarray


@dataclass(frozen=True)
class Measurement:
    """``X_t = ZZ S_t + DD + u_t`` together with the derived covariance blocks."""

    ZZ: np.ndarray
    DD: np.ndarray
    QQ: np.ndarray
    EE: np.ndarray
    MM: np.ndarray
    HH: np.ndarray
    VV: np.ndarray
    VVall: np.ndarray


@dataclass
class RegimeBundle:
    """Data, system matrices and filter output for one regime."""

    regime: Regime
    data: np.ndarray
    n_observables: int
    n_states: int
    transition: Optional[Transition] = None
    measurement: Optional[Measurement] = None
    filtered: Optional[KalmanResult] = None

    @property
    def n_periods(self) -> int:
        return self.data.shape[0]


@dataclass
class RegimeSet:
    """The three regime bundles of one likelihood evaluation."""

    presample: RegimeBundle
    normal: RegimeBundle
    zlb: RegimeBundle
    indices: RegimeIndices

    def __iter__(self) -> Iterator[RegimeBundle]:
        return iter((self.presample, self.normal, self.zlb))


def partition_regimes(data: Any, spec: ModelSpec, TTT: Any, RRR: Any, CCC: Any) -> RegimeSet:
    """Split ``data`` and the ZLB-regime transition into the three regimes.

    Parameters
    ----------
    data:
        Observations with shape ``(n_periods, n_observables)``.
    spec:
        Dimension metadata.
    TTT, RRR, CCC:
        Transition equation of the full (ZLB) state vector.

    Returns
    -------
    RegimeSet
        Bundles holding their data slices and transition equations. The
        presample shares the normal regime's :class:`Transition`.
    """

    YY = as_matrix(data, "data")
    n_periods, n_cols = YY.shape
    if n_cols != spec.n_observables:
        raise ValueError(f"data must have {spec.n_observables} columns; received {n_cols}")
    n_pre = spec.n_presample_periods
    n_zlb = spec.n_zlb_periods
    if n_periods < n_pre + n_zlb:
        raise ValueError(
            f"data has {n_periods} periods; at least {n_pre + n_zlb} are needed for the "
            "presample and the ZLB regime"
        )

    n_aug = spec.n_states_augmented
    T_full = as_matrix(TTT, "TTT", (n_aug, n_aug))
    R_full = as_matrix(RRR, "RRR", (n_aug, spec.n_exogenous_shocks))
    C_full = as_vector(CCC, "CCC", n_aug)

    idx = RegimeIndices.from_spec(spec)
    n_obs_normal = idx.normal_observables.size
    n_states_normal = idx.normal_states.size
    zlb_start = n_periods - n_zlb

    normal_transition = Transition(
        TTT=T_full[np.ix_(idx.normal_states, idx.normal_states)],
        RRR=R_full[np.ix_(idx.normal_states, idx.normal_shocks)],
        CCC=C_full[idx.normal_states],
    )

    presample = RegimeBundle(
        regime=Regime.PRESAMPLE,
        data=YY[:n_pre][:, idx.normal_observables],
        n_observables=n_obs_normal,
        n_states=n_states_normal,
        transition=normal_transition,
    )
    normal = RegimeBundle(
        regime=Regime.NORMAL,
        data=YY[n_pre:zlb_start][:, idx.normal_observables],
        n_observables=n_obs_normal,
        n_states=n_states_normal,
        transition=normal_transition,
    )
    zlb = RegimeBundle(
        regime=Regime.ZLB,
        data=YY[zlb_start:, :].copy(),
        n_observables=spec.n_observables,
        n_states=n_aug,
        transition=Transition(TTT=T_full, RRR=R_full, CCC=C_full),
    )
    return RegimeSet(presample=presample, normal=normal, zlb=zlb, indices=idx)


def expand_to_zlb(z_end: Any, P_end: Any, indices: RegimeIndices) -> Tuple[np.ndarray, np.ndarray]:
    """Map the normal regime's final state onto the ZLB state vector.

    The anticipated-shock states enter with zero mean and zero covariance,
    including their covariance with every other state.
    """

    n_normal = indices.before.size + indices.after_normal.size
    z_old = as_vector(z_end, "z_end", n_normal)
    P_old = as_matrix(P_end, "P_end", (n_normal, n_normal))
    before, after_old, after_new = indices.before, indices.after_normal, indices.after_zlb

    z = np.zeros(indices.n_states_zlb)
    z[before] = z_old[before]
    z[after_new] = z_old[after_old]

    P = np.zeros((indices.n_states_zlb, indices.n_states_zlb))
    P[np.ix_(before, before)] = P_old[np.ix_(before, before)]
    P[np.ix_(before, after_new)] = P_old[np.ix_(before, after_old)]
    P[np.ix_(after_new, before)] = P_old[np.ix_(after_old, before)]
    P[np.ix_(after_new, after_new)] = P_old[np.ix_(after_old, after_old)]
    return z, P


__all__ = [
    "Regime",
    "RegimeIndices",
    "Transition",
    "Measurement",
    "RegimeBundle",
    "RegimeSet",
    "partition_regimes",
    "expand_to_zlb",
]
