"""Shared typing aliases and collaborator protocols."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Tuple

import numpy as np
import jax.numpy as jnp

if TYPE_CHECKING:  # pragma: no cover - imported only for type checkers
    from .models.parameters import ParameterVector
    from .models.spec import ModelSpec

Array = jnp.ndarray
Transition = Tuple[np.ndarray, np.ndarray, np.ndarray]
MeasurementTerms = Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]


class StateSpaceModel(Protocol):
    """Interface the likelihood expects from a model.

    ``solve`` returns ``(TTT, RRR, CCC)`` for the full ZLB-regime state vector
    and raises :class:`~zlb_dsge.errors.ModelSolutionError` when no stable
    solution exists. ``measurement`` returns ``(ZZ, DD, QQ, EE, MM)`` for the
    state vector described by the transition matrices it receives; ``shocks``
    is true only when anticipated shocks are active.
    """

    spec: "ModelSpec"
    parameters: "ParameterVector"

    def solve(self, parameters: "ParameterVector") -> Transition:
        ...

    def measurement(
        self,
        parameters: "ParameterVector",
        TTT: np.ndarray,
        RRR: np.ndarray,
        CCC: np.ndarray,
        *,
        shocks: bool,
    ) -> MeasurementTerms:
        ...


__all__ = ["Array", "Transition", "MeasurementTerms", "StateSpaceModel"]
