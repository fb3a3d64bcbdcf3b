"""Dimension metadata for models with anticipated policy shocks.

State ordering used throughout::

    [ core states | anticipated-shock states | augmented states ]
      0 .. n_states - nant - 1
                    n_states - nant .. n_states - 1
                                               n_states .. n_states_augmented - 1

Shocks and observables place their anticipated blocks last.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ModelSpec:
    """Immutable integer constants that determine every regime slice.

    ``n_states_augmented`` defaults to ``n_states + n_anticipated_shocks``.
    """

    n_observables: int
    n_anticipated_shocks: int
    n_states: int
    n_exogenous_shocks: int
    anticipated_lags: int
    n_presample_periods: int
    n_states_augmented: Optional[int] = None

    def __post_init__(self) -> None:
        if self.n_states_augmented is None:
            object.__setattr__(self, "n_states_augmented", self.n_states + self.n_anticipated_shocks)
        for name in (
            "n_observables",
            "n_anticipated_shocks",
            "n_states",
            "n_states_augmented",
            "n_exogenous_shocks",
            "anticipated_lags",
            "n_presample_periods",
        ):
            value = getattr(self, name)
            if int(value) != value or value < 0:
                raise ValueError(f"{name} must be a non-negative integer; received {value!r}")
        nant = self.n_anticipated_shocks
        if self.n_states < nant:
            raise ValueError("n_states must include the anticipated-shock states")
        if self.n_states_augmented < self.n_states:
            raise ValueError("n_states_augmented must be at least n_states")
        if self.n_exogenous_shocks < nant:
            raise ValueError("n_exogenous_shocks must include the anticipated shocks")
        if self.n_observables < nant:
            raise ValueError("n_observables must include the anticipated-shock observables")

    @property
    def n_zlb_periods(self) -> int:
        """Rows in the ZLB regime: ``anticipated_lags + 1``."""
        return self.anticipated_lags + 1


__all__ = ["ModelSpec"]
