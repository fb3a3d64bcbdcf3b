"""Immutable parameter snapshots with bounds, fixed flags and priors.

A :class:`ParameterVector` is never mutated: :meth:`ParameterVector.update`
returns a new vector, so each likelihood evaluation (and each concurrent chain)
owns the values it was called with.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple, Union, overload

import numpy as np

from .priors import Prior


@dataclass(frozen=True)
class Parameter:
    """A scalar model parameter."""

    key: str
    value: float
    bounds: Tuple[float, float] = (-math.inf, math.inf)
    fixed: bool = False
    prior: Optional[Prior] = None
    description: str = ""

    def __post_init__(self) -> None:
        lower, upper = self.bounds
        if lower > upper:
            raise ValueError(f"{self.key}: lower bound {lower} exceeds upper bound {upper}")
        object.__setattr__(self, "value", float(self.value))
        object.__setattr__(self, "bounds", (float(lower), float(upper)))

    def in_bounds(self) -> bool:
        lower, upper = self.bounds
        return lower <= self.value <= upper

    def with_value(self, value: float) -> "Parameter":
        """Return a copy holding ``value``; fixed parameters are returned unchanged."""
        if self.fixed:
            return self
        return replace(self, value=float(value))

    def log_prior(self) -> float:
        if self.fixed or self.prior is None:
            return 0.0
        return float(self.prior.logpdf(self.value))


class ParameterVector(Sequence):
    """Ordered, immutable collection of :class:`Parameter` objects."""

    def __init__(self, parameters: Iterable[Parameter]) -> None:
        self._parameters: Tuple[Parameter, ...] = tuple(parameters)
        self._index: Dict[str, int] = {}
        for i, param in enumerate(self._parameters):
            if param.key in self._index:
                raise ValueError(f"Duplicate parameter key {param.key!r}")
            self._index[param.key] = i

    def __len__(self) -> int:
        return len(self._parameters)

    @overload
    def __getitem__(self, item: Union[int, str]) -> Parameter: ...

    @overload
    def __getitem__(self, item: slice) -> Tuple[Parameter, ...]: ...

    def __getitem__(self, item: Any) -> Any:
        if isinstance(item, str):
            try:
                return self._parameters[self._index[item]]
            except KeyError:
                raise KeyError(f"Unknown parameter {item!r}") from None
        return self._parameters[item]

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._parameters)

    def __repr__(self) -> str:
        body = ", ".join(f"{p.key}={p.value:.6g}" for p in self._parameters)
        return f"ParameterVector({body})"

    @property
    def keys(self) -> List[str]:
        return [p.key for p in self._parameters]

    @property
    def values(self) -> np.ndarray:
        return np.array([p.value for p in self._parameters], dtype=float)

    def as_dict(self) -> Dict[str, float]:
        return {p.key: p.value for p in self._parameters}

    def free_indices(self) -> np.ndarray:
        """Positions of the non-fixed parameters."""
        return np.array([i for i, p in enumerate(self._parameters) if not p.fixed], dtype=int)

    def update(self, values: Iterable[float]) -> "ParameterVector":
        """Return a new vector holding ``values``; fixed entries keep their value."""

        new_values = np.asarray(list(values), dtype=float)
        if new_values.shape != (len(self),):
            raise ValueError(f"Expected {len(self)} values; received {new_values.shape[0]}")
        return ParameterVector(p.with_value(v) for p, v in zip(self._parameters, new_values))

    def out_of_bounds(self) -> List[str]:
        """Keys of the non-fixed parameters outside their bounds."""
        return [p.key for p in self._parameters if not p.fixed and not p.in_bounds()]

    def log_prior(self) -> float:
        """Sum of the prior log densities of the non-fixed parameters."""
        return float(sum(p.log_prior() for p in self._parameters))


__all__ = ["Parameter", "ParameterVector"]
