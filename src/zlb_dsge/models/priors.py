"""Prior distributions for model parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import jax.numpy as jnp
from jax.scipy import stats as jstats
from jax.scipy.special import gammaln

from ..utils import jax_setup  # noqa: F401


@dataclass(frozen=True)
class Prior:
    """Simple log-density interface."""

    def logpdf(self, value: Any) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class NormalPrior(Prior):
    mean: float
    scale: float

    def logpdf(self, value: Any) -> float:
        x = jnp.asarray(value, dtype=jnp.float64)
        return float(jstats.norm.logpdf(x, loc=self.mean, scale=self.scale))


@dataclass(frozen=True)
class BetaPrior(Prior):
    a: float
    b: float

    @classmethod
    def from_moments(cls, mean: float, std: float) -> "BetaPrior":
        """Parameterize by mean and standard deviation."""
        if not 0.0 < mean < 1.0 or std <= 0.0 or std**2 >= mean * (1.0 - mean):
            raise ValueError("Beta moments must satisfy 0 < mean < 1 and std² < mean (1 - mean)")
        nu = mean * (1.0 - mean) / std**2 - 1.0
        return cls(a=mean * nu, b=(1.0 - mean) * nu)

    def logpdf(self, value: Any) -> float:
        x = jnp.asarray(value, dtype=jnp.float64)
        return float(jstats.beta.logpdf(x, self.a, self.b))


@dataclass(frozen=True)
class GammaPrior(Prior):
    shape: float
    scale: float

    @classmethod
    def from_moments(cls, mean: float, std: float) -> "GammaPrior":
        if mean <= 0.0 or std <= 0.0:
            raise ValueError("Gamma moments must be positive")
        return cls(shape=(mean / std) ** 2, scale=std**2 / mean)

    def logpdf(self, value: Any) -> float:
        x = jnp.asarray(value, dtype=jnp.float64)
        return float(jstats.gamma.logpdf(x, self.shape, scale=self.scale))


@dataclass(frozen=True)
class InverseGammaPrior(Prior):
    """Inverse gamma density ``β^α / Γ(α) x^(-α-1) exp(-β / x)``."""

    shape: float
    scale: float

    def logpdf(self, value: Any) -> float:
        x = float(value)
        if x <= 0.0:
            return -math.inf
        alpha = jnp.asarray(self.shape, dtype=jnp.float64)
        beta = jnp.asarray(self.scale, dtype=jnp.float64)
        density = alpha * jnp.log(beta) - gammaln(alpha) - (alpha + 1.0) * jnp.log(x) - beta / x
        return float(density)


@dataclass(frozen=True)
class UniformPrior(Prior):
    low: float
    high: float

    def logpdf(self, value: Any) -> float:
        x = jnp.asarray(value, dtype=jnp.float64)
        return float(jstats.uniform.logpdf(x, loc=self.low, scale=self.high - self.low))


__all__ = [
    "Prior",
    "NormalPrior",
    "BetaPrior",
    "GammaPrior",
    "InverseGammaPrior",
    "UniformPrior",
]
