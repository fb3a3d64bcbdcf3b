"""Regime partition, measurement assembly, likelihood and posterior."""

from .likelihood import filter_regimes, likelihood
from .measurement import assemble_measurement, share_measurement
from .mode import ModeResult, find_posterior_mode
from .posterior import posterior, posterior_at
from .regimes import (
    Measurement,
    Regime,
    RegimeBundle,
    RegimeIndices,
    RegimeSet,
    Transition,
    expand_to_zlb,
    partition_regimes,
)

__all__ = [
    "Regime",
    "RegimeIndices",
    "Transition",
    "Measurement",
    "RegimeBundle",
    "RegimeSet",
    "partition_regimes",
    "expand_to_zlb",
    "assemble_measurement",
    "share_measurement",
    "filter_regimes",
    "likelihood",
    "posterior",
    "posterior_at",
    "ModeResult",
    "find_posterior_mode",
]
