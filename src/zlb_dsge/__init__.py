"""zlb_dsge
=================

Posterior evaluation for linear state-space models whose sample ends in a
zero-lower-bound regime with anticipated policy shocks.

The log posterior is the sum of a Kalman-filter log-likelihood, evaluated
across a presample, a normal regime and a ZLB regime, and the log prior of the
model parameters.
"""

from .utils import jax_setup  # noqa: F401  (enables float64 before any array is built)
from .estimate.likelihood import likelihood
from .estimate.posterior import posterior, posterior_at

__all__ = ["likelihood", "posterior", "posterior_at"]
