"""Kalman filter with correlated transition and measurement shocks.

State space (periods in rows of ``data``)::

    z_t = a + T z_{t-1} + w_t
    y_t = D + Z z_t + u_t,        var([w_t; u_t]) = VVall = [[Q, G], [Gᵀ, R]]

The recursion predicts, forms the forecast error ``dy = y - Z z - D`` with
covariance ``F = Z P Zᵀ + Z G + Gᵀ Zᵀ + R`` and updates with the gain
``(P Zᵀ + G) F⁻¹``. Missing (NaN) observations are masked out of the update:
their rows of ``Z`` and ``D`` and the matching rows and columns of ``G`` and
``R`` are zeroed and replaced by a unit variance, so they add nothing to the
log determinant, the quadratic form or the state update, while the prediction
step still advances. A period with no observations contributes zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
import jax
import jax.numpy as jnp
import jax.scipy.linalg as jsp
from jax import lax

from ..typing import Array
from ..utils import jax_setup  # noqa: F401
from ..utils.linalg import as_matrix, as_vector, symmetrize

_LOG_2PI = float(np.log(2.0 * np.pi))


@dataclass(frozen=True)
class KalmanResult:
    """Output of one filtering pass."""

    log_likelihood: float
    z_end: np.ndarray
    P_end: np.ndarray
    log_likelihood_by_period: np.ndarray


def split_joint_covariance(VVall: np.ndarray, n_states: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(Q, G, R)`` blocks of the joint shock covariance."""

    return VVall[:n_states, :n_states], VVall[:n_states, n_states:], VVall[n_states:, n_states:]


def _step(params: Tuple[Array, ...], carry: Tuple[Array, Array], inputs: Tuple[Array, Array]):
    a, TTT, DD, ZZ, Q, G, R = params
    z, P = carry
    y, observed = inputs

    z = a + TTT @ z
    P = TTT @ P @ TTT.T + Q

    w = observed.astype(jnp.float64)
    Z_t = ZZ * w[:, None]
    G_t = G * w[None, :]
    R_t = R * jnp.outer(w, w) + jnp.diag(1.0 - w)

    dy = jnp.where(observed, y - ZZ @ z - DD, 0.0)
    ZG = Z_t @ G_t
    F = symmetrize(Z_t @ P @ Z_t.T + ZG + ZG.T + R_t)
    F_chol = jnp.linalg.cholesky(F)

    alpha = jsp.solve_triangular(F_chol, dy, lower=True)
    log_det = 2.0 * jnp.sum(jnp.log(jnp.diag(F_chol)))
    loglik = -0.5 * (jnp.sum(w) * _LOG_2PI + log_det + alpha @ alpha)

    PZG = P @ Z_t.T + G_t
    gain = jsp.cho_solve((F_chol, True), PZG.T).T
    z = z + gain @ dy
    P = P - gain @ PZG.T
    return (z, P), loglik


@jax.jit
def _filter_scan(
    y: Array,
    observed: Array,
    params: Tuple[Array, ...],
    z0: Array,
    P0: Array,
) -> Tuple[Array, Array, Array]:
    (z_end, P_end), loglik = lax.scan(
        lambda carry, inputs: _step(params, carry, inputs),
        (z0, P0),
        (y, observed),
    )
    return loglik, z_end, P_end


def kalman_filter(
    data: Any,
    z0: Any,
    P0: Any,
    TTT: Any,
    DD: Any,
    ZZ: Any,
    VVall: Any,
    a: Any = None,
) -> KalmanResult:
    """Filter ``data`` (periods × observables) and accumulate the log-likelihood.

    Parameters
    ----------
    data:
        Observations with shape ``(n_periods, n_obs)``; NaN marks a missing entry.
    z0, P0:
        Mean and covariance of the state before the first period.
    TTT, DD, ZZ:
        Transition matrix, measurement constant and measurement matrix.
    VVall:
        Joint covariance of the transition and measurement shocks,
        ``(n_states + n_obs) × (n_states + n_obs)``.
    a:
        Transition constant; zeros when omitted.

    Returns
    -------
    KalmanResult
        Summed log-likelihood, the final filtered mean and covariance, and the
        per-period contributions.

    Raises
    ------
    ValueError
        On inconsistent shapes.
    np.linalg.LinAlgError
        If the forecast-error covariance stops being positive definite.
    """

    T_mat = as_matrix(TTT, "TTT")
    n_states = T_mat.shape[0]
    if T_mat.shape != (n_states, n_states):
        raise ValueError(f"TTT must be square; received {T_mat.shape}")
    Z_mat = as_matrix(ZZ, "ZZ")
    n_obs = Z_mat.shape[0]
    if Z_mat.shape[1] != n_states:
        raise ValueError(f"ZZ must have {n_states} columns; received {Z_mat.shape}")
    D_vec = as_vector(DD, "DD", n_obs)
    joint = as_matrix(VVall, "VVall", (n_states + n_obs, n_states + n_obs))
    mean0 = as_vector(z0, "z0", n_states)
    cov0 = as_matrix(P0, "P0", (n_states, n_states))
    const = np.zeros(n_states) if a is None else as_vector(a, "a", n_states)

    y = np.asarray(data, dtype=float)
    if y.ndim == 1 and n_obs == 1:
        y = y[:, None]
    if y.ndim != 2 or y.shape[1] != n_obs:
        raise ValueError(f"data must have {n_obs} columns; received shape {y.shape}")

    if y.shape[0] == 0:
        return KalmanResult(0.0, mean0.copy(), cov0.copy(), np.zeros(0))

    observed = ~np.isnan(y)
    Q, G, R = split_joint_covariance(joint, n_states)
    params = tuple(jnp.asarray(item, dtype=jnp.float64) for item in (const, T_mat, D_vec, Z_mat, Q, G, R))

    loglik, z_end, P_end = _filter_scan(
        jnp.asarray(np.where(observed, y, 0.0), dtype=jnp.float64),
        jnp.asarray(observed),
        params,
        jnp.asarray(mean0, dtype=jnp.float64),
        jnp.asarray(cov0, dtype=jnp.float64),
    )

    by_period = np.asarray(loglik, dtype=float)
    total = float(np.sum(by_period))
    if not np.isfinite(total):
        bad = int(np.flatnonzero(~np.isfinite(by_period))[0])
        raise np.linalg.LinAlgError(
            f"Forecast error covariance is not positive definite at period {bad}"
        )

    return KalmanResult(
        log_likelihood=total,
        z_end=np.asarray(z_end, dtype=float),
        P_end=np.asarray(P_end, dtype=float),
        log_likelihood_by_period=by_period,
    )


__all__ = ["KalmanResult", "kalman_filter", "split_joint_covariance"]
