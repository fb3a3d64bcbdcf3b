"""Discrete Lyapunov equation solver.

``solve_discrete_lyapunov(A, Q)`` returns ``X`` with ``A X Aᵀ - X + Q = 0``.

The discrete equation is mapped to the continuous form ``Ac X + X Acᴴ + Cc = 0``
with the Cayley transform

    Ac = (A + I)⁻¹ (A - I),    Cc = (I - Ac) Q (I - Acᴴ) / 2.

Writing ``Ac = Ua Ta Uaᴴ`` (complex Schur form), the Schur form of ``Acᴴ`` is
obtained by reversing the columns of ``Ua``: ``Acᴴ = Ub Tb Ubᴴ`` with
``Ub = Ua J`` and ``Tb = (J Ta J)ᴴ``, where ``J`` is the exchange matrix. In
the transformed unknown ``Y = Uaᴴ X Ub`` the equation ``Ta Y + Y Tb = -Uaᴴ Cc Ub``
is upper triangular in both factors, so the columns of ``Y`` are found one at a
time by back-substitution.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from scipy.linalg import schur, solve_triangular

from ..errors import LyapunovError
from ..utils.linalg import is_hermitian

logger = logging.getLogger(__name__)

_EPS = np.finfo(float).eps


def _check_spectrum(ta: np.ndarray, tb: np.ndarray) -> None:
    """Raise unless every ``λ_i(Ta) + μ_j(Tb)`` is safely away from zero."""

    p1 = np.diag(ta)[None, :]
    p2 = np.diag(tb)[:, None]
    p_sum = np.abs(p1) + np.abs(p2)
    if np.any(p_sum == 0.0) or np.any(np.abs(p1 + p2) < 1000.0 * _EPS * p_sum):
        raise LyapunovError("Solution does not exist or is not unique.")


def solve_discrete_lyapunov(A: Any, Q: Any, *, imag_tol: float | None = None) -> np.ndarray:
    """Solve ``A X Aᵀ - X + Q = 0`` for ``X``.

    Parameters
    ----------
    A, Q:
        Square matrices of equal size.
    imag_tol:
        Largest imaginary residual, relative to ``max(1, max|X|)``, that may be
        discarded when both inputs are real. Defaults to ``sqrt(eps)``.

    Returns
    -------
    np.ndarray
        The solution ``X``. Real when ``A`` and ``Q`` are real; Hermitian when
        ``Q`` is Hermitian.

    Raises
    ------
    ValueError
        If the inputs are not square matrices of the same size.
    LyapunovError
        If ``A`` has eigenvalues ``λ_i, λ_j`` with ``λ_i λ_j = 1`` (to working
        precision), or the discarded imaginary part exceeds ``imag_tol``.
    """

    a = np.asarray(A)
    q = np.asarray(Q)
    if a.ndim != 2 or q.ndim != 2:
        raise ValueError("Dimensions do not agree.")
    m, n = a.shape
    mc, nc = q.shape
    if m != n or m != mc or n != nc:
        raise ValueError("Dimensions do not agree.")
    if m == 0:
        return np.zeros((0, 0))

    real_inputs = np.isrealobj(a) and np.isrealobj(q)
    dtype = float if real_inputs else complex
    a = a.astype(dtype)
    q = q.astype(dtype)
    eye = np.eye(n)

    try:
        ac = np.linalg.solve(a + eye, a - eye)
    except np.linalg.LinAlgError as err:
        # An eigenvalue of -1 sends the Cayley transform to infinity.
        raise LyapunovError("Solution does not exist or is not unique.") from err
    cc = (eye - ac) @ q @ (eye - ac.conj().T) / 2.0

    ta, ua = schur(ac.astype(complex), output="complex")
    ub = ua[:, ::-1]
    tb = ta[::-1, ::-1].conj().T
    _check_spectrum(ta, tb)

    ucu = -ua.conj().T @ cc @ ub

    y = np.zeros((n, n), dtype=complex)
    for k in range(n):
        rhs = ucu[:, k] - y[:, :k] @ tb[:k, k]
        y[:, k] = solve_triangular(ta + tb[k, k] * eye, rhs, lower=False)

    x = ua @ y @ ub.conj().T

    if real_inputs:
        tol = float(np.sqrt(_EPS)) if imag_tol is None else float(imag_tol)
        residual = float(np.max(np.abs(x.imag)))
        scale = max(1.0, float(np.max(np.abs(x.real))))
        if residual > tol * scale:
            raise LyapunovError(
                f"Imaginary residual {residual:.3e} of a real Lyapunov solution exceeds {tol * scale:.3e}"
            )
        logger.debug("Discarding imaginary residual %.3e", residual)
        x = x.real

    if is_hermitian(q):
        x = 0.5 * (x + x.conj().T)

    return x


__all__ = ["solve_discrete_lyapunov"]
