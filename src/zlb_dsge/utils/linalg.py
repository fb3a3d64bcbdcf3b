"""Small array helpers shared by the regime bookkeeping and the filters."""

from __future__ import annotations

from typing import Any

import numpy as np
import jax.numpy as jnp


def symmetrize(S: Any) -> jnp.ndarray:
    """Return the symmetric part of ``S`` as a float64 JAX array."""
    S64 = jnp.asarray(S, dtype=jnp.float64)
    return 0.5 * (S64 + S64.T)


def is_hermitian(S: np.ndarray) -> bool:
    """Exact test of ``S == Sᴴ``; for real input this is plain symmetry."""
    S = np.asarray(S)
    return S.ndim == 2 and S.shape[0] == S.shape[1] and bool(np.array_equal(S, S.conj().T))


def as_matrix(value: Any, name: str, shape: tuple[int, int] | None = None) -> np.ndarray:
    """Return ``value`` as a 2-D float array, optionally checking its shape.

    Raises
    ------
    ValueError
        If ``value`` is not two-dimensional or does not have ``shape``.
    """

    arr = np.asarray(value, dtype=float)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a matrix; received shape {arr.shape}")
    if shape is not None and arr.shape != tuple(shape):
        raise ValueError(f"{name} must have shape {tuple(shape)}; received {arr.shape}")
    return arr


def as_vector(value: Any, name: str, size: int | None = None) -> np.ndarray:
    """Return ``value`` as a 1-D float array.

    Column vectors of shape ``(n, 1)`` are flattened.
    """

    arr = np.asarray(value, dtype=float)
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr[:, 0]
    if arr.ndim != 1:
        raise ValueError(f"{name} must be a vector; received shape {arr.shape}")
    if size is not None and arr.shape[0] != size:
        raise ValueError(f"{name} must have length {size}; received {arr.shape[0]}")
    return arr


__all__ = ["symmetrize", "is_hermitian", "as_matrix", "as_vector"]
