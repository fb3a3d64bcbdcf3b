"""Utility helpers for the :mod:`zlb_dsge` package."""

from .linalg import as_matrix, as_vector, is_hermitian, symmetrize
from .logging import WorkUnitLogger, setup_logging

__all__ = [
    "as_matrix",
    "as_vector",
    "is_hermitian",
    "symmetrize",
    "setup_logging",
    "WorkUnitLogger",
]
