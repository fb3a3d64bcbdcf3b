"""Exceptions raised while evaluating the likelihood of a single draw."""

from __future__ import annotations

import numpy as np


class LikelihoodError(Exception):
    """Base class for failures that invalidate one parameter draw."""


class ModelSolutionError(LikelihoodError):
    """The model has no stable rational-expectations solution at this draw."""


class LyapunovError(LikelihoodError, np.linalg.LinAlgError):
    """The discrete Lyapunov equation has no unique solution."""


__all__ = ["LikelihoodError", "ModelSolutionError", "LyapunovError"]
