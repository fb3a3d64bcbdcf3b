"""Model-side building blocks: dimension metadata, parameters, priors."""

from .parameters import Parameter, ParameterVector
from .priors import BetaPrior, GammaPrior, InverseGammaPrior, NormalPrior, Prior, UniformPrior
from .spec import ModelSpec
from .toy import ToyZLBModel, default_parameters, simulate

__all__ = [
    "ModelSpec",
    "Parameter",
    "ParameterVector",
    "Prior",
    "NormalPrior",
    "BetaPrior",
    "GammaPrior",
    "InverseGammaPrior",
    "UniformPrior",
    "ToyZLBModel",
    "default_parameters",
    "simulate",
]
