"""Distribution families."""

from .univariate import (
    ChiSquare,
    NegativeBinomial,
    Pareto,
    Poisson,
    Uniform,
)
from .multivariate import MultivariateGaussian

__all__ = [
    "ChiSquare",
    "NegativeBinomial",
    "Pareto",
    "Poisson",
    "Uniform",
    "MultivariateGaussian",
]
