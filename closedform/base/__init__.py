"""Base classes for closed-form distributions, estimators and mixtures."""

from .distribution import Distribution
from .estimator import MaximumLikelihoodEstimator
from .functions import CumulativeFunction, DensityFunction, ProbabilityFunction
from .closed_form import ClosedFormDistribution
from .discrete import DiscreteDistribution
from .mixture import MixtureDensityModel

__all__ = [
    "Distribution",
    "MaximumLikelihoodEstimator",
    "ProbabilityFunction",
    "DensityFunction",
    "CumulativeFunction",
    "ClosedFormDistribution",
    "DiscreteDistribution",
    "MixtureDensityModel",
]
