"""
closedform: closed-form probability distributions and mixture densities.

Implements five univariate families (Chi-square, Negative Binomial, Pareto,
Poisson, Uniform), a multivariate Gaussian, and finite mixtures of any of
them, with a scipy-like evaluation API and sklearn-style fitting.

Key features:
- Validated parameters that stay unchanged when an update is rejected
- Fixed-order parameter vectors (``to_vector`` / ``from_vector``)
- Maximum-likelihood estimators with optional sample weights
- Snapshot PDF / CDF views
- Frozen dataclass parameter containers (closedform.params)
"""

from closedform.params import (
    ChiSquareParams,
    NegativeBinomialParams,
    ParetoParams,
    PoissonParams,
    UniformParams,
    MultivariateGaussianParams,
)
from closedform.base import (
    Distribution,
    ClosedFormDistribution,
    DiscreteDistribution,
    MaximumLikelihoodEstimator,
    MixtureDensityModel,
    DensityFunction,
    CumulativeFunction,
)
from closedform.distributions.univariate import (
    ChiSquare,
    ChiSquareEstimator,
    NegativeBinomial,
    NegativeBinomialEstimator,
    Pareto,
    ParetoEstimator,
    Poisson,
    PoissonEstimator,
    Uniform,
    UniformEstimator,
)
from closedform.distributions.multivariate import (
    MultivariateGaussian,
    MultivariateGaussianEstimator,
)

__all__ = [
    # Parameter dataclasses
    "ChiSquareParams",
    "NegativeBinomialParams",
    "ParetoParams",
    "PoissonParams",
    "UniformParams",
    "MultivariateGaussianParams",
    # Base classes
    "Distribution",
    "ClosedFormDistribution",
    "DiscreteDistribution",
    "MaximumLikelihoodEstimator",
    "MixtureDensityModel",
    "DensityFunction",
    "CumulativeFunction",
    # Distributions
    "ChiSquare",
    "NegativeBinomial",
    "Pareto",
    "Poisson",
    "Uniform",
    "MultivariateGaussian",
    # Estimators
    "ChiSquareEstimator",
    "NegativeBinomialEstimator",
    "ParetoEstimator",
    "PoissonEstimator",
    "UniformEstimator",
    "MultivariateGaussianEstimator",
]
