"""Univariate closed-form distributions."""

from .chi_square import ChiSquare, ChiSquareEstimator
from .negative_binomial import NegativeBinomial, NegativeBinomialEstimator
from .pareto import Pareto, ParetoEstimator
from .poisson import Poisson, PoissonEstimator
from .uniform import Uniform, UniformEstimator

__all__ = ['ChiSquare', 'NegativeBinomial', 'Pareto', 'Poisson', 'Uniform',
           'ChiSquareEstimator', 'NegativeBinomialEstimator', 'ParetoEstimator',
           'PoissonEstimator', 'UniformEstimator']
