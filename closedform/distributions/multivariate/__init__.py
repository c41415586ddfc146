"""Multivariate distributions."""

from .gaussian import MultivariateGaussian, MultivariateGaussianEstimator

__all__ = ['MultivariateGaussian', 'MultivariateGaussianEstimator']
