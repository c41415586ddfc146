"""Utility functions shared by the estimators."""

from .statistics import (
    support_min_and_max,
    validate_samples,
    weighted_mean_and_covariance,
    weighted_mean_and_variance,
)

__all__ = [
    'validate_samples',
    'weighted_mean_and_variance',
    'weighted_mean_and_covariance',
    'support_min_and_max',
]
