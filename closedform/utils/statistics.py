"""Sample statistics used by the maximum-likelihood estimators.

All helpers accept optional non-negative weights; ``None`` means every
sample has weight one.
"""

from typing import Optional, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray


def validate_samples(
    data: ArrayLike,
    weights: Optional[ArrayLike] = None,
    *,
    ndim: int = 1,
) -> Tuple[NDArray, NDArray]:
    """
    Convert samples and weights into float arrays and check them.

    Parameters
    ----------
    data : array_like
        Samples. Shape (n,) when ``ndim == 1``; shape (n, d) when ``ndim == 2``
        (a 1-D input is then read as a single d-dimensional sample).
    weights : array_like, optional
        Non-negative weights, one per sample.
    ndim : int
        Expected dimensionality of ``data``.

    Returns
    -------
    data, weights : ndarray
        Float copies. ``weights`` is all ones when not given.

    Raises
    ------
    ValueError
        If there are no samples, any sample or weight is non-finite, the
        weights have the wrong length, any weight is negative, or the
        weights sum to zero.
    """
    data = np.array(data, dtype=float)
    if ndim == 1:
        data = data.ravel()
    elif data.ndim == 1:
        data = data.reshape(1, -1)
    if data.shape[0] == 0:
        raise ValueError("Cannot estimate parameters from an empty sample")
    if not np.all(np.isfinite(data)):
        raise ValueError("Samples must be finite")

    n = data.shape[0]
    if weights is None:
        weights = np.ones(n)
    else:
        weights = np.array(weights, dtype=float).ravel()
        if len(weights) != n:
            raise ValueError(
                f"Expected {n} weights, got {len(weights)}"
            )
        if not np.all(np.isfinite(weights)):
            raise ValueError("Weights must be finite")
        if np.any(weights < 0):
            raise ValueError("Weights must be non-negative")
    if np.sum(weights) <= 0:
        raise ValueError("Weights must have a positive sum")
    return data, weights


def weighted_mean_and_variance(
    data: ArrayLike, weights: Optional[ArrayLike] = None
) -> Tuple[float, float]:
    """
    Weighted mean and frequency-weighted variance of scalar samples.

    Weights are read as repeat counts, so integer weights give the same
    result as repeating each sample: the variance is
    :math:`\\sum_i w_i (x_i - \\bar x)^2 / (\\sum_i w_i - 1)`. With unit
    weights this is the ordinary ``n - 1`` sample variance. When the total
    weight is at most one the biased :math:`m_2 / \\sum_i w_i` is returned
    instead.
    """
    data, weights = validate_samples(data, weights)
    total = np.sum(weights)
    mean = float(np.dot(weights, data) / total)

    residual = data - mean
    m2 = float(np.dot(weights, residual * residual))
    if total <= 1.0:
        return mean, m2 / total
    return mean, m2 / (total - 1.0)


def weighted_mean_and_covariance(
    data: ArrayLike, weights: Optional[ArrayLike] = None
) -> Tuple[NDArray, NDArray]:
    """
    Weighted mean vector and maximum-likelihood covariance of (n, d) samples.

    Returns
    -------
    mean : ndarray, shape (d,)
    covariance : ndarray, shape (d, d)
        :math:`\\sum_i w_i (x_i - \\mu)(x_i - \\mu)^T / \\sum_i w_i`.
    """
    data, weights = validate_samples(data, weights, ndim=2)
    total = np.sum(weights)
    mean = weights @ data / total
    centered = data - mean
    covariance = (centered * weights[:, None]).T @ centered / total
    return mean, (covariance + covariance.T) / 2


def support_min_and_max(
    data: ArrayLike, weights: Optional[ArrayLike] = None
) -> Tuple[float, float]:
    """Smallest and largest sample among those carrying positive weight."""
    data, weights = validate_samples(data, weights)
    kept = data[weights > 0]
    return float(np.min(kept)), float(np.max(kept))
