"""
Poisson distribution.

The Poisson distribution with rate :math:`\\lambda` has PMF:

.. math::
    P(K = k|\\lambda) = \\frac{\\lambda^k e^{-\\lambda}}{k!}

for integers :math:`k \\ge 0`; every other input has mass zero. The CDF is
the regularized upper incomplete gamma function
:math:`Q(\\lfloor k \\rfloor + 1, \\lambda)`.

Parametrization:

- Classical: :math:`\\lambda` (rate), :math:`\\lambda > 0`
- Vector: ``[rate]``
"""

from typing import Dict, Optional

import numpy as np
from numpy.typing import ArrayLike
from scipy.special import gammaincc, gammaln, xlogy

from closedform.base import DiscreteDistribution, MaximumLikelihoodEstimator
from closedform.base.closed_form import check_finite, scalar_or_array
from closedform.base.distribution import check_random_state
from closedform.params import PoissonParams
from closedform.utils.statistics import validate_samples

DEFAULT_RATE = 1.0


def _check_rate(rate) -> float:
    rate = check_finite("Rate", rate)
    if rate <= 0:
        raise ValueError(f"Rate must be positive, got {rate}")
    return rate


class Poisson(DiscreteDistribution):
    """
    Poisson distribution over the non-negative integers.

    Parameters
    ----------
    rate : float, optional
        Rate :math:`\\lambda > 0`. Default is ``DEFAULT_RATE``.

    Examples
    --------
    >>> dist = Poisson(rate=2.0)
    >>> round(dist.pmf(3), 10)
    0.1804470443
    >>> dist.pmf(-1)
    0.0
    """

    _params_class = PoissonParams

    def __init__(self, rate: float = DEFAULT_RATE):
        super().__init__(rate=rate)

    def _validate_params(self, *, rate) -> Dict[str, float]:
        return {'rate': _check_rate(rate)}

    @property
    def rate(self) -> float:
        """Rate parameter :math:`\\lambda`."""
        return self._rate

    @rate.setter
    def rate(self, value: float) -> None:
        self.set_classical_params(rate=value)

    @staticmethod
    def evaluate_logpmf(k: ArrayLike, rate: float):
        """Log mass; :math:`-\\infty` off the non-negative integers."""
        rate = _check_rate(rate)
        k_arr = np.asarray(k, dtype=float)
        valid = (k_arr >= 0) & (np.floor(k_arr) == k_arr)
        k_safe = np.where(valid, k_arr, 0.0)
        log_p = xlogy(k_safe, rate) - rate - gammaln(k_safe + 1.0)
        return scalar_or_array(k, np.where(valid, log_p, -np.inf))

    @staticmethod
    def evaluate_pmf(k: ArrayLike, rate: float):
        """Probability mass at ``k``; zero off the non-negative integers."""
        return scalar_or_array(k, np.exp(Poisson.evaluate_logpmf(k, rate)))

    evaluate_pdf = evaluate_pmf

    @staticmethod
    def evaluate_cdf(k: ArrayLike, rate: float):
        """:math:`P(K \\le k) = Q(\\lfloor k \\rfloor + 1, \\lambda)`."""
        rate = _check_rate(rate)
        k_arr = np.asarray(k, dtype=float)
        k_floor = np.floor(np.maximum(k_arr, 0.0))
        result = np.where(k_arr >= 0, gammaincc(k_floor + 1.0, rate), 0.0)
        return scalar_or_array(k, result)

    def pdf(self, x: ArrayLike):
        return self.evaluate_pmf(x, self._rate)

    def logpdf(self, x: ArrayLike):
        return self.evaluate_logpmf(x, self._rate)

    def cdf(self, x: ArrayLike):
        return self.evaluate_cdf(x, self._rate)

    def mean(self) -> float:
        """Mean: :math:`E[K] = \\lambda`."""
        return self._rate

    def var(self) -> float:
        """Variance: :math:`\\text{Var}[K] = \\lambda`."""
        return self._rate

    def _initial_domain_max(self) -> int:
        return int(round(self._rate * 10.0)) + 5

    def rvs(self, size=None, random_state=None):
        """
        Generate random samples.

        Parameters
        ----------
        size : int or tuple of ints, optional
            Shape of samples to generate.
        random_state : int or Generator, optional
            Random number generator seed or instance.
        """
        rng = check_random_state(random_state)
        return rng.poisson(self._rate, size=size)

    @classmethod
    def estimator(cls) -> 'PoissonEstimator':
        return PoissonEstimator()


class PoissonEstimator(MaximumLikelihoodEstimator):
    """Maximum-likelihood estimator: the (weighted) sample mean."""

    def learn(self, data: ArrayLike, weights: Optional[ArrayLike] = None) -> Poisson:
        data, weights = validate_samples(data, weights)
        if np.any(data[weights > 0] < 0):
            raise ValueError("Poisson samples must be non-negative")
        rate = float(np.dot(weights, data) / np.sum(weights))
        if rate <= 0:
            raise ValueError("Sample mean is zero; Poisson rate must be positive")
        return Poisson(rate=rate)
