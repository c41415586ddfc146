"""
Negative Binomial distribution.

Number of failures :math:`k` observed before the :math:`r`-th success, where
each trial fails with probability :math:`p`:

.. math::
    P(K = k|r, p) = \\frac{\\Gamma(k + r)}{k!\\,\\Gamma(r)} (1 - p)^r p^k

for integers :math:`k \\ge 0`. The gamma function replaces the factorial in
the binomial coefficient, so :math:`r > 0` need not be an integer.

The CDF is the regularized incomplete beta function
:math:`I_{1-p}(r, \\lfloor k \\rfloor + 1)`.

Parametrization:

- Classical: :math:`r > 0`, :math:`0 \\le p \\le 1`
- Vector: ``[r, p]``

Note: numpy/scipy use the complementary probability ``1 - p``.
"""

import warnings
from typing import Dict, Optional

import numpy as np
from numpy.typing import ArrayLike
from scipy.special import betainc, gammaln, xlog1py, xlogy

from closedform.base import DiscreteDistribution, MaximumLikelihoodEstimator
from closedform.base.closed_form import check_finite, scalar_or_array
from closedform.base.distribution import check_random_state
from closedform.params import NegativeBinomialParams
from closedform.utils.statistics import validate_samples, weighted_mean_and_variance

DEFAULT_R = 1.0
DEFAULT_P = 0.5


def _check_r(r) -> float:
    r = check_finite("r", r)
    if r <= 0:
        raise ValueError(f"r must be positive, got {r}")
    return r


def _check_p(p) -> float:
    p = check_finite("p", p)
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be a probability in [0, 1], got {p}")
    return p


class NegativeBinomial(DiscreteDistribution):
    """
    Negative Binomial distribution over the non-negative integers.

    Parameters
    ----------
    r : float, optional
        Number of successes until the experiment stops, :math:`r > 0`.
        Default is ``DEFAULT_R``.
    p : float, optional
        Probability parameter in :math:`[0, 1]`. Default is ``DEFAULT_P``.

    Examples
    --------
    >>> dist = NegativeBinomial(r=10.0, p=0.4)
    >>> round(dist.pmf(6), 10)
    0.1239585632
    >>> int(dist.domain()[0])
    0
    """

    _params_class = NegativeBinomialParams

    def __init__(self, r: float = DEFAULT_R, p: float = DEFAULT_P):
        super().__init__(r=r, p=p)

    def _validate_params(self, *, r, p) -> Dict[str, float]:
        return {'r': _check_r(r), 'p': _check_p(p)}

    @property
    def r(self) -> float:
        """Number of successes until the experiment stops."""
        return self._r

    @r.setter
    def r(self, value: float) -> None:
        self.set_classical_params(r=value)

    @property
    def p(self) -> float:
        """Probability parameter."""
        return self._p

    @p.setter
    def p(self, value: float) -> None:
        self.set_classical_params(p=value)

    # ============================================================
    # Stateless evaluators
    # ============================================================

    @staticmethod
    def evaluate_logpmf(k: ArrayLike, r: float, p: float):
        """Log mass; :math:`-\\infty` off the non-negative integers."""
        r = _check_r(r)
        p = _check_p(p)
        k_arr = np.asarray(k, dtype=float)
        valid = (k_arr >= 0) & (np.floor(k_arr) == k_arr)
        k_safe = np.where(valid, k_arr, 0.0)
        log_p = gammaln(k_safe + r) - gammaln(k_safe + 1.0) - gammaln(r) \
            + xlog1py(r, -p) + xlogy(k_safe, p)
        return scalar_or_array(k, np.where(valid, log_p, -np.inf))

    @staticmethod
    def evaluate_pmf(k: ArrayLike, r: float, p: float):
        """Probability mass at ``k``; zero off the non-negative integers."""
        return scalar_or_array(k, np.exp(NegativeBinomial.evaluate_logpmf(k, r, p)))

    evaluate_pdf = evaluate_pmf

    @staticmethod
    def evaluate_cdf(k: ArrayLike, r: float, p: float):
        """:math:`P(K \\le k) = I_{1-p}(r, \\lfloor k \\rfloor + 1)`."""
        r = _check_r(r)
        p = _check_p(p)
        k_arr = np.asarray(k, dtype=float)
        k_floor = np.floor(np.maximum(k_arr, 0.0))
        result = np.where(k_arr >= 0, betainc(r, k_floor + 1.0, 1.0 - p), 0.0)
        return scalar_or_array(k, result)

    # ============================================================
    # Distribution API
    # ============================================================

    def pdf(self, x: ArrayLike):
        return self.evaluate_pmf(x, self._r, self._p)

    def logpdf(self, x: ArrayLike):
        return self.evaluate_logpmf(x, self._r, self._p)

    def cdf(self, x: ArrayLike):
        return self.evaluate_cdf(x, self._r, self._p)

    def mean(self) -> float:
        """Mean: :math:`rp / (1 - p)`, infinite when :math:`p = 1`."""
        if self._p >= 1.0:
            return np.inf
        return self._r * self._p / (1.0 - self._p)

    def var(self) -> float:
        """Variance: :math:`rp / (1 - p)^2`, infinite when :math:`p = 1`."""
        if self._p >= 1.0:
            return np.inf
        q = 1.0 - self._p
        return self._r * self._p / (q * q)

    def _initial_domain_max(self) -> int:
        if self._p >= 1.0:
            raise ValueError("Negative binomial with p = 1 has no finite domain")
        return int(np.ceil(10.0 * self.mean() + 10.0))

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
        if self._p >= 1.0:
            raise ValueError("Cannot sample a negative binomial with p = 1")
        rng = check_random_state(random_state)
        return rng.negative_binomial(self._r, 1.0 - self._p, size=size)

    @classmethod
    def estimator(cls) -> 'NegativeBinomialEstimator':
        return NegativeBinomialEstimator()


class NegativeBinomialEstimator(MaximumLikelihoodEstimator):
    """
    Moment-matching estimator for the Negative Binomial.

    From the (weighted) sample mean :math:`m` and variance :math:`v`, with
    :math:`\\rho = m / v`:

    .. math::
        r = \\left| \\frac{m\\rho}{\\rho - 1} \\right|, \\qquad p = \\frac{m}{m + r}

    Under-dispersed samples (:math:`v < m`) have no valid moment solution; the
    absolute value still yields a distribution and a ``RuntimeWarning`` is
    issued.
    """

    def learn(self, data: ArrayLike, weights: Optional[ArrayLike] = None) -> NegativeBinomial:
        data, weights = validate_samples(data, weights)
        if np.any(data[weights > 0] < 0):
            raise ValueError("Negative binomial samples must be non-negative")
        mean, variance = weighted_mean_and_variance(data, weights)
        if variance <= 0:
            raise ValueError("Sample variance is zero; cannot estimate r and p")
        if mean <= 0:
            raise ValueError("Sample mean must be positive to estimate r and p")

        ratio = mean / variance
        if ratio == 1.0:
            raise ValueError(
                "Sample variance equals the sample mean; r is unbounded"
            )
        if ratio > 1.0:
            warnings.warn(
                f"Sample is under-dispersed (mean {mean:.6g} > variance "
                f"{variance:.6g}); negative binomial fit is unreliable",
                RuntimeWarning,
            )
        r = abs(mean * ratio / (ratio - 1.0))
        p = mean / (mean + r)
        return NegativeBinomial(r=r, p=p)
