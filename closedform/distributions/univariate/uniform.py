"""
Continuous Uniform distribution.

The Uniform distribution on :math:`[a, b]` has PDF and CDF

.. math::
    p(x) = \\frac{1}{b - a}, \\qquad F(x) = \\frac{x - a}{b - a}

on the interval, zero density outside it. The degenerate case :math:`a = b`
is a point mass: the density is :math:`+\\infty` at :math:`a` and the CDF is a
step.

Parametrization:

- Classical: :math:`a` (minimum), :math:`b` (maximum), :math:`a \\le b`
- Vector: ``[minimum, maximum]``
"""

from typing import Dict, Tuple

import numpy as np
from numpy.typing import ArrayLike

from closedform.base import ClosedFormDistribution, MaximumLikelihoodEstimator
from closedform.base.closed_form import check_finite, scalar_or_array
from closedform.base.distribution import check_random_state
from closedform.params import UniformParams, as_parameter_vector
from closedform.utils.statistics import support_min_and_max

DEFAULT_MIN = 0.0
DEFAULT_MAX = 1.0


def _check_bounds(minimum, maximum) -> Tuple[float, float]:
    minimum = check_finite("Minimum", minimum)
    maximum = check_finite("Maximum", maximum)
    if np.isinf(minimum) or np.isinf(maximum):
        raise ValueError(
            f"Uniform bounds must be finite, got [{minimum}, {maximum}]"
        )
    if minimum > maximum:
        raise ValueError(
            f"Minimum must not exceed maximum, got [{minimum}, {maximum}]"
        )
    return minimum, maximum


class Uniform(ClosedFormDistribution):
    """
    Continuous Uniform distribution on ``[minimum, maximum]``.

    Parameters
    ----------
    minimum : float, optional
        Lower bound. Default is ``DEFAULT_MIN``.
    maximum : float, optional
        Upper bound, not below ``minimum``. Default is ``DEFAULT_MAX``.

    Examples
    --------
    >>> dist = Uniform(minimum=2.0, maximum=6.0)
    >>> dist.pdf(3.0)
    0.25
    >>> dist.cdf(5.0)
    0.75
    >>> Uniform(minimum=1.0, maximum=1.0).pdf(1.0)
    inf
    """

    _params_class = UniformParams

    def __init__(self, minimum: float = DEFAULT_MIN, maximum: float = DEFAULT_MAX):
        super().__init__(minimum=minimum, maximum=maximum)

    def _validate_params(self, *, minimum, maximum) -> Dict[str, float]:
        minimum, maximum = _check_bounds(minimum, maximum)
        return {'minimum': minimum, 'maximum': maximum}

    @property
    def minimum(self) -> float:
        """Lower bound :math:`a`."""
        return self._minimum

    @minimum.setter
    def minimum(self, value: float) -> None:
        self.set_classical_params(minimum=value)

    @property
    def maximum(self) -> float:
        """Upper bound :math:`b`."""
        return self._maximum

    @maximum.setter
    def maximum(self, value: float) -> None:
        self.set_classical_params(maximum=value)

    @property
    def is_degenerate(self) -> bool:
        """True for the point mass :math:`a = b`."""
        return self._minimum == self._maximum

    def set_from_vector(self, vector: ArrayLike) -> 'Uniform':
        """
        Set bounds from ``[minimum, maximum]``.

        The two entries are sorted first, so ``[3, 1]`` sets ``[1, 3]``.
        """
        vector = np.sort(as_parameter_vector(vector, UniformParams.arity()))
        self._set_from_classical(minimum=vector[0], maximum=vector[1])
        return self

    # ============================================================
    # Stateless evaluation
    # ============================================================

    @staticmethod
    def evaluate_pdf(x: ArrayLike, minimum: float, maximum: float):
        """Density on ``[minimum, maximum]``; ``inf`` at the point when degenerate."""
        a, b = _check_bounds(minimum, maximum)
        x_arr = np.asarray(x, dtype=float)
        inside = (x_arr >= a) & (x_arr <= b)
        density = np.inf if a == b else 1.0 / (b - a)
        return scalar_or_array(x, np.where(inside, density, 0.0))

    @staticmethod
    def evaluate_cdf(x: ArrayLike, minimum: float, maximum: float):
        """Linear ramp from ``minimum`` to ``maximum``; a step when degenerate."""
        a, b = _check_bounds(minimum, maximum)
        x_arr = np.asarray(x, dtype=float)
        if a == b:
            return scalar_or_array(x, np.where(x_arr >= a, 1.0, 0.0))
        return scalar_or_array(x, np.clip((x_arr - a) / (b - a), 0.0, 1.0))

    # ============================================================
    # Distribution API
    # ============================================================

    def pdf(self, x: ArrayLike):
        return self.evaluate_pdf(x, self._minimum, self._maximum)

    def logpdf(self, x: ArrayLike):
        with np.errstate(divide='ignore'):
            return scalar_or_array(x, np.log(self.pdf(x)))

    def cdf(self, x: ArrayLike):
        return self.evaluate_cdf(x, self._minimum, self._maximum)

    def ppf(self, q: ArrayLike):
        """Inverse CDF :math:`a + q (b - a)` for ``q`` in ``[0, 1]``."""
        q_arr = np.asarray(q, dtype=float)
        if np.any((q_arr < 0) | (q_arr > 1)):
            raise ValueError("Probabilities must lie in [0, 1]")
        a, b = self._minimum, self._maximum
        return scalar_or_array(q, a + q_arr * (b - a))

    def support(self) -> Tuple[float, float]:
        return self._minimum, self._maximum

    def mean(self) -> float:
        """Mean: :math:`(a + b) / 2`."""
        return (self._minimum + self._maximum) / 2.0

    def var(self) -> float:
        """Variance: :math:`(b - a)^2 / 12`."""
        width = self._maximum - self._minimum
        return width * width / 12.0

    def entropy(self) -> float:
        """Differential entropy :math:`\\log(b - a)`."""
        with np.errstate(divide='ignore'):
            return float(np.log(self._maximum - self._minimum))

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
        a, b = self._minimum, self._maximum
        return a + (b - a) * rng.random(size)

    @classmethod
    def estimator(cls) -> 'UniformEstimator':
        return UniformEstimator()


class UniformEstimator(MaximumLikelihoodEstimator):
    """
    Maximum-likelihood estimator: the smallest interval holding every sample.

    Samples with zero weight are ignored.
    """

    def learn(self, data: ArrayLike, weights=None) -> Uniform:
        minimum, maximum = support_min_and_max(data, weights)
        return Uniform(minimum=minimum, maximum=maximum)
