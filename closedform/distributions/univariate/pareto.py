"""
Shifted Pareto distribution.

The Pareto distribution with shape :math:`\\alpha`, scale :math:`s` and shift
:math:`L` has PDF and CDF

.. math::
    p(x) = \\frac{\\alpha s^\\alpha}{(x - L)^{\\alpha + 1}}, \\qquad
    F(x) = 1 - \\left(\\frac{s}{x - L}\\right)^\\alpha

for :math:`x - L \\ge s`, both zero below.

Parametrization:

- Classical: :math:`\\alpha > 0` (shape), :math:`s > 0` (scale),
  :math:`L \\in \\mathbb{R}` (shift)
- Vector: ``[shape, scale, shift]``
"""

from typing import Dict, Optional, Tuple

import numpy as np
from numpy.typing import ArrayLike

from closedform.base import ClosedFormDistribution, MaximumLikelihoodEstimator
from closedform.base.closed_form import check_finite, scalar_or_array
from closedform.base.distribution import check_random_state
from closedform.params import ParetoParams
from closedform.utils.statistics import validate_samples

DEFAULT_SHAPE = 2.0
DEFAULT_SCALE = 1.0
DEFAULT_SHIFT = 0.0


def _check_shape(shape) -> float:
    shape = check_finite("Shape", shape)
    if shape <= 0:
        raise ValueError(f"Shape must be positive, got {shape}")
    return shape


def _check_scale(scale) -> float:
    scale = check_finite("Scale", scale)
    if scale <= 0:
        raise ValueError(f"Scale must be positive, got {scale}")
    return scale


class Pareto(ClosedFormDistribution):
    """
    Shifted Pareto (type I) distribution.

    Parameters
    ----------
    shape : float, optional
        Shape :math:`\\alpha > 0`. Default is ``DEFAULT_SHAPE``.
    scale : float, optional
        Scale :math:`s > 0`. Default is ``DEFAULT_SCALE``.
    shift : float, optional
        Shift :math:`L`. Default is ``DEFAULT_SHIFT``.

    Examples
    --------
    >>> dist = Pareto(shape=3.0, scale=2.0)
    >>> round(dist.pdf(3.0), 12)
    0.296296296296
    >>> dist.pdf(1.5)
    0.0
    """

    _params_class = ParetoParams

    def __init__(self, shape: float = DEFAULT_SHAPE, scale: float = DEFAULT_SCALE,
                 shift: float = DEFAULT_SHIFT):
        super().__init__(shape=shape, scale=scale, shift=shift)

    def _validate_params(self, *, shape, scale, shift) -> Dict[str, float]:
        return {
            'shape': _check_shape(shape),
            'scale': _check_scale(scale),
            'shift': check_finite("Shift", shift),
        }

    @property
    def shape(self) -> float:
        """Shape (tail index) :math:`\\alpha`."""
        return self._shape

    @shape.setter
    def shape(self, value: float) -> None:
        self.set_classical_params(shape=value)

    @property
    def scale(self) -> float:
        """Scale :math:`s`."""
        return self._scale

    @scale.setter
    def scale(self, value: float) -> None:
        self.set_classical_params(scale=value)

    @property
    def shift(self) -> float:
        """Shift :math:`L`."""
        return self._shift

    @shift.setter
    def shift(self, value: float) -> None:
        self.set_classical_params(shift=value)

    # ============================================================
    # Stateless evaluators
    # ============================================================

    @staticmethod
    def evaluate_logpdf(x: ArrayLike, shape: float, scale: float, shift: float = 0.0):
        """Log density, :math:`-\\infty` below :math:`s + L`."""
        shape = _check_shape(shape)
        scale = _check_scale(scale)
        y = np.asarray(x, dtype=float) - shift
        inside = y >= scale
        y_safe = np.where(inside, y, scale)
        log_p = np.log(shape) + shape * np.log(scale) - (shape + 1.0) * np.log(y_safe)
        return scalar_or_array(x, np.where(inside, log_p, -np.inf))

    @staticmethod
    def evaluate_pdf(x: ArrayLike, shape: float, scale: float, shift: float = 0.0):
        """Density :math:`\\alpha s^\\alpha / (x - L)^{\\alpha + 1}`."""
        return scalar_or_array(x, np.exp(Pareto.evaluate_logpdf(x, shape, scale, shift)))

    @staticmethod
    def evaluate_cdf(x: ArrayLike, shape: float, scale: float, shift: float = 0.0):
        """CDF :math:`1 - (s / (x - L))^\\alpha`, zero below :math:`s + L`."""
        shape = _check_shape(shape)
        scale = _check_scale(scale)
        y = np.asarray(x, dtype=float) - shift
        inside = y >= scale
        y_safe = np.where(inside, y, scale)
        result = np.where(inside, 1.0 - (scale / y_safe) ** shape, 0.0)
        return scalar_or_array(x, result)

    # ============================================================
    # Distribution API
    # ============================================================

    def pdf(self, x: ArrayLike):
        return self.evaluate_pdf(x, self._shape, self._scale, self._shift)

    def logpdf(self, x: ArrayLike):
        return self.evaluate_logpdf(x, self._shape, self._scale, self._shift)

    def cdf(self, x: ArrayLike):
        return self.evaluate_cdf(x, self._shape, self._scale, self._shift)

    def ppf(self, q: ArrayLike):
        """
        Inverse CDF :math:`s (1 - q)^{-1/\\alpha} + L`.

        ``q <= 0`` maps to the minimum of the support and ``q >= 1`` to
        :math:`+\\infty`.
        """
        q_arr = np.asarray(q, dtype=float)
        q_safe = np.where((q_arr > 0) & (q_arr < 1), q_arr, 0.5)
        result = self._scale / (1.0 - q_safe) ** (1.0 / self._shape) + self._shift
        result = np.where(q_arr <= 0, self._scale + self._shift, result)
        result = np.where(q_arr >= 1, np.inf, result)
        return scalar_or_array(q, result)

    def support(self) -> Tuple[float, float]:
        return self._scale + self._shift, np.inf

    def mean(self) -> float:
        """
        Mean :math:`\\alpha s / (\\alpha - 1) + L`.

        Raises
        ------
        ValueError
            If :math:`\\alpha \\le 1` (the mean is undefined).
        """
        if self._shape <= 1.0:
            raise ValueError(
                f"Mean is undefined when shape <= 1, got {self._shape}"
            )
        return self._shape * self._scale / (self._shape - 1.0) + self._shift

    def var(self) -> float:
        """
        Variance :math:`s^2 \\alpha / ((\\alpha - 1)^2 (\\alpha - 2))`.

        Raises
        ------
        ValueError
            If :math:`\\alpha \\le 2` (the variance is undefined).
        """
        if self._shape <= 2.0:
            raise ValueError(
                f"Variance is undefined when shape <= 2, got {self._shape}"
            )
        am1 = self._shape - 1.0
        am2 = self._shape - 2.0
        return self._scale ** 2 * self._shape / (am1 * am1 * am2)

    def rvs(self, size=None, random_state=None):
        """
        Generate random samples by inverse transform :math:`s U^{-1/\\alpha} + L`.

        Parameters
        ----------
        size : int or tuple of ints, optional
            Shape of samples to generate.
        random_state : int or Generator, optional
            Random number generator seed or instance.
        """
        rng = check_random_state(random_state)
        # 1 - U lies in (0, 1]
        u = 1.0 - rng.uniform(size=size)
        return self._scale / u ** (1.0 / self._shape) + self._shift

    @classmethod
    def estimator(cls, shift: float = DEFAULT_SHIFT) -> 'ParetoEstimator':
        return ParetoEstimator(shift=shift)

    def fit(self, X: ArrayLike, weights: Optional[ArrayLike] = None) -> 'Pareto':
        """
        Fit shape and scale by maximum likelihood, keeping the current shift.
        """
        fitted = self.estimator(shift=self._shift).learn(X, weights)
        self._set_from_classical(**dict(fitted.classical_params.items()))
        return self


class ParetoEstimator(MaximumLikelihoodEstimator):
    """
    Maximum-likelihood estimator for shape and scale with a known shift.

    With :math:`y_i = x_i - L`:

    .. math::
        \\hat{s} = \\min_i y_i, \\qquad
        \\hat{\\alpha} = \\frac{\\sum_i w_i}{\\sum_i w_i \\log(y_i / \\hat{s})}

    Parameters
    ----------
    shift : float
        Known shift :math:`L`.
    """

    def __init__(self, shift: float = DEFAULT_SHIFT):
        self.shift = check_finite("Shift", shift)

    def learn(self, data: ArrayLike, weights: Optional[ArrayLike] = None) -> Pareto:
        data, weights = validate_samples(data, weights)
        used = weights > 0
        y = data[used] - self.shift
        w = weights[used]
        if np.any(y <= 0):
            raise ValueError(
                f"Pareto samples must exceed the shift {self.shift}"
            )
        scale = float(np.min(y))
        log_ratio = float(np.dot(w, np.log(y / scale)))
        if log_ratio <= 0:
            raise ValueError("All samples are equal; Pareto shape is unbounded")
        shape = float(np.sum(w)) / log_ratio
        return Pareto(shape=shape, scale=scale, shift=self.shift)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shift={self.shift})"
