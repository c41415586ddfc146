"""
Multivariate Gaussian distribution.

The multivariate Gaussian distribution has PDF:

.. math::
    p(x|\\mu,\\Sigma) = (2\\pi)^{-d/2} |\\Sigma|^{-1/2}
    \\exp\\left(-\\frac{1}{2} (x-\\mu)^T \\Sigma^{-1} (x-\\mu)\\right)

for :math:`x \\in \\mathbb{R}^d`, where :math:`\\mu` is the mean vector
and :math:`\\Sigma` is the covariance matrix.

Parametrization:

- Classical: :math:`\\mu` (mean, d-vector), :math:`\\Sigma` (covariance, d×d
  symmetric positive definite)
- Vector: ``[mu_0, ..., mu_{d-1}, vec(Sigma)]`` with :math:`\\Sigma` flattened
  row-major

Internal storage
----------------
The distribution stores the Cholesky decomposition of the covariance matrix
rather than the full covariance or its inverse:

- ``_mu``: mean vector, shape ``(d,)``
- ``_L``: lower Cholesky factor of :math:`\\Sigma`, shape ``(d, d)``

Derived quantities ``log_det_covariance`` and ``L_inv`` are cached properties,
computed on demand and invalidated when parameters change.
"""

import copy
from functools import cached_property
from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats
from scipy.linalg import LinAlgError, cholesky, solve_triangular

from closedform.base import (
    CumulativeFunction,
    DensityFunction,
    Distribution,
    MaximumLikelihoodEstimator,
)
from closedform.base.distribution import check_random_state
from closedform.params import MultivariateGaussianParams, as_parameter_vector
from closedform.utils.statistics import weighted_mean_and_covariance

DEFAULT_DIMENSIONALITY = 2
SYMMETRY_TOLERANCE = 1e-5


def _check_mean_and_covariance(mean, covariance) -> Tuple[NDArray, NDArray, NDArray]:
    """
    Validate a mean vector and covariance matrix.

    Returns
    -------
    mean : ndarray, shape (d,)
    covariance : ndarray, shape (d, d)
        Symmetrized copy.
    L : ndarray, shape (d, d)
        Lower Cholesky factor of ``covariance``.
    """
    mean = np.array(mean, dtype=float).ravel()
    covariance = np.array(covariance, dtype=float)

    # Scalar variance for the 1D case
    if covariance.ndim == 0:
        covariance = covariance.reshape(1, 1)

    d = len(mean)
    if d == 0:
        raise ValueError("Mean vector must not be empty")
    if covariance.shape != (d, d):
        raise ValueError(
            f"Covariance shape {covariance.shape} doesn't match mean dimension {d}"
        )
    if not (np.all(np.isfinite(mean)) and np.all(np.isfinite(covariance))):
        raise ValueError("Mean and covariance must be finite")

    asymmetry = np.max(np.abs(covariance - covariance.T))
    if asymmetry > SYMMETRY_TOLERANCE:
        raise ValueError(
            f"Covariance matrix must be symmetric, max asymmetry {asymmetry:.3g}"
        )
    covariance = (covariance + covariance.T) / 2

    # Cholesky also validates positive definiteness
    try:
        L = cholesky(covariance, lower=True)
    except LinAlgError:
        raise ValueError("Covariance matrix must be positive definite")
    return mean, covariance, L


class MultivariateGaussian(Distribution):
    """
    Multivariate Gaussian distribution.

    Parameters
    ----------
    mean : array_like, optional
        Mean vector, shape ``(d,)``. Defaults to zeros.
    covariance : array_like, optional
        Covariance matrix, shape ``(d, d)``. Defaults to the identity.

    With neither argument the distribution is the standard Gaussian in
    ``DEFAULT_DIMENSIONALITY`` dimensions.

    Attributes
    ----------
    _mu : ndarray
        Mean vector, shape ``(d,)``.
    _L : ndarray
        Lower Cholesky factor of :math:`\\Sigma`, shape ``(d, d)``.
        :math:`\\Sigma = L L^T`.
    _d : int
        Dimension of the distribution.

    Examples
    --------
    >>> dist = MultivariateGaussian()
    >>> dist.d
    2
    >>> mu = np.array([1.0, 2.0])
    >>> sigma = np.array([[1.0, 0.5], [0.5, 1.0]])
    >>> dist = MultivariateGaussian(mean=mu, covariance=sigma)
    >>> dist.mean()
    array([1., 2.])
    """

    _cached_attrs: Tuple[str, ...] = Distribution._cached_attrs + (
        'log_det_covariance', 'L_inv', 'classical_params',
    )

    def __init__(self, mean: Optional[ArrayLike] = None,
                 covariance: Optional[ArrayLike] = None):
        super().__init__()
        if mean is None and covariance is None:
            d = DEFAULT_DIMENSIONALITY
        elif mean is not None:
            d = np.size(mean)
        else:
            d = np.atleast_2d(covariance).shape[0]
        if mean is None:
            mean = np.zeros(d)
        if covariance is None:
            covariance = np.eye(d)
        self._d: Optional[int] = None
        self._mu: Optional[NDArray] = None
        self._L: Optional[NDArray] = None
        self._set_from_classical(mean=mean, covariance=covariance)

    @property
    def d(self) -> int:
        """Dimension of the distribution."""
        return self._d

    # ============================================================
    # Cached derived quantities
    # ============================================================

    @cached_property
    def log_det_covariance(self) -> float:
        r"""
        Log-determinant of the covariance matrix (cached).

        .. math::
            \log|\Sigma| = 2 \sum_{i=1}^d \log L_{ii}
        """
        self._check_fitted()
        return float(2.0 * np.sum(np.log(np.diag(self._L))))

    @cached_property
    def L_inv(self) -> NDArray:
        r"""
        Inverse of the lower Cholesky factor (cached).

        :math:`L^{-1}` such that :math:`\Sigma^{-1} = L^{-T} L^{-1}`.
        """
        self._check_fitted()
        return solve_triangular(self._L, np.eye(self._d), lower=True)

    @cached_property
    def classical_params(self) -> MultivariateGaussianParams:
        """Mean and covariance as a frozen dataclass (cached)."""
        self._check_fitted()
        return MultivariateGaussianParams(
            mean=self._mu.copy(), covariance=self._L @ self._L.T
        )

    # ============================================================
    # Parameter state
    # ============================================================

    def _set_from_classical(self, *, mean, covariance) -> None:
        """Validate, then store the mean and the Cholesky factor."""
        mu, _, L = _check_mean_and_covariance(mean, covariance)
        self._d = len(mu)
        self._mu = mu
        self._L = L
        self._fitted = True
        self._invalidate_cache()

    @classmethod
    def from_classical_params(cls, *, mean, covariance) -> 'MultivariateGaussian':
        return cls(mean=mean, covariance=covariance)

    def set_classical_params(self, *, mean=None, covariance=None) -> 'MultivariateGaussian':
        """
        Update the mean and/or covariance.

        The dimension may change only when both are given together.
        """
        if mean is None:
            mean = self._mu
        if covariance is None:
            covariance = self._L @ self._L.T
        self._set_from_classical(mean=mean, covariance=covariance)
        return self

    def to_vector(self) -> NDArray:
        """Parameters as ``[mean, vec(covariance)]``."""
        return self.classical_params.to_vector()

    def set_from_vector(self, vector: ArrayLike) -> 'MultivariateGaussian':
        """
        Set parameters from ``[mean, vec(covariance)]``.

        The vector length must match the current dimension :math:`d + d^2`.
        """
        vector = as_parameter_vector(vector, self._d + self._d * self._d)
        params = MultivariateGaussianParams.from_vector(vector, d=self._d)
        self._set_from_classical(mean=params.mean, covariance=params.covariance)
        return self

    @classmethod
    def from_vector(cls, vector: ArrayLike) -> 'MultivariateGaussian':
        """Create a distribution from a vector, inferring the dimension."""
        params = MultivariateGaussianParams.from_vector(vector)
        return cls(mean=params.mean, covariance=params.covariance)

    def copy(self) -> 'MultivariateGaussian':
        """Independent deep copy."""
        return copy.deepcopy(self)

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.classical_params == other.classical_params

    __hash__ = None

    # ============================================================
    # Density
    # ============================================================

    def logpdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Log probability density using Cholesky-based computation.

        .. math::
            \\log p(x|\\mu,\\Sigma) = -\\frac{d}{2}\\log(2\\pi)
            - \\frac{1}{2}\\log|\\Sigma|
            - \\frac{1}{2}(x-\\mu)^T \\Sigma^{-1}(x-\\mu)

        where :math:`\\Sigma^{-1}(x-\\mu) = L^{-T}(L^{-1}(x-\\mu))`.

        Parameters
        ----------
        x : array_like
            Shape ``(d,)`` for a single point, ``(n, d)`` for n points.

        Returns
        -------
        logpdf : float or ndarray
            Float for a single point, shape ``(n,)`` otherwise.
        """
        self._check_fitted()

        x = np.asarray(x, dtype=float)
        d = self._d
        const = -0.5 * d * np.log(2 * np.pi) - 0.5 * self.log_det_covariance

        if x.ndim <= 1:
            x = np.atleast_1d(x)
            if len(x) != d:
                raise ValueError(f"Expected {d}-dimensional input, got {len(x)}")
            z = solve_triangular(self._L, x - self._mu, lower=True)
            return float(const - 0.5 * (z @ z))

        if x.shape[1] != d:
            raise ValueError(f"Expected {d}-dimensional input, got {x.shape[1]}")
        # Z = L^{-1}(X - μ)^T, shape (d, n)
        Z = solve_triangular(self._L, (x - self._mu).T, lower=True)
        return const - 0.5 * np.sum(Z ** 2, axis=0)

    def pdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """Probability density: exp(logpdf(x))."""
        result = np.exp(self.logpdf(x))
        return float(result) if np.ndim(result) == 0 else result

    def cdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Cumulative distribution function via ``scipy.stats.multivariate_normal``.
        """
        self._check_fitted()
        result = self.to_scipy().cdf(x)
        return float(result) if np.ndim(result) == 0 else result

    def pdf_function(self) -> DensityFunction:
        """Density view bound to a snapshot of the current parameters."""
        return DensityFunction(self)

    def cdf_function(self) -> CumulativeFunction:
        """Cumulative view bound to a snapshot of the current parameters."""
        return CumulativeFunction(self)

    # ============================================================
    # Distribution methods
    # ============================================================

    def rvs(self, size=None, random_state=None) -> NDArray:
        """
        Generate random samples using :math:`X = \\mu + L Z` where :math:`Z \\sim N(0, I)`.

        Parameters
        ----------
        size : int or tuple of ints, optional
            Number of samples to generate.
        random_state : int or Generator, optional
            Random number generator.

        Returns
        -------
        samples : ndarray
            Shape ``(size, d)``, or ``(d,)`` for ``size=None``.
        """
        self._check_fitted()
        rng = check_random_state(random_state)
        d = self._d

        if size is None:
            return self._mu + self._L @ rng.standard_normal(d)
        if isinstance(size, (int, np.integer)):
            z = rng.standard_normal((size, d))
        else:
            z = rng.standard_normal((*size, d))
        return self._mu + z @ self._L.T

    def mean(self) -> NDArray:
        """Mean vector :math:`\\mu`."""
        self._check_fitted()
        return self._mu.copy()

    def var(self) -> NDArray:
        """Covariance matrix :math:`\\Sigma = L L^T`."""
        return self.cov()

    def cov(self) -> NDArray:
        """Covariance matrix :math:`\\Sigma = L L^T`."""
        self._check_fitted()
        return self._L @ self._L.T

    def std(self) -> NDArray:
        """Marginal standard deviations, :math:`\\sqrt{\\text{diag}(\\Sigma)}`."""
        self._check_fitted()
        return np.sqrt(np.sum(self._L ** 2, axis=1))

    def entropy(self) -> float:
        """
        Differential entropy.

        .. math::
            H(X) = \\frac{d}{2}(1 + \\log(2\\pi)) + \\frac{1}{2}\\log|\\Sigma|
        """
        self._check_fitted()
        return 0.5 * self._d * (1 + np.log(2 * np.pi)) + 0.5 * self.log_det_covariance

    @classmethod
    def estimator(cls) -> 'MultivariateGaussianEstimator':
        return MultivariateGaussianEstimator()

    def fit(self, X: ArrayLike, weights: Optional[ArrayLike] = None) -> 'MultivariateGaussian':
        """
        Fit mean and covariance by (weighted) maximum likelihood.

        Parameters
        ----------
        X : array_like
            Training data, shape ``(n_samples, d)``.
        weights : array_like, optional
            Non-negative sample weights.

        Returns
        -------
        self : MultivariateGaussian
        """
        fitted = self.estimator().learn(X, weights)
        self._set_from_classical(mean=fitted._mu, covariance=fitted.cov())
        return self

    # ============================================================
    # Scipy compatibility
    # ============================================================

    def to_scipy(self):
        """Convert to a frozen ``scipy.stats.multivariate_normal``."""
        self._check_fitted()
        return stats.multivariate_normal(mean=self._mu, cov=self.cov())

    def __repr__(self) -> str:
        if self._d <= 3:
            mu_str = ", ".join(f"{x:.4f}" for x in self._mu)
            return f"MultivariateGaussian(μ=[{mu_str}], d={self._d})"
        return f"MultivariateGaussian(d={self._d})"


class MultivariateGaussianEstimator(MaximumLikelihoodEstimator):
    """
    Maximum-likelihood estimator: weighted sample mean and covariance.

    .. math::
        \\hat\\mu = \\frac{\\sum_i w_i x_i}{\\sum_i w_i}, \\qquad
        \\hat\\Sigma = \\frac{\\sum_i w_i (x_i - \\hat\\mu)(x_i - \\hat\\mu)^T}{\\sum_i w_i}

    No regularization is applied: a singular sample covariance (for instance
    from fewer than :math:`d + 1` distinct points) raises ``ValueError``.
    """

    def learn(self, data: ArrayLike, weights: Optional[ArrayLike] = None) -> MultivariateGaussian:
        mean, covariance = weighted_mean_and_covariance(data, weights)
        return MultivariateGaussian(mean=mean, covariance=covariance)
