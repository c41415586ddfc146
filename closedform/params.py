"""
Frozen dataclass parameter containers and the parameter-vector codec.

Each distribution's classical parameters are represented as a frozen dataclass
with ``slots=True``. Besides attribute and dict-style access, every container
knows how to flatten itself into a fixed-length parameter vector and how to
rebuild itself from one:

============================  ==================================
Container                     Vector order
============================  ==================================
``ChiSquareParams``           ``[dof]``
``NegativeBinomialParams``    ``[r, p]``
``ParetoParams``              ``[shape, scale, shift]``
``PoissonParams``             ``[rate]``
``UniformParams``             ``[minimum, maximum]``
``MultivariateGaussianParams`` ``[mean..., vec(covariance)...]``
============================  ==================================

Examples
--------
>>> from closedform.params import ParetoParams
>>> p = ParetoParams(shape=3.0, scale=2.0, shift=0.0)
>>> p.to_vector()
array([3., 2., 0.])
>>> ParetoParams.from_vector([3.0, 2.0, 0.0]) == p
True

Notes
-----
The ``frozen=True`` flag prevents attribute reassignment, but numpy arrays
are internally mutable (``params.mean[0] = 999`` still works at the Python
level). Multivariate containers hand out copies from the distributions that
build them.
"""

from dataclasses import dataclass, fields
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray


def as_parameter_vector(vector: Optional[ArrayLike], arity: Optional[int] = None) -> NDArray:
    """
    Validate and convert an input into a 1-D float parameter vector.

    Parameters
    ----------
    vector : array_like or None
        Candidate parameter vector.
    arity : int, optional
        Required length. If None, any length is accepted.

    Returns
    -------
    vector : ndarray, shape (arity,)
        Float copy of the input.

    Raises
    ------
    ValueError
        If ``vector`` is None, not one-dimensional, or has the wrong length.
    """
    if vector is None:
        raise ValueError("Parameter vector must not be None")
    vector = np.array(vector, dtype=float)
    if vector.ndim != 1:
        raise ValueError(
            f"Parameter vector must be one-dimensional, got shape {vector.shape}"
        )
    if arity is not None and len(vector) != arity:
        raise ValueError(
            f"Expected {arity}-dimensional parameter vector, got {len(vector)}"
        )
    return vector


class _ParamsBase:
    """Mixin providing dict-style access and the scalar vector codec.

    Allows both ``params.rate`` and ``params['rate']`` access styles,
    plus ``items()``, ``keys()``, ``values()`` for iteration. Scalar
    containers flatten their fields in declaration order.
    """

    __slots__ = ()

    def __getitem__(self, key: str):
        try:
            return getattr(self, key)
        except AttributeError:
            raise KeyError(key)

    def __contains__(self, key: str) -> bool:
        return hasattr(self, key)

    def keys(self):
        """Yield field names."""
        return (f.name for f in fields(self))

    def values(self):
        """Yield field values."""
        return (getattr(self, f.name) for f in fields(self))

    def items(self):
        """Yield ``(name, value)`` pairs."""
        return ((f.name, getattr(self, f.name)) for f in fields(self))

    @classmethod
    def arity(cls) -> int:
        """Number of entries in the parameter vector."""
        return len(fields(cls))

    def to_vector(self) -> NDArray:
        """Flatten the parameters into a new float vector (field order)."""
        return np.array([float(v) for v in self.values()], dtype=float)

    @classmethod
    def from_vector(cls, vector: ArrayLike):
        """
        Rebuild a parameter container from its vector form.

        Raises
        ------
        ValueError
            If ``vector`` is None or its length differs from :meth:`arity`.
        """
        vector = as_parameter_vector(vector, cls.arity())
        names = [f.name for f in fields(cls)]
        return cls(**{name: float(v) for name, v in zip(names, vector)})


# ============================================================================
# Univariate distribution parameters
# ============================================================================

@dataclass(frozen=True, slots=True)
class ChiSquareParams(_ParamsBase):
    """
    Classical parameters for the Chi-square distribution.

    Attributes
    ----------
    dof : float
        Degrees of freedom :math:`k > 0`.
    """
    dof: float


@dataclass(frozen=True, slots=True)
class NegativeBinomialParams(_ParamsBase):
    """
    Classical parameters for the Negative Binomial distribution.

    Attributes
    ----------
    r : float
        Number of successes until the experiment stops, :math:`r > 0`
        (need not be an integer).
    p : float
        Probability parameter :math:`0 \\le p \\le 1`.
    """
    r: float
    p: float


@dataclass(frozen=True, slots=True)
class ParetoParams(_ParamsBase):
    """
    Classical parameters for the (shifted) Pareto distribution.

    Attributes
    ----------
    shape : float
        Shape (tail index) :math:`\\alpha > 0`.
    scale : float
        Scale :math:`s > 0`, the minimum of the unshifted support.
    shift : float
        Location shift :math:`L`, unconstrained.
    """
    shape: float
    scale: float
    shift: float


@dataclass(frozen=True, slots=True)
class PoissonParams(_ParamsBase):
    """
    Classical parameters for the Poisson distribution.

    Attributes
    ----------
    rate : float
        Rate :math:`\\lambda > 0`.
    """
    rate: float


@dataclass(frozen=True, slots=True)
class UniformParams(_ParamsBase):
    """
    Classical parameters for the continuous Uniform distribution.

    Attributes
    ----------
    minimum : float
        Lower end of the support.
    maximum : float
        Upper end of the support, ``maximum >= minimum``.
    """
    minimum: float
    maximum: float


# ============================================================================
# Multivariate distribution parameters
# ============================================================================

@dataclass(frozen=True, slots=True)
class MultivariateGaussianParams(_ParamsBase):
    """
    Classical parameters for the Multivariate Gaussian distribution.

    Attributes
    ----------
    mean : ndarray, shape (d,)
        Mean vector :math:`\\mu`.
    covariance : ndarray, shape (d, d)
        Covariance matrix :math:`\\Sigma` (symmetric positive definite).
    """
    mean: np.ndarray
    covariance: np.ndarray

    def arity(self) -> int:
        """Number of entries in the parameter vector, :math:`d + d^2`."""
        d = len(self.mean)
        return d + d * d

    def to_vector(self) -> NDArray:
        """Flatten into ``[mean, vec(covariance)]`` (row-major)."""
        return np.concatenate([
            np.asarray(self.mean, dtype=float).ravel(),
            np.asarray(self.covariance, dtype=float).ravel(),
        ])

    @classmethod
    def from_vector(cls, vector: ArrayLike, d: Optional[int] = None):
        """
        Rebuild from ``[mean, vec(covariance)]``.

        Parameters
        ----------
        vector : array_like
            Parameter vector of length :math:`d + d^2`.
        d : int, optional
            Dimension. Inferred from the vector length if not provided.
        """
        vector = as_parameter_vector(vector)
        n = len(vector)
        if d is None:
            d = int((-1 + np.sqrt(1 + 4 * n)) / 2)
            if d < 1 or d * (d + 1) != n:
                raise ValueError(f"Invalid parameter length {n}")
        elif n != d + d * d:
            raise ValueError(
                f"Expected {d + d * d}-dimensional parameter vector for d={d}, got {n}"
            )
        return cls(mean=vector[:d].copy(), covariance=vector[d:].reshape(d, d).copy())

    def __eq__(self, other) -> bool:
        if not isinstance(other, MultivariateGaussianParams):
            return NotImplemented
        return (
            np.array_equal(self.mean, other.mean)
            and np.array_equal(self.covariance, other.covariance)
        )
