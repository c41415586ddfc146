"""
Base class for closed-form scalar distributions.

A closed-form distribution is fully described by a handful of real
parameters held in a frozen parameter dataclass (see :mod:`closedform.params`).
This base class supplies everything that is common to the families:

- construction with defaults and validated setters that change nothing when
  they fail (``set_classical_params``, per-parameter properties),
- the parameter-vector codec (``to_vector``, ``set_from_vector``,
  ``from_vector``),
- deep copies and parameter equality,
- density / cumulative views (``pdf_function``, ``cdf_function``),
- ``fit`` delegating to the family's maximum-likelihood estimator.

Subclasses define ``_params_class``, implement ``_validate_params`` (return
validated floats or raise ``ValueError``) and the family math.
"""

import copy
from abc import abstractmethod
from dataclasses import fields
from functools import cached_property
from typing import Dict, Optional, Tuple, Type, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .distribution import Distribution
from .estimator import MaximumLikelihoodEstimator
from .functions import CumulativeFunction, DensityFunction


def scalar_or_array(x: ArrayLike, result: ArrayLike) -> Union[float, NDArray]:
    """Return a float for scalar input and an ndarray otherwise."""
    if np.isscalar(x) or (hasattr(x, 'shape') and np.shape(x) == ()):
        return float(result)
    return np.asarray(result, dtype=float)


def check_finite(name: str, value) -> float:
    """Coerce a parameter to float, rejecting NaN."""
    value = float(value)
    if np.isnan(value):
        raise ValueError(f"{name} must not be NaN")
    return value


class ClosedFormDistribution(Distribution):
    """
    Abstract base class for distributions with a fixed set of scalar parameters.

    Instances are always fitted: the constructor stores defaults or the given
    parameters. Parameters live in named internal attributes (``_rate``,
    ``_shape``, ...); ``classical_params`` is a cached frozen dataclass built
    from them and dropped whenever they change.

    Examples
    --------
    >>> from closedform import Pareto
    >>> dist = Pareto(shape=3.0, scale=2.0)
    >>> dist.set_classical_params(shift=1.0)
    Pareto(shape=3.0000, scale=2.0000, shift=1.0000)
    >>> dist.to_vector()
    array([3., 2., 1.])
    """

    _params_class: Type = None
    _cached_attrs: Tuple[str, ...] = Distribution._cached_attrs + ('classical_params',)

    def __init__(self, **params):
        super().__init__()
        self._set_from_classical(**params)

    # ============================================================
    # Parameter state
    # ============================================================

    @classmethod
    def parameter_names(cls) -> Tuple[str, ...]:
        """Names of the classical parameters, in vector order."""
        return tuple(f.name for f in fields(cls._params_class))

    @abstractmethod
    def _validate_params(self, **kwargs) -> Dict[str, float]:
        """
        Check a complete set of classical parameters.

        Returns
        -------
        params : dict
            Validated float values keyed by parameter name.

        Raises
        ------
        ValueError
            If any parameter is outside the family's domain.
        """
        pass

    def _set_from_classical(self, **kwargs) -> None:
        """Validate then store a complete parameter set."""
        validated = self._validate_params(**kwargs)
        for name in self.parameter_names():
            setattr(self, '_' + name, validated[name])
        self._fitted = True
        self._invalidate_cache()

    @classmethod
    def from_classical_params(cls, **kwargs) -> 'ClosedFormDistribution':
        """Create a distribution from classical parameters."""
        return cls(**kwargs)

    def set_classical_params(self, **kwargs) -> 'ClosedFormDistribution':
        """
        Update some or all classical parameters.

        The merged parameter set is validated as a whole before anything is
        stored, so a rejected call leaves the distribution unchanged.

        Returns
        -------
        self : ClosedFormDistribution
            Returns self for method chaining.
        """
        names = self.parameter_names()
        unknown = sorted(set(kwargs) - set(names))
        if unknown:
            raise ValueError(
                f"Unknown parameter(s) for {self.__class__.__name__}: {', '.join(unknown)}"
            )
        merged = {name: getattr(self, '_' + name) for name in names}
        merged.update(kwargs)
        self._set_from_classical(**merged)
        return self

    @cached_property
    def classical_params(self):
        """Classical parameters as a frozen dataclass (cached)."""
        self._check_fitted()
        return self._params_class(
            **{name: getattr(self, '_' + name) for name in self.parameter_names()}
        )

    # ============================================================
    # Parameter vector
    # ============================================================

    def to_vector(self) -> NDArray:
        """Parameters as a new float vector in the documented order."""
        return self.classical_params.to_vector()

    def set_from_vector(self, vector: ArrayLike) -> 'ClosedFormDistribution':
        """
        Set parameters from a vector produced by :meth:`to_vector`.

        Raises
        ------
        ValueError
            If ``vector`` is None, has the wrong length, or holds values
            outside the family's domain. Nothing is changed in that case.
        """
        params = self._params_class.from_vector(vector)
        self._set_from_classical(**dict(params.items()))
        return self

    @classmethod
    def from_vector(cls, vector: ArrayLike) -> 'ClosedFormDistribution':
        """Create a distribution from its parameter vector."""
        instance = cls()
        instance.set_from_vector(vector)
        return instance

    # ============================================================
    # Copies and comparison
    # ============================================================

    def copy(self) -> 'ClosedFormDistribution':
        """Independent deep copy."""
        return copy.deepcopy(self)

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.classical_params == other.classical_params

    __hash__ = None

    # ============================================================
    # Views
    # ============================================================

    def pdf_function(self) -> DensityFunction:
        """Density (mass) view bound to a snapshot of the current parameters."""
        return DensityFunction(self)

    def cdf_function(self) -> CumulativeFunction:
        """Cumulative view bound to a snapshot of the current parameters."""
        return CumulativeFunction(self)

    def support(self) -> Tuple[float, float]:
        """Lower and upper end of the support."""
        raise NotImplementedError(
            f"Support not implemented for {self.__class__.__name__}"
        )

    # ============================================================
    # Fitting
    # ============================================================

    @classmethod
    def estimator(cls) -> MaximumLikelihoodEstimator:
        """Maximum-likelihood estimator for this family."""
        raise NotImplementedError(
            f"No estimator available for {cls.__name__}"
        )

    def fit(self, X: ArrayLike, weights: Optional[ArrayLike] = None) -> 'ClosedFormDistribution':
        """
        Fit parameters by maximum likelihood.

        Parameters
        ----------
        X : array_like
            Samples.
        weights : array_like, optional
            Non-negative sample weights.

        Returns
        -------
        self : ClosedFormDistribution
            Returns self for method chaining (sklearn convention).
        """
        fitted = self.estimator().learn(X, weights)
        self._set_from_classical(**dict(fitted.classical_params.items()))
        return self

    # ============================================================
    # String representation
    # ============================================================

    def __repr__(self) -> str:
        param_str = ", ".join(
            f"{k}={v:.4f}" for k, v in self.classical_params.items()
        )
        return f"{self.__class__.__name__}({param_str})"
