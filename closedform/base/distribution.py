"""
Base class for probability distributions with scipy-like API.

This module provides an abstract base class that defines the standard interface
for probability distributions, similar to ``scipy.stats``.

The API includes:

- **Density functions**: :meth:`pdf`, :meth:`logpdf`
- **Cumulative distribution**: :meth:`cdf`, :meth:`sf` (survival function)
- **Quantile functions**: :meth:`ppf`, :meth:`isf` (inverse survival)
- **Random sampling**: :meth:`rvs`
- **Fitting**: :meth:`fit` (returns self for method chaining)
- **Moments**: :meth:`mean`, :meth:`var`, :meth:`std`, :meth:`stats`
- **Parameter vector**: :meth:`to_vector`, :meth:`set_from_vector`

It also carries the cache infrastructure shared by every distribution:
a ``_fitted`` flag checked by :meth:`_check_fitted`, and a ``_cached_attrs``
tuple naming the ``functools.cached_property`` entries that
:meth:`_invalidate_cache` clears whenever parameters change.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray


def check_random_state(
    random_state: Optional[Union[int, np.random.Generator]] = None
) -> np.random.Generator:
    """
    Turn ``random_state`` into a ``numpy.random.Generator``.

    Parameters
    ----------
    random_state : None, int or Generator
        None gives a fresh generator, an int seeds a new generator, and a
        Generator is returned unchanged.
    """
    if random_state is None:
        return np.random.default_rng()
    elif isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    return random_state


class Distribution(ABC):
    """
    Abstract base class for probability distributions.

    This class defines the standard API for probability distributions,
    similar to scipy.stats distributions. All concrete distributions
    should inherit from this class.

    Subclasses list the names of their ``cached_property`` attributes in
    ``_cached_attrs`` (extending the parent's tuple) so that
    :meth:`_invalidate_cache` can drop them when parameters change.

    Attributes
    ----------
    _fitted : bool
        Whether parameters have been set.
    """

    _cached_attrs: Tuple[str, ...] = ()

    def __init__(self):
        self._fitted = False

    # ============================================================
    # Cache infrastructure
    # ============================================================

    def _check_fitted(self) -> None:
        """Raise ValueError if parameters have not been set."""
        if not self._fitted:
            raise ValueError(
                f"{self.__class__.__name__} parameters not set. "
                "Set parameters or call fit() first."
            )

    def _invalidate_cache(self) -> None:
        """Drop every cached derived quantity listed in ``_cached_attrs``."""
        for attr in self._cached_attrs:
            self.__dict__.pop(attr, None)

    # ============================================================
    # Density and cumulative functions
    # ============================================================

    @abstractmethod
    def pdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Probability density (or mass) function.

        Parameters
        ----------
        x : array_like
            Points at which to evaluate the PDF.

        Returns
        -------
        pdf : float or ndarray
            Probability density at each point.
        """
        pass

    def logpdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Log of the probability density function.

        Default implementation: log(pdf(x)). Subclasses override for
        numerical stability.
        """
        with np.errstate(divide='ignore'):
            return np.log(self.pdf(x))

    def cdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Cumulative distribution function.

        Parameters
        ----------
        x : array_like
            Points at which to evaluate the CDF.

        Returns
        -------
        cdf : float or ndarray
            Cumulative probability at each point.
        """
        raise NotImplementedError(
            f"CDF not implemented for {self.__class__.__name__}"
        )

    def sf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """Survival function (1 - CDF)."""
        return 1.0 - self.cdf(x)

    def ppf(self, q: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Percent point function (inverse of CDF).

        Parameters
        ----------
        q : array_like
            Probabilities at which to evaluate the PPF.

        Returns
        -------
        ppf : float or ndarray
            Quantiles corresponding to the given probabilities.
        """
        raise NotImplementedError(
            f"PPF not implemented for {self.__class__.__name__}"
        )

    def isf(self, q: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """Inverse survival function (inverse of SF)."""
        return self.ppf(1.0 - np.asarray(q))

    # ============================================================
    # Sampling and fitting
    # ============================================================

    @abstractmethod
    def rvs(self, size: Optional[Union[int, tuple]] = None,
            random_state: Optional[Union[int, np.random.Generator]] = None):
        """
        Random variate sampling.

        Parameters
        ----------
        size : int or tuple of ints, optional
            Shape of the output. If None, returns a single draw.
        random_state : int or numpy.random.Generator, optional
            Random state for reproducibility.

        Returns
        -------
        rvs : ndarray or scalar
            Random variates.
        """
        pass

    def fit(self, X: ArrayLike, weights: Optional[ArrayLike] = None) -> 'Distribution':
        """
        Fit distribution parameters to data (sklearn-style).

        Parameters
        ----------
        X : array_like
            Data to fit the distribution to.
        weights : array_like, optional
            Non-negative sample weights.

        Returns
        -------
        self : Distribution
            The fitted distribution instance (for method chaining).
        """
        raise NotImplementedError(
            f"Fitting not implemented for {self.__class__.__name__}"
        )

    # ============================================================
    # Moments
    # ============================================================

    def mean(self):
        """Mean of the distribution."""
        raise NotImplementedError(
            f"Mean not implemented for {self.__class__.__name__}"
        )

    def var(self):
        """Variance of the distribution."""
        raise NotImplementedError(
            f"Variance not implemented for {self.__class__.__name__}"
        )

    def std(self):
        """Standard deviation of the distribution."""
        return np.sqrt(self.var())

    def stats(self, moments: str = 'mv'):
        """
        Return moments of the distribution.

        Parameters
        ----------
        moments : str, optional
            Composed of letters ['mv'] defining which moments to compute:
            'm' = mean, 'v' = variance. Default is 'mv'.

        Returns
        -------
        stats : float or tuple
            Requested moments.
        """
        results = []
        if 'm' in moments:
            results.append(self.mean())
        if 'v' in moments:
            results.append(self.var())

        if len(results) == 1:
            return results[0]
        return tuple(results)

    def median(self):
        """Median of the distribution."""
        return self.ppf(0.5)

    # ============================================================
    # Parameter vector
    # ============================================================

    @abstractmethod
    def to_vector(self) -> NDArray:
        """
        Parameters as a fixed-length float vector.

        Returns
        -------
        vector : ndarray
            A new array; modifying it does not affect the distribution.
        """
        pass

    @abstractmethod
    def set_from_vector(self, vector: ArrayLike) -> 'Distribution':
        """
        Set parameters from a vector produced by :meth:`to_vector`.

        Raises
        ------
        ValueError
            If ``vector`` is None or has the wrong length. The distribution
            is left unchanged.
        """
        pass

    # ============================================================
    # Scoring
    # ============================================================

    def score(self, X: ArrayLike, y: Optional[ArrayLike] = None) -> float:
        """
        Compute the mean log-likelihood (sklearn-style scoring).

        Higher scores are better (sklearn convention).

        Parameters
        ----------
        X : array_like
            Data samples.
        y : array_like, optional
            Ignored. Present for sklearn API compatibility.

        Returns
        -------
        score : float
            Mean log-likelihood.
        """
        X = np.asarray(X)
        return float(np.mean(self.logpdf(X)))
