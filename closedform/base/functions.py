"""
Probability function views.

A view is a small callable bound to a snapshot of a distribution's parameters
at the time the view was requested:

- :class:`DensityFunction` evaluates the PDF (or PMF for discrete families).
- :class:`CumulativeFunction` evaluates the CDF.

Later changes to the originating distribution do not affect an existing view.

Examples
--------
>>> from closedform import Poisson
>>> dist = Poisson(rate=2.0)
>>> pmf = dist.pdf_function()
>>> dist.rate = 5.0
>>> round(pmf(3), 10)  # still evaluated with rate=2.0
0.1804470443
"""

import copy
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray


class ProbabilityFunction:
    """
    Common base for views over a distribution snapshot.

    Parameters
    ----------
    distribution : Distribution
        Distribution whose current parameters the view captures. The view
        stores a deep copy.
    """

    def __init__(self, distribution):
        self._distribution = copy.deepcopy(distribution)

    @property
    def distribution(self):
        """The parameter snapshot this view evaluates."""
        return self._distribution

    def evaluate(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        raise NotImplementedError

    def __call__(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        return self.evaluate(x)

    def domain(self) -> NDArray:
        """Enumerable integer support of the underlying discrete distribution."""
        if not hasattr(self._distribution, 'domain'):
            raise AttributeError(
                f"{self._distribution.__class__.__name__} has no enumerable domain"
            )
        return self._distribution.domain()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._distribution!r})"


class DensityFunction(ProbabilityFunction):
    """Probability density (mass) function view."""

    def evaluate(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        return self._distribution.pdf(x)

    def log_evaluate(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        return self._distribution.logpdf(x)


class CumulativeFunction(ProbabilityFunction):
    """Cumulative distribution function view."""

    def evaluate(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        return self._distribution.cdf(x)

    def derivative(self) -> DensityFunction:
        """Density view of the same snapshot."""
        return DensityFunction(self._distribution)
