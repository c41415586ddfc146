"""
Maximum-likelihood estimator base class.

An estimator is a stateless function object: :meth:`learn` consumes a sample
collection (optionally weighted) and returns a *new* fitted distribution of
its family. Distributions expose their estimator through ``estimator()`` and
use it from ``fit()``.

Examples
--------
>>> from closedform import Poisson
>>> est = Poisson.estimator()
>>> est.learn([1, 2, 3, 2]).rate
2.0
"""

from abc import ABC, abstractmethod
from typing import Optional

from numpy.typing import ArrayLike


class MaximumLikelihoodEstimator(ABC):
    """
    Abstract maximum-likelihood estimator.

    Subclasses implement :meth:`learn`; input validation lives in
    :func:`closedform.utils.statistics.validate_samples`, which raises
    ``ValueError`` on empty input, non-finite values or bad weights.
    """

    @abstractmethod
    def learn(self, data: ArrayLike, weights: Optional[ArrayLike] = None):
        """
        Fit a distribution to ``data``.

        Parameters
        ----------
        data : array_like
            Observed samples.
        weights : array_like, optional
            Non-negative sample weights, one per sample.

        Returns
        -------
        dist : Distribution
            Newly constructed distribution with fitted parameters.
        """
        pass

    def __call__(self, data: ArrayLike, weights: Optional[ArrayLike] = None):
        return self.learn(data, weights)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
