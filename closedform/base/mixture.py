"""
Finite mixture density model.

A mixture combines an ordered list of component distributions with
non-negative prior weights :math:`w_k`:

.. math::
    p(x) = \\frac{\\sum_k w_k\\, p_k(x)}{\\sum_k w_k}

The weights need not sum to one; every evaluation normalizes by
:attr:`MixtureDensityModel.prior_weight_sum`. Components may be any
:class:`~closedform.base.distribution.Distribution` sharing the same sample
space, scalar families or :class:`MultivariateGaussian` alike.

Method naming convention:

- ``pdf(x)`` / ``logpdf(x)`` / ``cdf(x)``: mixture density and CDF
- ``component_likelihoods(x)``: unweighted :math:`p_k(x)` for every component
- ``component_probabilities(x)``: posterior :math:`P(k|x)` (responsibilities)
- ``most_likely_component(x)``: :math:`\\arg\\max_k P(k|x)`

The parameter vector of a mixture holds the prior weights only; component
parameters are reached through :attr:`MixtureDensityModel.distributions`.
"""

import copy
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.special import logsumexp

from closedform.params import as_parameter_vector

from .distribution import Distribution, check_random_state
from .functions import CumulativeFunction, DensityFunction


def _check_prior_weights(weights: ArrayLike, num_components: int) -> NDArray:
    weights = np.array(weights, dtype=float).ravel()
    if len(weights) != num_components:
        raise ValueError(
            f"Expected {num_components} prior weights, got {len(weights)}"
        )
    if not np.all(np.isfinite(weights)):
        raise ValueError("Prior weights must be finite")
    if np.any(weights < 0):
        raise ValueError(f"Prior weights must be non-negative, got {weights}")
    if np.sum(weights) <= 0:
        raise ValueError("Prior weights must have a positive sum")
    return weights


class MixtureDensityModel(Distribution):
    """
    Weighted finite mixture of component distributions.

    Parameters
    ----------
    distributions : sequence of Distribution
        Components, in order. The list itself is copied; the component
        objects are shared with the caller.
    prior_weights : array_like, optional
        Non-negative weight per component with a positive sum. Defaults to
        all ones.

    Raises
    ------
    ValueError
        If there are no components, or the weights have the wrong length,
        are negative or non-finite, or sum to zero.

    Examples
    --------
    >>> from closedform import Poisson
    >>> mixture = MixtureDensityModel([Poisson(rate=1.0), Poisson(rate=5.0)],
    ...                               prior_weights=[3.0, 1.0])
    >>> mixture.prior_weight_sum
    4.0
    >>> round(mixture.mean(), 6)
    2.0
    """

    def __init__(self, distributions: Sequence[Distribution],
                 prior_weights: Optional[ArrayLike] = None):
        super().__init__()
        distributions = list(distributions)
        if not distributions:
            raise ValueError("Mixture needs at least one component distribution")
        if prior_weights is None:
            prior_weights = np.ones(len(distributions))
        self._prior_weights = _check_prior_weights(prior_weights, len(distributions))
        self._distributions: List[Distribution] = distributions
        self._fitted = True

    # ============================================================
    # Components and weights
    # ============================================================

    @property
    def distributions(self) -> List[Distribution]:
        """Component distributions, in order (a new list of the shared objects)."""
        return list(self._distributions)

    @property
    def num_components(self) -> int:
        """Number of components."""
        return len(self._distributions)

    @property
    def prior_weights(self) -> NDArray:
        """Copy of the prior weights."""
        return self._prior_weights.copy()

    @prior_weights.setter
    def prior_weights(self, weights: ArrayLike) -> None:
        self._prior_weights = _check_prior_weights(weights, self.num_components)

    @property
    def prior_weight_sum(self) -> float:
        """Sum of the prior weights."""
        return float(np.sum(self._prior_weights))

    def _normalized_weights(self) -> NDArray:
        return self._prior_weights / self.prior_weight_sum

    def to_vector(self) -> NDArray:
        """The prior weights as a new vector."""
        return self._prior_weights.copy()

    def set_from_vector(self, vector: ArrayLike) -> 'MixtureDensityModel':
        """
        Replace the prior weights.

        Raises
        ------
        ValueError
            If ``vector`` is None, its length differs from
            :attr:`num_components`, or it is not a valid weight vector.
        """
        vector = as_parameter_vector(vector, self.num_components)
        self._prior_weights = _check_prior_weights(vector, self.num_components)
        return self

    # ============================================================
    # Copies
    # ============================================================

    def copy(self) -> 'MixtureDensityModel':
        """Deep copy: new component objects, new list, new weights."""
        return MixtureDensityModel(
            [copy.deepcopy(dist) for dist in self._distributions],
            self._prior_weights.copy(),
        )

    def __copy__(self) -> 'MixtureDensityModel':
        return self.copy()

    # ============================================================
    # Density and cumulative functions
    # ============================================================

    def _component_values(self, method: str, x: ArrayLike,
                          distributions: Optional[Sequence[Distribution]] = None) -> NDArray:
        """Stack ``component.<method>(x)``, components along the last axis."""
        if distributions is None:
            distributions = self._distributions
        return np.stack(
            [np.asarray(getattr(dist, method)(x), dtype=float)
             for dist in distributions],
            axis=-1,
        )

    def _weighted_values(self, method: str, x: ArrayLike) -> Tuple[NDArray, NDArray]:
        """
        Component values and normalized weights for the components with
        positive weight only.
        """
        active = self._prior_weights > 0
        distributions = [d for d, keep in zip(self._distributions, active) if keep]
        values = self._component_values(method, x, distributions)
        return values, self._normalized_weights()[active]

    @staticmethod
    def _as_output(result: NDArray) -> Union[float, NDArray]:
        return float(result) if np.ndim(result) == 0 else result

    def pdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Mixture density :math:`\\sum_k w_k p_k(x) / \\sum_k w_k`.

        Components with zero weight are not evaluated.

        Parameters
        ----------
        x : array_like
            A single point or a batch, in the components' input format.
        """
        values, weights = self._weighted_values('pdf', x)
        return self._as_output(values @ weights)

    def logpdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """Log density via ``logsumexp`` over the components."""
        log_values, weights = self._weighted_values('logpdf', x)
        return self._as_output(logsumexp(log_values + np.log(weights), axis=-1))

    def cdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """Mixture CDF :math:`\\sum_k w_k F_k(x) / \\sum_k w_k`."""
        values, weights = self._weighted_values('cdf', x)
        return self._as_output(values @ weights)

    def pdf_function(self) -> DensityFunction:
        """Density view bound to a snapshot of the mixture."""
        return DensityFunction(self)

    def cdf_function(self) -> CumulativeFunction:
        """Cumulative view bound to a snapshot of the mixture."""
        return CumulativeFunction(self)

    # ============================================================
    # Component membership
    # ============================================================

    def component_likelihoods(self, x: ArrayLike) -> NDArray:
        """
        Unweighted density of every component at ``x``.

        Returns
        -------
        likelihoods : ndarray
            Shape ``(num_components,)`` for a single point,
            ``(n, num_components)`` for a batch.
        """
        return self._component_values('pdf', x)

    def component_probabilities(self, x: ArrayLike) -> NDArray:
        """
        Posterior probability that each component generated ``x``.

        .. math::
            P(k|x) = \\frac{w_k p_k(x)}{\\sum_j w_j p_j(x)}

        Where every component has zero density at a point, the posterior
        falls back to the normalized prior weights; where only zero-weight
        components have density there, it is uniform. Positive-weight
        components with infinite density at a point share all of its
        posterior.

        Returns
        -------
        probabilities : ndarray
            Same shape as :meth:`component_likelihoods`; each row sums to 1.
        """
        likelihoods = self.component_likelihoods(x)
        vanished = np.sum(likelihoods, axis=-1, keepdims=True) <= 0
        likelihoods = np.where(vanished, 1.0, likelihoods)
        with np.errstate(invalid='ignore'):
            weighted = np.where(self._prior_weights > 0,
                                likelihoods * self._prior_weights, 0.0)
        # Point masses at x take all of the posterior
        infinite = np.isinf(weighted)
        weighted = np.where(np.any(infinite, axis=-1, keepdims=True),
                            infinite.astype(float), weighted)
        # Only zero-weight components explain x: uniform over all components
        weighted = np.where(
            np.sum(weighted, axis=-1, keepdims=True) <= 0, 1.0, weighted
        )
        return weighted / np.sum(weighted, axis=-1, keepdims=True)

    def most_likely_component(self, x: ArrayLike) -> Union[int, NDArray]:
        """
        Index of the component most likely to have generated ``x``.

        Ties resolve to the lowest index.
        """
        best = np.argmax(self.component_probabilities(x), axis=-1)
        return int(best) if np.ndim(best) == 0 else best

    # ============================================================
    # Moments and sampling
    # ============================================================

    def mean(self) -> Union[float, NDArray]:
        """Weighted average of the component means."""
        means = [np.asarray(dist.mean(), dtype=float) for dist in self._distributions]
        result = np.tensordot(self._normalized_weights(), np.stack(means), axes=1)
        return self._as_output(result)

    def var(self) -> Union[float, NDArray]:
        """
        Mixture variance (covariance matrix for vector-valued components).

        .. math::
            \\text{Var}[X] = \\sum_k \\pi_k (\\Sigma_k + m_k m_k^T) - m m^T

        with :math:`\\pi_k = w_k / \\sum_j w_j`.
        """
        weights = self._normalized_weights()
        mean = np.asarray(self.mean(), dtype=float)
        second = np.zeros((mean.size, mean.size)) if mean.ndim else 0.0
        for weight, dist in zip(weights, self._distributions):
            m = np.asarray(dist.mean(), dtype=float)
            v = np.asarray(dist.var(), dtype=float)
            second = second + weight * (v + np.multiply.outer(m, m))
        return self._as_output(second - np.multiply.outer(mean, mean))

    def rvs(self, size=None, random_state=None):
        """
        Draw samples: pick a component by prior weight, then sample from it.

        Parameters
        ----------
        size : int or tuple of ints, optional
            Number (shape) of draws. None gives a single draw.
        random_state : int or Generator, optional
            Random number generator seed or instance.

        Returns
        -------
        samples : float or ndarray
            Vector-valued components add a trailing dimension.
        """
        rng = check_random_state(random_state)
        weights = self._normalized_weights()
        if size is None:
            k = rng.choice(self.num_components, p=weights)
            return self._distributions[k].rvs(random_state=rng)

        shape = (size,) if isinstance(size, (int, np.integer)) else tuple(size)
        n = int(np.prod(shape))
        labels = rng.choice(self.num_components, size=n, p=weights)
        samples = None
        for k, dist in enumerate(self._distributions):
            mask = labels == k
            count = int(np.sum(mask))
            if count == 0:
                continue
            draws = np.asarray(dist.rvs(size=count, random_state=rng), dtype=float)
            if samples is None:
                samples = np.empty((n,) + draws.shape[1:])
            samples[mask] = draws
        if samples is None:
            return np.empty(shape)
        return samples.reshape(shape + samples.shape[1:])

    def __repr__(self) -> str:
        weights = ", ".join(f"{w:.4f}" for w in self._prior_weights)
        return (
            f"{self.__class__.__name__}(num_components={self.num_components}, "
            f"prior_weights=[{weights}])"
        )
