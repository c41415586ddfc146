"""
Base class for discrete distributions on the non-negative integers.

The true support of these families is unbounded, so the enumerable
``domain()`` is truncated where the remaining tail mass drops below
``DOMAIN_TOLERANCE``: it always starts at 0 and the CDF at its last point is
within ``DOMAIN_TOLERANCE`` of 1.
"""

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .closed_form import ClosedFormDistribution, scalar_or_array

DOMAIN_TOLERANCE = 1e-12
MAX_DOMAIN_SIZE = 10**7


class DiscreteDistribution(ClosedFormDistribution):
    """
    Closed-form distribution over the integers ``0, 1, 2, ...``.

    ``pdf`` evaluates the probability mass; ``pmf``/``logpmf`` are aliases.
    Subclasses provide ``_initial_domain_max`` as the first guess for the
    truncation point, which is doubled until the CDF saturates.
    """

    def pmf(self, k: ArrayLike):
        """Probability mass function (alias of :meth:`pdf`)."""
        return self.pdf(k)

    def logpmf(self, k: ArrayLike):
        """Log probability mass function (alias of :meth:`logpdf`)."""
        return self.logpdf(k)

    def support(self) -> Tuple[float, float]:
        return 0.0, np.inf

    def _initial_domain_max(self) -> int:
        raise NotImplementedError

    def domain(self) -> NDArray:
        """
        Enumerable integer support ``0..n``.

        Returns
        -------
        domain : ndarray of int
            Consecutive integers starting at 0, ending at the first tested
            ``n`` with ``cdf(n) >= 1 - DOMAIN_TOLERANCE``.

        Raises
        ------
        ValueError
            If the CDF has not saturated within ``MAX_DOMAIN_SIZE`` points.
        """
        n = min(max(int(self._initial_domain_max()), 1), MAX_DOMAIN_SIZE)
        while self.cdf(n) < 1.0 - DOMAIN_TOLERANCE:
            if n >= MAX_DOMAIN_SIZE:
                raise ValueError(
                    f"{self!r} needs more than {MAX_DOMAIN_SIZE} points to "
                    f"reach CDF 1 - {DOMAIN_TOLERANCE:g}; CDF at {n} is "
                    f"{self.cdf(n):.3e}"
                )
            n = min(2 * n, MAX_DOMAIN_SIZE)
        return np.arange(n + 1)

    def domain_size(self) -> int:
        """Number of points in :meth:`domain`."""
        return len(self.domain())

    def ppf(self, q: ArrayLike):
        """
        Percent point function: smallest ``k`` in the domain with
        ``cdf(k) >= q``.
        """
        q_arr = np.asarray(q, dtype=float)
        if np.any((q_arr < 0) | (q_arr > 1)):
            raise ValueError("Probabilities must lie in [0, 1]")
        domain = self.domain()
        cumulative = self.cdf(domain)
        idx = np.searchsorted(cumulative, q_arr, side='left')
        idx = np.minimum(idx, len(domain) - 1)
        return scalar_or_array(q, domain[idx])

    def entropy(self) -> float:
        """Shannon entropy (nats) summed over :meth:`domain`."""
        mass = self.pmf(self.domain())
        mass = mass[mass > 0]
        return float(-np.sum(mass * np.log(mass)))
