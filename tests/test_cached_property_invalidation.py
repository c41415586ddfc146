"""
Tests for the cache infrastructure on Distribution base class.

Tests that:
- _fitted flag works correctly
- _check_fitted() raises before parameters are set, passes after
- _invalidate_cache() clears cached_property values
- _invalidate_cache() is idempotent (safe when no cache)
- _cached_attrs inheritance works for subclasses
- classical_params and Cholesky-derived caches follow parameter changes
"""

from functools import cached_property

import numpy as np
import pytest

from closedform import MultivariateGaussian, Pareto, Poisson
from closedform.base.closed_form import ClosedFormDistribution
from closedform.base.distribution import Distribution


# ============================================================================
# Minimal concrete subclass for testing
# ============================================================================

class _MockDistribution(Distribution):
    """Minimal concrete Distribution for testing cache infrastructure."""

    _cached_attrs = ('expensive_value',)

    def __init__(self):
        super().__init__()
        self._data = None
        self._compute_count = 0  # Track how many times expensive_value is computed

    @cached_property
    def expensive_value(self) -> float:
        """Simulates an expensive derived computation."""
        self._compute_count += 1
        return self._data * 2.0

    def set_data(self, value: float):
        self._data = value
        self._fitted = True
        self._invalidate_cache()

    # Required abstract methods (minimal stubs)
    def pdf(self, x):
        return np.ones_like(np.asarray(x, dtype=float))

    def rvs(self, size=None, random_state=None):
        return np.zeros(size or 1)

    def to_vector(self):
        return np.array([self._data])

    def set_from_vector(self, vector):
        self.set_data(float(vector[0]))
        return self

    def fit(self, data, weights=None):
        self.set_data(float(np.mean(data)))
        return self


class _MockChild(_MockDistribution):
    """Child class that extends _cached_attrs."""

    _cached_attrs = _MockDistribution._cached_attrs + ('another_value',)

    @cached_property
    def another_value(self) -> float:
        return self._data ** 2


# ============================================================================
# Tests
# ============================================================================

class TestFittedFlag:
    def test_initially_not_fitted(self):
        dist = _MockDistribution()
        assert dist._fitted is False

    def test_fitted_after_set_data(self):
        dist = _MockDistribution()
        dist.set_data(5.0)
        assert dist._fitted is True

    def test_fitted_after_fit(self):
        dist = _MockDistribution()
        result = dist.fit(np.array([1.0, 2.0, 3.0]))
        assert dist._fitted is True
        assert result is dist  # fit returns self

    def test_closed_form_fitted_on_construction(self):
        assert Poisson()._fitted is True


class TestCheckFitted:
    def test_raises_when_not_fitted(self):
        dist = _MockDistribution()
        with pytest.raises(ValueError, match="parameters not set"):
            dist._check_fitted()

    def test_passes_when_fitted(self):
        dist = _MockDistribution()
        dist.set_data(5.0)
        dist._check_fitted()  # Should not raise

    def test_error_includes_class_name(self):
        dist = _MockDistribution()
        with pytest.raises(ValueError, match="_MockDistribution"):
            dist._check_fitted()


class TestInvalidateCache:
    def test_cached_property_computed_once(self):
        dist = _MockDistribution()
        dist.set_data(5.0)
        assert dist._compute_count == 0

        assert dist.expensive_value == 10.0
        assert dist._compute_count == 1

        assert dist.expensive_value == 10.0
        assert dist._compute_count == 1

    def test_invalidate_clears_cache(self):
        dist = _MockDistribution()
        dist.set_data(5.0)
        _ = dist.expensive_value

        dist._invalidate_cache()
        assert dist.expensive_value == 10.0
        assert dist._compute_count == 2

    def test_set_data_invalidates_cache(self):
        dist = _MockDistribution()
        dist.set_data(5.0)
        assert dist.expensive_value == 10.0

        dist.set_data(7.0)
        assert dist.expensive_value == 14.0
        assert dist._compute_count == 2

    def test_invalidate_idempotent_no_cache(self):
        """_invalidate_cache is safe to call when no cached values exist."""
        dist = _MockDistribution()
        dist._invalidate_cache()
        dist._invalidate_cache()


class TestCachedAttrsInheritance:
    def test_child_extends_cached_attrs(self):
        assert 'expensive_value' in _MockChild._cached_attrs
        assert 'another_value' in _MockChild._cached_attrs

    def test_child_invalidates_both(self):
        dist = _MockChild()
        dist.set_data(5.0)
        assert dist.expensive_value == 10.0
        assert dist.another_value == 25.0

        dist.set_data(3.0)
        assert dist.expensive_value == 6.0
        assert dist.another_value == 9.0

    def test_base_distribution_has_empty_cached_attrs(self):
        assert Distribution._cached_attrs == ()

    def test_closed_form_caches_classical_params(self):
        assert 'classical_params' in ClosedFormDistribution._cached_attrs

    def test_gaussian_cached_attrs(self):
        for name in ('log_det_covariance', 'L_inv', 'classical_params'):
            assert name in MultivariateGaussian._cached_attrs


# ============================================================================
# Family caches
# ============================================================================

class TestClassicalParamsCache:
    def test_cached_until_setter(self):
        dist = Pareto(shape=3.0, scale=2.0)
        first = dist.classical_params
        assert dist.classical_params is first

        dist.shape = 4.0
        assert dist.classical_params is not first
        assert dist.classical_params.shape == 4.0

    def test_rejected_setter_keeps_cache_valid(self):
        dist = Poisson(rate=2.0)
        with pytest.raises(ValueError):
            dist.rate = -1.0
        assert dist.classical_params.rate == 2.0

    def test_set_from_vector_invalidates(self):
        dist = Poisson(rate=2.0)
        _ = dist.classical_params
        dist.set_from_vector([5.0])
        assert dist.classical_params.rate == 5.0


class TestGaussianCache:
    def test_log_det_follows_covariance(self):
        dist = MultivariateGaussian(mean=np.zeros(2), covariance=np.eye(2))
        assert np.isclose(dist.log_det_covariance, 0.0)

        dist.set_classical_params(covariance=np.diag([2.0, 3.0]))
        assert np.isclose(dist.log_det_covariance, np.log(6.0))

    def test_L_inv_follows_covariance(self):
        dist = MultivariateGaussian(mean=np.zeros(2), covariance=np.eye(2))
        assert np.allclose(dist.L_inv, np.eye(2))

        dist.set_classical_params(covariance=np.diag([4.0, 9.0]))
        assert np.allclose(dist.L_inv, np.diag([0.5, 1.0 / 3.0]))
