"""
Tests for the maximum-likelihood estimators and ``fit``.

Tests that:
- every estimator returns a new distribution of its family
- weights act like sample repetition
- zero-weight samples are ignored
- invalid input raises ValueError
- fit() updates in place and returns self
"""

import numpy as np
import pytest
from scipy.special import digamma

from closedform import (
    ChiSquare,
    ChiSquareEstimator,
    MultivariateGaussian,
    NegativeBinomial,
    NegativeBinomialEstimator,
    Pareto,
    ParetoEstimator,
    Poisson,
    PoissonEstimator,
    Uniform,
    UniformEstimator,
)
from closedform.utils.statistics import (
    support_min_and_max,
    validate_samples,
    weighted_mean_and_covariance,
    weighted_mean_and_variance,
)


# ============================================================================
# Shared sample validation
# ============================================================================

class TestValidateSamples:
    def test_default_weights(self):
        data, weights = validate_samples([1.0, 2.0, 3.0])
        assert np.array_equal(weights, np.ones(3))

    @pytest.mark.parametrize("data, weights, message", [
        ([], None, "empty"),
        ([1.0, np.nan], None, "finite"),
        ([1.0, np.inf], None, "finite"),
        ([1.0, 2.0], [1.0], "Expected 2 weights"),
        ([1.0, 2.0], [1.0, -1.0], "non-negative"),
        ([1.0, 2.0], [0.0, 0.0], "positive sum"),
        ([1.0, 2.0], [1.0, np.nan], "finite"),
    ])
    def test_rejects(self, data, weights, message):
        with pytest.raises(ValueError, match=message):
            validate_samples(data, weights)

    def test_two_dimensional(self):
        data, _ = validate_samples([1.0, 2.0], ndim=2)
        assert data.shape == (1, 2)


class TestWeightedStatistics:
    def test_unit_weights_match_numpy(self):
        x = np.array([1.0, 4.0, 2.0, 8.0])
        mean, var = weighted_mean_and_variance(x)
        assert np.isclose(mean, np.mean(x))
        assert np.isclose(var, np.var(x, ddof=1))

    def test_single_sample_variance_zero(self):
        assert weighted_mean_and_variance([3.0]) == (3.0, 0.0)

    def test_integer_weights_match_repetition(self):
        weighted = weighted_mean_and_variance([1.0, 4.0, 6.0], weights=[2.0, 1.0, 3.0])
        repeated = weighted_mean_and_variance([1.0, 1.0, 4.0, 6.0, 6.0, 6.0])
        assert np.allclose(weighted, repeated)

    def test_fractional_total_weight_is_biased(self):
        mean, var = weighted_mean_and_variance([0.0, 2.0], weights=[0.25, 0.25])
        assert mean == 1.0
        assert np.isclose(var, 1.0)

    def test_covariance_is_ml(self):
        X = np.array([[0.0, 1.0], [2.0, 3.0], [4.0, 2.0]])
        mean, cov = weighted_mean_and_covariance(X)
        assert np.allclose(mean, X.mean(axis=0))
        assert np.allclose(cov, np.cov(X, rowvar=False, bias=True))

    def test_support_ignores_zero_weights(self):
        assert support_min_and_max([0.0, 5.0, 10.0], [1.0, 1.0, 0.0]) == (0.0, 5.0)


# ============================================================================
# Family estimators
# ============================================================================

class TestPoissonEstimator:
    def test_sample_mean(self):
        dist = PoissonEstimator().learn([1, 2, 3, 2])
        assert isinstance(dist, Poisson)
        assert dist.rate == 2.0

    def test_weighted(self):
        assert PoissonEstimator().learn([1.0, 3.0], weights=[3.0, 1.0]).rate == 1.5

    def test_callable(self):
        assert PoissonEstimator()([4.0, 6.0]).rate == 5.0

    def test_negative_samples_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            PoissonEstimator().learn([1.0, -1.0])

    def test_all_zero_rejected(self):
        with pytest.raises(ValueError):
            PoissonEstimator().learn([0, 0, 0])

    def test_recovers_rate(self):
        samples = Poisson(rate=3.0).rvs(size=20000, random_state=7)
        assert np.isclose(Poisson().fit(samples).rate, 3.0, rtol=0.05)


class TestUniformEstimator:
    def test_min_max(self):
        dist = UniformEstimator().learn([0.5, -1.0, 2.0])
        assert isinstance(dist, Uniform)
        assert (dist.minimum, dist.maximum) == (-1.0, 2.0)

    def test_single_sample_degenerate(self):
        dist = UniformEstimator().learn([4.0])
        assert dist.is_degenerate
        assert dist.mean() == 4.0

    def test_zero_weight_ignored(self):
        dist = UniformEstimator().learn([0.0, 5.0, 10.0], weights=[1.0, 1.0, 0.0])
        assert dist.maximum == 5.0


class TestParetoEstimator:
    def test_closed_form(self):
        dist = ParetoEstimator().learn([2.0, 4.0])
        assert isinstance(dist, Pareto)
        assert dist.scale == 2.0
        assert np.isclose(dist.shape, 2.0 / np.log(2.0))
        assert dist.shift == 0.0

    def test_known_shift(self):
        dist = ParetoEstimator(shift=1.0).learn([3.0, 5.0])
        assert dist.scale == 2.0
        assert np.isclose(dist.shape, 2.0 / np.log(2.0))
        assert dist.shift == 1.0

    def test_fit_keeps_current_shift(self):
        dist = Pareto(shape=5.0, scale=1.0, shift=1.0).fit([3.0, 5.0])
        assert dist.shift == 1.0
        assert dist.scale == 2.0

    def test_weighted_matches_repetition(self):
        weighted = ParetoEstimator().learn([2.0, 4.0, 8.0], weights=[1.0, 2.0, 1.0])
        repeated = ParetoEstimator().learn([2.0, 4.0, 4.0, 8.0])
        assert np.isclose(weighted.shape, repeated.shape)

    def test_all_equal_rejected(self):
        with pytest.raises(ValueError, match="All samples are equal"):
            ParetoEstimator().learn([3.0, 3.0, 3.0])

    def test_samples_below_shift_rejected(self):
        with pytest.raises(ValueError, match="exceed the shift"):
            ParetoEstimator(shift=2.0).learn([1.0, 3.0])

    def test_recovers_parameters(self):
        samples = Pareto(shape=3.0, scale=2.0).rvs(size=20000, random_state=3)
        dist = Pareto().fit(samples)
        assert np.isclose(dist.shape, 3.0, rtol=0.05)
        assert np.isclose(dist.scale, 2.0, rtol=0.01)


class TestChiSquareEstimator:
    def test_score_equation_solved(self):
        x = np.array([0.5, 1.2, 2.0, 3.3, 6.1])
        dist = ChiSquareEstimator().learn(x)
        assert isinstance(dist, ChiSquare)
        assert np.isclose(digamma(dist.dof / 2.0), np.mean(np.log(x)) - np.log(2.0))

    def test_weighted_matches_repetition(self):
        weighted = ChiSquareEstimator().learn([0.5, 2.0, 4.0], weights=[2.0, 1.0, 1.0])
        repeated = ChiSquareEstimator().learn([0.5, 0.5, 2.0, 4.0])
        assert np.isclose(weighted.dof, repeated.dof)

    def test_recovers_dof(self):
        samples = ChiSquare(dof=5.0).rvs(size=20000, random_state=11)
        assert np.isclose(ChiSquare().fit(samples).dof, 5.0, rtol=0.05)

    def test_non_positive_rejected(self):
        with pytest.raises(ValueError, match="positive"):
            ChiSquareEstimator().learn([1.0, 0.0, 2.0])


class TestNegativeBinomialEstimator:
    def test_moment_matching(self):
        # mean 2, unbiased variance 8.5
        dist = NegativeBinomialEstimator().learn([0, 0, 1, 2, 7])
        assert isinstance(dist, NegativeBinomial)
        assert np.isclose(dist.mean(), 2.0)
        assert np.isclose(dist.var(), 8.5)

    def test_under_dispersed_warns(self):
        with pytest.warns(RuntimeWarning, match="under-dispersed"):
            dist = NegativeBinomialEstimator().learn([1, 2, 3])
        assert np.isclose(dist.r, 4.0)
        assert np.isclose(dist.p, 2.0 / 6.0)

    def test_zero_variance_rejected(self):
        with pytest.raises(ValueError, match="variance is zero"):
            NegativeBinomialEstimator().learn([3, 3, 3])

    def test_weights_match_repetition(self):
        weighted = NegativeBinomialEstimator().learn([0, 1, 2, 7], weights=[2, 1, 1, 1])
        repeated = NegativeBinomialEstimator().learn([0, 0, 1, 2, 7])
        assert np.isclose(weighted.r, repeated.r)
        assert np.isclose(weighted.p, repeated.p)

    def test_fit_in_place(self):
        dist = NegativeBinomial()
        result = dist.fit([0, 0, 1, 2, 7])
        assert result is dist
        assert np.isclose(dist.mean(), 2.0)

    def test_recovers_parameters(self):
        samples = NegativeBinomial(r=5.0, p=0.6).rvs(size=50000, random_state=5)
        dist = NegativeBinomial().fit(samples)
        assert np.isclose(dist.mean(), 7.5, rtol=0.05)
        assert np.isclose(dist.r, 5.0, rtol=0.15)


class TestFitReturnsSelf:
    @pytest.mark.parametrize("dist, data", [
        (ChiSquare(), [0.5, 1.0, 2.0]),
        (Pareto(), [1.0, 2.0, 3.0]),
        (Poisson(), [1, 2, 3]),
        (Uniform(), [0.0, 3.0]),
    ])
    def test_fit_returns_self(self, dist, data):
        assert dist.fit(data) is dist

    def test_fit_rejects_empty(self):
        dist = Poisson(rate=2.0)
        with pytest.raises(ValueError, match="empty"):
            dist.fit([])
        assert dist.rate == 2.0

    def test_gaussian_estimator(self):
        rng = np.random.default_rng(0)
        X = rng.multivariate_normal([1.0, -1.0], [[1.0, 0.3], [0.3, 2.0]], size=500)
        dist = MultivariateGaussian.estimator().learn(X)
        assert np.allclose(dist.mean(), X.mean(axis=0))
        assert np.allclose(dist.cov(), np.cov(X, rowvar=False, bias=True))
