"""
Tests for frozen dataclass parameter containers and the vector codec.

Tests that each parameter dataclass:
- Can be constructed with valid values
- Is frozen (raises FrozenInstanceError on attribute assignment)
- Supports dict-style access
- Flattens to and rebuilds from its parameter vector
- Rejects None or wrong-length vectors
"""

import dataclasses
import pytest
import numpy as np

from closedform.params import (
    ChiSquareParams,
    NegativeBinomialParams,
    ParetoParams,
    PoissonParams,
    UniformParams,
    MultivariateGaussianParams,
    as_parameter_vector,
)


# ============================================================================
# Vector validation
# ============================================================================

class TestAsParameterVector:
    def test_returns_float_copy(self):
        source = np.array([1, 2, 3])
        vector = as_parameter_vector(source, 3)
        assert vector.dtype == float
        vector[0] = 99.0
        assert source[0] == 1

    def test_none_rejected(self):
        with pytest.raises(ValueError, match="must not be None"):
            as_parameter_vector(None, 2)

    def test_wrong_length_rejected(self):
        with pytest.raises(ValueError, match="Expected 2-dimensional"):
            as_parameter_vector([1.0, 2.0, 3.0], 2)

    def test_matrix_rejected(self):
        with pytest.raises(ValueError, match="one-dimensional"):
            as_parameter_vector([[1.0, 2.0]], 2)

    def test_any_length_without_arity(self):
        assert len(as_parameter_vector([1.0, 2.0, 3.0, 4.0])) == 4


# ============================================================================
# Univariate parameter dataclasses
# ============================================================================

class TestChiSquareParams:
    def test_construction(self):
        p = ChiSquareParams(dof=3.0)
        assert p.dof == 3.0

    def test_frozen(self):
        p = ChiSquareParams(dof=3.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.dof = 4.0

    def test_slots(self):
        p = ChiSquareParams(dof=3.0)
        assert not hasattr(p, "__dict__")

    def test_vector(self):
        assert np.array_equal(ChiSquareParams(dof=3.0).to_vector(), [3.0])
        assert ChiSquareParams.arity() == 1


class TestNegativeBinomialParams:
    def test_dict_access(self):
        p = NegativeBinomialParams(r=10.0, p=0.4)
        assert p["r"] == 10.0
        assert "p" in p
        assert list(p.keys()) == ["r", "p"]
        assert dict(p.items()) == {"r": 10.0, "p": 0.4}

    def test_missing_key(self):
        p = NegativeBinomialParams(r=10.0, p=0.4)
        with pytest.raises(KeyError):
            p["rate"]

    def test_vector_order(self):
        p = NegativeBinomialParams(r=10.0, p=0.4)
        assert np.array_equal(p.to_vector(), [10.0, 0.4])
        assert NegativeBinomialParams.from_vector([10.0, 0.4]) == p


class TestParetoParams:
    def test_vector_order(self):
        p = ParetoParams(shape=3.0, scale=2.0, shift=-1.0)
        assert np.array_equal(p.to_vector(), [3.0, 2.0, -1.0])

    def test_from_vector_wrong_length(self):
        with pytest.raises(ValueError):
            ParetoParams.from_vector([3.0, 2.0])

    def test_asdict(self):
        p = ParetoParams(shape=3.0, scale=2.0, shift=0.0)
        assert dataclasses.asdict(p) == {"shape": 3.0, "scale": 2.0, "shift": 0.0}


class TestPoissonParams:
    def test_roundtrip(self):
        p = PoissonParams(rate=2.5)
        assert PoissonParams.from_vector(p.to_vector()) == p

    def test_from_vector_none(self):
        with pytest.raises(ValueError):
            PoissonParams.from_vector(None)


class TestUniformParams:
    def test_fields(self):
        p = UniformParams(minimum=-1.0, maximum=2.0)
        assert [f.name for f in dataclasses.fields(p)] == ["minimum", "maximum"]
        assert np.array_equal(p.to_vector(), [-1.0, 2.0])


# ============================================================================
# Multivariate parameter dataclasses
# ============================================================================

class TestMultivariateGaussianParams:
    def test_vector_layout(self):
        p = MultivariateGaussianParams(
            mean=np.array([1.0, 2.0]),
            covariance=np.array([[1.0, 0.5], [0.5, 2.0]]),
        )
        assert np.array_equal(p.to_vector(), [1.0, 2.0, 1.0, 0.5, 0.5, 2.0])
        assert p.arity() == 6

    def test_from_vector_infers_dimension(self):
        p = MultivariateGaussianParams.from_vector([1.0, 2.0, 1.0, 0.0, 0.0, 1.0])
        assert np.array_equal(p.mean, [1.0, 2.0])
        assert np.array_equal(p.covariance, np.eye(2))

    def test_from_vector_bad_length(self):
        with pytest.raises(ValueError, match="Invalid parameter length"):
            MultivariateGaussianParams.from_vector([1.0, 2.0, 3.0, 4.0])

    def test_from_vector_explicit_dimension_mismatch(self):
        with pytest.raises(ValueError):
            MultivariateGaussianParams.from_vector([1.0, 2.0], d=2)

    def test_equality_compares_arrays(self):
        a = MultivariateGaussianParams(mean=np.zeros(2), covariance=np.eye(2))
        b = MultivariateGaussianParams(mean=np.zeros(2), covariance=np.eye(2))
        c = MultivariateGaussianParams(mean=np.ones(2), covariance=np.eye(2))
        assert a == b
        assert a != c
