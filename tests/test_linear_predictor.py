"""
Tests for Linear Predictor Builder
==================================

Tests for coefficient resolution and utility baselines.
"""

import numpy as np
import pandas as pd
import pytest

from simcormult.exceptions import DimensionMismatch, NonFiniteValues
from simcormult.simulation.linear_predictor import (
    PerOccasionCoefficients,
    SharedCoefficients,
    build_linear_predictor,
    resolve_coefficients,
)


@pytest.mark.unit
class TestResolveCoefficients:
    """Tests for the shared / occasion-specific variant."""

    def test_vector_is_shared(self):
        coefs = resolve_coefficients([0.5, 1.0], clsize=3)
        assert isinstance(coefs, SharedCoefficients)
        assert coefs.width == 2

    def test_matrix_is_per_occasion(self):
        coefs = resolve_coefficients([[1.0, 2.0], [3.0, 4.0]], clsize=2)
        assert isinstance(coefs, PerOccasionCoefficients)
        assert coefs.n_occasions == 2
        np.testing.assert_array_equal(coefs.for_occasion(1), [3.0, 4.0])

    def test_matrix_needs_one_row_per_occasion(self):
        with pytest.raises(DimensionMismatch):
            resolve_coefficients([[1.0, 2.0], [3.0, 4.0]], clsize=3)

    def test_three_dimensional_rejected(self):
        with pytest.raises(DimensionMismatch):
            resolve_coefficients(np.zeros((2, 2, 2)), clsize=2)

    def test_resolved_input_passes_through(self):
        coefs = SharedCoefficients(np.array([1.0]))
        assert resolve_coefficients(coefs, clsize=4) is coefs


@pytest.mark.unit
class TestBuildLinearPredictor:
    """Tests for eta construction."""

    def test_hand_computed_shared(self):
        """Two subjects, one occasion, three categories, intercept + x."""
        X = np.array([[1.0, 2.0], [1.0, -1.0]])
        coefs = resolve_coefficients([0.5, 1.0, -0.5, 2.0], clsize=1)

        eta = build_linear_predictor(X, coefs, clsize=1, ncategories=3)

        expected = np.array([
            [2.5, 3.5, 0.0],
            [-0.5, -2.5, 0.0],
        ])
        np.testing.assert_allclose(eta, expected)

    def test_hand_computed_per_occasion(self):
        X = np.ones((2, 1))
        coefs = resolve_coefficients([[1.0, 2.0], [3.0, 4.0]], clsize=2)

        eta = build_linear_predictor(X, coefs, clsize=2, ncategories=3)

        np.testing.assert_allclose(eta, [[1.0, 2.0, 0.0, 3.0, 4.0, 0.0]])

    def test_reference_category_is_zero(self, bcl_example):
        coefs = resolve_coefficients(bcl_example['betas'], bcl_example['clsize'])
        eta = build_linear_predictor(bcl_example['X'], coefs,
                                     bcl_example['clsize'], bcl_example['ncategories'])

        J = bcl_example['ncategories']
        assert eta.shape == (200, bcl_example['clsize'] * J)
        assert np.all(eta[:, J - 1::J] == 0.0)

    def test_shared_matches_repeated_rows(self, bcl_example):
        """A shared vector equals a matrix repeating it at every occasion."""
        T, J = bcl_example['clsize'], bcl_example['ncategories']
        shared = resolve_coefficients(bcl_example['betas'], T)
        per_occasion = resolve_coefficients(np.tile(bcl_example['betas'], (T, 1)), T)

        np.testing.assert_allclose(
            build_linear_predictor(bcl_example['X'], shared, T, J),
            build_linear_predictor(bcl_example['X'], per_occasion, T, J),
        )

    def test_rows_follow_subject_then_occasion(self):
        """Row i*T + t of X feeds subject i, occasion t."""
        X = np.array([[1.0], [2.0], [3.0], [4.0]])
        coefs = resolve_coefficients([1.0], clsize=2)

        eta = build_linear_predictor(X, coefs, clsize=2, ncategories=2)

        np.testing.assert_allclose(eta, [[1.0, 0.0, 2.0, 0.0], [3.0, 0.0, 4.0, 0.0]])

    def test_wrong_coefficient_count(self):
        X = np.ones((4, 2))
        coefs = resolve_coefficients([1.0, 2.0, 3.0], clsize=2)
        with pytest.raises(DimensionMismatch):
            build_linear_predictor(X, coefs, clsize=2, ncategories=3)

    def test_rows_not_multiple_of_cluster_size(self):
        X = np.ones((5, 1))
        coefs = resolve_coefficients([1.0], clsize=2)
        with pytest.raises(DimensionMismatch):
            build_linear_predictor(X, coefs, clsize=2, ncategories=2)

    def test_per_occasion_rows_checked_against_cluster_size(self):
        X = np.ones((6, 1))
        coefs = PerOccasionCoefficients(np.ones((2, 1)))
        with pytest.raises(DimensionMismatch):
            build_linear_predictor(X, coefs, clsize=3, ncategories=2)

    def test_missing_covariate_rejected(self):
        X = pd.DataFrame({'const': 1.0, 'x': [0.5, np.nan, 1.0, 2.0]})
        coefs = resolve_coefficients([0.0, 1.0], clsize=2)
        with pytest.raises(NonFiniteValues, match="row 1"):
            build_linear_predictor(X, coefs, clsize=2, ncategories=2)

    def test_infinite_covariate_rejected(self):
        X = np.array([[1.0, np.inf], [1.0, 0.0]])
        coefs = resolve_coefficients([0.0, 1.0], clsize=1)
        with pytest.raises(NonFiniteValues):
            build_linear_predictor(X, coefs, clsize=1, ncategories=2)

    def test_non_finite_coefficients_rejected(self):
        X = np.ones((2, 1))
        coefs = resolve_coefficients([[0.5], [np.nan]], clsize=2)
        with pytest.raises(NonFiniteValues):
            build_linear_predictor(X, coefs, clsize=2, ncategories=2)
