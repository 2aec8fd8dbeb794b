"""Tests for label initialization and partially-absorbing propagation."""

import numpy as np
import pytest

from conftest import path_adjacency, random_adjacency
from cwk.errors import IndexOutOfRange, InvalidConfiguration
from cwk.graph import build_graph
from cwk.propagation import (
    LabelAssignment,
    absorbing_step,
    class_prior,
    initial_distributions,
    propagate_labels,
    validate_labels,
)


def _labels(train, observed, k) -> LabelAssignment:
    return LabelAssignment(
        train_indices=np.asarray(train, dtype=np.int64),
        observed_labels=np.asarray(observed, dtype=np.int64),
        num_classes=k,
    )


class TestInitialDistributions:
    """Iteration-0 distributions with and without the empirical prior."""

    def test_uniform_and_one_hot(self):
        p0 = initial_distributions(_labels([0, 3], [0, 1], 2), 4)
        np.testing.assert_array_equal(
            p0, [[1.0, 0.0], [0.5, 0.5], [0.5, 0.5], [0.0, 1.0]]
        )

    def test_prior_for_unlabelled_nodes(self):
        labels = _labels([0, 1, 2], [0, 0, 1], 3)
        p0 = initial_distributions(labels, 5, use_prior=True, pseudocount=1.0)
        # counts = [2, 1, 0]; (counts + 1) / (3 + 3)
        np.testing.assert_allclose(p0[3], [3 / 6, 2 / 6, 1 / 6])
        np.testing.assert_allclose(p0[4], [3 / 6, 2 / 6, 1 / 6])

    def test_prior_for_labelled_nodes(self):
        labels = _labels([0, 1, 2], [0, 0, 1], 3)
        p0 = initial_distributions(labels, 5, use_prior=True, pseudocount=1.0)
        # (counts + 1 + [k == c]) / (3 + 3 + 1)
        np.testing.assert_allclose(p0[0], [4 / 7, 2 / 7, 1 / 7])
        np.testing.assert_allclose(p0[1], [4 / 7, 2 / 7, 1 / 7])
        np.testing.assert_allclose(p0[2], [3 / 7, 3 / 7, 1 / 7])

    def test_prior_pseudocount_scaling(self):
        labels = _labels([0, 1], [1, 1], 2)
        p0 = initial_distributions(labels, 3, use_prior=True, pseudocount=0.5)
        # counts = [0, 2]
        np.testing.assert_allclose(p0[2], [0.5 / 3, 2.5 / 3])
        np.testing.assert_allclose(p0[0], [0.5 / 4, 3.5 / 4])

    def test_rows_sum_to_one(self):
        labels = _labels([1, 4, 7], [2, 0, 2], 4)
        for use_prior in (False, True):
            p0 = initial_distributions(labels, 9, use_prior=use_prior, pseudocount=2.0)
            np.testing.assert_allclose(p0.sum(axis=1), 1.0)

    def test_no_training_nodes(self):
        p0 = initial_distributions(_labels([], [], 3), 2, use_prior=True)
        np.testing.assert_allclose(p0, np.full((2, 3), 1 / 3))

    def test_class_prior_uniform(self):
        np.testing.assert_allclose(class_prior(_labels([0], [0], 4)), 0.25)


class TestLabelValidation:
    """Invalid label assignments fail before anything is computed."""

    def test_num_classes_below_one(self):
        with pytest.raises(InvalidConfiguration, match="num_classes"):
            initial_distributions(_labels([], [], 0), 3)

    def test_label_out_of_range(self):
        with pytest.raises(IndexOutOfRange, match="labels"):
            initial_distributions(_labels([0], [2], 2), 3)

    def test_negative_label(self):
        with pytest.raises(IndexOutOfRange):
            validate_labels(_labels([0], [-1], 2))

    def test_train_index_out_of_range(self):
        with pytest.raises(IndexOutOfRange, match="train indices"):
            initial_distributions(_labels([5], [0], 2), 3)

    def test_length_mismatch(self):
        with pytest.raises(InvalidConfiguration, match="differ in length"):
            validate_labels(_labels([0, 1], [0], 2))

    def test_duplicate_train_indices(self):
        with pytest.raises(InvalidConfiguration, match="duplicate"):
            validate_labels(_labels([1, 1], [0, 1], 2))

    def test_pseudocount_non_positive_with_prior(self):
        with pytest.raises(InvalidConfiguration, match="pseudocount"):
            initial_distributions(_labels([0], [0], 2), 3, use_prior=True, pseudocount=0.0)

    def test_index_error_is_invalid_configuration(self):
        with pytest.raises(InvalidConfiguration):
            validate_labels(_labels([0], [9], 2))


class TestPropagation:
    """History shape, recurrence, and absorption behavior."""

    def test_history_shape(self, path_graph):
        history = propagate_labels(build_graph(path_graph), _labels([0, 3], [0, 1], 2), 5)
        assert history.probabilities.shape == (4, 2, 6)
        assert history.walk_length == 5
        assert history.num_classes == 2
        assert history.num_nodes == 4

    def test_history_read_only(self, path_graph):
        history = propagate_labels(build_graph(path_graph), _labels([0, 3], [0, 1], 2), 2)
        with pytest.raises(ValueError):
            history.probabilities[0, 0, 0] = 5.0

    def test_path_graph_values(self, path_graph):
        history = propagate_labels(build_graph(path_graph), _labels([0, 3], [0, 1], 2), 2)
        np.testing.assert_allclose(
            history.at(1), [[0.5, 0.5], [0.75, 0.25], [0.25, 0.75], [0.5, 0.5]]
        )
        np.testing.assert_allclose(
            history.at(2),
            [[0.75, 0.25], [0.375, 0.625], [0.625, 0.375], [0.25, 0.75]],
        )

    def test_zero_walk_length(self, path_graph):
        labels = _labels([0, 3], [0, 1], 2)
        history = propagate_labels(build_graph(path_graph), labels, 0)
        assert history.probabilities.shape == (4, 2, 1)
        np.testing.assert_array_equal(history.at(0), initial_distributions(labels, 4))

    def test_alpha_zero_freezes_training_nodes(self):
        rng = np.random.default_rng(11)
        graph = build_graph(random_adjacency(20, 0.15, rng))
        labels = _labels([0, 5, 9, 13], [0, 1, 2, 1], 3)
        history = propagate_labels(graph, labels, 8, alpha=0.0, use_prior=True)
        p0 = history.at(0)[labels.train_indices]
        for t in range(9):
            np.testing.assert_array_equal(history.at(t)[labels.train_indices], p0)

    def test_partial_absorption_recurrence(self, path_graph):
        graph = build_graph(path_graph)
        labels = _labels([0, 3], [0, 1], 2)
        alpha = 0.3
        history = propagate_labels(graph, labels, 3, alpha=alpha)
        p0 = history.at(0)
        for t in range(3):
            pt = history.at(t)
            for v in range(4):
                diffused = graph.neighbor_weighted_sum(pt, v)
                expected = (
                    alpha * diffused + (1 - alpha) * p0[v]
                    if v in (0, 3) else diffused
                )
                np.testing.assert_allclose(history.at(t + 1)[v], expected, atol=1e-12)

    def test_nonnegative_entries(self):
        rng = np.random.default_rng(5)
        graph = build_graph(random_adjacency(40, 0.05, rng, symmetric=False))
        labels = _labels([0, 1, 2, 3, 4], [0, 1, 0, 1, 1], 2)
        history = propagate_labels(graph, labels, 10, alpha=0.6)
        assert history.probabilities.min() >= 0.0

    def test_absorbing_step_leaves_inputs(self, path_graph):
        graph = build_graph(path_graph)
        p0 = initial_distributions(_labels([0, 3], [0, 1], 2), 4)
        before = p0.copy()
        absorbing_step(graph, p0, p0, np.array([0, 3]), 0.5)
        np.testing.assert_array_equal(p0, before)

    @pytest.mark.parametrize("alpha", [1.5, -0.5])
    def test_alpha_out_of_range(self, path_graph, alpha):
        with pytest.raises(InvalidConfiguration, match="alpha"):
            propagate_labels(build_graph(path_graph), _labels([0], [0], 2), 2, alpha=alpha)

    def test_negative_walk_length(self, path_graph):
        with pytest.raises(InvalidConfiguration, match="walk_length"):
            propagate_labels(build_graph(path_graph), _labels([0], [0], 2), -1)
