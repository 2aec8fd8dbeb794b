"""Shared graph fixtures for kernel tests."""

import numpy as np
import pytest
import scipy.sparse


def path_adjacency(n: int = 4) -> np.ndarray:
    """Unweighted path graph 0 - 1 - ... - (n-1)."""
    A = np.zeros((n, n))
    for i in range(n - 1):
        A[i, i + 1] = A[i + 1, i] = 1.0
    return A


def random_adjacency(
    n: int, density: float, rng: np.random.Generator, symmetric: bool = True
) -> scipy.sparse.csr_matrix:
    """Random weighted graph; may contain isolated nodes and self-loops."""
    A = scipy.sparse.random(n, n, density=density, random_state=rng, format="csr")
    if symmetric:
        A = A + A.T
    return scipy.sparse.csr_matrix(A)


@pytest.fixture
def path_graph() -> np.ndarray:
    return path_adjacency(4)


@pytest.fixture
def two_block_problem() -> dict:
    """Two dense 6-node clusters joined by one bridge edge, 2 labels per class."""
    rng = np.random.default_rng(7)
    n = 12
    A = np.zeros((n, n))
    for block in (range(0, 6), range(6, 12)):
        for i in block:
            for j in block:
                if i < j and rng.random() < 0.7:
                    A[i, j] = A[j, i] = 1.0 + rng.random()
    A[5, 6] = A[6, 5] = 0.5
    return {
        "adjacency": A,
        "train_indices": [0, 1, 6, 7],
        "observed_labels": [0, 0, 1, 1],
        "test_indices": [2, 3, 4, 5, 8, 9, 10, 11],
        "num_classes": 2,
    }
