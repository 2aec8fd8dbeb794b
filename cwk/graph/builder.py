"""Construction and validation of GraphModel instances from raw adjacency input."""

import logging

import numpy as np
import scipy.sparse

from cwk.errors import InvalidConfiguration
from cwk.graph.types import GraphModel

log = logging.getLogger(__name__)


def validate_adjacency(adj: scipy.sparse.csr_matrix) -> list[str]:
    """Validate an adjacency matrix for random-walk use.

    Checks (cheapest first):
    1. Square shape
    2. Finite weights
    3. Nonnegative weights

    Args:
        adj: Sparse adjacency matrix.

    Returns:
        List of error strings (empty = valid adjacency).
    """
    errors: list[str] = []

    if adj.ndim != 2 or adj.shape[0] != adj.shape[1]:
        errors.append(f"Adjacency must be square, got shape {adj.shape}")
        return errors

    if adj.nnz > 0:
        if not np.all(np.isfinite(adj.data)):
            errors.append("Adjacency contains non-finite weights")
        elif adj.data.min() < 0:
            errors.append(
                f"Adjacency contains negative weights (min {adj.data.min():g})"
            )

    return errors


def transition_matrix(adj: scipy.sparse.csr_matrix, degree: np.ndarray) -> scipy.sparse.csr_matrix:
    """Build the row-normalized transition operator P = D^-1 A.

    Zero-degree rows are replaced by identity rows so that probability mass
    on an isolated node stays where it is instead of dividing by zero.

    Args:
        adj: Sparse adjacency matrix (n x n).
        degree: Row sums of adj, shape (n,).

    Returns:
        Row-stochastic CSR matrix of shape (n, n).
    """
    n = adj.shape[0]
    isolated = degree == 0
    inv_degree = np.zeros(n, dtype=np.float64)
    inv_degree[~isolated] = 1.0 / degree[~isolated]

    P = scipy.sparse.diags(inv_degree) @ adj
    if isolated.any():
        P = P + scipy.sparse.diags(isolated.astype(np.float64))
    return scipy.sparse.csr_matrix(P)


def build_graph(adjacency) -> GraphModel:
    """Wrap a raw adjacency matrix in a GraphModel.

    Accepts dense arrays, nested lists, or any scipy sparse format. The
    adjacency may be asymmetric and may contain self-loops.

    Args:
        adjacency: Square nonnegative (n x n) matrix of edge weights.

    Returns:
        GraphModel with degrees and transition operator precomputed.

    Raises:
        InvalidConfiguration: If the adjacency is not square, has negative
            entries, or has non-finite entries.
    """
    if scipy.sparse.issparse(adjacency):
        adj = scipy.sparse.csr_matrix(adjacency, dtype=np.float64, copy=True)
    else:
        dense = np.asarray(adjacency, dtype=np.float64)
        if dense.ndim != 2:
            raise InvalidConfiguration(
                f"Adjacency must be a 2-D matrix, got {dense.ndim} dimensions"
            )
        adj = scipy.sparse.csr_matrix(dense)

    errors = validate_adjacency(adj)
    if errors:
        raise InvalidConfiguration("; ".join(errors))

    # Explicit zeros would otherwise show up as zero-weight neighbors
    adj.eliminate_zeros()
    adj.sort_indices()

    degree = np.asarray(adj.sum(axis=1), dtype=np.float64).ravel()
    P = transition_matrix(adj, degree)

    n_isolated = int((degree == 0).sum())
    if n_isolated:
        log.info(
            "%d of %d nodes have zero degree; their walks stay in place",
            n_isolated,
            adj.shape[0],
        )

    return GraphModel(
        adjacency=adj,
        degree=degree,
        transition=P,
        num_nodes=adj.shape[0],
    )
