"""Graph model: adjacency, degrees, and the row-normalized transition operator."""

from dataclasses import dataclass

import numpy as np
import scipy.sparse


@dataclass(frozen=True)
class GraphModel:
    """Immutable random-walk view of a weighted graph.

    Holds the adjacency matrix alongside its out-degrees and the transition
    operator P = D^-1 A. Rows of isolated nodes (zero degree) are identity
    rows in P, so a walk sitting on such a node stays put. Uses frozen=True
    but omits slots=True since scipy objects don't interact well with
    __slots__.
    """

    adjacency: scipy.sparse.csr_matrix  # (n x n), nonnegative weights
    degree: np.ndarray  # float array of length n, row sums of adjacency
    transition: scipy.sparse.csr_matrix  # (n x n), row-stochastic
    num_nodes: int

    @property
    def isolated(self) -> np.ndarray:
        """Indices of nodes with zero degree."""
        return np.flatnonzero(self.degree == 0)

    def neighbor_weighted_sum(self, distributions: np.ndarray, node: int) -> np.ndarray:
        """One random-walk step for a single node.

        Computes sum_j (A[node, j] / degree[node]) * distributions[j].

        Args:
            distributions: Array of shape (n, num_classes).
            node: Node whose row to compute.

        Returns:
            Vector of length num_classes. The unmodified input row when the
            node has zero degree.
        """
        if self.degree[node] == 0:
            return np.array(distributions[node], dtype=np.float64, copy=True)
        start, end = self.adjacency.indptr[node], self.adjacency.indptr[node + 1]
        cols = self.adjacency.indices[start:end]
        weights = self.adjacency.data[start:end] / self.degree[node]
        return weights @ distributions[cols]

    def step(self, distributions: np.ndarray) -> np.ndarray:
        """One random-walk step for every node at once (P @ distributions).

        Equivalent to stacking neighbor_weighted_sum over all nodes; reads
        only the input array, so every row sees the same iteration.
        """
        return np.asarray(self.transition @ distributions)
