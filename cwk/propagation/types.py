"""Label and propagation-history data structures."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class LabelAssignment:
    """Observed labels for the training nodes.

    Construction does not validate; use validate_labels() (or build through
    compute_cwk) to check ranges against a concrete graph.
    """

    train_indices: np.ndarray  # int array of length num_train, distinct node ids
    observed_labels: np.ndarray  # int array of length num_train, in [0, num_classes)
    num_classes: int

    @property
    def num_train(self) -> int:
        return len(self.train_indices)

    def class_counts(self) -> np.ndarray:
        """Number of training nodes per class, shape (num_classes,)."""
        return np.bincount(self.observed_labels, minlength=self.num_classes).astype(
            np.float64
        )


@dataclass(frozen=True)
class ProbabilityHistory:
    """Per-node class distributions for every iteration of one propagation pass.

    probabilities is indexed [node, class, iteration] with iteration running
    over 0..walk_length inclusive. The array is marked read-only once the
    engine finishes writing it. Uses frozen=True but omits slots=True since
    numpy arrays don't interact well with __slots__.
    """

    probabilities: np.ndarray  # float64 array of shape (n, num_classes, walk_length + 1)
    train_indices: np.ndarray  # nodes that were partially absorbing
    alpha: float

    @property
    def num_nodes(self) -> int:
        return self.probabilities.shape[0]

    @property
    def num_classes(self) -> int:
        return self.probabilities.shape[1]

    @property
    def walk_length(self) -> int:
        return self.probabilities.shape[2] - 1

    def at(self, iteration: int) -> np.ndarray:
        """Distributions of all nodes at one iteration, shape (n, num_classes)."""
        return self.probabilities[:, :, iteration]
