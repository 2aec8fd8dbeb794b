"""Iteration-0 label distributions with optional empirical-prior smoothing.

Training nodes start from their observed label; everything else starts from
the prior. With use_prior=False the prior is uniform and training nodes are
one-hot. With use_prior=True the prior is the Dirichlet-smoothed empirical
class frequency among the training labels,

    prior(k) = (count(k) + pseudocount) / (num_train + num_classes * pseudocount)

and a training node labelled c adds one more unit of count to its own class:

    p(k) = (count(k) + pseudocount + [k == c]) / (num_train + num_classes * pseudocount + 1)
"""

import numpy as np

from cwk.errors import IndexOutOfRange, InvalidConfiguration
from cwk.propagation.types import LabelAssignment


def validate_labels(labels: LabelAssignment, num_nodes: int | None = None) -> None:
    """Check a label assignment for internal consistency and range.

    Args:
        labels: Training indices and their observed labels.
        num_nodes: If given, training indices must lie in [0, num_nodes).

    Raises:
        InvalidConfiguration: If num_classes < 1, the index and label arrays
            differ in length, or training indices repeat.
        IndexOutOfRange: If a label or training index is out of range.
    """
    if labels.num_classes < 1:
        raise InvalidConfiguration(
            f"num_classes must be >= 1, got {labels.num_classes}"
        )
    if labels.train_indices.ndim != 1 or labels.observed_labels.ndim != 1:
        raise InvalidConfiguration("train_indices and observed_labels must be 1-D")
    if len(labels.train_indices) != len(labels.observed_labels):
        raise InvalidConfiguration(
            f"train_indices ({len(labels.train_indices)}) and observed_labels "
            f"({len(labels.observed_labels)}) differ in length"
        )
    if len(np.unique(labels.train_indices)) != len(labels.train_indices):
        raise InvalidConfiguration("train_indices contains duplicate node ids")

    bad_labels = (labels.observed_labels < 0) | (
        labels.observed_labels >= labels.num_classes
    )
    if bad_labels.any():
        raise IndexOutOfRange(
            f"observed labels {labels.observed_labels[bad_labels].tolist()} "
            f"outside [0, {labels.num_classes})"
        )

    if num_nodes is not None:
        bad_nodes = (labels.train_indices < 0) | (labels.train_indices >= num_nodes)
        if bad_nodes.any():
            raise IndexOutOfRange(
                f"train indices {labels.train_indices[bad_nodes].tolist()} "
                f"outside [0, {num_nodes})"
            )


def class_prior(
    labels: LabelAssignment, use_prior: bool = False, pseudocount: float = 1.0
) -> np.ndarray:
    """Distribution assigned to nodes without an observed label.

    Returns:
        Array of shape (num_classes,): uniform, or the smoothed empirical
        class frequency when use_prior is set.
    """
    k = labels.num_classes
    if not use_prior:
        return np.full(k, 1.0 / k)
    counts = labels.class_counts()
    return (counts + pseudocount) / (labels.num_train + k * pseudocount)


def initial_distributions(
    labels: LabelAssignment,
    num_nodes: int,
    use_prior: bool = False,
    pseudocount: float = 1.0,
) -> np.ndarray:
    """Build the iteration-0 class distribution of every node.

    Args:
        labels: Training indices and observed labels.
        num_nodes: Total number of nodes in the graph.
        use_prior: Smooth with the empirical class prior instead of using
            one-hot / uniform distributions.
        pseudocount: Per-class additive smoothing, used only with use_prior.

    Returns:
        Array of shape (num_nodes, num_classes); every row sums to 1.

    Raises:
        InvalidConfiguration: On inconsistent labels or pseudocount <= 0
            while use_prior is set.
        IndexOutOfRange: On labels or training indices out of range.
    """
    validate_labels(labels, num_nodes)
    if use_prior and not pseudocount > 0:
        raise InvalidConfiguration(
            f"pseudocount must be > 0 when use_prior is set, got {pseudocount}"
        )

    k = labels.num_classes
    p0 = np.tile(class_prior(labels, use_prior, pseudocount), (num_nodes, 1))

    if labels.num_train == 0:
        return p0

    train = labels.train_indices
    observed = labels.observed_labels
    if use_prior:
        counts = labels.class_counts()
        denom = labels.num_train + k * pseudocount + 1.0
        rows = np.tile(counts + pseudocount, (len(train), 1))
        rows[np.arange(len(train)), observed] += 1.0
        p0[train] = rows / denom
    else:
        p0[train] = 0.0
        p0[train, observed] = 1.0

    return p0
