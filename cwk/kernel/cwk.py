"""Coinciding walk kernel entry point.

Implements the kernel of Neumann, Garnett and Kersting, "Coinciding Walk
Kernels: Parallel Absorbing Random Walks for Learning with Graphs and Few
Labels" (ACML 2013): label propagation from the training nodes followed by
averaged inner products of the per-step class distributions.
"""

import logging

import numpy as np

from cwk.config.experiment import KernelConfig
from cwk.errors import InvalidConfiguration
from cwk.graph.builder import build_graph
from cwk.graph.types import GraphModel
from cwk.kernel.assembler import assemble_kernels, check_node_indices
from cwk.kernel.types import KernelOutput
from cwk.propagation.engine import propagate_labels
from cwk.propagation.prior import validate_labels
from cwk.propagation.types import LabelAssignment

log = logging.getLogger(__name__)


def _integer_array(values, name: str) -> np.ndarray:
    """Flatten values to int64, rejecting anything that is not a whole number."""
    arr = np.asarray(values).reshape(-1)
    if arr.size == 0 or arr.dtype.kind in "iu":
        return arr.astype(np.int64)
    if arr.dtype.kind == "f":
        bad = ~np.isfinite(arr) | (arr != np.round(arr))
        if not bad.any():
            return arr.astype(np.int64)
        raise InvalidConfiguration(f"{name} must be integers, got {arr[bad].tolist()}")
    raise InvalidConfiguration(f"{name} must be integers, got dtype {arr.dtype}")


def compute_cwk(
    adjacency,
    train_indices,
    observed_labels,
    test_indices,
    num_classes: int,
    walk_length: int,
    config: KernelConfig | None = None,
) -> KernelOutput:
    """Compute train-train and test-train coinciding walk kernels.

    All inputs are checked before the first propagation step, so invalid
    input never produces partial work.

    Args:
        adjacency: Square nonnegative (n x n) matrix (dense, sparse, or an
            already built GraphModel).
        train_indices: Distinct node ids with observed labels.
        observed_labels: One integer label per training node.
        test_indices: Distinct node ids to compare against the training set.
        num_classes: Number of classes (>= 1).
        walk_length: Maximum walk length (>= 0).
        config: Kernel parameters; defaults to KernelConfig().

    Returns:
        KernelOutput with K_train (num_train, num_train, L) and K_test
        (num_test, num_train, L), L = number of requested walk lengths.

    Raises:
        InvalidConfiguration: On out-of-domain parameters or malformed input.
        IndexOutOfRange: On node ids or labels out of range.
    """
    config = config or KernelConfig()

    if isinstance(walk_length, bool) or int(walk_length) != walk_length:
        raise InvalidConfiguration(f"walk_length must be an integer, got {walk_length!r}")
    walk_length = int(walk_length)
    if walk_length < 0:
        raise InvalidConfiguration(f"walk_length must be >= 0, got {walk_length}")
    walk_lengths = config.resolve_walk_lengths(walk_length)

    if isinstance(num_classes, bool) or int(num_classes) != num_classes:
        raise InvalidConfiguration(f"num_classes must be an integer, got {num_classes!r}")

    graph = adjacency if isinstance(adjacency, GraphModel) else build_graph(adjacency)

    labels = LabelAssignment(
        train_indices=_integer_array(train_indices, "train_indices"),
        observed_labels=_integer_array(observed_labels, "observed_labels"),
        num_classes=int(num_classes),
    )
    validate_labels(labels, graph.num_nodes)
    test = _integer_array(test_indices, "test_indices")
    check_node_indices(test, graph.num_nodes, "test_indices")

    log.info(
        "Computing CWK: n=%d, train=%d, test=%d, classes=%d, walk_length=%d, "
        "alpha=%g, walk_lengths=%s",
        graph.num_nodes,
        labels.num_train,
        len(test),
        labels.num_classes,
        walk_length,
        config.alpha,
        walk_lengths,
    )

    history = propagate_labels(
        graph,
        labels,
        walk_length,
        alpha=config.alpha,
        use_prior=config.use_prior,
        pseudocount=config.pseudocount,
    )
    return assemble_kernels(history, labels.train_indices, test, walk_lengths)
