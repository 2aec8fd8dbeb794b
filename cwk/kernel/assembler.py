"""Assembly of coinciding walk kernels from a propagation history.

The kernel between two nodes at walk length T is the mean, over iterations
0..T, of the inner product of their class-distribution vectors:

    K_T(u, v) = 1 / (T + 1) * sum_{t=0}^{T} p_t(u) . p_t(v)

A single pass over the history keeps running sums for the train-train and
test-train blocks and snapshots their averages whenever the iteration
reaches one of the requested walk lengths.
"""

import logging

import numpy as np

from cwk.errors import IndexOutOfRange, InvalidConfiguration
from cwk.kernel.types import KernelOutput
from cwk.propagation.types import ProbabilityHistory

log = logging.getLogger(__name__)


def check_node_indices(indices: np.ndarray, num_nodes: int, name: str) -> None:
    """Raise if indices are not a 1-D array of distinct ids in [0, num_nodes).

    Raises:
        InvalidConfiguration: If the array is not 1-D or repeats an id.
        IndexOutOfRange: If any id is outside [0, num_nodes).
    """
    if indices.ndim != 1:
        raise InvalidConfiguration(f"{name} must be 1-D, got shape {indices.shape}")
    bad = (indices < 0) | (indices >= num_nodes)
    if bad.any():
        raise IndexOutOfRange(
            f"{name} {indices[bad].tolist()} outside [0, {num_nodes})"
        )
    if len(np.unique(indices)) != len(indices):
        raise InvalidConfiguration(f"{name} contains duplicate node ids")


def check_walk_lengths(walk_lengths, max_walk_length: int) -> tuple[int, ...]:
    """Sort requested walk lengths and check them against the history.

    Returns:
        Ascending tuple of distinct walk lengths.

    Raises:
        InvalidConfiguration: If empty, negative, or beyond max_walk_length.
    """
    lengths = tuple(sorted({int(x) for x in walk_lengths}))
    if not lengths:
        raise InvalidConfiguration("at least one walk length must be requested")
    if lengths[0] < 0:
        raise InvalidConfiguration(f"walk lengths must be >= 0, got {lengths[0]}")
    if lengths[-1] > max_walk_length:
        raise InvalidConfiguration(
            f"requested walk length {lengths[-1]} exceeds propagated "
            f"walk length {max_walk_length}"
        )
    return lengths


def assemble_kernels(
    history: ProbabilityHistory,
    train_indices,
    test_indices,
    walk_lengths,
) -> KernelOutput:
    """Build train-train and test-train kernels at the requested walk lengths.

    Args:
        history: Output of propagate_labels().
        train_indices: Node ids of the kernel columns (and train rows).
        test_indices: Node ids of the test rows.
        walk_lengths: Walk lengths to report; sorted ascending on output.

    Returns:
        KernelOutput with K_train (num_train, num_train, L) and K_test
        (num_test, num_train, L).

    Raises:
        InvalidConfiguration: On malformed walk lengths or index arrays.
        IndexOutOfRange: On node ids outside the graph.
    """
    train = np.asarray(train_indices, dtype=np.int64)
    test = np.asarray(test_indices, dtype=np.int64)
    check_node_indices(train, history.num_nodes, "train_indices")
    check_node_indices(test, history.num_nodes, "test_indices")
    lengths = check_walk_lengths(walk_lengths, history.walk_length)

    num_train, num_test = len(train), len(test)
    K_train = np.zeros((num_train, num_train, len(lengths)), dtype=np.float64)
    K_test = np.zeros((num_test, num_train, len(lengths)), dtype=np.float64)

    running_train = np.zeros((num_train, num_train), dtype=np.float64)
    running_test = np.zeros((num_test, num_train), dtype=np.float64)

    # Cursor into the sorted request list, advanced in lockstep with i
    cursor = 0
    for i in range(lengths[-1] + 1):
        p = history.at(i)
        p_train = p[train]
        gram = p_train @ p_train.T
        # Blocked BLAS products are not bitwise symmetric
        running_train += 0.5 * (gram + gram.T)
        running_test += p[test] @ p_train.T

        if i == lengths[cursor]:
            K_train[:, :, cursor] = running_train / (i + 1)
            K_test[:, :, cursor] = running_test / (i + 1)
            log.debug("Kernel snapshot at walk length %d", i)
            cursor += 1
            if cursor == len(lengths):
                break

    return KernelOutput(K_train=K_train, K_test=K_test, walk_lengths=lengths)
