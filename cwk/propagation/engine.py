"""Partially-absorbing label propagation over a GraphModel.

Starting from the iteration-0 distributions p_0, every step applies one
random-walk step to all nodes and then pulls training nodes back toward
their fixed starting distribution:

    train v:      p_{t+1}(v) = alpha * (P p_t)(v) + (1 - alpha) * p_0(v)
    other v:      p_{t+1}(v) = (P p_t)(v)

alpha = 1 is plain diffusion from the seeded start; alpha = 0 clamps the
training nodes to p_0 at every step, as in classical label propagation.
Rows are not renormalized between steps.
"""

import logging

import numpy as np

from cwk.errors import InvalidConfiguration
from cwk.graph.types import GraphModel
from cwk.propagation.prior import initial_distributions
from cwk.propagation.types import LabelAssignment, ProbabilityHistory

log = logging.getLogger(__name__)


def absorbing_step(
    graph: GraphModel,
    current: np.ndarray,
    initial: np.ndarray,
    train_indices: np.ndarray,
    alpha: float,
) -> np.ndarray:
    """Advance all node distributions by one partially-absorbing step.

    Args:
        graph: Graph providing the transition operator.
        current: Distributions at iteration t, shape (n, num_classes).
        initial: Distributions at iteration 0, shape (n, num_classes).
        train_indices: Nodes subject to partial absorption.
        alpha: Weight of the diffused mass at training nodes.

    Returns:
        New array with the distributions at iteration t + 1.
    """
    nxt = graph.step(current)
    if len(train_indices):
        nxt[train_indices] = (
            alpha * nxt[train_indices] + (1.0 - alpha) * initial[train_indices]
        )
    return nxt


def propagate_labels(
    graph: GraphModel,
    labels: LabelAssignment,
    walk_length: int,
    alpha: float = 1.0,
    use_prior: bool = False,
    pseudocount: float = 1.0,
) -> ProbabilityHistory:
    """Run partially-absorbing propagation and record every iteration.

    Args:
        graph: Graph to propagate over.
        labels: Training nodes and their observed labels.
        walk_length: Number of steps to take (>= 0).
        alpha: Absorption parameter in [0, 1].
        use_prior: Initialize with the empirical class prior.
        pseudocount: Prior smoothing, used only with use_prior.

    Returns:
        ProbabilityHistory with walk_length + 1 recorded iterations.

    Raises:
        InvalidConfiguration: If walk_length < 0, alpha is outside [0, 1],
            or the labels are inconsistent.
        IndexOutOfRange: If a label or training index is out of range.
    """
    if walk_length < 0:
        raise InvalidConfiguration(f"walk_length must be >= 0, got {walk_length}")
    if not (0.0 <= alpha <= 1.0):
        raise InvalidConfiguration(f"alpha must be in [0, 1], got {alpha}")

    p0 = initial_distributions(labels, graph.num_nodes, use_prior, pseudocount)
    train = labels.train_indices

    history = np.empty(
        (graph.num_nodes, labels.num_classes, walk_length + 1), dtype=np.float64
    )
    history[:, :, 0] = p0

    current = p0
    for t in range(walk_length):
        current = absorbing_step(graph, current, p0, train, alpha)
        history[:, :, t + 1] = current
        log.debug(
            "Propagation step %d/%d: total mass %.6f",
            t + 1,
            walk_length,
            current.sum(),
        )

    history.setflags(write=False)
    log.info(
        "Propagated %d classes over %d nodes for %d steps (alpha=%g, prior=%s)",
        labels.num_classes,
        graph.num_nodes,
        walk_length,
        alpha,
        use_prior,
    )
    return ProbabilityHistory(
        probabilities=history,
        train_indices=np.array(train, copy=True),
        alpha=float(alpha),
    )
