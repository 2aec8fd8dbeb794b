"""Kernel matrix heatmaps, one per requested walk length."""

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from cwk.visualization.style import KERNEL_CMAP


def _order_by_label(labels: np.ndarray | None, m: int) -> np.ndarray:
    """Permutation grouping training nodes by class (stable within a class)."""
    if labels is None:
        return np.arange(m)
    return np.argsort(labels, kind="stable")


def plot_kernel_heatmap(
    K: np.ndarray,
    walk_length: int,
    labels: np.ndarray | None = None,
    title: str = "K_train",
) -> plt.Figure:
    """Plot one kernel slice as a heatmap.

    Args:
        K: Kernel matrix of shape (rows, num_train).
        walk_length: Walk length the slice was taken at (for the title).
        labels: Optional observed labels of the training nodes. When given,
            columns (and rows, for a square train-train slice) are grouped by
            class so block structure is visible.
        title: Name shown in the title.

    Returns:
        The matplotlib Figure containing the heatmap.
    """
    if K.size == 0:
        fig, ax = plt.subplots()
        ax.text(
            0.5, 0.5, "Empty kernel",
            transform=ax.transAxes, ha="center", va="center",
            fontsize=12, color="gray",
        )
        ax.set_title(f"{title} (walk length {walk_length})")
        return fig

    cols = _order_by_label(labels, K.shape[1])
    rows = cols if K.shape[0] == K.shape[1] else np.arange(K.shape[0])
    ordered = K[np.ix_(rows, cols)]

    fig, ax = plt.subplots()
    sns.heatmap(
        ordered,
        cmap=KERNEL_CMAP,
        square=K.shape[0] == K.shape[1],
        xticklabels=False,
        yticklabels=False,
        cbar_kws={"label": "Mean coincidence probability"},
        ax=ax,
    )
    ax.set_xlabel("Training nodes" + (" (by class)" if labels is not None else ""))
    ax.set_ylabel("Training nodes" if K.shape[0] == K.shape[1] else "Test nodes")
    ax.set_title(f"{title} (walk length {walk_length})")

    fig.tight_layout()
    return fig
