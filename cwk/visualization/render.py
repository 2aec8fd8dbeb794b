"""Orchestrator: render all figures for a single kernel run.

Reads kernels.npz (and labels, when available) from a result directory and
saves heatmaps to {result_dir}/figures/ as PNG + SVG.
"""

import logging
from pathlib import Path

import numpy as np

from cwk.kernel.cache import read_kernels
from cwk.visualization.heatmap import plot_kernel_heatmap
from cwk.visualization.style import apply_style, save_figure

log = logging.getLogger(__name__)


def render_all(
    result_dir: str | Path, labels: np.ndarray | None = None
) -> list[Path]:
    """Generate all figures for a single kernel run.

    Args:
        result_dir: Path to results/{experiment_id}/ directory.
        labels: Optional observed labels of the training nodes, used to
            group heatmap rows and columns by class.

    Returns:
        List of paths to generated figure files.
    """
    apply_style()

    result_dir = Path(result_dir)
    output = read_kernels(result_dir / "kernels.npz")
    figures_dir = result_dir / "figures"
    generated_files: list[Path] = []

    for idx, length in enumerate(output.walk_lengths):
        fig = plot_kernel_heatmap(
            output.K_train[:, :, idx], length, labels=labels, title="K_train"
        )
        generated_files.extend(save_figure(fig, figures_dir, f"k_train_T{length}"))

        fig = plot_kernel_heatmap(
            output.K_test[:, :, idx], length, labels=labels, title="K_test"
        )
        generated_files.extend(save_figure(fig, figures_dir, f"k_test_T{length}"))

    log.info("Rendered %d figure files to %s", len(generated_files), figures_dir)
    return generated_files
