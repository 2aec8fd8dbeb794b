"""Kernel heatmap rendering with matplotlib and seaborn."""

from cwk.visualization.heatmap import plot_kernel_heatmap
from cwk.visualization.render import render_all
from cwk.visualization.style import apply_style, save_figure

__all__ = [
    "apply_style",
    "plot_kernel_heatmap",
    "render_all",
    "save_figure",
]
