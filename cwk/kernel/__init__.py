"""Kernel assembly, the compute_cwk entry point, validation, and caching."""

from cwk.kernel.assembler import assemble_kernels, check_node_indices, check_walk_lengths
from cwk.kernel.cache import (
    compute_or_load_kernels,
    kernel_cache_key,
    load_kernels,
    read_kernels,
    save_kernels,
    write_kernels,
)
from cwk.kernel.cwk import compute_cwk
from cwk.kernel.types import KernelOutput
from cwk.kernel.validation import min_eigenvalue, validate_kernels

__all__ = [
    "KernelOutput",
    "assemble_kernels",
    "check_node_indices",
    "check_walk_lengths",
    "compute_cwk",
    "compute_or_load_kernels",
    "kernel_cache_key",
    "load_kernels",
    "min_eigenvalue",
    "read_kernels",
    "save_kernels",
    "validate_kernels",
    "write_kernels",
]
