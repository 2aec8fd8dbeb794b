"""Coinciding walk kernels: parallel partially-absorbing random walks on graphs."""

from cwk.config import KernelConfig
from cwk.errors import IndexOutOfRange, InvalidConfiguration, KernelError
from cwk.kernel import KernelOutput, compute_cwk

__all__ = [
    "IndexOutOfRange",
    "InvalidConfiguration",
    "KernelConfig",
    "KernelError",
    "KernelOutput",
    "compute_cwk",
]
