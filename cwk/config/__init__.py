"""Kernel configuration system with frozen, hashable, serializable dataclasses."""

from cwk.config.experiment import (
    DataConfig,
    ExperimentConfig,
    KernelConfig,
)
from cwk.config.defaults import DEFAULT_CONFIG, DEFAULT_KERNEL_CONFIG
from cwk.config.hashing import (
    config_hash,
    data_digest,
    file_sha256,
    full_config_hash,
    kernel_config_hash,
    kernel_data_hash,
)
from cwk.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "DataConfig",
    "ExperimentConfig",
    "KernelConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_KERNEL_CONFIG",
    "config_hash",
    "kernel_config_hash",
    "full_config_hash",
    "data_digest",
    "file_sha256",
    "kernel_data_hash",
    "config_to_dict",
    "config_from_dict",
    "config_to_json",
    "config_from_json",
]
