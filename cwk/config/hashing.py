"""Deterministic hashes of run configs and of the data files they point at.

Config hashes are the first 16 hex characters of SHA-256 over compact,
key-sorted JSON. A config only names its adjacency and label files, so the
kernel cache additionally keys on a digest of the file bytes.
"""

import hashlib
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from cwk.config.experiment import DataConfig, ExperimentConfig

# Top-level ExperimentConfig fields that never change kernel values
NON_KERNEL_FIELDS = ("description", "tags")

_CHUNK_SIZE = 1 << 20


def _short_digest(payload: Any) -> str:
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:16]


def config_hash(config: Any, exclude_fields: tuple[str, ...] = ()) -> str:
    """Deterministic SHA-256 hash of a config dataclass.

    Args:
        config: Any dataclass instance (or sub-config).
        exclude_fields: Top-level field names left out of the hash.

    Returns:
        First 16 hex characters of the SHA-256 hash.
    """
    d = asdict(config)
    for name in exclude_fields:
        d.pop(name, None)
    return _short_digest(d)


def kernel_config_hash(config: ExperimentConfig) -> str:
    """Hash of every config field that changes the kernel values.

    Description and tags are excluded so relabelling a run keeps the hash.
    """
    return config_hash(config, exclude_fields=NON_KERNEL_FIELDS)


def full_config_hash(config: ExperimentConfig) -> str:
    """Hash for full experiment identity, including description and tags."""
    return config_hash(config)


def file_sha256(path: str | Path) -> str | None:
    """Full SHA-256 hex digest of a file's bytes, or None if it does not exist."""
    path = Path(path)
    if not path.is_file():
        return None
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def data_digest(data: DataConfig) -> dict[str, str | None]:
    """Content digests of the adjacency and label files named by a DataConfig."""
    return {
        "adjacency": file_sha256(data.adjacency_path),
        "labels": file_sha256(data.labels_path),
    }


def kernel_data_hash(
    config: ExperimentConfig, digest: dict[str, str | None] | None = None
) -> str:
    """Hash of the kernel-affecting config fields plus the data file contents.

    Editing the adjacency or label file, or resolving the same relative path
    against a different working directory, changes this hash even though the
    config itself is unchanged.

    Args:
        config: Run configuration.
        digest: Precomputed data_digest(config.data), read from disk if None.
    """
    if digest is None:
        digest = data_digest(config.data)
    return _short_digest({"config": kernel_config_hash(config), "data": digest})
