"""Kernel caching by config and data hash with compressed npz storage.

Propagation costs O(walk_length * nnz * num_classes) and assembly
O(walk_length * (num_train + num_test) * num_train * num_classes); caching
lets repeated runs over the same graph, labels, and kernel parameters load
the result instead of recomputing it. The key covers the bytes of the
adjacency and label files, so editing either one invalidates the entry.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from cwk.config.experiment import ExperimentConfig
from cwk.config.hashing import data_digest, kernel_config_hash, kernel_data_hash
from cwk.kernel.types import KernelOutput

log = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path(".cache/kernels")

DataDigest = dict[str, str | None]


def kernel_cache_key(config: ExperimentConfig, digest: DataDigest | None = None) -> str:
    """Compute cache key for a kernel configuration and its data files.

    Key = kernel_data_hash + maximum walk length. Description and tags
    don't affect the key; the contents of the adjacency and label files do.

    Args:
        config: Run configuration.
        digest: Precomputed data_digest(config.data), read from disk if None.

    Returns:
        Cache key string like "a1b2c3d4e5f6g7h8_T10".
    """
    return f"{kernel_data_hash(config, digest)}_T{config.walk_length}"


def _cache_path(
    config: ExperimentConfig,
    cache_dir: Path = DEFAULT_CACHE_DIR,
    digest: DataDigest | None = None,
) -> Path:
    """Compute the directory path for a cached kernel."""
    return Path(cache_dir) / kernel_cache_key(config, digest)


def write_kernels(output: KernelOutput, path: str | Path) -> Path:
    """Write K_train, K_test and walk_lengths to one compressed npz file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        str(path),
        K_train=output.K_train,
        K_test=output.K_test,
        walk_lengths=np.asarray(output.walk_lengths, dtype=np.int64),
    )
    return path


def read_kernels(path: str | Path) -> KernelOutput:
    """Read kernels written by write_kernels()."""
    with np.load(str(path), allow_pickle=False) as npz:
        return KernelOutput(
            K_train=npz["K_train"],
            K_test=npz["K_test"],
            walk_lengths=tuple(int(x) for x in npz["walk_lengths"]),
        )


def save_kernels(
    output: KernelOutput,
    config: ExperimentConfig,
    cache_dir: Path = DEFAULT_CACHE_DIR,
    digest: DataDigest | None = None,
) -> Path:
    """Save kernels and their provenance to the cache.

    Stores:
    - kernels.npz: K_train, K_test, walk_lengths
    - metadata.json: config hash, data file digests, shapes, timestamp

    Returns:
        Path to the cache directory for this kernel.
    """
    if digest is None:
        digest = data_digest(config.data)
    cache_path = _cache_path(config, cache_dir, digest)
    cache_path.mkdir(parents=True, exist_ok=True)

    write_kernels(output, cache_path / "kernels.npz")

    metadata = {
        "config_hash": kernel_config_hash(config),
        "data_sha256": digest,
        "walk_length": config.walk_length,
        "walk_lengths": list(output.walk_lengths),
        "K_train_shape": list(output.K_train.shape),
        "K_test_shape": list(output.K_test.shape),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    with open(cache_path / "metadata.json", "w") as f:
        json.dump(metadata, f, indent=2)

    log.info("Kernels cached at %s", cache_path)
    return cache_path


def load_kernels(
    config: ExperimentConfig,
    cache_dir: Path = DEFAULT_CACHE_DIR,
    digest: DataDigest | None = None,
) -> KernelOutput | None:
    """Load cached kernels if they exist for this config and data.

    Returns:
        KernelOutput on cache hit, None on cache miss.
    """
    if digest is None:
        digest = data_digest(config.data)
    cache_path = _cache_path(config, cache_dir, digest)

    required_files = ["kernels.npz", "metadata.json"]
    for fname in required_files:
        if not (cache_path / fname).exists():
            return None

    with open(cache_path / "metadata.json") as f:
        metadata = json.load(f)
    if metadata.get("data_sha256") != digest:
        log.warning("Cached data digest at %s does not match; ignoring cache", cache_path)
        return None

    output = read_kernels(cache_path / "kernels.npz")
    if output.walk_lengths != config.walk_lengths:
        log.warning(
            "Cached walk lengths %s do not match config %s; ignoring cache",
            output.walk_lengths,
            config.walk_lengths,
        )
        return None

    log.info("Kernels loaded from cache: %s", cache_path)
    return output


def compute_or_load_kernels(
    config: ExperimentConfig,
    compute: Callable[[], KernelOutput],
    cache_dir: Path = DEFAULT_CACHE_DIR,
) -> KernelOutput:
    """Return cached kernels for config, computing and caching them on a miss.

    The data files are digested once per call.

    Args:
        config: Full run configuration.
        compute: Zero-argument callable producing the kernels on a miss.
        cache_dir: Root cache directory.
    """
    digest = data_digest(config.data)
    key = kernel_cache_key(config, digest)

    cached = load_kernels(config, cache_dir, digest)
    if cached is not None:
        log.info("Cache hit for %s", key)
        return cached

    log.info("Cache miss for %s, computing...", key)
    output = compute()
    save_kernels(output, config, cache_dir, digest)
    return output
