"""Loading and saving of adjacency matrices and label files.

Adjacency matrices are stored either as scipy sparse .npz archives or as
dense .npy arrays. Labels live in a small JSON document:

    {"num_classes": 2, "train_indices": [0, 3],
     "observed_labels": [0, 1], "test_indices": [1, 2]}

num_classes may be omitted, in which case it is max(observed_labels) + 1.
"""

import json
import logging
from pathlib import Path

import numpy as np
import scipy.sparse

from cwk.errors import InvalidConfiguration
from cwk.propagation.types import LabelAssignment

log = logging.getLogger(__name__)

REQUIRED_LABEL_FIELDS = ("train_indices", "observed_labels", "test_indices")


def save_adjacency(adjacency, path: str | Path) -> Path:
    """Save an adjacency matrix as a compressed scipy sparse .npz archive.

    Args:
        adjacency: Dense array or scipy sparse matrix.
        path: Destination file. Parent directories are created.

    Returns:
        Path that was written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    scipy.sparse.save_npz(str(path), scipy.sparse.csr_matrix(adjacency))
    log.info("Adjacency saved to %s", path)
    return path


def load_adjacency(path: str | Path) -> scipy.sparse.csr_matrix:
    """Load an adjacency matrix from .npz (sparse) or .npy (dense).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        InvalidConfiguration: If the extension is not recognised.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Adjacency file not found: {path}")

    if path.suffix == ".npz":
        adj = scipy.sparse.load_npz(str(path))
    elif path.suffix == ".npy":
        adj = scipy.sparse.csr_matrix(np.load(str(path), allow_pickle=False))
    else:
        raise InvalidConfiguration(
            f"Unsupported adjacency format '{path.suffix}' (expected .npz or .npy)"
        )

    log.info("Adjacency loaded from %s: shape=%s, nnz=%d", path, adj.shape, adj.nnz)
    return scipy.sparse.csr_matrix(adj)


def save_labels(
    labels: LabelAssignment, test_indices, path: str | Path
) -> Path:
    """Write a label assignment and test split to JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "num_classes": int(labels.num_classes),
        "train_indices": [int(i) for i in labels.train_indices],
        "observed_labels": [int(c) for c in labels.observed_labels],
        "test_indices": [int(i) for i in test_indices],
    }
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    return path


def load_labels(path: str | Path) -> tuple[LabelAssignment, np.ndarray]:
    """Load a label assignment and test split from JSON.

    Ranges are not checked here; compute_cwk validates them against the
    graph before propagating.

    Args:
        path: Path to the labels JSON file.

    Returns:
        (LabelAssignment, test_indices) tuple.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        InvalidConfiguration: If required fields are missing.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    missing = [k for k in REQUIRED_LABEL_FIELDS if k not in data]
    if missing:
        raise InvalidConfiguration(f"Labels file {path} missing fields: {missing}")

    observed = np.asarray(data["observed_labels"], dtype=np.int64)
    num_classes = data.get("num_classes")
    if num_classes is None:
        num_classes = int(observed.max()) + 1 if observed.size else 1

    labels = LabelAssignment(
        train_indices=np.asarray(data["train_indices"], dtype=np.int64),
        observed_labels=observed,
        num_classes=int(num_classes),
    )
    test_indices = np.asarray(data["test_indices"], dtype=np.int64)

    log.info(
        "Labels loaded from %s: %d train, %d test, %d classes",
        path,
        labels.num_train,
        len(test_indices),
        labels.num_classes,
    )
    return labels, test_indices
