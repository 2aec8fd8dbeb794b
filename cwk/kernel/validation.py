"""Structural checks on assembled kernels.

Every train-train slice should be a finite, symmetric, positive
semidefinite Gram matrix with nonnegative entries, and the test-train block
should line up with it.
"""

import logging

import numpy as np

from cwk.kernel.types import KernelOutput

log = logging.getLogger(__name__)


def min_eigenvalue(K: np.ndarray) -> float:
    """Smallest eigenvalue of a symmetric matrix (0.0 for an empty one)."""
    if K.size == 0:
        return 0.0
    return float(np.linalg.eigvalsh(K).min())


def validate_kernels(output: KernelOutput, atol: float = 1e-10) -> list[str]:
    """Validate a KernelOutput.

    Checks (cheapest first):
    1. Shapes agree with each other and with walk_lengths
    2. walk_lengths ascending and distinct
    3. All entries finite and nonnegative
    4. Each train-train slice symmetric
    5. Each train-train slice positive semidefinite (up to atol scaled by
       the slice's largest entry)

    Args:
        output: Kernels to check.
        atol: Absolute tolerance for the eigenvalue check.

    Returns:
        List of error strings (empty = valid kernels).
    """
    errors: list[str] = []
    K_train, K_test = output.K_train, output.K_test
    L = len(output.walk_lengths)

    if K_train.ndim != 3 or K_train.shape[0] != K_train.shape[1]:
        errors.append(f"K_train must be (m, m, L), got shape {K_train.shape}")
        return errors
    if K_test.ndim != 3 or K_test.shape[1] != K_train.shape[0]:
        errors.append(
            f"K_test shape {K_test.shape} incompatible with K_train {K_train.shape}"
        )
        return errors
    if K_train.shape[2] != L or K_test.shape[2] != L:
        errors.append(
            f"Kernel depth ({K_train.shape[2]}, {K_test.shape[2]}) != "
            f"number of walk lengths ({L})"
        )

    if list(output.walk_lengths) != sorted(set(output.walk_lengths)):
        errors.append(f"walk_lengths not ascending/distinct: {output.walk_lengths}")

    for name, K in (("K_train", K_train), ("K_test", K_test)):
        if not np.all(np.isfinite(K)):
            errors.append(f"{name} contains non-finite entries")
        elif K.size and K.min() < 0:
            errors.append(f"{name} contains negative entries (min {K.min():g})")

    for idx in range(K_train.shape[2]):
        K = K_train[:, :, idx]
        length = output.walk_lengths[idx] if idx < L else idx
        if not np.array_equal(K, K.T):
            errors.append(f"K_train at walk length {length} is not symmetric")
            continue
        if not np.all(np.isfinite(K)):
            continue
        scale = max(1.0, float(np.abs(K).max())) if K.size else 1.0
        lam = min_eigenvalue(K)
        if lam < -atol * scale:
            errors.append(
                f"K_train at walk length {length} is not PSD "
                f"(min eigenvalue {lam:.3e})"
            )

    if errors:
        log.warning("Kernel validation found %d problem(s)", len(errors))
    return errors
