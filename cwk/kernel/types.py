"""Kernel output data structures."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class KernelOutput:
    """Train-train and test-train kernels at each requested walk length.

    The last axis of both arrays follows walk_lengths, which is ascending.
    Uses frozen=True but omits slots=True since numpy arrays don't interact
    well with __slots__.
    """

    K_train: np.ndarray  # float64 array of shape (num_train, num_train, L)
    K_test: np.ndarray  # float64 array of shape (num_test, num_train, L)
    walk_lengths: tuple[int, ...]  # length L, ascending

    def train_at(self, walk_length: int) -> np.ndarray:
        """Train-train kernel for one requested walk length."""
        return self.K_train[:, :, self.walk_lengths.index(walk_length)]

    def test_at(self, walk_length: int) -> np.ndarray:
        """Test-train kernel for one requested walk length."""
        return self.K_test[:, :, self.walk_lengths.index(walk_length)]
