"""Kernel and experiment configuration dataclasses, frozen and slotted for immutability."""

import math
import numbers
from dataclasses import dataclass, field

from cwk.errors import InvalidConfiguration


def _is_real(value) -> bool:
    """True for Python and NumPy real scalars, False for bools."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class KernelConfig:
    """Coinciding walk kernel parameters.

    Validation runs once in __post_init__. The only silent correction is
    sorting (and de-duplicating) walk_lengths; everything else that is out
    of range raises InvalidConfiguration.
    """

    alpha: float = 1.0  # absorption strength in [0, 1]
    walk_lengths: tuple[int, ...] | None = None  # None -> (walk_length,)
    use_prior: bool = False  # empirical class prior instead of uniform
    pseudocount: float = 1.0  # per-class smoothing, used only with use_prior

    def __post_init__(self) -> None:
        """Field validation (uses object.__setattr__ since frozen)."""
        if not _is_real(self.alpha):
            raise InvalidConfiguration(f"alpha must be a real number, got {self.alpha!r}")
        if not (0.0 <= self.alpha <= 1.0):
            raise InvalidConfiguration(f"alpha must be in [0, 1], got {self.alpha}")
        object.__setattr__(self, "alpha", float(self.alpha))
        if not isinstance(self.use_prior, bool):
            raise InvalidConfiguration(
                f"use_prior must be a boolean, got {self.use_prior!r}"
            )
        if self.use_prior and not (
            _is_real(self.pseudocount)
            and math.isfinite(self.pseudocount)
            and self.pseudocount > 0
        ):
            raise InvalidConfiguration(
                f"pseudocount must be > 0 when use_prior is set, got {self.pseudocount}"
            )
        if _is_real(self.pseudocount):
            object.__setattr__(self, "pseudocount", float(self.pseudocount))
        if self.walk_lengths is not None:
            lengths = tuple(self.walk_lengths)
            if not lengths:
                raise InvalidConfiguration("walk_lengths must not be empty")
            for length in lengths:
                if isinstance(length, bool) or int(length) != length:
                    raise InvalidConfiguration(
                        f"walk_lengths must be integers, got {length!r}"
                    )
                if length < 0:
                    raise InvalidConfiguration(
                        f"walk_lengths must be >= 0, got {length}"
                    )
            object.__setattr__(
                self, "walk_lengths", tuple(sorted({int(x) for x in lengths}))
            )

    def resolve_walk_lengths(self, walk_length: int) -> tuple[int, ...]:
        """Return the ascending walk lengths to report for a given maximum.

        Args:
            walk_length: Maximum walk length of the propagation pass.

        Returns:
            Sorted tuple of requested lengths, (walk_length,) by default.

        Raises:
            InvalidConfiguration: If any requested length exceeds walk_length.
        """
        if self.walk_lengths is None:
            return (walk_length,)
        if self.walk_lengths[-1] > walk_length:
            raise InvalidConfiguration(
                f"walk_lengths {self.walk_lengths} exceed walk_length ({walk_length})"
            )
        return self.walk_lengths


@dataclass(frozen=True, slots=True)
class DataConfig:
    """Locations of the graph and label files for a kernel run."""

    adjacency_path: str = "data/adjacency.npz"
    labels_path: str = "data/labels.json"


@dataclass(frozen=True, slots=True)
class ExperimentConfig:
    """Top-level run configuration composing data and kernel sub-configs.

    Cross-parameter validation runs in __post_init__ to reject invalid
    configurations before any file is read.
    """

    data: DataConfig = field(default_factory=DataConfig)
    kernel: KernelConfig = field(default_factory=KernelConfig)
    walk_length: int = 10
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.walk_length < 0:
            raise InvalidConfiguration(
                f"walk_length must be >= 0, got {self.walk_length}"
            )
        # Raises if any requested length is beyond walk_length
        self.kernel.resolve_walk_lengths(self.walk_length)

    @property
    def walk_lengths(self) -> tuple[int, ...]:
        """Resolved ascending walk lengths reported by this run."""
        return self.kernel.resolve_walk_lengths(self.walk_length)
