"""Label initialization and partially-absorbing propagation."""

from cwk.propagation.engine import absorbing_step, propagate_labels
from cwk.propagation.prior import class_prior, initial_distributions, validate_labels
from cwk.propagation.types import LabelAssignment, ProbabilityHistory

__all__ = [
    "LabelAssignment",
    "ProbabilityHistory",
    "absorbing_step",
    "class_prior",
    "initial_distributions",
    "propagate_labels",
    "validate_labels",
]
