"""Result schema validation, writing, and experiment ID generation."""

from cwk.results.schema import validate_result, write_result, load_result
from cwk.results.experiment_id import generate_experiment_id

__all__ = [
    "validate_result",
    "write_result",
    "load_result",
    "generate_experiment_id",
]
