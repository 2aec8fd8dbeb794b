"""Result schema validation and writing.

Uses a Python validation function (not jsonschema) to check required fields,
types, and kernel shape consistency before writing result.json files.
"""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from cwk.config.experiment import ExperimentConfig
from cwk.config.hashing import full_config_hash, kernel_config_hash
from cwk.kernel.cache import write_kernels
from cwk.kernel.types import KernelOutput
from cwk.reproducibility.git_hash import get_git_hash
from cwk.results.experiment_id import generate_experiment_id

SCHEMA_VERSION = "1.0"

REQUIRED_TOP_FIELDS = {
    "schema_version",
    "experiment_id",
    "timestamp",
    "description",
    "tags",
    "config",
    "metrics",
}

REQUIRED_KERNEL_FIELDS = {"walk_lengths", "K_train_shape", "K_test_shape"}


def validate_result(result: dict[str, Any]) -> list[str]:
    """Validate a result dict against the project schema.

    Returns a list of error strings. An empty list means the result is valid.

    Checks:
    - All required top-level fields are present
    - metrics.scalars is present
    - schema_version is a string, tags a list, config a dict
    - timestamp is ISO 8601
    - Optional kernels block has consistent shapes and walk lengths
    """
    errors: list[str] = []

    missing = REQUIRED_TOP_FIELDS - set(result.keys())
    if missing:
        errors.append(f"Missing required top-level fields: {sorted(missing)}")

    if "schema_version" in result and not isinstance(result["schema_version"], str):
        errors.append("schema_version must be a string")

    if "tags" in result and not isinstance(result["tags"], list):
        errors.append("tags must be a list")

    if "config" in result and not isinstance(result["config"], dict):
        errors.append("config must be a dict")

    if "timestamp" in result:
        ts = result["timestamp"]
        if not isinstance(ts, str):
            errors.append("timestamp must be a string")
        else:
            try:
                datetime.fromisoformat(ts)
            except ValueError:
                errors.append("timestamp must be in ISO 8601 format")

    metrics = result.get("metrics")
    if "metrics" in result:
        if not isinstance(metrics, dict):
            errors.append("metrics must be a dict")
        elif "scalars" not in metrics:
            errors.append("metrics.scalars is required")

    kernels = metrics.get("kernels") if isinstance(metrics, dict) else None
    if kernels is not None:
        if not isinstance(kernels, dict):
            errors.append("metrics.kernels must be a dict")
        else:
            for field in sorted(REQUIRED_KERNEL_FIELDS - set(kernels.keys())):
                errors.append(f"metrics.kernels missing field: {field}")
            lengths = kernels.get("walk_lengths", [])
            train_shape = kernels.get("K_train_shape", [])
            test_shape = kernels.get("K_test_shape", [])
            if len(train_shape) == 3 and len(test_shape) == 3:
                if train_shape[0] != train_shape[1]:
                    errors.append("metrics.kernels.K_train_shape must be (m, m, L)")
                if test_shape[1] != train_shape[0]:
                    errors.append(
                        "metrics.kernels.K_test_shape columns must match "
                        "the number of training nodes"
                    )
                if train_shape[2] != len(lengths) or test_shape[2] != len(lengths):
                    errors.append(
                        "metrics.kernels shape depth != number of walk_lengths"
                    )
            elif train_shape or test_shape:
                errors.append("metrics.kernels shapes must have three dimensions")

    return errors


def write_result(
    config: ExperimentConfig,
    output: KernelOutput,
    scalars: dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
    results_dir: str = "results",
) -> str:
    """Write result.json and kernels.npz for one kernel run.

    Creates a directory at results/{experiment_id}/ containing both files.

    Args:
        config: The run configuration.
        output: Kernels to store.
        scalars: Optional scalar summaries (e.g. min eigenvalues).
        metadata: Optional additional metadata merged into the metadata block.
        results_dir: Base directory for result output.

    Returns:
        The generated experiment_id string.

    Raises:
        ValueError: If the assembled result fails validation.
    """
    experiment_id = generate_experiment_id(config)
    out_dir = Path(results_dir) / experiment_id
    out_dir.mkdir(parents=True, exist_ok=True)

    result = {
        "schema_version": SCHEMA_VERSION,
        "experiment_id": experiment_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "description": config.description,
        "tags": list(config.tags),
        "config": asdict(config),
        "metrics": {
            "scalars": scalars or {},
            "kernels": {
                "walk_lengths": list(output.walk_lengths),
                "K_train_shape": list(output.K_train.shape),
                "K_test_shape": list(output.K_test.shape),
                "file": "kernels.npz",
            },
        },
        "metadata": {
            "code_hash": get_git_hash(),
            "config_hash": full_config_hash(config),
            "kernel_config_hash": kernel_config_hash(config),
            **(metadata or {}),
        },
    }

    errors = validate_result(result)
    if errors:
        raise ValueError(
            "Result validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    with open(out_dir / "result.json", "w") as f:
        json.dump(result, f, indent=2)

    write_kernels(output, out_dir / "kernels.npz")

    return experiment_id


def load_result(result_path: str | Path) -> dict[str, Any]:
    """Load and validate a result.json file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the loaded result fails validation.
    """
    path = Path(result_path)
    with open(path) as f:
        result = json.load(f)

    errors = validate_result(result)
    if errors:
        raise ValueError(
            f"Result validation failed for {path}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    return result
