"""Experiment ID generation with scannable parameter slug format."""

from datetime import datetime, timezone

from cwk.config.experiment import ExperimentConfig


def generate_experiment_id(config: ExperimentConfig) -> str:
    """Generate a scannable experiment ID from config parameters.

    Format: a{alpha}_T{walk_length}_p{0|1}_{YYYYMMDD}_{HHMMSS}
    Example: a0.8_T10_p1_20261018_143012

    The slug encodes the kernel parameters so result directories are
    identifiable at a glance in file listings without opening result.json.
    """
    ts = datetime.now(timezone.utc)
    return (
        f"a{config.kernel.alpha:g}"
        f"_T{config.walk_length}"
        f"_p{int(config.kernel.use_prior)}"
        f"_{ts.strftime('%Y%m%d_%H%M%S')}"
    )
