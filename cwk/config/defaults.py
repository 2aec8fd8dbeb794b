"""Default configuration: single source of truth for default kernel parameters."""

from cwk.config.experiment import ExperimentConfig, KernelConfig

# alpha=1 (no re-anchoring), uniform prior, report only the maximum length.
DEFAULT_KERNEL_CONFIG = KernelConfig()

# walk_length=10 with default data paths under data/.
DEFAULT_CONFIG = ExperimentConfig()
