"""Tests for the kernel configuration system."""

import json
import re
from dataclasses import FrozenInstanceError, replace

import numpy as np
import pytest

from cwk.config import (
    DEFAULT_CONFIG,
    DEFAULT_KERNEL_CONFIG,
    DataConfig,
    ExperimentConfig,
    KernelConfig,
    config_from_json,
    config_hash,
    config_to_json,
    full_config_hash,
    kernel_config_hash,
)
from cwk.errors import InvalidConfiguration


class TestDefaults:
    """Defaults match the documented parameter values."""

    def test_kernel_defaults(self):
        assert DEFAULT_KERNEL_CONFIG.alpha == 1.0
        assert DEFAULT_KERNEL_CONFIG.walk_lengths is None
        assert DEFAULT_KERNEL_CONFIG.use_prior is False
        assert DEFAULT_KERNEL_CONFIG.pseudocount == 1.0

    def test_experiment_defaults(self):
        assert DEFAULT_CONFIG.walk_length == 10
        assert DEFAULT_CONFIG.walk_lengths == (10,)
        assert DEFAULT_CONFIG.data.adjacency_path.endswith(".npz")


class TestImmutability:
    """Frozen dataclasses prevent mutation."""

    def test_kernel_config_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_KERNEL_CONFIG.alpha = 0.5  # type: ignore[misc]

    def test_experiment_config_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_CONFIG.walk_length = 3  # type: ignore[misc]


class TestKernelConfigValidation:
    """KernelConfig rejects out-of-domain fields at construction."""

    @pytest.mark.parametrize("alpha", [1.5, -0.1, float("nan")])
    def test_alpha_out_of_range(self, alpha):
        with pytest.raises(InvalidConfiguration, match="alpha"):
            KernelConfig(alpha=alpha)

    @pytest.mark.parametrize("alpha", [0.0, 0.5, 1.0, 0, 1])
    def test_alpha_boundaries_accepted(self, alpha):
        assert KernelConfig(alpha=alpha).alpha == alpha

    @pytest.mark.parametrize("alpha", [np.float32(0.5), np.float64(0.25), np.int64(1)])
    def test_numpy_scalar_alpha_accepted(self, alpha):
        cfg = KernelConfig(alpha=alpha)
        assert cfg.alpha == float(alpha)
        assert type(cfg.alpha) is float

    def test_numpy_scalar_pseudocount_accepted(self):
        cfg = KernelConfig(use_prior=True, pseudocount=np.float32(0.5))
        assert cfg.pseudocount == 0.5
        assert type(cfg.pseudocount) is float

    @pytest.mark.parametrize("alpha", [True, np.bool_(True), "0.5"])
    def test_non_real_alpha_rejected(self, alpha):
        with pytest.raises(InvalidConfiguration, match="alpha"):
            KernelConfig(alpha=alpha)

    def test_pseudocount_checked_only_with_prior(self):
        assert KernelConfig(pseudocount=0.0).pseudocount == 0.0
        with pytest.raises(InvalidConfiguration, match="pseudocount"):
            KernelConfig(use_prior=True, pseudocount=0.0)
        with pytest.raises(InvalidConfiguration, match="pseudocount"):
            KernelConfig(use_prior=True, pseudocount=-1.0)

    def test_use_prior_must_be_bool(self):
        with pytest.raises(InvalidConfiguration, match="use_prior"):
            KernelConfig(use_prior=1)  # type: ignore[arg-type]

    def test_walk_lengths_sorted_and_deduplicated(self):
        cfg = KernelConfig(walk_lengths=(4, 2, 2, 0))
        assert cfg.walk_lengths == (0, 2, 4)

    def test_negative_walk_length_rejected(self):
        with pytest.raises(InvalidConfiguration, match=">= 0"):
            KernelConfig(walk_lengths=(2, -1))

    def test_empty_walk_lengths_rejected(self):
        with pytest.raises(InvalidConfiguration, match="empty"):
            KernelConfig(walk_lengths=())

    def test_resolve_default_is_max_length(self):
        assert KernelConfig().resolve_walk_lengths(7) == (7,)

    def test_resolve_rejects_lengths_beyond_max(self):
        with pytest.raises(InvalidConfiguration, match="exceed"):
            KernelConfig(walk_lengths=(3, 8)).resolve_walk_lengths(5)

    def test_invalid_configuration_is_value_error(self):
        with pytest.raises(ValueError):
            KernelConfig(alpha=2.0)


class TestExperimentConfigValidation:
    """Cross-parameter validation catches invalid configs."""

    def test_negative_walk_length(self):
        with pytest.raises(InvalidConfiguration, match="walk_length"):
            ExperimentConfig(walk_length=-1)

    def test_requested_lengths_beyond_walk_length(self):
        with pytest.raises(InvalidConfiguration, match="exceed"):
            ExperimentConfig(
                walk_length=3, kernel=KernelConfig(walk_lengths=(1, 5))
            )

    def test_valid_config_passes(self):
        cfg = ExperimentConfig(
            walk_length=6, kernel=KernelConfig(walk_lengths=(6, 2))
        )
        assert cfg.walk_lengths == (2, 6)


class TestRoundTrip:
    """JSON serialization round-trip preserves identity."""

    def test_round_trip_hash(self):
        json_str = config_to_json(DEFAULT_CONFIG)
        restored = config_from_json(json_str)
        assert config_hash(DEFAULT_CONFIG) == config_hash(restored)

    def test_round_trip_with_walk_lengths(self):
        cfg = ExperimentConfig(
            data=DataConfig(adjacency_path="g.npz", labels_path="l.json"),
            kernel=KernelConfig(
                alpha=0.8, walk_lengths=(1, 3), use_prior=True, pseudocount=0.5
            ),
            walk_length=3,
            tags=("cora", "sweep"),
        )
        restored = config_from_json(config_to_json(cfg))
        assert restored == cfg
        assert restored.kernel.walk_lengths == (1, 3)
        assert restored.tags == ("cora", "sweep")

    def test_integer_alpha_in_json(self):
        data = json.loads(config_to_json(DEFAULT_CONFIG))
        data["kernel"]["alpha"] = 1
        restored = config_from_json(json.dumps(data))
        assert restored.kernel.alpha == 1.0

    def test_strict_rejects_extra_keys(self):
        data = json.loads(config_to_json(DEFAULT_CONFIG))
        data["unknown_field"] = "sneaky"
        with pytest.raises(Exception):
            config_from_json(json.dumps(data))

    def test_invalid_alpha_in_json_rejected(self):
        data = json.loads(config_to_json(DEFAULT_CONFIG))
        data["kernel"]["alpha"] = 1.5
        with pytest.raises(InvalidConfiguration):
            config_from_json(json.dumps(data))


class TestHashing:
    """Kernel hash tracks kernel-affecting fields only."""

    def test_hash_is_hex_string(self):
        h = full_config_hash(DEFAULT_CONFIG)
        assert re.match(r"^[0-9a-f]{16}$", h)

    def test_kernel_hash_ignores_description_and_tags(self):
        cfg2 = replace(DEFAULT_CONFIG, description="rerun", tags=("x",))
        assert kernel_config_hash(DEFAULT_CONFIG) == kernel_config_hash(cfg2)
        assert full_config_hash(DEFAULT_CONFIG) != full_config_hash(cfg2)

    def test_kernel_hash_tracks_alpha(self):
        cfg2 = replace(DEFAULT_CONFIG, kernel=KernelConfig(alpha=0.5))
        assert kernel_config_hash(DEFAULT_CONFIG) != kernel_config_hash(cfg2)

    def test_kernel_hash_tracks_walk_length(self):
        cfg2 = replace(DEFAULT_CONFIG, walk_length=11)
        assert kernel_config_hash(DEFAULT_CONFIG) != kernel_config_hash(cfg2)

    def test_numpy_alpha_hashes_like_float(self):
        cfg_np = replace(DEFAULT_CONFIG, kernel=KernelConfig(alpha=np.float32(0.5)))
        cfg_py = replace(DEFAULT_CONFIG, kernel=KernelConfig(alpha=0.5))
        assert kernel_config_hash(cfg_np) == kernel_config_hash(cfg_py)
