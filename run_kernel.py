#!/usr/bin/env python3
"""Entry point for computing coinciding walk kernels from files.

Chains all pipeline stages into a single executable command:
graph loading -> label loading -> kernel computation (or cache load) ->
validation -> result writing -> visualization.

Usage:
    python run_kernel.py --config config.json
    python run_kernel.py --config config.json --dry-run
    python run_kernel.py --config config.json --verbose --no-cache
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from cwk.config import config_from_json, full_config_hash, kernel_config_hash
from cwk.results import generate_experiment_id

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.1f}s")
    log.info("Completed: %s in %.1fs", name, elapsed)


def run_pipeline(
    config_path: Path,
    results_dir: str = "results",
    use_cache: bool = True,
    render: bool = True,
) -> Path:
    """Execute the full kernel pipeline.

    Args:
        config_path: Path to run config JSON file.
        results_dir: Base directory for results output.
        use_cache: Load kernels from the cache when available.
        render: Write heatmap figures.

    Returns:
        Path to the output directory.
    """
    # Lazy imports to keep --dry-run fast
    from cwk.graph import build_graph, load_adjacency, load_labels
    from cwk.kernel import compute_cwk, compute_or_load_kernels, min_eigenvalue, validate_kernels
    from cwk.reproducibility import get_git_hash
    from cwk.results import write_result

    pipeline_start = time.monotonic()

    config = config_from_json(config_path.read_text())
    log.info("Config loaded from %s", config_path)
    log.info("Git hash: %s", get_git_hash())

    # ── Stage 1: Graph ─────────────────────────────────────────────
    with stage_timer("Graph Loading"):
        graph = build_graph(load_adjacency(config.data.adjacency_path))
        log.info(
            "Graph: n=%d, edges=%d, isolated=%d",
            graph.num_nodes, graph.adjacency.nnz, len(graph.isolated),
        )

    # ── Stage 2: Labels ────────────────────────────────────────────
    with stage_timer("Label Loading"):
        labels, test_indices = load_labels(config.data.labels_path)

    # ── Stage 3: Kernels ───────────────────────────────────────────
    def compute():
        return compute_cwk(
            graph,
            labels.train_indices,
            labels.observed_labels,
            test_indices,
            labels.num_classes,
            config.walk_length,
            config.kernel,
        )

    with stage_timer("Kernel Computation"):
        if use_cache:
            output = compute_or_load_kernels(config, compute)
        else:
            output = compute()
        log.info(
            "Kernels: K_train %s, K_test %s at walk lengths %s",
            output.K_train.shape, output.K_test.shape, output.walk_lengths,
        )

    # ── Stage 4: Validation ────────────────────────────────────────
    with stage_timer("Kernel Validation"):
        errors = validate_kernels(output)
        for err in errors:
            log.warning("Kernel check failed: %s", err)

    scalars = {
        "num_nodes": graph.num_nodes,
        "num_train": labels.num_train,
        "num_test": int(len(test_indices)),
        "num_classes": labels.num_classes,
        "validation_errors": errors,
        "min_eigenvalue": {
            str(length): min_eigenvalue(output.K_train[:, :, idx])
            for idx, length in enumerate(output.walk_lengths)
        },
    }

    # ── Stage 5: Results ───────────────────────────────────────────
    with stage_timer("Write Results"):
        experiment_id = write_result(
            config, output, scalars=scalars, results_dir=results_dir
        )
        output_dir = Path(results_dir) / experiment_id
        log.info("Results written to %s", output_dir)

    # ── Stage 6: Visualization ─────────────────────────────────────
    figures: list[Path] = []
    if render:
        from cwk.visualization import render_all

        with stage_timer("Visualization"):
            figures = render_all(output_dir, labels=labels.observed_labels)

    total_elapsed = time.monotonic() - pipeline_start
    print(f"\n{'=' * 60}")
    print(f"Pipeline complete in {total_elapsed:.1f}s")
    print(f"  Experiment: {output_dir.name}")
    print(f"  Output:     {output_dir}")
    print(f"  Result:     {output_dir / 'result.json'}")
    print(f"  Kernels:    {output_dir / 'kernels.npz'}")
    print(f"  Figures:    {len(figures)} files")
    print(f"  Checks:     {'PASSED' if not errors else f'{len(errors)} FAILED'}")
    print(f"{'=' * 60}")

    return output_dir


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Compute coinciding walk kernels for a labeled graph"
    )
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to run config JSON file",
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        default="results",
        help="Base directory for result output (default: results)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Always recompute kernels instead of loading cached ones",
    )
    parser.add_argument(
        "--no-figures",
        action="store_true",
        help="Skip heatmap rendering",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show pipeline plan without computing anything",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = config_from_json(config_path.read_text())
    except Exception:
        log.exception("Invalid config file: %s", config_path)
        sys.exit(1)

    experiment_id = generate_experiment_id(config)
    print(f"Experiment ID: {experiment_id}")
    print(f"Config hash:   {full_config_hash(config)}")
    print(f"Kernel hash:   {kernel_config_hash(config)}")
    print()
    print(f"Data:     adjacency={config.data.adjacency_path}, "
          f"labels={config.data.labels_path}")
    print(f"Kernel:   alpha={config.kernel.alpha}, use_prior={config.kernel.use_prior}, "
          f"pseudocount={config.kernel.pseudocount}")
    print(f"Walks:    walk_length={config.walk_length}, "
          f"walk_lengths={list(config.walk_lengths)}")

    if args.dry_run:
        print(f"\nPipeline plan for experiment {experiment_id}:")
        print(f"  1. Load graph: {config.data.adjacency_path}")
        print(f"  2. Load labels: {config.data.labels_path}")
        print(f"  3. Propagate {config.walk_length} steps, assemble kernels "
              f"at {list(config.walk_lengths)}"
              f"{'' if not args.no_cache else ' (cache disabled)'}")
        print(f"  4. Validate kernels (symmetry, PSD, finiteness)")
        print(f"  5. Write result.json + kernels.npz")
        if not args.no_figures:
            print(f"  6. Render heatmaps to figures/")
        print(f"\nOutput: {args.results_dir}/{experiment_id}/")
        print(f"\n[dry-run] Config loaded successfully. Exiting.")
        return

    try:
        run_pipeline(
            config_path,
            results_dir=args.results_dir,
            use_cache=not args.no_cache,
            render=not args.no_figures,
        )
    except Exception:
        log.exception("Pipeline failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
