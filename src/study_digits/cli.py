"""
Command line front end.

Run from repo root:
  study-digits knn --training-set training_set.csv --test-set test_set.csv -k 1 3 5
  study-digits knn --condense --metric manhattan -k 1
  study-digits condense --training-set training_set.csv --output condensed.csv
  study-digits kmeans --training-set training_set.csv -k 5 7 9 --iterations 50
  study-digits render --input test_set.csv --index 0 --output digit.png

Paths and sample sizes default to the values in ``study_digits.config``.
``--quick`` keeps only the head of each dataset and shrinks the
Goodman-Kruskal sample for fast smoke runs.
"""

from __future__ import annotations

import argparse
import sys
from functools import partial
from typing import Dict, Optional, Sequence

from .algorithms.classification import SampleCallback
from .algorithms.condensing import condense
from .algorithms.distance import METRICS
from .algorithms.quality import QualityConfig
from .algorithms.sweep import (
    ClusterSweepConfig,
    KnnConfig,
    run_cluster_sweep,
    run_knn_evaluation,
)
from .config import REDUCED_TIME_SAMPLE_LIMIT, REDUCED_TIME_TRAINING_LIMIT, config
from .errors import StudyDigitsError
from .models import LabeledVector
from .utils.dataset_loader import load_labeled_vectors, write_labeled_vectors
from .utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"


def _color(text: str, color: str, stream=None) -> str:
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return text
    return f"{color}{text}{RESET}"


def progress_printer(primary_k: int, stream=None) -> SampleCallback:
    """Per-sample observer printing a green dot (correct) or red F (wrong)."""
    stream = stream or sys.stdout

    def on_sample(sample: LabeledVector, votes: Dict[int, int]) -> None:
        if votes[primary_k] == sample.label:
            stream.write(_color(".", GREEN, stream))
        else:
            stream.write(_color("F", RED, stream))
        stream.flush()

    return on_sample


def pass_printer(stream=None):
    """Per-pass observer for condensing runs."""
    stream = stream or sys.stdout

    def on_pass(pass_number: int, moved: int, condensed_size: int, remaining_size: int) -> None:
        stream.write(
            f"pass {pass_number}: moved {moved}, "
            f"condensed {condensed_size}, remaining {remaining_size}\n"
        )
        stream.flush()

    return on_pass


def _cmd_knn(args: argparse.Namespace) -> int:
    training_limit = REDUCED_TIME_TRAINING_LIMIT if args.quick else None
    sample_limit = REDUCED_TIME_SAMPLE_LIMIT if args.quick else None
    training_set = load_labeled_vectors(args.training_set, limit=training_limit)
    samples = load_labeled_vectors(args.test_set, limit=sample_limit)

    cfg = KnnConfig(k_values=tuple(args.k), metric=args.metric, condense=args.condense)
    result = run_knn_evaluation(
        training_set,
        samples,
        cfg,
        sink=partial(write_labeled_vectors, args.condensed_output) if args.condense else None,
        on_pass=pass_printer() if args.condense else None,
        on_sample=None if args.no_progress else progress_printer(cfg.k_values[0]),
    )
    if not args.no_progress:
        print()
    print(_color(result.format(), GREEN))
    return 0


def _cmd_condense(args: argparse.Namespace) -> int:
    training_limit = REDUCED_TIME_TRAINING_LIMIT if args.quick else None
    training_set = load_labeled_vectors(args.training_set, limit=training_limit)
    result = condense(
        training_set,
        metric=args.metric,
        on_pass=pass_printer(),
        sink=partial(write_labeled_vectors, args.output),
    )
    print(_color(
        f"Condensed {len(training_set)} -> {len(result.condensed)} vectors "
        f"in {result.passes} passes; wrote {args.output}",
        GREEN,
    ))
    return 0


def _cmd_kmeans(args: argparse.Namespace) -> int:
    training_limit = REDUCED_TIME_TRAINING_LIMIT if args.quick else None
    training_set = load_labeled_vectors(args.training_set, limit=training_limit)

    cfg = ClusterSweepConfig(
        ks=tuple(args.k),
        iterations=args.iterations,
        base_seed=args.seed if args.seed is not None else 0,
        compute_c_index=not args.no_c_index,
        compute_goodman_kruskal=not args.no_goodman_kruskal,
        quality=QualityConfig(
            c_index_samples=args.c_index_samples,
            goodman_kruskal_samples=args.gk_samples,
            reduced_time=args.quick,
        ),
    )

    def on_result(K, result):
        if result["c_index"] is not None:
            print(_color(f"C-Index k={K}: {result['c_index']}", GREEN))
        if result["goodman_kruskal"] is not None:
            print(_color(f"Goodman-Kruskal-Index k={K}: {result['goodman_kruskal']}", GREEN))

    run_cluster_sweep(training_set, cfg, on_result=on_result)
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    from .utils.visualization import render_vector

    if args.index < 0:
        raise ValueError(f"--index must be >= 0, got {args.index}")
    records = load_labeled_vectors(args.input, limit=args.index + 1)
    if args.index >= len(records):
        raise ValueError(f"{args.input} has only {len(records)} records")
    item = records[args.index]
    render_vector(item, args.output)
    print(f"Rendered record {args.index} (label {item.label}) to {args.output}")
    return 0


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="study-digits",
        description="KNN classification and k-means clustering of digit vectors",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--training-set", default=config.data.training_set, help="Training records")
        p.add_argument(
            "--quick",
            action="store_true",
            help=f"Reduced-time mode: first {REDUCED_TIME_TRAINING_LIMIT} training records",
        )

    knn = sub.add_parser("knn", help="Classify a test set with k nearest neighbors")
    add_common(knn)
    knn.add_argument("--test-set", default=config.data.test_set, help="Records to classify")
    knn.add_argument("-k", type=_positive_int, nargs="+", default=[1], help="Neighbor counts")
    knn.add_argument("--metric", choices=METRICS, default="euclidean", help="Distance metric")
    knn.add_argument("--condense", action="store_true", help="Condense the training set first")
    knn.add_argument(
        "--condensed-output",
        default=config.data.condensed_output,
        help="Where to write the condensed training set",
    )
    knn.add_argument("--no-progress", action="store_true", help="Do not print per-sample dots")
    knn.set_defaults(func=_cmd_knn)

    cnn = sub.add_parser("condense", help="Condense a training set and write it out")
    add_common(cnn)
    cnn.add_argument("--metric", choices=METRICS, default="euclidean", help="Distance metric")
    cnn.add_argument("--output", default=config.data.condensed_output, help="Output file")
    cnn.set_defaults(func=_cmd_condense)

    km = sub.add_parser("kmeans", help="Cluster a training set for several K values")
    add_common(km)
    km.add_argument(
        "-k", type=_positive_int, nargs="+", default=[5, 7, 9, 10, 12, 15], help="Cluster counts"
    )
    km.add_argument("--iterations", type=_positive_int, default=50, help="Assignment passes")
    km.add_argument("--seed", type=int, default=config.seed, help="Base random seed")
    km.add_argument(
        "--c-index-samples",
        type=_positive_int,
        default=config.quality.c_index_samples,
        help="Points sampled for the C-index",
    )
    km.add_argument(
        "--gk-samples",
        type=_positive_int,
        default=config.quality.goodman_kruskal_samples,
        help="Points sampled for the Goodman-Kruskal index",
    )
    km.add_argument("--no-c-index", action="store_true", help="Skip the C-index")
    km.add_argument("--no-goodman-kruskal", action="store_true", help="Skip Goodman-Kruskal")
    km.set_defaults(func=_cmd_kmeans)

    render = sub.add_parser("render", help="Render one record as a 28x28 PNG")
    render.add_argument("--input", default=config.data.test_set, help="Record file")
    render.add_argument("--index", type=int, default=0, help="0-based record index")
    render.add_argument("--output", default="digit.png", help="PNG path")
    render.set_defaults(func=_cmd_render)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except (StudyDigitsError, OSError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
