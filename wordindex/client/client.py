"""
Command line client for building word indexes from text files.
"""

import sys
import json
import time
import logging
import argparse
from typing import Dict, List, Optional

from wordindex.client.monitoring import ConsoleReporter
from wordindex.common.config import PipelineConfig
from wordindex.common.errors import ConfigurationError, PipelineError
from wordindex.coordinator.job_manager import run_pipeline
from wordindex.coordinator.metrics import MetricsCollector
from wordindex.coordinator.sequential import brute_force_index, sequential_index

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """argparse type for worker pool sizes"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"number of workers must be positive, got {number}")
    return number


def positive_float(value: str) -> float:
    """argparse type for the drain timeout"""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number of seconds, got {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"timeout must be positive, got {number}")
    return number


def load_documents(paths: List[str]) -> Dict[str, str]:
    """
    Read each file as UTF-8 text, keyed by its path.

    Files that cannot be read are logged and skipped.
    """
    documents = {}
    for path in paths:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                documents[path] = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading file: {path}: {e}")
            print(f"Error reading file: {path}\n{e}", file=sys.stderr)
    return documents


def build_index(args) -> int:
    """Run the parallel pipeline and print or save the index."""
    documents = load_documents(args.files)

    observers = []
    metrics = MetricsCollector()
    observers.append(metrics)
    if args.verbose:
        observers.append(ConsoleReporter(stream=sys.stderr, show_intermediate=args.show_intermediate))

    try:
        result = run_pipeline(documents, args.map_workers, args.reduce_workers,
                              observers=observers, drain_timeout=args.drain_timeout)
    except PipelineError as e:
        print(f"Error building index: {e}", file=sys.stderr)
        return 1

    output = json.dumps(result, indent=2)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output + '\n')
        print(f"Index of {len(result)} words written to {args.output}", file=sys.stderr)
    else:
        print(output)

    if args.metrics_file:
        job_metrics = next(iter(metrics.job_metrics.values()))
        job_metrics.save_to_file(args.metrics_file)
    return 0


def compare_approaches(args) -> int:
    """Run brute force, sequential and parallel approaches and report timings."""
    documents = load_documents(args.files)

    approaches = [
        ("Approach #1: Brute Force", brute_force_index),
        ("Approach #2: MapReduce", sequential_index),
        ("Approach #3: Distributed MapReduce",
         lambda docs: run_pipeline(docs, args.map_workers, args.reduce_workers,
                                   drain_timeout=args.drain_timeout)),
    ]

    results = []
    for label, approach in approaches:
        start_time = time.perf_counter()
        try:
            result = approach(documents)
        except PipelineError as e:
            print(f"{label} failed: {e}", file=sys.stderr)
            return 1
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        print(f"{label} took {elapsed_ms:.0f} milliseconds.")
        if args.show_output:
            print(json.dumps(result))
        results.append(result)

    agree = all(result == results[0] for result in results[1:])
    print(f"Outputs agree: {'yes' if agree else 'no'}")
    return 0 if agree else 1


def build_parser(defaults: PipelineConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inverted word-frequency index builder")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")

    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--map-workers", "-m", type=positive_int, default=defaults.map_workers,
                        help=f"Map worker pool size (default: {defaults.map_workers})")
    common.add_argument("--reduce-workers", "-r", type=positive_int, default=defaults.reduce_workers,
                        help=f"Reduce worker pool size (default: {defaults.reduce_workers})")
    common.add_argument("--drain-timeout", type=positive_float, default=defaults.drain_timeout,
                        help="Seconds to wait for each phase before giving up (default: no limit)")
    common.add_argument("files", nargs="+", help="Text files to index")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    index_parser = subparsers.add_parser("index", parents=[common], help="Build the index in parallel")
    index_parser.add_argument("--output", "-o", help="Write the index as JSON to this file")
    index_parser.add_argument("--metrics-file", help="Write job metrics as JSON to this file")
    index_parser.add_argument("--verbose", "-v", action="store_true",
                              help="Report phase progress on stderr")
    index_parser.add_argument("--show-intermediate", action="store_true",
                              help="With --verbose, also print map and group output")

    compare_parser = subparsers.add_parser("compare", parents=[common],
                                           help="Time all three approaches on the same files")
    compare_parser.add_argument("--show-output", action="store_true",
                                help="Print the index produced by each approach")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    try:
        defaults = PipelineConfig.from_env()
    except ConfigurationError as e:
        print(f"Invalid environment configuration: {e}", file=sys.stderr)
        return 2

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command == "index":
        return build_index(args)
    elif args.command == "compare":
        return compare_approaches(args)
    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
