#!/usr/bin/env python3
"""
Automated benchmarking script for the word index pipeline.
Runs the three approaches over a corpus for several worker pool
configurations and collects performance metrics.
"""

import csv
import json
import time
import argparse
from datetime import datetime
from pathlib import Path

from scripts.generate_benchmark_inputs import DEFAULT_OUTPUT_DIR, generate_corpus
from wordindex.client.client import load_documents
from wordindex.common.errors import PipelineError
from wordindex.coordinator.job_manager import run_pipeline
from wordindex.coordinator.metrics import MetricsCollector
from wordindex.coordinator.sequential import brute_force_index, sequential_index

# Configuration
RESULTS_DIR = Path("benchmark_results")

# Benchmark configurations
BENCHMARKS = [
    # Experiment 1: Map worker scaling (fixed reduce pool)
    {"name": "map_scaling_1", "maps": 1, "reduces": 2, "description": "1 map worker"},
    {"name": "map_scaling_2", "maps": 2, "reduces": 2, "description": "2 map workers"},
    {"name": "map_scaling_4", "maps": 4, "reduces": 2, "description": "4 map workers"},
    {"name": "map_scaling_8", "maps": 8, "reduces": 2, "description": "8 map workers"},

    # Experiment 2: Reduce worker scaling (fixed map pool)
    {"name": "reduce_scaling_1", "maps": 4, "reduces": 1, "description": "1 reduce worker"},
    {"name": "reduce_scaling_2", "maps": 4, "reduces": 2, "description": "2 reduce workers"},
    {"name": "reduce_scaling_4", "maps": 4, "reduces": 4, "description": "4 reduce workers"},
    {"name": "reduce_scaling_8", "maps": 4, "reduces": 8, "description": "8 reduce workers"},

    # Experiment 3: Combined scaling
    {"name": "combined_1_1", "maps": 1, "reduces": 1, "description": "Combined: 1 map, 1 reduce"},
    {"name": "combined_2_2", "maps": 2, "reduces": 2, "description": "Combined: 2 maps, 2 reduces"},
    {"name": "combined_4_2", "maps": 4, "reduces": 2, "description": "Combined: 4 maps, 2 reduces"},
    {"name": "combined_8_4", "maps": 8, "reduces": 4, "description": "Combined: 8 maps, 4 reduces"},
]


def timed(fn, *args, **kwargs):
    """Call fn and return (result, elapsed seconds)."""
    start_time = time.perf_counter()
    result = fn(*args, **kwargs)
    return result, time.perf_counter() - start_time


def run_benchmark(config, documents, input_size, run_number=1):
    """Run a single benchmark configuration."""
    print(f"\n{'='*70}")
    print(f"Benchmark: {config['name']} (Run {run_number})")
    print(f"Description: {config['description']}")
    print(f"Config: {config['maps']} map workers, {config['reduces']} reduce workers")
    print(f"{'='*70}")

    brute_force, brute_force_seconds = timed(brute_force_index, documents)
    sequential, sequential_seconds = timed(sequential_index, documents)

    metrics = MetricsCollector()
    try:
        parallel, parallel_seconds = timed(run_pipeline, documents, config["maps"], config["reduces"],
                                           observers=[metrics])
        success = parallel == brute_force == sequential
    except PipelineError as e:
        print(f"  ❌ Pipeline failed: {e}")
        parallel_seconds = 0.0
        success = False

    job_metrics = next(iter(metrics.job_metrics.values()))
    print(f"  Brute force: {brute_force_seconds:.3f}s")
    print(f"  Sequential:  {sequential_seconds:.3f}s")
    print(f"  Parallel:    {parallel_seconds:.3f}s {'✓' if success else '✗'}")

    return {
        "benchmark_name": config["name"],
        "description": config["description"],
        "run_number": run_number,
        "timestamp": datetime.now().isoformat(),
        "num_documents": len(documents),
        "input_size_bytes": input_size,
        "input_size_mb": round(input_size / 1024 / 1024, 2),
        "num_map_workers": config["maps"],
        "num_reduce_workers": config["reduces"],
        "success": success,
        "brute_force_seconds": round(brute_force_seconds, 4),
        "sequential_seconds": round(sequential_seconds, 4),
        "parallel_seconds": round(parallel_seconds, 4),
        "map_phase_seconds": round(job_metrics.map_phase_time_seconds, 4),
        "group_phase_seconds": round(job_metrics.group_phase_time_seconds, 4),
        "reduce_phase_seconds": round(job_metrics.reduce_phase_time_seconds, 4),
        "peak_rss_mb": round(job_metrics.peak_rss_bytes / 1024 / 1024, 1),
    }


def save_results(results, timestamp):
    """Save results to JSON and CSV files."""
    RESULTS_DIR.mkdir(exist_ok=True)

    # JSON format
    json_file = RESULTS_DIR / f"benchmark_results_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(results, f, indent=2)
    print(f"\n✓ Results saved to: {json_file}")

    # CSV format
    csv_file = RESULTS_DIR / f"benchmark_results_{timestamp}.csv"
    if results:
        fieldnames = list(results[0].keys())
        with open(csv_file, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(results)
        print(f"✓ Results saved to: {csv_file}")

    return json_file, csv_file


def print_summary(results):
    """Print a summary table of results."""
    print(f"\n{'='*70}")
    print("BENCHMARK SUMMARY")
    print(f"{'='*70}")
    print(f"{'Benchmark':<20} {'Maps':>5} {'Reduces':>7} {'Brute':>9} {'Seq':>9} {'Parallel':>9} {'OK':>4}")
    print(f"{'-'*70}")

    for r in results:
        print(f"{r['benchmark_name']:<20} {r['num_map_workers']:>5} "
              f"{r['num_reduce_workers']:>7} {r['brute_force_seconds']:>8.3f}s "
              f"{r['sequential_seconds']:>8.3f}s {r['parallel_seconds']:>8.3f}s "
              f"{'✓' if r['success'] else '✗':>4}")

    print(f"{'='*70}")

    successful = sum(1 for r in results if r['success'])
    print(f"Total: {len(results)} benchmarks, {successful} successful, "
          f"{len(results) - successful} failed")


def main():
    """Main benchmarking workflow."""
    parser = argparse.ArgumentParser(description="Benchmark the word index approaches")
    parser.add_argument("--corpus-dir", type=Path, default=DEFAULT_OUTPUT_DIR,
                        help=f"Directory of .txt documents (default: {DEFAULT_OUTPUT_DIR})")
    parser.add_argument("--runs", type=int, default=1, choices=range(1, 6),
                        help="Runs per benchmark, 1-5 (default: 1)")
    args = parser.parse_args()

    print("="*70)
    print("Word Index Performance Benchmark Suite")
    print("="*70)

    if not args.corpus_dir.exists():
        print(f"Corpus not found, generating one in {args.corpus_dir}")
        generate_corpus(args.corpus_dir, num_files=200, file_size=64 * 1024)

    paths = sorted(str(p) for p in args.corpus_dir.glob("*.txt"))
    documents = load_documents(paths)
    input_size = sum(len(text.encode('utf-8')) for text in documents.values())
    print(f"✓ Loaded {len(documents)} documents ({input_size / 1024 / 1024:.2f} MB)")

    print(f"\nRunning {len(BENCHMARKS)} benchmarks × {args.runs} runs = "
          f"{len(BENCHMARKS) * args.runs} total jobs")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    all_results = []

    for config in BENCHMARKS:
        for run in range(1, args.runs + 1):
            all_results.append(run_benchmark(config, documents, input_size, run_number=run))

    json_file, csv_file = save_results(all_results, timestamp)
    print_summary(all_results)

    print(f"\n{'='*70}")
    print("Next steps:")
    print(f"  1. Review results: cat {json_file}")
    print(f"  2. Generate plots: python plot_results.py {json_file}")
    print(f"{'='*70}")


if __name__ == "__main__":
    main()
