#!/usr/bin/env python3
"""
Generate plots from benchmark results.
"""

import json
import sys
from pathlib import Path
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
from collections import defaultdict

# Configuration
PLOTS_DIR = Path("benchmark_results/plots")


def load_results(json_file):
    """Load benchmark results from JSON file."""
    with open(json_file, 'r') as f:
        return json.load(f)


def aggregate_runs(results):
    """
    Aggregate multiple runs of the same benchmark.
    Returns dict: benchmark_name -> {avg_parallel, std_parallel, config, ...}
    """
    by_benchmark = defaultdict(list)

    for r in results:
        if r['success']:  # Only include successful runs
            by_benchmark[r['benchmark_name']].append(r)

    aggregated = {}
    for name, runs in by_benchmark.items():
        parallel = [r['parallel_seconds'] for r in runs]
        brute_force = [r['brute_force_seconds'] for r in runs]
        sequential = [r['sequential_seconds'] for r in runs]

        # Use first run for configuration data
        first = runs[0]

        aggregated[name] = {
            'benchmark_name': name,
            'description': first['description'],
            'num_map_workers': first['num_map_workers'],
            'num_reduce_workers': first['num_reduce_workers'],
            'input_size_mb': first['input_size_mb'],
            'avg_parallel': np.mean(parallel),
            'std_parallel': np.std(parallel),
            'avg_brute_force': np.mean(brute_force),
            'avg_sequential': np.mean(sequential),
            'speedup_vs_brute_force': np.mean(brute_force) / np.mean(parallel),
            'num_runs': len(runs)
        }

    return aggregated


def _plot_scaling(aggregated, prefix, key, xlabel, title, marker, color, output_file):
    data = [(v[key], v['avg_parallel'], v['std_parallel'])
            for k, v in aggregated.items()
            if k.startswith(prefix)]

    if not data:
        print(f"⚠️  No {prefix} data found")
        return

    data.sort()
    workers, runtimes, stds = zip(*data)

    plt.figure(figsize=(10, 6))
    plt.errorbar(workers, runtimes, yerr=stds, marker=marker, capsize=5,
                 linewidth=2, markersize=8, color=color)
    plt.xlabel(xlabel, fontsize=12)
    plt.ylabel('Runtime (seconds)', fontsize=12)
    plt.title(title, fontsize=14, fontweight='bold')
    plt.xticks(workers)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def plot_map_worker_scaling(aggregated, output_file):
    """Plot parallel runtime vs number of map workers."""
    _plot_scaling(aggregated, 'map_scaling_', 'num_map_workers', 'Map Workers',
                  'Parallel Index: Map Worker Scaling\n(2 reduce workers)',
                  's', 'orangered', output_file)


def plot_reduce_worker_scaling(aggregated, output_file):
    """Plot parallel runtime vs number of reduce workers."""
    _plot_scaling(aggregated, 'reduce_scaling_', 'num_reduce_workers', 'Reduce Workers',
                  'Parallel Index: Reduce Worker Scaling\n(4 map workers)',
                  '^', 'green', output_file)


def plot_approach_comparison(aggregated, output_file):
    """Plot the three approaches side by side for each configuration."""
    names = sorted(aggregated.keys())
    if not names:
        print("⚠️  No data for approach comparison")
        return

    x = np.arange(len(names))
    width = 0.27

    plt.figure(figsize=(14, 6))
    plt.bar(x - width, [aggregated[n]['avg_brute_force'] for n in names], width,
            label='Brute force', color='gray')
    plt.bar(x, [aggregated[n]['avg_sequential'] for n in names], width,
            label='Sequential map/reduce', color='steelblue')
    plt.bar(x + width, [aggregated[n]['avg_parallel'] for n in names], width,
            label='Parallel map/reduce', color='orangered')
    plt.xticks(x, names, rotation=45, ha='right')
    plt.ylabel('Runtime (seconds)', fontsize=12)
    plt.title('Approach Comparison', fontsize=14, fontweight='bold')
    plt.legend(fontsize=11)
    plt.grid(True, axis='y', alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def plot_speedup(aggregated, output_file):
    """Plot how many times faster the parallel index is than brute force."""
    names = sorted(aggregated.keys())
    if not names:
        print("⚠️  No data for speedup plot")
        return

    speedups = [aggregated[n]['speedup_vs_brute_force'] for n in names]
    x = np.arange(len(names))

    plt.figure(figsize=(14, 6))
    plt.bar(x, speedups, color='purple', alpha=0.8)
    plt.axhline(1.0, color='black', linestyle='--', linewidth=1, label='Brute force')
    plt.xticks(x, names, rotation=45, ha='right')
    plt.ylabel('Speedup (brute force / parallel)', fontsize=12)
    plt.title('Parallel Index Speedup vs Brute Force', fontsize=14, fontweight='bold')
    plt.legend(fontsize=11)
    plt.grid(True, axis='y', alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def plot_combined_heatmap(aggregated, output_file):
    """Plot heatmap of runtime for different (map, reduce) worker combinations."""
    data = [(v['num_map_workers'], v['num_reduce_workers'], v['avg_parallel'])
            for k, v in aggregated.items()
            if k.startswith('combined_')]

    if not data:
        print("⚠️  No combined scaling data found")
        return

    # Build matrix
    map_values = sorted(set(d[0] for d in data))
    reduce_values = sorted(set(d[1] for d in data))

    matrix = np.zeros((len(reduce_values), len(map_values)))
    for m, r, runtime in data:
        matrix[reduce_values.index(r), map_values.index(m)] = runtime

    plt.figure(figsize=(10, 8))
    im = plt.imshow(matrix, cmap='YlOrRd', aspect='auto')

    plt.xticks(range(len(map_values)), map_values)
    plt.yticks(range(len(reduce_values)), reduce_values)
    plt.xlabel('Map Workers', fontsize=12)
    plt.ylabel('Reduce Workers', fontsize=12)
    plt.title('Parallel Index Runtime Heatmap (seconds)', fontsize=14, fontweight='bold')

    cbar = plt.colorbar(im)
    cbar.set_label('Runtime (seconds)', fontsize=11)

    # Annotate cells with values
    for i in range(len(reduce_values)):
        for j in range(len(map_values)):
            if matrix[i, j] > 0:
                plt.text(j, i, f'{matrix[i, j]:.2f}',
                         ha="center", va="center", color="black", fontsize=10)

    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def generate_summary_table(aggregated, output_file):
    """Generate a markdown table summarizing all results."""
    lines = [
        "# Benchmark Results Summary\n",
        "| Benchmark | Maps | Reduces | Input (MB) | Brute (s) | Sequential (s) | Parallel (s) | Std Dev |",
        "|-----------|------|---------|------------|-----------|----------------|--------------|---------|"
    ]

    for name in sorted(aggregated.keys()):
        v = aggregated[name]
        lines.append(
            f"| {v['benchmark_name']:<20} | {v['num_map_workers']:>4} | "
            f"{v['num_reduce_workers']:>7} | {v['input_size_mb']:>10.2f} | "
            f"{v['avg_brute_force']:>9.3f} | {v['avg_sequential']:>14.3f} | "
            f"{v['avg_parallel']:>12.3f} | {v['std_parallel']:>7.3f} |"
        )

    with open(output_file, 'w') as f:
        f.write('\n'.join(lines))

    print(f"✓ Saved: {output_file}")


def main():
    """Generate all plots from benchmark results."""
    if len(sys.argv) < 2:
        print("Usage: python plot_results.py <results.json>")
        print("\nExample:")
        print("  python plot_results.py benchmark_results/benchmark_results_20250113_120000.json")
        sys.exit(1)

    json_file = sys.argv[1]

    if not Path(json_file).exists():
        print(f"❌ File not found: {json_file}")
        sys.exit(1)

    print(f"Loading results from: {json_file}")
    results = load_results(json_file)
    print(f"✓ Loaded {len(results)} benchmark results")

    aggregated = aggregate_runs(results)
    print(f"✓ Aggregated into {len(aggregated)} unique benchmarks")

    PLOTS_DIR.mkdir(parents=True, exist_ok=True)

    print("\nGenerating plots...")
    plot_map_worker_scaling(aggregated, PLOTS_DIR / "1_map_worker_scaling.png")
    plot_reduce_worker_scaling(aggregated, PLOTS_DIR / "2_reduce_worker_scaling.png")
    plot_approach_comparison(aggregated, PLOTS_DIR / "3_approach_comparison.png")
    plot_combined_heatmap(aggregated, PLOTS_DIR / "4_combined_heatmap.png")
    plot_speedup(aggregated, PLOTS_DIR / "5_speedup_vs_brute_force.png")

    generate_summary_table(aggregated, PLOTS_DIR / "results_table.md")

    print(f"\n{'='*70}")
    print(f"All plots saved to: {PLOTS_DIR}/")
    print(f"{'='*70}")


if __name__ == "__main__":
    main()
