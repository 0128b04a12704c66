"""
Tests for benchmark result aggregation and plotting.
"""

import os

import pytest

import plot_results


def benchmark_run(name, brute_force, parallel, success=True):
    return {
        'benchmark_name': name,
        'description': f"{name} configuration",
        'num_map_workers': 4,
        'num_reduce_workers': 2,
        'input_size_mb': 1.5,
        'brute_force_seconds': brute_force,
        'sequential_seconds': brute_force * 0.8,
        'parallel_seconds': parallel,
        'success': success,
    }


class TestAggregateRuns:
    """Averaging repeated runs"""

    def test_speedup_vs_brute_force(self):
        aggregated = plot_results.aggregate_runs([
            benchmark_run('combined_4m_2r', 4.0, 1.0),
            benchmark_run('combined_4m_2r', 2.0, 1.0),
        ])

        entry = aggregated['combined_4m_2r']
        assert entry['num_runs'] == 2
        assert entry['avg_brute_force'] == pytest.approx(3.0)
        assert entry['speedup_vs_brute_force'] == pytest.approx(3.0)

    def test_failed_runs_are_ignored(self):
        aggregated = plot_results.aggregate_runs([
            benchmark_run('map_scaling_1', 2.0, 1.0),
            benchmark_run('map_scaling_1', 9.0, 0.1, success=False),
        ])

        assert aggregated['map_scaling_1']['num_runs'] == 1
        assert aggregated['map_scaling_1']['speedup_vs_brute_force'] == pytest.approx(2.0)


class TestPlots:
    """Plot files are written from aggregated results"""

    def test_speedup_plot_is_saved(self, temp_dir):
        aggregated = plot_results.aggregate_runs([
            benchmark_run('map_scaling_1', 2.0, 1.0),
            benchmark_run('map_scaling_4', 2.0, 0.5),
        ])
        output = os.path.join(temp_dir, 'speedup.png')

        plot_results.plot_speedup(aggregated, output)

        assert os.path.getsize(output) > 0

    def test_speedup_plot_without_data(self, temp_dir, capsys):
        output = os.path.join(temp_dir, 'speedup.png')

        plot_results.plot_speedup({}, output)

        assert not os.path.exists(output)
        assert "No data" in capsys.readouterr().out
