"""
Tests for the command line client.
"""

import os
import json
from unittest.mock import patch

import pytest

from wordindex.client.client import load_documents, main


class TestLoadDocuments:
    """Tests for reading input files"""

    def test_reads_files_keyed_by_path(self, sample_input_files, sample_documents):
        documents = load_documents(sample_input_files)

        assert list(documents) == sample_input_files
        for path in sample_input_files:
            assert documents[path] == sample_documents[os.path.basename(path)]

    def test_skips_unreadable_files(self, sample_input_files, temp_dir, capsys):
        missing = os.path.join(temp_dir, 'missing.txt')
        documents = load_documents([missing] + sample_input_files)

        assert missing not in documents
        assert len(documents) == len(sample_input_files)
        assert "Error reading file" in capsys.readouterr().err

    def test_skips_non_utf8_files(self, temp_dir):
        binary = os.path.join(temp_dir, 'binary.txt')
        with open(binary, 'wb') as f:
            f.write(b'\xff\xfe\xfa')
        assert load_documents([binary]) == {}


class TestIndexCommand:
    """Tests for `wordindex index`"""

    def test_prints_index_as_json(self, temp_dir, capsys):
        f1 = os.path.join(temp_dir, 'f1.txt')
        f2 = os.path.join(temp_dir, 'f2.txt')
        with open(f1, 'w') as f:
            f.write("the cat sat")
        with open(f2, 'w') as f:
            f.write("the dog")

        exit_code = main(['index', '-m', '2', '-r', '2', f1, f2])

        assert exit_code == 0
        result = json.loads(capsys.readouterr().out)
        assert result == {
            "cat": {f1: 1},
            "dog": {f2: 1},
            "sat": {f1: 1},
            "the": {f1: 1, f2: 1},
        }

    def test_writes_output_and_metrics_files(self, sample_input_files, temp_dir):
        output = os.path.join(temp_dir, 'index.json')
        metrics = os.path.join(temp_dir, 'metrics.json')

        exit_code = main(['index', '--output', output, '--metrics-file', metrics] + sample_input_files)

        assert exit_code == 0
        with open(output) as f:
            index = json.load(f)
        with open(metrics) as f:
            job_metrics = json.load(f)
        assert index["dog"]
        assert job_metrics['succeeded'] is True
        assert job_metrics['num_words'] == len(index)

    def test_verbose_reports_phases_on_stderr(self, sample_input_files, capsys):
        assert main(['index', '--verbose'] + sample_input_files) == 0

        captured = capsys.readouterr()
        assert "Map phase:" in captured.err
        assert "Reduce phase:" in captured.err
        json.loads(captured.out)

    @pytest.mark.parametrize("workers", ["0", "-2", "two"])
    def test_invalid_worker_count_is_a_usage_error(self, workers, sample_input_files):
        with pytest.raises(SystemExit) as exc_info:
            main(['index', '--map-workers', workers] + sample_input_files)
        assert exc_info.value.code == 2

    def test_pipeline_failure_exits_with_one(self, sample_input_files, capsys):
        with patch('wordindex.worker.map_executor.tokenize', side_effect=ValueError("broken")):
            assert main(['index'] + sample_input_files) == 1
        assert "Error building index" in capsys.readouterr().err

    @patch.dict(os.environ, {'WORDINDEX_MAP_WORKERS': 'lots'})
    def test_invalid_environment_exits_with_two(self, sample_input_files):
        assert main(['index'] + sample_input_files) == 2

    def test_missing_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestCompareCommand:
    """Tests for `wordindex compare`"""

    def test_reports_timings_and_agreement(self, sample_input_files, capsys):
        exit_code = main(['compare', '-m', '3', '-r', '2'] + sample_input_files)

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Approach #1: Brute Force took" in out
        assert "Approach #2: MapReduce took" in out
        assert "Approach #3: Distributed MapReduce took" in out
        assert "Outputs agree: yes" in out

    def test_show_output_prints_each_index(self, sample_input_files, capsys):
        main(['compare', '--show-output'] + sample_input_files)

        lines = capsys.readouterr().out.splitlines()
        indexes = [json.loads(line) for line in lines if line.startswith('{')]
        assert len(indexes) == 3
        assert indexes[0] == indexes[1] == indexes[2]
