"""
Inverted word-frequency index built with a parallel map, group and reduce pipeline.
"""

from wordindex.common.errors import (
    WordIndexError,
    ConfigurationError,
    MapTaskError,
    ReduceTaskError,
    DuplicateWordError,
    PipelineInterrupted,
    PipelineError,
)
from wordindex.common.tokenizer import tokenize
from wordindex.coordinator.job_manager import JobManager, PipelineObserver, run_pipeline

__all__ = [
    'WordIndexError',
    'ConfigurationError',
    'MapTaskError',
    'ReduceTaskError',
    'DuplicateWordError',
    'PipelineInterrupted',
    'PipelineError',
    'tokenize',
    'JobManager',
    'PipelineObserver',
    'run_pipeline',
]
