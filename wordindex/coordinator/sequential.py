"""
Single-threaded reference implementations of the word index.

Used as the correctness oracle for the parallel pipeline and as the timing
baseline of the compare command and the benchmark.
"""

from typing import Dict, List, Mapping

from wordindex.common.tokenizer import tokenize
from wordindex.coordinator.job_manager import group_items
from wordindex.worker.map_executor import MapExecutor, MappedItem
from wordindex.worker.reduce_executor import ReduceExecutor


def _sorted_index(index: Dict[str, Dict[str, int]]) -> Dict[str, Dict[str, int]]:
    return {word: dict(sorted(index[word].items())) for word in sorted(index)}


def brute_force_index(documents: Mapping[str, str]) -> Dict[str, Dict[str, int]]:
    """Count every word of every document in one nested pass"""
    index: Dict[str, Dict[str, int]] = {}
    for document_id, text in documents.items():
        for word in tokenize(text):
            counts = index.setdefault(word, {})
            counts[document_id] = counts.get(document_id, 0) + 1
    return _sorted_index(index)


def sequential_index(documents: Mapping[str, str]) -> Dict[str, Dict[str, int]]:
    """Map, group and reduce on the calling thread"""
    mapped: List[MappedItem] = []
    for document_id, text in documents.items():
        mapped.extend(MapExecutor(document_id, text).execute())

    index = {}
    for word, document_ids in group_items(mapped).items():
        word, counts = ReduceExecutor(word, document_ids).execute()
        index[word] = counts
    return _sorted_index(index)
