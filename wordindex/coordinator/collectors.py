"""
Lock-guarded collections shared by the tasks of one pipeline run.
"""

import threading
from typing import Dict, Iterable, Iterator, List

from wordindex.common.errors import DuplicateWordError
from wordindex.worker.map_executor import MappedItem


class IntermediateCollection:
    """Append-only multiset of map output, read once after the map barrier"""

    def __init__(self):
        self._items: List[MappedItem] = []
        self._lock = threading.Lock()
        self._closed = False

    def extend(self, items: Iterable[MappedItem]):
        """Append all items of one map task in a single critical section"""
        items = list(items)
        with self._lock:
            if self._closed:
                raise RuntimeError("Intermediate collection is closed")
            self._items.extend(items)

    def close(self):
        """Reject further appends; called once the map pool has drained"""
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[MappedItem]:
        with self._lock:
            if not self._closed:
                raise RuntimeError("Intermediate collection must be closed before it is read")
            return iter(self._items)


class ResultCollection:
    """word -> {document_id: count}, one put per word"""

    def __init__(self):
        self._results: Dict[str, Dict[str, int]] = {}
        self._lock = threading.Lock()

    def put(self, entry):
        """
        Store one reduce result

        Args:
            entry: (word, counts) tuple as returned by ReduceExecutor.execute

        Raises:
            DuplicateWordError: If word already has a result
        """
        word, counts = entry
        with self._lock:
            if word in self._results:
                raise DuplicateWordError(word)
            self._results[word] = counts

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def __contains__(self, word) -> bool:
        with self._lock:
            return word in self._results

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Copy of the results with words and document ids in sorted order"""
        with self._lock:
            return {
                word: {doc: self._results[word][doc] for doc in sorted(self._results[word])}
                for word in sorted(self._results)
            }
