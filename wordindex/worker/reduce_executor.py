"""
Reduce Task Executor
Counts how often each document appears in one word's document list
"""

import time
import logging
from typing import Dict, Sequence, Tuple

from wordindex.common.errors import ReduceTaskError

logger = logging.getLogger(__name__)


class ReduceExecutor:
    """Executes a single reduce task"""

    def __init__(self, word: str, document_ids: Sequence[str]):
        """
        Initialize the reduce executor

        Args:
            word: The word this task owns
            document_ids: One entry per occurrence of word, duplicates kept
        """
        self.word = word
        self.document_ids = document_ids

    def execute(self) -> Tuple[str, Dict[str, int]]:
        """
        Execute the reduce task

        Returns:
            (word, {document_id: occurrences})

        Raises:
            ReduceTaskError: If the document list cannot be counted
        """
        start_time = time.time()

        try:
            counts: Dict[str, int] = {}
            for document_id in self.document_ids:
                counts[document_id] = counts.get(document_id, 0) + 1
        except Exception as e:
            logger.error(f"Reduce task for {self.word!r} failed: {e}")
            raise ReduceTaskError(
                self.word, f"Reduce task failed for word {self.word!r}: {e}") from e

        execution_time = int((time.time() - start_time) * 1000)
        logger.debug(f"Reduce task {self.word!r}: {len(counts)} documents in {execution_time}ms")
        return self.word, counts
