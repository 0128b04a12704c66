"""
Map Task Executor
Tokenizes one document and emits a (word, document_id) item per occurrence
"""

import time
import logging
from dataclasses import dataclass
from typing import List

from wordindex.common.errors import MapTaskError
from wordindex.common.tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappedItem:
    """One occurrence of a word in a document"""
    word: str
    document_id: str


class MapExecutor:
    """Executes a single map task"""

    def __init__(self, document_id: str, text: str):
        """
        Initialize the map executor

        Args:
            document_id: Identifier of the document, copied into every item
            text: Document content
        """
        self.document_id = document_id
        self.text = text

    def execute(self) -> List[MappedItem]:
        """
        Execute the map task

        Returns:
            One MappedItem per token, in document order

        Raises:
            MapTaskError: If the document cannot be tokenized
        """
        start_time = time.time()

        try:
            items = [MappedItem(word, self.document_id) for word in tokenize(self.text)]
        except Exception as e:
            logger.error(f"Map task for {self.document_id!r} failed: {e}")
            raise MapTaskError(
                self.document_id,
                f"Map task failed for document {self.document_id!r}: {e}") from e

        execution_time = int((time.time() - start_time) * 1000)
        logger.debug(f"Map task {self.document_id!r}: emitted {len(items)} items in {execution_time}ms")
        return items
