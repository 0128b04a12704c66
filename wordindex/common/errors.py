"""
Exception hierarchy for the word index pipeline.

Every failure inside a run is fatal: task errors and interrupted drains are
wrapped in a PipelineError by the orchestrator and re-raised to the caller.
"""


class WordIndexError(Exception):
    """Base class for all word index errors"""


class ConfigurationError(WordIndexError):
    """Invalid worker pool size or other configuration value"""


class MapTaskError(WordIndexError):
    """A map task could not tokenize or emit the items of one document"""

    def __init__(self, document_id: str, message: str = ''):
        self.document_id = document_id
        super().__init__(message or f"Map task failed for document {document_id!r}")


class ReduceTaskError(WordIndexError):
    """A reduce task could not count or store the occurrences of one word"""

    def __init__(self, word: str, message: str = ''):
        self.word = word
        super().__init__(message or f"Reduce task failed for word {word!r}")


class DuplicateWordError(ReduceTaskError):
    """A second reduce result arrived for a word that already has one"""

    def __init__(self, word: str):
        super().__init__(word, f"Word {word!r} was reduced more than once")


class PipelineInterrupted(WordIndexError):
    """A drain was cancelled from outside or ran past its deadline"""


class PipelineError(WordIndexError):
    """Fatal failure of a pipeline run"""

    def __init__(self, message: str, cause: BaseException = None):
        self.cause = cause
        super().__init__(message)
