"""
Tokenizer for document text.

A word is a maximal run of ASCII letters. Everything else separates words and
never produces a token of its own. Case is preserved.
"""

import re
from typing import List

WORD_PATTERN = re.compile(r'[a-zA-Z]+')


def tokenize(text: str) -> List[str]:
    """
    Split text into words in left-to-right order.

    Args:
        text: Document content

    Returns:
        List of words, empty for empty or letter-free text

    Raises:
        TypeError: If text is not a string
    """
    if not isinstance(text, str):
        raise TypeError(f"Document text must be str, got {type(text).__name__}")
    return WORD_PATTERN.findall(text)
