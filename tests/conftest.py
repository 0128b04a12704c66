"""
Pytest configuration and shared fixtures
"""

import pytest
import os
import tempfile
import shutil


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def sample_text():
    """Sample text for testing"""
    return """The quick brown fox jumps over the lazy dog.
The dog was really lazy.
The fox was very quick and brown.
Quick brown foxes are amazing animals.
Lazy dogs sleep all day."""


@pytest.fixture
def sample_documents(sample_text):
    """Small corpus with repeated, mixed-case and punctuated words"""
    return {
        'story.txt': sample_text,
        'numbers.txt': "42 apples, 7 oranges and 42 more apples!",
        'empty.txt': "",
        'repeat.txt': "dog dog DOG dog-dog",
    }


@pytest.fixture
def sample_input_files(temp_dir, sample_documents):
    """Write sample_documents to disk and return their paths"""
    paths = []
    for name, text in sample_documents.items():
        filepath = os.path.join(temp_dir, name)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(text)
        paths.append(filepath)
    return paths
