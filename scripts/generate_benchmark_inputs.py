#!/usr/bin/env python3
"""
Generate a synthetic benchmark corpus: a directory of text files made of
random words mixed with numbers and punctuation.
"""

import random
import argparse
from pathlib import Path

# Configuration
DEFAULT_OUTPUT_DIR = Path("benchmark_data/corpus")
DEFAULT_NUM_FILES = 200
DEFAULT_FILE_SIZE = 64 * 1024  # ~64KB per file

VOCABULARY = (
    "the quick brown fox jumps over lazy dog map reduce group word index "
    "document thread pool worker barrier phase count token letter river "
    "mountain window garden silver orange planet signal winter summer "
    "The Quick River Mountain Garden Planet"
).split()
SEPARATORS = [" ", " ", " ", ", ", ". ", "\n", " - ", "; ", " 42 ", "! ", "? "]


def generate_text(rng: random.Random, target_size: int) -> str:
    """
    Build text of roughly target_size characters.

    Args:
        rng: Random source, seeded by the caller for reproducible corpora
        target_size: Approximate length in characters
    """
    parts = []
    size = 0
    while size < target_size:
        word = rng.choice(VOCABULARY)
        separator = rng.choice(SEPARATORS)
        parts.append(word)
        parts.append(separator)
        size += len(word) + len(separator)
    return "".join(parts)


def generate_corpus(output_dir: Path, num_files: int, file_size: int, seed: int = 598) -> int:
    """
    Write num_files documents into output_dir.

    Returns:
        Total bytes written
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    rng = random.Random(seed)

    total_size = 0
    for i in range(num_files):
        path = output_dir / f"doc_{i:05d}.txt"
        path.write_text(generate_text(rng, file_size), encoding="utf-8")
        total_size += path.stat().st_size
    return total_size


def main():
    """Generate the benchmark corpus."""
    parser = argparse.ArgumentParser(description="Generate a benchmark corpus")
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR,
                        help=f"Directory for generated files (default: {DEFAULT_OUTPUT_DIR})")
    parser.add_argument("--num-files", type=int, default=DEFAULT_NUM_FILES,
                        help=f"Number of documents (default: {DEFAULT_NUM_FILES})")
    parser.add_argument("--file-size", type=int, default=DEFAULT_FILE_SIZE,
                        help=f"Approximate bytes per document (default: {DEFAULT_FILE_SIZE})")
    parser.add_argument("--seed", type=int, default=598, help="Random seed")
    args = parser.parse_args()

    print("=" * 70)
    print("Generating Benchmark Corpus")
    print("=" * 70)

    total_size = generate_corpus(args.output_dir, args.num_files, args.file_size, args.seed)

    print(f"✓ Created {args.num_files} files in {args.output_dir}")
    print(f"  Total size: {total_size / (1024*1024):.2f} MB")
    return 0


if __name__ == "__main__":
    exit(main())
