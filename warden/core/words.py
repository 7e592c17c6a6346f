"""
Word list loading.

The word list is a JSON array of words. Entries are normalized to uppercase;
anything that is not a five-letter A-Z word is dropped.
"""

import json
import random
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from warden.utils.logger import get_logger

logger = get_logger(__name__)


FALLBACK_WORDS: Tuple[str, ...] = ("REACT", "TAURI", "ERROR", "FILES", "DEBUG")


class WordListError(Exception):
    """Word list loading errors."""

    pass


def normalize_words(raw: Iterable, word_length: int = 5) -> Tuple[str, ...]:
    """
    Normalize raw entries to uppercase words of the expected length.

    Args:
        raw: Iterable of entries (non-strings are skipped)
        word_length: Required word length

    Returns:
        Tuple of uppercase words in original order
    """
    words = []
    skipped = 0

    for entry in raw:
        if not isinstance(entry, str):
            skipped += 1
            continue

        word = entry.strip().upper()
        if len(word) == word_length and word.isascii() and word.isalpha():
            words.append(word)
        else:
            skipped += 1

    if skipped:
        logger.debug(f"Skipped {skipped} malformed word list entries")

    return tuple(words)


def read_word_list(path: Path, word_length: int = 5) -> Tuple[str, ...]:
    """
    Read and normalize a JSON word list.

    Raises:
        WordListError: If the file is missing, unreadable, not a JSON array,
            or contains no usable words
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise WordListError(f"Could not load {path}: {e}") from e

    if not isinstance(data, list):
        raise WordListError(f"Word list must be a JSON array, got {type(data).__name__}")

    words = normalize_words(data, word_length)
    if not words:
        raise WordListError(f"No usable {word_length}-letter words in {path}")

    return words


def load_word_list(
    path: Optional[Path],
    fallback: Sequence[str] = FALLBACK_WORDS,
    word_length: int = 5,
) -> Tuple[str, ...]:
    """
    Load the word list, falling back to the embedded list on any failure.

    Args:
        path: Path to the JSON word list (None uses the fallback)
        fallback: Words used when loading fails
        word_length: Required word length

    Returns:
        Non-empty tuple of uppercase words
    """
    if path is not None:
        try:
            words = read_word_list(path, word_length)
            logger.info(f"Loaded {len(words)} words from {path}")
            return words
        except WordListError as e:
            logger.warning(f"{e}; using fallback word list")

    return tuple(word.upper() for word in fallback)


def pick_solution(words: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """
    Draw a solution uniformly at random.

    Raises:
        ValueError: If the word list is empty
    """
    if not words:
        raise ValueError("Cannot pick a solution from an empty word list")

    return (rng or random).choice(words)
