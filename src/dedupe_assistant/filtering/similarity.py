"""Similarity levels for perceptual-hash distances."""

import re
from collections import Counter
from collections.abc import Sequence
from enum import StrEnum

from ..core.models import SUPPORTED_HASH_SIZES, Entry

DEFAULT_HASH_SIZE = 16

_DIGITS_PATTERN = re.compile(r"\d+")

# Upper distance bound per level: VeryHigh, High, Medium, Small, VerySmall, Minimal
SIMILAR_VALUES: dict[int, tuple[int, ...]] = {
    8: (1, 2, 5, 7, 14, 40),
    16: (2, 5, 15, 30, 40, 40),
    32: (4, 10, 20, 40, 40, 40),
    64: (6, 20, 40, 40, 40, 40),
}


class SimilarityLevel(StrEnum):
    ORIGINAL = "Original"
    VERY_HIGH = "VeryHigh"
    HIGH = "High"
    MEDIUM = "Medium"
    SMALL = "Small"
    VERY_SMALL = "VerySmall"
    MINIMAL = "Minimal"


_GRADED_LEVELS = (
    SimilarityLevel.VERY_HIGH,
    SimilarityLevel.HIGH,
    SimilarityLevel.MEDIUM,
    SimilarityLevel.SMALL,
    SimilarityLevel.VERY_SMALL,
    SimilarityLevel.MINIMAL,
)

LEVEL_TEXT = {
    SimilarityLevel.ORIGINAL: "Original",
    SimilarityLevel.VERY_HIGH: "Very High",
    SimilarityLevel.HIGH: "High",
    SimilarityLevel.MEDIUM: "Medium",
    SimilarityLevel.SMALL: "Small",
    SimilarityLevel.VERY_SMALL: "Very Small",
    SimilarityLevel.MINIMAL: "Minimal",
}


def _thresholds(hash_size: int) -> tuple[int, ...]:
    if hash_size not in SUPPORTED_HASH_SIZES:
        hash_size = DEFAULT_HASH_SIZE
    return SIMILAR_VALUES[hash_size]


def get_similarity_level(similarity: int, hash_size: int = DEFAULT_HASH_SIZE) -> SimilarityLevel:
    """
    Classify a hash distance.

    Args:
        similarity: Hamming distance between hashes; 0 means identical
        hash_size: Hash size in bits; unknown sizes use the 16-bit table

    Returns:
        The closest level; distances beyond the table are Minimal
    """
    if similarity == 0:
        return SimilarityLevel.ORIGINAL

    for level, bound in zip(_GRADED_LEVELS, _thresholds(hash_size)):
        if similarity <= bound:
            return level
    return SimilarityLevel.MINIMAL


def get_similarity_level_text(level: SimilarityLevel) -> str:
    return LEVEL_TEXT[level]


def get_similarity_range(level: SimilarityLevel, hash_size: int = DEFAULT_HASH_SIZE) -> str:
    """Distance range of a level, e.g. '<= 5'."""
    if level == SimilarityLevel.ORIGINAL:
        return "= 0"
    bound = _thresholds(hash_size)[_GRADED_LEVELS.index(level)]
    return f"<= {bound}"


def similarity_distribution(
    data: Sequence[Entry], hash_size: int = DEFAULT_HASH_SIZE
) -> dict[SimilarityLevel, int]:
    """
    Count entries per level.

    Reference entries and entries without a similarity value are skipped; an empty
    similarity string means the file is identical to its reference.
    """
    counts: Counter[SimilarityLevel] = Counter()
    for entry in data:
        if entry.is_ref or entry.similarity is None:
            continue
        if entry.similarity == "":
            distance = 0
        else:
            match = _DIGITS_PATTERN.search(entry.similarity)
            if not match:
                continue
            distance = int(match.group())
        counts[get_similarity_level(distance, hash_size)] += 1
    return {level: counts.get(level, 0) for level in SimilarityLevel}
