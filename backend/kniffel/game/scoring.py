from __future__ import annotations

from collections import Counter
from typing import Mapping, Sequence


UPPER_CATEGORIES: tuple[str, ...] = ("ones", "twos", "threes", "fours", "fives", "sixes")
LOWER_CATEGORIES: tuple[str, ...] = (
    "three-of-a-kind",
    "four-of-a-kind",
    "full-house",
    "small-straight",
    "large-straight",
    "kniffel",
    "chance",
)
CATEGORIES: tuple[str, ...] = UPPER_CATEGORIES + LOWER_CATEGORIES

UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS = 35

_FACE_BY_CATEGORY = {name: face for face, name in enumerate(UPPER_CATEGORIES, start=1)}
_SMALL_STRAIGHTS = ({1, 2, 3, 4}, {2, 3, 4, 5}, {3, 4, 5, 6})
_LARGE_STRAIGHTS = ([1, 2, 3, 4, 5], [2, 3, 4, 5, 6])


def score(dice: Sequence[int], category: str) -> int:
    """Points the five ``dice`` are worth in ``category``.

    Unknown categories score 0; callers that need to reject them check
    membership in ``CATEGORIES`` first.
    """
    total = sum(dice)
    counts = Counter(dice)
    groups = sorted(counts.values())

    face = _FACE_BY_CATEGORY.get(category)
    if face is not None:
        return counts[face] * face

    if category == "three-of-a-kind":
        return total if groups[-1] >= 3 else 0
    if category == "four-of-a-kind":
        return total if groups[-1] >= 4 else 0
    if category == "full-house":
        return 25 if groups == [2, 3] else 0
    if category == "small-straight":
        distinct = set(dice)
        return 30 if any(run <= distinct for run in _SMALL_STRAIGHTS) else 0
    if category == "large-straight":
        return 40 if sorted(set(dice)) in _LARGE_STRAIGHTS else 0
    if category == "kniffel":
        return 50 if groups[-1] == 5 else 0
    if category == "chance":
        return total
    return 0


def upper_sum(scores: Mapping[str, int]) -> int:
    return sum(scores.get(c, 0) for c in UPPER_CATEGORIES)


def upper_bonus(scores: Mapping[str, int]) -> int:
    # Partial sums below the threshold yield 0, so this is safe mid-game.
    return UPPER_BONUS if upper_sum(scores) >= UPPER_BONUS_THRESHOLD else 0


def total_score(scores: Mapping[str, int]) -> int:
    return sum(scores.get(c, 0) for c in CATEGORIES) + upper_bonus(scores)


def is_complete(scores: Mapping[str, int]) -> bool:
    return all(c in scores for c in CATEGORIES)


def open_categories(scores: Mapping[str, int]) -> list[str]:
    return [c for c in CATEGORIES if c not in scores]
