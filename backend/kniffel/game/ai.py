"""Decision policy for automated players.

Easy bots play close to randomly. Medium and hard bots share a greedy
policy: hold the biggest group of matching faces, then take whichever
open category pays the most. The two differ only in how long they
"think" before acting.
"""
from __future__ import annotations

import random
from collections import Counter
from typing import Mapping, Sequence

from . import scoring
from .models import Difficulty


EASY_KEEP_PROBABILITY = 0.3

DEFAULT_DELAYS = {
    Difficulty.EASY: 0.8,
    Difficulty.MEDIUM: 1.2,
    Difficulty.HARD: 1.6,
}


def choose_keep_mask(dice: Sequence[int], difficulty: Difficulty, rng=None) -> list[bool]:
    rng = rng or random
    if difficulty is Difficulty.EASY:
        return [rng.random() < EASY_KEEP_PROBABILITY for _ in dice]

    counts = Counter(dice)
    # most_common keeps first-seen order among equal counts
    face, size = counts.most_common(1)[0]
    if size < 2:
        return [False] * len(dice)
    return [d == face for d in dice]


def choose_category(
    dice: Sequence[int],
    scores: Mapping[str, int],
    difficulty: Difficulty,
    rng=None,
) -> str:
    rng = rng or random
    available = scoring.open_categories(scores)
    if not available:
        return "chance"

    if difficulty is Difficulty.EASY:
        return rng.choice(available)

    best = available[0]
    best_points = scoring.score(dice, best)
    for category in available[1:]:
        points = scoring.score(dice, category)
        if points > best_points:
            best, best_points = category, points
    return best


def think_delay(difficulty: Difficulty | None, delays: Mapping[Difficulty, float] | None = None) -> float:
    delays = delays or DEFAULT_DELAYS
    return float(delays.get(difficulty or Difficulty.MEDIUM, 0.0))
