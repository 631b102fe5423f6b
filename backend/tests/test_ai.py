import random

import pytest

from kniffel.game import ai, scoring
from kniffel.game.models import Difficulty


ALL_DIFFICULTIES = list(Difficulty)


@pytest.mark.parametrize("difficulty", [Difficulty.MEDIUM, Difficulty.HARD])
def test_greedy_keeps_largest_group(difficulty):
    assert ai.choose_keep_mask([3, 5, 3, 2, 3], difficulty) == [True, False, True, False, True]


def test_greedy_keeps_pair():
    assert ai.choose_keep_mask([1, 4, 6, 4, 2], Difficulty.MEDIUM) == [False, True, False, True, False]


def test_greedy_rerolls_everything_without_pair():
    assert ai.choose_keep_mask([1, 2, 3, 4, 6], Difficulty.HARD) == [False] * 5


def test_greedy_tie_keeps_first_seen_group():
    assert ai.choose_keep_mask([2, 5, 5, 2, 1], Difficulty.MEDIUM) == [True, False, False, True, False]


def test_easy_mask_is_random_and_sparse():
    rng = random.Random(7)
    masks = [ai.choose_keep_mask([1, 2, 3, 4, 5], Difficulty.EASY, rng) for _ in range(400)]
    kept = sum(sum(m) for m in masks) / (400 * 5)
    assert all(len(m) == 5 for m in masks)
    assert 0.2 < kept < 0.4


@pytest.mark.parametrize("difficulty", ALL_DIFFICULTIES)
def test_single_open_category_is_chosen(difficulty):
    scores = {c: 0 for c in scoring.CATEGORIES if c != "twos"}
    for seed in range(20):
        assert ai.choose_category([6, 6, 6, 6, 6], scores, difficulty, random.Random(seed)) == "twos"


@pytest.mark.parametrize("difficulty", ALL_DIFFICULTIES)
def test_full_card_defaults_to_chance(difficulty):
    scores = {c: 0 for c in scoring.CATEGORIES}
    assert ai.choose_category([1, 2, 3, 4, 5], scores, difficulty) == "chance"


def test_greedy_picks_highest_scoring_category():
    assert ai.choose_category([6, 6, 6, 6, 6], {}, Difficulty.MEDIUM) == "kniffel"
    assert ai.choose_category([1, 2, 3, 4, 5], {}, Difficulty.HARD) == "large-straight"
    assert ai.choose_category([6, 6, 6, 6, 6], {"kniffel": 50}, Difficulty.MEDIUM) == "sixes"


def test_greedy_ties_go_to_enumeration_order():
    # sixes, three-of-a-kind, four-of-a-kind and chance all pay 30
    scores = {"kniffel": 50}
    assert ai.choose_category([6, 6, 6, 6, 6], scores, Difficulty.HARD) == "sixes"
    # every open category pays 0, so the first open one wins
    assert ai.choose_category([1, 1, 3, 4, 6], {"chance": 15, "ones": 2, "threes": 3, "fours": 4, "sixes": 6}, Difficulty.MEDIUM) == "twos"


def test_easy_picks_only_open_categories():
    scores = {c: 0 for c in scoring.CATEGORIES[:10]}
    rng = random.Random(3)
    picks = {ai.choose_category([1, 2, 3, 4, 5], scores, Difficulty.EASY, rng) for _ in range(100)}
    assert picks == set(scoring.CATEGORIES[10:])


def test_think_delay_per_difficulty():
    delays = {Difficulty.EASY: 0.1, Difficulty.MEDIUM: 0.2, Difficulty.HARD: 0.3}
    assert ai.think_delay(Difficulty.HARD, delays) == 0.3
    assert ai.think_delay(None, delays) == 0.2
    assert ai.think_delay(Difficulty.EASY) < ai.think_delay(Difficulty.HARD)
