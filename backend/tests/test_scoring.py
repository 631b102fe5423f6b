import pytest

from kniffel.game import scoring


@pytest.mark.parametrize(
    "dice,category,expected",
    [
        ([6, 6, 6, 6, 6], "kniffel", 50),
        ([1, 2, 3, 4, 5], "large-straight", 40),
        ([2, 2, 3, 3, 3], "full-house", 25),
        ([1, 1, 1, 2, 3], "chance", 8),
        ([1, 1, 3, 1, 5], "ones", 3),
        ([2, 2, 2, 4, 5], "twos", 6),
        ([6, 6, 1, 2, 3], "sixes", 12),
        ([4, 4, 4, 1, 2], "fives", 0),
        ([3, 3, 3, 4, 5], "three-of-a-kind", 18),
        ([3, 3, 2, 4, 5], "three-of-a-kind", 0),
        ([5, 5, 5, 5, 2], "four-of-a-kind", 22),
        ([5, 5, 5, 2, 2], "four-of-a-kind", 0),
        ([6, 6, 6, 6, 6], "four-of-a-kind", 30),
        ([1, 2, 3, 4, 6], "small-straight", 30),
        ([3, 4, 5, 6, 6], "small-straight", 30),
        ([2, 3, 4, 5, 2], "small-straight", 30),
        ([1, 2, 3, 5, 6], "small-straight", 0),
        ([2, 3, 4, 5, 6], "large-straight", 40),
        ([1, 2, 3, 4, 6], "large-straight", 0),
        ([4, 4, 4, 4, 4], "full-house", 0),
        ([2, 2, 2, 2, 3], "full-house", 0),
        ([1, 2, 3, 4, 4], "kniffel", 0),
    ],
)
def test_score(dice, category, expected):
    assert scoring.score(dice, category) == expected


def test_score_is_pure():
    dice = [2, 3, 4, 5, 6]
    for category in scoring.CATEGORIES:
        assert scoring.score(dice, category) == scoring.score(dice, category)
    assert dice == [2, 3, 4, 5, 6]


def test_unknown_category_scores_zero():
    assert scoring.score([1, 2, 3, 4, 5], "yahtzee") == 0


def test_thirteen_categories_upper_first():
    assert len(scoring.CATEGORIES) == 13
    assert scoring.CATEGORIES[:6] == scoring.UPPER_CATEGORIES


def test_upper_bonus_at_threshold():
    scores = {"ones": 3, "twos": 6, "threes": 9, "fours": 12, "fives": 15, "sixes": 18}
    assert scoring.upper_sum(scores) == 63
    assert scoring.upper_bonus(scores) == 35
    assert scoring.total_score(scores) == 98


def test_upper_bonus_below_threshold():
    scores = {"ones": 2, "twos": 6, "threes": 9, "fours": 12, "fives": 15, "sixes": 18}
    assert scoring.upper_sum(scores) == 62
    assert scoring.upper_bonus(scores) == 0
    assert scoring.total_score(scores) == 62


def test_partial_upper_section_can_reach_bonus():
    assert scoring.upper_bonus({"fives": 25, "sixes": 30, "fours": 8}) == 35
    assert scoring.upper_bonus({"sixes": 30}) == 0


def test_total_includes_lower_section():
    scores = {"kniffel": 50, "chance": 20, "ones": 2}
    assert scoring.total_score(scores) == 72


def test_open_categories_and_completion():
    scores = {c: 0 for c in scoring.CATEGORIES[:-1]}
    assert scoring.open_categories(scores) == ["chance"]
    assert not scoring.is_complete(scores)
    scores["chance"] = 5
    assert scoring.is_complete(scores)
    assert scoring.open_categories(scores) == []
