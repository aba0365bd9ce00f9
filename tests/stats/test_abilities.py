"""
Tests for ability scores and challenge ratings.
"""

import pytest
from skirmish.core.error_handling import (
    InvalidAbilityScoreError,
    InvalidChallengeRatingError,
)
from skirmish.stats import AbilityScore, ChallengeRating


@pytest.mark.parametrize(
    "score, modifier",
    [(1, -5), (2, -4), (3, -4), (8, -1), (9, -1), (10, 0), (11, 0), (12, 1), (15, 2), (20, 5), (29, 9), (30, 10)],
)
def test_modifier_table(score, modifier):
    """Test the score to modifier rule."""
    assert AbilityScore(score).modifier() == modifier


@pytest.mark.parametrize("score", [0, 31, -1, True, 10.5])
def test_invalid_scores(score):
    """Test that scores outside 1 to 30 are rejected."""
    with pytest.raises(InvalidAbilityScoreError):
        AbilityScore(score)


def test_score_formatting():
    """Test the textual form of a score."""
    assert str(AbilityScore(15)) == "15 (+2)"
    assert str(AbilityScore(8)) == "8 (-1)"
    assert str(AbilityScore(10)) == "10 (±0)"
    assert AbilityScore(12) == AbilityScore(12)


@pytest.mark.parametrize("value", ["1/4", 0.25, "0.25"])
def test_parse_fractional_rating(value):
    """Test reading a fractional challenge rating in its usual forms."""
    cr = ChallengeRating.parse(value)
    assert str(cr) == "1/4"
    assert cr.xp() == 50
    assert repr(cr) == "CR(1/4)"


@pytest.mark.parametrize(
    "value, bonus",
    [(0, 2), ("1/8", 2), (4, 2), (5, 3), (8, 3), (9, 4), (13, 5), (17, 6), (21, 7), (25, 8), (29, 9), (30, 9)],
)
def test_proficiency_bonus(value, bonus):
    """Test the proficiency bonus read from the rating table."""
    assert ChallengeRating.parse(value).proficiency_bonus() == bonus


def test_experience_values():
    """Test the experience points read from the rating table."""
    assert ChallengeRating.parse(0).xp() is None
    assert ChallengeRating.parse("1/2").xp() == 100
    assert ChallengeRating.parse(1).xp() == 200
    assert ChallengeRating.parse("5").xp() == 1800
    assert ChallengeRating.parse(30).xp() == 155000


def test_ratings_are_ordered():
    """Test that ratings compare by difficulty."""
    assert ChallengeRating.parse("1/2") < ChallengeRating.parse(1)
    assert ChallengeRating.parse(20) > ChallengeRating.parse(19)
    ratings = ChallengeRating.all()
    assert len(ratings) == 34
    assert ratings == sorted(ratings)


@pytest.mark.parametrize("value", ["1/3", 31, -1, "abc", "", True])
def test_invalid_ratings(value):
    """Test that ratings outside the table are rejected."""
    with pytest.raises(InvalidChallengeRatingError):
        ChallengeRating.parse(value)
