import random

import pytest

from mostlikely.services.games.errors import InvalidInput, PolicyBlocked
from mostlikely.services.games.questions import (
    LATE_NIGHT_QUESTIONS,
    MODE_ADULT,
    MODE_STANDARD,
    RISK_SAFE,
    STANDARD_QUESTIONS,
    TONE_DROY,
    TONE_MILD,
    TONE_SPICY,
    bias_for_group_size,
    default_late_night_questions,
    filter_questions,
    select_round_questions,
)
from mostlikely.services.games.rules import GROUP_LARGE, GROUP_MEDIUM, GROUP_SMALL, group_size


def test_tones_are_cumulative():
    mild = filter_questions(STANDARD_QUESTIONS, TONE_MILD, False)
    spicy = filter_questions(STANDARD_QUESTIONS, TONE_SPICY, False)
    droy = filter_questions(STANDARD_QUESTIONS, TONE_DROY, False)
    assert {q.tone for q in mild} == {TONE_MILD}
    assert {q.tone for q in spicy} == {TONE_MILD, TONE_SPICY}
    assert len(droy) == len(STANDARD_QUESTIONS)
    assert set(mild) <= set(spicy) <= set(droy)


def test_couples_safe_keeps_only_safe_questions():
    pool = filter_questions(STANDARD_QUESTIONS, TONE_DROY, True)
    assert pool
    assert all(q.risk == RISK_SAFE for q in pool)


def test_unknown_tone_is_rejected():
    with pytest.raises(InvalidInput):
        filter_questions(STANDARD_QUESTIONS, 'nuclear', False)


def test_round_has_exactly_twenty_distinct_texts():
    texts = select_round_questions(MODE_STANDARD, TONE_SPICY, False, GROUP_MEDIUM, random.Random(1))
    assert len(texts) == 20
    assert len(set(texts)) == 20


def test_too_small_pool_is_policy_blocked():
    # The mild tier alone holds fewer than 20 questions.
    with pytest.raises(PolicyBlocked) as excinfo:
        select_round_questions(MODE_STANDARD, TONE_MILD, False, GROUP_SMALL, random.Random(1))
    assert excinfo.value.code == 'insufficient_questions'


def test_adult_mode_samples_default_pack_only():
    defaults = {q.text for q in default_late_night_questions()}
    assert len(defaults) >= 20
    assert len(defaults) < len(LATE_NIGHT_QUESTIONS)
    texts = select_round_questions(MODE_ADULT, TONE_MILD, True, GROUP_SMALL, random.Random(2))
    assert len(texts) == 20
    assert set(texts) <= defaults


def _mean_rank(ordered, tone):
    ranks = [i for i, q in enumerate(ordered) if q.tone == tone]
    return sum(ranks) / len(ranks)


def test_large_groups_lean_toward_harder_tones():
    rng = random.Random(5)
    large, small = [], []
    for _ in range(50):
        large.append(_mean_rank(bias_for_group_size(STANDARD_QUESTIONS, GROUP_LARGE, rng), TONE_DROY))
        small.append(_mean_rank(bias_for_group_size(STANDARD_QUESTIONS, GROUP_SMALL, rng), TONE_DROY))
    assert sum(large) / len(large) < sum(small) / len(small)


def test_bias_is_not_deterministic():
    orders = {
        tuple(q.text for q in bias_for_group_size(STANDARD_QUESTIONS, GROUP_LARGE, random.Random(seed)))
        for seed in range(5)
    }
    assert len(orders) > 1


def test_group_size_buckets():
    assert group_size(3) == GROUP_SMALL
    assert group_size(6) == GROUP_SMALL
    assert group_size(7) == GROUP_MEDIUM
    assert group_size(9) == GROUP_MEDIUM
    assert group_size(10) == GROUP_LARGE
    assert group_size(12) == GROUP_LARGE
