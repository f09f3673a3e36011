import random

from mostlikely.models import Player
from mostlikely.services.games.reveal import (
    REROLL_COOLDOWN,
    REROLL_OVER_TARGETED,
    RoundTallies,
    compute_reveal,
    tally_votes,
)
from mostlikely.services.games.rules import GROUP_LARGE, GROUP_SMALL, GameRules


RULES = GameRules()


def roster(*names):
    return [Player(name=n, avatar_id='party') for n in names]


def votes_for(*targets):
    return {f't{i}': target for i, target in enumerate(targets)}


def test_tally_zero_fills_and_drops_unknown_names():
    counts = tally_votes(votes_for('Ann', 'Ann', 'Ghost'), ['Ann', 'Bob'])
    assert counts == {'Ann': 2, 'Bob': 0}


def test_unique_max_always_wins():
    players = roster('Ann', 'Bob', 'Cia')
    for seed in range(25):
        tallies = RoundTallies.for_roster(['Ann', 'Bob', 'Cia'])
        tallies.last_winner_name = 'Ann'
        result = compute_reveal(votes_for('Ann', 'Ann', 'Bob'), players, tallies, RULES,
                                random.Random(seed), 0, GROUP_SMALL)
        assert result.winner == 'Ann'
        assert result.reroll_info is None
        assert result.percentage == 67


def test_tie_break_is_randomized():
    players = roster('Ann', 'Bob', 'Cia')
    winners = set()
    for seed in range(40):
        result = compute_reveal(votes_for('Ann', 'Bob'), players, RoundTallies(), RULES,
                                random.Random(seed), 0, GROUP_SMALL)
        winners.add(result.winner)
    assert winners == {'Ann', 'Bob'}


def test_cooldown_reroll_moves_tie_away_from_last_winner():
    players = roster('Ann', 'Bob', 'Cia')
    rerolled = False
    for seed in range(40):
        tallies = RoundTallies.for_roster(['Ann', 'Bob', 'Cia'])
        first = compute_reveal(votes_for('Ann', 'Ann', 'Bob'), players, tallies, RULES,
                               random.Random(seed), 0, GROUP_SMALL)
        assert first.winner == 'Ann'
        # Second question: Ann and Bob tie, Ann won last time.
        second = compute_reveal(votes_for('Ann', 'Bob'), players, tallies, RULES,
                                random.Random(seed), 1, GROUP_SMALL)
        assert second.winner == 'Bob'
        if second.reroll_info is not None:
            assert second.reroll_info.reason == REROLL_COOLDOWN
            assert second.reroll_info.original_winner == 'Ann'
            assert second.reroll_info.final_winner == 'Bob'
            rerolled = True
    assert rerolled


def test_over_targeted_reroll_picks_runner_up():
    players = roster('Ann', 'Bob', 'Cia')
    tallies = RoundTallies.for_roster(['Ann', 'Bob', 'Cia'])
    tallies.recent_targets['Ann'] = 2
    tallies.last_winner_name = 'Cia'
    result = compute_reveal(votes_for('Ann', 'Ann', 'Bob'), players, tallies, RULES,
                            random.Random(3), 0, GROUP_SMALL)
    assert result.winner == 'Bob'
    assert result.reroll_info.reason == REROLL_OVER_TARGETED
    assert result.reroll_info.original_winner == 'Ann'
    assert tallies.wins_by_name['Bob'] == 1
    assert tallies.wins_by_name['Ann'] == 0


def test_cooldown_reroll_suppresses_over_targeted_reroll():
    players = roster('Ann', 'Bob', 'Cia')
    cooled = 0
    for seed in range(40):
        tallies = RoundTallies.for_roster(['Ann', 'Bob', 'Cia'])
        tallies.last_winner_name = 'Ann'
        tallies.recent_targets['Bob'] = 2
        result = compute_reveal(votes_for('Ann', 'Ann', 'Bob', 'Bob', 'Cia'), players, tallies, RULES,
                                random.Random(seed), 0, GROUP_SMALL)
        if result.reroll_info.reason == REROLL_COOLDOWN:
            # Bob is over-targeted, but only one reroll happens per question.
            assert result.winner == 'Bob'
            assert result.reroll_info.original_winner == 'Ann'
            assert result.reroll_info.final_winner == 'Bob'
            cooled += 1
        else:
            # The tie landed on Bob directly, so the over-targeted rule moves it to Cia.
            assert result.reroll_info.reason == REROLL_OVER_TARGETED
            assert result.winner == 'Cia'
    assert cooled


def test_over_targeted_reroll_needs_enough_questions_left():
    players = roster('Ann', 'Bob', 'Cia')
    tallies = RoundTallies.for_roster(['Ann', 'Bob', 'Cia'])
    tallies.recent_targets['Ann'] = 2
    # index 16 of 20 leaves 3 questions, below the threshold of 4
    result = compute_reveal(votes_for('Ann', 'Ann', 'Bob'), players, tallies, RULES,
                            random.Random(3), 16, GROUP_SMALL)
    assert result.winner == 'Ann'
    assert result.reroll_info is None


def test_over_targeted_reroll_needs_enough_votes():
    players = roster('Ann', 'Bob', 'Cia')
    tallies = RoundTallies.for_roster(['Ann', 'Bob', 'Cia'])
    tallies.recent_targets['Bob'] = 5
    result = compute_reveal(votes_for('Bob', 'Bob'), players, tallies, RULES,
                            random.Random(3), 0, GROUP_SMALL)
    assert result.winner == 'Bob'
    assert result.reroll_info is None


def test_thresholds_come_from_rules():
    players = roster('Ann', 'Bob', 'Cia')
    tallies = RoundTallies.for_roster(['Ann', 'Bob', 'Cia'])
    tallies.recent_targets['Ann'] = 1
    lenient = GameRules(over_targeted_threshold=1)
    result = compute_reveal(votes_for('Ann', 'Ann', 'Bob'), players, tallies, lenient,
                            random.Random(3), 0, GROUP_SMALL)
    assert result.winner == 'Bob'


def test_bookkeeping_caps_recent_winners_and_counts_votes():
    players = roster('Ann', 'Bob', 'Cia')
    tallies = RoundTallies.for_roster(['Ann', 'Bob', 'Cia'])
    rng = random.Random(11)
    for idx, target in enumerate(['Ann', 'Bob', 'Cia', 'Ann']):
        compute_reveal(votes_for(target), players, tallies, RULES, rng, idx, GROUP_SMALL)
    assert tallies.recent_winners == ['Bob', 'Cia', 'Ann']
    assert tallies.last_winner_name == 'Ann'
    assert tallies.recent_targets == {'Ann': 2, 'Bob': 1, 'Cia': 1}
    assert tallies.total_votes_received_by_name == {'Ann': 2, 'Bob': 1, 'Cia': 1}


def test_no_votes_gives_zero_percent():
    players = roster('Ann', 'Bob', 'Cia')
    result = compute_reveal({}, players, RoundTallies(), RULES, random.Random(1), 0, GROUP_SMALL)
    assert result.winner in ('Ann', 'Bob', 'Cia')
    assert result.percentage == 0
    assert result.total_votes == 0


def test_large_group_gets_condensed_view():
    names = [f'P{i}' for i in range(10)]
    players = roster(*names)
    ballots = ['P0'] * 3 + ['P1'] * 2 + ['P2'] + ['P3', 'P4']
    result = compute_reveal(votes_for(*ballots), players, RoundTallies.for_roster(names), RULES,
                            random.Random(5), 0, GROUP_LARGE)
    condensed = result.condensed_results
    assert [e.name for e in condensed.top3][:2] == ['P0', 'P1']
    assert condensed.top3[0].percentage == 38  # 3/8 rounds half up
    assert sum(e.votes for e in condensed.top3) + condensed.others_votes == 8
    assert condensed.others_votes == 2


def test_small_group_has_no_condensed_view():
    players = roster('Ann', 'Bob', 'Cia')
    result = compute_reveal(votes_for('Ann'), players, RoundTallies(), RULES,
                            random.Random(1), 0, GROUP_SMALL)
    assert result.condensed_results is None
