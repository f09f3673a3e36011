"""Reveal engine: turn a question's votes into a winner.

The outcome is computed in full before anything is written back, so a
failure while deciding leaves the round tallies untouched.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from mostlikely.models import (
    CondensedEntry,
    CondensedResults,
    RerollInfo,
    RevealResult,
)
from .avatars import DEFAULT_AVATAR_ID
from .errors import StateConflict
from .rules import GROUP_LARGE, GameRules

log = logging.getLogger(__name__)

REROLL_COOLDOWN = 'cooldown'
REROLL_OVER_TARGETED = 'over-targeted'


@dataclass
class RoundTallies:
    """Fairness history and per-round counters, reset on every round start."""
    last_winner_name: Optional[str] = None
    recent_winners: list = field(default_factory=list)
    recent_targets: dict = field(default_factory=dict)
    wins_by_name: dict = field(default_factory=dict)
    total_votes_received_by_name: dict = field(default_factory=dict)

    @classmethod
    def for_roster(cls, names) -> 'RoundTallies':
        return cls(
            wins_by_name={n: 0 for n in names},
            total_votes_received_by_name={n: 0 for n in names},
        )

    def to_dict(self):
        return {
            'last_winner_name': self.last_winner_name,
            'recent_winners': list(self.recent_winners),
            'recent_targets': dict(self.recent_targets),
            'wins_by_name': dict(self.wins_by_name),
            'total_votes_received_by_name': dict(self.total_votes_received_by_name),
        }


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    # Half-up like Math.round; Python's round() would bank 12.5 -> 12.
    return int(part * 100 / whole + 0.5)


def tally_votes(votes: dict, roster_names) -> dict:
    """Count votes per roster name, zero-filled. Votes for names off the roster are dropped."""
    counts = {name: 0 for name in roster_names}
    for voted_for in votes.values():
        if voted_for in counts:
            counts[voted_for] += 1
    return counts


def condense(counts: dict, total: int, avatar_lookup) -> CondensedResults:
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    top3 = [
        CondensedEntry(name=name, avatar_id=avatar_lookup(name), votes=n, percentage=_percent(n, total))
        for name, n in ranked[:3]
    ]
    others = sum(n for _, n in ranked[3:])
    return CondensedResults(top3=top3, others_votes=others, others_percentage=_percent(others, total))


def compute_reveal(votes: dict, roster, tallies: RoundTallies, rules: GameRules,
                   rng: random.Random, question_index: int, size: str) -> RevealResult:
    """Decide the winner for the current question and record it in ``tallies``.

    Steps: tally, randomized tie-break among the top candidates, cooldown
    reroll away from the previous winner, over-targeted reroll toward a
    runner-up, then fairness/tally bookkeeping.
    """
    names = [p.name for p in roster]
    if not names:
        raise StateConflict('No players to reveal', code='no_players')
    avatars = {p.name: p.avatar_id for p in roster}

    def avatar_lookup(name):
        return avatars.get(name, DEFAULT_AVATAR_ID)

    counts = tally_votes(votes, names)
    total_votes = sum(counts.values())
    max_votes = max(counts.values())
    top_candidates = [name for name, n in counts.items() if n == max_votes]

    provisional = rng.choice(top_candidates)
    winner = provisional
    reroll = None

    if provisional == tallies.last_winner_name and len(top_candidates) > 1:
        others = [n for n in top_candidates if n != tallies.last_winner_name]
        winner = rng.choice(others)
        reroll = RerollInfo(REROLL_COOLDOWN, provisional, winner)

    remaining = rules.questions_per_round - question_index - 1
    if (reroll is None
            and total_votes >= rules.over_targeted_min_votes
            and remaining >= rules.over_targeted_min_remaining
            and tallies.recent_targets.get(winner, 0) >= rules.over_targeted_threshold):
        near_top = [n for n, c in counts.items() if c == max_votes - 1 and n != winner]
        if near_top:
            rerolled = rng.choice(near_top)
            reroll = RerollInfo(REROLL_OVER_TARGETED, winner, rerolled)
            winner = rerolled

    condensed = condense(counts, total_votes, avatar_lookup) if size == GROUP_LARGE else None
    result = RevealResult(
        question_index=question_index,
        winner=winner,
        winner_avatar_id=avatar_lookup(winner),
        percentage=_percent(max_votes, total_votes),
        vote_count=counts,
        total_votes=total_votes,
        reroll_info=reroll,
        condensed_results=condensed,
    )

    # apply
    tallies.last_winner_name = winner
    tallies.recent_winners.append(winner)
    del tallies.recent_winners[:-rules.recent_winners_limit]
    tallies.recent_targets[winner] = tallies.recent_targets.get(winner, 0) + 1
    tallies.wins_by_name[winner] = tallies.wins_by_name.get(winner, 0) + 1
    for name, n in counts.items():
        if n:
            tallies.total_votes_received_by_name[name] = tallies.total_votes_received_by_name.get(name, 0) + n

    log.info(
        f"[reveal] question={question_index} winner={winner} votes={max_votes}/{total_votes} "
        f"reroll={reroll.reason if reroll else None}"
    )
    return result
