from dataclasses import dataclass, field
from typing import Optional

CHECKOUT_OPEN = 'open'
CHECKOUT_PAID = 'paid'
CHECKOUT_CANCELED = 'canceled'


@dataclass
class Player:
    name: str
    avatar_id: str

    def to_dict(self):
        return {
            'name': self.name,
            'avatar_id': self.avatar_id,
        }


@dataclass
class Checkout:
    id: str
    created_at: int
    status: str = CHECKOUT_OPEN

    @property
    def is_open(self) -> bool:
        return self.status == CHECKOUT_OPEN

    def to_dict(self):
        return {
            'id': self.id,
            'status': self.status,
            'created_at': self.created_at,
        }


@dataclass(frozen=True)
class RerollInfo:
    reason: str  # cooldown | over-targeted
    original_winner: str
    final_winner: str

    def to_dict(self):
        return {
            'reason': self.reason,
            'original_winner': self.original_winner,
            'final_winner': self.final_winner,
        }


@dataclass(frozen=True)
class CondensedEntry:
    name: str
    avatar_id: str
    votes: int
    percentage: int

    def to_dict(self):
        return {
            'name': self.name,
            'avatar_id': self.avatar_id,
            'votes': self.votes,
            'percentage': self.percentage,
        }


@dataclass(frozen=True)
class CondensedResults:
    """Top-3 view for large groups; everyone else is folded into 'others'."""
    top3: list
    others_votes: int
    others_percentage: int

    def to_dict(self):
        return {
            'top3': [e.to_dict() for e in self.top3],
            'others_votes': self.others_votes,
            'others_percentage': self.others_percentage,
        }


@dataclass(frozen=True)
class RevealResult:
    question_index: int
    winner: str
    winner_avatar_id: str
    percentage: int
    vote_count: dict
    total_votes: int
    reroll_info: Optional[RerollInfo] = None
    condensed_results: Optional[CondensedResults] = None

    def to_dict(self):
        return {
            'question_index': self.question_index,
            'winner': self.winner,
            'winner_avatar_id': self.winner_avatar_id,
            'percentage': self.percentage,
            'vote_count': dict(self.vote_count),
            'total_votes': self.total_votes,
            'reroll_info': self.reroll_info.to_dict() if self.reroll_info else None,
            'condensed_results': self.condensed_results.to_dict() if self.condensed_results else None,
        }


@dataclass(frozen=True)
class Award:
    title: str
    name: str
    avatar_id: str
    value_text: str

    def to_dict(self):
        return {
            'title': self.title,
            'name': self.name,
            'avatar_id': self.avatar_id,
            'value_text': self.value_text,
        }


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    wins: int
    avatar_id: str

    def to_dict(self):
        return {'name': self.name, 'wins': self.wins, 'avatar_id': self.avatar_id}


@dataclass(frozen=True)
class FinaleSummary:
    awards: list = field(default_factory=list)
    top3: list = field(default_factory=list)

    def to_dict(self):
        return {
            'awards': [a.to_dict() for a in self.awards],
            'top3': [e.to_dict() for e in self.top3],
        }
