from dataclasses import dataclass
from typing import Mapping, Any


@dataclass(frozen=True)
class GameRules:
    """Tunable constants for one session.

    Built from the Flask config by ``create_app``; domain code never reads
    ``current_app.config`` itself.
    """
    min_players: int = 3
    max_players: int = 12
    questions_per_round: int = 20
    max_name_length: int = 20
    question_duration_small_sec: int = 20
    question_duration_medium_sec: int = 18
    question_duration_large_sec: int = 15
    reveal_hold_sec: int = 5
    interstitial_ms: int = 1000
    recent_winners_limit: int = 3
    over_targeted_min_votes: int = 3
    over_targeted_min_remaining: int = 4
    over_targeted_threshold: int = 2
    unlock_window_ms: int = 24 * 60 * 60 * 1000
    checkout_ttl_ms: int = 15 * 60 * 1000

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> 'GameRules':
        defaults = cls()

        def _int(key, fallback):
            try:
                return int(cfg.get(key, fallback))
            except (TypeError, ValueError):
                return fallback

        return cls(
            min_players=_int('MIN_PLAYERS', defaults.min_players),
            max_players=_int('MAX_PLAYERS', defaults.max_players),
            questions_per_round=_int('QUESTIONS_PER_ROUND', defaults.questions_per_round),
            question_duration_small_sec=_int('QUESTION_DURATION_SMALL_SEC', defaults.question_duration_small_sec),
            question_duration_medium_sec=_int('QUESTION_DURATION_MEDIUM_SEC', defaults.question_duration_medium_sec),
            question_duration_large_sec=_int('QUESTION_DURATION_LARGE_SEC', defaults.question_duration_large_sec),
            reveal_hold_sec=_int('REVEAL_HOLD_SEC', defaults.reveal_hold_sec),
            interstitial_ms=_int('INTERSTITIAL_MS', defaults.interstitial_ms),
            recent_winners_limit=_int('RECENT_WINNERS_LIMIT', defaults.recent_winners_limit),
            over_targeted_min_votes=_int('OVER_TARGETED_MIN_VOTES', defaults.over_targeted_min_votes),
            over_targeted_min_remaining=_int('OVER_TARGETED_MIN_REMAINING', defaults.over_targeted_min_remaining),
            over_targeted_threshold=_int('OVER_TARGETED_THRESHOLD', defaults.over_targeted_threshold),
            unlock_window_ms=_int('UNLOCK_WINDOW_HOURS', 24) * 60 * 60 * 1000,
            checkout_ttl_ms=_int('CHECKOUT_TTL_SEC', defaults.checkout_ttl_ms // 1000) * 1000,
        )


GROUP_SMALL = 'small'
GROUP_MEDIUM = 'medium'
GROUP_LARGE = 'large'


def group_size(player_count: int) -> str:
    if player_count <= 6:
        return GROUP_SMALL
    if player_count <= 9:
        return GROUP_MEDIUM
    return GROUP_LARGE
