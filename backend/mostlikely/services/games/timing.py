"""Elapsed-time arithmetic for the polled question timer.

The core never runs a timer of its own: callers poll the state, compute
the remaining time from these helpers and call ``end_voting`` (or
``tick``) once it reaches zero.
"""

import time
from typing import Optional

from .rules import GROUP_LARGE, GROUP_MEDIUM, GameRules


def now_ms() -> int:
    return int(time.time() * 1000)


def question_duration(rules: GameRules, size: str) -> int:
    if size == GROUP_LARGE:
        return rules.question_duration_large_sec
    if size == GROUP_MEDIUM:
        return rules.question_duration_medium_sec
    return rules.question_duration_small_sec


def active_elapsed_ms(now: int, question_start: int, pause_accumulated_ms: int,
                      paused_at: Optional[int]) -> int:
    """Milliseconds the current question has been running, not counting pauses."""
    elapsed = now - question_start - pause_accumulated_ms
    if paused_at is not None:
        elapsed -= now - paused_at
    return elapsed


def remaining_seconds(duration_sec: int, now: int, question_start: Optional[int],
                      pause_accumulated_ms: int, paused_at: Optional[int]) -> Optional[int]:
    if question_start is None:
        return None
    elapsed = max(0, active_elapsed_ms(now, question_start, pause_accumulated_ms, paused_at))
    return max(0, duration_sec - elapsed // 1000)


def durations(rules: GameRules, size: str) -> dict:
    return {
        'question': question_duration(rules, size),
        'reveal_hold': rules.reveal_hold_sec,
        'interstitial_ms': rules.interstitial_ms,
    }
