"""The process-wide game session.

``GameSession`` owns every piece of mutable room state and is the only
thing allowed to change it. Each public method runs under one re-entrant
lock and validates all of its preconditions before it writes anything.
"""

import logging
import random
import threading
from typing import Callable, Optional

from mostlikely.models import RevealResult
from . import finale, timing
from .avatars import get_avatars, random_avatar_id
from .checkout import UnlockGate
from .errors import InvalidInput, NotFound, PolicyBlocked, StateConflict, CapacityError, AlreadyVoted
from .questions import (
    GAME_MODES,
    MODE_ADULT,
    MODE_STANDARD,
    TONE_SPICY,
    TONES,
    select_round_questions,
)
from .registry import PlayerRegistry
from .reveal import RoundTallies, compute_reveal
from .rules import GameRules, group_size

log = logging.getLogger(__name__)

PHASE_LOBBY = 'lobby'
PHASE_QUESTION = 'question'
PHASE_REVEAL = 'reveal'
PHASE_GAMEOVER = 'gameover'

DEFAULT_TONE = TONE_SPICY


class GameSession:

    def __init__(self, rules: Optional[GameRules] = None, rng: Optional[random.Random] = None,
                 clock: Callable[[], int] = timing.now_ms):
        self.rules = rules or GameRules()
        self.rng = rng or random.Random()
        self.clock = clock
        self._lock = threading.RLock()

        self.registry = PlayerRegistry(self.rules.max_players, self.rules.max_name_length)
        self.gate = UnlockGate(self.rules.unlock_window_ms, self.rules.checkout_ttl_ms)
        self._reset_round_state()
        self._reset_settings()

    # ---- internal state helpers (caller holds the lock) ----

    def _reset_round_state(self) -> None:
        self.phase = PHASE_LOBBY
        self.current_question = 0
        self.selected_questions: list[str] = []
        self.votes: dict[str, str] = {}
        self.question_start_time: Optional[int] = None
        self.tallies = RoundTallies()
        self.reroll_info = None
        self.last_reveal: Optional[RevealResult] = None
        self.show_upsell = False
        self._clear_pause()

    def _reset_settings(self) -> None:
        self.selected_tone = DEFAULT_TONE
        self.couples_safe = False
        self.game_mode = MODE_STANDARD

    def _clear_pause(self) -> None:
        self.is_paused = False
        self.paused_at: Optional[int] = None
        self.pause_accumulated_ms = 0

    def _set_phase(self, phase: str) -> None:
        if phase != self.phase:
            log.info(f"[phase] {self.phase} -> {phase} question={self.current_question}")
        self.phase = phase

    def _require_phase(self, *phases, message: str) -> None:
        if self.phase not in phases:
            raise StateConflict(message, code='wrong_phase')

    @property
    def group_size(self) -> str:
        return group_size(len(self.registry))

    @property
    def question_time(self) -> int:
        return timing.question_duration(self.rules, self.group_size)

    # ---- player registry ----

    def join(self, name) -> dict:
        with self._lock:
            trimmed = self.registry.check_join(name, in_lobby=self.phase == PHASE_LOBBY)
            avatar_id = random_avatar_id(self.rng)
            token = self.registry.add(trimmed, avatar_id)
            return {'token': token, 'name': trimmed, 'avatar_id': avatar_id}

    def leave(self, token) -> None:
        with self._lock:
            player = self.registry.remove(token)
            if player is not None:
                self.votes.pop(token, None)

    def validate_token(self, token) -> dict:
        with self._lock:
            player = self.registry.by_token(token)
            if player is None:
                return {'valid': False}
            return {'valid': True, 'name': player.name, 'avatar_id': player.avatar_id}

    def set_avatar(self, token, avatar_id) -> None:
        with self._lock:
            self.registry.set_avatar(token, avatar_id)

    # ---- lobby configuration ----

    def set_settings(self, tone, couples_safe) -> None:
        with self._lock:
            self._require_phase(PHASE_LOBBY, message='Settings can only be changed in the lobby')
            if tone not in TONES:
                raise InvalidInput(f'Invalid tone: {tone!r}', code='invalid_tone')
            if not isinstance(couples_safe, bool):
                raise InvalidInput('couples_safe must be true or false', code='invalid_couples_safe')
            self.selected_tone = tone
            self.couples_safe = couples_safe

    def set_game_mode(self, mode) -> None:
        with self._lock:
            self._require_phase(PHASE_LOBBY, message='Mode can only be changed in the lobby')
            if mode not in GAME_MODES:
                raise InvalidInput(f'Invalid game mode: {mode!r}', code='invalid_mode')
            self.game_mode = mode

    # ---- round lifecycle ----

    def start(self) -> None:
        with self._lock:
            self._require_phase(PHASE_LOBBY, message='The game has already started')
            if len(self.registry) < self.rules.min_players:
                raise CapacityError(f'At least {self.rules.min_players} players are required',
                                    code='too_few_players')
            now = self.clock()
            if self.game_mode == MODE_ADULT and not self.gate.is_unlocked(now):
                raise PolicyBlocked('18+ must be unlocked first', code='unlock_required')
            selected = select_round_questions(
                self.game_mode, self.selected_tone, self.couples_safe, self.group_size,
                self.rng, count=self.rules.questions_per_round,
            )

            self.selected_questions = selected
            self.current_question = 0
            self.votes = {}
            self.tallies = RoundTallies.for_roster(self.registry.names)
            self.reroll_info = None
            self.last_reveal = None
            self.show_upsell = False
            self.question_start_time = now
            self._clear_pause()
            self.gate.clear_checkout()
            self._set_phase(PHASE_QUESTION)
            log.info(
                f"[start] players={len(self.registry)} mode={self.game_mode} tone={self.selected_tone} "
                f"couples_safe={self.couples_safe} group={self.group_size}"
            )

    def submit_vote(self, token, voted_for) -> None:
        with self._lock:
            self._require_phase(PHASE_QUESTION, message='Voting is not open')
            if not self.registry.has_token(token):
                raise NotFound('Invalid player token', code='invalid_token')
            if token in self.votes:
                raise AlreadyVoted('You have already voted')
            if voted_for not in self.registry:
                raise InvalidInput('Invalid player', code='invalid_vote_target')
            self.votes[token] = voted_for

    @property
    def all_voted(self) -> bool:
        with self._lock:
            tokens = [t for t in self.votes if self.registry.has_token(t)]
            return len(self.registry) > 0 and len(tokens) >= len(self.registry)

    def time_remaining(self) -> Optional[int]:
        with self._lock:
            if self.phase != PHASE_QUESTION:
                return None
            return timing.remaining_seconds(
                self.question_time, self.clock(), self.question_start_time,
                self.pause_accumulated_ms, self.paused_at,
            )

    def voting_due(self) -> bool:
        """True when voting should close: everyone voted or the timer hit zero while running."""
        with self._lock:
            if self.phase != PHASE_QUESTION:
                return False
            if self.all_voted:
                return True
            return not self.is_paused and self.time_remaining() == 0

    def end_voting(self) -> RevealResult:
        with self._lock:
            self._require_phase(PHASE_QUESTION, message='No question is open for voting')
            result = compute_reveal(
                self.votes, self.registry.players, self.tallies, self.rules,
                self.rng, self.current_question, self.group_size,
            )
            self.reroll_info = result.reroll_info
            self.last_reveal = result
            self._set_phase(PHASE_REVEAL)
            return result

    def tick(self) -> Optional[RevealResult]:
        with self._lock:
            if self.voting_due():
                return self.end_voting()
            return None

    def _advance(self) -> None:
        self.reroll_info = None
        self.last_reveal = None
        self.votes = {}
        self._clear_pause()
        if self.current_question >= self.rules.questions_per_round - 1:
            if self.game_mode == MODE_STANDARD and not self.gate.is_unlocked(self.clock()):
                self.show_upsell = True
            self._set_phase(PHASE_GAMEOVER)
            return
        self.current_question += 1
        self.question_start_time = self.clock()
        self._set_phase(PHASE_QUESTION)

    def next_question(self) -> None:
        with self._lock:
            self._require_phase(PHASE_REVEAL, message='Can only advance from the reveal')
            self._advance()

    def next_question_now(self) -> None:
        with self._lock:
            self._require_phase(PHASE_QUESTION, PHASE_REVEAL,
                                message='Can only skip ahead while a game is running')
            log.info(f"[skip] question={self.current_question} phase={self.phase}")
            self._advance()

    # ---- pause accounting ----

    def pause(self) -> None:
        with self._lock:
            self._require_phase(PHASE_QUESTION, PHASE_REVEAL,
                                message='Can only pause during a question or a reveal')
            if self.is_paused:
                raise StateConflict('The game is already paused', code='already_paused')
            self.is_paused = True
            self.paused_at = self.clock()
            log.info(f"[pause] question={self.current_question} phase={self.phase}")

    def resume(self) -> None:
        with self._lock:
            if not self.is_paused:
                raise StateConflict('The game is not paused', code='not_paused')
            if self.paused_at is not None:
                self.pause_accumulated_ms += max(0, self.clock() - self.paused_at)
            self.is_paused = False
            self.paused_at = None
            log.info(f"[resume] question={self.current_question} paused_total_ms={self.pause_accumulated_ms}")

    # ---- resets ----

    def reset_to_lobby(self) -> None:
        """Play again: keep roster, tokens and the unlock window."""
        with self._lock:
            self._reset_round_state()
            self._reset_settings()
            self.gate.clear_checkout()
            log.info(f"[reset] soft players={len(self.registry)}")

    def reset(self) -> None:
        """Start over with an empty room. The unlock window survives."""
        with self._lock:
            self._reset_round_state()
            self._reset_settings()
            self.gate.clear_checkout()
            self.registry.clear()
            log.info("[reset] hard")

    # ---- 18+ unlock ----

    def is_unlocked(self) -> bool:
        with self._lock:
            return self.gate.is_unlocked(self.clock())

    @property
    def unlock_until(self) -> Optional[int]:
        return self.gate.unlock_until

    def create_checkout(self) -> dict:
        with self._lock:
            self._require_phase(PHASE_LOBBY, message='Checkout can only be created in the lobby')
            if self.game_mode != MODE_ADULT:
                raise StateConflict('18+ mode must be selected first', code='wrong_mode')
            checkout = self.gate.create(self.clock())
            return {'checkout_id': checkout.id, 'checkout_url': f'/checkout?cid={checkout.id}'}

    def mark_checkout_paid(self, checkout_id) -> None:
        with self._lock:
            self.gate.mark_paid(checkout_id, self.clock())

    def mark_checkout_canceled(self, checkout_id) -> None:
        with self._lock:
            self.gate.mark_canceled(checkout_id)

    # ---- reads ----

    def finale_summary(self):
        with self._lock:
            if self.phase != PHASE_GAMEOVER:
                return None
            return finale.summarize(
                self.registry.players,
                self.tallies.wins_by_name,
                self.tallies.total_votes_received_by_name,
                self.rng,
            )

    def snapshot(self) -> dict:
        with self._lock:
            players = self.registry.players
            voted_names = [self.registry.by_token(t).name for t in self.votes if self.registry.has_token(t)]
            summary = self.finale_summary()
            current_text = None
            if self.selected_questions and self.phase in (PHASE_QUESTION, PHASE_REVEAL):
                current_text = self.selected_questions[self.current_question]
            state = {
                'phase': self.phase,
                'players': [p.to_dict() for p in players],
                'current_question': self.current_question,
                'current_question_text': current_text,
                'total_questions': self.rules.questions_per_round,
                'selected_questions': list(self.selected_questions),
                'voted_names': voted_names,
                'vote_count': len(voted_names),
                'all_voted': self.all_voted,
                'question_start_time': self.question_start_time,
                'is_paused': self.is_paused,
                'paused_at': self.paused_at,
                'pause_accumulated_ms': self.pause_accumulated_ms,
                'time_remaining': self.time_remaining(),
                'question_time': self.question_time,
                'group_size': self.group_size,
                'durations': timing.durations(self.rules, self.group_size),
                'selected_tone': self.selected_tone,
                'couples_safe': self.couples_safe,
                'game_mode': self.game_mode,
                'reroll_info': self.reroll_info.to_dict() if self.reroll_info else None,
                'reveal': self.last_reveal.to_dict() if self.last_reveal else None,
                'show_upsell': self.show_upsell,
                'unlock_18plus_until': self.gate.unlock_until,
                'checkout': self.gate.checkout.to_dict() if self.gate.checkout else None,
                'unlock_info': self.gate.unlock_info(self.clock()),
                'avatars': get_avatars(),
                'finale_summary': summary.to_dict() if summary else None,
            }
            state.update(self.tallies.to_dict())
            return state
