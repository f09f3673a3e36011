import logging
import uuid
from typing import Optional

from mostlikely.models import Player
from .avatars import is_valid_avatar
from .errors import CapacityError, InvalidInput, NotFound, StateConflict

log = logging.getLogger(__name__)


class PlayerRegistry:
    """Roster in join order plus the token -> player map.

    Not locked on its own; ``GameSession`` is the only caller and holds the
    session lock around every call.
    """

    def __init__(self, max_players: int = 12, max_name_length: int = 20):
        self.max_players = max_players
        self.max_name_length = max_name_length
        self._players: list[Player] = []
        self._tokens: dict[str, Player] = {}

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, name) -> bool:
        return self.by_name(name) is not None

    @property
    def players(self) -> list[Player]:
        return list(self._players)

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._players]

    @property
    def is_full(self) -> bool:
        return len(self._players) >= self.max_players

    def by_name(self, name) -> Optional[Player]:
        for p in self._players:
            if p.name == name:
                return p
        return None

    def by_token(self, token) -> Optional[Player]:
        if not token:
            return None
        return self._tokens.get(token)

    def has_token(self, token) -> bool:
        return self.by_token(token) is not None

    def check_join(self, name, in_lobby: bool) -> str:
        """Validate a join request and return the trimmed name."""
        trimmed = (name or '').strip() if isinstance(name, str) else ''
        if not trimmed:
            raise InvalidInput('Name cannot be empty', code='name_empty')
        if len(trimmed) > self.max_name_length:
            raise InvalidInput(f'Name can be at most {self.max_name_length} characters', code='name_too_long')
        if self.is_full:
            raise CapacityError(f'Max {self.max_players} players', code='room_full')
        lowered = trimmed.lower()
        if any(p.name.lower() == lowered for p in self._players):
            raise InvalidInput('That name is already taken', code='name_taken')
        if not in_lobby:
            raise StateConflict('The game has already started', code='already_started')
        return trimmed

    def add(self, name: str, avatar_id: str) -> str:
        token = str(uuid.uuid4())
        while token in self._tokens:
            token = str(uuid.uuid4())
        player = Player(name=name, avatar_id=avatar_id)
        self._tokens[token] = player
        self._players.append(player)
        log.info(f"[join] name={name} avatar={avatar_id} players={len(self._players)}")
        return token

    def remove(self, token) -> Optional[Player]:
        player = self._tokens.pop(token, None) if token else None
        if player is None:
            return None
        self._players = [p for p in self._players if p.name != player.name]
        log.info(f"[leave] name={player.name} players={len(self._players)}")
        return player

    def check_avatar(self, token, avatar_id) -> Player:
        player = self.by_token(token)
        if player is None:
            raise NotFound('Invalid player token', code='invalid_token')
        if not is_valid_avatar(avatar_id):
            raise InvalidInput('Invalid avatar', code='invalid_avatar')
        return player

    def set_avatar(self, token, avatar_id) -> None:
        player = self.check_avatar(token, avatar_id)
        # The roster and the token map share the same Player object.
        player.avatar_id = avatar_id

    def clear(self) -> None:
        self._players = []
        self._tokens = {}
