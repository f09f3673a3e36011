"""Game domain services: session state machine, reveal engine, unlock gate.

This package contains the pure game logic imported by HTTP routes and
socket handlers, keeping transport concerns separated from core game
mechanics.
"""

from .session import GameSession  # noqa: F401
from .rules import GameRules  # noqa: F401
