"""Domain records."""

from .state import GameState

__all__ = ["GameState"]
