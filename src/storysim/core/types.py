"""Shared enumerations for the core and domain layers."""
from __future__ import annotations

from enum import Enum


class SceneID(Enum):
    """Nodes of the narrative graph."""

    START = "start"
    FOREST = "forest"
    CASTLE = "castle"
    FINAL_SHOWDOWN = "final_showdown"
    GAME_OVER = "game_over"
    VICTORY = "victory"
    BETRAYAL_ENDING = "betrayal_ending"


class ChoiceType(Enum):
    """Player-selectable actions."""

    EXPLORE_FOREST = "explore_forest"
    VISIT_CASTLE = "visit_castle"
    FIGHT_MONSTER = "fight_monster"
    HELP_VILLAGERS = "help_villagers"
    STEAL_TREASURE = "steal_treasure"
    BEFRIEND_KING = "befriend_king"
    CHALLENGE_KING = "challenge_king"
    FACE_DRAGON = "face_dragon"
    RETREAT = "retreat"
    SEEK_ANCIENT_MAGIC = "seek_ancient_magic"
    TRAIN_WITH_VILLAGERS = "train_with_villagers"
    BETRAY_KING = "betray_king"


TERMINAL_SCENES = frozenset({SceneID.GAME_OVER, SceneID.VICTORY, SceneID.BETRAYAL_ENDING})

FIGHT_MONSTER_MORALITY = 15
HEROIC_VICTORY_MORALITY = 30
BETRAYAL_MAX_MORALITY = 10
MAX_RETREATS = 2

__all__ = [
    "BETRAYAL_MAX_MORALITY",
    "ChoiceType",
    "FIGHT_MONSTER_MORALITY",
    "HEROIC_VICTORY_MORALITY",
    "MAX_RETREATS",
    "SceneID",
    "TERMINAL_SCENES",
]
