"""Domain-level state tracking."""
from __future__ import annotations

from dataclasses import dataclass

from storysim.core.types import SceneID, TERMINAL_SCENES

_FLAG_FIELDS = ("has_weapon", "has_artifact", "has_retreated_from_dragon", "corrupted", "befriended_king")


@dataclass
class GameState:
    """Mutable record of a single playthrough."""

    scene: SceneID = SceneID.START
    morality: int = 0
    has_weapon: bool = False
    has_artifact: bool = False
    has_retreated_from_dragon: bool = False
    retreat_count: int = 0
    corrupted: bool = False
    befriended_king: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.scene, SceneID):
            raise ValueError(f"scene must be a SceneID, got {self.scene!r}.")
        if isinstance(self.morality, bool) or not isinstance(self.morality, int):
            raise ValueError("morality must be an integer.")
        if isinstance(self.retreat_count, bool) or not isinstance(self.retreat_count, int):
            raise ValueError("retreat_count must be an integer.")
        if self.retreat_count < 0:
            raise ValueError("retreat_count cannot be negative.")
        for name in _FLAG_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a boolean.")

    @property
    def is_terminal(self) -> bool:
        return self.scene in TERMINAL_SCENES
