import pytest

from storysim.core.types import SceneID, TERMINAL_SCENES
from storysim.domain.state import GameState


def test_defaults_match_new_game() -> None:
    state = GameState()

    assert state.scene is SceneID.START
    assert state.morality == 0
    assert state.has_weapon is False
    assert state.has_artifact is False
    assert state.has_retreated_from_dragon is False
    assert state.retreat_count == 0
    assert state.corrupted is False
    assert state.befriended_king is False


def test_terminal_scenes_are_the_three_endings() -> None:
    assert TERMINAL_SCENES == {SceneID.GAME_OVER, SceneID.VICTORY, SceneID.BETRAYAL_ENDING}
    assert GameState(scene=SceneID.VICTORY).is_terminal
    assert not GameState(scene=SceneID.FINAL_SHOWDOWN).is_terminal


@pytest.mark.parametrize(
    "kwargs",
    [
        {"scene": "forest"},
        {"morality": "10"},
        {"morality": True},
        {"retreat_count": -1},
        {"has_weapon": 1},
        {"corrupted": None},
    ],
)
def test_invalid_fields_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        GameState(**kwargs)
