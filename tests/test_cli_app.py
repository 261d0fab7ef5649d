import pytest

from storysim.core.types import SceneID
from storysim.domain.state import GameState
from storysim.presentation.cli import app
from storysim.services import NarrativeEngine

_CONFIG = {"text_width": 160, "show_scene_art": False}


def _scripted(answers):
    iterator = iter(answers)

    def _input(_prompt: str) -> str:
        return next(iterator)

    return _input


def test_hero_path_reaches_victory(monkeypatch, capsys) -> None:
    monkeypatch.delenv("STORYSIM_DEBUG", raising=False)
    engine = NarrativeEngine()

    app.run_session(engine, _CONFIG, _scripted(["1", "2", "1", "1", "2"]))

    output = capsys.readouterr().out
    assert "YOU WIN!" in output
    assert "=== The End ===" in output
    assert engine.scene is SceneID.VICTORY


def test_invalid_input_reprompts(monkeypatch, capsys) -> None:
    monkeypatch.delenv("STORYSIM_DEBUG", raising=False)
    engine = NarrativeEngine()

    app.run_session(engine, _CONFIG, _scripted(["abc", "9", "1", "1", "2"]))

    output = capsys.readouterr().out
    assert "Please enter a number." in output
    assert "Please enter a value between 1 and 2." in output
    assert engine.scene is SceneID.GAME_OVER


def test_play_again_resets_engine(monkeypatch, capsys) -> None:
    monkeypatch.delenv("STORYSIM_DEBUG", raising=False)
    engine = NarrativeEngine()

    app.run_session(engine, _CONFIG, _scripted(["1", "1", "1", "2", "2", "2"]))

    output = capsys.readouterr().out
    assert output.count("Your good heart") == 1
    assert output.count("Your selfish deeds") == 1
    assert engine.scene is SceneID.GAME_OVER
    assert engine.morality == -15


def test_betrayal_ending_offers_end_menu(monkeypatch, capsys) -> None:
    monkeypatch.delenv("STORYSIM_DEBUG", raising=False)
    engine = NarrativeEngine(GameState(scene=SceneID.CASTLE, morality=5, has_weapon=True, befriended_king=True))

    app.run_session(engine, _CONFIG, _scripted(["2", "2"]))

    output = capsys.readouterr().out
    assert "BETRAYAL ENDING" in output
    assert "1. Play again" in output


def test_guarded_no_op_prints_reason(monkeypatch, capsys) -> None:
    monkeypatch.delenv("STORYSIM_DEBUG", raising=False)
    engine = NarrativeEngine(GameState(scene=SceneID.CASTLE, morality=20, has_weapon=True, befriended_king=True))

    with pytest.raises(StopIteration):
        app.run_session(engine, _CONFIG, _scripted(["2"]))

    output = capsys.readouterr().out
    assert "Betrayal needs the King's trust" in output
    assert engine.scene is SceneID.CASTLE


def test_render_view_shows_status_lines(monkeypatch, capsys) -> None:
    monkeypatch.delenv("STORYSIM_DEBUG", raising=False)
    engine = NarrativeEngine(GameState(scene=SceneID.CASTLE, morality=-25, has_weapon=True))

    app.render_view(engine.view(), _CONFIG)

    output = capsys.readouterr().out
    assert "=== Castle ===" in output
    assert "Morality: -25" in output
    assert "Bag: Legendary Weapon" in output
    assert "1. Befriend the King" in output
    assert "(art:" not in output


def test_render_view_debug_shows_branch_and_art(monkeypatch, capsys) -> None:
    monkeypatch.setenv("STORYSIM_DEBUG", "1")
    engine = NarrativeEngine(GameState(scene=SceneID.FOREST, morality=-1))

    app.render_view(engine.view(), _CONFIG)

    output = capsys.readouterr().out
    assert "[FOREST | forest.village+forest.unguarded_treasure]" in output
    assert "(art: dark_forest)" in output


def test_show_scene_art_config(monkeypatch, capsys) -> None:
    monkeypatch.delenv("STORYSIM_DEBUG", raising=False)

    app.render_view(NarrativeEngine().view(), {"text_width": 78, "show_scene_art": True})

    assert "(art: crossroads)" in capsys.readouterr().out


def test_main_prints_banner_and_goodbye(monkeypatch, capsys) -> None:
    monkeypatch.delenv("STORYSIM_DEBUG", raising=False)

    app.main(config=_CONFIG, input_fn=_scripted(["1", "1", "2"]))

    output = capsys.readouterr().out
    assert output.startswith("=== Interactive Story Simulator ===")
    assert output.rstrip().endswith("Goodbye!")
