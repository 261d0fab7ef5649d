from storysim.core.types import ChoiceType, SceneID
from storysim.domain.state import GameState
from storysim.services import scene_graph_validator
from storysim.services.scene_graph_validator import Issue, explore_states, format_issue, validate_scene_graph


def test_shipped_rules_validate_cleanly() -> None:
    issues = validate_scene_graph()

    assert issues == [], "\n".join(format_issue(issue) for issue in issues)


def test_exploration_reaches_every_scene_and_choice() -> None:
    result = explore_states()

    assert result.scenes() == set(SceneID)
    assert result.offered_choices() == set(ChoiceType)


def test_exploration_does_not_mutate_initial_state() -> None:
    initial = GameState(scene=SceneID.FINAL_SHOWDOWN, morality=20)

    explore_states(initial)

    assert initial == GameState(scene=SceneID.FINAL_SHOWDOWN, morality=20)


def test_exploration_from_an_ending_is_a_single_state() -> None:
    result = explore_states(GameState(scene=SceneID.VICTORY))

    assert len(result.states) == 1
    assert result.transitions == []


def test_unreachable_scenes_are_reported() -> None:
    issues = validate_scene_graph(GameState(scene=SceneID.VICTORY))
    unreachable = {issue.context["scene"] for issue in issues if issue.code == "UNREACHABLE_SCENE"}

    assert unreachable == {scene.name for scene in SceneID if scene is not SceneID.VICTORY}


def test_missing_label_is_reported(monkeypatch) -> None:
    monkeypatch.delitem(scene_graph_validator.CHOICE_LABELS, ChoiceType.RETREAT)

    issues = validate_scene_graph()

    assert [issue.code for issue in issues] == ["MISSING_LABEL"]
    assert issues[0].context == {"choice": "RETREAT"}


def test_format_issue_includes_context() -> None:
    issue = Issue(severity="ERROR", code="DEAD_END", message="Stuck.", context={"scene": "FOREST"})

    assert format_issue(issue) == "[ERROR] DEAD_END: Stuck. (scene=FOREST)"
    assert format_issue(Issue("WARNING", "X", "Y", {})) == "[WARNING] X: Y"
