"""Static validation of the scene graph by exhaustive state exploration."""
from __future__ import annotations

from collections import deque
from dataclasses import astuple, dataclass, replace
from typing import Dict, Iterable, List, Set, Tuple

from storysim.core.types import ChoiceType, SceneID, TERMINAL_SCENES
from storysim.domain.state import GameState
from storysim.services.narrative_engine import apply_transition, available_choices, legal_choices
from storysim.services.scene_text import CHOICE_LABELS, UNKNOWN_CHOICE_LABEL, choice_label

Severity = str
StateKey = Tuple[object, ...]


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


@dataclass(frozen=True, slots=True)
class Transition:
    source: StateKey
    choice: ChoiceType
    target: StateKey


@dataclass(slots=True)
class ExplorationResult:
    """Every state reachable from the initial state and the edges between them."""

    states: Dict[StateKey, GameState]
    transitions: List[Transition]

    def scenes(self) -> Set[SceneID]:
        return {state.scene for state in self.states.values()}

    def offered_choices(self) -> Set[ChoiceType]:
        offered: Set[ChoiceType] = set()
        for state in self.states.values():
            offered.update(available_choices(state))
        return offered


def state_key(state: GameState) -> StateKey:
    return astuple(state)


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def explore_states(initial: GameState | None = None, *, include_guarded: bool = True) -> ExplorationResult:
    """Breadth-first search over every state reachable through legal choices."""
    start = replace(initial) if initial is not None else GameState()
    states: Dict[StateKey, GameState] = {state_key(start): start}
    transitions: List[Transition] = []
    queue = deque([start])
    while queue:
        state = queue.popleft()
        source = state_key(state)
        choices = legal_choices(state) if include_guarded else available_choices(state)
        for choice in choices:
            successor = replace(state)
            apply_transition(successor, choice)
            target = state_key(successor)
            transitions.append(Transition(source=source, choice=choice, target=target))
            if target not in states:
                states[target] = successor
                queue.append(successor)
    return ExplorationResult(states=states, transitions=transitions)


def validate_scene_graph(initial: GameState | None = None) -> list[Issue]:
    """Return every structural problem found in the reachable scene graph."""
    issues: list[Issue] = []
    result = explore_states(initial)
    reached = result.scenes()

    for scene in SceneID:
        if scene not in reached:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="UNREACHABLE_SCENE",
                    message="Scene cannot be reached from the initial state.",
                    context={"scene": scene.name},
                )
            )

    for state in result.states.values():
        choices = available_choices(state)
        if state.scene in TERMINAL_SCENES and choices:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="TERMINAL_HAS_CHOICES",
                    message="Terminal scene offers choices.",
                    context={"scene": state.scene.name},
                )
            )
        if state.scene not in TERMINAL_SCENES and not choices:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="DEAD_END",
                    message="Non-terminal state offers no choices.",
                    context=_state_context(state),
                )
            )

    offered = result.offered_choices()
    for choice in ChoiceType:
        if choice not in offered:
            issues.append(
                Issue(
                    severity="WARNING",
                    code="UNUSED_CHOICE",
                    message="Choice is never offered in any reachable state.",
                    context={"choice": choice.name},
                )
            )
    issues.extend(_validate_labels(ChoiceType))
    issues.extend(_validate_monotonic_flags(result))
    return issues


def _validate_labels(choices: Iterable[ChoiceType]) -> list[Issue]:
    issues: list[Issue] = []
    for choice in choices:
        label = choice_label(choice)
        if choice not in CHOICE_LABELS or not label.strip() or label == UNKNOWN_CHOICE_LABEL:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="MISSING_LABEL",
                    message="Choice has no display label.",
                    context={"choice": choice.name},
                )
            )
    return issues


def _validate_monotonic_flags(result: ExplorationResult) -> list[Issue]:
    issues: list[Issue] = []
    for edge in result.transitions:
        before = result.states[edge.source]
        after = result.states[edge.target]
        for flag in ("corrupted", "befriended_king"):
            if getattr(before, flag) and not getattr(after, flag):
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="FLAG_REGRESSION",
                        message="Permanent flag was cleared by a transition.",
                        context={"flag": flag, "choice": edge.choice.name, "scene": before.scene.name},
                    )
                )
        if after.retreat_count < before.retreat_count:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="FLAG_REGRESSION",
                    message="Retreat counter decreased.",
                    context={"flag": "retreat_count", "choice": edge.choice.name, "scene": before.scene.name},
                )
            )
    return issues


def _state_context(state: GameState) -> dict[str, str]:
    return {
        "scene": state.scene.name,
        "morality": str(state.morality),
        "retreated": str(state.has_retreated_from_dragon),
        "befriended_king": str(state.befriended_king),
    }
