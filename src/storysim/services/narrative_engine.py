"""Narrative state machine: scene graph, transition rules and derived views."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Tuple

from storysim.core.types import (
    BETRAYAL_MAX_MORALITY,
    FIGHT_MONSTER_MORALITY,
    HEROIC_VICTORY_MORALITY,
    MAX_RETREATS,
    ChoiceType,
    SceneID,
    TERMINAL_SCENES,
)
from storysim.domain.state import GameState
from storysim.services.errors import InvalidChoiceError, NarrativeStateError
from storysim.services import scene_text

logger = logging.getLogger(__name__)

# Castle choices that stay selectable while their guard fails; they resolve as no-ops.
GUARDED_CASTLE_CHOICES = (ChoiceType.BEFRIEND_KING, ChoiceType.BETRAY_KING)


@dataclass(slots=True)
class StoryView:
    """Data returned to the presentation layer for rendering."""

    scene: SceneID
    description: str
    description_keys: Tuple[str, ...]
    choices: List[Tuple[ChoiceType, str]]
    image_key: str
    morality: int
    has_weapon: bool
    has_artifact: bool
    is_finished: bool


@dataclass(slots=True)
class StoryEvent:
    """Base class for story events."""


@dataclass(slots=True)
class SceneChangedEvent(StoryEvent):
    from_scene: SceneID
    to_scene: SceneID


@dataclass(slots=True)
class MoralityChangedEvent(StoryEvent):
    delta: int
    total: int


@dataclass(slots=True)
class ItemAcquiredEvent(StoryEvent):
    item: str


@dataclass(slots=True)
class CorruptionEvent(StoryEvent):
    pass


@dataclass(slots=True)
class KingBefriendedEvent(StoryEvent):
    pass


@dataclass(slots=True)
class RetreatEvent(StoryEvent):
    retreat_count: int


@dataclass(slots=True)
class ChoiceIgnoredEvent(StoryEvent):
    choice: ChoiceType
    reason: str


@dataclass(slots=True)
class EndingReachedEvent(StoryEvent):
    scene: SceneID


@dataclass(slots=True)
class ChoiceResult:
    """Result returned after submitting a choice."""

    applied: bool = False
    events: List[StoryEvent] = field(default_factory=list)
    view: StoryView | None = None
    error: InvalidChoiceError | None = None


def available_choices(state: GameState) -> Tuple[ChoiceType, ...]:
    """Return the ordered choices the current scene offers."""
    scene = state.scene
    if scene is SceneID.START:
        return (ChoiceType.EXPLORE_FOREST, ChoiceType.VISIT_CASTLE)
    if scene is SceneID.FOREST:
        if state.has_retreated_from_dragon:
            return (ChoiceType.SEEK_ANCIENT_MAGIC, ChoiceType.TRAIN_WITH_VILLAGERS, ChoiceType.FACE_DRAGON)
        return (ChoiceType.FIGHT_MONSTER, ChoiceType.HELP_VILLAGERS, ChoiceType.STEAL_TREASURE)
    if scene is SceneID.CASTLE:
        if state.befriended_king:
            if state.has_weapon:
                return (ChoiceType.FACE_DRAGON, ChoiceType.BETRAY_KING)
            return (ChoiceType.FACE_DRAGON, ChoiceType.CHALLENGE_KING)
        return (ChoiceType.BEFRIEND_KING, ChoiceType.CHALLENGE_KING)
    if scene is SceneID.FINAL_SHOWDOWN:
        return (ChoiceType.FACE_DRAGON, ChoiceType.RETREAT)
    if scene in TERMINAL_SCENES:
        return ()
    raise NarrativeStateError(f"No choice rule for scene {scene!r}.")


def legal_choices(state: GameState) -> Tuple[ChoiceType, ...]:
    """Return the offered choices plus any guarded castle choices accepted as no-ops."""
    choices = available_choices(state)
    if state.scene is SceneID.CASTLE:
        choices += tuple(choice for choice in GUARDED_CASTLE_CHOICES if choice not in choices)
    return choices


def is_legal_choice(state: GameState, choice: object) -> bool:
    """Return True if the choice may be submitted in the current state."""
    return choice in legal_choices(state)


def apply_transition(state: GameState, choice: ChoiceType) -> str | None:
    """Mutate ``state`` for ``choice`` without checking availability.

    Returns the reason when the choice resolves as a guarded no-op, else None.
    """
    handler = _SCENE_HANDLERS.get(state.scene)
    if handler is None:
        raise NarrativeStateError(f"Scene {state.scene!r} accepts no choices.")
    return handler(state, choice)


def _unhandled(state: GameState, choice: object) -> NarrativeStateError:
    return NarrativeStateError(f"No transition for {choice!r} in scene {state.scene.name}.")


def _handle_start(state: GameState, choice: ChoiceType) -> str | None:
    if choice is ChoiceType.EXPLORE_FOREST:
        state.scene = SceneID.FOREST
    elif choice is ChoiceType.VISIT_CASTLE:
        state.morality -= 5
        state.scene = SceneID.CASTLE
    else:
        raise _unhandled(state, choice)
    return None


def _handle_forest(state: GameState, choice: ChoiceType) -> str | None:
    if state.has_retreated_from_dragon:
        if choice is ChoiceType.SEEK_ANCIENT_MAGIC:
            state.morality -= 20
            state.has_artifact = True
            state.corrupted = True
            state.scene = SceneID.FINAL_SHOWDOWN
        elif choice is ChoiceType.TRAIN_WITH_VILLAGERS:
            state.morality += 15
            state.has_weapon = True
            state.scene = SceneID.FINAL_SHOWDOWN
        elif choice is ChoiceType.FACE_DRAGON:
            state.has_retreated_from_dragon = False
            state.scene = SceneID.FINAL_SHOWDOWN
        else:
            raise _unhandled(state, choice)
        return None

    if choice is ChoiceType.FIGHT_MONSTER:
        if state.morality > FIGHT_MONSTER_MORALITY:
            state.has_weapon = True
            state.scene = SceneID.FINAL_SHOWDOWN
        else:
            state.scene = SceneID.GAME_OVER
    elif choice is ChoiceType.HELP_VILLAGERS:
        state.morality += 20
        state.has_artifact = True
        state.scene = SceneID.CASTLE
    elif choice is ChoiceType.STEAL_TREASURE:
        state.morality -= 25
        state.has_weapon = True
        state.scene = SceneID.CASTLE
    else:
        raise _unhandled(state, choice)
    return None


def _handle_castle(state: GameState, choice: ChoiceType) -> str | None:
    if choice is ChoiceType.BEFRIEND_KING:
        if state.befriended_king:
            return "The King already counts you as a friend."
        state.morality += 15
        state.befriended_king = True
        state.scene = SceneID.FINAL_SHOWDOWN if state.has_artifact else SceneID.FOREST
    elif choice is ChoiceType.CHALLENGE_KING:
        state.morality -= 10
        state.scene = SceneID.FINAL_SHOWDOWN if state.has_weapon else SceneID.GAME_OVER
    elif choice is ChoiceType.BETRAY_KING:
        if not (state.befriended_king and state.has_weapon and state.morality <= BETRAYAL_MAX_MORALITY):
            return "Betrayal needs the King's trust, a weapon and a dark heart."
        state.scene = SceneID.BETRAYAL_ENDING
    elif choice is ChoiceType.FACE_DRAGON:
        state.scene = SceneID.FINAL_SHOWDOWN
    else:
        raise _unhandled(state, choice)
    return None


def _handle_showdown(state: GameState, choice: ChoiceType) -> str | None:
    if choice is ChoiceType.FACE_DRAGON:
        if state.corrupted:
            won = state.has_weapon
        else:
            won = state.morality > HEROIC_VICTORY_MORALITY or (state.has_weapon and state.has_artifact)
        state.scene = SceneID.VICTORY if won else SceneID.GAME_OVER
    elif choice is ChoiceType.RETREAT:
        state.retreat_count += 1
        if state.retreat_count >= MAX_RETREATS:
            state.scene = SceneID.GAME_OVER
        else:
            state.scene = SceneID.FOREST
            state.has_retreated_from_dragon = True
            state.morality -= 10
            if state.morality < 0:
                state.morality -= 5
    else:
        raise _unhandled(state, choice)
    return None


_SCENE_HANDLERS: Dict[SceneID, Callable[[GameState, ChoiceType], str | None]] = {
    SceneID.START: _handle_start,
    SceneID.FOREST: _handle_forest,
    SceneID.CASTLE: _handle_castle,
    SceneID.FINAL_SHOWDOWN: _handle_showdown,
}


def _diff_events(before: GameState, after: GameState) -> List[StoryEvent]:
    events: List[StoryEvent] = []
    if after.morality != before.morality:
        events.append(MoralityChangedEvent(delta=after.morality - before.morality, total=after.morality))
    if after.has_weapon and not before.has_weapon:
        events.append(ItemAcquiredEvent(item="weapon"))
    if after.has_artifact and not before.has_artifact:
        events.append(ItemAcquiredEvent(item="artifact"))
    if after.corrupted and not before.corrupted:
        events.append(CorruptionEvent())
    if after.befriended_king and not before.befriended_king:
        events.append(KingBefriendedEvent())
    if after.retreat_count > before.retreat_count:
        events.append(RetreatEvent(retreat_count=after.retreat_count))
    if after.scene is not before.scene:
        events.append(SceneChangedEvent(from_scene=before.scene, to_scene=after.scene))
        if after.scene in TERMINAL_SCENES:
            events.append(EndingReachedEvent(scene=after.scene))
    return events


class NarrativeEngine:
    """Owns one playthrough's GameState and applies choices to it."""

    def __init__(self, state: GameState | None = None) -> None:
        self._state = replace(state) if state is not None else GameState()

    @property
    def state(self) -> GameState:
        """Return a copy of the current state; the engine keeps the original."""
        return replace(self._state)

    @property
    def scene(self) -> SceneID:
        return self._state.scene

    @property
    def morality(self) -> int:
        return self._state.morality

    @property
    def has_weapon(self) -> bool:
        return self._state.has_weapon

    @property
    def has_artifact(self) -> bool:
        return self._state.has_artifact

    @property
    def has_retreated_from_dragon(self) -> bool:
        return self._state.has_retreated_from_dragon

    @property
    def retreat_count(self) -> int:
        return self._state.retreat_count

    @property
    def corrupted(self) -> bool:
        return self._state.corrupted

    @property
    def befriended_king(self) -> bool:
        return self._state.befriended_king

    @property
    def is_finished(self) -> bool:
        return self._state.is_terminal

    def available_choices(self) -> Tuple[ChoiceType, ...]:
        return available_choices(self._state)

    def current_description(self) -> str:
        return scene_text.describe(self._state)

    def description_keys(self) -> Tuple[str, ...]:
        return scene_text.description_keys(self._state)

    def choice_label(self, choice: object) -> str:
        return scene_text.choice_label(choice)

    def scene_image_key(self) -> str:
        return scene_text.scene_image_key(self._state)

    def view(self) -> StoryView:
        """Return the view model for the current scene."""
        state = self._state
        return StoryView(
            scene=state.scene,
            description=scene_text.describe(state),
            description_keys=scene_text.description_keys(state),
            choices=[(choice, scene_text.choice_label(choice)) for choice in available_choices(state)],
            image_key=scene_text.scene_image_key(state),
            morality=state.morality,
            has_weapon=state.has_weapon,
            has_artifact=state.has_artifact,
            is_finished=self.is_finished,
        )

    def apply_choice(self, choice: ChoiceType) -> ChoiceResult:
        """Apply the selected choice and advance the story.

        Raises InvalidChoiceError when the choice is not legal right now; the
        state is left untouched in that case.
        """
        state = self._state
        if not is_legal_choice(state, choice):
            allowed = legal_choices(state)
            logger.warning("Rejected choice %r in scene %s", choice, state.scene.name)
            raise InvalidChoiceError(state.scene, choice, allowed)

        before = replace(state)
        ignored_reason = apply_transition(state, choice)
        if ignored_reason is not None:
            logger.info("Choice %s ignored in scene %s: %s", choice.name, state.scene.name, ignored_reason)
            events: List[StoryEvent] = [ChoiceIgnoredEvent(choice=choice, reason=ignored_reason)]
            return ChoiceResult(applied=False, events=events, view=self.view())

        events = _diff_events(before, state)
        logger.debug(
            "%s: %s -> %s (morality %d -> %d)",
            choice.name,
            before.scene.name,
            state.scene.name,
            before.morality,
            state.morality,
        )
        if state.scene in TERMINAL_SCENES:
            logger.info("Ending reached: %s", state.scene.name)
        return ChoiceResult(applied=True, events=events, view=self.view())

    def submit_choice(self, choice: object) -> ChoiceResult:
        """Apply a choice, reporting an illegal one in the result instead of raising."""
        try:
            return self.apply_choice(choice)  # type: ignore[arg-type]
        except InvalidChoiceError as exc:
            return ChoiceResult(applied=False, view=self.view(), error=exc)

    def reset(self) -> None:
        """Discard the current playthrough and start over."""
        self._state = GameState()
        logger.debug("Game state reset")
