"""Narrative text and asset keys derived from the game state.

Every function here is pure: it reads a GameState and returns strings.
Descriptions are assembled from named fragments so callers can inspect
which branch was selected without comparing prose.
"""
from __future__ import annotations

from typing import Dict, Tuple

from storysim.core.types import HEROIC_VICTORY_MORALITY, MAX_RETREATS, ChoiceType, SceneID
from storysim.domain.state import GameState
from storysim.services.errors import NarrativeStateError

UNKNOWN_CHOICE_LABEL = "Unknown choice"

DESCRIPTION_FRAGMENTS: Dict[str, str] = {
    "start": (
        "You stand at a crossroads in a mystical kingdom. To the north a path leads "
        "into a dark forest, rumoured to be full of dangerous creatures but also "
        "hidden treasure. To the south rises a grand castle, home of the King and "
        "his nobles. Which road will you take?"
    ),
    "forest.return": (
        "You return to the forest, searching for a way to grow stronger before you "
        "face the Dragon again. The village you once saw under attack is at peace, "
        "and its people remember you. You have learned much, yet your strength is "
        "still lacking. Somewhere among the trees you sense old magic stirring. "
        "What will you do?"
    ),
    "forest.village": (
        "The forest is full of ancient trees and strange sounds. Deeper in, you come "
        "upon a small village under attack by a terrible monster. The villagers look "
        "desperate."
    ),
    "forest.unguarded_treasure": "You also notice a hidden treasure nearby. It seems unguarded.",
    "castle.friend": (
        "You return to the castle after exploring the forest. The King greets you as "
        "a friend. You feel stronger and ready for what comes next."
    ),
    "castle.court": "The castle is bustling. The guards eye you with suspicion as you enter.",
    "castle.artifact_glow": "Your artifact glows in the presence of the castle's magical aura.",
    "castle.guards_wary": "The guards watch your weapon warily.",
    "castle.summons": "The King summons you to an audience.",
    "showdown": (
        "You have reached the lair of the Ancient Dragon. The great beast guards the "
        "largest hoard and the darkest secrets in the land. Your whole journey has "
        "led you to this moment.\n\nWill you face the Dragon with everything you "
        "have gathered, or fall back to gather greater strength?"
    ),
    "game_over.consumed": (
        "The Dragon senses the curse and the weakness within you. Without a proper "
        "weapon, the ancient magic devours you whole. The Dragon laughs as your body "
        "dissolves into black mist.\n\nGAME OVER"
    ),
    "game_over.caught": "You choose to run. But the Dragon blocks your path.\n\nGAME OVER",
    "game_over.selfish": (
        "Your selfish deeds bring ruin upon yourself. The kingdom falls into darkness "
        "and your name is lost to time.\n\nGAME OVER"
    ),
    "game_over.fallen": (
        "Your good heart was not enough to save you this time. Perhaps fate would be "
        "different on another path.\n\nGAME OVER"
    ),
    "victory.corrupted": (
        "Ancient magic surges through your veins as you slay the Dragon. You seize its "
        "entire hoard, but the curse creeps into your soul, and soon the world will "
        "tremble at your name...\n\nSOULBREAKER VICTORY"
    ),
    "victory.hero": (
        "With a steadfast heart and a clean soul you conquer the darkness. Your name "
        "is carved into history, and your tale will live on in legend.\n\nYOU WIN!"
    ),
    "victory.cunning": (
        "Through wit and guile you defeat the Dragon and claim its treasure. Your "
        "name will be written in the pages of history.\n\nYOU WIN!"
    ),
    "betrayal": (
        "With a sly smile you stab the King in the back. The trust he gave you turns "
        "into bloody betrayal. The kingdom falls into your hands, yet there is no joy "
        "in this victory. The shadow of treachery will haunt the throne you have "
        "seized.\n\nBETRAYAL ENDING - GAME OVER"
    ),
}

CHOICE_LABELS: Dict[ChoiceType, str] = {
    ChoiceType.EXPLORE_FOREST: "Explore the forest",
    ChoiceType.VISIT_CASTLE: "Visit the castle",
    ChoiceType.FIGHT_MONSTER: "Fight the monster",
    ChoiceType.HELP_VILLAGERS: "Help the villagers",
    ChoiceType.STEAL_TREASURE: "Steal the treasure",
    ChoiceType.BEFRIEND_KING: "Befriend the King",
    ChoiceType.CHALLENGE_KING: "Challenge the King",
    ChoiceType.FACE_DRAGON: "Face the Dragon",
    ChoiceType.RETREAT: "Retreat",
    ChoiceType.SEEK_ANCIENT_MAGIC: "Seek ancient magic",
    ChoiceType.TRAIN_WITH_VILLAGERS: "Train with the villagers",
    ChoiceType.BETRAY_KING: "Betray the King",
}


def description_keys(state: GameState) -> Tuple[str, ...]:
    """Return the fragment keys that make up the current scene description."""
    scene = state.scene
    if scene is SceneID.START:
        return ("start",)
    if scene is SceneID.FOREST:
        if state.has_retreated_from_dragon:
            return ("forest.return",)
        if state.morality < 0:
            return ("forest.village", "forest.unguarded_treasure")
        return ("forest.village",)
    if scene is SceneID.CASTLE:
        if state.befriended_king:
            return ("castle.friend",)
        keys = ["castle.court"]
        if state.has_artifact:
            keys.append("castle.artifact_glow")
        if state.has_weapon:
            keys.append("castle.guards_wary")
        keys.append("castle.summons")
        return tuple(keys)
    if scene is SceneID.FINAL_SHOWDOWN:
        return ("showdown",)
    if scene is SceneID.GAME_OVER:
        return ("game_over." + _game_over_variant(state),)
    if scene is SceneID.VICTORY:
        return ("victory." + _victory_variant(state),)
    if scene is SceneID.BETRAYAL_ENDING:
        return ("betrayal",)
    raise NarrativeStateError(f"No description rule for scene {scene!r}.")


def describe(state: GameState) -> str:
    """Return the narrative text for the current scene."""
    return "\n\n".join(DESCRIPTION_FRAGMENTS[key] for key in description_keys(state))


def choice_label(choice: object) -> str:
    """Return the button text for a choice, falling back for unknown values."""
    if isinstance(choice, ChoiceType):
        return CHOICE_LABELS.get(choice, UNKNOWN_CHOICE_LABEL)
    return UNKNOWN_CHOICE_LABEL


def scene_image_key(state: GameState) -> str:
    """Return the art key the presentation layer should show for this scene."""
    scene = state.scene
    if scene is SceneID.START:
        return "crossroads"
    if scene is SceneID.FOREST:
        if state.has_retreated_from_dragon:
            return "forest_return"
        if state.morality < 0:
            return "dark_forest"
        return "forest"
    if scene is SceneID.CASTLE:
        if state.has_artifact and state.has_weapon:
            return "castle_hero"
        if state.has_weapon:
            return "castle_armed"
        if state.has_artifact:
            return "castle_artifact"
        return "castle"
    if scene is SceneID.FINAL_SHOWDOWN:
        return "dragon_lair"
    if scene is SceneID.GAME_OVER:
        return {
            "consumed": "corruption_consumption",
            "caught": "dragon_catches_you",
            "selfish": "dark_ending",
            "fallen": "game_over",
        }[_game_over_variant(state)]
    if scene is SceneID.VICTORY:
        return {
            "corrupted": "corrupted_victory",
            "hero": "hero_victory",
            "cunning": "treasure_victory",
        }[_victory_variant(state)]
    # No dedicated art exists for the betrayal ending.
    return "placeholder"


def _game_over_variant(state: GameState) -> str:
    if state.corrupted and not state.has_weapon:
        return "consumed"
    if state.retreat_count >= MAX_RETREATS:
        return "caught"
    if state.morality < 0:
        return "selfish"
    return "fallen"


def _victory_variant(state: GameState) -> str:
    if state.corrupted:
        return "corrupted"
    if state.morality > HEROIC_VICTORY_MORALITY:
        return "hero"
    return "cunning"
