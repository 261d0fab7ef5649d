"""Console-driven UI loop for the story simulator."""
from __future__ import annotations

import logging
from typing import Callable, Literal

from storysim.presentation.cli.config import CliConfig, load_config
from storysim.presentation.cli.render import (
    debug_enabled,
    format_inventory,
    format_morality,
    render_description,
    render_heading,
    render_menu,
)
from storysim.services import ChoiceIgnoredEvent, InvalidChoiceError, NarrativeEngine, StoryView

logger = logging.getLogger(__name__)

EndAction = Literal["play_again", "quit"]
InputFn = Callable[[str], str]

_END_OPTIONS: list[tuple[str, EndAction]] = [("Play again", "play_again"), ("Quit", "quit")]


def main(config: CliConfig | None = None, input_fn: InputFn = input) -> None:
    """Start the interactive CLI session."""
    settings = config if config is not None else load_config()
    engine = NarrativeEngine()
    print("=== Interactive Story Simulator ===")
    run_session(engine, settings, input_fn)
    print("Goodbye!")


def run_session(engine: NarrativeEngine, config: CliConfig, input_fn: InputFn = input) -> None:
    """Play until the player quits from an ending screen."""
    while True:
        view = engine.view()
        render_view(view, config)
        if view.is_finished:
            if _end_menu(input_fn) == "quit":
                return
            engine.reset()
            continue
        index = prompt_choice(len(view.choices), input_fn)
        choice, _label = view.choices[index]
        try:
            result = engine.apply_choice(choice)
        except InvalidChoiceError:
            logger.exception("Engine rejected an offered choice")
            raise
        for event in result.events:
            if isinstance(event, ChoiceIgnoredEvent):
                print(f"\n{event.reason}")


def render_view(view: StoryView, config: CliConfig) -> None:
    width = int(config.get("text_width", 78))
    heading = view.scene.name.replace("_", " ").title()
    if debug_enabled():
        heading = f"{heading} [{view.scene.name} | {'+'.join(view.description_keys)}]"
    render_heading(heading)
    if config.get("show_scene_art") or debug_enabled():
        print(f"(art: {view.image_key})")
    render_description(view.description, width)
    print()
    print(format_morality(view.morality))
    print(format_inventory(view.has_weapon, view.has_artifact))
    if view.choices:
        render_menu("Choices", [label for _choice, label in view.choices])


def prompt_choice(choice_count: int, input_fn: InputFn = input) -> int:
    while True:
        raw = input_fn("Select an option: ").strip()
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < choice_count:
            return index
        print(f"Please enter a value between 1 and {choice_count}.")


def _end_menu(input_fn: InputFn) -> EndAction:
    render_menu("The End", [label for label, _ in _END_OPTIONS])
    index = prompt_choice(len(_END_OPTIONS), input_fn)
    return _END_OPTIONS[index][1]
