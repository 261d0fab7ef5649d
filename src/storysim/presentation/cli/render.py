"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
import textwrap
from typing import List, Sequence

_GAUGE_WIDTH = 20


def debug_enabled() -> bool:
    """Return True only when STORYSIM_DEBUG is explicitly set to '1'."""
    return os.getenv("STORYSIM_DEBUG") == "1"


def wrap_paragraphs(text: str, width: int) -> List[str]:
    """Wrap each paragraph on word boundaries, keeping blank lines between them."""
    if not text:
        return [""]
    lines: List[str] = []
    for paragraph in text.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        lines.extend(
            textwrap.wrap(paragraph, width=width, break_long_words=False, break_on_hyphens=False)
        )
    return lines


def morality_ratio(morality: int) -> float:
    """Map morality onto [0, 1], treating -100 and 100 as the extremes."""
    return max(0.0, min(1.0, (morality + 100) / 200.0))


def morality_tier(morality: int) -> str:
    if morality > 30:
        return "radiant"
    if morality > 0:
        return "good"
    if morality > -30:
        return "wavering"
    return "dark"


def format_morality(morality: int) -> str:
    filled = round(morality_ratio(morality) * _GAUGE_WIDTH)
    gauge = "#" * filled + "-" * (_GAUGE_WIDTH - filled)
    return f"Morality: {morality} [{gauge}] ({morality_tier(morality)})"


def format_inventory(has_weapon: bool, has_artifact: bool) -> str:
    items = []
    if has_weapon:
        items.append("Legendary Weapon")
    if has_artifact:
        items.append("Ancient Artifact")
    return "Bag: " + (", ".join(items) if items else "Empty")


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_description(text: str, width: int) -> None:
    for line in wrap_paragraphs(text, width):
        print(line)


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")
