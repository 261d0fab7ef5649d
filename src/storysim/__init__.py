"""Interactive Story Simulator: a branching-narrative engine."""

__version__ = "0.1.0"
