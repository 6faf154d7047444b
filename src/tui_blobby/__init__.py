"""TUI Blobby - a terminal pregnancy timeline planner."""

__version__ = "0.1.0"
