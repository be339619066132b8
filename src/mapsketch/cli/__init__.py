"""CLI module for mapsketch.

Provides the command-line interface for replaying recorded drawing
sessions, inspecting limits and rendering exported collections.
"""

from __future__ import annotations

from mapsketch.cli.main import app

__all__ = ["app"]
