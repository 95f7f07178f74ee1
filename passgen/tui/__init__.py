"""
passgen TUI — Textual front-end for the vault session.
"""

from __future__ import annotations

from passgen.tui.app import PassgenApp

__all__ = ["PassgenApp"]
