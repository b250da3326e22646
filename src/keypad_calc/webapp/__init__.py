"""
Web application front-end for keypad-calc.

Provides a keypad UI and a JSON API backed by per-session calculator state.
"""

from .server import app

__all__ = ["app"]
