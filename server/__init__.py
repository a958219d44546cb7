"""
HTTP and WebSocket bridge that lets a browser drive local trivia games.

The FastAPI application lives in ``server.app``.
"""

from .registry import GameRegistry  # noqa: F401
