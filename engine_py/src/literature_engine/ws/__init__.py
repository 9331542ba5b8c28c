"""
WebSocket server and event handling for the Literature game.
"""

from .events import *
from .server import create_app

__all__ = ["create_app"]
