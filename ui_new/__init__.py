"""
UI Module - theme, components and dashboard screens
"""
from .theme import get_theme, Colors, Fonts
from .base_screen import BaseScreen
from .components import Button, SelectList

__all__ = [
    "get_theme", "Colors", "Fonts",
    "BaseScreen",
    "Button", "SelectList",
]
