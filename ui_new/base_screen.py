"""
Base Screen Class

Abstract base class for all dashboard screens.
"""

import pygame
from abc import ABC, abstractmethod
from typing import Optional
from .theme import get_theme


class BaseScreen(ABC):
    """
    Abstract base class for all screens

    The state manager calls on_enter/on_exit around activation and
    handle_input/update/render once per frame while active.
    """

    def __init__(self, screen_name: str):
        self.screen_name = screen_name
        self.active = False
        self.theme = get_theme()

    @abstractmethod
    def on_enter(self):
        self.active = True

    @abstractmethod
    def on_exit(self):
        self.active = False

    @abstractmethod
    def handle_input(self, events: list[pygame.event.Event]) -> Optional[str]:
        """
        Handle input events

        Returns:
            Name of screen to switch to, or None to stay on current screen
        """

    @abstractmethod
    def update(self, dt: float):
        """dt in seconds since the last frame"""

    @abstractmethod
    def render(self, surface: pygame.Surface):
        pass

    def draw_header(self, surface: pygame.Surface, rect: pygame.Rect,
                    title: str, subtitle: str = ""):
        self.theme.draw_panel(surface, rect)
        self.theme.draw_text(surface, self.theme.fonts.title(),
                             rect.x + 12, rect.y + 8,
                             title, self.theme.colors.FG_PRIMARY)
        if subtitle:
            self.theme.draw_text(surface, self.theme.fonts.small(),
                                 rect.right - 12, rect.y + 14,
                                 subtitle, self.theme.colors.FG_DIM, align='right')

    def draw_footer(self, surface: pygame.Surface, rect: pygame.Rect,
                    controls: str):
        """controls: key hints, e.g. "[TAB] Deep space  [V] Sky view" """
        self.theme.draw_panel(surface, rect)
        self.theme.draw_text(surface, self.theme.fonts.small(),
                             rect.x + 12, rect.y + 8,
                             controls, self.theme.colors.FG_DIM)
