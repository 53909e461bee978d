"""
UI Components - Reusable UI Elements

- Button: clickable button with hover/pressed states
- SelectList: keyboard/mouse selectable list of rows
"""

import pygame
from typing import Optional, Callable, Sequence, Tuple
from dataclasses import dataclass
from .theme import get_theme


@dataclass
class ButtonState:
    hovered: bool = False
    pressed: bool = False


class Button:
    """Button that fires its callback on mouse release inside its rect."""

    def __init__(self, x: int, y: int, width: int, height: int,
                 text: str, callback: Optional[Callable[[], None]] = None):
        self.rect = pygame.Rect(x, y, width, height)
        self.text = text
        self.callback = callback
        self.state = ButtonState()
        self.enabled = True
        self.theme = get_theme()

    def handle_event(self, event: pygame.event.Event) -> bool:
        """True if the event was consumed"""
        if not self.enabled:
            return False

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.state.pressed = True
                return True

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            was_pressed = self.state.pressed
            self.state.pressed = False
            if was_pressed and self.rect.collidepoint(event.pos):
                if self.callback:
                    self.callback()
                return True

        return False

    def update(self, mouse_pos: Tuple[int, int]):
        self.state.hovered = self.enabled and self.rect.collidepoint(mouse_pos)

    def draw(self, surface: pygame.Surface):
        c = self.theme.colors
        if not self.enabled:
            bg, fg = c.BG_PANEL, c.FG_DARK
        elif self.state.pressed:
            bg, fg = c.SELECTED, c.BG_DARK
        elif self.state.hovered:
            bg, fg = c.BG_SCOPE, c.HOVER
        else:
            bg, fg = c.BG_PANEL, c.FG_PRIMARY

        pygame.draw.rect(surface, bg, self.rect)
        pygame.draw.rect(surface, fg, self.rect, 2)
        font = self.theme.fonts.normal()
        self.theme.draw_text(surface, font,
                             self.rect.centerx, self.rect.centery - font.get_height() // 2,
                             self.text, fg, align='center')

    def set_enabled(self, enabled: bool):
        self.enabled = enabled
        if not enabled:
            self.state = ButtonState()


class SelectList:
    """
    Vertical list with a single selected row.

    on_change(index) fires only when the selection actually moves.
    """

    def __init__(self, rect: pygame.Rect, row_height: int = 26,
                 on_change: Optional[Callable[[int], None]] = None):
        self.rect = rect
        self.row_height = row_height
        self.items: Sequence[str] = ()
        self.selected = 0
        self.on_change = on_change
        self.theme = get_theme()

    def set_items(self, items: Sequence[str]):
        self.items = list(items)
        self.selected = min(self.selected, max(0, len(self.items) - 1))

    def select(self, index: int):
        if not self.items:
            return
        index = max(0, min(len(self.items) - 1, index))
        if index != self.selected:
            self.selected = index
            if self.on_change:
                self.on_change(index)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_UP:
                self.select(self.selected - 1)
                return True
            if event.key == pygame.K_DOWN:
                self.select(self.selected + 1)
                return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if self.rect.collidepoint(event.pos):
                row = (event.pos[1] - self.rect.y - 4) // self.row_height
                if 0 <= row < len(self.items):
                    self.select(row)
                    return True
        return False

    def draw(self, surface: pygame.Surface):
        c = self.theme.colors
        self.theme.draw_panel(surface, self.rect)
        font = self.theme.fonts.small()
        for i, text in enumerate(self.items):
            y = self.rect.y + 4 + i * self.row_height
            if y + self.row_height > self.rect.bottom:
                break
            if i == self.selected:
                pygame.draw.rect(surface, c.BG_SCOPE,
                                 pygame.Rect(self.rect.x + 3, y, self.rect.width - 6, self.row_height - 2))
            color = c.SELECTED if i == self.selected else c.FG_DIM
            self.theme.draw_text(surface, font, self.rect.x + 10, y + 5, text, color)
