"""
UI Theme - phosphor radar console

Colors, fonts and small drawing helpers shared by the screens and the
radar renderer.
"""

import pygame
from typing import Tuple
from dataclasses import dataclass


class Colors:
    """
    Radar console palette

    Phosphor green for the scope itself, white for the primary object,
    amber for the selection and its orbit path.
    """

    # Background colors
    BG_DARK = (0, 12, 10)
    BG_PANEL = (0, 20, 15)
    BG_SCOPE = (0, 18, 12)

    # Foreground colors (phosphor green)
    FG_PRIMARY = (0, 255, 120)
    FG_DIM = (0, 180, 80)
    FG_DARK = (0, 120, 50)
    FG_BRIGHT = (120, 255, 180)
    GRID = (0, 90, 45)

    # Tracking colors
    PRIMARY_OBJECT = (255, 255, 255)
    SELECTED = (255, 176, 0)        # amber
    ORBIT_PATH = (255, 176, 0)
    HOVER = (0, 255, 255)
    SWEEP = (0, 255, 120)
    STAR = (200, 215, 255)
    CONSTELLATION = (40, 70, 110)

    # Status
    WARNING = (255, 255, 0)

    @staticmethod
    def lerp_color(color1: Tuple[int, int, int],
                   color2: Tuple[int, int, int],
                   t: float) -> Tuple[int, int, int]:
        t = max(0.0, min(1.0, t))
        r = int(color1[0] + (color2[0] - color1[0]) * t)
        g = int(color1[1] + (color2[1] - color1[1]) * t)
        b = int(color1[2] + (color2[2] - color1[2]) * t)
        return (r, g, b)


@dataclass
class FontConfig:
    """Font configuration"""
    families: Tuple[str, ...] = ("Consolas", "Courier New", "DejaVu Sans Mono", "monospace")
    size_title: int = 24
    size_normal: int = 18
    size_small: int = 14
    size_tiny: int = 12
    bold_title: bool = True


class Fonts:
    """
    Font manager

    Picks the first installed monospaced family and caches one font per size;
    falls back to pygame's bundled font when none is installed.
    """

    _initialized = False
    _fonts: dict = {}
    _config = FontConfig()

    @classmethod
    def initialize(cls, config: FontConfig = None):
        if config is not None:
            cls._config = config
        pygame.font.init()

        cfg = cls._config
        sizes = {
            'title': cfg.size_title,
            'normal': cfg.size_normal,
            'small': cfg.size_small,
            'tiny': cfg.size_tiny,
        }
        family = next((f for f in cfg.families if pygame.font.match_font(f)), None)
        for name, size in sizes.items():
            bold = cfg.bold_title and name == 'title'
            if family is not None:
                cls._fonts[name] = pygame.font.SysFont(family, size, bold=bold)
            else:
                cls._fonts[name] = pygame.font.Font(None, size)
        cls._initialized = True

    @classmethod
    def get(cls, size: str = 'normal') -> pygame.font.Font:
        if not cls._initialized:
            cls.initialize()
        return cls._fonts.get(size, cls._fonts['normal'])

    @classmethod
    def title(cls) -> pygame.font.Font:
        return cls.get('title')

    @classmethod
    def normal(cls) -> pygame.font.Font:
        return cls.get('normal')

    @classmethod
    def small(cls) -> pygame.font.Font:
        return cls.get('small')

    @classmethod
    def tiny(cls) -> pygame.font.Font:
        return cls.get('tiny')


class Theme:
    """Colors and fonts plus the panel border width."""

    def __init__(self):
        self.colors = Colors()
        self.fonts = Fonts()
        self.border_width = 2

    def draw_panel(self, surface: pygame.Surface, rect: pygame.Rect,
                   title: str = "",
                   fg_color: Tuple[int, int, int] = None,
                   bg_color: Tuple[int, int, int] = None):
        fg_color = fg_color or self.colors.FG_PRIMARY
        bg_color = bg_color or self.colors.BG_PANEL
        pygame.draw.rect(surface, bg_color, rect)
        pygame.draw.rect(surface, fg_color, rect, self.border_width)
        if title:
            self.draw_text(surface, self.fonts.normal(), rect.x + 10, rect.y + 8, title, fg_color)

    def draw_text(self, surface: pygame.Surface, font: pygame.font.Font,
                  x: int, y: int, text: str, color: Tuple[int, int, int],
                  align: str = 'left'):
        """Draw text without antialiasing; align is 'left', 'center' or 'right'."""
        rendered = font.render(text, False, color)
        if align == 'center':
            x -= rendered.get_width() // 2
        elif align == 'right':
            x -= rendered.get_width()
        surface.blit(rendered, (x, y))

    def draw_progress_bar(self, surface: pygame.Surface, rect: pygame.Rect,
                          progress: float, color: Tuple[int, int, int] = None):
        """progress in 0-1"""
        color = color or self.colors.FG_PRIMARY
        pygame.draw.rect(surface, self.colors.FG_PRIMARY, rect, self.border_width)
        fill_width = int((rect.width - 4) * max(0.0, min(1.0, progress)))
        if fill_width > 0:
            pygame.draw.rect(surface, color, pygame.Rect(rect.x + 2, rect.y + 2, fill_width, rect.height - 4))


_theme = None


def get_theme() -> Theme:
    """Global theme instance"""
    global _theme
    if _theme is None:
        _theme = Theme()
        _theme.fonts.initialize()
    return _theme
