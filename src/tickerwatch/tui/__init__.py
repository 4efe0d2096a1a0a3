"""Terminal layer -- event source, braille charts and the rich renderer."""

from tickerwatch.tui.events import EventSource, Key, Quit, Resize, TerminalSession, Tick
from tickerwatch.tui.renderer import CHART_COLORS, Renderer

__all__ = [
    "CHART_COLORS",
    "EventSource",
    "Key",
    "Quit",
    "Renderer",
    "Resize",
    "TerminalSession",
    "Tick",
]
