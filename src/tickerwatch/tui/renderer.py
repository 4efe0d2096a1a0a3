"""Rich-based renderer: draws chart panes and the status strip into a frame.

Panes are rendered independently into the rectangles computed by
``GridLayout`` and stitched together line by line, so the layout module
stays the single source of placement.
"""

from rich.console import Console, ConsoleOptions, RenderResult
from rich.live import Live
from rich.panel import Panel
from rich.segment import Segment
from rich.style import Style
from rich.text import Text

from tickerwatch.formatting import (
    format_change,
    format_compact_currency,
    format_compact_magnitude,
    format_currency,
)
from tickerwatch.layout import Rect
from tickerwatch.state.app_state import ApplicationState
from tickerwatch.state.symbol_state import ChartProjection, SymbolState
from tickerwatch.tui.chart import LineChart

# Synthwave palette
PINK = "#ff2e97"
CYAN = "#00f0ff"
POSITIVE = "#39ff14"
BORDER = "#3d1a78"
MUTED = "#6b5b95"
TEXT = "#f0f0f0"

CHART_COLORS = (
    "#ff2e97",  # hot pink
    "#00f0ff",  # cyan
    "#9d4edd",  # purple
    "#f72585",  # magenta
    "#4cc9f0",  # light blue
    "#7209b7",  # deep violet
)

_SEPARATOR = (" │ ", BORDER)


class Frame:
    """A full-screen frame assembled from pre-rendered rectangles."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._blocks: list[tuple[Rect, list[list[Segment]]]] = []

    def place(self, rect: Rect, lines: list[list[Segment]]) -> None:
        self._blocks.append((rect, lines))

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        for y in range(self.height):
            cursor = 0
            row_blocks = sorted(
                ((rect, lines) for rect, lines in self._blocks if rect.y <= y < rect.bottom),
                key=lambda block: block[0].x,
            )
            for rect, lines in row_blocks:
                if rect.x > cursor:
                    yield Segment(" " * (rect.x - cursor))
                line_index = y - rect.y
                if line_index < len(lines):
                    yield from Segment.adjust_line_length(lines[line_index], rect.width)
                else:
                    yield Segment(" " * rect.width)
                cursor = rect.right
            if cursor < self.width:
                yield Segment(" " * (self.width - cursor))
            if y < self.height - 1:
                yield Segment.line()


def chart_title(symbol: SymbolState, color: str) -> Text:
    """Pane title: label, price, 24h change, high/low and volume."""
    change_color = POSITIVE if symbol.is_up else PINK
    return Text.assemble(
        ("◈ ", PINK),
        (symbol.label, Style(color=color, bold=True)),
        _SEPARATOR,
        (format_currency(symbol.price), Style(color=TEXT, bold=True)),
        _SEPARATOR,
        (format_change(symbol.change_24h), change_color),
        _SEPARATOR,
        (
            f"H:{format_compact_currency(symbol.high_24h)} "
            f"L:{format_compact_currency(symbol.low_24h)}",
            MUTED,
        ),
        _SEPARATOR,
        (f"Vol:{format_compact_magnitude(symbol.volume_24h)}", MUTED),
        (" ◈", PINK),
    )


def status_line(state: ApplicationState) -> Text:
    """Single-line status readout: key hints, page, last update, status."""
    page = state.pager.page_label()
    errors = state.errors()
    key = Style(color=CYAN, bold=True)

    text = Text.assemble(
        " ",
        ("Q", key),
        ("·Quit  ", MUTED),
        ("R", key),
        ("·Refresh  ", MUTED),
    )
    if page:
        text.append_text(Text.assemble(("←→", key), ("·Page  ", MUTED)))
    if errors:
        text.append_text(Text.assemble(("E", key), ("·Errors  ", MUTED)))
    text.append("        ")
    if page:
        text.append(f"{page}  ", style=PINK)
    text.append(f"Updated {state.last_update_str()}", style=MUTED)
    text.append("  ")
    text.append(state.status_message, style=CYAN)
    if state.show_errors and errors:
        detail = "; ".join(f"{symbol}: {message}" for symbol, message in errors.items())
        text.append(f"  {detail}", style=PINK)
    text.no_wrap = True
    text.overflow = "ellipsis"
    return text


class Renderer:
    """Draws panes and the status strip, then pushes the frame to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._live: Live | None = None
        self._frame = Frame(0, 0)

    def __enter__(self) -> "Renderer":
        self._live = Live(
            console=self.console,
            screen=True,
            auto_refresh=False,
            transient=True,
        )
        self._live.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def viewport(self) -> Rect:
        width, height = self.console.size
        return Rect(0, 0, width, height)

    def begin(self, viewport: Rect) -> None:
        self._frame = Frame(viewport.width, viewport.height)

    def _render_into(self, rect: Rect, renderable) -> None:
        if rect.width <= 0 or rect.height <= 0:
            return
        options = self.console.options.update_dimensions(rect.width, rect.height)
        lines = self.console.render_lines(renderable, options, pad=True)
        self._frame.place(rect, lines)

    def draw_chart(
        self,
        rect: Rect,
        symbol: SymbolState,
        projection: ChartProjection,
        color: str,
    ) -> None:
        chart = LineChart(
            points=projection.points,
            x_bounds=projection.x_bounds,
            y_bounds=projection.y_bounds,
            x_labels=projection.x_labels,
            y_labels=projection.y_labels,
            color=color,
            axis_style=MUTED,
        )
        panel = Panel(
            chart,
            title=chart_title(symbol, color),
            title_align="left",
            border_style=BORDER,
            padding=0,
        )
        self._render_into(rect, panel)

    def draw_status(self, rect: Rect, text: Text) -> None:
        panel = Panel(text, border_style=BORDER, padding=0)
        self._render_into(rect, panel)

    def present(self) -> Frame:
        if self._live is not None:
            self._live.update(self._frame, refresh=True)
        return self._frame
