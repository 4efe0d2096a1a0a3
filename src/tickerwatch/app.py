"""Control loop -- wires state, refresh rounds, layout, events and rendering.

Startup runs one history backfill and one snapshot round, then the loop
handles one event at a time:

  Tick        -> snapshot round
  Key('r')    -> snapshot round (manual refresh)
  Key(nav)    -> move the page / row window
  Key('e')    -> toggle the error detail view
  Key('q'/esc), Quit -> stop
  Resize      -> redraw only

A round is awaited in full before the next event is read, so rounds never
overlap and state is only ever mutated here.
"""

from __future__ import annotations

from typing import Protocol

from rich.text import Text

from tickerwatch.layout import GridLayout, Rect, split_status
from tickerwatch.logging import get_logger
from tickerwatch.refresh import RefreshCoordinator
from tickerwatch.state.app_state import ApplicationState
from tickerwatch.state.symbol_state import ChartProjection, SymbolState
from tickerwatch.tui.events import Event, Key, Quit, Resize, Tick
from tickerwatch.tui.renderer import CHART_COLORS, status_line

logger = get_logger(__name__)

QUIT_KEYS = {"q", "Q", "esc"}
REFRESH_KEYS = {"r", "R"}
NEXT_KEYS = {"right", "down", "l", "j"}
PREV_KEYS = {"left", "up", "h", "k"}
ERROR_KEYS = {"e", "E"}


class EventStream(Protocol):
    async def next(self) -> Event: ...


class FrameRenderer(Protocol):
    """Drawing surface the loop paints into; see ``tui.renderer.Renderer``."""

    def viewport(self) -> Rect: ...

    def begin(self, viewport: Rect) -> None: ...

    def draw_chart(
        self,
        rect: Rect,
        symbol: SymbolState,
        projection: ChartProjection,
        color: str,
    ) -> None: ...

    def draw_status(self, rect: Rect, text: Text) -> None: ...

    def present(self) -> object: ...


class Watcher:
    """Runs the live price watcher.

    Args:
        state: Application state built from the validated symbols.
        coordinator: Refresh round runner.
        layout: Pane placement strategy.
        events: Event source.
        renderer: Frame drawing surface.
    """

    def __init__(
        self,
        state: ApplicationState,
        coordinator: RefreshCoordinator,
        layout: GridLayout,
        events: EventStream,
        renderer: FrameRenderer,
    ) -> None:
        self._state = state
        self._coordinator = coordinator
        self._layout = layout
        self._events = events
        self._renderer = renderer

    @property
    def state(self) -> ApplicationState:
        return self._state

    async def run(self) -> None:
        logger.info("watcher_starting", symbols=self._state.symbol_ids())
        await self._coordinator.backfill(self._state, on_start=self.redraw)
        self.redraw()
        await self._coordinator.refresh_all(self._state)

        while self._state.running:
            self.redraw()
            event = await self._events.next()
            await self.handle(event)

        logger.info("watcher_stopped")

    async def handle(self, event: Event) -> None:
        """Apply one event to the state."""
        if isinstance(event, Tick):
            await self._refresh("Fetching...")
        elif isinstance(event, Key):
            await self._handle_key(event.code)
        elif isinstance(event, Quit):
            self._state.quit()
        elif isinstance(event, Resize):
            logger.debug("terminal_resized")

    async def _handle_key(self, code: str) -> None:
        if code in QUIT_KEYS:
            self._state.quit()
        elif code in REFRESH_KEYS:
            await self._refresh("Refreshing...")
        elif code in NEXT_KEYS:
            self._state.scroll_down()
        elif code in PREV_KEYS:
            self._state.scroll_up()
        elif code in ERROR_KEYS:
            self._state.toggle_errors()

    async def _refresh(self, message: str) -> None:
        self._state.status_message = message
        self.redraw()
        await self._coordinator.refresh_all(self._state)

    def redraw(self) -> None:
        """Project every visible symbol, place it and hand it to the renderer."""
        viewport = self._renderer.viewport()
        main, status = split_status(viewport)
        self._state.pager.resize(self._layout.visible_per_page(main))

        visible = self._state.visible_symbols()
        rects = self._layout.layout(len(visible), main)

        self._renderer.begin(viewport)
        for i, (symbol, rect) in enumerate(zip(visible, rects)):
            color = CHART_COLORS[i % len(CHART_COLORS)]
            self._renderer.draw_chart(rect, symbol, symbol.chart_projection(), color)
        self._renderer.draw_status(status, status_line(self._state))
        self._renderer.present()
