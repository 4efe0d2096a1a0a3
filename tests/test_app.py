"""Tests for the Watcher control loop.

The renderer is a MagicMock and events come from a scripted stream, so the
loop runs without a terminal.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tickerwatch.app import Watcher
from tickerwatch.layout import GridLayout, Rect
from tickerwatch.refresh import RefreshCoordinator
from tickerwatch.state.app_state import ApplicationState
from tickerwatch.tui.events import Event, Key, Quit, Resize, Tick


class ScriptedEvents:
    """Hands out a fixed list of events, then Quit forever."""

    def __init__(self, events: list[Event]) -> None:
        self._events = list(events)

    async def next(self) -> Event:
        if self._events:
            return self._events.pop(0)
        return Quit()


def _make_renderer(width: int = 120, height: int = 40) -> MagicMock:
    renderer = MagicMock()
    renderer.viewport.return_value = Rect(0, 0, width, height)
    return renderer


def _make_watcher(
    client: AsyncMock,
    state: ApplicationState,
    events: list[Event],
    renderer: MagicMock | None = None,
) -> Watcher:
    return Watcher(
        state=state,
        coordinator=RefreshCoordinator(client, clock_ms=lambda: 5000),
        layout=GridLayout(),
        events=ScriptedEvents(events),
        renderer=renderer or _make_renderer(),
    )


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


class TestStartup:
    @pytest.mark.asyncio
    async def test_backfill_then_refresh_before_events(
        self, mock_client: AsyncMock, app_state: ApplicationState
    ) -> None:
        watcher = _make_watcher(mock_client, app_state, [Quit()])

        await watcher.run()

        assert mock_client.fetch_history.await_count == 2
        assert mock_client.fetch_snapshot.await_count == 2
        btc = app_state.get("BTCUSDT")
        assert btc.history.prices() == [100.0, 110.0, 105.0, 50000.0]
        assert app_state.status_message == "Updated"
        assert app_state.running is False

    @pytest.mark.asyncio
    async def test_first_frame_drawn_before_any_fetch(
        self, mock_client: AsyncMock, app_state: ApplicationState
    ) -> None:
        renderer = _make_renderer()
        frames: list[tuple[str, int]] = []
        renderer.present.side_effect = lambda: frames.append(
            (app_state.status_message, mock_client.fetch_history.await_count)
        )
        watcher = _make_watcher(mock_client, app_state, [Quit()], renderer)

        await watcher.run()

        # exactly one frame before the history requests, showing the loading state
        assert frames[0] == ("Loading history...", 0)
        assert frames[1][1] == 2


# ---------------------------------------------------------------------------
# Event handling
# ---------------------------------------------------------------------------


class TestEvents:
    @pytest.mark.asyncio
    async def test_tick_triggers_refresh(
        self, mock_client: AsyncMock, app_state: ApplicationState
    ) -> None:
        watcher = _make_watcher(mock_client, app_state, [Tick(), Tick()])
        await watcher.run()
        # one startup round plus one per tick
        assert mock_client.fetch_snapshot.await_count == 2 * 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["r", "R"])
    async def test_refresh_key(
        self, mock_client: AsyncMock, app_state: ApplicationState, code: str
    ) -> None:
        watcher = _make_watcher(mock_client, app_state, [Key(code)])
        await watcher.run()
        assert mock_client.fetch_snapshot.await_count == 2 * 2

    @pytest.mark.asyncio
    async def test_refresh_shows_progress_message(
        self, mock_client: AsyncMock, app_state: ApplicationState
    ) -> None:
        renderer = _make_renderer()
        statuses: list[str] = []
        renderer.present.side_effect = lambda: statuses.append(app_state.status_message)
        watcher = _make_watcher(mock_client, app_state, [Key("r"), Tick()], renderer)

        await watcher.run()

        assert "Refreshing..." in statuses
        assert "Fetching..." in statuses

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["q", "Q", "esc"])
    async def test_quit_keys_stop_loop(
        self, mock_client: AsyncMock, app_state: ApplicationState, code: str
    ) -> None:
        watcher = _make_watcher(mock_client, app_state, [Key(code), Tick()])
        await watcher.run()
        assert app_state.running is False
        # the tick after quit is never handled
        assert mock_client.fetch_snapshot.await_count == 2

    @pytest.mark.asyncio
    async def test_resize_only_redraws(
        self, mock_client: AsyncMock, app_state: ApplicationState
    ) -> None:
        renderer = _make_renderer()
        watcher = _make_watcher(mock_client, app_state, [Resize()], renderer)
        await watcher.run()
        assert mock_client.fetch_snapshot.await_count == 2
        assert renderer.present.call_count >= 4

    @pytest.mark.asyncio
    async def test_error_toggle(
        self, mock_client: AsyncMock, app_state: ApplicationState
    ) -> None:
        watcher = _make_watcher(mock_client, app_state, [])
        await watcher.handle(Key("e"))
        assert app_state.show_errors is True
        await watcher.handle(Key("E"))
        assert app_state.show_errors is False

    @pytest.mark.asyncio
    async def test_unknown_key_ignored(
        self, mock_client: AsyncMock, app_state: ApplicationState
    ) -> None:
        watcher = _make_watcher(mock_client, app_state, [])
        await watcher.handle(Key("x"))
        assert app_state.running is True
        mock_client.fetch_snapshot.assert_not_awaited()


# ---------------------------------------------------------------------------
# Navigation and drawing
# ---------------------------------------------------------------------------


class TestNavigation:
    @pytest.fixture
    def many_symbols(self) -> ApplicationState:
        return ApplicationState([f"C{i}USDT" for i in range(6)])

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("forward", "back"), [("right", "left"), ("j", "k"), ("down", "up")])
    async def test_next_and_prev_pages(
        self,
        mock_client: AsyncMock,
        many_symbols: ApplicationState,
        forward: str,
        back: str,
    ) -> None:
        watcher = _make_watcher(mock_client, many_symbols, [])
        watcher.redraw()

        await watcher.handle(Key(forward))
        assert [s.symbol for s in many_symbols.visible_symbols()] == ["C4USDT", "C5USDT"]

        # already on the last page
        await watcher.handle(Key(forward))
        assert many_symbols.pager.offset == 1

        await watcher.handle(Key(back))
        assert many_symbols.pager.offset == 0

    @pytest.mark.asyncio
    async def test_redraw_places_visible_panes_and_status(
        self, mock_client: AsyncMock, many_symbols: ApplicationState
    ) -> None:
        renderer = _make_renderer(120, 40)
        watcher = _make_watcher(mock_client, many_symbols, [], renderer)

        watcher.redraw()

        renderer.begin.assert_called_once_with(Rect(0, 0, 120, 40))
        drawn = [call.args[1].symbol for call in renderer.draw_chart.call_args_list]
        assert drawn == ["C0USDT", "C1USDT", "C2USDT", "C3USDT"]
        colors = [call.args[3] for call in renderer.draw_chart.call_args_list]
        assert len(set(colors)) == 4
        status_rect = renderer.draw_status.call_args.args[0]
        assert status_rect == Rect(0, 37, 120, 3)
        renderer.present.assert_called_once()

    @pytest.mark.asyncio
    async def test_redraw_with_tiny_terminal(
        self, mock_client: AsyncMock, app_state: ApplicationState
    ) -> None:
        renderer = _make_renderer(10, 2)
        watcher = _make_watcher(mock_client, app_state, [], renderer)
        watcher.redraw()
        renderer.present.assert_called_once()
