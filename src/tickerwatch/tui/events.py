"""Terminal event source: timer ticks, key presses, resizes and quit requests.

Everything is delivered through one asyncio queue consumed by the control
loop, one event at a time. Stdin is read with ``loop.add_reader`` while the
terminal is in cbreak mode, SIGWINCH becomes ``Resize`` and SIGINT/SIGTERM
become ``Quit``.

Ticks are coalesced: while a ``Tick`` is waiting in the queue (for instance
during a slow refresh round) no further ticks are queued, so rounds never
pile up behind each other.
"""

import asyncio
import os
import signal
import sys
import termios
import tty
from dataclasses import dataclass

from tickerwatch.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Key:
    code: str


@dataclass(frozen=True)
class Resize:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Event = Tick | Key | Resize | Quit

_ESCAPE_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
}


_SEQUENCE_INTRODUCERS = ("[", "O")

# how long a trailing ESC waits for the rest of a sequence
ESCAPE_TIMEOUT = 0.05


class KeyDecoder:
    """Incremental decoder from raw stdin text to key codes.

    Arrow escape sequences become ``up``/``down``/``left``/``right``. ESC
    followed by anything other than ``[`` or ``O`` is ``esc`` plus that key.
    Unknown CSI/SS3 sequences are dropped. An ESC or sequence cut off at
    the end of a chunk is held until the next ``feed`` or ``flush``.
    """

    def __init__(self) -> None:
        self._pending = ""

    @property
    def pending(self) -> bool:
        return bool(self._pending)

    def feed(self, data: str) -> list[str]:
        data = self._pending + data
        self._pending = ""
        keys: list[str] = []
        i = 0
        while i < len(data):
            ch = data[i]
            if ch != "\x1b":
                keys.append(ch)
                i += 1
                continue
            if i + 1 == len(data):
                self._pending = data[i:]
                break
            if data[i + 1] not in _SEQUENCE_INTRODUCERS:
                keys.append("esc")
                i += 1
                continue
            seq = data[i : i + 3]
            if seq in _ESCAPE_SEQUENCES:
                keys.append(_ESCAPE_SEQUENCES[seq])
                i += 3
                continue
            # unknown CSI/SS3 sequence: skip to its final byte
            j = i + 2
            while j < len(data) and not ("@" <= data[j] <= "~"):
                j += 1
            if j >= len(data):
                self._pending = data[i:]
                break
            i = j + 1
        return keys

    def flush(self) -> list[str]:
        """Give up waiting: a held ESC is a real Esc press."""
        pending, self._pending = self._pending, ""
        if not pending:
            return []
        return ["esc", *pending[1:]]


def parse_keys(data: str) -> list[str]:
    """Decode one complete chunk of raw stdin into key codes."""
    decoder = KeyDecoder()
    return decoder.feed(data) + decoder.flush()


class EventSource:
    """Produces ``Tick``/``Key``/``Resize``/``Quit`` events for the control loop.

    Args:
        tick_interval: Seconds between ``Tick`` events.
        stdin_fd: File descriptor to read keys from; None disables key input.
    """

    def __init__(self, tick_interval: float, stdin_fd: int | None = None) -> None:
        self._tick_interval = tick_interval
        self._stdin_fd = stdin_fd
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._tick_pending = False
        self._tick_task: asyncio.Task | None = None  # type: ignore[type-arg]
        self._signals: list[int] = []
        self._decoder = KeyDecoder()
        self._escape_timer: asyncio.TimerHandle | None = None

    def start(self) -> None:
        """Attach to the running loop: timer, stdin reader, signal handlers."""
        loop = asyncio.get_running_loop()
        self._tick_task = asyncio.create_task(self._tick_loop())
        if self._stdin_fd is not None:
            loop.add_reader(self._stdin_fd, self._on_stdin)
        for sig, event in (
            (signal.SIGWINCH, Resize()),
            (signal.SIGINT, Quit()),
            (signal.SIGTERM, Quit()),
        ):
            loop.add_signal_handler(sig, self.post, event)
            self._signals.append(sig)
        logger.debug("event_source_started", tick_interval=self._tick_interval)

    async def stop(self) -> None:
        loop = asyncio.get_running_loop()
        if self._stdin_fd is not None:
            loop.remove_reader(self._stdin_fd)
        self._cancel_escape_timer()
        for sig in self._signals:
            loop.remove_signal_handler(sig)
        self._signals.clear()
        if self._tick_task is not None:
            self._tick_task.cancel()
            try:
                await self._tick_task
            except asyncio.CancelledError:
                pass
            self._tick_task = None

    def post(self, event: Event) -> None:
        """Queue an event; extra ticks are dropped while one is pending."""
        if isinstance(event, Tick):
            if self._tick_pending:
                return
            self._tick_pending = True
        self._queue.put_nowait(event)

    async def next(self) -> Event:
        """Suspend until the next event arrives."""
        event = await self._queue.get()
        if isinstance(event, Tick):
            self._tick_pending = False
        return event

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            self.post(Tick())

    def _on_stdin(self) -> None:
        try:
            data = os.read(self._stdin_fd, 64)  # type: ignore[arg-type]
        except OSError:
            logger.warning("stdin_read_failed", exc_info=True)
            return
        loop = asyncio.get_running_loop()
        self._cancel_escape_timer()
        if not data:
            # stdin closed, nothing more will come
            loop.remove_reader(self._stdin_fd)  # type: ignore[arg-type]
            self._flush_keys()
            return
        for code in self._decoder.feed(data.decode("utf-8", "ignore")):
            self.post(Key(code))
        if self._decoder.pending:
            self._escape_timer = loop.call_later(ESCAPE_TIMEOUT, self._flush_keys)

    def _flush_keys(self) -> None:
        self._escape_timer = None
        for code in self._decoder.flush():
            self.post(Key(code))

    def _cancel_escape_timer(self) -> None:
        if self._escape_timer is not None:
            self._escape_timer.cancel()
            self._escape_timer = None


class TerminalSession:
    """Context manager putting an interactive stdin into cbreak mode.

    Restores the original terminal attributes on exit. When stdin is not a
    TTY it does nothing and ``fd`` stays None.
    """

    def __init__(self) -> None:
        self.fd: int | None = None
        self._old_settings: list | None = None

    def __enter__(self) -> "TerminalSession":
        if sys.stdin.isatty():
            self.fd = sys.stdin.fileno()
            self._old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.fd is not None and self._old_settings is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._old_settings)
        self.fd = None
        self._old_settings = None
