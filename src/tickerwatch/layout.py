"""Pane placement and pagination for the chart area.

Two presentation strategies share one interface:

- ``grid``: fixed templates for 1, 2, 3 and 4 panes; paging jumps a full
  page (4 symbols) at a time.
- ``rows``: full-width rows stacked as far as the terminal height allows
  (bounded by a hard cap); scrolling shifts the window by one row.

A deployment picks one strategy (``WATCH_LAYOUT``). Their pagination
semantics are deliberately not merged: ``Pager`` keeps a page index for
``grid`` and a row offset for ``rows``.

Every function here is pure except ``Pager``, which holds the offset.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

STATUS_HEIGHT = 3
GRID_PAGE_SIZE = 4

T = TypeVar("T")


@dataclass(frozen=True)
class Rect:
    """Terminal cell rectangle; ``x``/``y`` are the top-left corner."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


class LayoutStrategy(str, Enum):
    GRID = "grid"
    ROWS = "rows"


def split_status(viewport: Rect) -> tuple[Rect, Rect]:
    """Carve the fixed-height status strip off the bottom of the viewport."""
    status_height = min(STATUS_HEIGHT, viewport.height)
    main_height = viewport.height - status_height
    main = Rect(viewport.x, viewport.y, viewport.width, main_height)
    status = Rect(viewport.x, viewport.y + main_height, viewport.width, status_height)
    return main, status


def _halves(length: int) -> tuple[int, int]:
    first = length // 2
    return first, length - first


def split_columns(area: Rect) -> tuple[Rect, Rect]:
    left_w, right_w = _halves(area.width)
    return (
        Rect(area.x, area.y, left_w, area.height),
        Rect(area.x + left_w, area.y, right_w, area.height),
    )


def split_rows(area: Rect, count: int) -> list[Rect]:
    """Split into ``count`` stacked rows; leading rows absorb the remainder."""
    if count <= 0:
        return []
    base, extra = divmod(area.height, count)
    rects = []
    y = area.y
    for i in range(count):
        height = base + (1 if i < extra else 0)
        rects.append(Rect(area.x, y, area.width, height))
        y += height
    return rects


class GridLayout:
    """Maps a pane count and an area to pane rectangles.

    Args:
        strategy: ``grid`` or ``rows``.
        min_row_height: Smallest row a chart gets in the ``rows`` strategy.
        max_visible: Hard cap on stacked rows in the ``rows`` strategy.
    """

    def __init__(
        self,
        strategy: LayoutStrategy | str = LayoutStrategy.GRID,
        min_row_height: int = 10,
        max_visible: int = 6,
    ) -> None:
        self.strategy = LayoutStrategy(strategy)
        self._min_row_height = max(1, min_row_height)
        self._max_visible = max(1, max_visible)

    def visible_per_page(self, area: Rect) -> int:
        """How many panes fit in ``area`` at once."""
        if self.strategy is LayoutStrategy.GRID:
            return GRID_PAGE_SIZE
        fit = area.height // self._min_row_height
        return min(self._max_visible, max(1, fit))

    def layout(self, pane_count: int, area: Rect) -> list[Rect]:
        """Return one rectangle per visible pane, in pane order."""
        if pane_count <= 0:
            return []
        if self.strategy is LayoutStrategy.ROWS:
            return split_rows(area, min(pane_count, self.visible_per_page(area)))
        return self._grid(pane_count, area)

    @staticmethod
    def _grid(pane_count: int, area: Rect) -> list[Rect]:
        if pane_count == 1:
            return [area]
        if pane_count == 2:
            return list(split_columns(area))
        top_h, bottom_h = _halves(area.height)
        top = Rect(area.x, area.y, area.width, top_h)
        bottom = Rect(area.x, area.y + top_h, area.width, bottom_h)
        bottom_left, bottom_right = split_columns(bottom)
        if pane_count == 3:
            return [top, bottom_left, bottom_right]
        top_left, top_right = split_columns(top)
        return [top_left, top_right, bottom_left, bottom_right]


class Pager:
    """Tracks which window of symbols is visible.

    For ``grid`` the offset is a page index in ``[0, ceil(N / P))``; for
    ``rows`` it is a row index in ``[0, max(0, N - P)]``. Moving past either
    end is a no-op, and resizing clamps the offset back into range.
    """

    def __init__(self, total: int, strategy: LayoutStrategy | str = LayoutStrategy.GRID) -> None:
        self.total = total
        self.strategy = LayoutStrategy(strategy)
        self.per_page = GRID_PAGE_SIZE if self.strategy is LayoutStrategy.GRID else 1
        self.offset = 0

    @property
    def page_count(self) -> int:
        if self.total == 0:
            return 0
        return -(-self.total // self.per_page)

    @property
    def max_offset(self) -> int:
        if self.strategy is LayoutStrategy.GRID:
            return max(0, self.page_count - 1)
        return max(0, self.total - self.per_page)

    @property
    def start(self) -> int:
        if self.strategy is LayoutStrategy.GRID:
            return self.offset * self.per_page
        return self.offset

    def resize(self, per_page: int) -> None:
        """Apply a new page size, keeping the offset valid."""
        per_page = max(1, per_page)
        if per_page == self.per_page:
            return
        # keep the first visible symbol on screen
        first = self.start
        self.per_page = per_page
        if self.strategy is LayoutStrategy.GRID:
            self.offset = first // per_page
        else:
            self.offset = first
        self.offset = min(self.offset, self.max_offset)

    def next(self) -> bool:
        """Move forward; returns False when already at the end."""
        if self.offset >= self.max_offset:
            return False
        self.offset += 1
        return True

    def prev(self) -> bool:
        """Move backward; returns False when already at the start."""
        if self.offset <= 0:
            return False
        self.offset -= 1
        return True

    def window(self, items: list[T]) -> list[T]:
        return items[self.start : self.start + self.per_page]

    def page_label(self) -> str:
        """Position indicator, empty when everything fits on one screen."""
        if self.total <= self.per_page:
            return ""
        if self.strategy is LayoutStrategy.GRID:
            return f"Page {self.offset + 1}/{self.page_count}"
        end = min(self.total, self.start + self.per_page)
        return f"{self.start + 1}-{end} of {self.total}"
