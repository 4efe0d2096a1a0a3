"""Braille line chart as a rich renderable.

Each terminal cell holds a 2x4 braille dot matrix, so a plot of W x H cells
has a resolution of 2W x 4H dots. Consecutive points are joined with
straight segments.
"""

from dataclasses import dataclass

from rich.console import Console, ConsoleOptions, RenderResult
from rich.segment import Segment
from rich.style import Style

_BRAILLE_BASE = 0x2800
# dot bit for (column, row) inside one cell
_DOT_BITS = (
    (0x01, 0x02, 0x04, 0x40),
    (0x08, 0x10, 0x20, 0x80),
)


def _segment_dots(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    """Bresenham line between two dot coordinates, both ends included."""
    dots = []
    dx, dy = abs(x1 - x0), -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        dots.append((x0, y0))
        if x0 == x1 and y0 == y1:
            return dots
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


class BrailleCanvas:
    """Dot grid of ``width`` x ``height`` cells."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._cells = [[0] * width for _ in range(height)]

    def set(self, x: int, y: int) -> None:
        """Set a dot; ``y`` counts down from the top. Out-of-range dots are ignored."""
        if 0 <= x < self.width * 2 and 0 <= y < self.height * 4:
            self._cells[y // 4][x // 2] |= _DOT_BITS[x % 2][y % 4]

    def line(self, x0: int, y0: int, x1: int, y1: int) -> None:
        for x, y in _segment_dots(x0, y0, x1, y1):
            self.set(x, y)

    def rows(self) -> list[str]:
        return ["".join(chr(_BRAILLE_BASE + bits) for bits in row) for row in self._cells]


@dataclass
class LineChart:
    """Line chart with a Y label column and a three-label time axis."""

    points: list[tuple[float, float]]
    x_bounds: tuple[float, float]
    y_bounds: tuple[float, float]
    x_labels: list[str]
    y_labels: list[str]
    color: str = "cyan"
    axis_style: str = "grey50"

    def _plot(self, width: int, height: int) -> list[str]:
        canvas = BrailleCanvas(width, height)
        x_min, x_max = self.x_bounds
        y_min, y_max = self.y_bounds
        x_span = (x_max - x_min) or 1.0
        y_span = y_max - y_min
        dots_w = width * 2 - 1
        dots_h = height * 4 - 1

        dots = []
        for x, y in self.points:
            dx = round((x - x_min) / x_span * dots_w)
            # flat series sits in the middle of the plot
            ratio = (y - y_min) / y_span if y_span else 0.5
            dy = dots_h - round(ratio * dots_h)
            dots.append((dx, dy))

        if len(dots) == 1:
            canvas.set(*dots[0])
        for (x0, y0), (x1, y1) in zip(dots, dots[1:]):
            canvas.line(x0, y0, x1, y1)
        return canvas.rows()

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        height = options.height or options.size.height
        axis = Style.parse(self.axis_style)
        line = Style.parse(self.color)

        label_w = max((len(label) for label in self.y_labels), default=0)
        plot_w = width - label_w - 1
        plot_h = height - 1
        if plot_w < 2 or plot_h < 1:
            for _ in range(height):
                yield Segment(" " * width)
                yield Segment.line()
            return

        plot_rows = self._plot(plot_w, plot_h)
        top_label = self.y_labels[-1] if self.y_labels else ""
        bottom_label = self.y_labels[0] if self.y_labels else ""
        for i, row in enumerate(plot_rows):
            if i == 0:
                label = top_label
            elif i == plot_h - 1:
                label = bottom_label
            else:
                label = ""
            yield Segment(label.rjust(label_w), axis)
            yield Segment("│", axis)
            yield Segment(row, line)
            yield Segment.line()

        yield Segment(" " * (label_w + 1))
        yield Segment(self._time_axis(plot_w), axis)
        yield Segment.line()

    def _time_axis(self, width: int) -> str:
        if len(self.x_labels) != 3:
            return " " * width
        left, middle, right = self.x_labels
        row = [" "] * width
        placements = (
            (0, left),
            ((width - len(middle)) // 2, middle),
            (width - len(right), right),
        )
        for start, text in placements:
            for offset, ch in enumerate(text):
                if 0 <= start + offset < width:
                    row[start + offset] = ch
        return "".join(row)
