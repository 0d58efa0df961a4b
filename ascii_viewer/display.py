"""
Terminal display module for the viewer.

Paints the device menu and the full-screen ASCII view with blessed, and
owns terminal setup and restoration.
"""

import sys
import textwrap
from contextlib import contextmanager
from typing import List, Optional, Sequence, Tuple


HELP_TEXT = """
Controls:
 - 'q' - quit the application
 - 'up' and 'down' arrow to navigate the camera list
 - 'enter' to select a camera
 - 'spacebar' to pause the viewer
 - 'esc' to return to the main menu

Known issues:
 - The framerate decreases when the window size or camera resolution increase
 - The image ratio is not maintained
 - The only way to scale the viewer is by resizing the terminal window or zooming
"""

MENU_TITLE = "Cameras"
INFO_TITLE = "Info"
VIEW_TITLE = "View"
PAUSED_TITLE = "View - Paused"

HIGHLIGHT_SYMBOL = "> "


def boxed(lines: Sequence[str], width: int, height: int, title: str = "") -> List[str]:
    """
    Draw a bordered box of exactly width x height cells.

    Content lines are clipped or padded to the inner area and the title is
    embedded in the top border.

    Returns:
        `height` strings of `width` characters, or an empty list if the box
        is too small to draw
    """
    if width < 2 or height < 2:
        return []

    inner_width = width - 2
    inner_height = height - 2

    top = (title[:inner_width]).ljust(inner_width, "─")
    rows = ["┌" + top + "┐"]
    for i in range(inner_height):
        text = lines[i] if i < len(lines) else ""
        rows.append("│" + text[:inner_width].ljust(inner_width) + "│")
    rows.append("└" + "─" * inner_width + "┘")
    return rows


def split_menu(width: int, height: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    Size the menu regions: the left half of the screen, split 25% / 75%.

    Returns:
        ((width, list_height), (width, info_height))
    """
    half = width // 2
    list_height = height * 25 // 100
    return (half, list_height), (half, height - list_height)


def wrap_text(text: str, width: int) -> List[str]:
    """Wrap a block of text to a width, keeping blank lines."""
    if width <= 0:
        return []
    lines: List[str] = []
    for paragraph in text.strip("\n").splitlines():
        lines.extend(textwrap.wrap(paragraph.strip(), width) or [""])
    return lines


@contextmanager
def terminal_session(term):
    """
    Put the terminal in the alternate screen with raw input and no cursor.

    The previous screen, input mode and cursor are restored on exit, even
    when the body raises.
    """
    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        yield term


class Painter:
    """
    Draws viewer screens onto a blessed Terminal.

    Each paint overwrites the screen from the top left corner; the screen is
    cleared only when the layout or terminal size changes.
    """

    def __init__(self, term, output_stream=None):
        """
        Initialize painter.

        Args:
            term: blessed Terminal
            output_stream: Output stream (defaults to stdout)
        """
        self.term = term
        self.output = output_stream or sys.stdout
        self._last_layout: Optional[Tuple[str, int, int]] = None

    def size(self) -> Tuple[int, int]:
        return (self.term.width, self.term.height)

    def view_size(self) -> Tuple[int, int]:
        """Inner size of the full-screen view box (at least 1x1)."""
        width, height = self.size()
        return (max(1, width - 2), max(1, height - 2))

    def _begin(self, layout: str):
        width, height = self.size()
        key = (layout, width, height)
        if key != self._last_layout:
            self.output.write(self.term.clear)
            self._last_layout = key

    def _write_rows(self, rows: Sequence[str], x: int, y: int):
        for offset, row in enumerate(rows):
            self.output.write(self.term.move_xy(x, y + offset) + row)

    def paint_view(self, text: str, paused: bool = False):
        """Paint a frame full screen inside a titled border."""
        self._begin("view")
        width, height = self.size()
        title = PAUSED_TITLE if paused else VIEW_TITLE
        self._write_rows(boxed(text.split("\n"), width, height, title), 0, 0)
        self.output.flush()

    def paint_menu(self, labels: Sequence[str], selected: Optional[int], help_text: str = HELP_TEXT):
        """
        Paint the device list above the instructions panel.

        The selected entry is marked and shown in reverse video.
        """
        self._begin("menu")
        width, height = self.size()
        (list_width, list_height), (info_width, info_height) = split_menu(width, height)

        items = []
        for i, label in enumerate(labels):
            prefix = HIGHLIGHT_SYMBOL if i == selected else " " * len(HIGHLIGHT_SYMBOL)
            items.append(prefix + label)

        # Keep the selection visible in a short list box
        visible = max(0, list_height - 2)
        first = 0
        if selected is not None and visible and selected >= visible:
            first = selected - visible + 1

        rows = boxed(items[first:], list_width, list_height, MENU_TITLE)
        if selected is not None and rows and 0 <= selected - first < visible:
            row = rows[selected - first + 1]
            rows[selected - first + 1] = row[0] + self.term.reverse(row[1:-1]) + row[-1]
        self._write_rows(rows, 0, 0)

        info = wrap_text(help_text, info_width - 2)
        self._write_rows(boxed(info, info_width, info_height, INFO_TITLE), 0, list_height)
        self.output.flush()
