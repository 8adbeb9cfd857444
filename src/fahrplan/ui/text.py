"""Text helpers shared by the views."""

import curses
import textwrap


def truncate(text: str, width: int) -> str:
    """Cut text to `width` characters, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width == 1:
        return "…"
    return text[: width - 1] + "…"


def wrap(text: str, width: int) -> list[str]:
    """Wrap text to `width`, keeping paragraph breaks as empty lines."""
    width = max(width, 1)
    lines: list[str] = []
    for paragraph in text.splitlines():
        if not paragraph.strip():
            lines.append("")
            continue
        lines.extend(textwrap.wrap(paragraph, width, break_on_hyphens=True) or [""])
    return lines


def put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    """Draw text clipped to the window; off-screen writes are ignored."""
    height, width = win.getmaxyx()
    if not (0 <= y < height and 0 <= x < width):
        return
    try:
        win.addnstr(y, x, text, width - x, attr)
    except curses.error:
        # writing the bottom-right cell moves the cursor off-screen
        pass
