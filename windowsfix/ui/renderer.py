"""Render a MenuState as a rich Text frame.

``render`` is pure: it reads the state and builds a new ``Text`` every time,
so calling it twice with the same state yields equal frames.
"""

from __future__ import annotations

from enum import Enum

from rich.text import Text

from windowsfix.menu.model import ERROR_MARKER, SUCCESS_MARKER, MenuState

TITLE = "WindowsFix - Scripts TUI"
GROUP_HEADER = "Available Options:"
HELP_TEXT = "Use arrow keys to navigate, q to quit."

CURSOR_MARK = ">"
CHECK_MARK = "✓"

TITLE_STYLE = "bold deep_sky_blue1"
CURSOR_STYLE = "yellow"
CHECKED_STYLE = "green"
STATUS_STYLE = "grey50"
SUCCESS_STYLE = "bold green"
ERROR_STYLE = "bold red"
HELP_STYLE = "grey42"


class StatusKind(Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


STATUS_STYLES = {
    StatusKind.SUCCESS: SUCCESS_STYLE,
    StatusKind.ERROR: ERROR_STYLE,
    StatusKind.INFO: STATUS_STYLE,
}


def classify_status(text: str) -> StatusKind:
    if text.startswith(SUCCESS_MARKER):
        return StatusKind.SUCCESS
    if text.startswith(ERROR_MARKER):
        return StatusKind.ERROR
    return StatusKind.INFO


def _render_row(frame: Text, state: MenuState, index: int) -> None:
    if index == state.cursor:
        frame.append(CURSOR_MARK, style=CURSOR_STYLE)
    else:
        frame.append(" ")
    frame.append(" [")
    if state.is_completed(index):
        frame.append(CHECK_MARK, style=CHECKED_STYLE)
    else:
        frame.append(" ")
    frame.append(f"] {state.items[index].label}\n")


def render(state: MenuState) -> Text:
    frame = Text()
    frame.append("\n")
    frame.append(TITLE, style=TITLE_STYLE)
    frame.append("\n\n")
    frame.append(GROUP_HEADER)
    frame.append("\n\n")

    for index in range(len(state.items)):
        _render_row(frame, state, index)

    frame.append("\n")
    frame.append(state.status_text, style=STATUS_STYLES[classify_status(state.status_text)])
    frame.append("\n\n")
    frame.append(HELP_TEXT, style=HELP_STYLE)
    return frame
