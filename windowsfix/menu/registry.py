from __future__ import annotations

from typing import Sequence, Tuple

from windowsfix.actions import explorer_actions
from windowsfix.actions.base import TERMINATE_ACTION, ThreadedAction
from windowsfix.exceptions import RegistryError
from windowsfix.menu.model import MenuItem

EXIT_LABEL = "Exit"


def build_registry() -> Tuple[MenuItem, ...]:
    """Ordered catalogue of menu entries; the last one ends the program."""
    items = (
        MenuItem(
            label="Explorer: Unpin Network Folder",
            action=ThreadedAction("unpin_network", explorer_actions.unpin_network),
            in_progress_text="Unpinning network folder...",
        ),
        MenuItem(
            label="Explorer: Globally Set Grouping To None",
            action=ThreadedAction(
                "set_grouping_none", explorer_actions.set_grouping_none
            ),
            in_progress_text="Globally setting grouping to none...",
        ),
        MenuItem(
            label="Explorer: Unpin Quick Access Folders",
            action=ThreadedAction(
                "unpin_quick_access", explorer_actions.unpin_quick_access
            ),
            in_progress_text="Unpinning Quick Access folders...",
        ),
        MenuItem(
            label="Desktop: Remove All Icons",
            action=ThreadedAction("remove_all_icons", explorer_actions.remove_all_icons),
            in_progress_text="Hiding all desktop icons...",
        ),
        MenuItem(
            label=EXIT_LABEL,
            action=TERMINATE_ACTION,
            affects_busy_flag=False,
            terminal=True,
        ),
    )
    validate_registry(items)
    return items


def validate_registry(items: Sequence[MenuItem]) -> None:
    if not items:
        raise RegistryError("Menu must contain at least one item")
    terminal = [index for index, item in enumerate(items) if item.terminal]
    if len(terminal) != 1:
        raise RegistryError(
            f"Menu must contain exactly one terminal item, found {len(terminal)}"
        )
    for index, item in enumerate(items):
        if not item.terminal and item.action is None:
            raise RegistryError(f"Menu item {index} ({item.label!r}) has no action")
