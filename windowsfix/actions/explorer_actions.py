"""Explorer and desktop maintenance operations.

Each function blocks until its external commands finish and returns a single
``Outcome``. They are wrapped in ``ThreadedAction`` by the registry so the
menu never waits on them.
"""

from __future__ import annotations

import time
from typing import Callable, Optional, Sequence

from windowsfix.config import settings
from windowsfix.exceptions import CommandError
from windowsfix.logging import get_logger
from windowsfix.menu.model import ERROR_MARKER, SUCCESS_MARKER, Failure, Outcome, Success

from .system_utils import (
    REG_DWORD,
    REG_SZ,
    ensure_windows,
    reg_add,
    reg_delete,
    restart_explorer,
    run_powershell,
)

log = get_logger(source="action", tags=["action", "explorer"])

Sleep = Callable[[float], None]

NETWORK_CLSID_KEY = (
    "HKCU\\Software\\Classes\\CLSID\\{F02C1A0D-BE21-4350-88B0-7367FC96EF3C}"
)
BAGS_KEY = (
    "HKCU\\Software\\Classes\\Local Settings\\Software\\Microsoft\\Windows\\Shell\\Bags"
)
ALL_FOLDERS_SHELL_KEY = BAGS_KEY + "\\AllFolders\\Shell"
EXPLORER_ADVANCED_KEY = (
    "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Advanced"
)

GROUPING_VALUES = [
    ("FolderType", REG_SZ, "NotSpecified"),
    ("GroupBy", REG_SZ, "System.Null"),
    ("Sort", REG_SZ, "System.Null"),
    ("ViewMode", REG_DWORD, "1"),
]

RESET_FOLDERS_SCRIPT = (
    "$shell = New-Object -ComObject Shell.Application; "
    "$folder = $shell.Namespace(0); "
    "$folder.Self.InvokeVerb('Reset Folders')"
)

QUICK_ACCESS_SCRIPT_TEMPLATE = """
$shell = New-Object -ComObject Shell.Application
$quickAccess = $shell.Namespace("shell:::{{679f85cb-0220-4080-b29b-5540cc05aab6}}")
$keepPinned = @({keep})
foreach ($item in $quickAccess.Items()) {{
    if ($item.IsFolder -and $keepPinned -notcontains $item.Name) {{
        $item.InvokeVerb("unpinfromhome")
    }}
}}
"""


def _human_join(names: Sequence[str]) -> str:
    names = list(names)
    if not names:
        return "nothing"
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return ", ".join(names[:-1]) + f", and {names[-1]}"


def build_quick_access_script(keep_pinned: Sequence[str]) -> str:
    keep = ", ".join('"' + name.replace('"', '`"') + '"' for name in keep_pinned)
    return QUICK_ACCESS_SCRIPT_TEMPLATE.format(keep=keep)


def unpin_network(*, delay: Optional[float] = None, sleep: Sleep = time.sleep) -> Outcome:
    """Hide the Network folder from File Explorer's navigation pane."""
    ensure_windows("Unpinning the network folder")
    if delay is None:
        delay = settings.get_float("explorer_restart_delay_network", 3.0)

    try:
        reg_add(NETWORK_CLSID_KEY, "System.IsPinnedToNameSpaceTree", REG_DWORD, "0")
    except CommandError as error:
        return Failure(f"{ERROR_MARKER} Failed to modify registry - {error}")

    try:
        restart_explorer(delay, sleep=sleep)
    except CommandError as error:
        return Failure(f"{ERROR_MARKER} Failed to restart explorer - {error}")

    return Success(
        f"{SUCCESS_MARKER} Network folder has been unpinned from File Explorer's "
        "Navigation Panel."
    )


def set_grouping_none(
    *, delay: Optional[float] = None, sleep: Sleep = time.sleep
) -> Outcome:
    """Set folder grouping to None for every folder and reset saved views."""
    ensure_windows("Setting folder grouping")
    if delay is None:
        delay = settings.get_float("explorer_restart_delay_grouping", 1.0)

    for name, value_type, data in GROUPING_VALUES:
        try:
            reg_add(ALL_FOLDERS_SHELL_KEY, name, value_type, data)
        except CommandError as error:
            return Failure(
                f"{ERROR_MARKER} Failed to set registry for grouping - {error}"
            )

    cleared = reg_delete(BAGS_KEY)
    if cleared.returncode != 0:
        log.debug("Bags key not removed (may not exist)")

    try:
        restart_explorer(delay, sleep=sleep)
    except CommandError as error:
        return Failure(f"{ERROR_MARKER} Failed to restart explorer - {error}")

    reset = run_powershell(RESET_FOLDERS_SCRIPT, check=False)
    if reset is not None and reset.returncode != 0:
        log.debug("Reset Folders verb failed, views will reset on next open")

    return Success(f"{SUCCESS_MARKER} Folder grouping set to None and views reset.")


def unpin_quick_access(*, keep_pinned: Optional[Sequence[str]] = None) -> Outcome:
    """Unpin every Quick Access folder except the configured keep list."""
    ensure_windows("Unpinning Quick Access folders")
    if keep_pinned is None:
        keep_pinned = settings.get_list(
            "quick_access_keep_pinned", settings.DEFAULT_QUICK_ACCESS_KEEP_PINNED
        )

    try:
        run_powershell(build_quick_access_script(keep_pinned))
    except CommandError as error:
        return Failure(f"{ERROR_MARKER} Failed to unpin Quick Access folders - {error}")

    return Success(
        f"{SUCCESS_MARKER} Quick Access folders unpinned except "
        f"{_human_join(keep_pinned)}."
    )


def remove_all_icons(
    *, delay: Optional[float] = None, sleep: Sleep = time.sleep
) -> Outcome:
    """Hide every desktop icon."""
    ensure_windows("Hiding desktop icons")
    if delay is None:
        delay = settings.get_float("explorer_restart_delay_icons", 1.0)

    try:
        reg_add(EXPLORER_ADVANCED_KEY, "HideIcons", REG_DWORD, "1")
    except CommandError as error:
        return Failure(f"{ERROR_MARKER} Failed to hide desktop icons - {error}")

    try:
        restart_explorer(delay, sleep=sleep)
    except CommandError as error:
        return Failure(f"{ERROR_MARKER} Failed to restart explorer - {error}")

    return Success(f"{SUCCESS_MARKER} All desktop icons have been hidden.")
