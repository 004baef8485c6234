"""System utility functions for Explorer maintenance actions."""

from __future__ import annotations

import subprocess
import sys
import time
from typing import Callable, Optional

from loguru import logger

from windowsfix.exceptions import CommandError, UnsupportedPlatformError


REG_DWORD = "REG_DWORD"
REG_SZ = "REG_SZ"

EXPLORER_EXE = "explorer.exe"


def _escape_braces(text: str) -> str:
    """Escape curly braces for loguru formatting."""
    return text.replace("{", "{{").replace("}", "}}")


def is_windows() -> bool:
    return sys.platform == "win32"


def ensure_windows(feature: str) -> None:
    """Raise UnsupportedPlatformError when not running on Windows."""
    if not is_windows():
        raise UnsupportedPlatformError(feature)


def validate_command_args(args: list[str]) -> None:
    """Validate command arguments before executing."""
    if not args or not all(isinstance(arg, str) and arg for arg in args):
        raise ValueError("Command args must be a non-empty list of strings.")


def run_command(args: list[str]) -> subprocess.CompletedProcess[str]:
    """Run a command and capture output.

    A missing executable is reported as return code 127 instead of raising,
    so callers that ignore failures can do so uniformly.
    """
    validate_command_args(args)
    logger.debug(f"Running command: {_escape_braces(repr(args))}", component="system")
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        logger.debug(f"Executable not found: {_escape_braces(args[0])}", component="system")
        return subprocess.CompletedProcess(
            args, 127, stdout="", stderr=f"executable file not found: {args[0]}"
        )
    logger.debug(f"Command return code: {result.returncode}", component="system")
    logger.debug(
        f"Command stderr: {_escape_braces(repr((result.stderr or '').strip()))}",
        component="system",
    )
    return result


def run_checked(args: list[str]) -> subprocess.CompletedProcess[str]:
    """Run a command and raise CommandError on a non-zero exit."""
    result = run_command(args)
    if result.returncode != 0:
        raise CommandError(args, result.returncode, result.stderr)
    return result


def reg_add(key: str, name: str, value_type: str, data: str) -> None:
    run_checked(["reg", "add", key, "/v", name, "/t", value_type, "/d", data, "/f"])


def reg_delete(key: str) -> subprocess.CompletedProcess[str]:
    """Delete a registry key. The key may not exist, so failures are returned."""
    return run_command(["reg", "delete", key, "/f"])


def kill_explorer() -> subprocess.CompletedProcess[str]:
    """Kill Explorer. Fails harmlessly when it is not running."""
    return run_command(["taskkill", "/F", "/IM", EXPLORER_EXE])


def start_explorer() -> None:
    run_checked(["cmd", "/c", "start", EXPLORER_EXE])


def restart_explorer(
    delay: float,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Kill Explorer, wait ``delay`` seconds and start it again."""
    kill_explorer()
    if delay > 0:
        sleep(delay)
    start_explorer()


def run_powershell(
    script: str, *, check: bool = True
) -> Optional[subprocess.CompletedProcess[str]]:
    args = ["powershell", "-NoProfile", "-Command", script]
    if check:
        return run_checked(args)
    return run_command(args)
