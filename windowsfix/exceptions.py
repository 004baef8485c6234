"""Custom exceptions for windowsfix.

Exception Hierarchy:
    WindowsFixError (base)
        ├── CommandError
        ├── UnsupportedPlatformError
        ├── RegistryError
        └── ActionFailedError

Action-level errors (CommandError, UnsupportedPlatformError) are raised inside
worker threads and converted to ``Failure`` outcomes by ``ThreadedAction``; they
never reach the event loop. RegistryError signals a malformed menu definition
and is raised at startup. ActionFailedError carries a failure outcome through
``operation_context`` so the operation is logged as failed.

Usage:
    from windowsfix.exceptions import CommandError

    if result.returncode != 0:
        raise CommandError(result.args, result.returncode, result.stderr)
"""

from __future__ import annotations

from typing import Sequence


class WindowsFixError(Exception):
    """Base exception for all windowsfix errors."""


class CommandError(WindowsFixError):
    """External command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        msg = f"exit status {returncode}"
        if self.stderr:
            msg += f": {self.stderr.splitlines()[0]}"
        super().__init__(msg)


class UnsupportedPlatformError(WindowsFixError):
    """Operation needs a platform the current host is not running."""

    def __init__(self, feature: str, platform: str = "Windows"):
        self.feature = feature
        self.platform = platform
        super().__init__(f"{feature} requires {platform}")


class RegistryError(WindowsFixError):
    """Menu registry is empty or malformed."""


class ActionFailedError(WindowsFixError):
    """An action finished with a failure outcome.

    Raised inside ``operation_context`` so the operation is logged as failed;
    ``message`` is the outcome text, marker included.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
