import argparse
import json

from windowsfix.app.runtime import Runtime
from windowsfix.config import settings
from windowsfix.logging import LoggerFactory, setup_logging
from windowsfix.menu.registry import build_registry


def parse_assignment(parser, assignment):
    """Split ``KEY=VALUE`` and decode VALUE as JSON, falling back to a string."""
    key, sep, raw_value = assignment.partition("=")
    key = key.strip()
    if not sep or not key:
        parser.error(f"--set expects KEY=VALUE, got {assignment!r}")
    if key not in settings.DEFAULT_SETTINGS:
        known = ", ".join(sorted(settings.DEFAULT_SETTINGS))
        parser.error(f"unknown setting {key!r} (known: {known})")
    try:
        value = json.loads(raw_value)
    except json.JSONDecodeError:
        value = raw_value
    return key, value


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="WindowsFix - Scripts TUI")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--trace", action="store_true", help="Enable trace logging")
    parser.add_argument(
        "--console",
        action="store_true",
        help="Also log to stderr (redirect it when the menu is on screen)",
    )
    parser.add_argument(
        "--set",
        dest="assignments",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Save a setting to the settings file and exit (repeatable)",
    )
    args = parser.parse_args(argv)
    assignments = [parse_assignment(parser, item) for item in args.assignments]

    setup_logging(debug=args.debug, trace=args.trace, console=args.console)
    log = LoggerFactory.for_system()
    log.debug(f"Settings loaded from {settings.SETTINGS_PATH}")

    if assignments:
        for key, value in assignments:
            settings.set_setting(key, value)
            log.info(f"Setting {key} saved", value=value)
        return 0

    runtime = Runtime(build_registry())
    try:
        runtime.run()
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
