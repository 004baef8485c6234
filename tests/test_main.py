"""Tests for the command-line entry point."""

import json

import pytest

from windowsfix import main as main_module
from windowsfix.config import settings


@pytest.fixture
def fake_runtime(mocker):
    runtime_cls = mocker.patch.object(main_module, "Runtime")
    return runtime_cls


@pytest.fixture
def fake_setup_logging(mocker):
    return mocker.patch.object(main_module, "setup_logging")


def test_main_runs_menu(fake_runtime, fake_setup_logging):
    assert main_module.main([]) == 0

    fake_setup_logging.assert_called_once_with(debug=False, trace=False, console=False)
    items = fake_runtime.call_args[0][0]
    assert items[-1].terminal
    fake_runtime.return_value.run.assert_called_once_with()


@pytest.mark.parametrize(
    ("argv", "debug", "trace"),
    [(["-d"], True, False), (["--debug"], True, False), (["--trace"], False, True)],
)
def test_logging_flags(argv, debug, trace, fake_runtime, fake_setup_logging):
    main_module.main(argv)

    fake_setup_logging.assert_called_once_with(debug=debug, trace=trace, console=False)


def test_keyboard_interrupt_exits_cleanly(fake_runtime, fake_setup_logging):
    fake_runtime.return_value.run.side_effect = KeyboardInterrupt

    assert main_module.main([]) == 0


def test_unknown_argument_exits(fake_runtime, fake_setup_logging):
    with pytest.raises(SystemExit):
        main_module.main(["--bogus"])
    fake_runtime.assert_not_called()


def test_console_flag_enables_stderr_sink(fake_runtime, fake_setup_logging):
    main_module.main(["--console"])

    fake_setup_logging.assert_called_once_with(debug=False, trace=False, console=True)


class TestSetOption:
    @pytest.fixture
    def settings_file(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        monkeypatch.setattr(settings, "SETTINGS_PATH", path)
        settings.load_settings()
        yield path
        monkeypatch.undo()
        settings.load_settings()

    def test_saves_and_exits(self, settings_file, fake_runtime, fake_setup_logging):
        argv = [
            "--set",
            "explorer_restart_delay_network=5",
            "--set",
            'quick_access_keep_pinned=["Desktop"]',
        ]

        assert main_module.main(argv) == 0

        saved = json.loads(settings_file.read_text())
        assert saved["explorer_restart_delay_network"] == 5
        assert saved["quick_access_keep_pinned"] == ["Desktop"]
        fake_runtime.assert_not_called()

    def test_plain_text_value(self, settings_file, fake_runtime, fake_setup_logging):
        main_module.main(["--set", "quick_access_keep_pinned=Desktop"])

        assert settings.get_setting("quick_access_keep_pinned") == "Desktop"

    @pytest.mark.parametrize("assignment", ["no_equals_sign", "=5", "bogus_key=1"])
    def test_rejects_bad_assignment(self, assignment, settings_file, fake_runtime, fake_setup_logging):
        with pytest.raises(SystemExit):
            main_module.main(["--set", assignment])

        assert not settings_file.exists()
        fake_setup_logging.assert_not_called()
