"""
CLI Tests.
"""

import pytest
from unittest.mock import patch

from gear_runtime import MockCommandRunner
from gear_runtime.cli import (
    EXIT_HOOK_FAILED,
    EXIT_INVALID_CONFIG,
    EXIT_OK,
    create_parser,
    main,
)


BASE_ARGS = [
    "--app-name", "app1234",
    "--domain", "ci12345678",
    "--gear-uuid", "abcd1234",
]


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("gear_runtime.cli.setup_logging"):
        yield


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("GEAR_CARTRIDGE_ROOT", "GEAR_EMBEDDED_CARTRIDGE_ROOT", "GEAR_HOOK_TIMEOUT_SECONDS"):
        monkeypatch.delenv(var, raising=False)


class TestParser:
    """Tests for argument parsing."""

    def test_required_arguments(self):
        """Test cartridge and hook are required."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(BASE_ARGS)

    def test_repeatable_extra_args(self):
        """Test --extra-arg accumulates in order."""
        args = create_parser().parse_args(
            BASE_ARGS + ["-c", "php-5.3", "--hook", "start",
                         "--extra-arg=--verbose", "--extra-arg", "x"]
        )

        assert args.extra_args == ["--verbose", "x"]
        assert args.runner == "runcon"


class TestMain:
    """Tests for the CLI entry point."""

    def test_show_command(self, capsys):
        """Test --show-command prints the hook command line."""
        code = main(BASE_ARGS + [
            "-c", "mysql-5.1", "--embedded", "--hook", "configure",
            "--extra-arg=--verbose", "--show-command",
        ])

        out = capsys.readouterr().out.strip()
        assert code == EXIT_OK
        assert out == (
            "/usr/libexec/stickshift/cartridges/embedded/mysql-5.1/info/hooks/configure "
            "'app1234' 'ci12345678' abcd1234 --verbose"
        )

    def test_successful_hook(self, capsys):
        """Test hook output is printed on success."""
        runner = MockCommandRunner()
        runner.script("start", output=["started"])

        with patch("gear_runtime.context.create_command_runner", return_value=runner):
            code = main(BASE_ARGS + ["-c", "php-5.3", "--hook", "start", "--runner", "mock"])

        assert code == EXIT_OK
        assert capsys.readouterr().out.strip() == "started"

    def test_failed_hook(self, capsys):
        """Test a failing hook exits non-zero with masked output."""
        runner = MockCommandRunner()
        runner.script("configure", exit_code=1, output=["Root Password: secret"])

        with patch("gear_runtime.context.create_command_runner", return_value=runner):
            code = main(BASE_ARGS + ["-c", "mysql-5.1", "--embedded", "--hook", "configure"])

        err = capsys.readouterr().err
        assert code == EXIT_HOOK_FAILED
        assert "secret" not in err
        assert "Root Password: ***" in err

    def test_invalid_config(self, monkeypatch, capsys):
        """Test an invalid environment configuration is reported."""
        monkeypatch.setenv("GEAR_HOOK_TIMEOUT_SECONDS", "0")

        code = main(BASE_ARGS + ["-c", "php-5.3", "--hook", "start"])

        assert code == EXIT_INVALID_CONFIG
        assert "hook_timeout_seconds" in capsys.readouterr().err

    def test_non_integer_timeout(self, monkeypatch, capsys):
        """Test an unparsable environment value is reported, not raised."""
        monkeypatch.setenv("GEAR_HOOK_TIMEOUT_SECONDS", "forty")

        code = main(BASE_ARGS + ["-c", "php-5.3", "--hook", "start"])

        assert code == EXIT_INVALID_CONFIG
        assert "GEAR_HOOK_TIMEOUT_SECONDS" in capsys.readouterr().err
