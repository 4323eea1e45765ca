"""
Cartridge Tests.

============================================================
PURPOSE
============================================================
Tests for the cartridge hook invocation protocol and
listener dispatch.

TEST CATEGORIES:
- Path resolution by cartridge type
- Hook command line construction
- Exit code contract and error propagation
- Listener dispatch and failure policy

============================================================
"""

import logging
from dataclasses import asdict

import pytest
from unittest.mock import MagicMock

from gear_runtime import (
    Account,
    Application,
    CartridgeListener,
    CartridgeType,
    DatabaseCartListener,
    Gear,
    HookExecutionError,
    ListenerError,
    MockCommandRunner,
    MockContainerProvider,
    RuntimeConfig,
    RuntimeContext,
)


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def runner():
    return MockCommandRunner()


@pytest.fixture
def context(runner):
    return RuntimeContext(
        runner=runner,
        container_provider=MockContainerProvider(),
        config=RuntimeConfig(
            cartridge_root="/carts",
            embedded_cartridge_root="/carts/embedded",
        ),
    )


@pytest.fixture
def gear(context):
    account = Account(context, domain="ci12345678")
    app = Application(account, name="app1234", app_uuid="f" * 32)
    gear = Gear(app, context, gear_uuid="abcd1234")
    gear.create()
    return gear


class RecordingListener(CartridgeListener):
    """Listener that records every event it receives."""

    def __init__(self, names, calls, tag="recording", critical=False):
        self._names = set(names)
        self._calls = calls
        self._tag = tag
        self.critical = critical

    def supports(self, cartridge_name):
        return cartridge_name in self._names

    def handlers(self):
        return {
            "configure_hook_completed": self._record,
            "start_hook_completed": self._record,
        }

    def _record(self, args):
        self._calls.append((self._tag, args.cart.name, args.exit_code, list(args.output)))


class FailingListener(CartridgeListener):
    """Listener whose handler always raises."""

    def __init__(self, critical=False):
        self.critical = critical

    def supports(self, cartridge_name):
        return True

    def handlers(self):
        return {"configure_hook_completed": self._fail}

    def _fail(self, args):
        raise RuntimeError("listener exploded")


# ============================================================
# PATH RESOLUTION TESTS
# ============================================================

class TestCartridgePaths:
    """Tests for cartridge path resolution."""

    def test_standard_cartridge_path(self, gear):
        """Test standard cartridges resolve under the cartridge root."""
        cart = gear.add_cartridge("php-5.3")

        assert cart.path == "/carts/php-5.3"
        assert cart.hooks_path == "/carts/php-5.3/info/hooks"

    def test_embedded_cartridge_path(self, gear):
        """Test embedded cartridges resolve under the embedded root."""
        cart = gear.add_cartridge("mysql-5.1", CartridgeType.EMBEDDED)

        assert cart.path == "/carts/embedded/mysql-5.1"
        assert cart.hooks_path == "/carts/embedded/mysql-5.1/info/hooks"

    def test_type_is_read_only(self, gear):
        """Test cartridge type cannot be reassigned."""
        cart = gear.add_cartridge("php-5.3")

        with pytest.raises(AttributeError):
            cart.cartridge_type = CartridgeType.EMBEDDED

    def test_default_listeners_registered(self, gear):
        """Test each cartridge gets its own default listener list."""
        first = gear.add_cartridge("php-5.3")
        second = gear.add_cartridge("mysql-5.1", CartridgeType.EMBEDDED)

        assert len(first.listeners) == 1
        assert isinstance(first.listeners[0], DatabaseCartListener)
        assert first.listeners is not second.listeners


# ============================================================
# COMMAND CONSTRUCTION TESTS
# ============================================================

class TestHookCommand:
    """Tests for hook command line construction."""

    def test_command_with_extra_args(self, gear, runner):
        """Test app, domain and gear lead, extra args follow verbatim."""
        cart = gear.add_cartridge("php-5.3")

        cart.run_hook("start", extra_args=["--verbose"])

        command = runner.commands[-1]
        assert command.startswith("/carts/php-5.3/info/hooks/start ")
        assert "'app1234' 'ci12345678' abcd1234 --verbose" in command

    def test_command_without_extra_args(self, gear):
        """Test the command keeps the trailing separator with no extras."""
        cart = gear.add_cartridge("php-5.3")

        command = cart.build_hook_command("status")

        assert command == "/carts/php-5.3/info/hooks/status 'app1234' 'ci12345678' abcd1234 "

    def test_multiple_extra_args_joined_by_space(self, gear):
        """Test extra args are each appended as a separate token."""
        cart = gear.add_cartridge("php-5.3")

        command = cart.build_hook_command("start", ["a", "b", "c"])

        assert command.endswith("abcd1234 a b c")

    def test_privilege_context_and_timeout(self, gear, runner):
        """Test hooks run under the configured context with the hook timeout."""
        cart = gear.add_cartridge("php-5.3")

        cart.start()

        executed = runner.executed[-1]
        assert executed.privilege_user == "unconfined_u"
        assert executed.privilege_role == "system_r"
        assert executed.privilege_type == "libra_initrc_t"
        assert executed.timeout_seconds == 45


# ============================================================
# EXIT CODE CONTRACT TESTS
# ============================================================

class TestRunHook:
    """Tests for the hook exit code contract."""

    def test_returns_exit_code_on_success(self, gear):
        """Test run_hook returns the runner's exit code."""
        cart = gear.add_cartridge("php-5.3")

        assert cart.run_hook("start") == 0

    def test_non_zero_expected_exit_code(self, gear, runner):
        """Test a non-zero exit code passes when it is expected."""
        runner.script("status", exit_code=3, output=["stopped"])
        cart = gear.add_cartridge("php-5.3")

        assert cart.run_hook("status", expected_exitcode=3) == 3

    def test_unexpected_exit_code_raises(self, gear, runner):
        """Test a mismatched exit code raises HookExecutionError."""
        runner.script("start", exit_code=1, output=["error: x"])
        cart = gear.add_cartridge("php-5.3")

        with pytest.raises(HookExecutionError) as exc_info:
            cart.run_hook("start")

        error = exc_info.value
        assert "1" in str(error)
        assert "error: x" in str(error)
        assert error.exit_code == 1
        assert error.output == ["error: x"]
        assert error.command == runner.commands[-1]

    def test_failure_is_not_retried(self, gear, runner):
        """Test a failed hook runs exactly once."""
        runner.script("stop", exit_code=2)
        cart = gear.add_cartridge("php-5.3")

        with pytest.raises(HookExecutionError):
            cart.stop()

        assert len(runner.executed) == 1

    def test_timeout_raises(self, gear, runner):
        """Test a runner timeout surfaces as HookExecutionError."""
        runner.script("start", exit_code=0, output=["partial"], timed_out=True)
        cart = gear.add_cartridge("php-5.3")

        with pytest.raises(HookExecutionError) as exc_info:
            cart.start()

        assert exc_info.value.timed_out is True
        assert exc_info.value.output == ["partial"]

    def test_run_hook_output(self, gear, runner):
        """Test run_hook_output returns exit code and full output."""
        runner.script("configure", output=["line 1", "line 2"])
        cart = gear.add_cartridge("php-5.3")

        result = cart.run_hook_output("configure")

        assert asdict(result) == {
            "command": runner.commands[-1],
            "exit_code": 0,
            "output": ["line 1", "line 2"],
        }

    @pytest.mark.parametrize("hook", ["configure", "deconfigure", "start", "stop", "status"])
    def test_lifecycle_wrappers(self, gear, runner, hook):
        """Test each wrapper runs the hook of the same name."""
        cart = gear.add_cartridge("php-5.3")

        getattr(cart, hook)()

        assert f"/info/hooks/{hook} " in runner.commands[-1]


# ============================================================
# LISTENER DISPATCH TESTS
# ============================================================

class TestNotifyListeners:
    """Tests for post-hook listener dispatch."""

    def test_supported_listener_invoked(self, gear, runner):
        """Test the database listener runs for a supported cartridge."""
        runner.script("configure", output=["Root User: admin"])
        cart = gear.add_cartridge("mysql-5.1", CartridgeType.EMBEDDED)

        cart.configure()

        assert cart.db is not None
        assert cart.db.username == "admin"

    def test_unsupported_cartridge_skipped(self, gear, runner):
        """Test the database listener is skipped for other cartridges."""
        runner.script("configure", output=["Root User: admin"])
        cart = gear.add_cartridge("php-5.3")

        cart.configure()

        assert cart.db is None
        assert cart.metadata == {}

    def test_unhandled_event_skipped(self, gear):
        """Test a listener is not invoked for events it does not handle."""
        calls = []
        cart = gear.add_cartridge("php-5.3")
        cart.listeners = [RecordingListener(["php-5.3"], calls)]

        cart.stop()

        assert calls == []

    def test_failed_hook_not_notified(self, gear, runner):
        """Test listeners never see a failed hook."""
        calls = []
        runner.script("configure", exit_code=1, output=["Root User: admin"])
        cart = gear.add_cartridge("mysql-5.1", CartridgeType.EMBEDDED)
        cart.add_listener(RecordingListener(["mysql-5.1"], calls))

        with pytest.raises(HookExecutionError):
            cart.configure()

        assert calls == []
        assert cart.db is None

    def test_registration_order(self, gear, runner):
        """Test listeners run in registration order with event args."""
        calls = []
        runner.script("start", output=["started"])
        cart = gear.add_cartridge("php-5.3")
        cart.listeners = [
            RecordingListener(["php-5.3"], calls, tag="first"),
            RecordingListener(["php-5.3"], calls, tag="second"),
        ]

        cart.start()

        assert calls == [
            ("first", "php-5.3", 0, ["started"]),
            ("second", "php-5.3", 0, ["started"]),
        ]

    def test_non_critical_failure_logged(self, gear, caplog):
        """Test a failing listener is logged and later listeners still run."""
        calls = []
        cart = gear.add_cartridge("php-5.3")
        cart.listeners = [
            FailingListener(),
            RecordingListener(["php-5.3"], calls),
        ]

        with caplog.at_level(logging.ERROR, logger="gear_runtime.cartridge"):
            assert cart.configure() == 0

        assert len(calls) == 1
        assert "FailingListener failed handling configure_hook_completed" in caplog.text

    def test_critical_failure_raises(self, gear):
        """Test a critical listener failure aborts remaining listeners."""
        calls = []
        cart = gear.add_cartridge("php-5.3")
        cart.listeners = [
            FailingListener(critical=True),
            RecordingListener(["php-5.3"], calls),
        ]

        with pytest.raises(ListenerError) as exc_info:
            cart.configure()

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.event == "configure_hook_completed"
        assert calls == []

    def test_predicates_checked_before_handle(self, gear):
        """Test handle() is only called when both predicates pass."""
        listener = MagicMock(spec=CartridgeListener)
        listener.handles.return_value = True
        listener.supports.return_value = False
        cart = gear.add_cartridge("php-5.3")
        cart.listeners = [listener]

        cart.configure()

        listener.supports.assert_called_once_with("php-5.3")
        listener.handle.assert_not_called()
