"""
Gear Runtime - CLI.

============================================================
RESPONSIBILITY
============================================================
Runs a single cartridge hook against an existing gear.

- Provides argparse-based CLI
- Loads configuration from environment and .env
- Prints hook output, exits non-zero on hook failure

============================================================
USAGE
============================================================
python -m gear_runtime.cli --cartridge php-5.3 --hook start \\
    --app-name app1234 --domain ci12345678 --gear-uuid abcd1234
python -m gear_runtime.cli --cartridge mysql-5.1 --embedded \\
    --hook configure --app-name app1234 --domain ci12345678 \\
    --gear-uuid abcd1234 --show-command

============================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.exceptions import ConfigurationError

from .adapters import list_command_runners
from .application import Account, Application
from .config import RuntimeConfig
from .context import RuntimeContext
from .errors import HookExecutionError
from .gear import Gear
from .logging_utils import mask_connection, mask_output_lines, setup_logging
from .types import CartridgeType, LIFECYCLE_HOOKS


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_HOOK_FAILED = 1
EXIT_INVALID_CONFIG = 2


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gear-runtime",
        description="Run a cartridge lifecycle hook on an existing gear",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Lifecycle hooks:
  {", ".join(LIFECYCLE_HOOKS)}

Any other hook shipped under <cartridge>/info/hooks may be named.
        """,
    )

    # --------------------------------------------------------
    # Cartridge
    # --------------------------------------------------------
    cart_group = parser.add_argument_group("Cartridge")

    cart_group.add_argument("--cartridge", "-c", required=True, help="Cartridge name")
    cart_group.add_argument(
        "--embedded",
        action="store_true",
        help="Cartridge is embedded (resolved under the embedded root)",
    )
    cart_group.add_argument("--hook", required=True, help="Hook name")
    cart_group.add_argument(
        "--extra-arg",
        action="append",
        default=[],
        dest="extra_args",
        metavar="ARG",
        help="Extra hook argument (repeatable)",
    )
    cart_group.add_argument(
        "--expected-exit-code",
        type=int,
        default=0,
        help="Expected hook exit code (default: 0)",
    )

    # --------------------------------------------------------
    # Gear
    # --------------------------------------------------------
    gear_group = parser.add_argument_group("Gear")

    gear_group.add_argument("--app-name", required=True, help="Application name")
    gear_group.add_argument("--app-uuid", default=None, help="Application uuid")
    gear_group.add_argument("--domain", required=True, help="Account domain")
    gear_group.add_argument("--gear-uuid", required=True, help="Gear uuid")

    # --------------------------------------------------------
    # Execution Options
    # --------------------------------------------------------
    exec_group = parser.add_argument_group("Execution Options")

    exec_group.add_argument(
        "--runner",
        choices=list_command_runners(),
        default="runcon",
        help="Command runner (default: runcon)",
    )
    exec_group.add_argument(
        "--show-command",
        action="store_true",
        help="Print the hook command line and exit",
    )

    # --------------------------------------------------------
    # Logging Options
    # --------------------------------------------------------
    logging_group = parser.add_argument_group("Logging Options")

    logging_group.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    logging_group.add_argument(
        "--log-format",
        type=str,
        choices=["json", "text"],
        default="text",
        help="Logging format (default: text)",
    )

    return parser


# ============================================================
# GEAR ATTACHMENT
# ============================================================

def attach_gear(args: argparse.Namespace, context: RuntimeContext) -> Gear:
    """Model an already-allocated gear without touching its container."""
    account = Account(context, domain=args.domain)
    app = Application(account, name=args.app_name, app_uuid=args.app_uuid)
    account.apps.append(app)

    gear = Gear(app, context, gear_uuid=args.gear_uuid)
    app.gears.append(gear)
    return gear


# ============================================================
# MAIN ENTRY POINT
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = RuntimeConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    setup_logging(args.log_level or config.log_level, args.log_format)

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    # Attached gears never allocate, so no real container provider is needed.
    context = RuntimeContext.create(args.runner, "mock", config)

    gear = attach_gear(args, context)
    cartridge_type = CartridgeType.EMBEDDED if args.embedded else CartridgeType.STANDARD
    cart = gear.add_cartridge(args.cartridge, cartridge_type)

    if args.show_command:
        print(cart.build_hook_command(args.hook, args.extra_args))
        return EXIT_OK

    try:
        result = cart.run_hook_output(args.hook, args.expected_exit_code, args.extra_args)
    except HookExecutionError as e:
        logger.error(e.to_log_format())
        for line in mask_output_lines(e.output):
            print(line, file=sys.stderr)
        return EXIT_HOOK_FAILED

    for line in result.output:
        print(line)

    if cart.db is not None:
        logger.info(f"Connection details: {mask_connection(cart.db)}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
