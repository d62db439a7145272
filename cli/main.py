"""CLI entry point and argument parsing"""

import argparse
import logging
import sys
from typing import List, Optional

import settings
from cli.auth_handlers import run_auth_command
from oauth import CredentialManager, CredentialStore
from utils.debug_console import configure_logging, create_console

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claudesub",
        description="Claude Max/Pro subscription authentication"
    )
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--data-dir",
        default=None,
        help=f"Directory holding {settings.AUTH_FILE_NAME} (default: from config)"
    )

    commands = parser.add_subparsers(dest="command", required=True)
    auth_parser = commands.add_parser("auth", help="Manage OAuth credentials")
    auth_commands = auth_parser.add_subparsers(dest="auth_command", required=True)

    login_parser = auth_commands.add_parser("login", help="Sign in with a Claude Pro/Max account")
    login_parser.add_argument(
        "--force",
        action="store_true",
        help="Sign in again even if a valid token is stored"
    )
    auth_commands.add_parser("logout", help="Remove stored credentials")
    auth_commands.add_parser("status", help="Show token status")
    auth_commands.add_parser("refresh", help="Refresh the access token now")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)

    debug_logger = configure_logging(
        level=settings.LOG_LEVEL,
        debug=args.debug,
        log_file=settings.DEBUG_LOG_FILE
    )
    console = create_console(debug_logger)
    if debug_logger:
        debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")

    manager = CredentialManager(store=CredentialStore(args.data_dir))
    try:
        return run_auth_command(
            args.auth_command,
            manager,
            console,
            force=getattr(args, "force", False)
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130
    finally:
        manager.close()


if __name__ == "__main__":
    sys.exit(main())
