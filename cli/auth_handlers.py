"""Authentication handlers for CLI"""

import logging
from typing import Tuple

import httpx
from rich.markup import escape

from auth_cli import CLIAuthFlow
from oauth import (
    CredentialManager,
    CredentialsNotFoundError,
    CredentialsStorageError,
    OAuthError,
    RefreshTokenMissingError,
    TokenRefreshError,
)
from cli.status_display import get_auth_status, show_token_status

logger = logging.getLogger(__name__)


def check_and_refresh_auth(manager: CredentialManager, console) -> Tuple[bool, str, str]:
    """
    Check authentication status and attempt refresh if needed

    Args:
        manager: CredentialManager instance
        console: Rich console for output

    Returns:
        Tuple of (success: bool, status: str, message: str)
    """
    status = manager.get_status()

    # No tokens at all
    if not status["has_tokens"]:
        return False, "NO_AUTH", "No authentication tokens found. Please login first"

    # Token is still valid
    if not status["needs_refresh"]:
        return True, "VALID", f"Token valid for: {status['time_until_expiry']}"

    console.print("[yellow]Token expired, attempting automatic refresh...[/yellow]")

    try:
        manager.refresh_now()
    except CredentialsNotFoundError:
        return False, "NO_AUTH", "No authentication tokens found. Please login first"
    except RefreshTokenMissingError:
        return False, "NO_REFRESH", "Token expired and no refresh token available. Please login again"
    except TokenRefreshError as e:
        status_code = getattr(e.__cause__, "status_code", None)
        if status_code is not None and 500 <= status_code < 600:
            return False, "SERVER_ERROR", f"Server error during token refresh (HTTP {status_code}). Try again later"
        return False, "REFRESH_FAILED", "Refresh token invalid or expired. Please login again"
    except httpx.TimeoutException:
        return False, "NETWORK_ERROR", "Token refresh timed out. Check connection and retry"
    except httpx.HTTPError:
        return False, "NETWORK_ERROR", "Network error during token refresh. Check connection and retry"

    new_status = manager.get_status()
    time_remaining = new_status.get("time_until_expiry", "unknown")
    return True, "REFRESHED", f"Automatically refreshed expired token. Token valid for: {time_remaining}"


def login(manager: CredentialManager, console, force: bool = False) -> int:
    """
    Handle the login command

    Args:
        manager: CredentialManager instance
        console: Rich console for output
        force: Run the browser flow even if a usable token exists

    Returns:
        Process exit code
    """
    if not force:
        success, auth_status, message = check_and_refresh_auth(manager, console)
        if success:
            console.print(f"[green]Already authenticated.[/green] {message}")
            console.print("[dim]Use --force to sign in again[/dim]")
            return 0
        if auth_status not in ("NO_AUTH", "NO_REFRESH", "REFRESH_FAILED"):
            console.print(f"[yellow]{message}[/yellow]")
        logger.debug(f"[AUTH] Starting browser login, previous status: {auth_status}")

    auth_flow = CLIAuthFlow(manager, console)
    if auth_flow.authenticate():
        return 0
    console.print("[red]Login failed[/red]")
    return 1


def logout(manager: CredentialManager, console) -> int:
    """Handle the logout command"""
    if not manager.has_auth():
        console.print("[yellow]No stored credentials to remove[/yellow]")
        return 0

    manager.clear()
    console.print("[green][OK][/green] Signed out, stored credentials removed")
    return 0


def status(manager: CredentialManager, console) -> int:
    """Handle the status command"""
    auth_status, detail = get_auth_status(manager)
    colour = {"VALID": "green", "EXPIRING": "yellow"}.get(auth_status, "red")
    console.print(f"Authentication: [{colour}]{auth_status}[/{colour}] - {detail}")
    show_token_status(manager, console)
    return 0 if auth_status in ("VALID", "EXPIRING") else 1


def refresh(manager: CredentialManager, console) -> int:
    """Handle the refresh command"""
    auth_flow = CLIAuthFlow(manager, console)
    return 0 if auth_flow.refresh_token() else 1


def run_auth_command(command: str, manager: CredentialManager, console, force: bool = False) -> int:
    """Dispatch an auth subcommand, reporting OAuth and network errors"""
    try:
        if command == "login":
            return login(manager, console, force=force)
        if command == "logout":
            return logout(manager, console)
        if command == "status":
            return status(manager, console)
        if command == "refresh":
            return refresh(manager, console)
    except CredentialsStorageError as e:
        console.print(f"[red][ERROR][/red] {escape(str(e))}")
        console.print(f"Remove {escape(str(manager.store_backend.token_file))} and run 'auth login' again")
        logger.debug(f"[AUTH] Command {command} failed on credential storage: {e!r}")
        return 1
    except (OAuthError, httpx.HTTPError) as e:
        console.print(f"[red][ERROR][/red] {escape(str(e))}")
        logger.debug(f"[AUTH] Command {command} failed: {e!r}")
        return 1

    raise ValueError(f"Unknown auth command: {command}")
