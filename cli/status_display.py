"""Status display functionality for CLI"""

from typing import Tuple

from rich.table import Table

from oauth import CredentialManager


def show_token_status(manager: CredentialManager, console):
    """
    Display detailed token status

    Args:
        manager: CredentialManager instance
        console: Rich console for output
    """
    status = manager.get_status()

    table = Table(title="Token Status Details")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Has Tokens", "Yes" if status["has_tokens"] else "No")
    table.add_row("Is Expired", "Yes" if status["is_expired"] else "No")

    if status["expires_at"]:
        table.add_row("Needs Refresh", "Yes" if status["needs_refresh"] else "No")
        table.add_row("Expires At", status["expires_at"])
        table.add_row("Time Until Expiry", status["time_until_expiry"])
    if status["scope"]:
        table.add_row("Scope", status["scope"])

    table.add_row("Token File", status["token_file"])

    console.print(table)


def get_auth_status(manager: CredentialManager) -> Tuple[str, str]:
    """
    Get authentication status and expiry info

    Args:
        manager: CredentialManager instance

    Returns:
        Tuple of (status, detail_message)
    """
    status = manager.get_status()

    if not status["has_tokens"]:
        return "NO AUTH", "No tokens available"

    if status["is_expired"]:
        return "EXPIRED", f"Expired {status['time_until_expiry']}"

    if status["needs_refresh"]:
        return "EXPIRING", f"Expires in {status['time_until_expiry']}, will refresh on next use"

    return "VALID", f"Expires in {status['time_until_expiry']}"
