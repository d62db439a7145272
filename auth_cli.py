import logging

import httpx
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from oauth import AuthorizationCodeError, CredentialManager, CredentialsStorageError, OAuthError

logger = logging.getLogger(__name__)


class CLIAuthFlow:
    """Handle OAuth authentication flow in CLI"""

    def __init__(self, credential_manager: CredentialManager, console: Console):
        self.manager = credential_manager
        self.oauth = credential_manager.oauth_client
        self.console = console

    def authenticate(self) -> bool:
        """
        Run the OAuth authentication flow
        Returns True if successful, False otherwise
        """
        console = self.console
        logger.debug("[AUTH] Starting authentication flow")

        try:
            # Step 1: Generate auth URL and open browser
            console.print("\n[bold]Step 1:[/bold] Opening browser for authentication...")
            auth_url = self.oauth.get_authorize_url()

            if self.oauth.open_browser(auth_url):
                console.print("[green][OK][/green] Browser opened successfully")
            else:
                console.print("[yellow]Could not open browser automatically[/yellow]")
            console.print(f"If the page did not open, visit this URL:\n{auth_url}")

            # Step 2: Instructions
            console.print("\n[bold]Step 2:[/bold] Complete the login process in your browser")
            console.print("  1. Login to your Claude Pro/Max account if prompted")
            console.print("  2. Authorize the application")
            console.print("  3. You will see an authorization code on the Anthropic page")

            # Step 3: Get code from user
            console.print("\n[bold]Step 3:[/bold] Paste the authorization code below")
            console.print("[dim]The code should look like: CODE#STATE[/dim]\n")

            try:
                code = input("Authorization code: ")
            except (KeyboardInterrupt, EOFError):
                console.print("\n[yellow]Authentication cancelled by user[/yellow]")
                logger.debug("[AUTH] Authentication cancelled by user")
                return False
            logger.debug(f"[AUTH] User entered code (length: {len(code.strip())})")

            # Step 4: Exchange code for tokens
            console.print("\n[bold]Step 4:[/bold] Exchanging code for tokens...")
            token_response = self.oauth.exchange_code(code)
            credentials = self.manager.store(token_response)

            console.print("[green][OK][/green] Authentication successful!")
            console.print("[dim]Using OAuth Bearer token for requests[/dim]")
            status = self.manager.get_status()
            if status["expires_at"]:
                console.print(f"Token expires at: {status['expires_at']}")
            logger.debug(f"[AUTH] OAuth tokens obtained, scope: {credentials.scope}")
            return True

        except AuthorizationCodeError as e:
            console.print(f"[red][ERROR][/red] {escape(str(e))}")
            console.print("[dim]A new authorization URL is needed to try again[/dim]")
            logger.debug(f"[AUTH] Authorization code rejected: {e}")
        except CredentialsStorageError:
            # Retrying cannot help while the stored document is unreadable
            raise
        except (OAuthError, httpx.HTTPError) as e:
            console.print(f"[red][ERROR][/red] Authentication failed: {escape(str(e))}")
            logger.debug(f"[AUTH] Authentication failed with exception: {e}")

        # Offer retry
        retry = Prompt.ask("\nWould you like to try again?", choices=["y", "n"], default="n")
        if retry.lower() == "y":
            return self.authenticate()
        return False

    def refresh_token(self) -> bool:
        """
        Attempt to refresh the access token
        Returns True if successful, False otherwise
        """
        console = self.console
        try:
            console.print("Refreshing access token...")
            self.manager.refresh_now()
        except CredentialsStorageError:
            raise
        except (OAuthError, httpx.HTTPError) as e:
            console.print(f"[red][ERROR][/red] Refresh failed: {escape(str(e))}")
            console.print("You may need to login again")
            logger.debug(f"[AUTH] Token refresh failed with exception: {e}")
            return False

        console.print("[green][OK][/green] Token refreshed successfully")
        status = self.manager.get_status()
        if status["expires_at"]:
            console.print(f"New expiry: {status['expires_at']}")
        return True
