"""Claude Max/Pro subscription provider backed by the Anthropic SDK"""

import logging
from typing import Any, List, Optional

import anthropic
import httpx

from models import CLAUDESUB_MODELS, DEFAULT_CLAUDESUB_MODEL, ModelSpec
from oauth import CredentialManager, CredentialStore
from settings import API_BASE_URL, CLAUDESUB_PROVIDER_ID
from .base_provider import ProviderClient, ProviderClientOptions
from .registry import ProviderRegistration, ProviderRegistry
from .system_message import inject_claude_code_system_message
from .transport import AsyncOAuthTransport, OAuthTransport

logger = logging.getLogger(__name__)

# The SDK insists on some credential; the transport strips this header and
# sends the OAuth Bearer token instead
OAUTH_PLACEHOLDER_API_KEY = "oauth-managed"


def normalize_base_url(base_url: str) -> Optional[str]:
    """Base URL to hand to the SDK, None for the SDK default

    The SDK appends /v1 itself, so a trailing /v1 is stripped.
    """
    if not base_url or base_url.rstrip("/") == API_BASE_URL:
        return None
    base_url = base_url.rstrip("/")
    if base_url.endswith("/v1"):
        base_url = base_url[:-len("/v1")]
    return base_url


class ClaudeSubProvider(ProviderClient):
    """Provider client for Claude Pro/Max subscriptions

    When OAuth credentials are stored, every SDK request goes through
    OAuthTransport. Otherwise the client falls back to API key authentication.
    """

    supports_oauth = True

    def __init__(self, options: ProviderClientOptions, credential_manager: Optional[CredentialManager] = None):
        super().__init__(options)
        if credential_manager is None:
            credential_manager = CredentialManager(store=CredentialStore(options.data_directory))
        self.credential_manager = credential_manager
        self.use_oauth = self.credential_manager.has_auth()
        self._async_client: Optional[anthropic.AsyncAnthropic] = None

        if self.use_oauth:
            logger.info("Using OAuth authentication for claudesub provider")
            self.client = anthropic.Anthropic(
                http_client=httpx.Client(transport=OAuthTransport(self.credential_manager)),
                **self._client_kwargs(),
            )
        else:
            logger.info("OAuth not available, using API key authentication for claudesub provider")
            self.client = anthropic.Anthropic(**self._client_kwargs())

    def _client_kwargs(self) -> dict:
        kwargs: dict = {
            "api_key": OAUTH_PLACEHOLDER_API_KEY if self.use_oauth else self.options.api_key,
        }
        if self.use_oauth:
            # The transport already refreshes and resends once on 401; SDK
            # retries would repeat that cycle and hide the rejection
            kwargs["max_retries"] = 0
        base_url = normalize_base_url(self.options.base_url)
        if base_url:
            kwargs["base_url"] = base_url
        if self.options.extra_headers:
            kwargs["default_headers"] = dict(self.options.extra_headers)
        return kwargs

    @property
    def async_client(self) -> anthropic.AsyncAnthropic:
        """Async SDK client sharing this provider's credentials"""
        if self._async_client is None:
            if self.use_oauth:
                self._async_client = anthropic.AsyncAnthropic(
                    http_client=httpx.AsyncClient(transport=AsyncOAuthTransport(self.credential_manager)),
                    **self._client_kwargs(),
                )
            else:
                self._async_client = anthropic.AsyncAnthropic(**self._client_kwargs())
        return self._async_client

    def _prepare_params(self, params: dict) -> dict:
        params.setdefault("model", self.options.model or DEFAULT_CLAUDESUB_MODEL)
        params.setdefault("max_tokens", self.options.max_tokens)
        if self.use_oauth:
            params = inject_claude_code_system_message(params)
        return params

    def create_message(self, **params: Any) -> Any:
        return self.client.messages.create(**self._prepare_params(params))

    def stream_message(self, **params: Any) -> Any:
        return self.client.messages.stream(**self._prepare_params(params))

    async def create_message_async(self, **params: Any) -> Any:
        return await self.async_client.messages.create(**self._prepare_params(params))

    # OAuth capability
    def has_oauth_credentials(self) -> bool:
        return self.credential_manager.has_auth()

    def requires_oauth_setup(self) -> bool:
        return True

    def oauth_models(self) -> List[ModelSpec]:
        """Models with zero per-token cost, empty until OAuth credentials exist"""
        if not self.has_oauth_credentials():
            return []
        return [model.as_subscription_model() for model in self.list_models()]

    def list_models(self) -> List[ModelSpec]:
        return list(self.options.models) or list(CLAUDESUB_MODELS)

    def close(self):
        self.client.close()
        self.credential_manager.close()


def register_builtin_providers(registry: ProviderRegistry):
    """Register the providers shipped with claudesub"""
    registry.register(ProviderRegistration(
        id=CLAUDESUB_PROVIDER_ID,
        name="Claude Max/Pro Subscription",
        provider_type="anthropic",
        supports_oauth=True,
        constructor=ClaudeSubProvider,
    ))
