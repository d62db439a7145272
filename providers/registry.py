"""Provider registry

The registry is an ordinary object: the application creates one at start-up,
registers the providers it ships and hands it to whatever assembles provider
clients. Whether a provider authenticates with OAuth is declared when it is
registered.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .base_provider import ProviderClient, ProviderClientOptions

logger = logging.getLogger(__name__)

ProviderConstructor = Callable[[ProviderClientOptions], ProviderClient]


@dataclass(frozen=True)
class ProviderRegistration:
    """Information about a registered provider

    Attributes:
        id: Provider identifier used in configuration
        name: Human readable name
        constructor: Builds a client from options
        provider_type: API family, e.g. "anthropic"
        supports_oauth: Provider authenticates with OAuth credentials
    """
    id: str
    name: str
    constructor: ProviderConstructor
    provider_type: str = ""
    supports_oauth: bool = False


class ProviderRegistry:
    """Maps provider ids to registrations"""

    def __init__(self):
        self._lock = threading.RLock()
        self._providers: Dict[str, ProviderRegistration] = {}

    def register(self, registration: ProviderRegistration):
        """Register a provider

        Raises:
            ValueError: If the registration is incomplete or the id is taken
        """
        if registration is None:
            raise ValueError("Provider registration cannot be None")
        if not registration.id:
            raise ValueError("Provider ID cannot be empty")
        if registration.constructor is None:
            raise ValueError("Provider constructor cannot be None")

        with self._lock:
            if registration.id in self._providers:
                raise ValueError(f"Provider with ID {registration.id} is already registered")
            self._providers[registration.id] = registration

        logger.debug(f"Registered provider {registration.id} (oauth={registration.supports_oauth})")

    def get(self, provider_id: str) -> Optional[ProviderRegistration]:
        with self._lock:
            return self._providers.get(provider_id)

    def list_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._providers)

    def is_registered(self, provider_id: str) -> bool:
        return self.get(provider_id) is not None

    def is_oauth_provider(self, provider_id: str) -> bool:
        registration = self.get(provider_id)
        return registration is not None and registration.supports_oauth

    def oauth_provider_ids(self) -> List[str]:
        with self._lock:
            return sorted(pid for pid, reg in self._providers.items() if reg.supports_oauth)

    def create(
        self,
        provider_id: str,
        options: ProviderClientOptions,
        provider_type: Optional[str] = None
    ) -> Optional[ProviderClient]:
        """Construct a client for a registered provider

        Args:
            provider_id: Registered provider id
            options: Client options
            provider_type: Expected API family, checked against the registration

        Returns:
            New client, or None if the id is unknown or the type does not match
        """
        registration = self.get(provider_id)
        if registration is None:
            return None

        if provider_type and registration.provider_type and provider_type != registration.provider_type:
            logger.warning(
                f"Provider {provider_id} is of type {registration.provider_type}, not {provider_type}"
            )
            return None

        return registration.constructor(options)
