"""
Base provider interface for model provider clients.
Defines the contract that all provider implementations must follow.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models import ModelSpec


@dataclass
class ProviderClientOptions:
    """Options a provider client is constructed from

    Attributes:
        base_url: API base URL, empty for the provider default
        api_key: Static API key for non-OAuth authentication
        model: Model used when a request does not name one
        max_tokens: max_tokens used when a request does not set one
        models: Configured models, provider defaults when empty
        extra_headers: Headers added to every request
        data_directory: Directory holding the credential document
    """
    base_url: str = ""
    api_key: Optional[str] = None
    model: Optional[str] = None
    max_tokens: int = 4096
    models: List[ModelSpec] = field(default_factory=list)
    extra_headers: Dict[str, str] = field(default_factory=dict)
    data_directory: Optional[str] = None


class ProviderClient(ABC):
    """Abstract base class for provider clients"""

    def __init__(self, options: ProviderClientOptions):
        self.options = options

    @abstractmethod
    def create_message(self, **params: Any) -> Any:
        """Send a non-streaming Messages API request

        Args:
            **params: Messages API parameters

        Returns:
            The provider's message response
        """
        pass

    @abstractmethod
    def stream_message(self, **params: Any) -> Any:
        """Open a streaming Messages API request

        Args:
            **params: Messages API parameters

        Returns:
            Context manager yielding stream events
        """
        pass

    @abstractmethod
    def list_models(self) -> List[ModelSpec]:
        """Models this provider offers"""
        pass

    def close(self):
        pass
