"""
Provider clients for the Claude subscription API.
Provides the OAuth transports, the provider registry and the claudesub provider.
"""
from providers.base_provider import ProviderClient, ProviderClientOptions
from providers.registry import ProviderRegistration, ProviderRegistry
from providers.transport import OAuthTransport, AsyncOAuthTransport, build_authorized_request
from providers.claudesub_provider import ClaudeSubProvider, register_builtin_providers

__all__ = [
    'ProviderClient',
    'ProviderClientOptions',
    'ProviderRegistration',
    'ProviderRegistry',
    'OAuthTransport',
    'AsyncOAuthTransport',
    'build_authorized_request',
    'ClaudeSubProvider',
    'register_builtin_providers',
]
