"""
Interfaces Module

Abstract collaborator contracts consumed by the session core.
"""

from .service_interfaces import (
    IContentStore,
    IDiscoveryService,
    IPersistencePort,
    IRemoteFetchService,
    IRenderService,
    IScrollablePane,
    IUserPrompt,
)

__all__ = [
    "IContentStore",
    "IRenderService",
    "IRemoteFetchService",
    "IDiscoveryService",
    "IUserPrompt",
    "IScrollablePane",
    "IPersistencePort",
]
