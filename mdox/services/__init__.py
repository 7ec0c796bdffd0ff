"""
Services Module

Default implementations of the collaborators the session core consumes:
local storage, markdown rendering, remote fetching and link discovery.
"""

from .content_store import LocalContentStore
from .discovery_service import LinkDiscoveryService
from .remote_fetch_service import HttpRemoteFetchService
from .render_service import MarkdownRenderService

__all__ = [
    "LocalContentStore",
    "MarkdownRenderService",
    "HttpRemoteFetchService",
    "LinkDiscoveryService",
]
