"""
Service-specific Exception Classes
Handles errors specific to remote fetching and linked-document discovery.
"""

import logging
from typing import Any

from .base import ServiceError


class NetworkError(ServiceError):
    """Raised when a remote request fails or returns an error status."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ):
        """
        Initialize network error.

        Args:
            message: Error message
            url: URL that was requested
            status_code: HTTP status code, when a response was received
            **kwargs: Additional arguments for base class
        """
        context = kwargs.pop("context", {})
        if url:
            context["url"] = url
        if status_code:
            context["status_code"] = status_code

        self.url = url
        self.status_code = status_code
        super().__init__(
            message,
            service_name="RemoteFetchService",
            operation="fetch",
            context=context,
            **kwargs,
        )

    def _get_default_user_message(self) -> str:
        if self.status_code:
            return f"The server responded with HTTP {self.status_code}."
        return "Could not reach the remote server."


class RemoteContentError(NetworkError):
    """Raised when remote content is not a usable markdown/text document."""

    def _get_default_user_message(self) -> str:
        return "The URL does not point to a markdown or text document."


class DiscoveryError(ServiceError):
    """Raised when a linked-document crawl cannot start."""

    def __init__(self, message: str, root: str | None = None, **kwargs: Any):
        context = kwargs.pop("context", {})
        if root:
            context["root"] = root

        kwargs.setdefault("log_level", logging.WARNING)
        self.root = root
        super().__init__(
            message,
            service_name="DiscoveryService",
            operation="discover linked documents",
            context=context,
            **kwargs,
        )
