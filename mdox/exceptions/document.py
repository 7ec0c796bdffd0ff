"""
Document-related Exception Classes
Handles errors raised while loading, rendering, saving and navigating documents.
"""

import logging
from typing import Any

from .base import MdoxError


class DocumentError(MdoxError):
    """Base class for document-related errors."""

    def __init__(self, message: str, locator: str | None = None, **kwargs: Any):
        """
        Initialize document error.

        Args:
            message: Error message
            locator: Path or URL of the document (if applicable)
            **kwargs: Additional arguments for base class
        """
        context = kwargs.pop("context", {})
        if locator:
            context["locator"] = locator

        self.locator = locator
        super().__init__(message, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        return "An error occurred while processing the document."


class LoadError(DocumentError):
    """Raised when a document's content or rendering cannot be obtained."""

    def __init__(
        self,
        message: str,
        locator: str | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ):
        context = kwargs.pop("context", {})
        if reason:
            context["reason"] = reason

        self.reason = reason
        super().__init__(message, locator=locator, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        if self.reason:
            return f"Failed to open document: {self.reason}"
        return "Failed to open the document."


class SaveError(DocumentError):
    """Raised when persisting a document fails."""

    def __init__(
        self,
        message: str,
        locator: str | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ):
        context = kwargs.pop("context", {})
        if reason:
            context["reason"] = reason

        self.reason = reason
        super().__init__(message, locator=locator, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        if self.reason:
            return f"Failed to save file: {self.reason}"
        return "Failed to save file. Your changes have not been written."


class RemoteSaveRejectedError(SaveError):
    """Raised when a save is attempted on a document fetched from a URL."""

    def __init__(self, message: str, locator: str | None = None, **kwargs: Any):
        kwargs.setdefault("log_level", logging.WARNING)
        super().__init__(message, locator=locator, reason="remote content", **kwargs)

    def _get_default_user_message(self) -> str:
        return "Cannot save remote content. Use Save As to store a local copy."


class RenderError(DocumentError):
    """Raised when markdown cannot be rendered to HTML."""

    def _get_default_user_message(self) -> str:
        return "The document could not be rendered."


class LinkResolutionError(DocumentError):
    """Raised when a link inside rendered content cannot be resolved."""

    def __init__(
        self,
        message: str,
        href: str | None = None,
        base_locator: str | None = None,
        **kwargs: Any,
    ):
        context = kwargs.pop("context", {})
        if href:
            context["href"] = href

        self.href = href
        super().__init__(message, locator=base_locator, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        if self.href:
            return f"Failed to open link: {self.href}"
        return "Failed to open link."
