"""
Storage Exception Classes
Handles errors related to local file access and path resolution.
"""

from typing import Any

from .base import MdoxError


class StorageError(MdoxError):
    """Base class for storage-related errors."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        **kwargs: Any,
    ):
        """
        Initialize storage error.

        Args:
            message: Error message
            path: File or directory path
            operation: Storage operation that failed
            **kwargs: Additional arguments for base class
        """
        context = kwargs.pop("context", {})
        if path:
            context["path"] = path
        if operation:
            context["operation"] = operation

        self.path = path
        self.operation = operation
        super().__init__(message, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        if self.operation:
            return f"Failed to {self.operation}. Please check file permissions and try again."
        return "File system operation failed. Please try again."


class DocumentNotFoundError(StorageError):
    """Raised when a requested file cannot be found."""

    def __init__(self, message: str, path: str | None = None, **kwargs: Any):
        super().__init__(message, path=path, operation="locate file", **kwargs)

    def _get_default_user_message(self) -> str:
        if self.path:
            return f"File not found: {self.path}"
        return "The requested file was not found."


class FileAccessError(StorageError):
    """Raised when file access is denied or fails."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        access_type: str | None = None,
        **kwargs: Any,
    ):
        """
        Initialize file access error.

        Args:
            message: Error message
            path: File path
            access_type: Type of access attempted (read, write, delete, rename)
            **kwargs: Additional arguments for base class
        """
        context = kwargs.pop("context", {})
        if access_type:
            context["access_type"] = access_type

        operation = f"{access_type} file" if access_type else "access file"
        self.access_type = access_type
        super().__init__(
            message, path=path, operation=operation, context=context, **kwargs
        )

    def _get_default_user_message(self) -> str:
        if self.access_type:
            return f"Permission denied: cannot {self.access_type} file."
        return "File access denied. Please check permissions."


class PathResolutionError(StorageError):
    """Raised when a relative path cannot be resolved against its base."""

    def __init__(
        self,
        message: str,
        base: str | None = None,
        relative: str | None = None,
        **kwargs: Any,
    ):
        context = kwargs.pop("context", {})
        if relative:
            context["relative"] = relative

        self.base = base
        self.relative = relative
        super().__init__(
            message, path=base, operation="resolve path", context=context, **kwargs
        )

    def _get_default_user_message(self) -> str:
        if self.relative:
            return f"Could not resolve path: {self.relative}"
        return "Could not resolve path."
