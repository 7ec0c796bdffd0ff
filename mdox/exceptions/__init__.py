"""
Exception Hierarchy for mdox
Provides standardized error handling with consistent exception types.
"""

from .base import (
    ConfigurationError,
    MdoxError,
    ServiceError,
    ValidationError,
)
from .document import (
    DocumentError,
    LinkResolutionError,
    LoadError,
    RemoteSaveRejectedError,
    RenderError,
    SaveError,
)
from .service import (
    DiscoveryError,
    NetworkError,
    RemoteContentError,
)
from .storage import (
    DocumentNotFoundError,
    FileAccessError,
    PathResolutionError,
    StorageError,
)

__all__ = [
    # Base exceptions
    "MdoxError",
    "ValidationError",
    "ConfigurationError",
    "ServiceError",
    # Document exceptions
    "DocumentError",
    "LoadError",
    "SaveError",
    "RemoteSaveRejectedError",
    "RenderError",
    "LinkResolutionError",
    # Storage exceptions
    "StorageError",
    "DocumentNotFoundError",
    "FileAccessError",
    "PathResolutionError",
    # Service exceptions
    "NetworkError",
    "RemoteContentError",
    "DiscoveryError",
]
