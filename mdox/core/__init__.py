"""
Core Architecture Components

This package contains the state engine of the mdox viewer/editor.

Key Components:
- StateManager: View state management with observer pattern
- NavigationHistoryStack: Linear back/forward browsing history
- ScrollSyncCoordinator: Split-view scroll mirroring
- LinkResolver: Link classification, heading ids and link resolution
"""

from .models import DocumentIdentity, DocumentSession, LinkedDocument, LinkKind, Mode
from .navigation_history import NavigationHistoryStack
from .state_manager import StateChangeType, StateManager

__all__ = [
    "StateManager",
    "StateChangeType",
    "NavigationHistoryStack",
    "DocumentIdentity",
    "DocumentSession",
    "LinkedDocument",
    "LinkKind",
    "Mode",
]
