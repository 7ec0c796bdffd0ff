"""
Controllers Module

Qt-facing coordinators of the mdox state engine:
- ApplicationController: wiring, host events and shutdown
- DocumentSessionController: the current document, navigation and editing
- LinkedDocumentsController: race-safe linked-document discovery
"""

from .application_controller import ApplicationController
from .document_session_controller import DocumentSessionController
from .linked_documents_controller import LinkedDocumentsController

__all__ = [
    "ApplicationController",
    "DocumentSessionController",
    "LinkedDocumentsController",
]
