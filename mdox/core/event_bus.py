"""
Host Event Bus
Lifecycle events raised by the surrounding application (menus, drag-drop,
command line, single-instance forwarding) that the session core reacts to.
"""

from PyQt6.QtCore import QObject, pyqtSignal


class HostEventBus(QObject):
    """Signals emitted by the host shell; the application controller subscribes."""

    open_requested = pyqtSignal(str)  # locator
    new_document_requested = pyqtSignal()
    save_as_requested = pyqtSignal()
    open_url_requested = pyqtSignal(str)  # url
