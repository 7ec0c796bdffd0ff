"""
Application Controller - Top-Level Controller for Application Coordination

This controller wires the default services into the session core, forwards
host lifecycle events (open, new, save as, open URL) to the session and owns
the shutdown sequence.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from PyQt6.QtCore import QObject, QSettings, pyqtSignal
from PyQt6.QtWidgets import QScrollBar

from mdox.controllers.document_session_controller import DocumentSessionController
from mdox.controllers.linked_documents_controller import LinkedDocumentsController
from mdox.core.config_manager import ConfigManager
from mdox.core.event_bus import HostEventBus
from mdox.core.recent_files import RecentFilesList
from mdox.core.scroll_sync import Pane, ScrollSyncCoordinator
from mdox.core.state_manager import StateManager
from mdox.interfaces.service_interfaces import IContentStore, IUserPrompt
from mdox.scroll_pane import ScrollBarPane
from mdox.services import (
    HttpRemoteFetchService,
    LinkDiscoveryService,
    LocalContentStore,
    MarkdownRenderService,
)
from mdox.services.user_prompt import StaticUserPrompt

logger = logging.getLogger(__name__)


class ApplicationController(QObject):
    """
    {
        "name": "ApplicationController",
        "version": "1.0.0",
        "description": "Top-level application controller for dependency injection and coordination.",
        "dependencies": ["ConfigManager", "StateManager", "All Services", "All Controllers"],
        "interface": {
            "inputs": ["host events", "lifecycle events"],
            "outputs": "A wired DocumentSessionController"
        }
    }

    Main application controller that:
    - Builds the default services and injects them into the controllers
    - Routes host events into the session controller
    - Handles application shutdown
    """

    # Application-level signals
    application_ready = pyqtSignal()
    application_error = pyqtSignal(str)  # error_message

    def __init__(
        self,
        settings: QSettings | None = None,
        *,
        user_prompt: IUserPrompt | None = None,
        content_store: IContentStore | None = None,
    ):
        """
        Initialize application controller.

        Args:
            settings: Backing store for persisted settings
            user_prompt: Confirmation dialogs; headless runs decline by default
            content_store: Local storage; defaults to the file system
        """
        super().__init__()

        self._settings = settings
        self._user_prompt = user_prompt or StaticUserPrompt()
        self._content_store = content_store

        # Infrastructure
        self._config_manager: ConfigManager | None = None
        self._state_manager: StateManager | None = None

        # Services
        self._render_service: MarkdownRenderService | None = None
        self._remote_fetch_service: HttpRemoteFetchService | None = None
        self._discovery_service: LinkDiscoveryService | None = None

        # Controllers
        self._linked_documents_controller: LinkedDocumentsController | None = None
        self._session_controller: DocumentSessionController | None = None

        self._event_bus: HostEventBus | None = None
        self._pending: set[asyncio.Task] = set()
        self._initialized = False

        logger.info("ApplicationController created")

    def initialize_application(self) -> bool:
        """
        Initialize the entire application stack.

        Returns:
            True if initialization successful, False otherwise
        """
        try:
            logger.info("Starting application initialization")

            self._initialize_infrastructure()
            self._initialize_services()
            self._initialize_controllers()

            self._initialized = True
            self.application_ready.emit()

            logger.info("Application initialization completed successfully")
            return True

        except Exception as e:
            logger.error(f"Application initialization failed: {e}")
            self.application_error.emit(f"Initialization failed: {e}")
            return False

    def _initialize_infrastructure(self) -> None:
        logger.info("Initializing infrastructure")
        self._config_manager = ConfigManager(self._settings)
        self._state_manager = StateManager()
        self._state_manager.set_state("ui.theme", self._config_manager.theme)

    def _initialize_services(self) -> None:
        logger.info("Initializing services")
        if self._content_store is None:
            self._content_store = LocalContentStore()
        self._render_service = MarkdownRenderService()
        self._remote_fetch_service = HttpRemoteFetchService(
            timeout=self._config_manager.get("remote.timeout_seconds"),
            user_agent=self._config_manager.get("remote.user_agent"),
        )
        self._discovery_service = LinkDiscoveryService(self._remote_fetch_service)

    def _initialize_controllers(self) -> None:
        logger.info("Initializing controllers")
        config_manager = self._config_manager

        self._linked_documents_controller = LinkedDocumentsController(
            self._discovery_service,
            self._state_manager,
            max_depth=int(config_manager.get("discovery.max_depth", 2)),
            remote_delay=int(config_manager.get("discovery.remote_delay_ms", 500)) / 1000,
        )
        self._session_controller = DocumentSessionController(
            content_store=self._content_store,
            render_service=self._render_service,
            remote_fetch_service=self._remote_fetch_service,
            linked_documents=self._linked_documents_controller,
            user_prompt=self._user_prompt,
            config_manager=config_manager,
            state_manager=self._state_manager,
            recent_files=RecentFilesList(config_manager),
            scroll_sync=ScrollSyncCoordinator(
                suppression_window=int(config_manager.get("scroll_sync.suppression_ms", 100)) / 1000
            ),
        )

    # Host event routing

    def bind_host_events(self, event_bus: HostEventBus) -> None:
        """Connect host lifecycle signals to the session controller."""
        if self._session_controller is None:
            raise RuntimeError("Application must be initialized before binding host events")

        session = self._session_controller
        event_bus.open_requested.connect(lambda locator: self._schedule(session.open_root(locator)))
        event_bus.open_url_requested.connect(lambda url: self._schedule(session.open_url(url)))
        event_bus.new_document_requested.connect(lambda: self._schedule(session.new_document()))
        event_bus.save_as_requested.connect(lambda: self._schedule(session.save_as()))
        self._event_bus = event_bus
        logger.info("Host events bound to session controller")

    def _schedule(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Host event handling failed: {error}")
            self.application_error.emit(str(error))

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled host event has been handled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def attach_scroll_bars(self, editor_scroll_bar: QScrollBar, viewer_scroll_bar: QScrollBar) -> tuple[ScrollBarPane, ScrollBarPane]:
        """Connect the split view's scroll bars to the session's scroll sync."""
        if self._session_controller is None:
            raise RuntimeError("Application must be initialized before attaching scroll bars")

        coordinator = self._session_controller.scroll_sync
        return (
            ScrollBarPane(Pane.EDITOR, editor_scroll_bar, coordinator),
            ScrollBarPane(Pane.VIEWER, viewer_scroll_bar, coordinator),
        )

    # Getters for UI components

    def get_session_controller(self) -> DocumentSessionController | None:
        return self._session_controller

    def get_linked_documents_controller(self) -> LinkedDocumentsController | None:
        return self._linked_documents_controller

    def get_config_manager(self) -> ConfigManager | None:
        return self._config_manager

    def get_state_manager(self) -> StateManager | None:
        return self._state_manager

    def get_content_store(self) -> IContentStore | None:
        return self._content_store

    # Application lifecycle

    async def shutdown(self) -> None:
        """Cancel background work and release network resources."""
        logger.info("Handling application shutdown")
        for task in list(self._pending):
            task.cancel()
        await asyncio.gather(*list(self._pending), return_exceptions=True)
        self._pending.clear()

        if self._session_controller is not None:
            await self._session_controller.aclose()
        if self._remote_fetch_service is not None:
            await self._remote_fetch_service.aclose()
        logger.info("Application shutdown completed")

    def is_initialized(self) -> bool:
        return self._initialized

    def get_application_status(self) -> dict[str, Any]:
        """Get comprehensive application status."""
        session = self._session_controller
        return {
            "initialized": self._initialized,
            "document": session.identity.label if session and session.identity else None,
            "mode": session.mode.value if session else None,
            "dirty": session.dirty if session else False,
            "recent_files": session.recent_files if session else [],
            "state_summary": self._state_manager.get_state_summary() if self._state_manager else {},
        }
