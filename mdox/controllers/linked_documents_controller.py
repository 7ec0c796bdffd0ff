"""
Linked Documents Controller - Race-safe client for background link discovery

This controller keeps the sidebar's linked-document list consistent with the
current root document while crawls complete in arbitrary order.
"""

import asyncio
import logging

from PyQt6.QtCore import QObject, pyqtSignal

import config
from mdox.core.models import DocumentIdentity, LinkedDocument
from mdox.core.state_manager import StateManager
from mdox.interfaces.service_interfaces import IDiscoveryService

logger = logging.getLogger(__name__)


class LinkedDocumentsController(QObject):
    """
    {
        "name": "LinkedDocumentsController",
        "version": "1.0.0",
        "description": "Issues depth-bounded discovery crawls and discards stale results.",
        "dependencies": ["IDiscoveryService", "StateManager"],
        "interface": {
            "inputs": ["root document identity"],
            "outputs": "Linked-document list and loading flag"
        }
    }

    In-flight crawls are never aborted. Each request carries the generation and
    root locator it was issued for, and its result is applied only if both
    still match when it completes.
    """

    linked_documents_changed = pyqtSignal(list)  # list[LinkedDocument]
    loading_changed = pyqtSignal(bool)

    def __init__(
        self,
        discovery_service: IDiscoveryService,
        state_manager: StateManager | None = None,
        max_depth: int | None = None,
        remote_delay: float | None = None,
    ):
        """
        Args:
            discovery_service: Crawl implementation for local and remote roots
            state_manager: View state to publish into
            max_depth: Maximum link traversal depth
            remote_delay: Seconds to defer remote crawls after the first paint
        """
        super().__init__()

        self._discovery = discovery_service
        self._state = state_manager or StateManager()
        self._max_depth = max_depth if max_depth is not None else config.DISCOVERY_SETTINGS["max_depth"]
        if remote_delay is None:
            remote_delay = config.DISCOVERY_SETTINGS["remote_delay_ms"] / 1000
        self._remote_delay = remote_delay

        self._root: DocumentIdentity | None = None
        self._generation = 0
        self._linked_documents: list[LinkedDocument] = []
        self._is_loading = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def root(self) -> DocumentIdentity | None:
        return self._root

    @property
    def root_locator(self) -> str | None:
        return self._root.locator if self._root else None

    @property
    def linked_documents(self) -> list[LinkedDocument]:
        return list(self._linked_documents)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def set_root(self, identity: DocumentIdentity | None) -> None:
        """
        Make `identity` the discovery root.

        A None root clears the list and loading flag immediately. Any other
        root starts one background crawl; must be called with a running loop.
        """
        self._generation += 1
        self._root = identity
        self._state.set_state("discovery.root", self.root_locator)

        if identity is None:
            self._apply([])
            return

        self._set_loading(True)
        task = asyncio.get_running_loop().create_task(
            self._discover(identity, self._generation)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def refresh(self) -> None:
        """Re-run discovery for the current root."""
        self.set_root(self._root)

    def _is_current(self, identity: DocumentIdentity, generation: int) -> bool:
        return generation == self._generation and self.root_locator == identity.locator

    async def _discover(self, identity: DocumentIdentity, generation: int) -> None:
        try:
            if identity.is_remote:
                if self._remote_delay > 0:
                    await asyncio.sleep(self._remote_delay)
                    if not self._is_current(identity, generation):
                        logger.debug(f"Root changed before remote crawl of {identity.locator} started")
                        return
                documents = await self._discovery.discover_remote(identity.locator, self._max_depth)
            else:
                documents = await self._discovery.discover_local(identity.locator, self._max_depth)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self._is_current(identity, generation):
                logger.warning(f"Failed to discover linked documents for {identity.locator}: {e}")
                self._apply([])
            return

        if not self._is_current(identity, generation):
            logger.debug(f"Discarding stale discovery result for {identity.locator}")
            return

        logger.info(f"Linked documents for {identity.locator}: {len(documents)}")
        self._apply(list(documents))

    def _apply(self, documents: list[LinkedDocument]) -> None:
        self._linked_documents = documents
        self._state.set_state(
            "discovery.linked_documents",
            [{"locator": doc.locator, "title": doc.title} for doc in documents],
        )
        self.linked_documents_changed.emit(list(documents))
        self._set_loading(False)

    def _set_loading(self, loading: bool) -> None:
        if loading == self._is_loading:
            return
        self._is_loading = loading
        self._state.set_state("discovery.is_loading", loading)
        self.loading_changed.emit(loading)

    async def wait_until_idle(self) -> None:
        """Wait for every crawl issued so far to finish (results applied or discarded)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel outstanding crawls; used on shutdown."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()
