"""Tests for race-safe linked-document discovery."""

import asyncio

import pytest

from mdox.controllers.linked_documents_controller import LinkedDocumentsController
from mdox.core.models import DocumentIdentity, LinkedDocument
from mdox.core.state_manager import StateManager
from tests.fakes import FakeDiscoveryService

A = DocumentIdentity("/docs/a.md")
B = DocumentIdentity("/docs/b.md")
REMOTE = DocumentIdentity("https://example.com/README.md", is_remote=True)


def _docs(*names):
    return [LinkedDocument(locator=f"/docs/{name}.md", title=name) for name in names]


class TestLinkedDocumentsController:
    def setup_method(self):
        self.discovery = FakeDiscoveryService({A.locator: _docs("a1", "a2"), B.locator: _docs("b1")})
        self.state = StateManager()
        self.controller = LinkedDocumentsController(self.discovery, self.state, max_depth=2, remote_delay=0)
        self.changes = []
        self.loading = []
        self.controller.linked_documents_changed.connect(self.changes.append)
        self.controller.loading_changed.connect(self.loading.append)

    @pytest.mark.asyncio
    async def test_discovery_populates_list(self):
        self.controller.set_root(A)
        assert self.controller.is_loading

        await self.controller.wait_until_idle()

        assert self.controller.linked_documents == _docs("a1", "a2")
        assert not self.controller.is_loading
        assert self.loading == [True, False]
        assert self.discovery.calls == [("local", A.locator, 2)]
        assert self.state.get_state("discovery.root") == A.locator
        assert self.state.get_state("discovery.linked_documents")[0]["title"] == "a1"

    @pytest.mark.asyncio
    async def test_none_root_clears_immediately(self):
        self.controller.set_root(A)
        await self.controller.wait_until_idle()

        self.controller.set_root(None)

        assert self.controller.linked_documents == []
        assert not self.controller.is_loading
        assert self.controller.root is None

    @pytest.mark.asyncio
    async def test_stale_result_is_discarded(self):
        gate = asyncio.Event()
        self.discovery.gates[A.locator] = gate

        self.controller.set_root(A)
        await asyncio.sleep(0)
        self.controller.set_root(B)
        await asyncio.sleep(0)
        gate.set()
        await self.controller.wait_until_idle()

        assert self.controller.root_locator == B.locator
        assert self.controller.linked_documents == _docs("b1")
        assert self.changes == [_docs("b1")]

    @pytest.mark.asyncio
    async def test_result_discarded_after_root_cleared(self):
        gate = asyncio.Event()
        self.discovery.gates[A.locator] = gate

        self.controller.set_root(A)
        await asyncio.sleep(0)
        self.controller.set_root(None)
        gate.set()
        await self.controller.wait_until_idle()

        assert self.controller.linked_documents == []
        assert not self.controller.is_loading

    @pytest.mark.asyncio
    async def test_reissuing_same_root_ignores_older_crawl(self):
        gate = asyncio.Event()
        self.discovery.gates[A.locator] = gate

        self.controller.set_root(A)
        await asyncio.sleep(0)
        self.discovery.results[A.locator] = _docs("fresh")
        self.controller.refresh()
        gate.set()
        await self.controller.wait_until_idle()

        assert self.controller.linked_documents == _docs("fresh")
        assert self.changes == [_docs("fresh")]

    @pytest.mark.asyncio
    async def test_failed_crawl_yields_empty_list(self):
        async def failing(root, depth):
            raise OSError("unreadable")

        self.discovery.discover_local = failing
        self.controller.set_root(A)
        await self.controller.wait_until_idle()

        assert self.controller.linked_documents == []
        assert not self.controller.is_loading

    @pytest.mark.asyncio
    async def test_remote_root_is_deferred(self):
        controller = LinkedDocumentsController(self.discovery, self.state, max_depth=2, remote_delay=0.01)
        controller.set_root(REMOTE)
        await asyncio.sleep(0)
        assert self.discovery.calls == []

        await controller.wait_until_idle()
        assert self.discovery.calls == [("remote", REMOTE.locator, 2)]

    @pytest.mark.asyncio
    async def test_remote_crawl_skipped_if_root_changes_during_delay(self):
        controller = LinkedDocumentsController(self.discovery, self.state, max_depth=2, remote_delay=0.05)
        controller.set_root(REMOTE)
        controller.set_root(A)
        await controller.wait_until_idle()

        assert self.discovery.calls == [("local", A.locator, 2)]
        assert controller.linked_documents == _docs("a1", "a2")

    @pytest.mark.asyncio
    async def test_aclose_cancels_pending_crawls(self):
        self.discovery.gates[A.locator] = asyncio.Event()
        self.controller.set_root(A)
        await asyncio.sleep(0)

        await self.controller.aclose()

        assert self.controller.linked_documents == []
