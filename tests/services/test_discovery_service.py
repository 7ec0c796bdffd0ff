"""Tests for the depth-bounded linked-document crawl."""

from pathlib import Path

import pytest

from mdox.core.models import LinkedDocument
from mdox.exceptions import DiscoveryError
from mdox.services.discovery_service import LinkDiscoveryService, resolve_local_link, resolve_remote_link
from tests.fakes import FakeRemoteFetchService


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def tree(tmp_path):
    _write(tmp_path / "README.md", "# Home\n\n[Guide](docs/guide.md) [Again](docs/guide.md#x) [Web](https://example.com)")
    _write(tmp_path / "docs" / "guide.md", "Intro text\n\n## Guide Title\n\n[Deep](deep/deeper.md) [Home](../README.md)")
    _write(tmp_path / "docs" / "deep" / "deeper.md", "[Deepest](deepest.md)")
    _write(tmp_path / "docs" / "deep" / "deepest.md", "# Deepest")
    return tmp_path


class TestLocalDiscovery:
    @pytest.mark.asyncio
    async def test_depth_two_crawl(self, tree):
        documents = await LinkDiscoveryService().discover_local(str(tree / "README.md"), 2)

        guide = (tree / "docs" / "guide.md").resolve()
        deeper = (tree / "docs" / "deep" / "deeper.md").resolve()
        assert documents == [
            LinkedDocument(str(guide), "Guide Title"),
            LinkedDocument(str(deeper), "deeper.md"),
        ]

    @pytest.mark.asyncio
    async def test_depth_one_only_reports_direct_links(self, tree):
        documents = await LinkDiscoveryService().discover_local(str(tree / "README.md"), 1)
        assert [Path(doc.locator).name for doc in documents] == ["guide.md"]

    @pytest.mark.asyncio
    async def test_depth_zero_reports_nothing(self, tree):
        assert await LinkDiscoveryService().discover_local(str(tree / "README.md"), 0) == []

    @pytest.mark.asyncio
    async def test_missing_root(self, tmp_path):
        with pytest.raises(DiscoveryError):
            await LinkDiscoveryService().discover_local(str(tmp_path / "nope.md"), 2)

    @pytest.mark.asyncio
    async def test_broken_links_are_skipped(self, tmp_path):
        _write(tmp_path / "a.md", "[gone](gone.md) [img](pic.png) [ok](b.md)")
        _write(tmp_path / "b.md", "# B")
        _write(tmp_path / "pic.png", "")

        documents = await LinkDiscoveryService().discover_local(str(tmp_path / "a.md"), 2)

        assert [doc.title for doc in documents] == ["B"]


def test_resolve_local_link(tmp_path):
    target = _write(tmp_path / "b.md", "")

    assert resolve_local_link("b.md#part", tmp_path) == target.resolve()
    assert resolve_local_link("#part", tmp_path) is None
    assert resolve_local_link("https://example.com/b.md", tmp_path) is None
    assert resolve_local_link("missing.md", tmp_path) is None


def test_resolve_remote_link():
    base = "https://example.com/docs/README.md"

    assert resolve_remote_link("guide.md", base) == "https://example.com/docs/guide.md"
    assert resolve_remote_link("wiki/Page", base) == "https://example.com/docs/wiki/Page"
    assert resolve_remote_link("https://other.org/x.markdown", base) == "https://other.org/x.markdown"
    assert resolve_remote_link("image.png", base) is None
    assert resolve_remote_link("https://other.org/page", base) is None
    assert resolve_remote_link("#top", base) is None


class TestRemoteDiscovery:
    @pytest.mark.asyncio
    async def test_remote_crawl_titles(self):
        fetcher = FakeRemoteFetchService(
            {
                "https://example.com/README.md": "[A](a.md) [B](b.md) [Missing](missing.md)",
                "https://example.com/a.md": "## Sub\n\n# Alpha",
                "https://example.com/b.md": "no heading",
            }
        )

        documents = await LinkDiscoveryService(fetcher).discover_remote("https://example.com/README.md", 1)

        assert documents == [
            LinkedDocument("https://example.com/a.md", "Alpha"),
            LinkedDocument("https://example.com/b.md", "b.md"),
            LinkedDocument("https://example.com/missing.md", "missing.md"),
        ]

    @pytest.mark.asyncio
    async def test_each_page_fetched_once(self):
        fetcher = FakeRemoteFetchService(
            {
                "https://example.com/README.md": "[A](a.md)",
                "https://example.com/a.md": "[Home](README.md)",
            }
        )

        await LinkDiscoveryService(fetcher).discover_remote("https://example.com/README.md", 2)

        assert fetcher.requests.count("https://example.com/a.md") == 1

    @pytest.mark.asyncio
    async def test_remote_discovery_requires_fetcher(self):
        with pytest.raises(DiscoveryError):
            await LinkDiscoveryService().discover_remote("https://example.com/README.md", 2)
