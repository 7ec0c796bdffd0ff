"""Tests for markdown rendering and the shared tree processors."""

import pytest

from mdox.core.link_resolver import normalize_anchor_id
from mdox.exceptions import RenderError
from mdox.services.markdown_extensions import scan_markdown
from mdox.services.render_service import MarkdownRenderService


class TestMarkdownRenderService:
    def setup_method(self):
        self.service = MarkdownRenderService()

    def test_headings_get_normalized_ids(self):
        html = self.service.render_sync("# Hello, World!\n\n## Getting *Started*")

        assert '<h1 id="hello-world">' in html
        assert f'id="{normalize_anchor_id("Getting Started")}"' in html

    def test_heading_without_usable_text_has_no_id(self):
        html = self.service.render_sync("# !!!")
        assert "id=" not in html

    def test_heading_id_uses_escaped_characters_as_shown(self):
        html = self.service.render_sync("# foo\\_bar")
        assert f'<h1 id="{normalize_anchor_id("foo_bar")}">foo_bar</h1>' in html

    @pytest.mark.parametrize(
        "source, visible",
        [
            ("# Q &amp; A", "Q & A"),
            ("# Use <kbd>Ctrl</kbd>", "Use Ctrl"),
            ("# The `<b>` tag", "The <b> tag"),
        ],
    )
    def test_heading_id_matches_visible_text(self, source, visible):
        html = self.service.render_sync(source)
        assert f'id="{normalize_anchor_id(visible)}"' in html

    def test_tables_and_fenced_code(self):
        html = self.service.render_sync("| a | b |\n|---|---|\n| 1 | 2 |\n\n```\ncode\n```")

        assert "<table>" in html
        assert "<code>code" in html

    def test_relative_image_rewritten_for_local_document(self, tmp_path):
        (tmp_path / "img").mkdir()
        image = tmp_path / "img" / "logo.png"
        image.write_bytes(b"\x89PNG")
        document = tmp_path / "README.md"

        html = self.service.render_sync("![logo](img/logo.png)", str(document))

        assert image.resolve().as_uri() in html

    def test_missing_local_image_left_untouched(self, tmp_path):
        html = self.service.render_sync("![x](missing.png)", str(tmp_path / "README.md"))
        assert 'src="missing.png"' in html

    def test_relative_image_rewritten_for_remote_document(self):
        html = self.service.render_sync("![x](img/x.png)", "https://example.com/docs/README.md")
        assert 'src="https://example.com/docs/img/x.png"' in html

    def test_absolute_image_untouched(self):
        html = self.service.render_sync("![x](https://cdn.example.com/x.png)", "/docs/README.md")
        assert 'src="https://cdn.example.com/x.png"' in html

    @pytest.mark.asyncio
    async def test_async_render(self):
        assert await self.service.render("plain") == "<p>plain</p>"

    @pytest.mark.asyncio
    async def test_converter_failure_raises_render_error(self, monkeypatch):
        def explode(self, source):
            raise ValueError("bad input")

        monkeypatch.setattr("markdown.Markdown.convert", explode)

        with pytest.raises(RenderError):
            await self.service.render("# Title", "/docs/a.md")


class TestScanMarkdown:
    def test_links_in_document_order(self):
        collector = scan_markdown("[a](a.md) text [b](sub/b.md#x) [ext](https://example.com)")
        assert collector.links == ["a.md", "sub/b.md#x", "https://example.com"]

    def test_title_is_first_heading(self):
        collector = scan_markdown("## Intro\n\n# Main")

        assert collector.title == "Intro"
        assert collector.h1_title == "Main"

    def test_no_headings(self):
        collector = scan_markdown("just text")

        assert collector.title is None
        assert collector.h1_title is None
        assert collector.links == []

    def test_title_uses_visible_heading_text(self):
        collector = scan_markdown("# foo\\_bar &amp; <em>baz</em>\n\n## Q &lt; A")

        assert collector.title == "foo_bar & baz"
        assert collector.h1_title == "foo_bar & baz"
