"""
Markdown Render Service
Converts markdown to the HTML shown by the viewer pane.
"""

import asyncio
import logging

import markdown

from mdox.exceptions import RenderError
from mdox.interfaces.service_interfaces import IRenderService
from mdox.services.markdown_extensions import HeadingIdExtension, ImageBasePathExtension

logger = logging.getLogger(__name__)


class MarkdownRenderService(IRenderService):
    """
    {
        "name": "MarkdownRenderService",
        "version": "1.0.0",
        "description": "Python-Markdown based renderer with stable heading ids.",
        "dependencies": ["markdown"],
        "interface": {
            "inputs": ["content: str", "base_path: str | None"],
            "outputs": "HTML fragment"
        }
    }
    Heading ids are assigned with the same normalization used for anchor links
    so in-document jumps resolve. Relative images are rewritten against
    `base_path` (a file path or URL of the document being rendered).
    """

    EXTENSIONS = [
        "markdown.extensions.fenced_code",
        "markdown.extensions.tables",
        "markdown.extensions.sane_lists",
    ]

    def render_sync(self, content: str, base_path: str | None = None) -> str:
        md = markdown.Markdown(
            extensions=[
                *self.EXTENSIONS,
                HeadingIdExtension(),
                ImageBasePathExtension(base_path=base_path),
            ]
        )
        try:
            return md.convert(content)
        except Exception as e:
            raise RenderError(f"Failed to render markdown: {e}", locator=base_path) from e

    async def render(self, content: str, base_path: str | None = None) -> str:
        html = await asyncio.to_thread(self.render_sync, content, base_path)
        logger.debug(f"Rendered {len(content)} chars of markdown to {len(html)} chars of HTML")
        return html
