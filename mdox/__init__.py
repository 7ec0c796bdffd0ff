"""
mdox

State engine of a markdown viewer/editor: document sessions, browsing
history, linked-document discovery and split-view scroll sync.

Presentation layers attach their scroll bars through `ScrollBarPane`.
"""

import config

from mdox.scroll_pane import ScrollBarPane

__version__ = config.APP_VERSION

__all__ = ["ScrollBarPane", "__version__"]
