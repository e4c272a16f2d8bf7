"""
Markdown → HTML rendering for card faces.

Wraps a single module-level mistune instance configured like the editor
preview: hard line breaks, GFM tables, strikethrough, task lists and bare
URLs. Raw HTML in the source is passed through.
"""
from __future__ import annotations

import logging
from typing import Callable

import mistune
from mistune.util import escape

logger = logging.getLogger(__name__)

Render = Callable[[str], str]

_markdown = mistune.create_markdown(
    escape=False,
    hard_wrap=True,
    plugins=["strikethrough", "table", "task_lists", "url"],
)


def render_markdown(text: str) -> str:
    """Render ``text`` to display-ready HTML. Never raises."""
    if not text:
        return ""
    try:
        return _markdown(text)
    except Exception as e:
        logger.warning("Markdown rendering failed, falling back to escaped text: %s", e)
        return f"<p>{escape(text)}</p>\n"
