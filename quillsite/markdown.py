"""Shared Markdown pipeline: tokenize, rewrite links, bottom footnotes, render."""

from __future__ import annotations

from functools import lru_cache
from typing import cast

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .events import LinkWarningHandler, rewrite_links
from .footnotes import bottom_footnotes


@lru_cache(maxsize=1)
def _renderer() -> MarkdownIt:
    """Configure and cache a CommonMark-compliant renderer.

    The footnote plugin only tokenizes; relocation is done by
    :func:`bottom_footnotes`, so its own tail and inline-note rules are off.
    """
    md = MarkdownIt("commonmark", {"html": True, "typographer": True})
    md.enable("table").enable("strikethrough")
    md.use(deflist_plugin)
    md.use(footnote_plugin)
    md.use(tasklists_plugin, label=True)
    md.use(dollarmath_plugin)
    md.disable(["footnote_tail", "footnote_inline"])
    return md


def markdown_events(text: str, on_warning: LinkWarningHandler | None = None) -> list[Token]:
    """Tokenize ``text`` and apply the link rewriter and footnote bottomer."""
    tokens = _renderer().parse(text, {})
    return bottom_footnotes(rewrite_links(tokens, on_warning))


def render_markdown(text: str) -> str:
    """Render Markdown to HTML using the shared renderer."""
    if not text.strip():
        return ""
    md = _renderer()
    return cast(str, md.renderer.render(markdown_events(text), md.options, {}))
