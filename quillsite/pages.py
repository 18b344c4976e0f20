"""Render the shared site pages: home, archives, tag cloud and per-tag listings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

from .content import ContentItem
from .index import ContentIndex
from .render import PAGE_FILENAME, Article
from .templates import TemplateEngine

INDEX_TEMPLATE = "index.html"
ARCHIVES_TEMPLATE = "archives.html"
TAGS_TEMPLATE = "tags.html"
TAG_TEMPLATE = "tag.html"


def write_site_pages(
    index: ContentIndex,
    articles: Mapping[str, Article],
    engine: TemplateEngine,
    context: dict[str, Any],
    output_dir: Path,
) -> list[Path]:
    recent = _project(index.recent_posts(), articles)
    written = [
        engine.render_to(INDEX_TEMPLATE, {**context, "articles": recent}, output_dir / "index.html"),
        engine.render_to(
            ARCHIVES_TEMPLATE, {**context, "articles": recent}, output_dir / "archives.html"
        ),
        engine.render_to(TAGS_TEMPLATE, dict(context), output_dir / "tags.html"),
    ]
    for tag, items in sorted(index.by_tag.items()):
        newest_first = sorted(items, key=lambda item: item.timestamp, reverse=True)
        written.append(
            engine.render_to(
                TAG_TEMPLATE,
                {**context, "tag": tag, "articles": _project(newest_first, articles)},
                output_dir / "tags" / tag / PAGE_FILENAME,
            )
        )
    return written


def _project(items: Sequence[ContentItem], articles: Mapping[str, Article]) -> list[Article]:
    return [articles[item.destination] for item in items]
