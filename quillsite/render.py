"""Render content items into article pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from .config import Config
from .content import ContentItem, ContentStatus
from .index import ContentIndex
from .markdown import render_markdown
from .templates import TemplateEngine

logger = logging.getLogger(__name__)

PAGE_FILENAME = "index.html"
SUMMARY_ELLIPSIS = "…"
DEFAULT_SUMMARY_WORDS = 100


@dataclass(frozen=True, slots=True)
class Article:
    """Template-facing projection of a content item."""

    title: str
    url: str
    content: str
    summary: str
    tags: list[str]
    date: str
    timestamp: datetime
    status: ContentStatus
    layout: str


def build_article(item: ContentItem, *, summary_words: int = DEFAULT_SUMMARY_WORDS) -> Article:
    return Article(
        title=item.title,
        url=item.url,
        content=render_markdown(item.markdown_body),
        summary=render_markdown(summarize(item.markdown_body, summary_words)),
        tags=list(item.tags),
        date=format_date(item.timestamp),
        timestamp=item.timestamp,
        status=item.status,
        layout=item.layout,
    )


def build_articles(items: Iterable[ContentItem], config: Config) -> dict[str, Article]:
    """Project every item once, keyed by its output destination."""
    return {
        item.destination: build_article(item, summary_words=config.summary_words)
        for item in items
    }


def summarize(markdown: str, words: int = DEFAULT_SUMMARY_WORDS) -> str:
    """Keep the first ``words`` whitespace-delimited tokens and mark the cut."""
    return " ".join(markdown.split()[:words]) + SUMMARY_ELLIPSIS


def format_date(value: datetime) -> str:
    return f"{value:%A} {value.day} {value:%B} {value.year}"


def site_context(config: Config, index: ContentIndex) -> dict[str, Any]:
    """Context shared by every rendered page."""
    return {
        "site": {
            "name": config.site.sitename,
            "url": config.site.siteurl,
            "author": config.site.author,
        },
        "feeds": {
            "rss": f"/{config.feeds.rss_path.as_posix()}",
            "atom": f"/{config.feeds.atom_path.as_posix()}",
        },
        "tag_cloud": tag_cloud(index),
    }


def tag_cloud(index: ContentIndex) -> list[dict[str, Any]]:
    return [
        {
            "name": tag,
            "count": len(index.by_tag[tag]),
            "weight": index.tag_weights[tag],
            "url": f"tags/{tag}",
        }
        for tag in sorted(index.by_tag)
    ]


def content_destination(item: ContentItem, output_dir: Path) -> Path:
    return output_dir / item.destination / PAGE_FILENAME


def write_content_page(
    item: ContentItem,
    article: Article,
    engine: TemplateEngine,
    context: dict[str, Any],
    output_dir: Path,
) -> Path:
    page_context = dict(context)
    page_context["article"] = article
    return engine.render_to(f"{item.layout}.html", page_context, content_destination(item, output_dir))


def write_content_pages(
    items: Iterable[ContentItem],
    articles: dict[str, Article],
    engine: TemplateEngine,
    context: dict[str, Any],
    output_dir: Path,
) -> list[Path]:
    written: list[Path] = []
    for item in items:
        written.append(
            write_content_page(item, articles[item.destination], engine, context, output_dir)
        )
    logger.debug("Wrote %d content page(s) under %s", len(written), output_dir)
    return written
