"""Syndication feed generation helpers for Quillsite."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime as format_rfc2822
from html import escape
from pathlib import Path
from typing import Sequence

from .config import Config
from .render import Article


@dataclass(slots=True)
class FeedEntry:
    """Normalized feed entry derived from an article."""

    title: str
    url: str
    author: str
    summary: str
    published: datetime

    @property
    def identifier(self) -> str:
        return self.url


def generate_feeds(config: Config, articles: Sequence[Article]) -> list[Path]:
    """Write RSS and Atom feeds for ``articles``, which must already be newest first."""
    settings = config.feeds
    if not settings.enabled:
        return []

    site = config.site
    entries = [
        FeedEntry(
            title=article.title,
            url=make_absolute(article.url, site.siteurl),
            author=site.author,
            summary=article.summary,
            published=article.timestamp,
        )
        for article in articles[: settings.max_entries]
    ]
    updated = entries[0].published if entries else datetime.now(timezone.utc)

    rss_path = config.output_dir / settings.rss_path
    atom_path = config.output_dir / settings.atom_path
    for path in (rss_path, atom_path):
        path.parent.mkdir(parents=True, exist_ok=True)

    rss_path.write_text(_render_rss(config, entries, updated), encoding="utf-8")
    atom_path.write_text(_render_atom(config, entries, updated), encoding="utf-8")
    return [rss_path, atom_path]


def make_absolute(path: str, base_url: str) -> str:
    if path.startswith("http://") or path.startswith("https://"):
        return path
    normalized = f"/{path.lstrip('/')}"
    if base_url:
        return f"{base_url.rstrip('/')}{normalized}"
    return normalized


def _render_rss(config: Config, entries: Sequence[FeedEntry], updated: datetime) -> str:
    site = config.site
    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">',
        "  <channel>",
        f"    <title>{escape(site.sitename)}</title>",
        f"    <link>{escape(site.siteurl)}</link>",
        f"    <description>{escape(site.sitename)}</description>",
        f"    <lastBuildDate>{_format_rfc2822(updated)}</lastBuildDate>",
    ]

    for entry in entries:
        parts.extend(
            [
                "    <item>",
                f"      <title>{escape(entry.title)}</title>",
                f"      <link>{escape(entry.url)}</link>",
                f"      <description>{escape(entry.summary)}</description>",
                f"      <pubDate>{_format_rfc2822(entry.published)}</pubDate>",
                f'      <guid isPermaLink="true">{escape(entry.identifier)}</guid>',
            ]
        )
        if entry.author:
            # RSS <author> must be an email address; names go in dc:creator.
            parts.append(f"      <dc:creator>{escape(entry.author)}</dc:creator>")
        parts.append("    </item>")

    parts.extend(["  </channel>", "</rss>"])
    return "\n".join(parts) + "\n"


def _render_atom(config: Config, entries: Sequence[FeedEntry], updated: datetime) -> str:
    site = config.site
    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<feed xmlns="http://www.w3.org/2005/Atom">',
        f"  <title>{escape(site.sitename)}</title>",
        f'  <link href="{escape(site.siteurl)}" rel="alternate" />',
        f"  <updated>{_format_iso(updated)}</updated>",
        f"  <id>{escape(site.siteurl)}</id>",
    ]
    if site.author:
        parts.append(f"  <author><name>{escape(site.author)}</name></author>")

    for entry in entries:
        parts.extend(
            [
                "  <entry>",
                f"    <title>{escape(entry.title)}</title>",
                f'    <link href="{escape(entry.url)}" />',
                f"    <id>{escape(entry.identifier)}</id>",
                f"    <updated>{_format_iso(entry.published)}</updated>",
                f"    <published>{_format_iso(entry.published)}</published>",
            ]
        )
        if entry.author:
            parts.append(f"    <author><name>{escape(entry.author)}</name></author>")
        parts.append(f'    <summary type="html">{escape(entry.summary)}</summary>')
        parts.append("  </entry>")

    parts.append("</feed>")
    return "\n".join(parts) + "\n"


def _format_rfc2822(value: datetime) -> str:
    normalized = value
    if normalized.tzinfo is None:
        normalized = normalized.replace(tzinfo=timezone.utc)
    return format_rfc2822(normalized.astimezone(timezone.utc))


def _format_iso(value: datetime) -> str:
    normalized = value
    if normalized.tzinfo is None:
        normalized = normalized.replace(tzinfo=timezone.utc)
    return normalized.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
