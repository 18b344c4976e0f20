"""Walk the content tree and classify files into source entries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from .content import ContentItem, SourceEntry, StaticAsset, load_content_item

logger = logging.getLogger(__name__)

CONTENT_SUFFIXES = {".md", ".markdown"}
IGNORED_SUFFIXES = {".py"}
IGNORED_NAMES = {".DS_Store"}
EXTRA_DIR = "extra"


class OutputCollisionError(ValueError):
    """Raised when two content items would be written to the same location."""


def load_sources(root: Path) -> list[SourceEntry]:
    """Load every content item and static asset below ``root``, depth first.

    Parse failures propagate immediately; no file is skipped.
    """
    entries: list[SourceEntry] = []
    for path in _walk(root):
        if path.name in IGNORED_NAMES:
            continue
        suffix = path.suffix.lower()
        if suffix in IGNORED_SUFFIXES:
            continue
        if suffix in CONTENT_SUFFIXES:
            entries.append(load_content_item(path))
        else:
            entries.append(
                StaticAsset(
                    source_path=path,
                    output_path=static_output_path(path.relative_to(root)),
                    data=path.read_bytes(),
                )
            )
    logger.debug("Loaded %d source entries from %s", len(entries), root)
    return entries


def split_sources(entries: Iterable[SourceEntry]) -> tuple[list[ContentItem], list[StaticAsset]]:
    content: list[ContentItem] = []
    assets: list[StaticAsset] = []
    for entry in entries:
        if isinstance(entry, ContentItem):
            content.append(entry)
        else:
            assets.append(entry)
    return content, assets


def static_output_path(relative: Path) -> str:
    """Mirror ``relative`` into the output tree, lifting ``extra/`` to the root."""
    parts = relative.parts
    if len(parts) > 1 and parts[0] == EXTRA_DIR:
        parts = parts[1:]
    return "/".join(parts)


def check_output_collisions(items: Sequence[ContentItem]) -> None:
    seen: dict[str, ContentItem] = {}
    for item in items:
        previous = seen.get(item.destination)
        if previous is not None:
            raise OutputCollisionError(
                f"{item.source_path} and {previous.source_path} both render to "
                f"'{item.destination or '/'}'"
            )
        seen[item.destination] = item


def _walk(directory: Path) -> Iterator[Path]:
    for path in sorted(directory.iterdir()):
        if path.is_dir():
            yield from _walk(path)
        else:
            yield path
