"""Group public content by layout and tag."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from .content import ContentItem, ContentStatus
from .content.models import DEFAULT_LAYOUT

DEFAULT_MAX_STEP = 5


@dataclass(frozen=True, slots=True)
class ContentIndex:
    """Read-only groupings of public content, built once per run."""

    by_layout: Mapping[str, tuple[ContentItem, ...]]
    by_tag: Mapping[str, tuple[ContentItem, ...]]
    tag_weights: Mapping[str, int]

    def recent_posts(self) -> list[ContentItem]:
        """Public non-page items, newest first."""
        posts = [
            item
            for layout, items in self.by_layout.items()
            if layout != DEFAULT_LAYOUT
            for item in items
        ]
        return sorted(posts, key=lambda item: item.timestamp, reverse=True)


def build_index(items: Iterable[ContentItem], *, max_step: int = DEFAULT_MAX_STEP) -> ContentIndex:
    """Build layout/tag groupings over public items; drafts and hidden items are left out."""
    by_layout: dict[str, list[ContentItem]] = defaultdict(list)
    by_tag: dict[str, list[ContentItem]] = defaultdict(list)
    for item in items:
        if item.status is not ContentStatus.PUBLIC:
            continue
        by_layout[item.layout].append(item)
        for tag in item.tags:
            by_tag[tag].append(item)

    most_frequent = max((len(members) for members in by_tag.values()), default=1)
    weights = {
        tag: tag_weight(len(members), most_frequent, max_step=max_step)
        for tag, members in by_tag.items()
    }
    return ContentIndex(
        by_layout=MappingProxyType({key: _sorted(value) for key, value in by_layout.items()}),
        by_tag=MappingProxyType({key: _sorted(value) for key, value in by_tag.items()}),
        tag_weights=MappingProxyType(weights),
    )


def tag_weight(count: int, most_frequent: int, *, max_step: int = DEFAULT_MAX_STEP) -> int:
    """Map a tag count onto ``[1, max_step]``; the most frequent tags get 1."""
    # Flooring the denominator at e keeps ln() away from 0 for tiny tag sets.
    scale = math.log(count) / math.log(max(most_frequent, math.e))
    return math.floor((max_step - 1) * (1 - scale)) + 1


def _sorted(items: list[ContentItem]) -> tuple[ContentItem, ...]:
    return tuple(sorted(items, key=lambda item: (item.output_path, item.timestamp)))
