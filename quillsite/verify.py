"""Check internal links in content against the finished output tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable
from urllib.parse import unquote, urlsplit

from .content import ContentItem
from .events import EventKind, LinkWarning, event_kind, iter_events
from .markdown import markdown_events

logger = logging.getLogger(__name__)

DANGLING = "dangling-link"
MALFORMED = "malformed-link"


@dataclass(slots=True)
class LinkIssue:
    """A link problem found in one content item."""

    kind: str
    source: Path
    target: str
    message: str


@dataclass(slots=True)
class LinkReport:
    """Aggregate link validation results."""

    checked_items: int
    issues: list[LinkIssue] = field(default_factory=list)

    @property
    def dangling_count(self) -> int:
        return sum(1 for issue in self.issues if issue.kind == DANGLING)

    @property
    def malformed_count(self) -> int:
        return sum(1 for issue in self.issues if issue.kind == MALFORMED)


def validate_links(items: Iterable[ContentItem], output_dir: Path) -> LinkReport:
    """Re-run the markdown pipeline over ``items`` and check every link.

    Problems are logged and collected; nothing here aborts the build.
    """
    report = LinkReport(checked_items=0)
    for item in items:
        report.checked_items += 1
        report.issues.extend(_check_item(item, output_dir))
    for issue in report.issues:
        logger.warning("%s: %s", issue.source, issue.message)
    return report


def _check_item(item: ContentItem, output_dir: Path) -> list[LinkIssue]:
    issues: list[LinkIssue] = []

    def _malformed(warning: LinkWarning) -> None:
        issues.append(
            LinkIssue(
                kind=MALFORMED,
                source=item.source_path,
                target=warning.destination,
                message=warning.message,
            )
        )

    for token in iter_events(markdown_events(item.markdown_body, on_warning=_malformed)):
        if event_kind(token) is not EventKind.LINK_START:
            continue
        destination = str(token.attrGet("href") or "")
        if not destination.startswith("/"):
            continue
        target = unquote(urlsplit(destination).path).strip("/")
        if not (output_dir / target).exists():
            issues.append(
                LinkIssue(
                    kind=DANGLING,
                    source=item.source_path,
                    target=destination,
                    message=f"internal link '{destination}' does not resolve under the output directory",
                )
            )
    return issues
