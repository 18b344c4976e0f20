"""Parse markdown sources into `ContentItem` instances."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from .models import DEFAULT_LAYOUT, ContentItem, ContentStatus

METADATA_SEPARATOR = ": "
DATE_FORMAT = "%Y-%m-%d %H:%M"
MIDNIGHT = " 00:00"
BLOG_PREFIX = "blog"
TAG_SEPARATORS = ("/", "\\")


class FrontMatterError(ValueError):
    """Raised when a markdown file has malformed front matter."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class MetadataParseError(FrontMatterError):
    """The metadata block is missing or a line lacks its key/value separator."""


class MissingFieldError(FrontMatterError):
    """A required metadata field (title or date) is absent."""


class InvalidStatusError(FrontMatterError):
    """The status field names an unknown visibility class."""


class DateParseError(FrontMatterError):
    """The date field does not match ``%Y-%m-%d`` or ``%Y-%m-%d %H:%M``."""


class SourceEncodingError(FrontMatterError):
    """The source file is not valid UTF-8."""


def load_content_item(path: str | Path) -> ContentItem:
    """Read a markdown file and parse its front matter into a content item."""
    source_path = Path(path)
    try:
        text = source_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SourceEncodingError(f"not valid UTF-8: {exc.reason}", path=source_path) from exc
    return parse_content(text, source_path)


def parse_content(text: str, source_path: Path) -> ContentItem:
    metadata, body = split_front_matter(text, source_path)

    if "title" not in metadata:
        raise MissingFieldError("metadata must define 'title'", path=source_path)
    if "date" not in metadata:
        raise MissingFieldError("metadata must define 'date'", path=source_path)

    timestamp = parse_timestamp(metadata["date"], source_path)
    status = parse_status(metadata.get("status"), source_path)

    return ContentItem(
        source_path=source_path,
        output_path=derive_output_path(metadata, timestamp, source_path),
        markdown_body=body,
        metadata=metadata,
        timestamp=timestamp,
        status=status,
        tags=parse_tags(metadata.get("tags"), source_path),
    )


def split_front_matter(text: str, source_path: Path | None = None) -> tuple[dict[str, str], str]:
    """Split ``key: value`` lines from the body at the first blank line."""
    normalized = text.replace("\r\n", "\n")
    head, separator, body = normalized.partition("\n\n")
    if not separator:
        raise MetadataParseError(
            "a blank line must separate metadata from the body", path=source_path
        )

    metadata: dict[str, str] = {}
    for line in head.split("\n"):
        key, delimiter, value = line.partition(METADATA_SEPARATOR)
        if not delimiter:
            raise MetadataParseError(
                f"metadata line {line!r} must be ': ' delimited", path=source_path
            )
        metadata[key.strip().lower()] = value.strip()
    return metadata, body


def parse_timestamp(value: str, source_path: Path | None = None) -> datetime:
    text = value.strip()
    if " " not in text:
        text += MIDNIGHT
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError as exc:
        raise DateParseError(f"invalid date {value!r}", path=source_path) from exc


def parse_status(value: str | None, source_path: Path | None = None) -> ContentStatus:
    if value is None:
        return ContentStatus.PUBLIC
    try:
        return ContentStatus(value.strip().lower())
    except ValueError as exc:
        raise InvalidStatusError(f"unknown status {value!r}", path=source_path) from exc


def parse_tags(value: str | None, source_path: Path | None = None) -> list[str]:
    if not value:
        return []
    pieces = (piece.strip() for piece in value.split(","))
    # dict.fromkeys keeps the first occurrence of each tag in order.
    tags = list(dict.fromkeys(piece for piece in pieces if piece))
    for tag in tags:
        # Tags name directories under tags/.
        if any(sep in tag for sep in TAG_SEPARATORS) or tag in (".", ".."):
            raise MetadataParseError(f"tag {tag!r} cannot be used as a path", path=source_path)
    return tags


def slugify(title: str) -> str:
    """Lower-case alphanumerics, whitespace runs collapsed into single hyphens."""
    kept = "".join(char for char in title if char.isalnum() or char.isspace())
    return "-".join(kept.lower().split())


def derive_output_path(
    metadata: dict[str, str],
    timestamp: datetime,
    source_path: Path | None = None,
) -> str:
    save_as = metadata.get("save_as")
    if save_as:
        if not save_as.strip("/"):
            raise MetadataParseError(
                f"save_as {save_as!r} would overwrite the site index", path=source_path
            )
        return save_as

    slug = slugify(metadata["title"])
    if not slug:
        raise MetadataParseError(
            f"title {metadata['title']!r} yields an empty slug; set 'save_as'",
            path=source_path,
        )
    if metadata.get("layout", DEFAULT_LAYOUT) == DEFAULT_LAYOUT:
        return slug
    return f"{BLOG_PREFIX}/{timestamp:%Y}/{timestamp:%m}/{timestamp:%d}/{slug}"
