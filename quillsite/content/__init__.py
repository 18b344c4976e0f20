"""Content records and front matter parsing."""

from .models import ContentItem, ContentStatus, SourceEntry, StaticAsset
from .parsers import (
    DateParseError,
    FrontMatterError,
    InvalidStatusError,
    MetadataParseError,
    MissingFieldError,
    SourceEncodingError,
    load_content_item,
    slugify,
)

__all__ = [
    "ContentItem",
    "ContentStatus",
    "DateParseError",
    "FrontMatterError",
    "InvalidStatusError",
    "MetadataParseError",
    "MissingFieldError",
    "SourceEncodingError",
    "SourceEntry",
    "StaticAsset",
    "load_content_item",
    "slugify",
]
