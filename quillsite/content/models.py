"""Typed representations of Quillsite source entries."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field, field_validator

DEFAULT_LAYOUT = "page"
DRAFT_PREFIX = "draft"


class ContentStatus(str, Enum):
    """Visibility class for a content item."""

    PUBLIC = "public"
    DRAFT = "draft"
    HIDDEN = "hidden"


class ContentItem(BaseModel):
    """A markdown document with parsed front matter."""

    source_path: Path = Field(description="Path to the source file.")
    output_path: str = Field(description="Extension-less output path relative to the site root.")
    markdown_body: str = Field(description="Raw markdown after the front matter block.")
    metadata: dict[str, str] = Field(
        default_factory=dict, description="Front matter with lower-cased keys."
    )
    timestamp: datetime = Field(description="Publish timestamp (midnight when no time given).")
    status: ContentStatus = Field(default=ContentStatus.PUBLIC)
    tags: list[str] = Field(default_factory=list, description="Tags in declaration order.")

    @field_validator("output_path")
    def _strip_slashes(cls, value: str) -> str:
        return value.strip("/")

    @property
    def title(self) -> str:
        return self.metadata["title"]

    @property
    def layout(self) -> str:
        return self.metadata.get("layout", DEFAULT_LAYOUT)

    @property
    def url(self) -> str:
        return self.output_path

    @property
    def destination(self) -> str:
        """Directory, relative to the output root, holding this item's ``index.html``."""
        if self.status is ContentStatus.DRAFT:
            return f"{DRAFT_PREFIX}/{self.output_path}".rstrip("/")
        return self.output_path


class StaticAsset(BaseModel):
    """A non-markdown file copied verbatim into the output tree."""

    source_path: Path = Field(description="Path to the source file.")
    output_path: str = Field(description="Output path relative to the site root.")
    data: bytes = Field(description="Raw file contents.")


SourceEntry = Union[ContentItem, StaticAsset]
