"""Site configuration for Quillsite builds."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = "quillsite.yml"


class SiteConfig(BaseModel):
    """Site-wide identity exposed to templates and feeds."""

    author: str = Field(default="", description="Default author credited in feeds.")
    sitename: str = Field(default="Quillsite", description="Human-readable site name.")
    siteurl: str = Field(
        default="",
        description="Canonical site URL used for absolute links (e.g., 'https://example.com').",
    )

    @field_validator("siteurl")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


class FeedConfig(BaseModel):
    """Options controlling feed generation."""

    enabled: bool = Field(default=True, description="Toggle syndication feed generation.")
    rss_path: Path = Field(
        default=Path("feeds/all.rss.xml"),
        description="RSS output path, relative to output_dir.",
    )
    atom_path: Path = Field(
        default=Path("feeds/all.atom.xml"),
        description="Atom output path, relative to output_dir.",
    )
    max_entries: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Maximum number of entries to include per feed.",
    )

    @field_validator("rss_path", "atom_path", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)


class Config(BaseModel):
    site: SiteConfig = Field(default_factory=SiteConfig)
    content_dir: Path = Field(default=Path("content"))
    templates_dir: Path = Field(default=Path("templates"))
    output_dir: Path = Field(default=Path("output"))
    summary_words: int = Field(
        default=100,
        ge=1,
        description="Number of words of the body used to build article summaries.",
    )
    tag_cloud_steps: int = Field(default=5, ge=1, description="Number of tag cloud weight buckets.")
    feeds: FeedConfig = Field(default_factory=FeedConfig)

    @field_validator("content_dir", "templates_dir", "output_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    The ``path`` argument may point to a file (e.g., ``/site/quillsite.yml``) or a
    directory containing that file. All relative directories inside the
    configuration are interpreted relative to the directory holding the config
    file. Feed paths stay relative to ``output_dir``.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        # A bare project directory without a config file runs on defaults.
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)

    def _absolute(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.content_dir = _absolute(cfg.content_dir)
    cfg.templates_dir = _absolute(cfg.templates_dir)
    cfg.output_dir = _absolute(cfg.output_dir)
    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration {path} must define a mapping at the top level.")
    return data
