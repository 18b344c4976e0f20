"""Utilities for preparing the output directory."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable

from .content import StaticAsset


def reset_directory(path: Path) -> None:
    """Remove a directory and recreate it empty."""
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def write_static_assets(assets: Iterable[StaticAsset], output_dir: Path) -> list[Path]:
    """Write each asset's bytes to its output path, replacing existing files."""
    written: list[Path] = []
    for asset in assets:
        destination = output_dir / asset.output_path
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(asset.data)
        written.append(destination)
    return written
