"""CLI entrypoints for Quillsite build tooling."""

import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from .config import Config, load_config
from .content import ContentItem, ContentStatus, FrontMatterError
from .feeds import generate_feeds
from .index import build_index
from .ingest import OutputCollisionError, check_output_collisions, load_sources, split_sources
from .pages import write_site_pages
from .render import build_articles, site_context, write_content_pages
from .staging import reset_directory, write_static_assets
from .templates import TemplateEngine, TemplateError
from .verify import LinkReport, validate_links

console = Console()
app = typer.Typer(help="Quillsite static blog generator.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to configuration file or project directory."),
]
OutputDirOption = Annotated[
    Path | None,
    typer.Option("--output-dir", "-o", help="Override the configured output directory."),
]


@dataclass(slots=True)
class BuildOutputs:
    """Aggregate results from the build pipeline."""

    content: list[ContentItem]
    asset_paths: list[Path]
    content_pages: list[Path]
    site_pages: list[Path]
    feed_paths: list[Path]
    link_report: LinkReport
    duration_seconds: float


@app.command()
def build(
    config_path: ConfigPathOption = "quillsite.yml",
    output_dir: OutputDirOption = None,
) -> None:
    """Wipe the output directory and rebuild the whole site."""
    config = _load(config_path, output_dir)
    try:
        outputs = run_build(config)
    except (FrontMatterError, OutputCollisionError) as error:
        console.print(f"[bold red]Content error[/]: {error}")
        raise typer.Exit(code=1) from error
    except TemplateError as error:
        console.print(f"[bold red]Template error[/]: {error}")
        raise typer.Exit(code=1) from error
    except OSError as error:
        console.print(f"[bold red]I/O error[/]: {error}")
        raise typer.Exit(code=1) from error

    _print_build_summary(outputs, config)


@app.command("check-links")
def check_links(
    config_path: ConfigPathOption = "quillsite.yml",
    output_dir: OutputDirOption = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit non-zero when link issues are found."),
    ] = False,
) -> None:
    """Validate internal links of the content against an existing build."""
    config = _load(config_path, output_dir)
    if not config.output_dir.exists():
        console.print(f"[bold red]Site directory not found[/]: {_display_path(config.output_dir)}")
        raise typer.Exit(code=1)

    try:
        content, _ = split_sources(load_sources(config.content_dir))
    except (FrontMatterError, OSError) as error:
        console.print(f"[bold red]Content error[/]: {error}")
        raise typer.Exit(code=1) from error

    report = validate_links(content, config.output_dir)
    _print_link_report(report)
    if strict and report.issues:
        raise typer.Exit(code=1)


@app.command()
def clean(
    config_path: ConfigPathOption = "quillsite.yml",
    output_dir: OutputDirOption = None,
) -> None:
    """Remove the generated site."""
    config = _load(config_path, output_dir)
    if not config.output_dir.exists():
        console.print(f"[bold blue]Clean[/]: nothing to remove at {_display_path(config.output_dir)}")
        return
    shutil.rmtree(config.output_dir)
    console.print(f"[bold green]Clean[/]: removed {_display_path(config.output_dir)}")


def run_build(config: Config) -> BuildOutputs:
    """Load, render, syndicate and link-check the site described by ``config``."""
    start = time.perf_counter()

    content, assets = split_sources(load_sources(config.content_dir))
    check_output_collisions(content)
    engine = TemplateEngine(config.templates_dir)

    output_root = config.output_dir
    reset_directory(output_root)
    asset_paths = write_static_assets(assets, output_root)

    index = build_index(content, max_step=config.tag_cloud_steps)
    articles = build_articles(content, config)
    context = site_context(config, index)
    content_pages = write_content_pages(content, articles, engine, context, output_root)
    site_pages = write_site_pages(index, articles, engine, context, output_root)

    recent = [articles[item.destination] for item in index.recent_posts()]
    feed_paths = generate_feeds(config, recent)

    link_report = validate_links(content, output_root)

    return BuildOutputs(
        content=content,
        asset_paths=asset_paths,
        content_pages=content_pages,
        site_pages=site_pages,
        feed_paths=feed_paths,
        link_report=link_report,
        duration_seconds=time.perf_counter() - start,
    )


def _print_build_summary(outputs: BuildOutputs, config: Config) -> None:
    counts = {status: 0 for status in ContentStatus}
    for item in outputs.content:
        counts[item.status] += 1

    console.print(
        "[bold green]Content[/]: "
        f"{len(outputs.content)} item(s) "
        f"(public {counts[ContentStatus.PUBLIC]}, "
        f"drafts {counts[ContentStatus.DRAFT]}, "
        f"hidden {counts[ContentStatus.HIDDEN]})"
    )
    console.print(
        "[bold green]Pages[/]: "
        f"{len(outputs.content_pages)} content page(s), {len(outputs.site_pages)} site page(s), "
        f"{len(outputs.asset_paths)} static asset(s) written to {_display_path(config.output_dir)}"
    )
    if outputs.feed_paths:
        feed_locations = ", ".join(_display_path(path) for path in outputs.feed_paths)
        console.print(f"[bold green]Feeds[/]: generated syndication feeds at {feed_locations}")
    _print_link_report(outputs.link_report)
    console.print(f"[bold blue]Done[/] in {outputs.duration_seconds:.2f}s")


def _print_link_report(report: LinkReport) -> None:
    if not report.issues:
        console.print(
            "[bold green]Links[/]: "
            f"{report.checked_items} item(s) checked; no issues found."
        )
        return
    console.print(
        "[bold yellow]Links[/]: "
        f"{report.dangling_count} dangling, {report.malformed_count} malformed "
        f"across {report.checked_items} item(s)."
    )
    for issue in report.issues:
        console.print(
            f"[bold yellow]{issue.kind}[/] {_display_path(issue.source)} -> {issue.target}"
        )


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()


def _load(path: str, output_dir: Path | None = None) -> Config:
    try:
        config = load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if output_dir is not None:
        config.output_dir = output_dir.resolve()
    return config