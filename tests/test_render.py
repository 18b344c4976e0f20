from datetime import datetime
from pathlib import Path

import pytest

from quillsite.config import Config, SiteConfig
from quillsite.content import ContentItem, ContentStatus
from quillsite.index import build_index
from quillsite.render import (
    build_article,
    build_articles,
    format_date,
    site_context,
    summarize,
    write_content_pages,
)
from quillsite.templates import TemplateEngine, TemplateError

TEMPLATES = Path(__file__).resolve().parent / "fixtures" / "templates"


def _item(
    title: str,
    output_path: str,
    *,
    layout: str = "post",
    status: ContentStatus = ContentStatus.PUBLIC,
    body: str = "First paragraph with a [link](/about).\n\nSecond paragraph.",
) -> ContentItem:
    return ContentItem(
        source_path=Path(f"{output_path}.md"),
        output_path=output_path,
        markdown_body=body,
        metadata={"title": title, "layout": layout, "date": "2024-01-06"},
        timestamp=datetime(2024, 1, 6, 8, 15),
        status=status,
        tags=["journal"],
    )


def _config(tmp_path: Path) -> Config:
    return Config(
        site=SiteConfig(sitename="Test Site", siteurl="https://example.com/", author="Ada"),
        templates_dir=TEMPLATES,
        output_dir=tmp_path / "site",
    )


def test_summarize_keeps_first_words() -> None:
    body = " ".join(f"w{n}" for n in range(150))

    summary = summarize(body, 100)

    assert summary.split()[-1] == "w99…"
    assert len(summary.split()) == 100
    assert summarize("short body") == "short body…"


def test_format_date_spells_out_weekday_and_month() -> None:
    assert format_date(datetime(2024, 1, 6)) == "Saturday 6 January 2024"


def test_build_article_projects_item() -> None:
    item = _item("Sample Post", "blog/2024/01/06/sample-post")

    article = build_article(item)

    assert article.title == "Sample Post"
    assert article.url == "blog/2024/01/06/sample-post"
    assert article.content.startswith('<p>First paragraph with a <a href="/about">link</a>.</p>')
    assert "Second paragraph." in article.content
    assert article.summary.rstrip().endswith("Second paragraph.…</p>")
    assert article.tags == ["journal"]
    assert article.date == "Saturday 6 January 2024"


def test_site_context_exposes_site_and_feeds(tmp_path: Path) -> None:
    config = _config(tmp_path)
    index = build_index([_item("Sample", "sample")])

    context = site_context(config, index)

    assert context["site"] == {"name": "Test Site", "url": "https://example.com", "author": "Ada"}
    assert context["feeds"]["rss"] == "/feeds/all.rss.xml"
    assert context["tag_cloud"] == [{"name": "journal", "count": 1, "weight": 5, "url": "tags/journal"}]


def test_write_content_pages_uses_layout_template(tmp_path: Path) -> None:
    config = _config(tmp_path)
    post = _item("Sample Post", "blog/2024/01/06/sample-post")
    page = _item("About", "about", layout="page")
    draft = _item("Unfinished", "blog/2024/01/06/unfinished", status=ContentStatus.DRAFT)
    items = [post, page, draft]
    engine = TemplateEngine(config.templates_dir)
    context = site_context(config, build_index(items))

    written = write_content_pages(
        items, build_articles(items, config), engine, context, config.output_dir
    )

    output = config.output_dir
    assert written == [
        output / "blog/2024/01/06/sample-post/index.html",
        output / "about/index.html",
        output / "draft/blog/2024/01/06/unfinished/index.html",
    ]
    assert not (output / "blog/2024/01/06/unfinished").exists()

    post_html = written[0].read_text(encoding="utf-8")
    assert "<title>Sample Post - Test Site</title>" in post_html
    assert '<article class="post">' in post_html
    assert "<time>Saturday 6 January 2024</time>" in post_html
    assert '<a href="/about">link</a>' in post_html

    assert '<article class="page">' in written[1].read_text(encoding="utf-8")


def test_existing_pages_are_overwritten(tmp_path: Path) -> None:
    config = _config(tmp_path)
    item = _item("About", "about", layout="page")
    target = config.output_dir / "about" / "index.html"
    target.parent.mkdir(parents=True)
    target.write_text("stale", encoding="utf-8")
    engine = TemplateEngine(config.templates_dir)

    write_content_pages(
        [item], build_articles([item], config), engine, site_context(config, build_index([item])), config.output_dir
    )

    assert "stale" not in target.read_text(encoding="utf-8")


def test_missing_layout_template_is_fatal(tmp_path: Path) -> None:
    config = _config(tmp_path)
    item = _item("Odd", "odd", layout="gallery")
    engine = TemplateEngine(config.templates_dir)

    with pytest.raises(TemplateError, match="gallery.html"):
        write_content_pages(
            [item], build_articles([item], config), engine, {}, config.output_dir
        )


def test_missing_templates_directory_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(TemplateError):
        TemplateEngine(tmp_path / "nope")


def test_render_errors_are_wrapped(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "page.html").write_text("{{ article.title.missing() }}", encoding="utf-8")

    engine = TemplateEngine(templates)

    with pytest.raises(TemplateError, match="failed to render"):
        engine.render("page.html", {"article": {"title": "x"}})
