from markdown_it.token import Token

from quillsite.events import (
    EventKind,
    LinkWarning,
    check_destination,
    event_kind,
    iter_events,
    rewrite_links,
)
from quillsite.markdown import _renderer


def _tokens(text: str) -> list[Token]:
    return _renderer().parse(text, {})


def _hrefs(tokens: list[Token]) -> list[str]:
    return [
        str(token.attrGet("href"))
        for token in iter_events(tokens)
        if event_kind(token) is EventKind.LINK_START
    ]


def test_event_kind_classifies_known_tokens() -> None:
    assert event_kind(Token("link_open", "a", 1)) is EventKind.LINK_START
    assert event_kind(Token("paragraph_close", "p", -1)) is EventKind.PARAGRAPH_END
    assert event_kind(Token("footnote_ref", "", 0)) is EventKind.FOOTNOTE_REFERENCE
    assert event_kind(Token("heading_open", "h1", 1)) is EventKind.OTHER


def test_rewrite_strips_archive_escape() -> None:
    tokens = _tokens("See [the paper](!https://example.com/paper.pdf) and [home](/).")

    rewritten = rewrite_links(tokens)

    assert _hrefs(rewritten) == ["https://example.com/paper.pdf", "/"]


def test_rewrite_does_not_mutate_input() -> None:
    tokens = _tokens("[x](!/about)")

    rewrite_links(tokens)

    assert _hrefs(tokens) == ["!/about"]


def test_rewrite_is_idempotent() -> None:
    tokens = _tokens("[a](!/one) [b](/two) [c](!!mailto:me@example.com)")

    once = rewrite_links(tokens)
    twice = rewrite_links(once)

    assert _hrefs(once) == ["/one", "/two", "mailto:me@example.com"]
    assert _hrefs(twice) == _hrefs(once)


def test_rewrite_passes_other_events_through() -> None:
    tokens = _tokens("# Title\n\nPlain *text*.")

    rewritten = rewrite_links(tokens)

    assert [token.type for token in rewritten] == [token.type for token in tokens]
    assert rewritten[1].content == "Title"


def test_rewrite_reports_malformed_destinations() -> None:
    warnings: list[LinkWarning] = []
    tokens = _tokens("[rel](about) [ftp](ftp://files.example.com) [ok](/ok) [web](http://x.org)")

    rewrite_links(tokens, on_warning=warnings.append)

    assert [warning.destination for warning in warnings] == ["about", "ftp://files.example.com"]
    assert "must start with '/'" in warnings[0].message


def test_check_destination_accepts_site_and_external_links() -> None:
    assert check_destination("/blog/2024/01/01/post") is None
    assert check_destination("https://example.com") is None
    assert check_destination("mailto:someone@example.com") is None
    assert check_destination("blog/post") is not None
