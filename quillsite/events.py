"""Classification and link rewriting for markdown-it token streams.

The tokenizer hands us a flat list of block-level ``Token`` objects; inline
content lives in the ``children`` of ``inline`` tokens. Every transformation in
Quillsite dispatches on :class:`EventKind` rather than on raw token type
strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, Sequence

from markdown_it.token import Token

ARCHIVE_ESCAPE = "!"
EXTERNAL_PREFIXES = ("http", "mailto")


class EventKind(Enum):
    """The structural events the pipeline reacts to; everything else is OTHER."""

    LINK_START = "link_open"
    PARAGRAPH_END = "paragraph_close"
    FOOTNOTE_DEFINITION_START = "footnote_reference_open"
    FOOTNOTE_DEFINITION_END = "footnote_reference_close"
    FOOTNOTE_REFERENCE = "footnote_ref"
    INLINE = "inline"
    OTHER = "other"


_KINDS_BY_TYPE = {kind.value: kind for kind in EventKind if kind is not EventKind.OTHER}


def event_kind(token: Token) -> EventKind:
    return _KINDS_BY_TYPE.get(token.type, EventKind.OTHER)


@dataclass(frozen=True, slots=True)
class LinkWarning:
    """A link destination whose shape looks wrong."""

    destination: str
    message: str


LinkWarningHandler = Callable[[LinkWarning], None]


def iter_events(tokens: Iterable[Token]) -> Iterator[Token]:
    """Yield every token depth first, inline children right after their parent."""
    for token in tokens:
        yield token
        if token.children:
            yield from iter_events(token.children)


def rewrite_links(
    tokens: Sequence[Token],
    on_warning: LinkWarningHandler | None = None,
) -> list[Token]:
    """Strip the archive escape marker from every link destination.

    Returns new tokens for anything that changes; the input is left untouched.
    Destinations that are neither site-absolute nor ``http``/``mailto`` are
    reported to ``on_warning``.
    """
    rewritten: list[Token] = []
    for token in tokens:
        kind = event_kind(token)
        if kind is EventKind.LINK_START:
            token = _rewrite_link(token, on_warning)
        elif token.children:
            token = token.copy(children=rewrite_links(token.children, on_warning))
        rewritten.append(token)
    return rewritten


def check_destination(destination: str) -> LinkWarning | None:
    if destination.startswith("/") or destination.startswith(EXTERNAL_PREFIXES):
        return None
    if "://" in destination:
        message = f"external link '{destination}' must use http(s) or mailto"
    else:
        message = f"internal link '{destination}' must start with '/'"
    return LinkWarning(destination=destination, message=message)


def _rewrite_link(token: Token, on_warning: LinkWarningHandler | None) -> Token:
    href = str(token.attrGet("href") or "")
    destination = href.lstrip(ARCHIVE_ESCAPE)
    if on_warning is not None:
        warning = check_destination(destination)
        if warning is not None:
            on_warning(warning)
    if destination == href:
        return token
    replacement = token.copy(attrs=dict(token.attrs))
    replacement.attrSet("href", destination)
    return replacement
