"""Relocate footnote definitions to the bottom of a document, GitHub style.

Definitions are lifted out of the token stream as they are met and references
become inline anchors numbered by first use. Once the whole document has been
seen, the referenced definitions are appended as an ordered list sorted by that
number, so a footnote referenced first but defined last still renders first.
Unreferenced definitions are dropped.

For example::

    five [^feet].

    [^feet]:
        A foot is defined, in this case, as 0.3048 m.

        Historically, the foot has not been defined this way.

renders the back-reference inside the last paragraph of the definition::

    <p>five <sup class="footnote-reference" id="fr-feet-1"><a href="#fn-feet">[1]</a></sup>.</p>
    <hr />
    <ol class="footnotes-list">
    <li id="fn-feet">
    <p>A foot is defined, in this case, as 0.3048 m.</p>
    <p>Historically, the foot has not been defined this way. <a href="#fr-feet-1">↩</a></p>
    </li>
    </ol>

Definitions that end in a table, list or image get their back-references after
the last block instead.

Nesting is tracked with a stack of open definition buffers but is not
validated: malformed nesting can silently renumber footnotes.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Sequence

from markdown_it.token import Token

from .events import EventKind, event_kind

BACKREF_GLYPH = "↩"


@dataclass(slots=True)
class FootnoteUsage:
    """First-reference order and reference count for one label."""

    order: int
    count: int = 0


def bottom_footnotes(tokens: Sequence[Token]) -> list[Token]:
    usages: dict[str, FootnoteUsage] = {}
    open_definitions: list[tuple[str, list[Token]]] = []
    bodies: list[tuple[str, list[Token]]] = []
    main_events: list[Token] = []

    for token in tokens:
        kind = event_kind(token)
        if kind is EventKind.FOOTNOTE_DEFINITION_START:
            open_definitions.append((token.meta["label"], [token]))
            continue
        if kind is EventKind.FOOTNOTE_DEFINITION_END:
            if not open_definitions:
                # Unbalanced close; nothing to attach it to.
                continue
            label, buffer = open_definitions.pop()
            buffer.append(token)
            bodies.append((label, buffer))
            continue
        if kind is EventKind.INLINE and token.children:
            token = token.copy(children=_anchor_references(token.children, usages))

        if open_definitions:
            open_definitions[-1][1].append(token)
        else:
            main_events.append(token)

    referenced = [(label, body) for label, body in bodies if label in usages]
    referenced.sort(key=lambda entry: usages[entry[0]].order)
    if referenced:
        main_events.append(Token("hr", "hr", 0, markup="---", block=True))
        main_events.append(_html_block('<ol class="footnotes-list">\n'))
        for label, body in referenced:
            main_events.extend(_close_definition(label, body, usages[label]))
        main_events.append(_html_block("</ol>\n"))
    return main_events


def _anchor_references(children: Sequence[Token], usages: dict[str, FootnoteUsage]) -> list[Token]:
    anchored: list[Token] = []
    for child in children:
        if event_kind(child) is not EventKind.FOOTNOTE_REFERENCE:
            anchored.append(child)
            continue
        label = child.meta["label"]
        usage = usages.get(label)
        if usage is None:
            usage = usages[label] = FootnoteUsage(order=len(usages) + 1)
        usage.count += 1
        name = escape(label)
        anchored.append(
            Token(
                "html_inline",
                "",
                0,
                content=(
                    f'<sup class="footnote-reference" id="fr-{name}-{usage.count}">'
                    f'<a href="#fn-{name}">[{usage.order}]</a></sup>'
                ),
            )
        )
    return anchored


def _close_definition(label: str, body: list[Token], usage: FootnoteUsage) -> list[Token]:
    name = escape(label)
    last = len(body) - 1
    written_backrefs = False
    rendered: list[Token] = []
    for position, token in enumerate(body):
        kind = event_kind(token)
        if kind is EventKind.FOOTNOTE_DEFINITION_START and position == 0:
            rendered.append(_html_block(f'<li id="fn-{name}">\n'))
        elif (
            kind in (EventKind.FOOTNOTE_DEFINITION_END, EventKind.PARAGRAPH_END)
            and not written_backrefs
            and position >= last - 1
        ):
            closing = "</li>\n" if kind is EventKind.FOOTNOTE_DEFINITION_END else "</p>\n"
            rendered.append(_html_block(_backrefs(name, usage.count) + closing))
            written_backrefs = True
        elif kind is EventKind.FOOTNOTE_DEFINITION_END:
            rendered.append(_html_block("</li>\n"))
        else:
            rendered.append(token)
    return rendered


def _backrefs(name: str, count: int) -> str:
    links = []
    for usage in range(1, count + 1):
        glyph = BACKREF_GLYPH if usage == 1 else f"{BACKREF_GLYPH}{usage}"
        links.append(f' <a href="#fr-{name}-{usage}">{glyph}</a>')
    return "".join(links)


def _html_block(content: str) -> Token:
    return Token("html_block", "", 0, content=content, block=True)
