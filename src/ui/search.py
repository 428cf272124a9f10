"""Transcript search highlighting."""

import re
from html import escape

HIGHLIGHT_CLASS = "search-highlight"


def highlight_html(text: str, term: str, css_class: str = HIGHLIGHT_CLASS) -> str:
    """Return ``text`` as HTML with every occurrence of ``term`` marked.

    Matching is case-insensitive and literal: regex metacharacters in
    ``term`` are escaped. The text itself is HTML-escaped, so the result is
    safe to render. An empty term yields the plain escaped text.
    """
    term = term.strip()
    if not term:
        return escape(text)

    pattern = re.compile(re.escape(term), re.IGNORECASE)
    parts: list[str] = []
    last = 0
    for match in pattern.finditer(text):
        parts.append(escape(text[last : match.start()]))
        parts.append(f'<mark class="{css_class}">{escape(match.group(0))}</mark>')
        last = match.end()
    parts.append(escape(text[last:]))
    return "".join(parts)


def count_matches(text: str, term: str) -> int:
    term = term.strip()
    if not term:
        return 0
    return len(re.findall(re.escape(term), text, re.IGNORECASE))
