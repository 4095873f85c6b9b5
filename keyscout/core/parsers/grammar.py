"""
Lightweight pyparsing grammar for script sources.

No AST is built: the grammar only recognises comments and the three kinds of
string literal so that scanners never mistake ``//`` inside a string for a
comment, or a quote inside a comment for a literal.
"""

from __future__ import annotations

from typing import Iterator, Tuple

import pyparsing as pp


SINGLE_QUOTED = pp.QuotedString("'", esc_char='\\', unquote_results=False)
DOUBLE_QUOTED = pp.QuotedString('"', esc_char='\\', unquote_results=False)
TEMPLATE_LITERAL = pp.QuotedString('`', esc_char='\\', multiline=True, unquote_results=False)

SCRIPT_TOKEN = (pp.cpp_style_comment | TEMPLATE_LITERAL | DOUBLE_QUOTED | SINGLE_QUOTED).parse_with_tabs()
HTML_COMMENT = pp.html_comment.copy().parse_with_tabs()

KIND_COMMENT = 'comment'
KIND_STRING = 'string'
KIND_TEMPLATE = 'template'


def _kind(raw: str) -> str:
    if raw.startswith(('//', '/*')):
        return KIND_COMMENT
    if raw.startswith('`'):
        return KIND_TEMPLATE
    return KIND_STRING


def scan_script(text: str) -> Iterator[Tuple[str, str, int, int]]:
    """Yield ``(kind, raw, start, end)`` for every comment and string literal.

    Offsets are exact: tabs are kept and ``raw`` includes the quotes.
    """
    for tokens, start, end in SCRIPT_TOKEN.scan_string(text):
        raw = tokens[0]
        yield _kind(raw), raw, start, end


def scan_html_comments(text: str) -> Iterator[Tuple[int, int]]:
    for _, start, end in HTML_COMMENT.scan_string(text):
        yield start, end
