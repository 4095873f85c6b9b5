"""Source-string detector for JavaScript, TypeScript and JSX/TSX.

String and template literals are found with the pyparsing grammar in
``grammar.py``, so literals inside comments are never reported and ``//``
inside a string never starts a comment. Context checks are done on the text
surrounding each literal rather than on a syntax tree.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Pattern, Sequence, Tuple

from ...utils.config import JsParserOptions
from ..models import (
    DetectionResult,
    ExtractionRule,
    SOURCE_JS_STRING,
    SOURCE_JS_TEMPLATE,
    SOURCE_JSX_TEXT,
)
from ..rules import DEFAULT_DYNAMIC_EXTRACTION_RULES, DEFAULT_EXTRACTION_RULES, DEFAULT_RULESET
from ..usage import scan_usage
from .grammar import KIND_COMMENT, KIND_TEMPLATE, scan_script
from .utils import should_extract, trim_detection

logger = logging.getLogger(__name__)

IMPORT_RE = re.compile(r'(?:\bimport|\bfrom|\brequire\s*\(|\bimport\s*\()\s*$')
JSX_ATTRIBUTE_RE = re.compile(r'(?:<[A-Za-z][^<>]*?\s|^\s*)([A-Za-z][\w-]*)=$')
JSX_TAG_RE = re.compile(r'</?[A-Za-z][\w.:-]*(?:\s[^<]*)?>|<>')
JSX_TEXT_RE = re.compile(r'>([^<>{}`]+)(?=[<{])')
IDENTIFIER_TAIL_RE = re.compile(r'[\w$]+$')
EXPRESSION_KEYWORDS = {'return', 'case', 'in', 'of', 'typeof', 'yield', 'await', 'else', 'do'}

LOOKBEHIND = 120


def _prev_char(text: str, pos: int) -> str:
    return text[max(0, pos - LOOKBEHIND):pos].rstrip()[-1:]


def _next_char(text: str, pos: int) -> str:
    return text[pos:pos + LOOKBEHIND].lstrip()[:1]


def _ends_with_operand(head: str) -> bool:
    """True when ``head`` ends with a value, not with a keyword or operator."""
    m = IDENTIFIER_TAIL_RE.search(head)
    if m:
        return m.group(0) not in EXPRESSION_KEYWORDS
    return head[-1:] in (')', ']')


def _is_subscript(text: str, start: int) -> bool:
    bracket = text.rfind('[', 0, start)
    return _ends_with_operand(text[max(0, bracket - LOOKBEHIND):bracket].rstrip())


def _is_type_argument(text: str, lt: int, gt: int) -> bool:
    """``useState<number>`` and similar: an opening tag glued to a name."""
    if text[lt + 1:lt + 2] == '/' or text[gt - 1:gt] == '/':
        return False
    head = text[max(0, lt - LOOKBEHIND):lt]
    return IDENTIFIER_TAIL_RE.search(head) is not None and _ends_with_operand(head)


def _is_import_path(before: str) -> bool:
    return IMPORT_RE.search(before) is not None


def _is_structural(text: str, start: int, end: int) -> bool:
    """Object keys, comparisons, ``case`` labels and subscripts."""
    prev = _prev_char(text, start)
    nxt = _next_char(text, end)
    if nxt == ':' and prev in ('{', ','):
        return True
    if prev == '[' and nxt == ']':
        if _is_subscript(text, start):
            return True
    head = text[max(0, start - LOOKBEHIND):start].rstrip()
    if head.endswith(('==', '!=')) or re.search(r'\bcase$', head):
        return True
    tail = text[end:end + LOOKBEHIND].lstrip()
    return tail.startswith(('==', '!='))


def _overlaps(start: int, end: int, spans: Sequence[Tuple[int, int]]) -> bool:
    return any(s < end and start < e for s, e in spans)


def _accept(result: Optional[DetectionResult], rules, dynamic_rules, min_length: int) -> Optional[DetectionResult]:
    if result is None or len(result.text) < min_length:
        return None
    table = dynamic_rules if result.dynamic else rules
    if not should_extract(result.text, result.source, table):
        return None
    return result


def _jsx_text(text: str, skip: Sequence[Tuple[int, int]]) -> List[DetectionResult]:
    found = []
    for m in JSX_TEXT_RE.finditer(text):
        gt = m.start()
        lt = text.rfind('<', 0, gt)
        if lt == -1 or not JSX_TAG_RE.fullmatch(text, lt, gt + 1):
            continue
        if _is_type_argument(text, lt, gt):
            continue
        if _overlaps(m.start(1), m.end(1), skip):
            continue
        candidate = trim_detection(DetectionResult(
            text=m.group(1),
            start=m.start(1),
            end=m.end(1),
            source=SOURCE_JSX_TEXT,
        ))
        if candidate is not None:
            found.append(candidate)
    return found


def detect(
    text: str,
    rules: Sequence[ExtractionRule] = DEFAULT_EXTRACTION_RULES,
    dynamic_rules: Sequence[ExtractionRule] = DEFAULT_DYNAMIC_EXTRACTION_RULES,
    options: Optional[JsParserOptions] = None,
    usage_regexes: Sequence[Pattern] = DEFAULT_RULESET.usage_match_regex,
) -> List[DetectionResult]:
    options = options or JsParserOptions()
    excluded_attributes = {a.lower() for a in options.excluded_attributes}

    # literals that are already the key argument of a translation call
    usage_spans = [(k.start, k.end) for k in scan_usage(text, usage_regexes)]

    tokens = list(scan_script(text))
    candidates: List[DetectionResult] = []

    for kind, raw, start, end in tokens:
        if kind == KIND_COMMENT:
            continue
        inner_start, inner_end = start + 1, end - 1
        if _overlaps(inner_start, inner_end, usage_spans):
            continue

        line_start = text.rfind('\n', 0, start) + 1
        before = text[line_start:start]
        if options.ignore_imports and _is_import_path(before):
            continue
        if _is_structural(text, start, end):
            continue

        attribute = None
        if options.jsx:
            m_attr = JSX_ATTRIBUTE_RE.search(before)
            if m_attr:
                attribute = m_attr.group(1)
                if attribute.lower() in excluded_attributes:
                    continue

        inner = raw[1:-1]
        dynamic = kind == KIND_TEMPLATE and '${' in inner
        candidates.append(trim_detection(DetectionResult(
            text=inner,
            start=inner_start,
            end=inner_end,
            source=SOURCE_JS_TEMPLATE if dynamic else SOURCE_JS_STRING,
            quote=raw[0],
            dynamic=dynamic,
            full_text=raw,
            full_start=start,
            full_end=end,
            attribute=attribute,
        )))

    if options.jsx:
        candidates.extend(_jsx_text(text, [(s, e) for _, _, s, e in tokens]))

    results = []
    for candidate in candidates:
        accepted = _accept(candidate, rules, dynamic_rules, options.min_length)
        if accepted is not None:
            results.append(accepted)
    results.sort(key=lambda r: (r.start, r.end))

    logger.debug("Source detector found %s candidates", len(results))
    return results
