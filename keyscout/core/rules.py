"""
Regex rule library.

Usage patterns are written with a ``{key}`` placeholder which is substituted
textually (the patterns themselves contain literal braces, so ``str.format``
is not an option). Capture group 1 of every compiled usage regex is the key.

Extraction rules decide whether a candidate string is worth externalizing.
The first rule that fires wins; a string no rule fires on is extracted.
None of the patterns below nest unbounded quantifiers.
"""

from __future__ import annotations

import re
from typing import Iterable, Pattern, Tuple, Union

from .models import (
    ExtractionRule,
    RuleSet,
    RULE_EXCLUDE,
    RULE_INCLUDE,
    SOURCE_HTML_ATTRIBUTE,
    SOURCE_HTML_INLINE,
    SOURCE_JS_STRING,
)


KEY_PLACEHOLDER = '{key}'
KEY_PATTERN = r'[\w\d\. \-\[\]\/:]*?'

# t('a.b'), $t('a.b'), this.$t(..), i18n.t(..), tc/te, <i18n path="..">, v-t=".."
DEFAULT_USAGE_MATCH_REGEX = (
    r'(?:i18n(?:-\w+)?[ (\n]\s*(?:key)?path=|v-t=[\'"`{]|\b(?:t|tc|te)\()'
    r'\s*[\'"`]({key})[\'"`]',
)

INTERPOLATION_RE = re.compile(r'\$\{[^}]*\}|\{\{[^}]*\}\}')


def to_regex(pattern: Union[str, Pattern], key_pattern: str = KEY_PATTERN) -> Pattern:
    if hasattr(pattern, 'finditer'):
        return pattern
    return re.compile(pattern.replace(KEY_PLACEHOLDER, key_pattern))


def build_usage_regex(
    patterns: Iterable[Union[str, Pattern]],
    key_pattern: str = KEY_PATTERN,
) -> Tuple[Pattern, ...]:
    """Compile usage patterns, keeping their order (earlier wins on overlap)."""
    return tuple(to_regex(p, key_pattern) for p in patterns)


def strip_interpolations(text: str) -> str:
    return INTERPOLATION_RE.sub('', text)


def has_interpolation(text: str) -> bool:
    return INTERPOLATION_RE.search(text) is not None


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

TECHNICAL_TERMS = frozenset({
    'true', 'false', 'null', 'undefined', 'none', 'nan',
    'get', 'post', 'put', 'delete', 'patch', 'head', 'options',
    'utf-8', 'utf8', 'ascii', 'json', 'xml', 'csv',
    'div', 'span', 'button', 'input', 'form', 'img', 'svg',
    'px', 'em', 'rem', 'auto', 'inherit', 'center', 'left', 'right',
    'use strict',
})


def _is_blank(text: str) -> bool:
    return not text.strip()


def _has_no_letters(text: str) -> bool:
    return re.search(r'[^\W\d_]', text) is None


def _is_single_char(text: str) -> bool:
    return len(text.strip()) < 2


def _is_technical_term(text: str) -> bool:
    return text.strip().lower() in TECHNICAL_TERMS


def _is_key_like(text: str) -> bool:
    stripped = text.strip()
    if not stripped or ' ' in stripped or '.' not in stripped:
        return False
    return all(re.fullmatch(r'[\w-]+', seg) for seg in stripped.split('.'))


def _is_identifier(text: str) -> bool:
    stripped = text.strip()
    if not re.fullmatch(r'[A-Za-z_$][\w$-]*', stripped):
        return False
    return (
        '_' in stripped
        or ('-' in stripped and stripped.islower())
        or '$' in stripped
        or re.search(r'[a-z][A-Z]', stripped) is not None
    )


def _is_lowercase_word(text: str) -> bool:
    stripped = text.strip()
    return ' ' not in stripped and stripped.islower()


def _is_entity_only(text: str) -> bool:
    return not re.sub(r'&#?\w+;', '', text).strip()


def _is_template_only(text: str) -> bool:
    return _has_no_letters(strip_interpolations(text))


def _residue_is_identifier(text: str) -> bool:
    residue = strip_interpolations(text).strip()
    return bool(residue) and (_is_identifier(residue) or _is_key_like(residue))


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

DEFAULT_EXTRACTION_RULES: Tuple[ExtractionRule, ...] = (
    ExtractionRule('blank', predicate=_is_blank),
    ExtractionRule('single_char', predicate=_is_single_char),
    # CJK/Hangul text is always prose
    ExtractionRule(
        'cjk_text',
        verdict=RULE_INCLUDE,
        pattern=re.compile(r'[\u3040-\u30ff\u3400-\u9fff\uac00-\ud7af]'),
    ),
    ExtractionRule('no_letters', predicate=_has_no_letters),
    ExtractionRule('technical_term', predicate=_is_technical_term),
    ExtractionRule(
        'format_only',
        pattern=re.compile(r'^\s*(?:\[[^\]]+\]|\{[^}]*\}|%s|%\([^)]+\)[sdif])\s*$'),
    ),
    ExtractionRule('url', pattern=re.compile(r'^(?:https?|ftp|mailto|tel|data):|^//\S', re.I)),
    ExtractionRule('path', pattern=re.compile(r'^(?:\.{1,2}/|/|~/|@/)[\w./@~-]*$')),
    ExtractionRule('mime_type', pattern=re.compile(r'^[a-z]+/[\w.+-]+$')),
    ExtractionRule(
        'file_name',
        pattern=re.compile(
            r'^[\w.-]+\.(?:png|jpe?g|gif|svg|webp|ico|css|scss|less|js|mjs|ts|jsx|tsx|vue'
            r'|json|ya?ml|html?|md|txt|woff2?|ttf|otf|mp3|mp4|ogg|wav|pdf)$',
            re.I,
        ),
    ),
    ExtractionRule(
        'color',
        pattern=re.compile(r'^(?:#[0-9a-fA-F]{3,8}|(?:rgb|hsl)a?\([^)]*\))$'),
    ),
    ExtractionRule('key_like', predicate=_is_key_like),
    ExtractionRule('identifier', predicate=_is_identifier),
    ExtractionRule('code_tokens', pattern=re.compile(r'=>|&&|\|\||[!=]==|\(\)|^[{\[]|[}\]]$')),
    ExtractionRule(
        'lowercase_word',
        predicate=_is_lowercase_word,
        sources=(SOURCE_HTML_ATTRIBUTE, SOURCE_JS_STRING),
    ),
    ExtractionRule('entity_only', predicate=_is_entity_only, sources=(SOURCE_HTML_INLINE,)),
)

DEFAULT_DYNAMIC_EXTRACTION_RULES: Tuple[ExtractionRule, ...] = (
    ExtractionRule('blank', predicate=_is_blank),
    ExtractionRule('template_only', predicate=_is_template_only),
    ExtractionRule('identifier_residue', predicate=_residue_is_identifier),
)

DEFAULT_RULESET = RuleSet(
    usage_match_regex=build_usage_regex(DEFAULT_USAGE_MATCH_REGEX),
    extraction_rules=DEFAULT_EXTRACTION_RULES,
    dynamic_extraction_rules=DEFAULT_DYNAMIC_EXTRACTION_RULES,
)

__all__ = [
    'KEY_PLACEHOLDER', 'KEY_PATTERN', 'DEFAULT_USAGE_MATCH_REGEX',
    'DEFAULT_EXTRACTION_RULES', 'DEFAULT_DYNAMIC_EXTRACTION_RULES', 'DEFAULT_RULESET',
    'RULE_EXCLUDE', 'RULE_INCLUDE',
    'build_usage_regex', 'to_regex', 'strip_interpolations', 'has_interpolation',
]
