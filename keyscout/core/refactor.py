"""
Replace a detected hard string with a rendered translation call.
"""

from __future__ import annotations

import logging

from .exceptions import KeyScoutError
from .models import (
    DetectionResult,
    SOURCE_HTML_ATTRIBUTE,
    SOURCE_JS_STRING,
    SOURCE_JS_TEMPLATE,
)

logger = logging.getLogger(__name__)

DEFAULT_ATTRIBUTE_BINDING = '{name}="{expression}"'


def apply_refactor(text: str, detection: DetectionResult, replacement: str, framework=None) -> str:
    """Return ``text`` with ``detection`` replaced by ``replacement``.

    Literals lose their quotes along with the text; an attribute is rewritten
    as a binding, e.g. ``:title="$t('k')"`` for Vue.
    """
    if detection.source in (SOURCE_JS_STRING, SOURCE_JS_TEMPLATE):
        start, end = detection.full_range.start, detection.full_range.end
    elif detection.source == SOURCE_HTML_ATTRIBUTE:
        if not detection.attribute or detection.full_start < 0:
            raise KeyScoutError(f"Attribute detection at {detection.start} has no attribute span")
        start, end = detection.full_start, detection.full_end
        if framework is not None:
            replacement = framework.bind_attribute(detection.attribute, replacement)
        else:
            replacement = DEFAULT_ATTRIBUTE_BINDING.format(name=detection.attribute, expression=replacement)
    else:
        start, end = detection.start, detection.end

    if not 0 <= start <= end <= len(text):
        raise KeyScoutError(f"Detection range {start}..{end} is outside the buffer")

    logger.debug("Replacing %r at %s..%s", text[start:end], start, end)
    return text[:start] + replacement + text[end:]


def refactor_document(document, detection: DetectionResult, replacement: str, framework=None) -> str:
    """Apply the replacement to a ``TextDocument`` in place and return the new text."""
    new_text = apply_refactor(document.get_text(), detection, replacement, framework)
    document.set_text(new_text)
    return new_text
