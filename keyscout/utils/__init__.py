"""
Utils module for KeyScout
=========================
"""

from .config import ConfigManager, ExtractionSettings, HtmlParserOptions, JsParserOptions
from .encoding import read_text_safely
from .languages import guess_language_id

__all__ = [
    'ConfigManager', 'ExtractionSettings', 'HtmlParserOptions', 'JsParserOptions',
    'read_text_safely', 'guess_language_id',
]
