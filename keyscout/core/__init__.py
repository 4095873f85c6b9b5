"""
Core module for KeyScout
========================
"""

from .exceptions import ConfigError, FrameworkConfigError, KeyScoutError
from .models import (
    DetectionReport, DetectionResult, ExtractionRule, KeyAndRange, KeyMatch,
    Position, Range, RuleSet, TextRange,
)
from .document import TextDocument
from .frameworks import BUILTIN_FRAMEWORKS, Framework, FrameworkRegistry, framework_from_config
from .key_detector import KeyCache, KeyDetector
from .refactor import apply_refactor

__all__ = [
    'KeyScoutError', 'ConfigError', 'FrameworkConfigError',
    'DetectionReport', 'DetectionResult', 'ExtractionRule', 'KeyAndRange', 'KeyMatch',
    'Position', 'Range', 'RuleSet', 'TextRange',
    'TextDocument',
    'Framework', 'FrameworkRegistry', 'BUILTIN_FRAMEWORKS', 'framework_from_config',
    'KeyCache', 'KeyDetector',
    'apply_refactor',
]
