"""
Configuration Manager
====================

Manages extraction settings. Values are plain booleans, strings and lists;
the engine reads them, it never writes them back.
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional


DEFAULT_EXCLUDED_ATTRIBUTES = [
    'class', 'id', 'style', 'key', 'ref', 'name', 'src', 'srcset', 'href',
    'type', 'for', 'lang', 'dir', 'rel', 'target', 'method', 'action',
    'width', 'height', 'role', 'slot', 'is', 'xmlns', 'charset', 'content',
    'tabindex', 'autocomplete', 'data-testid', 'classname', 'htmlfor', 'to',
]


@dataclass
class ExtractionSettings:
    """Toggles shared by key detection and hard-string extraction."""
    key_prefix_inference: bool = False  # prepend keyPrefix declared in the buffer
    ignore_comments: bool = True
    enabled_frameworks: List[str] = field(default_factory=list)  # empty = all built-ins
    custom_frameworks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class HtmlParserOptions:
    """Markup detector options."""
    attributes: Optional[List[str]] = None  # whitelist; None = every non-excluded attribute
    excluded_attributes: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_ATTRIBUTES))
    ignored_tags: List[str] = field(default_factory=lambda: ['script', 'style', 'code', 'pre'])
    inline_text: bool = True


@dataclass
class JsParserOptions:
    """Source-string detector options."""
    ignore_imports: bool = True
    jsx: Optional[bool] = None  # None = decide from the language id
    min_length: int = 2
    excluded_attributes: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_ATTRIBUTES))


def _from_dict(cls, data: Dict[str, Any], logger: logging.Logger):
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown %s keys: %s", cls.__name__, ", ".join(unknown))
    return cls(**{k: v for k, v in data.items() if k in known})


class ConfigManager:
    """Manages application configuration."""

    SECTIONS = {
        'extraction': 'extraction',
        'html': 'html_options',
        'js': 'js_options',
    }

    def __init__(self, config_file: str = "keyscout.json", load: bool = True):
        self.logger = logging.getLogger(__name__)
        self.config_file = Path(config_file)

        self.extraction = ExtractionSettings()
        self.html_options = HtmlParserOptions()
        self.js_options = JsParserOptions()

        if load:
            self.load_config()

    def load_config(self) -> bool:
        """Load configuration from file."""
        if not self.config_file.exists():
            self.logger.info("Config file doesn't exist, using defaults")
            return False

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Could not load config file {self.config_file}: {e}")
            return False

        if not isinstance(config_data, dict):
            self.logger.warning(f"Config file {self.config_file} is not a JSON object, using defaults")
            return False

        try:
            if 'extraction' in config_data:
                self.extraction = _from_dict(ExtractionSettings, config_data['extraction'], self.logger)
            if 'html' in config_data:
                self.html_options = _from_dict(HtmlParserOptions, config_data['html'], self.logger)
            if 'js' in config_data:
                self.js_options = _from_dict(JsParserOptions, config_data['js'], self.logger)
        except (TypeError, AttributeError) as e:
            self.logger.warning(f"Invalid configuration in {self.config_file}: {e}")
            self.reset_to_defaults()
            return False

        self.logger.info("Configuration loaded successfully")
        return True

    def save_config(self) -> bool:
        """Save configuration to file."""
        config_data = {
            'extraction': asdict(self.extraction),
            'html': asdict(self.html_options),
            'js': asdict(self.js_options),
        }

        # Create backup if file exists
        if self.config_file.exists():
            backup_file = self.config_file.with_suffix('.json.bak')
            try:
                if backup_file.exists():
                    backup_file.unlink()
                self.config_file.rename(backup_file)
            except OSError as e:
                self.logger.warning(f"Could not create backup: {e}")

        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(config_data, f, indent=4, ensure_ascii=False)
        except OSError as e:
            self.logger.error(f"Error saving configuration: {e}")
            return False

        self.logger.info("Configuration saved successfully")
        return True

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value using dot notation (e.g., 'extraction.key_prefix_inference')."""
        section, _, setting = key.partition('.')
        attr = self.SECTIONS.get(section)
        if attr is None or not setting:
            return default
        return getattr(getattr(self, attr), setting, default)

    def set_setting(self, key: str, value: Any) -> None:
        """Set a setting value using dot notation (e.g., 'html.inline_text')."""
        section, _, setting = key.partition('.')
        attr = self.SECTIONS.get(section)
        target = getattr(self, attr) if attr else None
        if target is None or not hasattr(target, setting):
            self.logger.warning(f"Unknown setting: {key}")
            return
        setattr(target, setting, value)

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self.extraction = ExtractionSettings()
        self.html_options = HtmlParserOptions()
        self.js_options = JsParserOptions()
        self.logger.info("Configuration reset to defaults")
