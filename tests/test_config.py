import json
import logging

from keyscout.utils.config import ConfigManager, DEFAULT_EXCLUDED_ATTRIBUTES


def test_defaults_when_file_missing(tmp_path):
    config = ConfigManager(str(tmp_path / 'keyscout.json'))
    assert config.extraction.key_prefix_inference is False
    assert config.html_options.ignored_tags == ['script', 'style', 'code', 'pre']
    assert config.js_options.jsx is None
    assert config.js_options.excluded_attributes == DEFAULT_EXCLUDED_ATTRIBUTES


def test_save_and_reload(tmp_path):
    path = tmp_path / 'keyscout.json'
    config = ConfigManager(str(path), load=False)
    config.set_setting('extraction.key_prefix_inference', True)
    config.set_setting('js.min_length', 3)
    assert config.save_config()

    reloaded = ConfigManager(str(path))
    assert reloaded.get_setting('extraction.key_prefix_inference') is True
    assert reloaded.get_setting('js.min_length') == 3


def test_save_keeps_backup(tmp_path):
    path = tmp_path / 'keyscout.json'
    config = ConfigManager(str(path), load=False)
    config.save_config()
    config.set_setting('html.inline_text', False)
    config.save_config()

    backup = tmp_path / 'keyscout.json.bak'
    assert backup.exists()
    assert json.loads(backup.read_text(encoding='utf-8'))['html']['inline_text'] is True
    assert json.loads(path.read_text(encoding='utf-8'))['html']['inline_text'] is False


def test_invalid_json_falls_back_to_defaults(tmp_path, caplog):
    path = tmp_path / 'keyscout.json'
    path.write_text('{not json', encoding='utf-8')
    with caplog.at_level(logging.WARNING):
        config = ConfigManager(str(path))
    assert config.extraction.key_prefix_inference is False
    assert 'Could not load config file' in caplog.text


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / 'keyscout.json'
    path.write_text(json.dumps({'extraction': {'key_prefix_inference': True, 'bogus': 1}}), encoding='utf-8')
    with caplog.at_level(logging.WARNING):
        config = ConfigManager(str(path))
    assert config.extraction.key_prefix_inference is True
    assert 'bogus' in caplog.text


def test_wrong_section_type_resets(tmp_path):
    path = tmp_path / 'keyscout.json'
    path.write_text(json.dumps({'extraction': ['not', 'an', 'object']}), encoding='utf-8')
    config = ConfigManager(str(path))
    assert config.extraction.enabled_frameworks == []


def test_get_and_set_setting():
    config = ConfigManager(load=False)
    assert config.get_setting('extraction.ignore_comments') is True
    assert config.get_setting('nope.value', 'fallback') == 'fallback'
    assert config.get_setting('extraction') is None

    config.set_setting('html.attributes', ['alt', 'title'])
    assert config.html_options.attributes == ['alt', 'title']


def test_set_unknown_setting_warns(caplog):
    config = ConfigManager(load=False)
    with caplog.at_level(logging.WARNING):
        config.set_setting('extraction.does_not_exist', 1)
    assert 'Unknown setting' in caplog.text


def test_reset_to_defaults():
    config = ConfigManager(load=False)
    config.set_setting('extraction.key_prefix_inference', True)
    config.reset_to_defaults()
    assert config.extraction.key_prefix_inference is False
