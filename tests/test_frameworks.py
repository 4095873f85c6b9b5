import json
import logging

import pytest

from keyscout.core.document import TextDocument
from keyscout.core.exceptions import FrameworkConfigError, KeyScoutError
from keyscout.core.frameworks import (
    FrameworkRegistry,
    I18NEXT_FRAMEWORK,
    REACT_I18NEXT_FRAMEWORK,
    VUE_FRAMEWORK,
    framework_from_config,
    find_package_json,
    read_dependencies,
)
from keyscout.core.frameworks.base import Framework, detect_markup
from keyscout.core.key_detector import KeyDetector
from keyscout.core.models import DetectionResult, SOURCE_JS_STRING
from keyscout.core.parsers.utils import shift_detection_position
from keyscout.core.refactor import apply_refactor, refactor_document
from keyscout.utils.config import ConfigManager


def keys_in(text, language_id):
    return [k.key for k in KeyDetector().get_keys(TextDocument(text, language_id))]


def static_framework(framework_id, results):
    return Framework(
        id=framework_id,
        display=framework_id.upper(),
        language_ids=('javascript',),
        usage_match_regex=(r"\bx\('({key})'\)",),
        refactor_templates=lambda keypath, *rest: [keypath],
        detect_hard_strings=lambda framework, document, config: list(results),
    )


def test_script_block_offsets_in_markup():
    text = '<p>Header</p>\n'.ljust(50) + "<script>const s = 'Click me'</script>"
    results = detect_markup(VUE_FRAMEWORK, text)
    click = [r for r in results if r.text == 'Click me']
    assert len(click) == 1
    assert click[0].start == 50 + 8 + 11
    assert click[0].full_start == 50 + 8 + 10
    assert text[click[0].start:click[0].end] == 'Click me'
    assert 'Header' in [r.text for r in results]


def test_shift_detection_position():
    r = DetectionResult('Click me', 11, 19, SOURCE_JS_STRING, "'", False, "'Click me'", 10, 20)
    shifted = shift_detection_position([r], 58)[0]
    assert (shifted.start, shifted.end) == (69, 77)
    assert (shifted.full_start, shifted.full_end) == (68, 78)
    assert shift_detection_position([r], 0) == [r]


def test_jsx_script_block_in_markup():
    text = '<div>Page</div><script lang="tsx">const el = <b>Bold words</b></script>'
    results = detect_markup(VUE_FRAMEWORK, text)
    bold = [r for r in results if r.text == 'Bold words']
    assert len(bold) == 1
    assert text[bold[0].start:bold[0].end] == 'Bold words'


def test_registry_merges_all_frameworks_for_language():
    first = static_framework('first', [DetectionResult('Alpha', 0, 5, SOURCE_JS_STRING)])
    second = static_framework('second', [
        DetectionResult('Alpha', 0, 5, SOURCE_JS_STRING),
        DetectionResult('Beta', 6, 10, SOURCE_JS_STRING),
    ])
    registry = FrameworkRegistry([first, second])
    report = registry.detect_hard_strings(TextDocument('Alpha Beta', 'javascript'))
    assert report.supported
    assert report.frameworks == ('first', 'second')
    assert [r.text for r in report] == ['Alpha', 'Beta']


def test_builtin_frameworks_deduplicate():
    report = FrameworkRegistry().detect_hard_strings(TextDocument("const s = 'Click me'", 'javascript'))
    assert report.frameworks == ('vue', 'react-i18next', 'i18next')
    assert len(report) == 1


def test_unsupported_language(caplog):
    with caplog.at_level(logging.WARNING):
        report = FrameworkRegistry().detect_hard_strings(TextDocument('print("hi")', 'python'))
    assert not report.supported
    assert len(report) == 0
    assert 'not supported' in caplog.text


def test_frameworks_by_language():
    registry = FrameworkRegistry()
    assert [f.id for f in registry.get_frameworks_by_lang('vue')] == ['vue']
    assert [f.id for f in registry.get_frameworks_by_lang('html')] == ['i18next']
    assert registry.get_frameworks_by_lang('python') == []


def test_enabled_filter():
    registry = FrameworkRegistry(enabled=['react-i18next'])
    assert [f.id for f in registry.frameworks] == ['react-i18next']
    assert registry.get('vue') is None


def test_usage_regexes_deduplicated():
    patterns = [r.pattern for r in FrameworkRegistry().get_usage_regexes('javascript')]
    assert len(patterns) == len(set(patterns))


def test_framework_validation():
    base = dict(
        id='ok',
        display='OK',
        language_ids=('javascript',),
        usage_match_regex=(r"\bx\('({key})'\)",),
        refactor_templates=lambda keypath, *rest: [keypath],
    )
    Framework(**base)

    with pytest.raises(FrameworkConfigError):
        Framework(**{**base, 'id': ''})
    with pytest.raises(FrameworkConfigError):
        Framework(**{**base, 'language_ids': ()})
    with pytest.raises(FrameworkConfigError):
        Framework(**{**base, 'usage_match_regex': (r"\bx\('(\w+)'\)",)})
    with pytest.raises(FrameworkConfigError):
        Framework(**{**base, 'usage_match_regex': (r"\bx\(('({key})'",)})
    with pytest.raises(FrameworkConfigError):
        Framework(**{**base, 'refactor_templates': None})
    with pytest.raises(FrameworkConfigError):
        Framework(**{**base, 'detect_hard_strings': 'not callable'})


def test_custom_framework_from_config():
    framework = framework_from_config({
        'id': 'my-i18n',
        'languageIds': ['javascript'],
        'usageMatchRegex': ["\\btranslate\\(\\s*['\"]({key})['\"]"],
        'refactorTemplates': ["translate('$1')", '$1'],
    })
    assert framework.supports('javascript')
    assert framework.render('a.b') == ["translate('a.b')", 'a.b']


def test_custom_framework_registered_from_config():
    config = ConfigManager(load=False)
    config.extraction.custom_frameworks = [{
        'id': 'my-i18n',
        'language_ids': ['javascript'],
        'usage_match_regex': ["\\btranslate\\(\\s*['\"]({key})['\"]"],
    }]
    detector = KeyDetector(config=config)
    doc = TextDocument("translate('x.y')", 'javascript')
    assert [k.key for k in detector.get_keys(doc)] == ['x.y']


def test_invalid_custom_framework():
    with pytest.raises(FrameworkConfigError):
        framework_from_config({'id': 'bad', 'languageIds': ['javascript'], 'usageMatchRegex': ['nokey']})
    with pytest.raises(FrameworkConfigError):
        framework_from_config({'id': 'bad', 'languageIds': 'javascript', 'usageMatchRegex': [1]})
    with pytest.raises(FrameworkConfigError):
        framework_from_config(['not', 'a', 'dict'])


def test_render_templates_per_source():
    detection = DetectionResult('Hi', 0, 2, SOURCE_JS_STRING)
    assert VUE_FRAMEWORK.render('a.b', detection=detection)[0] == "this.$t('a.b')"
    assert VUE_FRAMEWORK.render('a.b', ['n'])[0] == "{{ $t('a.b', [n]) }}"
    assert REACT_I18NEXT_FRAMEWORK.render('a.b', ['count'], detection=detection)[0] == "t('a.b', {count})"
    assert I18NEXT_FRAMEWORK.render('a.b', detection=detection)[0] == "i18next.t('a.b')"


def test_attribute_binding():
    assert VUE_FRAMEWORK.bind_attribute('title', "$t('a')") == ":title=\"$t('a')\""
    assert REACT_I18NEXT_FRAMEWORK.bind_attribute('title', "t('a')") == "title={t('a')}"
    assert I18NEXT_FRAMEWORK.bind_attribute('title', "i18next.t('a')") == "title=\"i18next.t('a')\""


def test_round_trip_vue_script_string():
    text = "const s = 'Click me'"
    detection = VUE_FRAMEWORK.detect(TextDocument(text, 'javascript'))[0]
    replacement = VUE_FRAMEWORK.render('home.click', detection=detection)[0]
    new_text = apply_refactor(text, detection, replacement, VUE_FRAMEWORK)
    assert new_text == "const s = this.$t('home.click')"
    assert keys_in(new_text, 'javascript') == ['home.click']


def test_round_trip_vue_inline_text():
    text = '<template><p>Hello World</p></template>'
    detection = VUE_FRAMEWORK.detect(TextDocument(text, 'vue'))[0]
    replacement = VUE_FRAMEWORK.render('home.hello', detection=detection)[0]
    new_text = apply_refactor(text, detection, replacement, VUE_FRAMEWORK)
    assert new_text == "<template><p>{{ $t('home.hello') }}</p></template>"
    assert keys_in(new_text, 'vue') == ['home.hello']


def test_round_trip_vue_attribute():
    text = '<template><input placeholder="Your name"></template>'
    detection = VUE_FRAMEWORK.detect(TextDocument(text, 'vue'))[0]
    replacement = VUE_FRAMEWORK.render('form.name', detection=detection)[0]
    new_text = apply_refactor(text, detection, replacement, VUE_FRAMEWORK)
    assert new_text == "<template><input :placeholder=\"$t('form.name')\"></template>"
    assert keys_in(new_text, 'vue') == ['form.name']


def test_round_trip_react_jsx_text():
    text = '<p>Welcome home</p>'
    detection = REACT_I18NEXT_FRAMEWORK.detect(TextDocument(text, 'javascriptreact'))[0]
    replacement = REACT_I18NEXT_FRAMEWORK.render('home.welcome', detection=detection)[0]
    new_text = apply_refactor(text, detection, replacement, REACT_I18NEXT_FRAMEWORK)
    assert new_text == "<p>{t('home.welcome')}</p>"
    assert keys_in(new_text, 'javascriptreact') == ['home.welcome']


def test_round_trip_react_attribute():
    text = '<input placeholder="Type here" />'
    detection = REACT_I18NEXT_FRAMEWORK.detect(TextDocument(text, 'javascriptreact'))[0]
    replacement = REACT_I18NEXT_FRAMEWORK.render('form.hint', detection=detection)[0]
    new_text = apply_refactor(text, detection, replacement, REACT_I18NEXT_FRAMEWORK)
    assert new_text == "<input placeholder={t('form.hint')} />"
    assert keys_in(new_text, 'javascriptreact') == ['form.hint']


def test_round_trip_i18next_html():
    text = '<p>Hello World</p>'
    detection = I18NEXT_FRAMEWORK.detect(TextDocument(text, 'html'))[0]
    replacement = I18NEXT_FRAMEWORK.render('home.hello', detection=detection)[0]
    new_text = apply_refactor(text, detection, replacement, I18NEXT_FRAMEWORK)
    assert new_text == '<p><span data-i18n="home.hello"></span></p>'
    assert keys_in(new_text, 'html') == ['home.hello']


def test_apply_refactor_out_of_range():
    detection = DetectionResult('Gone', 40, 44, 'html-inline')
    with pytest.raises(KeyScoutError):
        apply_refactor('short', detection, "t('x')")


def test_refactor_document_refreshes_watched_keys():
    doc = TextDocument("const a = t('old.key')\nconst s = 'Click me'", 'javascript', file_path='/src/a.js')
    detector = KeyDetector()
    detector.watch(doc)
    assert [k.key for k in detector.get_keys(doc)] == ['old.key']

    detection = [r for r in VUE_FRAMEWORK.detect(doc) if r.text == 'Click me'][0]
    refactor_document(doc, detection, "t('new.key')", VUE_FRAMEWORK)
    assert [k.key for k in detector.get_keys(doc)] == ['old.key', 'new.key']


def write_package_json(directory, **sections):
    path = directory / 'package.json'
    path.write_text(json.dumps(sections), encoding='utf-8')
    return path


def test_read_dependencies_from_all_sections(tmp_path):
    path = write_package_json(
        tmp_path,
        dependencies={'vue': '^3.0.0'},
        devDependencies={'vue-i18n': '^9.0.0'},
        peerDependencies={'i18next': '*'},
    )
    assert read_dependencies(path) == {'vue', 'vue-i18n', 'i18next'}


def test_read_dependencies_invalid_file(tmp_path, caplog):
    path = tmp_path / 'package.json'
    path.write_text('{ not json', encoding='utf-8')
    with caplog.at_level(logging.WARNING):
        assert read_dependencies(path) == set()
    assert 'Could not read' in caplog.text


def test_find_package_json_in_parents(tmp_path):
    path = write_package_json(tmp_path, dependencies={})
    nested = tmp_path / 'src' / 'components'
    nested.mkdir(parents=True)
    source = nested / 'App.vue'
    source.write_text('<template></template>', encoding='utf-8')
    assert find_package_json(nested) == path
    assert find_package_json(source) == path


def test_detect_frameworks_from_package_json(tmp_path):
    path = write_package_json(tmp_path, dependencies={'vue-i18n': '^9.0.0', 'i18next': '^23.0.0'})
    assert [f.id for f in FrameworkRegistry.detect_frameworks(path)] == ['vue', 'i18next']


def test_registry_narrowed_by_package_json(tmp_path):
    write_package_json(tmp_path, dependencies={'next-i18next': '^15.0.0'})
    registry = FrameworkRegistry.from_config(ConfigManager(load=False), project_root=tmp_path)
    assert [f.id for f in registry.frameworks] == ['react-i18next']


def test_registry_keeps_builtins_without_known_packages(tmp_path):
    write_package_json(tmp_path, dependencies={'lodash': '^4.0.0'})
    registry = FrameworkRegistry.from_config(ConfigManager(load=False), project_root=tmp_path)
    assert [f.id for f in registry.frameworks] == ['vue', 'react-i18next', 'i18next']


def test_enabled_frameworks_override_package_json(tmp_path):
    write_package_json(tmp_path, dependencies={'vue-i18n': '^9.0.0'})
    config = ConfigManager(load=False)
    config.extraction.enabled_frameworks = ['i18next']
    config.extraction.custom_frameworks = [{
        'id': 'my-i18n',
        'languageIds': ['javascript'],
        'usageMatchRegex': ["\\btranslate\\(\\s*['\"]({key})['\"]"],
        'packageJSON': ['my-i18n'],
    }]
    registry = FrameworkRegistry.from_config(config, project_root=tmp_path)
    assert [f.id for f in registry.frameworks] == ['i18next', 'my-i18n']
    assert registry.get('my-i18n').is_used_by({'my-i18n'})


def test_trans_component_key():
    source = '<Trans i18nKey="welcome.intro">Hello <b>there</b></Trans>'
    keys = KeyDetector().get_keys(TextDocument(source, 'javascriptreact'))
    assert [k.key for k in keys] == ['welcome.intro']
    assert source[keys[0].start:keys[0].end] == 'welcome.intro'
