from keyscout.core.document import TextDocument
from keyscout.core.models import Position, Range, TextRange
from keyscout.utils.encoding import read_text_safely
from keyscout.utils.languages import guess_language_id


def test_offset_position_conversion():
    doc = TextDocument('ab\ncd\n')
    assert doc.line_count == 3
    assert doc.position_at(3) == Position(1, 0)
    assert doc.offset_at(Position(1, 1)) == 4
    assert doc.range_at(3, 5) == Range(Position(1, 0), Position(1, 2))


def test_positions_are_clamped():
    doc = TextDocument('ab\ncd\n')
    assert doc.offset_at(Position(0, 10)) == 2
    assert doc.offset_at(Position(9, 9)) == 6
    assert doc.offset_at(Position(-1, -1)) == 0
    assert doc.position_at(100) == Position(2, 0)


def test_get_text_by_range():
    doc = TextDocument('hello\nworld')
    assert doc.get_text(TextRange(6, 11)) == 'world'
    assert doc.get_text(Range(Position(0, 1), Position(1, 2))) == 'ello\nwo'
    assert doc.get_text() == 'hello\nworld'


def test_change_listeners():
    doc = TextDocument('one')
    seen = []
    dispose = doc.on_did_change(lambda d: seen.append(d.get_text()))

    doc.set_text('two')
    doc.apply_edit(0, 1, 'T')
    dispose()
    doc.set_text('three')

    assert seen == ['two', 'Two']
    assert doc.version == 4


def test_language_guessed_from_path():
    assert TextDocument('', file_path='src/App.vue').language_id == 'vue'
    assert TextDocument('', 'typescript', file_path='src/App.vue').language_id == 'typescript'
    assert guess_language_id('Button.TSX') == 'typescriptreact'
    assert guess_language_id('notes.txt') is None


def test_from_file(tmp_path):
    path = tmp_path / 'index.html'
    path.write_text('<p>Hi there</p>', encoding='utf-8')
    doc = TextDocument.from_file(path)
    assert doc.language_id == 'html'
    assert doc.file_path == str(path)
    assert doc.get_text() == '<p>Hi there</p>'


def test_from_missing_file(tmp_path):
    assert TextDocument.from_file(tmp_path / 'missing.js') is None


def test_read_text_strips_bom(tmp_path):
    path = tmp_path / 'bom.js'
    path.write_bytes(b'\xef\xbb\xbfconst a = 1')
    assert read_text_safely(path) == 'const a = 1'


def test_read_text_non_utf8(tmp_path):
    path = tmp_path / 'legacy.html'
    path.write_bytes('<p>Café crème brûlée, déjà vu</p>'.encode('cp1252'))
    text = read_text_safely(path)
    assert text is not None
    assert text.startswith('<p>Caf')
