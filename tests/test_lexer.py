import pytest

from symwizard.core.errors import ParseError
from symwizard.core.models import TokenKind
from symwizard.pbxproj.lexer import PbxLexer, decode_string, quote_string


def test_tokens_keep_offsets_and_positions():
    text = "{\n\tname = \"App\";\n}"
    tokens = PbxLexer(text).tokenize()

    assert [t.text for t in tokens] == ["{", "name", "=", '"App"', ";", "}"]
    name = tokens[1]
    assert (name.line_no, name.column) == (2, 2)
    assert text[name.start:name.end] == "name"
    assert tokens[3].value == "App"


def test_comment_markers_inside_quotes_are_not_comments():
    tokens = PbxLexer('{ script = "ls /usr/* // done"; }').tokenize()
    assert not any(t.kind is TokenKind.COMMENT for t in tokens)
    assert tokens[3].value == "ls /usr/* // done"


def test_block_and_line_comments_are_tokens():
    tokens = PbxLexer("// !$*UTF8*$!\n{ A /* label */ = B; }").tokenize()
    comments = [t.value for t in tokens if t.kind is TokenKind.COMMENT]
    assert comments == ["!$*UTF8*$!", "label"]


def test_bare_string_stops_before_comment():
    tokens = PbxLexer("path/to/file/* note */").tokenize()
    assert tokens[0].text == "path/to/file"
    assert tokens[1].kind is TokenKind.COMMENT


def test_data_literal():
    tokens = PbxLexer("<0fab 12>").tokenize()
    assert tokens[0].kind is TokenKind.DATA


def test_decode_string_escapes():
    assert decode_string(r"a\nb\t\"c\"\\") == 'a\nb\t"c"\\'
    assert decode_string(r"\U00e9") == "é"
    assert decode_string(r"\101") == "A"


def test_quote_string():
    assert quote_string("/bin/sh") == "/bin/sh"
    assert quote_string("Upload Debug Symbols") == '"Upload Debug Symbols"'
    assert quote_string("") == '""'
    assert quote_string('say "hi"\n') == '"say \\"hi\\"\\n"'
    assert quote_string("a___b") == '"a___b"'


@pytest.mark.parametrize("text, message", [
    ('{ a = "open; }', "Unterminated quoted string"),
    ("{ a = b; /* open", "Unterminated block comment"),
    ("{ a = #; }", "Unexpected character"),
])
def test_lexer_errors(text, message):
    with pytest.raises(ParseError) as info:
        PbxLexer(text).tokenize()
    assert message in str(info.value)
    assert info.value.line == 1
