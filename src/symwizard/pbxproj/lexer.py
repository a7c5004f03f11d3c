#!/usr/bin/env python3
"""
SYMWIZARD LEXER - Project File Tokenizer
----------------------------------------
Decomposes the text of an Xcode project file (OpenStep property list)
into Token models. Quote-aware: comment markers and punctuation inside
quoted strings are never treated as structure.

Author: SymWizard Team
Date: 2026-10-19
"""

import bisect
import re
from typing import List, Tuple

from symwizard.core.errors import ParseError
from symwizard.core.models import Token, TokenKind

PUNCTUATION = "{}()=;,"

# Unquoted strings may contain '/', but never start a comment.
BARE_PATTERN = re.compile(r"(?:[A-Za-z0-9_$+:.\-]|/(?![/*]))+")
DATA_PATTERN = re.compile(r"<[0-9A-Fa-f\s]*>")

_SIMPLE_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "a": "\a", "b": "\b",
    "f": "\f", "v": "\v", '"': '"', "'": "'", "\\": "\\",
}
_ESCAPE_OUT = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}

BARE_SAFE = re.compile(r"^[A-Za-z0-9_$/:.]+$")


def decode_string(body: str) -> str:
    """Resolves backslash escapes of a quoted string body."""
    out = []
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 >= len(body):
            out.append(char)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt == "U" and re.match(r"[0-9A-Fa-f]{4}", body[i + 2:i + 6]):
            out.append(chr(int(body[i + 2:i + 6], 16)))
            i += 6
        elif nxt in "01234567":
            digits = re.match(r"[0-7]{1,3}", body[i + 1:]).group(0)
            out.append(chr(int(digits, 8)))
            i += 1 + len(digits)
        else:
            out.append(nxt)
            i += 2
    return "".join(out)


def quote_string(value: str) -> str:
    """Renders a value the way Xcode writes it: bare when safe, quoted otherwise."""
    if value and BARE_SAFE.match(value) and "___" not in value and "//" not in value:
        return value
    return '"' + "".join(_ESCAPE_OUT.get(c, c) for c in value) + '"'


class PbxLexer:
    """
    Turns raw project text into a flat token stream.
    Comments are kept as tokens: the parser uses them as annotations.
    """

    def __init__(self, text: str):
        self.text = text
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    def position(self, offset: int) -> Tuple[int, int]:
        """Maps an offset to a 1-based (line, column) pair."""
        idx = bisect.bisect_right(self._line_starts, offset) - 1
        return idx + 1, offset - self._line_starts[idx] + 1

    def _error(self, message: str, offset: int) -> ParseError:
        line, col = self.position(offset)
        return ParseError(message, line, col)

    def _token(self, kind: TokenKind, start: int, end: int, value=None) -> Token:
        line, col = self.position(start)
        return Token(kind=kind, text=self.text[start:end], start=start, end=end,
                     line_no=line, column=col, value=value)

    def _scan_quoted(self, start: int) -> int:
        quote = self.text[start]
        i = start + 1
        while i < len(self.text):
            char = self.text[i]
            if char == "\\":
                i += 2
                continue
            if char == quote:
                return i + 1
            i += 1
        raise self._error("Unterminated quoted string", start)

    def tokenize(self) -> List[Token]:
        text = self.text
        tokens: List[Token] = []
        i = 0
        length = len(text)

        while i < length:
            char = text[i]

            if char.isspace() or char == "\ufeff":
                i += 1
                continue

            if text.startswith("/*", i):
                end = text.find("*/", i + 2)
                if end == -1:
                    raise self._error("Unterminated block comment", i)
                tokens.append(self._token(TokenKind.COMMENT, i, end + 2, text[i + 2:end].strip()))
                i = end + 2
                continue

            if text.startswith("//", i):
                end = text.find("\n", i)
                end = length if end == -1 else end
                tokens.append(self._token(TokenKind.COMMENT, i, end, text[i + 2:end].strip()))
                i = end
                continue

            if char in PUNCTUATION:
                tokens.append(self._token(TokenKind.PUNCT, i, i + 1))
                i += 1
                continue

            if char in "\"'":
                end = self._scan_quoted(i)
                tokens.append(self._token(TokenKind.STRING, i, end, decode_string(text[i + 1:end - 1])))
                i = end
                continue

            if char == "<":
                match = DATA_PATTERN.match(text, i)
                if not match:
                    raise self._error("Malformed data literal", i)
                tokens.append(self._token(TokenKind.DATA, i, match.end(), match.group(0)))
                i = match.end()
                continue

            match = BARE_PATTERN.match(text, i)
            if not match:
                raise self._error(f"Unexpected character {char!r}", i)
            tokens.append(self._token(TokenKind.STRING, i, match.end(), match.group(0)))
            i = match.end()

        return tokens
