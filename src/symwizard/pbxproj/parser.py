#!/usr/bin/env python3
"""
SYMWIZARD PARSER - Span-Preserving Structurer
---------------------------------------------
Builds a tree of dictionaries, arrays and strings from the token stream.
Every node remembers the source offsets it was built from, so callers can
edit the original text surgically instead of re-rendering the whole file.

Author: SymWizard Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from symwizard.core.errors import ParseError
from symwizard.core.models import Token, TokenKind
from symwizard.pbxproj.lexer import PbxLexer


@dataclass
class StringNode:
    value: str
    start: int
    end: int                           # End of the string, or of its annotation if present
    annotation: Optional[str] = None   # Trailing /* ... */ comment


@dataclass
class Entry:
    key: StringNode
    value: "Node"
    start: int
    end: int                           # One past the terminating ';'


@dataclass
class DictNode:
    start: int
    end: int
    entries: List[Entry] = field(default_factory=list)

    def entry(self, key: str) -> Optional[Entry]:
        for entry in self.entries:
            if entry.key.value == key:
                return entry
        return None

    def get(self, key: str) -> Optional["Node"]:
        entry = self.entry(key)
        return entry.value if entry else None

    def get_str(self, key: str) -> Optional[str]:
        value = self.get(key)
        return value.value if isinstance(value, StringNode) else None


@dataclass
class ArrayItem:
    value: "Node"
    start: int
    end: int                           # One past the separating ',' when present


@dataclass
class ArrayNode:
    start: int
    end: int
    items: List[ArrayItem] = field(default_factory=list)


Node = Union[StringNode, DictNode, ArrayNode]


@dataclass
class ParseTree:
    root: DictNode
    comments: List[Token]              # Every comment token, in source order
    lexer: PbxLexer


class PbxParser:
    """Recursive-descent parser over PbxLexer tokens."""

    def __init__(self, text: str):
        self.lexer = PbxLexer(text)
        self.tokens = self.lexer.tokenize()
        self.pos = 0

    def _peek(self) -> Optional[Token]:
        while self.pos < len(self.tokens) and self.tokens[self.pos].kind is TokenKind.COMMENT:
            self.pos += 1
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            end = len(self.lexer.text)
            line, col = self.lexer.position(end)
            raise ParseError("Unexpected end of file", line, col)
        self.pos += 1
        return token

    def _expect(self, punct: str) -> Token:
        token = self._advance()
        if token.kind is not TokenKind.PUNCT or token.text != punct:
            raise ParseError(f"Expected '{punct}' but found {token.text!r}", token.line_no, token.column)
        return token

    def _annotation(self) -> Optional[Token]:
        if self.pos < len(self.tokens) and self.tokens[self.pos].kind is TokenKind.COMMENT:
            token = self.tokens[self.pos]
            self.pos += 1
            return token
        return None

    def _string(self, token: Token) -> StringNode:
        note = self._annotation()
        return StringNode(
            value=token.value if token.value is not None else token.text,
            start=token.start,
            end=note.end if note else token.end,
            annotation=note.value if note else None,
        )

    def _value(self) -> Node:
        token = self._advance()
        if token.kind in (TokenKind.STRING, TokenKind.DATA):
            return self._string(token)
        if token.kind is TokenKind.PUNCT and token.text == "{":
            return self._dict(token)
        if token.kind is TokenKind.PUNCT and token.text == "(":
            return self._array(token)
        raise ParseError(f"Unexpected {token.text!r}", token.line_no, token.column)

    def _dict(self, opening: Token) -> DictNode:
        node = DictNode(start=opening.start, end=opening.end)
        while True:
            token = self._peek()
            if token is not None and token.kind is TokenKind.PUNCT and token.text == "}":
                self.pos += 1
                node.end = token.end
                return node
            key_token = self._advance()
            if key_token.kind is not TokenKind.STRING:
                raise ParseError(f"Expected a key but found {key_token.text!r}",
                                 key_token.line_no, key_token.column)
            key = self._string(key_token)
            self._expect("=")
            value = self._value()
            closing = self._expect(";")
            node.entries.append(Entry(key=key, value=value, start=key.start, end=closing.end))

    def _array(self, opening: Token) -> ArrayNode:
        node = ArrayNode(start=opening.start, end=opening.end)
        while True:
            token = self._peek()
            if token is not None and token.kind is TokenKind.PUNCT and token.text == ")":
                self.pos += 1
                node.end = token.end
                return node
            value = self._value()
            item_start = value.start
            item_end = value.end
            token = self._peek()
            if token is not None and token.kind is TokenKind.PUNCT and token.text == ",":
                self.pos += 1
                item_end = token.end
            elif token is None or token.text != ")":
                found = token.text if token else "end of file"
                line, col = (token.line_no, token.column) if token else (None, None)
                raise ParseError(f"Expected ',' or ')' but found {found!r}", line, col)
            node.items.append(ArrayItem(value=value, start=item_start, end=item_end))

    def parse(self) -> ParseTree:
        token = self._advance()
        if token.kind is not TokenKind.PUNCT or token.text != "{":
            raise ParseError("Project file must start with a dictionary", token.line_no, token.column)
        root = self._dict(token)
        trailing = self._peek()
        if trailing is not None:
            raise ParseError(f"Unexpected trailing content {trailing.text!r}",
                             trailing.line_no, trailing.column)
        comments = [t for t in self.tokens if t.kind is TokenKind.COMMENT]
        return ParseTree(root=root, comments=comments, lexer=self.lexer)


def parse_tree(text: str) -> ParseTree:
    try:
        return PbxParser(text).parse()
    except RecursionError:
        raise ParseError("Project file nests too deeply")
