"""Parser for type expressions such as ``ANY -> [ANY1] -> Maybe Int``.

Grammar::

    type := app ("->" type)?
    app  := atom atom*
    atom := Name | Module.Name | variable
          | "()" | "[]" | "[" type "]" | "(" type ("," type)* ")"

Variables are written ``ANY``, ``ANY1``, ``ANY2``... (the prefix is
configurable) or as lowercase names, which are numbered by first appearance
and never reuse an index written explicitly in the same expression.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import NoReturn

from rank1typeable.errors import Diagnostic, Severity, TypeExprError
from rank1typeable.printer import DEFAULT_VARIABLE_PREFIX
from rank1typeable.registry import LIST_TYCON, REGISTRY, Registry
from rank1typeable.types import (
    UNIT,
    TyConApp,
    TypeRep,
    TyVarApp,
    Var,
    apply_args,
    mk_fun,
    mk_list,
    mk_tuple,
)


class TokenKind(Enum):
    NAME = auto()
    VARIABLE = auto()
    ARROW = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    column: int  # 1-indexed


_PUNCT = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
}

_ATOM_START = frozenset({
    TokenKind.NAME, TokenKind.VARIABLE, TokenKind.LPAREN, TokenKind.LBRACKET,
})


class TypeExprParser:
    """Parses one type expression against a constructor registry."""

    def __init__(
        self,
        source: str,
        registry: Registry | None = None,
        variable_prefix: str = DEFAULT_VARIABLE_PREFIX,
    ) -> None:
        self.source = source
        self.registry = registry if registry is not None else REGISTRY
        self._var_pattern = re.compile(re.escape(variable_prefix) + r"(0|[1-9][0-9]*)?")
        self.tokens: list[Token] = []
        self.pos = 0
        self._named_vars: dict[str, int] = {}
        self._explicit_indices: set[int] = set()
        self._next_index = 0

    def parse(self) -> TypeRep:
        self.tokens = self._tokenize()
        for tok in self.tokens:
            if tok.kind == TokenKind.VARIABLE and self._explicit_index(tok) is not None:
                self._explicit_indices.add(self._explicit_index(tok))
        t = self._parse_type()
        if not self._at(TokenKind.EOF):
            self._error(f"unexpected '{self._current().value}'", self._current())
        return t

    # ── Lexing ───────────────────────────────────────────────────

    def _tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        src = self.source
        i = 0
        while i < len(src):
            ch = src[i]
            if ch.isspace():
                i += 1
            elif src.startswith("->", i):
                tokens.append(Token(TokenKind.ARROW, "->", i + 1))
                i += 2
            elif ch in _PUNCT:
                tokens.append(Token(_PUNCT[ch], ch, i + 1))
                i += 1
            elif ch.isalpha() or ch == "_":
                start = i
                while i < len(src) and (
                    src[i].isalnum() or src[i] in "_'"
                    or (src[i] == "." and i + 1 < len(src) and src[i + 1].isalpha())
                ):
                    i += 1
                word = src[start:i]
                kind = TokenKind.NAME
                if "." not in word and (
                    word[0].islower() or word[0] == "_" or self._var_pattern.fullmatch(word)
                ):
                    kind = TokenKind.VARIABLE
                tokens.append(Token(kind, word, start + 1))
            else:
                self._error(f"unexpected character '{ch}'", Token(TokenKind.EOF, ch, i + 1))
        tokens.append(Token(TokenKind.EOF, "end of input", len(src) + 1))
        return tokens

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _expect(self, kind: TokenKind, what: str) -> Token:
        if not self._at(kind):
            self._error(f"expected {what}, found '{self._current().value}'", self._current())
        return self._advance()

    def _error(self, message: str, tok: Token, code: str = "E100", *notes: str) -> NoReturn:
        width = 1 if tok.kind == TokenKind.EOF else len(tok.value)
        raise TypeExprError([
            Diagnostic(
                severity=Severity.ERROR,
                code=code,
                message=message,
                source=self.source,
                column=tok.column,
                width=width,
                notes=list(notes),
            )
        ])

    # ── Grammar ──────────────────────────────────────────────────

    def _parse_type(self) -> TypeRep:
        left = self._parse_app()
        if self._at(TokenKind.ARROW):
            self._advance()
            return mk_fun(left, self._parse_type())
        return left

    def _parse_app(self) -> TypeRep:
        head = self._parse_atom()
        args: list[TypeRep] = []
        while self._current().kind in _ATOM_START:
            args.append(self._parse_atom())
        return apply_args(head, args)

    def _parse_atom(self) -> TypeRep:
        tok = self._current()
        if tok.kind == TokenKind.NAME:
            self._advance()
            return self._resolve(tok)
        if tok.kind == TokenKind.VARIABLE:
            self._advance()
            return TyVarApp(Var(self._variable_index(tok)))
        if tok.kind == TokenKind.LPAREN:
            self._advance()
            if self._at(TokenKind.RPAREN):
                self._advance()
                return UNIT
            items = [self._parse_type()]
            while self._at(TokenKind.COMMA):
                self._advance()
                items.append(self._parse_type())
            self._expect(TokenKind.RPAREN, "')'")
            return items[0] if len(items) == 1 else mk_tuple(*items)
        if tok.kind == TokenKind.LBRACKET:
            self._advance()
            if self._at(TokenKind.RBRACKET):
                self._advance()
                return TyConApp(LIST_TYCON)
            element = self._parse_type()
            self._expect(TokenKind.RBRACKET, "']'")
            return mk_list(element)
        self._error(f"expected a type, found '{tok.value}'", tok)

    def _resolve(self, tok: Token) -> TypeRep:
        module, _, name = tok.value.rpartition(".")
        try:
            tycon = self.registry.lookup(name, module or None)
        except LookupError as e:
            self._error(str(e), tok, "E101", f"qualify it, e.g. 'Module.{name}'")
        if tycon is None:
            self._error(
                f"unknown type constructor '{tok.value}'",
                tok,
                "E101",
                "declare it under [[constructor]] in rank1.toml",
            )
        return TyConApp(tycon)

    def _explicit_index(self, tok: Token) -> int | None:
        match = self._var_pattern.fullmatch(tok.value)
        if match is None:
            return None
        return int(match.group(1) or 0)

    def _variable_index(self, tok: Token) -> int:
        explicit = self._explicit_index(tok)
        if explicit is not None:
            return explicit
        if tok.value not in self._named_vars:
            while self._next_index in self._explicit_indices:
                self._next_index += 1
            self._named_vars[tok.value] = self._next_index
            self._next_index += 1
        return self._named_vars[tok.value]


def parse_type(
    source: str,
    registry: Registry | None = None,
    variable_prefix: str = DEFAULT_VARIABLE_PREFIX,
) -> TypeRep:
    """Parse a type expression. Raises ``TypeExprError`` on bad input."""
    return TypeExprParser(source, registry, variable_prefix).parse()
