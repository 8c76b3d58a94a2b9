"""Query eligibility check for author suggestions.

Parses the catalog's field-qualified query syntax into a field -> values
mapping and accepts only queries that are a single unqualified keyword
term.  Pure; no I/O.

Syntax recognized::

    query   := expr
    expr    := clause ( [AND | OR] clause )*      # adjacency = implicit AND
    clause  := NOT clause | "(" expr ")" | FIELD ":" "{" expr "}" | terms
    terms   := ( WORD | "PHRASE" )+

A bare term belongs to the implicit ``keyword`` field.  Adjacent words
join into one value (``mark twain`` is one value); boolean operators split
values.  ``name:`` only opens a field when a ``{`` follows it, so a title
such as ``Twain: a life`` stays a single keyword value.  Quoted phrases
keep their quotes so the backend still sees a phrase query.
"""

from __future__ import annotations

from dataclasses import dataclass

from suggestor.models.query import ParsedQuery
from suggestor.utils.errors import InvalidQueryError

KEYWORD_FIELD = "keyword"

MALFORMED = "malformed syntax"
UNHANDLED = "unhandled query"
BLANK_OR_WILDCARD = "blank or wildcard keyword"

_WILDCARDS = frozenset({"*", "*:*"})
_OPERATORS = frozenset({"AND", "OR", "NOT"})
_DELIMITERS = frozenset("(){}\"")


@dataclass(frozen=True)
class _Token:
    kind: str  # WORD, PHRASE, FIELD, AND, OR, NOT, LPAREN, RPAREN, LBRACE, RBRACE
    text: str = ""


class _MalformedQuery(Exception):
    pass


def _tokenize(raw: str) -> list[_Token]:
    tokens: list[_Token] = []
    i, n = 0, len(raw)
    singles = {"(": "LPAREN", ")": "RPAREN", "{": "LBRACE", "}": "RBRACE"}

    while i < n:
        ch = raw[i]
        if ch.isspace():
            i += 1
        elif ch in singles:
            tokens.append(_Token(singles[ch], ch))
            i += 1
        elif ch == '"':
            j = i + 1
            while j < n and raw[j] != '"':
                j += 2 if raw[j] == "\\" else 1
            if j >= n:
                raise _MalformedQuery("unterminated phrase")
            tokens.append(_Token("PHRASE", raw[i : j + 1]))
            i = j + 1
        else:
            j = i
            while j < n and not raw[j].isspace() and raw[j] not in _DELIMITERS:
                j += 1
            word = raw[i:j]
            i = j
            if word in _OPERATORS:
                tokens.append(_Token(word, word))
                continue
            if len(word) > 1 and word.endswith(":"):
                k = i
                while k < n and raw[k].isspace():
                    k += 1
                if k < n and raw[k] == "{":
                    tokens.append(_Token("FIELD", word[:-1]))
                    continue
            tokens.append(_Token("WORD", word))
    return tokens


class _Parser:
    """Recursive-descent parser recording every value under its field."""

    def __init__(self, tokens: list[_Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self.field_values: dict[str, list[str]] = {}
        self.negated = False

    def parse(self) -> dict[str, list[str]]:
        clauses = self._expr(KEYWORD_FIELD, in_group=False, closer=None)
        if self._peek() is not None:
            raise _MalformedQuery(f"unexpected {self._peek().text!r}")
        if clauses == 0:
            self._record(KEYWORD_FIELD, "")
        return self.field_values

    def _peek(self) -> _Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> _Token:
        tok = self._peek()
        if tok is None:
            raise _MalformedQuery("unexpected end of query")
        self._pos += 1
        return tok

    def _record(self, field: str, value: str) -> None:
        self.field_values.setdefault(field, []).append(value)

    def _expr(self, field: str, in_group: bool, closer: str | None) -> int:
        clauses = 0
        expect_clause = True
        while True:
            tok = self._peek()
            if tok is None or tok.kind == closer:
                break
            if tok.kind in ("AND", "OR"):
                if expect_clause:
                    raise _MalformedQuery(f"misplaced {tok.kind}")
                self._pos += 1
                expect_clause = True
                continue
            self._clause(field, in_group)
            clauses += 1
            expect_clause = False
        if clauses and expect_clause:
            raise _MalformedQuery("dangling operator")
        return clauses

    def _clause(self, field: str, in_group: bool) -> None:
        tok = self._next()

        if tok.kind == "NOT":
            nxt = self._peek()
            if nxt is None or nxt.kind in ("AND", "OR", "RPAREN", "RBRACE"):
                raise _MalformedQuery("NOT without operand")
            self.negated = True
            self._clause(field, in_group)
        elif tok.kind == "LPAREN":
            if self._expr(field, in_group, closer="RPAREN") == 0:
                raise _MalformedQuery("empty group")
            if self._next().kind != "RPAREN":
                raise _MalformedQuery("unbalanced parenthesis")
        elif tok.kind == "FIELD":
            if in_group:
                raise _MalformedQuery("nested field")
            if self._next().kind != "LBRACE":
                raise _MalformedQuery("field without braces")
            if self._expr(tok.text, in_group=True, closer="RBRACE") == 0:
                self._record(tok.text, "")
            if self._next().kind != "RBRACE":
                raise _MalformedQuery("unbalanced brace")
        elif tok.kind in ("WORD", "PHRASE"):
            words = [tok.text]
            while self._peek() is not None and self._peek().kind in ("WORD", "PHRASE"):
                words.append(self._next().text)
            self._record(field, " ".join(words))
        else:
            raise _MalformedQuery(f"unexpected {tok.text!r}")


class QueryParser:
    """Decides whether a raw query is eligible for author suggestions."""

    def parse(self, raw: str) -> ParsedQuery:
        """Parse and validate ``raw``.

        Returns:
            A :class:`ParsedQuery` whose ``term`` is the single keyword value.

        Raises:
            InvalidQueryError: ``"malformed syntax"``, ``"unhandled query"``
                or ``"blank or wildcard keyword"``, checked in that order.
        """
        try:
            parser = _Parser(_tokenize(raw))
            field_values = parser.parse()
        except _MalformedQuery as exc:
            raise InvalidQueryError(message=MALFORMED) from exc

        keyword_values = field_values.get(KEYWORD_FIELD, [])
        if len(field_values) != 1 or len(keyword_values) != 1 or parser.negated:
            raise InvalidQueryError(message=UNHANDLED)

        term = keyword_values[0].strip()
        if term in _WILDCARDS or not term:
            raise InvalidQueryError(message=BLANK_OR_WILDCARD)

        return ParsedQuery(raw=raw, field_values=field_values, term=term)
