"""
Condition Lexer.

Scans a condition expression one token at a time, on demand.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

# Maximum identifier length, counting the terminator slot of the original
# fixed buffer. Identifiers keep at most ID_LENGTH - 1 characters.
ID_LENGTH = 32

WHITESPACE = frozenset(" \t\n\v\f\r")
LETTERS = frozenset(string.ascii_letters)
ALNUM = frozenset(string.ascii_letters + string.digits)

UNKNOWN_TOKEN_LABEL = "<<UNKNOWN TOKEN>>"

Report = Callable[[str], None]


class TokenType(str, Enum):
    """Kinds of tokens produced by the lexer."""
    IDENTIFIER = "identifier"
    LPAREN = "lparen"
    RPAREN = "rparen"
    NOT = "not"
    AND = "and"
    OR = "or"
    END = "end"


TOKEN_LABELS = {
    TokenType.LPAREN: "LPAREN",
    TokenType.RPAREN: "RPAREN",
    TokenType.NOT: "NOT",
    TokenType.AND: "AND",
    TokenType.OR: "OR",
    TokenType.END: "END",
}


@dataclass(frozen=True)
class Token:
    """A single token. Only identifiers carry a name."""
    type: TokenType
    name: str = ""

    def fragments(self) -> Tuple[str, ...]:
        """Diagnostic rendering, split the way it is sent to a sink."""
        if self.type is TokenType.IDENTIFIER:
            return ("ID [", self.name, "]")
        return (TOKEN_LABELS.get(self.type, UNKNOWN_TOKEN_LABEL),)

    @property
    def label(self) -> str:
        """Diagnostic rendering as a single string."""
        return "".join(self.fragments())


END_TOKEN = Token(TokenType.END)

_SINGLE_CHAR_TOKENS = {
    "!": Token(TokenType.NOT),
    "(": Token(TokenType.LPAREN),
    ")": Token(TokenType.RPAREN),
}


class Lexer:
    """
    Pull lexer over a condition expression.

    The lexer never copies or modifies the input. It keeps a forward-only
    cursor and the current lookahead token; each call to advance() replaces
    the lookahead with the token that starts at the cursor.

    Attributes:
        text: The expression being scanned.
        cursor: Offset of the first unscanned character.
        token: The current lookahead token.
        error: Set once an unknown character has been seen.
    """

    def __init__(
        self,
        text: str,
        report: Optional[Report] = None,
        id_length: int = ID_LENGTH,
    ):
        """
        Initialize the lexer.

        Args:
            text: The expression to scan.
            report: Optional callable receiving diagnostic fragments.
            id_length: Identifier buffer size; names keep id_length - 1 chars.
        """
        if id_length < 2:
            raise ValueError(f"id_length must be at least 2, got {id_length}")

        self.text = text
        self.cursor = 0
        self.token = END_TOKEN
        self.error = False
        self._report = report
        self._max_name = id_length - 1

    def advance(self) -> Token:
        """
        Scan the next token into the lookahead.

        Returns:
            The new lookahead token. On an unknown character the previous
            lookahead is kept and returned unchanged.
        """
        text = self.text
        end = len(text)

        while self.cursor < end and text[self.cursor] in WHITESPACE:
            self.cursor += 1

        # NUL terminates the input like the end of a C string
        if self.cursor >= end or text[self.cursor] == "\0":
            self.token = END_TOKEN
            return self.token

        if text.startswith("&&", self.cursor):
            self.token = Token(TokenType.AND)
            self.cursor += 2
            return self.token

        if text.startswith("||", self.cursor):
            self.token = Token(TokenType.OR)
            self.cursor += 2
            return self.token

        char = text[self.cursor]

        if char in _SINGLE_CHAR_TOKENS:
            self.token = _SINGLE_CHAR_TOKENS[char]
            self.cursor += 1
            return self.token

        if char in LETTERS:
            self.token = Token(TokenType.IDENTIFIER, self._scan_name())
            return self.token

        self._emit("Unknown character: ", char, "\n")
        self.cursor += 1
        self.error = True
        return self.token

    def _scan_name(self) -> str:
        """Consume an identifier, stopping at the length cap."""
        text = self.text
        start = self.cursor
        limit = min(len(text), start + self._max_name)

        while self.cursor < limit and text[self.cursor] in ALNUM:
            self.cursor += 1

        return text[start:self.cursor]

    def _emit(self, *fragments: str) -> None:
        """Send diagnostic fragments to the report callable, if any."""
        if self._report is None:
            return
        for fragment in fragments:
            self._report(fragment)
