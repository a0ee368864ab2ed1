"""
Condition Parser.

Recursive-descent parser that evaluates while it parses. Each grammar rule
returns the boolean value of the text it consumed; no tree is built.

Grammar, lowest precedence first:

    expr     := or_expr
    or_expr  := and_expr ( '||' and_expr )*
    and_expr := not_expr ( '&&' not_expr )*
    not_expr := '!'* primary
    primary  := IDENTIFIER | '(' expr ')'

Both sides of '&&' and '||' are always evaluated, so the resolver sees every
identifier in the expression exactly once per occurrence.
"""

from __future__ import annotations

from typing import Callable, Optional

from .lexer import ID_LENGTH, Lexer, Report, Token, TokenType

Resolver = Callable[[str], bool]


class ConditionParser:
    """
    Parse/evaluate context for a single expression.

    A parser is bound to one expression and is discarded after parse()
    returns. It holds the lexer (cursor and lookahead), the error flag and
    the two caller collaborators.
    """

    def __init__(
        self,
        expression: str,
        resolver: Resolver,
        report: Optional[Report] = None,
        id_length: int = ID_LENGTH,
    ):
        self.resolver = resolver
        self.report = report
        self.lexer = Lexer(expression, report=report, id_length=id_length)
        self._parse_error = False

    @property
    def token(self) -> Token:
        """The current lookahead token."""
        return self.lexer.token

    @property
    def error(self) -> bool:
        """True once any lexical or syntax error has been reported."""
        return self._parse_error or self.lexer.error

    def parse(self) -> bool:
        """Prime the lookahead and evaluate the whole expression."""
        self.lexer.advance()
        try:
            return self._parse_expression()
        except RecursionError:
            self.fail("Error: expression nested too deeply\n")
            return False

    def at_end(self) -> bool:
        """Whether all input has been consumed."""
        return self.token.type is TokenType.END

    def _parse_expression(self) -> bool:
        """Parse a full expression."""
        return self._parse_or()

    def _parse_or(self) -> bool:
        """Parse OR expressions."""
        value = self._parse_and()
        while self.token.type is TokenType.OR:
            self.lexer.advance()
            right = self._parse_and()
            value = value or right
        return value

    def _parse_and(self) -> bool:
        """Parse AND expressions."""
        value = self._parse_not()
        while self.token.type is TokenType.AND:
            self.lexer.advance()
            right = self._parse_not()
            value = value and right
        return value

    def _parse_not(self) -> bool:
        """Parse a run of NOT operators and the primary they apply to."""
        not_count = 0
        while self.token.type is TokenType.NOT:
            not_count += 1
            self.lexer.advance()

        value = self._parse_primary()

        # negate if odd
        if not_count % 2:
            value = not value
        return value

    def _parse_primary(self) -> bool:
        """Parse an identifier or a parenthesized expression."""
        token = self.token

        if token.type is TokenType.IDENTIFIER:
            value = bool(self.resolver(token.name))
            self.lexer.advance()
            return value

        if token.type is TokenType.LPAREN:
            self.lexer.advance()  # consume '('
            value = self._parse_expression()

            if self.token.type is not TokenType.RPAREN:
                self.fail("Error: expected ')', found: ", *self.token.fragments(), "\n")
                return False

            self.lexer.advance()  # consume ')'
            return value

        self.fail("Error: expected identifier or '('\n")
        return False

    def fail(self, *fragments: str) -> None:
        """Set the error flag and report diagnostic fragments."""
        self._parse_error = True
        if self.report is None:
            return
        for fragment in fragments:
            self.report(fragment)
