"""Input parsing and preprocessing module.

This module handles:
- Input sanitization and validation
- Tokenizing radix literals, repeating digit suffixes and operators
- Parsing tokens into nested ``[operator, operand, ...]`` trees
- Balancing checks for parentheses/brackets

Tree shapes:
- literal: ``[None, value]`` where value is a NumberLiteral, str or bool
- identifier: plain ``str``
- operation: ``[op, a]`` or ``[op, a, b, ...]``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .config import (
    IDENTIFIER_REGEX,
    IRRATIONAL_SUFFIX_REGEX,
    MAX_EXPRESSION_DEPTH,
    MAX_INPUT_LENGTH,
    NUMBER_REGEX,
    RADIX_PREFIX_REGEX,
)
from .symbols import (
    ABS_GROUP_OP,
    ACCESS_OP,
    ADD_OP,
    ASSIGN_OP,
    CALL_OP,
    COLLECTION_DELIM,
    DIV_OP,
    EQ_OP,
    EQ_STRICT_OP,
    EXP_OP,
    FALSE_ID,
    GROUP_OP,
    IRRATIONAL_OP,
    MULT_OP,
    NEQ_OP,
    NEQ_STRICT_OP,
    RADIX_OP,
    SUB_OP,
    TRUE_ID,
    VEC_OP,
)
from .types import ParseError, ValidationError

# Binding powers
PREC_SEQ = 10
PREC_ASSIGN = 20
PREC_EQ = 80
PREC_ADD = 110
PREC_MULT = 120
PREC_EXP = 130
PREC_PREFIX = 140
PREC_ACCESS = 170

INFIX_PRECEDENCE = {
    COLLECTION_DELIM: PREC_SEQ,
    ASSIGN_OP: PREC_ASSIGN,
    EQ_OP: PREC_EQ,
    NEQ_OP: PREC_EQ,
    EQ_STRICT_OP: PREC_EQ,
    NEQ_STRICT_OP: PREC_EQ,
    ADD_OP: PREC_ADD,
    SUB_OP: PREC_ADD,
    MULT_OP: PREC_MULT,
    DIV_OP: PREC_MULT,
    EXP_OP: PREC_EXP,
    ACCESS_OP: PREC_ACCESS,
    "[": PREC_ACCESS,
    "(": PREC_ACCESS,
}
RIGHT_ASSOCIATIVE = {ASSIGN_OP, EXP_OP}

# Longest first
OPERATORS = (
    "===",
    "!==",
    "**",
    "==",
    "!=",
    "+",
    "-",
    "*",
    "/",
    "=",
    ",",
    ".",
    "(",
    ")",
    "[",
    "]",
    "|",
)


class NumberLiteral(str):
    """Digit text of a number literal, kept verbatim so leading and trailing zeros survive."""

    __slots__ = ()


@dataclass
class Token:
    type: str
    value: str
    position: int


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses/brackets are balanced. Returns (is_balanced, error_position)."""
    pairs = {"(": ")", "[": "]"}
    stack: list[tuple[str, int]] = []  # (char, position)
    quote: str | None = None
    for i, char in enumerate(input_str):
        if quote:
            if char == quote:
                quote = None
            continue
        if char in ('"', "'"):
            quote = char
        elif char in pairs:
            stack.append((char, i))
        elif char in pairs.values():
            if not stack:
                return False, i
            opening, _ = stack.pop()
            if pairs[opening] != char:
                return False, i
    if stack:
        return False, stack[0][1]  # Return position of first unmatched
    return True, None


def preprocess(input_str: str) -> str:
    """Validate raw expression text and return it stripped.

    Raises:
        ValidationError: With code EMPTY_INPUT, TOO_LONG or UNBALANCED
    """
    if not isinstance(input_str, str):
        raise ValidationError("Expression must be a string", "INVALID_TYPE")
    text = input_str.strip()
    if not text:
        raise ValidationError("Empty expression", "EMPTY_INPUT")
    if len(text) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (max {MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )
    balanced, position = is_balanced(text)
    if not balanced:
        raise ValidationError(
            f"Unbalanced brackets at position {position}", "UNBALANCED"
        )
    return text


class Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.index = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        text = self.text
        n = len(text)

        while self.index < n:
            ch = text[self.index]
            start = self.index
            if ch.isspace():
                self.index += 1
                continue

            match = RADIX_PREFIX_REGEX.match(text, start)
            if match:
                tokens.append(Token("RADIX", match.group(1), start))
                self.index = match.end()
                continue

            match = NUMBER_REGEX.match(text, start)
            if match:
                digits = match.group()
                tokens.append(Token("NUMBER", digits, start))
                self.index = match.end()
                suffix = IRRATIONAL_SUFFIX_REGEX.match(text, self.index)
                if suffix:
                    # a repeating 0 is the same as no repeating digit
                    if not digits.endswith("0"):
                        tokens.append(Token("IRRATIONAL", suffix.group(), self.index))
                    self.index = suffix.end()
                continue

            match = IDENTIFIER_REGEX.match(text, start)
            if match:
                tokens.append(Token("IDENT", match.group(), start))
                self.index = match.end()
                continue

            if ch in ('"', "'"):
                tokens.append(self._consume_string())
                continue

            for op in OPERATORS:
                if text.startswith(op, start):
                    tokens.append(Token("OP", op, start))
                    self.index += len(op)
                    break
            else:
                raise ParseError(f"Unexpected character {ch!r} at position {start}")

        tokens.append(Token("EOF", "", n))
        return tokens

    def _consume_string(self) -> Token:
        quote = self.text[self.index]
        start = self.index
        end = self.text.find(quote, start + 1)
        if end < 0:
            raise ParseError(f"Unterminated string starting at position {start}")
        self.index = end + 1
        return Token("STRING", self.text[start + 1 : end], start)


class Parser:
    """Precedence climbing parser over the token stream."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def parse(self) -> Any:
        tree = self.parse_expression()
        token = self._peek()
        if token.type != "EOF":
            raise ParseError(
                f"Unexpected {token.value!r} at position {token.position}"
            )
        return tree

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _expect(self, value: str) -> Token:
        token = self._advance()
        if token.type != "OP" or token.value != value:
            found = token.value or "end of input"
            raise ParseError(
                f"Expected {value!r} at position {token.position}, found {found!r}"
            )
        return token

    def _at_op(self, value: str) -> bool:
        token = self._peek()
        return token.type == "OP" and token.value == value

    def parse_expression(self, min_prec: int = 0) -> Any:
        self.depth += 1
        if self.depth > MAX_EXPRESSION_DEPTH:
            raise ParseError(
                f"Expression nested deeper than {MAX_EXPRESSION_DEPTH} levels",
                "TOO_DEEP",
            )
        try:
            left = self._parse_prefix()
            while True:
                token = self._peek()
                if token.type != "OP":
                    break
                prec = INFIX_PRECEDENCE.get(token.value)
                if prec is None or prec <= min_prec:
                    break
                left = self._parse_infix(left, self._advance(), prec)
            return left
        finally:
            self.depth -= 1

    def _parse_infix(self, left: Any, token: Token, prec: int) -> Any:
        op = token.value
        if op == COLLECTION_DELIM:
            items = [left, self.parse_expression(PREC_SEQ)]
            while self._at_op(COLLECTION_DELIM):
                self._advance()
                items.append(self.parse_expression(PREC_SEQ))
            return [COLLECTION_DELIM, *items]
        if op == ACCESS_OP:
            name = self._advance()
            if name.type != "IDENT":
                raise ParseError(
                    f"Expected member name at position {name.position}"
                )
            return [ACCESS_OP, left, name.value]
        if op == "[":
            if self._at_op("]"):
                raise ParseError(f"Empty brackets at position {token.position}")
            inner = self.parse_expression()
            self._expect("]")
            return [VEC_OP, left, inner]
        if op == "(":
            args = None
            if not self._at_op(")"):
                args = self.parse_expression()
            self._expect(")")
            return [CALL_OP, left, args]

        right_prec = prec - 1 if op in RIGHT_ASSOCIATIVE else prec
        return [op, left, self.parse_expression(right_prec)]

    def _parse_scalar_literal(self) -> Any:
        token = self._advance()
        if token.type != "NUMBER":
            raise ParseError(f"Expected digits at position {token.position}")
        literal = [None, NumberLiteral(token.value)]
        if self._peek().type == "IRRATIONAL":
            self._advance()
            return [IRRATIONAL_OP, literal]
        return literal

    def _parse_prefix(self) -> Any:
        token = self._peek()
        if token.type == "NUMBER":
            return self._parse_scalar_literal()
        if token.type == "RADIX":
            self._advance()
            return [RADIX_OP, token.value, self._parse_scalar_literal()]
        self._advance()
        if token.type == "STRING":
            return [None, token.value]
        if token.type == "IDENT":
            if token.value == TRUE_ID:
                return [None, True]
            if token.value == FALSE_ID:
                return [None, False]
            return token.value
        if token.type == "OP":
            if token.value in (ADD_OP, SUB_OP):
                return [token.value, self.parse_expression(PREC_PREFIX)]
            if token.value == "(":
                if self._at_op(")"):
                    raise ParseError(f"Empty group at position {token.position}")
                inner = self.parse_expression()
                self._expect(")")
                return [GROUP_OP, inner]
            if token.value == "|":
                inner = self.parse_expression()
                self._expect("|")
                return [ABS_GROUP_OP, inner]
        found = token.value or "end of input"
        raise ParseError(f"Unexpected {found!r} at position {token.position}")


def parse_expression(expression: str) -> Any:
    """Validate, tokenize and parse an expression into a tree.

    Args:
        expression: Expression text, e.g. "tc[0q12] + -tc[0q3]"

    Returns:
        Parsed tree

    Raises:
        ValidationError: If the text fails validation
        ParseError: If the text is not a well formed expression
    """
    text = preprocess(expression)
    return Parser(Lexer(text).tokenize()).parse()
