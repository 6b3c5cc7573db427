"""Recursive-descent parser for object and array literals.

Reads the data subset of JavaScript literal syntax without running any code:

    value   := string | number | true | false | null | object | array
    object  := "{" [ member ( "," member )* [ "," ] ] "}"
    member  := key ":" value
    key     := identifier | string | number
    array   := "[" [ value ( "," value )* [ "," ] ] "]"

Strings may use single, double or backtick quotes (backticks without ${}).
Identifiers as values, calls, spreads, computed keys and operators are
rejected with an EvaluationError pointing at the offending token.
"""

import math
from decimal import Decimal
from typing import Any

from svgpreview.core.errors import EvaluationError
from svgpreview.core.extract.scanner import Scanner, Token

_CONSTANTS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "Infinity": float("inf"),
    "NaN": float("nan"),
}


class LiteralParser:
    """Parses a token sequence holding exactly one literal value."""

    def __init__(self, tokens: list[Token] | tuple[Token, ...], end: tuple[int, int]):
        self._tokens = tokens
        self._index = 0
        self._end = end

    def parse(self) -> Any:
        value = self._parse_value()
        if self._index < len(self._tokens):
            token = self._tokens[self._index]
            raise self._error(f"Unexpected '{token.text}' after the end of the literal", token)
        return value

    def _error(self, message: str, token: Token | None) -> EvaluationError:
        if token is None:
            line, column = self._end
        else:
            line, column = token.line, token.column
        return EvaluationError(message, line=line, column=column)

    def _next(self, expected: str) -> Token:
        if self._index >= len(self._tokens):
            raise self._error(f"Unexpected end of literal, expected {expected}", None)
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _number(self, token: Token) -> int | float:
        try:
            return _parse_number(token.text)
        except ValueError as e:
            raise self._error(f"Invalid number literal '{token.text}'", token) from e

    def _parse_value(self) -> Any:
        token = self._next("a value")

        if token.kind == "string":
            return token.value
        if token.kind == "template":
            if token.value is None:
                raise self._error(
                    "Template literals with ${} substitutions are not supported", token
                )
            return token.value
        if token.kind == "number":
            return self._number(token)
        if token.kind == "identifier":
            if token.text in _CONSTANTS:
                return _CONSTANTS[token.text]
            raise self._error(
                f"Unsupported expression '{token.text}'; only literal values are allowed",
                token,
            )
        if token.is_punct("{"):
            return self._parse_object()
        if token.is_punct("["):
            return self._parse_array()
        if token.is_punct("-") or token.is_punct("+"):
            operand = self._next("a number")
            if operand.kind != "number":
                raise self._error(
                    f"Unary '{token.text}' is only supported before a number", token
                )
            number = self._number(operand)
            return -number if token.text == "-" else number
        if token.is_punct("."):
            raise self._error("Spread elements are not supported", token)

        raise self._error(f"Unexpected '{token.text}', expected a value", token)

    def _parse_key(self, token: Token) -> str:
        if token.kind == "identifier":
            return token.text
        if token.kind == "string":
            return token.value
        if token.kind == "number":
            number = self._number(token)
            if token.text.endswith("n"):
                return str(number)
            return _number_key(number)
        if token.is_punct("["):
            raise self._error("Computed property names are not supported", token)
        if token.is_punct("."):
            raise self._error("Spread properties are not supported", token)
        raise self._error(f"Unexpected '{token.text}', expected a property name", token)

    def _parse_object(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        while True:
            token = self._next("a property name or '}'")
            if token.is_punct("}"):
                return result

            key = self._parse_key(token)

            separator = self._next(f"':' after property name '{key}'")
            if not separator.is_punct(":"):
                if separator.is_punct(",") or separator.is_punct("}"):
                    raise self._error(
                        f"Shorthand property '{key}' is not supported; write '{key}: value'",
                        token,
                    )
                raise self._error(
                    f"Expected ':' after property name '{key}', got '{separator.text}'",
                    separator,
                )

            # Later duplicates overwrite the value but keep the first position
            result[key] = self._parse_value()

            token = self._next("',' or '}'")
            if token.is_punct("}"):
                return result
            if not token.is_punct(","):
                raise self._error(
                    f"Unexpected '{token.text}' after the value of '{key}'; "
                    "only literal values are allowed",
                    token,
                )

    def _parse_array(self) -> list[Any]:
        result: list[Any] = []
        while True:
            if self._index < len(self._tokens) and self._tokens[self._index].is_punct("]"):
                self._index += 1
                return result

            result.append(self._parse_value())

            token = self._next("',' or ']'")
            if token.is_punct("]"):
                return result
            if not token.is_punct(","):
                raise self._error(
                    f"Unexpected '{token.text}' in array; only literal values are allowed",
                    token,
                )


def _parse_number(text: str) -> int | float:
    text = text.replace("_", "")
    if text.endswith("n"):
        return int(text[:-1], 0)
    if text[:2].lower() in ("0x", "0o", "0b"):
        return int(text, 0)
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text, 10)


def _number_key(number: int | float) -> str:
    """Property name a numeric key converts to, as JavaScript prints numbers."""
    try:
        number = float(number)
    except OverflowError:
        number = math.inf
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    if 1e-6 <= abs(number) < 1e-4:
        return format(Decimal(repr(number)), "f")

    mantissa, _, exponent = repr(number).partition("e")
    if not exponent:
        return mantissa
    sign = "-" if exponent.startswith("-") else "+"
    return f"{mantissa}e{sign}{exponent.lstrip('+-').lstrip('0')}"


def parse_literal(text: str) -> Any:
    """Parse literal source text into plain Python values."""
    scanner = Scanner(text)
    tokens = list(scanner.tokens())
    parser = LiteralParser(tokens, end=scanner.position(len(text)))
    return parser.parse()
