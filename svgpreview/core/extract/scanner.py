"""Tokenizer for JavaScript and TypeScript source text.

Covers only what locating and reading object literals needs:
- comments and a leading hashbang are skipped
- string and template literals are decoded (templates with ${} keep no value)
- regular expression literals are stepped over
- everything else is an identifier, a number or a single punctuation character

Braces are tracked so that the `}` closing a template substitution resumes
the template instead of being emitted as punctuation.
"""

import bisect
import re
from dataclasses import dataclass
from typing import Iterator, Literal

from svgpreview.core.errors import EvaluationError

TokenKind = Literal["identifier", "number", "string", "template", "regex", "punct"]

_IDENTIFIER_RE = re.compile(r"(?:[^\W\d]|\$)(?:\w|\$)*")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+n?"
    r"|0[oO][0-7_]+n?"
    r"|0[bB][01_]+n?"
    r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d[\d_]*)?n?"
)
_NEWLINE_RE = re.compile(r"\r\n|[\n\r\u2028\u2029]")
_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_WHITESPACE = " \t\n\r\v\f\u00a0\ufeff\u2028\u2029"
_LINE_TERMINATORS = "\n\r\u2028\u2029"

# Stands in for a surrogate escape left without its pair
_REPLACEMENT_CHARACTER = "\ufffd"

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

# A `/` after one of these starts a regular expression, not a division
_REGEX_PRECEDING_KEYWORDS = {
    "return",
    "typeof",
    "instanceof",
    "case",
    "do",
    "else",
    "in",
    "of",
    "new",
    "delete",
    "void",
    "throw",
    "yield",
    "await",
}


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int
    line: int
    column: int
    value: str | None = None

    def is_punct(self, char: str) -> bool:
        return self.kind == "punct" and self.text == char

    def is_identifier(self, name: str) -> bool:
        return self.kind == "identifier" and self.text == name


class Scanner:
    """Lazily splits source text into tokens."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self._line_starts = [0] + [m.end() for m in _NEWLINE_RE.finditer(text)]
        self._braces: list[str] = []
        self._previous: Token | None = None

    def position(self, offset: int) -> tuple[int, int]:
        """1-based (line, column) of a character offset."""
        index = bisect.bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index] + 1

    def error(self, message: str, offset: int) -> EvaluationError:
        line, column = self.position(offset)
        return EvaluationError(message, line=line, column=column)

    def tokens(self) -> Iterator[Token]:
        if self.text.startswith("#!"):
            self._skip_line()
        while True:
            self._skip_trivia()
            if self.pos >= len(self.text):
                return
            token = self._next_token()
            self._previous = token
            yield token

    def _make(self, kind: TokenKind, start: int, end: int, value: str | None = None) -> Token:
        line, column = self.position(start)
        self.pos = end
        return Token(
            kind=kind,
            text=self.text[start:end],
            start=start,
            end=end,
            line=line,
            column=column,
            value=value,
        )

    def _skip_line(self) -> None:
        match = _NEWLINE_RE.search(self.text, self.pos)
        self.pos = match.start() if match else len(self.text)

    def _skip_trivia(self) -> None:
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char in _WHITESPACE or char.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                self._skip_line()
            elif text.startswith("/*", self.pos):
                close = text.find("*/", self.pos + 2)
                if close == -1:
                    raise self.error("Unterminated comment", self.pos)
                self.pos = close + 2
            else:
                return

    def _next_token(self) -> Token:
        start = self.pos
        char = self.text[start]

        if char in "'\"":
            return self._read_string(start, char)
        if char == "`":
            return self._read_template(start, start + 1, opened_with_backtick=True)
        if char == "}" and self._braces and self._braces[-1] == "${":
            self._braces.pop()
            return self._read_template(start, start + 1, opened_with_backtick=False)
        if char == "/" and self._regex_allowed():
            return self._read_regex(start)

        match = _IDENTIFIER_RE.match(self.text, start)
        if match:
            return self._make("identifier", start, match.end())

        if char.isdigit() or char == ".":
            match = _NUMBER_RE.match(self.text, start)
            if match:
                return self._make("number", start, match.end())

        if char == "{":
            self._braces.append("{")
        elif char == "}" and self._braces:
            self._braces.pop()
        return self._make("punct", start, start + 1)

    def _regex_allowed(self) -> bool:
        previous = self._previous
        if previous is None:
            return True
        if previous.kind == "punct":
            return previous.text not in ")]}"
        if previous.kind == "identifier":
            return previous.text in _REGEX_PRECEDING_KEYWORDS
        if previous.kind == "template":
            return previous.text.endswith("${")
        return False

    def _read_string(self, start: int, quote: str) -> Token:
        text = self.text
        pos = start + 1
        chunks: list[str] = []
        while True:
            if pos >= len(text) or text[pos] in "\n\r":
                raise self.error("Unterminated string literal", start)
            char = text[pos]
            if char == quote:
                return self._make("string", start, pos + 1, "".join(chunks))
            if char == "\\":
                decoded, pos = self._read_escape(pos)
                chunks.append(decoded)
            else:
                chunks.append(char)
                pos += 1

    def _read_template(self, start: int, pos: int, opened_with_backtick: bool) -> Token:
        text = self.text
        chunks: list[str] = []
        while True:
            if pos >= len(text):
                raise self.error("Unterminated template literal", start)
            char = text[pos]
            if char == "`":
                value = "".join(chunks) if opened_with_backtick else None
                return self._make("template", start, pos + 1, value)
            if text.startswith("${", pos):
                self._braces.append("${")
                return self._make("template", start, pos + 2)
            if char == "\\":
                decoded, pos = self._read_escape(pos)
                chunks.append(decoded)
            elif char == "\r":
                # Template literals normalise CRLF and CR to LF
                chunks.append("\n")
                pos += 2 if text.startswith("\r\n", pos) else 1
            else:
                chunks.append(char)
                pos += 1

    def _read_regex(self, start: int) -> Token:
        text = self.text
        pos = start + 1
        in_class = False
        while True:
            if pos >= len(text) or text[pos] in _LINE_TERMINATORS:
                raise self.error("Unterminated regular expression", start)
            char = text[pos]
            if char == "\\":
                pos += 2
                continue
            if char == "[":
                in_class = True
            elif char == "]":
                in_class = False
            elif char == "/" and not in_class:
                break
            pos += 1
        pos += 1
        while pos < len(text) and (text[pos].isalnum() or text[pos] == "_"):
            pos += 1
        return self._make("regex", start, pos)

    def _read_escape(self, pos: int) -> tuple[str, int]:
        """Decode the escape sequence starting at the backslash at `pos`."""
        text = self.text
        if pos + 1 >= len(text):
            raise self.error("Unterminated escape sequence", pos)
        char = text[pos + 1]

        if char == "\r" and text.startswith("\n", pos + 2):
            return "", pos + 3
        if char in _LINE_TERMINATORS:
            return "", pos + 2
        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char], pos + 2

        if char == "x":
            digits = text[pos + 2 : pos + 4]
            if len(digits) != 2 or not _HEX_RE.fullmatch(digits):
                raise self.error("Invalid hexadecimal escape sequence", pos)
            return chr(int(digits, 16)), pos + 4

        if char == "u":
            if text.startswith("{", pos + 2):
                close = text.find("}", pos + 3)
                digits = text[pos + 3 : close] if close != -1 else ""
                if not _HEX_RE.fullmatch(digits) or int(digits, 16) > 0x10FFFF:
                    raise self.error("Invalid Unicode escape sequence", pos)
                return _code_point(int(digits, 16)), close + 1

            digits = text[pos + 2 : pos + 6]
            if len(digits) != 4 or not _HEX_RE.fullmatch(digits):
                raise self.error("Invalid Unicode escape sequence", pos)
            code = int(digits, 16)
            end = pos + 6

            # Combine a UTF-16 surrogate pair written as two escapes
            low_digits = text[end + 2 : end + 6]
            if (
                0xD800 <= code <= 0xDBFF
                and text.startswith("\\u", end)
                and len(low_digits) == 4
                and _HEX_RE.fullmatch(low_digits)
                and 0xDC00 <= int(low_digits, 16) <= 0xDFFF
            ):
                low = int(low_digits, 16)
                code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                end += 6
            return _code_point(code), end

        return char, pos + 2


def _code_point(code: int) -> str:
    if 0xD800 <= code <= 0xDFFF:
        return _REPLACEMENT_CHARACTER
    return chr(code)
