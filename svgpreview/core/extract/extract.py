"""Locate a file's default-exported object literal and read it into a SymbolMap."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

from svgpreview.core.errors import EvaluationError, ExtractionError
from svgpreview.core.extract.literal import LiteralParser, parse_literal
from svgpreview.core.extract.scanner import Scanner, Token
from svgpreview.core.shapes import SymbolMap

logger = logging.getLogger(__name__)

NO_DEFAULT_EXPORT_MESSAGE = "No object found exported as default in the file."

_DECLARATION_KEYWORDS = {"const", "let", "var"}
_OPENING = {"{": "}", "[": "]", "(": ")", "<": ">"}


@dataclass(frozen=True, slots=True)
class LocatedLiteral:
    """The balanced `{ ... }` source of a default export."""

    text: str
    tokens: tuple[Token, ...]
    end: tuple[int, int]

    @property
    def line(self) -> int:
        return self.tokens[0].line

    @property
    def column(self) -> int:
        return self.tokens[0].column


class _TokenBuffer:
    """Pulls tokens from a scanner on demand and remembers them."""

    def __init__(self, scanner: Scanner):
        self._stream: Iterator[Token] = scanner.tokens()
        self.tokens: list[Token] = []

    def get(self, index: int) -> Token | None:
        while len(self.tokens) <= index:
            token = next(self._stream, None)
            if token is None:
                return None
            self.tokens.append(token)
        return self.tokens[index]


def _search(buffer: _TokenBuffer, index: int) -> Token | None:
    # Scan failures before the literal is found mean nothing was located
    try:
        return buffer.get(index)
    except EvaluationError as e:
        raise ExtractionError(f"{NO_DEFAULT_EXPORT_MESSAGE} Scanning stopped: {e}") from e


def _find_declaration(tokens: list[Token], name: str) -> int | None:
    """Index of the `{` opening the first `const|let|var name[: Type] = {`, if any.

    Declarations of `name` with any other initializer are skipped.
    """
    for i, token in enumerate(tokens):
        if token.kind != "identifier" or token.text not in _DECLARATION_KEYWORDS:
            continue
        if i + 1 < len(tokens) and tokens[i + 1].is_identifier(name):
            opening = _initializer_object(tokens, i + 2)
            if opening is not None:
                return opening
    return None


def _initializer_object(tokens: list[Token], start: int) -> int | None:
    # Skip an optional type annotation up to the `=` at depth zero
    closers: list[str] = []
    for j in range(start, len(tokens)):
        current = tokens[j]
        if current.kind != "punct":
            continue
        if not closers and current.text == "=":
            if j + 1 < len(tokens) and tokens[j + 1].is_punct("{"):
                return j + 1
            return None
        if not closers and current.text in ";,":
            return None
        if current.text in _OPENING:
            closers.append(_OPENING[current.text])
        elif closers and current.text == closers[-1]:
            closers.pop()
    return None


def _balance(buffer: _TokenBuffer, scanner: Scanner, open_index: int) -> LocatedLiteral:
    depth = 0
    index = open_index
    while True:
        token = buffer.get(index)
        if token is None:
            opening = buffer.tokens[open_index]
            raise ExtractionError(
                f"{NO_DEFAULT_EXPORT_MESSAGE} The object opened at line "
                f"{opening.line}, column {opening.column} is never closed."
            )
        if token.is_punct("{"):
            depth += 1
        elif token.is_punct("}"):
            depth -= 1
            if depth == 0:
                break
        index += 1

    tokens = tuple(buffer.tokens[open_index : index + 1])
    closing = tokens[-1]
    return LocatedLiteral(
        text=scanner.text[tokens[0].start : closing.end],
        tokens=tokens,
        end=scanner.position(closing.end),
    )


def locate_default_export(text: str) -> LocatedLiteral:
    """Find the first `export default { ... }` in source text.

    Comments and string contents are never matched. `export default NAME`
    is followed to an earlier `const|let|var NAME = { ... }` in the same text.

    Raises:
        ExtractionError: If no default-exported object literal is found
        EvaluationError: If the literal itself cannot be tokenized
    """
    scanner = Scanner(text)
    buffer = _TokenBuffer(scanner)

    index = 0
    while True:
        token = _search(buffer, index)
        if token is None:
            raise ExtractionError(NO_DEFAULT_EXPORT_MESSAGE)

        if token.is_identifier("export"):
            keyword = _search(buffer, index + 1)
            target = _search(buffer, index + 2)
            if keyword is not None and keyword.is_identifier("default") and target is not None:
                if target.is_punct("{"):
                    return _balance(buffer, scanner, index + 2)

                if target.kind == "identifier":
                    open_index = _find_declaration(buffer.tokens[:index], target.text)
                    if open_index is not None:
                        logger.debug(
                            f"Default export '{target.text}' resolved to line "
                            f"{buffer.tokens[open_index].line}"
                        )
                        return _balance(buffer, scanner, open_index)
                    logger.debug(
                        f"Skipping default export of '{target.text}' at line {target.line}: "
                        "no object literal declaration found"
                    )

        index += 1


def to_symbol_map(value: Any) -> SymbolMap:
    """Check a parsed literal is a flat string-to-string object."""
    if not isinstance(value, dict):
        raise EvaluationError(f"Default export is {_describe(value)}, not an object")

    for key, item in value.items():
        if not isinstance(item, str):
            raise EvaluationError(
                f"Value of '{key}' is {_describe(item)}, not a string; "
                "the default export is not usable as a symbol map"
            )

    return SymbolMap(entries=value)


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, (int, float)):
        return "a number"
    if isinstance(value, list):
        return "an array"
    if isinstance(value, dict):
        return "an object"
    return "a string"


def evaluate_literal(text: str) -> SymbolMap:
    """Read object literal source text (without the export) into a SymbolMap."""
    return to_symbol_map(parse_literal(text))


def extract_symbol_map(text: str) -> SymbolMap:
    """Locate the default-exported object literal in source text and read it.

    Raises:
        ExtractionError: If no default-exported object literal is found
        EvaluationError: If the literal is malformed or not a flat string map
    """
    located = locate_default_export(text)
    logger.debug(
        f"Found default export at line {located.line}, column {located.column} "
        f"({len(located.text)} characters)"
    )

    value = LiteralParser(located.tokens, end=located.end).parse()
    symbol_map = to_symbol_map(value)

    logger.info(f"Extracted {len(symbol_map)} symbol(s)")
    return symbol_map


def read_symbol_map(file_path: str | Path, encoding: str = "utf-8") -> SymbolMap:
    """Read a source file and extract its symbol map.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid in the given encoding
        ExtractionError, EvaluationError: See extract_symbol_map
    """
    file_path = Path(file_path)

    with open(file_path, "r", encoding=encoding) as f:
        text = f.read()

    logger.debug(f"Read {len(text)} characters from {file_path}")
    return extract_symbol_map(text)
