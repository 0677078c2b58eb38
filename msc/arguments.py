"""Argument grammar.

The optional CLI argument is parsed once into a tagged ``ParsedArgument``
according to the grammar of the command it belongs to. Handlers switch on
``kind`` instead of re-inspecting the raw text.
"""

import re
from dataclasses import dataclass
from enum import Enum

QUERY_MARKERS = frozenset({"?", "-"})

_DIGIT = re.compile(r"[0-9]")
_SIGNED = r"([+-]?)([0-9]{1,%d})"
_INDEX = re.compile(r"[0-9]{1,2}")
_IDENTIFIER = re.compile(r"[A-Za-z0-9]{3,24}")


class ArgKind(Enum):
    EMPTY = "empty"
    QUERY = "query"
    DIGIT = "digit"
    SIGNED = "signed"
    INDEX = "index"
    IDENTIFIER = "identifier"
    INVALID = "invalid"


@dataclass(frozen=True)
class ParsedArgument:
    """Result of parsing one argument token."""

    kind: ArgKind
    raw: str = ""
    value: int | None = None
    sign: str = ""

    @property
    def delta(self) -> int:
        """Signed magnitude of a relative argument."""
        return -self.value if self.sign == "-" else self.value


EMPTY = ParsedArgument(ArgKind.EMPTY)


def _invalid(token: str) -> ParsedArgument:
    return ParsedArgument(ArgKind.INVALID, raw=token)


def parse_toggle(token: str | None, mod: int) -> ParsedArgument:
    """Cycling field: empty (advance), query marker, or a single digit below ``mod``."""
    token = token or ""
    if not token:
        return EMPTY
    if token in QUERY_MARKERS:
        return ParsedArgument(ArgKind.QUERY, raw=token)
    if _DIGIT.fullmatch(token) and int(token) < mod:
        return ParsedArgument(ArgKind.DIGIT, raw=token, value=int(token))
    return _invalid(token)


def parse_signed(token: str | None, maximum: int, digits: int = 4, query: bool = True) -> ParsedArgument:
    """Bounded field: absolute ``N`` or relative ``+N``/``-N`` with ``N <= maximum``.

    Args:
        token: Raw argument
        maximum: Largest accepted magnitude
        digits: Largest accepted digit count
        query: Accept the query markers
    """
    token = token or ""
    if not token:
        return EMPTY
    if query and token in QUERY_MARKERS:
        return ParsedArgument(ArgKind.QUERY, raw=token)
    match = re.fullmatch(_SIGNED % digits, token)
    if not match or int(match.group(2)) > maximum:
        return _invalid(token)
    sign, magnitude = match.group(1), int(match.group(2))
    if sign:
        return ParsedArgument(ArgKind.SIGNED, raw=token, value=magnitude, sign=sign)
    return ParsedArgument(ArgKind.DIGIT, raw=token, value=magnitude)


def parse_index(token: str | None) -> ParsedArgument:
    """1-based menu index of one or two digits. Range is checked against the listing."""
    token = token or ""
    if not token:
        return EMPTY
    if _INDEX.fullmatch(token):
        return ParsedArgument(ArgKind.INDEX, raw=token, value=int(token))
    return _invalid(token)


def parse_identifier(token: str | None) -> ParsedArgument:
    """Field name of an informational resource."""
    token = token or ""
    if not token:
        return EMPTY
    if _IDENTIFIER.fullmatch(token):
        return ParsedArgument(ArgKind.IDENTIFIER, raw=token)
    return _invalid(token)
