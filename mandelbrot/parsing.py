"""Parsing helpers for command-line coordinate pairs."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

T = TypeVar("T")


class ParseError(ValueError):
    """A command-line argument could not be parsed."""

    def __init__(self, argument: str, text: str, reason: str = "") -> None:
        self.argument = argument
        self.text = text
        message = f"cannot parse {argument} from {text!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def _convert(text: str, convert: Callable[[str], T]) -> Optional[T]:
    # int() and float() also take digit grouping and non-ASCII digits.
    if not text or text != text.strip() or "_" in text or not text.isascii():
        return None
    try:
        return convert(text)
    except ValueError:
        return None


def parse_pair(s: str, separator: str, convert: Callable[[str], T]) -> Optional[tuple[T, T]]:
    """Parse ``s`` as ``<left><separator><right>``, e.g. ``"400x600"`` or ``"1.0,0.5"``.

    Both sides must convert completely with ``convert``. Returns ``None``
    when ``s`` has any other shape.
    """

    left, sep, right = s.partition(separator)
    if not sep:
        return None
    first = _convert(left, convert)
    second = _convert(right, convert)
    if first is None or second is None:
        return None
    return first, second


def parse_complex(s: str) -> Optional[complex]:
    """Parse a pair of floats separated by a comma as a complex number."""

    pair = parse_pair(s, ",", float)
    if pair is None:
        return None
    return complex(*pair)


def parse_bounds(text: str) -> tuple[int, int]:
    bounds = parse_pair(text, "x", int)
    if bounds is None:
        raise ParseError("image dimensions", text, "expected WIDTHxHEIGHT")
    if bounds[0] <= 0 or bounds[1] <= 0:
        raise ParseError("image dimensions", text, "width and height must be positive")
    return bounds


def parse_point(text: str, argument: str) -> complex:
    point = parse_complex(text)
    if point is None:
        raise ParseError(argument, text, "expected RE,IM")
    return point
