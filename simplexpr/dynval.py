"""Dynamically typed values: strings that can be read as numbers, booleans, durations or JSON."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Any, Callable, ClassVar, Iterable, TypeVar

_USIZE_MAX = 2**64 - 1
_U64_MAX = 2**64 - 1

_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)
_SIGNED_INT_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT_RE = re.compile(r"\+?[0-9]+")

T = TypeVar("T")


@dataclass(frozen=True)
class Span:
    """A range of byte offsets within a source file."""

    start: int
    end: int
    file_id: int

    DUMMY: ClassVar["Span"]

    def is_dummy(self) -> bool:
        """Whether this span carries no real location."""
        return self == Span.DUMMY

    def to(self, other: "Span") -> "Span":
        """A span from the start of this one to the end of ``other``."""
        return Span(self.start, other.end, self.file_id)


Span.DUMMY = Span(_USIZE_MAX, _USIZE_MAX, _USIZE_MAX)


class DurationParseError(Exception):
    """A string could not be read as a duration."""

    def __init__(self) -> None:
        super().__init__(
            'Failed to parse duration. Must be a number of milliseconds, or a string like "150ms"'
        )


class ConversionError(Exception):
    """A value could not be converted to the requested type."""

    def __init__(self, value: "DynVal", target_type: str, source: BaseException | None = None) -> None:
        super().__init__(f"Failed to turn `{value}` into a value of type {target_type}")
        self.value = value
        self.target_type = target_type
        self.source = source

    @property
    def span(self) -> Span:
        return self.value.span


def _parse_f64(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"invalid float literal: {text!r}")
    return float(text)


def _parse_int(text: str, bits: int, signed: bool) -> int:
    pattern = _SIGNED_INT_RE if signed else _UNSIGNED_INT_RE
    if not pattern.fullmatch(text):
        raise ValueError(f"invalid digit found in {text!r}")
    number = int(text)
    if signed:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    else:
        low, high = 0, 2**bits - 1
    if not low <= number <= high:
        raise ValueError(f"number too large or too small to fit in target type: {text!r}")
    return number


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError("provided string was not `true` or `false`")


def _format_f64(number: float) -> str:
    """Format a float as a plain decimal, without exponent and without a trailing ``.0``."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _dump_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _trim_end(text: str, suffix: str) -> str:
    while text.endswith(suffix):
        text = text[: -len(suffix)]
    return text


def _saturating_u64(number: float) -> int:
    if math.isnan(number) or number <= 0:
        return 0
    if number >= _U64_MAX:
        return _U64_MAX
    return int(number)


def _text_of(value: Any) -> str:
    if isinstance(value, DynVal):
        return value.value
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_f64(value)
    if isinstance(value, timedelta):
        return f"{value // timedelta(milliseconds=1)}ms"
    if isinstance(value, (list, tuple)):
        if not all(isinstance(item, DynVal) for item in value):
            raise TypeError("a sequence given to DynVal must hold DynVal items only")
        return _dump_json([item.value for item in value])
    raise TypeError(f"cannot build a DynVal from {type(value).__name__}")


class DynVal:
    """A string value together with the span it came from.

    Values that both read as numbers compare numerically, so ``"1"`` equals ``"1.0"``.
    """

    __slots__ = ("value", "span")

    def __init__(self, value: Any = "", span: Span | None = None) -> None:
        if span is None:
            if isinstance(value, (list, tuple)) and value and all(isinstance(v, DynVal) for v in value):
                span = value[0].span.to(value[-1].span)
            else:
                span = Span.DUMMY
        self.value: str = _text_of(value)
        self.span: Span = span

    @classmethod
    def from_json(cls, value: Any) -> "DynVal":
        """A JSON value as text: strings as they are, everything else serialised."""
        if isinstance(value, str):
            return cls(value)
        try:
            return cls(_dump_json(value))
        except (TypeError, ValueError):
            return cls("<invalid json value>")

    @classmethod
    def join(cls, values: Iterable["DynVal"]) -> "DynVal":
        """Concatenate the text of several values."""
        return cls("".join(v.value for v in values))

    def at(self, span: Span) -> "DynVal":
        return DynVal(self.value, span)

    def at_if_dummy(self, span: Span) -> "DynVal":
        return self.at(span) if self.span.is_dummy() else self

    def _convert(self, target: str, parse: Callable[[str], T], text: str | None = None) -> T:
        try:
            return parse(self.value if text is None else text)
        except (ValueError, OverflowError) as err:
            raise ConversionError(self, target, err) from err

    def as_string(self) -> str:
        return self.value

    def as_f64(self) -> float:
        return self._convert("f64", _parse_f64)

    def as_i32(self) -> int:
        return self._convert("i32", lambda t: _parse_int(t, 32, True))

    def as_i64(self) -> int:
        return self._convert("i64", lambda t: _parse_int(t, 64, True))

    def as_bool(self) -> bool:
        return self._convert("bool", _parse_bool)

    def _duration(self, millis: int) -> timedelta:
        try:
            return timedelta(milliseconds=millis)
        except OverflowError as err:
            raise ConversionError(self, "duration", err) from err

    def as_duration(self) -> timedelta:
        """Read ``100ms``, ``1.5s``, ``5m``/``5min``, ``2h`` or a bare number of milliseconds."""
        text = self.value
        if text.endswith("ms"):
            millis = self._convert("integer", lambda t: _parse_int(t, 64, False), _trim_end(text, "ms"))
            return self._duration(millis)
        if text.endswith("s"):
            secs = self._convert("number", _parse_f64, _trim_end(text, "s"))
            return self._duration(_saturating_u64(math.floor(secs * 1000.0) if math.isfinite(secs) else secs))
        if text.endswith("m") or text.endswith("min"):
            minutes = self._convert("number", _parse_f64, _trim_end(_trim_end(text, "min"), "m"))
            seconds = _saturating_u64(math.floor(minutes * 60.0) if math.isfinite(minutes) else minutes)
            return self._duration(seconds * 1000)
        if text.endswith("h"):
            hours = self._convert("number", _parse_f64, _trim_end(text, "h"))
            seconds = _saturating_u64(math.floor(hours * 3600.0) if math.isfinite(hours) else hours)
            return self._duration(seconds * 1000)
        try:
            millis = _parse_int(text, 64, False)
        except ValueError:
            error = DurationParseError()
            raise ConversionError(self, "duration", error) from error
        return self._duration(millis)

    def as_vec(self) -> list[str]:
        """Read ``[a,b,c]`` as a list of strings; ``\\,`` escapes a comma."""
        if not self.value:
            return []
        if not (self.value.startswith("[") and self.value.endswith("]")) or len(self.value) < 2:
            raise ConversionError(self, "vec")
        items: list[str] = []
        for part in self.value[1:-1].split(","):
            if items and items[-1].endswith("\\"):
                items[-1] = items[-1][:-1] + "," + part
            else:
                items.append(part)
        if items[-1].endswith("\\"):
            raise ConversionError(self, "vec")
        return items

    def as_json_value(self) -> Any:
        try:
            return json.loads(self.value, parse_constant=_reject_constant)
        except ValueError as err:
            raise ConversionError(self, "json-value", err) from err

    def as_json_array(self) -> list[Any]:
        value = self.as_json_value()
        if not isinstance(value, list):
            raise ConversionError(self, "json-array")
        return value

    def as_json_object(self) -> dict[str, Any]:
        value = self.as_json_value()
        if not isinstance(value, dict):
            raise ConversionError(self, "json-object")
        return value

    def _as_number(self) -> float | None:
        try:
            return _parse_f64(self.value)
        except ValueError:
            return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DynVal):
            return NotImplemented
        a, b = self._as_number(), other._as_number()
        if a is not None and b is not None:
            return a == b
        return self.value == other.value

    def __hash__(self) -> int:
        number = self._as_number()
        return hash(number) if number is not None else hash(self.value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f'"{self.value}"'