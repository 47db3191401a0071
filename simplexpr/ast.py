"""Syntax tree of simple expressions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from .dynval import DynVal, Span


class BinOp(str, Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIV = "/"
    MOD = "%"
    EQUALS = "=="
    NOT_EQUALS = "!="
    AND = "&&"
    OR = "||"
    GE = ">="
    LE = "<="
    GT = ">"
    LT = "<"
    ELVIS = "?:"
    REGEX_MATCH = "=~"

    def __str__(self) -> str:
        return self.value


class UnaryOp(str, Enum):
    NOT = "!"
    NEGATIVE = "-"

    def __str__(self) -> str:
        return self.value


class AccessType(Enum):
    """Regular (``foo.bar``) or null-safe (``foo?.bar``) field access."""

    NORMAL = "normal"
    SAFE = "safe"


class SimplExpr:
    """Base class of all expression nodes."""

    span: Span

    def _children(self) -> Iterator["SimplExpr"]:
        return iter(())

    def references_var(self, var: str) -> bool:
        return any(child.references_var(var) for child in self._children())

    def _iter_var_refs(self) -> Iterator[str]:
        for child in self._children():
            yield from child._iter_var_refs()

    def collect_var_refs(self) -> list[str]:
        """All referenced variable names, in order of appearance, duplicates kept."""
        return list(self._iter_var_refs())

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True, repr=False)
class Literal(SimplExpr):
    value: DynVal

    @property
    def span(self) -> Span:  # type: ignore[override]
        return self.value.span

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True, repr=False)
class JsonArray(SimplExpr):
    span: Span
    values: tuple[SimplExpr, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def _children(self) -> Iterator[SimplExpr]:
        return iter(self.values)

    def __str__(self) -> str:
        return "[" + ", ".join(str(v) for v in self.values) + "]"


@dataclass(frozen=True, repr=False)
class JsonObject(SimplExpr):
    span: Span
    entries: tuple[tuple[SimplExpr, SimplExpr], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple((k, v) for k, v in self.entries))

    def _children(self) -> Iterator[SimplExpr]:
        for key, value in self.entries:
            yield key
            yield value

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.entries) + "}"


@dataclass(frozen=True, repr=False)
class Concat(SimplExpr):
    span: Span
    elems: tuple[SimplExpr, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "elems", tuple(self.elems))

    def _children(self) -> Iterator[SimplExpr]:
        return iter(self.elems)

    def __str__(self) -> str:
        text = "".join(
            str(e.value) if isinstance(e, Literal) else "${" + str(e) + "}" for e in self.elems
        )
        return f'"{text}"'


@dataclass(frozen=True, repr=False)
class VarRef(SimplExpr):
    span: Span
    name: str

    def references_var(self, var: str) -> bool:
        return self.name == var

    def _iter_var_refs(self) -> Iterator[str]:
        yield self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, repr=False)
class BinaryOp(SimplExpr):
    span: Span
    left: SimplExpr
    op: BinOp
    right: SimplExpr

    def _children(self) -> Iterator[SimplExpr]:
        return iter((self.left, self.right))

    def __str__(self) -> str:
        return f"({self.left} {self.op} {self.right})"


@dataclass(frozen=True, repr=False)
class UnaryOperation(SimplExpr):
    span: Span
    op: UnaryOp
    operand: SimplExpr

    def _children(self) -> Iterator[SimplExpr]:
        return iter((self.operand,))

    def __str__(self) -> str:
        return f"{self.op}{self.operand}"


@dataclass(frozen=True, repr=False)
class IfElse(SimplExpr):
    span: Span
    cond: SimplExpr
    yes: SimplExpr
    no: SimplExpr

    def _children(self) -> Iterator[SimplExpr]:
        return iter((self.cond, self.yes, self.no))

    def __str__(self) -> str:
        return f"({self.cond} ? {self.yes} : {self.no})"


@dataclass(frozen=True, repr=False)
class JsonAccess(SimplExpr):
    span: Span
    access: AccessType
    value: SimplExpr
    index: SimplExpr

    def _children(self) -> Iterator[SimplExpr]:
        return iter((self.value, self.index))

    def __str__(self) -> str:
        if self.access is AccessType.SAFE:
            return f"{self.value}?.[{self.index}]"
        return f"{self.value}[{self.index}]"


@dataclass(frozen=True, repr=False)
class FunctionCall(SimplExpr):
    span: Span
    name: str
    args: tuple[SimplExpr, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def _children(self) -> Iterator[SimplExpr]:
        return iter(self.args)

    def __str__(self) -> str:
        return f"{self.name}(" + ", ".join(str(a) for a in self.args) + ")"


def literal(span: Span, s: str) -> Literal:
    return Literal(DynVal(s, span))


def synth_string(s: str) -> Literal:
    """A literal string with no real location."""
    return Literal(DynVal(str(s)))


def synth_literal(value: Any) -> Literal:
    """A literal from any value a DynVal accepts, with no real location."""
    return Literal(value if isinstance(value, DynVal) else DynVal(value))


def var_ref(span: Span, name: str) -> VarRef:
    return VarRef(span, name)