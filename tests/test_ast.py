import pytest

from simplexpr.ast import (
    AccessType,
    BinaryOp,
    BinOp,
    Concat,
    FunctionCall,
    IfElse,
    JsonAccess,
    JsonArray,
    JsonObject,
    Literal,
    UnaryOp,
    UnaryOperation,
    VarRef,
    literal,
    synth_literal,
    synth_string,
    var_ref,
)
from simplexpr.dynval import DynVal, Span

SPAN = Span(0, 10, 0)


def _complex_expr():
    return IfElse(
        SPAN,
        BinaryOp(SPAN, var_ref(SPAN, "a"), BinOp.GT, synth_string("1")),
        FunctionCall(SPAN, "round", [var_ref(SPAN, "b"), synth_string("2")]),
        JsonObject(SPAN, [(synth_string("k"), JsonArray(SPAN, [var_ref(SPAN, "a")]))]),
    )


def test_binop_parsing_from_symbol():
    assert BinOp("==") is BinOp.EQUALS
    assert BinOp("=~") is BinOp.REGEX_MATCH
    assert str(BinOp.ELVIS) == "?:"
    assert UnaryOp("!") is UnaryOp.NOT
    with pytest.raises(ValueError):
        BinOp("<>")


def test_references_var():
    expr = _complex_expr()
    assert expr.references_var("a")
    assert expr.references_var("b")
    assert not expr.references_var("c")
    assert not synth_string("a").references_var("a")


def test_collect_var_refs_order_and_duplicates():
    assert _complex_expr().collect_var_refs() == ["a", "b", "a"]


def test_collect_var_refs_in_access_and_concat():
    expr = Concat(
        SPAN,
        [
            synth_string("x"),
            JsonAccess(SPAN, AccessType.SAFE, var_ref(SPAN, "obj"), var_ref(SPAN, "key")),
            UnaryOperation(SPAN, UnaryOp.NEGATIVE, var_ref(SPAN, "n")),
        ],
    )
    assert expr.collect_var_refs() == ["obj", "key", "n"]


def test_display_binary_op():
    expr = BinaryOp(SPAN, var_ref(SPAN, "a"), BinOp.PLUS, var_ref(SPAN, "b"))
    assert str(expr) == "(a + b)"


def test_display_literal_and_concat():
    assert str(synth_string("hi")) == '"hi"'
    concat = Concat(SPAN, [synth_string("n="), var_ref(SPAN, "n")])
    assert str(concat) == '"n=${n}"'


def test_display_access_variants():
    value, index = var_ref(SPAN, "v"), var_ref(SPAN, "i")
    normal = str(JsonAccess(SPAN, AccessType.NORMAL, value, index))
    safe = str(JsonAccess(SPAN, AccessType.SAFE, value, index))
    assert "?." not in normal
    assert "?." in safe
    assert normal.replace("[", "?.[", 1) == safe


def test_repr_matches_str():
    expr = _complex_expr()
    assert repr(expr) == str(expr)


def test_spans():
    span = Span(2, 5, 1)
    assert literal(span, "x").span == span
    assert var_ref(span, "x").span == span
    assert BinaryOp(span, synth_string("1"), BinOp.MINUS, synth_string("2")).span == span


def test_synth_literal_conversions():
    assert synth_literal(True).value == DynVal("true")
    assert synth_literal(DynVal("abc")).value == DynVal("abc")
    assert synth_string("q").span.is_dummy()


def test_equality_and_sequence_normalisation():
    a = JsonArray(SPAN, [synth_string("1")])
    b = JsonArray(SPAN, (synth_string("1.0"),))
    assert a == b
    assert hash(a) == hash(b)
    assert FunctionCall(SPAN, "f", []) != FunctionCall(SPAN, "g", [])


def test_literal_construction():
    lit = literal(SPAN, "text")
    assert isinstance(lit, Literal)
    assert lit.value.value == "text"
    assert VarRef(SPAN, "x") == var_ref(SPAN, "x")