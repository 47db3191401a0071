# simplexpr

Building blocks for a small expression language whose values are all strings,
read as numbers, booleans, durations or JSON only when something asks for
that. The package holds the value type, the expression syntax tree, and
helpers for system-tray StatusNotifierItem data.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Values: `simplexpr.dynval`

`DynVal` holds a string (`value`) and a `Span` (`span`, its place in the
source text; `Span.DUMMY` when it has none). A `DynVal` can be built from a
string, `bool`, `int`, `float`, `timedelta` (written as milliseconds, e.g.
`"1500ms"`) or a list of `DynVal`s (written as a JSON array of their strings).

```python
from simplexpr.dynval import DynVal

DynVal("1.0") == DynVal("1")          # True: values that read as numbers compare numerically
DynVal(True).value                    # "true"
DynVal("0.5m").as_duration()          # timedelta(seconds=30)
DynVal("[hi\\,ho,hu]").as_vec()       # ["hi,ho", "hu"]
DynVal('{"a": 1}').as_json_object()   # {"a": 1}
```

Conversions: `as_string`, `as_f64`, `as_i32`, `as_i64`, `as_bool` (only
`true` and `false`), `as_duration` (`100ms`, `1.5s`, `5m` or `5min`, `2h`, or a
bare number of milliseconds), `as_vec`, `as_json_value`, `as_json_array` and
`as_json_object`. A value that cannot be converted raises `ConversionError`,
which carries the `value`, the `target_type` and the underlying `source`
error; a string that is no duration at all has a `DurationParseError` as its
source.

`DynVal.from_json` turns a decoded JSON value into a `DynVal` (strings as they
are, everything else serialised), `DynVal.join` concatenates several values,
and `at` / `at_if_dummy` return a copy with a different span.
`Span.to` joins two spans and `Span.is_dummy` tells whether a span is
`Span.DUMMY`.

## Expression trees: `simplexpr.ast`

Node classes, all subclasses of `SimplExpr`: `Literal`, `VarRef`, `BinaryOp`
(with a `BinOp` operator), `UnaryOperation` (with a `UnaryOp`), `IfElse`,
`JsonAccess` (with `AccessType.NORMAL` or `AccessType.SAFE`), `FunctionCall`,
`JsonArray`, `JsonObject` and `Concat`. The helpers `literal`,
`synth_string`, `synth_literal` and `var_ref` build leaf nodes.

```python
from simplexpr.ast import BinOp, BinaryOp, synth_literal, var_ref
from simplexpr.dynval import Span

expr = BinaryOp(Span.DUMMY, var_ref(Span.DUMMY, "x"), BinOp.PLUS, synth_literal(2))
str(expr)                  # '(x + "2")'
expr.references_var("x")   # True
expr.collect_var_refs()    # ["x"]
```

`str()` of a node renders it back as expression text; `collect_var_refs`
lists referenced variable names in order of appearance, keeping duplicates.

## Tray helpers: `simplexpr.tray`

- `Status` (`PASSIVE`, `ACTIVE`, `NEEDS_ATTENTION`) and `Status.parse`, which
  raises `ParseStatusError` for anything but the exact protocol spellings.
- `parse_item_address` splits an address such as
  `:1.50/org/ayatana/NotificationItem/nm_applet` into bus name and object
  path; a bare unique bus name such as `:1.234` gets `/StatusNotifierItem`.
  Other forms raise `AddressError`.
- `argb_to_rgba` reorders ARGB32 pixel bytes to RGBA; `icon_from_pixmap`
  builds a Pillow RGBA image from one pixmap; `icon_from_pixmaps` picks the
  smallest pixmap at least as large as the requested size (or else the
  largest), scales it to `size` x `size`, and returns `None` when given no
  pixmaps.

## What this package does not do

- It does not parse expression text; trees are built from the node classes.
- It does not evaluate expression trees, and has no built-in functions.
- The tray helpers work on data only: nothing here talks to D-Bus, registers
  a tray or watcher, or loads icons from icon themes or files.