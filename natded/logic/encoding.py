"""Stable structured encoding of formulas and deductions.

Every node becomes a JSON object tagged with its class name, so
``And(Const("p"), Free(0))`` encodes as::

    {"kind": "And",
     "left": {"kind": "Const", "name": "p"},
     "right": {"kind": "Free", "name": 0}}

Tuples become lists, and constant names stay JSON strings or integers,
so text and numeric names survive a round trip. ``from_data`` rebuilds
the exact same tree and rejects anything it does not recognise with an
``EncodingError``.
"""

import json
from dataclasses import fields, is_dataclass
from typing import Any, Dict

from natded.logic.deduction import DEDUCTION_TYPES, Branch
from natded.logic.formula import (
    EXPR_WRAPPER_TYPES,
    FALSE,
    FORMULA_TYPES,
    SEQ_TYPES,
    TRUE,
    Falsity,
    Truth,
)
from natded.utils.exceptions import EncodingError

KINDS: Dict[str, type] = {
    cls.__name__: cls
    for cls in FORMULA_TYPES + SEQ_TYPES + EXPR_WRAPPER_TYPES + DEDUCTION_TYPES + (Branch,)
}

_SINGLETONS = {Truth: TRUE, Falsity: FALSE}


def to_data(node: Any) -> Any:
    """Encode a formula, Expr, Seq, Branch or Deduction as JSON-ready data."""
    try:
        return _to_data(node)
    except RecursionError as e:
        raise EncodingError("Value is nested too deeply to encode") from e


def _to_data(node: Any) -> Any:
    if isinstance(node, bool):
        raise EncodingError(f"Cannot encode {node!r}")
    if isinstance(node, (str, int)):
        return node
    if isinstance(node, tuple):
        return [_to_data(item) for item in node]
    if is_dataclass(node) and KINDS.get(type(node).__name__) is type(node):
        data = {"kind": type(node).__name__}
        for field in fields(node):
            data[field.name] = _to_data(getattr(node, field.name))
        return data
    raise EncodingError(f"Cannot encode {node!r}")


def from_data(data: Any) -> Any:
    """Decode data produced by :func:`to_data`.

    Raises:
        EncodingError: On unknown kinds, missing or unexpected fields, or
            values the node constructors reject.
    """
    try:
        return _from_data(data)
    except RecursionError as e:
        raise EncodingError("Encoded data is nested too deeply") from e


def _from_data(data: Any) -> Any:
    if isinstance(data, bool) or data is None or isinstance(data, float):
        raise EncodingError(f"Unexpected value in encoded data: {data!r}")
    if isinstance(data, (str, int)):
        return data
    if isinstance(data, list):
        return tuple(_from_data(item) for item in data)
    if not isinstance(data, dict):
        raise EncodingError(f"Unexpected value in encoded data: {data!r}")

    kind = data.get("kind")
    cls = KINDS.get(kind) if isinstance(kind, str) else None
    if cls is None:
        raise EncodingError(f"Unknown kind: {kind!r}")
    if cls in _SINGLETONS:
        if len(data) != 1:
            raise EncodingError(f"{kind} takes no fields")
        return _SINGLETONS[cls]

    expected = {field.name for field in fields(cls)}
    given = set(data) - {"kind"}
    if given != expected:
        missing = sorted(expected - given)
        extra = sorted(given - expected)
        raise EncodingError(f"{kind}: missing fields {missing}, unexpected fields {extra}")

    kwargs = {name: _from_data(data[name]) for name in expected}
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"{kind}: {e}") from e


def dumps(node: Any, **kwargs) -> str:
    data = to_data(node)
    try:
        return json.dumps(data, ensure_ascii=False, **kwargs)
    except RecursionError as e:
        raise EncodingError("Value is nested too deeply to encode") from e


def loads(text: str) -> Any:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise EncodingError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise EncodingError("JSON document is nested too deeply") from e
    return from_data(data)
