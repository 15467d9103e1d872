"""Formula algebra for the natural-deduction kernel.

Formulas are immutable trees of frozen dataclasses. Equality is purely
structural: two formulas are equal iff their trees and bound names match
exactly. No alpha-conversion happens anywhere in the kernel.

Two substitution operations are provided:

- ``substitute(name, replacement)`` replaces ``Free(name)`` placeholders,
  stopping at any first-order binder (or ``Subst`` body) that rebinds
  ``name``.
- ``substitute_seq(arity, name, formulas)`` instantiates a sequence
  schema variable ``(arity, name)``, splicing the formulas into relation
  argument lists.

Neither operation renames binders. Capture is avoided only because the
rules that bring a name into scope first check that it is not declared.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from toolz import mapcat

ConstName = Union[str, int]


def is_const_name(value) -> bool:
    """A constant name is a ``str`` or a non-``bool`` ``int``."""
    return isinstance(value, (str, int)) and not isinstance(value, bool)


def check_name(value) -> None:
    if not is_const_name(value):
        raise TypeError(f"Invalid constant name: {value!r}")


def check_arity(value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Arity must be an int, got {value!r}")
    if value < 0:
        raise ValueError(f"Arity must be non-negative, got {value}")


def name_str(name: ConstName) -> str:
    """Render a constant name, keeping text and numeric names apart."""
    if isinstance(name, int):
        return f"'{name}'"
    return f'"{name}"'


def _require_formula(*values) -> None:
    for value in values:
        if not isinstance(value, Formula):
            raise TypeError(f"Expected a Formula, got {value!r}")


##############################################################################
# Formulae
##############################################################################


class Formula:
    """Base class for kernel formulas."""

    __slots__ = ()

    def substitute(self, name: ConstName, replacement: Formula) -> Formula:
        """Replace ``Free(name)`` with ``replacement``."""
        raise NotImplementedError

    def substitute_seq(self, arity: int, name: ConstName,
                       formulas: Sequence[Formula]) -> Formula:
        """Instantiate the sequence variable ``(arity, name)`` with ``formulas``."""
        raise NotImplementedError

    def expand_seq(self, arity: int, name: ConstName,
                   formulas: Sequence[Formula]) -> Tuple[Expr, ...]:
        """Relation-argument view of ``substitute_seq``: always one argument."""
        return (self.substitute_seq(arity, name, formulas),)


@dataclass(frozen=True)
class Truth(Formula):
    """The formula ``true``."""

    def substitute(self, name, replacement):
        return self

    def substitute_seq(self, arity, name, formulas):
        return self

    def __str__(self) -> str:
        return "true"


@dataclass(frozen=True)
class Falsity(Formula):
    """The formula ``false``."""

    def substitute(self, name, replacement):
        return self

    def substitute_seq(self, arity, name, formulas):
        return self

    def __str__(self) -> str:
        return "false"


TRUE = Truth()
FALSE = Falsity()


@dataclass(frozen=True)
class Binary(Formula):
    """Shared shape of the two-place connectives."""

    left: Formula
    right: Formula

    def __post_init__(self) -> None:
        _require_formula(self.left, self.right)

    def substitute(self, name, replacement):
        return type(self)(self.left.substitute(name, replacement),
                          self.right.substitute(name, replacement))

    def substitute_seq(self, arity, name, formulas):
        return type(self)(self.left.substitute_seq(arity, name, formulas),
                          self.right.substitute_seq(arity, name, formulas))

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.left}, {self.right})"


@dataclass(frozen=True)
class Eq(Binary):
    """Equality between two formulas."""


@dataclass(frozen=True)
class Iff(Binary):
    """Biconditional."""


@dataclass(frozen=True)
class And(Binary):
    """Conjunction."""


@dataclass(frozen=True)
class Or(Binary):
    """Disjunction."""


@dataclass(frozen=True)
class Implies(Binary):
    """Implication ``left -> right``."""


@dataclass(frozen=True)
class Not(Formula):
    """Negation."""

    body: Formula

    def __post_init__(self) -> None:
        _require_formula(self.body)

    def substitute(self, name, replacement):
        return Not(self.body.substitute(name, replacement))

    def substitute_seq(self, arity, name, formulas):
        return Not(self.body.substitute_seq(arity, name, formulas))

    def __str__(self) -> str:
        return f"Not({self.body})"


@dataclass(frozen=True)
class Relation(Formula):
    """An applied predicate or schema instance: an ordered argument list.

    Each argument is a literal formula or a ``Head``/``Spread`` wrapper
    around a schematic sequence that a ``ForAllSeq`` instantiation
    will later expand.
    """

    args: Tuple[Expr, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))
        for arg in self.args:
            if not isinstance(arg, (Formula, Head, Spread)):
                raise TypeError(f"Invalid relation argument: {arg!r}")

    def substitute(self, name, replacement):
        return Relation(tuple(arg.substitute(name, replacement) for arg in self.args))

    def substitute_seq(self, arity, name, formulas):
        return Relation(tuple(mapcat(lambda arg: arg.expand_seq(arity, name, formulas),
                                     self.args)))

    def __str__(self) -> str:
        return "(" + ", ".join(str(arg) for arg in self.args) + ")"


@dataclass(frozen=True)
class Quantifier(Formula):
    """First-order binder shared by ``ForAll`` and ``Exists``."""

    name: ConstName
    body: Formula

    def __post_init__(self) -> None:
        check_name(self.name)
        _require_formula(self.body)

    def substitute(self, name, replacement):
        if self.name == name:
            # the bound occurrence shadows the target
            return self
        return type(self)(self.name, self.body.substitute(name, replacement))

    def substitute_seq(self, arity, name, formulas):
        return type(self)(self.name, self.body.substitute_seq(arity, name, formulas))

    def __str__(self) -> str:
        return f"{type(self).__name__}({name_str(self.name)}, {self.body})"


@dataclass(frozen=True)
class ForAll(Quantifier):
    """Universal quantification."""


@dataclass(frozen=True)
class Exists(Quantifier):
    """Existential quantification."""


@dataclass(frozen=True)
class ForAllSeq(Formula):
    """Schema binder over sequences of exactly ``arity`` formulas."""

    arity: int
    name: ConstName
    body: Formula

    def __post_init__(self) -> None:
        check_arity(self.arity)
        check_name(self.name)
        _require_formula(self.body)

    def substitute(self, name, replacement):
        # first-order substitution never sees schema names
        return ForAllSeq(self.arity, self.name, self.body.substitute(name, replacement))

    def substitute_seq(self, arity, name, formulas):
        if self.arity == arity and self.name == name:
            return self
        return ForAllSeq(self.arity, self.name,
                         self.body.substitute_seq(arity, name, formulas))

    def __str__(self) -> str:
        return f"ForAllSeq(({self.arity}, {name_str(self.name)}), {self.body})"


@dataclass(frozen=True)
class Free(Formula):
    """Reference to a name bound by an enclosing binder."""

    name: ConstName

    def __post_init__(self) -> None:
        check_name(self.name)

    def substitute(self, name, replacement):
        if self.name == name:
            return replacement
        return self

    def substitute_seq(self, arity, name, formulas):
        return self

    def __str__(self) -> str:
        return f"#{name_str(self.name)}"


@dataclass(frozen=True)
class Const(Formula):
    """Reference to a constant declared in the knowledge base."""

    name: ConstName

    def __post_init__(self) -> None:
        check_name(self.name)

    def substitute(self, name, replacement):
        return self

    def substitute_seq(self, arity, name, formulas):
        return self

    def __str__(self) -> str:
        return name_str(self.name)


@dataclass(frozen=True)
class Subst(Formula):
    """Reified substitution: ``body`` with ``name`` replaced by ``replacement``.

    Nothing is replaced until a ``SubstReduce`` step forces it. ``name``
    binds inside ``body`` only, never inside ``replacement``.
    """

    body: Formula
    name: ConstName
    replacement: Formula

    def __post_init__(self) -> None:
        _require_formula(self.body, self.replacement)
        check_name(self.name)

    def substitute(self, name, replacement):
        body = self.body if self.name == name else self.body.substitute(name, replacement)
        return Subst(body, self.name, self.replacement.substitute(name, replacement))

    def substitute_seq(self, arity, name, formulas):
        return Subst(self.body.substitute_seq(arity, name, formulas),
                     self.name,
                     self.replacement.substitute_seq(arity, name, formulas))

    def __str__(self) -> str:
        return f"Subst(({self.body}, {name_str(self.name)}), {self.replacement})"


##############################################################################
# Sequences
##############################################################################


class Seq:
    """Base class for schematic sequences."""

    __slots__ = ()

    def resolve(self, arity: int, name: ConstName,
                formulas: Sequence[Formula]) -> Optional[Tuple[Formula, ...]]:
        """The formulas this sequence denotes once ``(arity, name)`` is
        instantiated, or ``None`` if it refers to another schema variable."""
        raise NotImplementedError

    def arity(self) -> Optional[int]:
        raise NotImplementedError


@dataclass(frozen=True)
class FreeSeq(Seq):
    """A sequence variable bound by ``ForAllSeq(arity, name, ...)``."""

    length: int
    name: ConstName

    def __post_init__(self) -> None:
        check_arity(self.length)
        check_name(self.name)

    def resolve(self, arity, name, formulas):
        if self.length == arity and self.name == name:
            return tuple(formulas)
        return None

    def arity(self) -> Optional[int]:
        return self.length

    def __str__(self) -> str:
        return f"{name_str(self.name)}...{self.length}"


@dataclass(frozen=True)
class Tail(Seq):
    """Everything after the first element of ``seq``."""

    seq: Seq

    def __post_init__(self) -> None:
        if not isinstance(self.seq, Seq):
            raise TypeError(f"Expected a Seq, got {self.seq!r}")

    def resolve(self, arity, name, formulas):
        inner = self.seq.resolve(arity, name, formulas)
        if inner is None:
            return None
        return inner[1:]

    def arity(self) -> Optional[int]:
        inner = self.seq.arity()
        if inner is None or inner == 0:
            return None
        return inner - 1

    def __str__(self) -> str:
        return f"Tail({self.seq})"


##############################################################################
# Relation arguments
##############################################################################


def _require_seq(value) -> None:
    if not isinstance(value, Seq):
        raise TypeError(f"Expected a Seq, got {value!r}")


@dataclass(frozen=True)
class Head:
    """Relation argument standing for the first formula of ``seq``."""

    seq: Seq

    def __post_init__(self) -> None:
        _require_seq(self.seq)

    def substitute(self, name, replacement):
        return self

    def expand_seq(self, arity, name, formulas):
        resolved = self.seq.resolve(arity, name, formulas)
        if resolved is None:
            return (self,)
        return resolved[:1]

    def __str__(self) -> str:
        return f"Head({self.seq})"


@dataclass(frozen=True)
class Spread:
    """Relation argument standing for every formula of ``seq``."""

    seq: Seq

    def __post_init__(self) -> None:
        _require_seq(self.seq)

    def substitute(self, name, replacement):
        return self

    def expand_seq(self, arity, name, formulas):
        resolved = self.seq.resolve(arity, name, formulas)
        if resolved is None:
            return (self,)
        return resolved

    def __str__(self) -> str:
        return f"Seq({self.seq})"


Expr = Union[Formula, Head, Spread]


def relation(*args: Expr) -> Relation:
    return Relation(tuple(args))


def const_relation(*names: ConstName) -> Relation:
    """A relation whose arguments are all declared constants."""
    return Relation(tuple(Const(name) for name in names))


FORMULA_TYPES = (Truth, Falsity, Eq, Iff, And, Or, Implies, Not, Relation,
                 ForAll, Exists, ForAllSeq, Free, Const, Subst)
SEQ_TYPES = (FreeSeq, Tail)
EXPR_WRAPPER_TYPES = (Head, Spread)
