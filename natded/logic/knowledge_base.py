"""Knowledge bases and derivation contexts.

``KnowledgeBase`` is the two-query capability the kernel depends on.
``ResultBase`` is the persistent derivation context the evaluator
builds on top of a root knowledge base. It is a singly-linked chain
of immutable nodes, so any number of hypothetical branches can share
one prefix without copying or mutating it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Protocol, Set, runtime_checkable

from natded.logic.formula import ConstName, Formula, check_name
from natded.logic.wellformed import well_formed
from natded.utils.exceptions import IllFormedFormulaError

logger = logging.getLogger(__name__)


@runtime_checkable
class KnowledgeBase(Protocol):
    """Query interface supplied by whatever stores established theorems.

    Implementors should only answer ``contains`` for formulas that are
    well-formed against their own constants; the kernel trusts them.
    """

    def contains(self, formula: Formula) -> bool:
        """Has this exact formula been established?"""
        ...

    def has_const(self, name: ConstName) -> bool:
        """Has this name been declared?"""
        ...


class ResultBase:
    """A derivation context: a root knowledge base plus derived facts.

    Nodes are never mutated. ``with_formula`` and ``with_const`` return a
    new node pointing at this one. An ``Err`` node is terminal: it answers
    ``False`` to every query and extending it returns it unchanged, so a
    failed branch can never be revived by a later step.
    """

    __slots__ = ()

    @staticmethod
    def of(kb: KnowledgeBase) -> ResultBase:
        """Use ``kb`` as a context, wrapping it in ``Root`` if needed."""
        if isinstance(kb, ResultBase):
            return kb
        return Root(kb)

    def is_err(self) -> bool:
        return False

    @property
    def message(self) -> Optional[str]:
        return None

    def with_formula(self, formula: Formula) -> ResultBase:
        return FormulaNode(formula, self)

    def with_const(self, name: ConstName) -> ResultBase:
        return ConstNode(name, self)

    def contains(self, formula: Formula) -> bool:
        node = self
        while True:
            if isinstance(node, FormulaNode):
                if node.formula == formula:
                    return True
            elif isinstance(node, Root):
                return node.kb.contains(formula)
            elif isinstance(node, Err):
                return False
            node = node.parent

    def has_const(self, name: ConstName) -> bool:
        node = self
        while True:
            if isinstance(node, ConstNode):
                if node.name == name:
                    return True
            elif isinstance(node, Root):
                return node.kb.has_const(name)
            elif isinstance(node, Err):
                return False
            node = node.parent

    def facts(self) -> Iterator[Formula]:
        """Formulas derived in this chain, newest first (the root is not listed)."""
        node = self
        while isinstance(node, (FormulaNode, ConstNode)):
            if isinstance(node, FormulaNode):
                yield node.formula
            node = node.parent

    def constants(self) -> Iterator[ConstName]:
        """Constants declared in this chain, newest first."""
        node = self
        while isinstance(node, (FormulaNode, ConstNode)):
            if isinstance(node, ConstNode):
                yield node.name
            node = node.parent


@dataclass(frozen=True, eq=False)
class Err(ResultBase):
    """A failed derivation, carrying the reason."""

    reason: str

    def is_err(self) -> bool:
        return True

    @property
    def message(self) -> Optional[str]:
        return self.reason

    def with_formula(self, formula: Formula) -> ResultBase:
        return self

    def with_const(self, name: ConstName) -> ResultBase:
        return self

    def __str__(self) -> str:
        return f"Err({self.reason})"


@dataclass(frozen=True, eq=False)
class Root(ResultBase):
    """The base of every chain: delegates to an external knowledge base."""

    kb: KnowledgeBase


@dataclass(frozen=True, eq=False)
class FormulaNode(ResultBase):
    """Asserts ``formula`` on top of ``parent``."""

    formula: Formula
    parent: ResultBase


@dataclass(frozen=True, eq=False)
class ConstNode(ResultBase):
    """Declares the constant ``name`` on top of ``parent``."""

    name: ConstName
    parent: ResultBase


class MemoryKnowledgeBase:
    """In-memory knowledge base holding declared constants and theorems.

    Theorems are checked for well-formedness against the declared
    constants on insertion, so ``contains`` only ever answers ``True``
    for well-formed formulas.
    """

    def __init__(self, constants: Iterable[ConstName] = (),
                 theorems: Iterable[Formula] = (),
                 check_well_formed: bool = True) -> None:
        self.check_well_formed = check_well_formed
        self._constants: Set[ConstName] = set()
        self._theorems: Set[Formula] = set()
        for name in constants:
            self.declare(name)
        for theorem in theorems:
            self.add_theorem(theorem)

    def declare(self, name: ConstName) -> None:
        check_name(name)
        self._constants.add(name)

    def add_theorem(self, formula: Formula) -> None:
        """Record ``formula`` as established.

        Raises:
            IllFormedFormulaError: If well-formedness checking is on and
                ``formula`` mentions an unbound or undeclared name.
        """
        if not isinstance(formula, Formula):
            raise TypeError(f"Expected a Formula, got {formula!r}")
        if self.check_well_formed and not well_formed(formula, self):
            logger.debug("Rejected ill-formed theorem %s", formula)
            raise IllFormedFormulaError(f"Theorem is not well-formed: {formula}")
        self._theorems.add(formula)

    def contains(self, formula: Formula) -> bool:
        return formula in self._theorems

    def has_const(self, name: ConstName) -> bool:
        return name in self._constants

    @property
    def theorems(self) -> Set[Formula]:
        return set(self._theorems)

    @property
    def constants(self) -> Set[ConstName]:
        return set(self._constants)

    def __len__(self) -> int:
        return len(self._theorems)

    def __repr__(self) -> str:
        return (f"MemoryKnowledgeBase(constants={len(self._constants)}, "
                f"theorems={len(self._theorems)})")
