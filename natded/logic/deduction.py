"""Deductions and the rule evaluator.

A ``Deduction`` describes one inference rule application, or a
``Sequence`` of them. Nested ``Work`` values are hypothetical
sub-derivations checked against a context extended with an assumption.
Evaluation is a pure function from a context and a rule to a new
context. A rule whose precondition fails yields an ``Err`` context
naming the rule and the formulas involved. Nothing here raises for
a bad proof.

Example:
    >>> from natded.logic import Const, Implies, ImplyIntro, EmptyStep
    >>> from natded.logic import MemoryKnowledgeBase
    >>> a = Const("a")
    >>> ImplyIntro(a, a, EmptyStep()).deduced(MemoryKnowledgeBase(), Implies(a, a))
    True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from functools import lru_cache, reduce
from typing import Callable, Dict, Tuple

from natded.global_params import global_config
from natded.logic.dispatch import dispatch
from natded.logic.formula import (
    FALSE,
    And,
    ConstName,
    Const,
    Eq,
    Exists,
    ForAll,
    ForAllSeq,
    Formula,
    Free,
    Iff,
    Implies,
    Not,
    Or,
    Relation,
    Subst,
    check_arity,
    is_const_name,
)
from natded.logic.knowledge_base import Err, KnowledgeBase, ResultBase

logger = logging.getLogger(__name__)


##############################################################################
# Rule variants
##############################################################################


def _is_formula_tuple(value) -> bool:
    return isinstance(value, tuple) and all(isinstance(v, Formula) for v in value)


def _is_name_tuple(value) -> bool:
    return isinstance(value, tuple) and all(is_const_name(v) for v in value)


def _is_work_tuple(value) -> bool:
    return isinstance(value, tuple) and all(isinstance(v, Deduction) for v in value)


def _is_arity(value) -> bool:
    try:
        check_arity(value)
    except (TypeError, ValueError):
        return False
    return True


# Field annotations are strings under ``from __future__ import annotations``.
_FIELD_CHECKS: Dict[str, Callable[[object], bool]] = {
    "Formula": lambda v: isinstance(v, Formula),
    "Work": lambda v: isinstance(v, Deduction),
    "Branch": lambda v: isinstance(v, Branch),
    "ConstName": is_const_name,
    "int": _is_arity,
    "Tuple[Formula, ...]": _is_formula_tuple,
    "Tuple[ConstName, ...]": _is_name_tuple,
    "Tuple[Work, ...]": _is_work_tuple,
}


@lru_cache(maxsize=None)
def _field_types(cls) -> Tuple[Tuple[str, str], ...]:
    return tuple((f.name, f.type) for f in fields(cls))


class Deduction:
    """Base class for inference rules."""

    __slots__ = ()

    def __post_init__(self) -> None:
        for name, annotation in _field_types(type(self)):
            value = getattr(self, name)
            if isinstance(value, list):
                value = tuple(value)
                object.__setattr__(self, name, value)
            if not _FIELD_CHECKS[annotation](value):
                raise TypeError(f"{type(self).__name__}.{name}: invalid value {value!r}")

    def apply(self, kb: KnowledgeBase) -> ResultBase:
        """Evaluate this deduction on top of ``kb``."""
        return apply_work(self, ResultBase.of(kb))

    def deduced(self, kb: KnowledgeBase, theorem: Formula) -> bool:
        """Does this deduction, applied to ``kb``, establish ``theorem``?"""
        result = self.apply(kb)
        try:
            return result.contains(theorem)
        except RecursionError:
            logger.warning("%s: recursion limit exhausted while looking up theorem",
                           type(self).__name__)
            return False


Work = Deduction


@dataclass(frozen=True)
class Branch:
    """An assumption together with the work that discharges it."""

    assumption: Formula
    work: Work

    def __post_init__(self) -> None:
        if not isinstance(self.assumption, Formula):
            raise TypeError(f"Branch.assumption: invalid value {self.assumption!r}")
        if not isinstance(self.work, Deduction):
            raise TypeError(f"Branch.work: invalid value {self.work!r}")


@dataclass(frozen=True)
class EmptyStep(Deduction):
    """Does nothing."""


@dataclass(frozen=True)
class AndIntro(Deduction):
    left: Formula
    right: Formula


@dataclass(frozen=True)
class AndExtract(Deduction):
    left: Formula
    right: Formula


@dataclass(frozen=True)
class OrIntro(Deduction):
    left: Formula
    right: Formula


@dataclass(frozen=True)
class OrExtract(Deduction):
    """Case analysis on ``left.assumption | right.assumption``."""

    left: Branch
    right: Branch
    conclusion: Formula


@dataclass(frozen=True)
class ImplyIntro(Deduction):
    antecedent: Formula
    consequent: Formula
    work: Work


@dataclass(frozen=True)
class ImplyExtract(Deduction):
    antecedent: Formula
    consequent: Formula


@dataclass(frozen=True)
class NotIntro(Deduction):
    formula: Formula
    work: Work


@dataclass(frozen=True)
class NotExtract(Deduction):
    formula: Formula


@dataclass(frozen=True)
class IffIntro(Deduction):
    """Each branch's work proves the other branch's assumption."""

    left: Branch
    right: Branch


@dataclass(frozen=True)
class IffExtract(Deduction):
    left: Formula
    right: Formula


@dataclass(frozen=True)
class EqualityIntro(Deduction):
    formula: Formula


@dataclass(frozen=True)
class Substitution(Deduction):
    """From ``left == right`` and ``template[name := left]`` conclude
    ``template[name := right]``."""

    left: Formula
    right: Formula
    name: ConstName
    template: Formula


@dataclass(frozen=True)
class SubstReduce(Deduction):
    """Force an established ``Subst(body, name, replacement)``."""

    body: Formula
    name: ConstName
    replacement: Formula


@dataclass(frozen=True)
class ForAllIntro(Deduction):
    name: ConstName
    body: Formula
    work: Work


@dataclass(frozen=True)
class ForAllExtract(Deduction):
    name: ConstName
    body: Formula
    term: Formula


@dataclass(frozen=True)
class ForAllSeqExtract(Deduction):
    arity: int
    name: ConstName
    body: Formula
    terms: Tuple[Formula, ...]


@dataclass(frozen=True)
class ExistsIntro(Deduction):
    name: ConstName
    body: Formula
    witness: Formula


@dataclass(frozen=True)
class ExistsExtract(Deduction):
    name: ConstName
    body: Formula
    fresh: ConstName


@dataclass(frozen=True)
class Let(Deduction):
    """Define a new constant ``name`` (an n-ary relation when ``params``
    is non-empty) equal to ``body``."""

    name: ConstName
    params: Tuple[ConstName, ...]
    body: Formula


@dataclass(frozen=True)
class Sequence(Deduction):
    steps: Tuple[Work, ...]


DEDUCTION_TYPES = (EmptyStep, AndIntro, AndExtract, OrIntro, OrExtract, ImplyIntro,
                   ImplyExtract, NotIntro, NotExtract, IffIntro, IffExtract,
                   EqualityIntro, Substitution, SubstReduce, ForAllIntro,
                   ForAllExtract, ForAllSeqExtract, ExistsIntro, ExistsExtract,
                   Let, Sequence)


##############################################################################
# Evaluation
##############################################################################


def apply_work(work: Work, context: ResultBase) -> ResultBase:
    """Evaluate ``work`` against ``context``."""
    try:
        return _evaluate(work, context, 0)
    except RecursionError:
        logger.warning("%s: recursion limit exhausted while checking proof",
                       type(work).__name__)
        return Err(f"{type(work).__name__}: proof or formula nesting exhausted "
                   f"the interpreter recursion limit")


def _descend(work: Work, context: ResultBase, depth: int) -> ResultBase:
    if depth >= global_config.max_proof_depth:
        logger.warning("%s: proof nesting exceeds maximum proof depth %d",
                       type(work).__name__, global_config.max_proof_depth)
        return Err(f"{type(work).__name__}: exceeds maximum proof depth "
                   f"{global_config.max_proof_depth}")
    return _evaluate(work, context, depth + 1)


def _fail(rule: Deduction, message: str) -> Err:
    logger.debug("%s failed: %s", type(rule).__name__, message)
    return Err(f"{type(rule).__name__}: {message}")


def _because(result: ResultBase) -> str:
    if result.is_err():
        return f" ({result.message})"
    return ""


@dispatch(EmptyStep, ResultBase, int)
def _evaluate(rule, context, depth):
    return context


@dispatch(AndIntro, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    has_left = context.contains(rule.left)
    has_right = context.contains(rule.right)
    if has_left and has_right:
        return context.with_formula(And(rule.left, rule.right))
    if not has_left:
        return _fail(rule, f"did not deduce f1 = {rule.left}")
    return _fail(rule, f"did not deduce f2 = {rule.right}")


@dispatch(AndExtract, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    conj = And(rule.left, rule.right)
    if context.contains(conj):
        return context.with_formula(rule.left).with_formula(rule.right)
    return _fail(rule, f"did not deduce f1&f2 = {conj}")


@dispatch(OrIntro, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    if context.contains(rule.left) or context.contains(rule.right):
        return context.with_formula(Or(rule.left, rule.right))
    return _fail(rule, f"deduced neither f1 = {rule.left} nor f2 = {rule.right}")


@dispatch(OrExtract, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    left, right = rule.left, rule.right
    disj = Or(left.assumption, right.assumption)
    if not context.contains(disj):
        return _fail(rule, f"did not deduce f1|f2 = {disj}")
    left_result = _descend(left.work, context.with_formula(left.assumption), depth)
    if not left_result.contains(rule.conclusion):
        return _fail(rule, f"did not deduce f1->f3 = {left.assumption} -> "
                           f"{rule.conclusion}{_because(left_result)}")
    right_result = _descend(right.work, context.with_formula(right.assumption), depth)
    if not right_result.contains(rule.conclusion):
        return _fail(rule, f"did not deduce f2->f3 = {right.assumption} -> "
                           f"{rule.conclusion}{_because(right_result)}")
    return context.with_formula(rule.conclusion)


@dispatch(ImplyIntro, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    result = _descend(rule.work, context.with_formula(rule.antecedent), depth)
    if result.contains(rule.consequent):
        return context.with_formula(Implies(rule.antecedent, rule.consequent))
    return _fail(rule, f"did not deduce f2 = {rule.consequent} from "
                       f"f1 = {rule.antecedent}{_because(result)}")


@dispatch(ImplyExtract, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    implication = Implies(rule.antecedent, rule.consequent)
    if not context.contains(implication):
        return _fail(rule, f"did not deduce f1->f2 = {implication}")
    if not context.contains(rule.antecedent):
        return _fail(rule, f"did not deduce f1 = {rule.antecedent}")
    return context.with_formula(rule.consequent)


@dispatch(NotIntro, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    result = _descend(rule.work, context.with_formula(rule.formula), depth)
    if result.contains(FALSE):
        return context.with_formula(Not(rule.formula))
    return _fail(rule, f"no contradiction reached assuming {rule.formula}{_because(result)}")


@dispatch(NotExtract, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    if context.contains(rule.formula) and context.contains(Not(rule.formula)):
        return context.with_formula(FALSE)
    return _fail(rule, f"no contradiction: did not deduce both {rule.formula} "
                       f"and {Not(rule.formula)}")


@dispatch(IffIntro, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    left, right = rule.left, rule.right
    forward = _descend(left.work, context.with_formula(left.assumption), depth)
    if not forward.contains(right.assumption):
        return _fail(rule, f"did not deduce f1->f2 = {left.assumption} -> "
                           f"{right.assumption}{_because(forward)}")
    backward = _descend(right.work, context.with_formula(right.assumption), depth)
    if not backward.contains(left.assumption):
        return _fail(rule, f"did not deduce f2->f1 = {right.assumption} -> "
                           f"{left.assumption}{_because(backward)}")
    return context.with_formula(Iff(left.assumption, right.assumption))


@dispatch(IffExtract, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    iff = Iff(rule.left, rule.right)
    if not context.contains(iff):
        return _fail(rule, f"did not deduce f1<=>f2 = {iff}")
    if context.contains(rule.left):
        return context.with_formula(rule.right)
    if context.contains(rule.right):
        return context.with_formula(rule.left)
    return _fail(rule, f"deduced neither f1 = {rule.left} nor f2 = {rule.right}")


@dispatch(EqualityIntro, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    return context.with_formula(Eq(rule.formula, rule.formula))


@dispatch(Substitution, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    equation = Eq(rule.left, rule.right)
    if not context.contains(equation):
        return _fail(rule, f"did not deduce f1 == f2 = {equation}")
    before = rule.template.substitute(rule.name, rule.left)
    if not context.contains(before):
        return _fail(rule, f"did not deduce {before}")
    return context.with_formula(rule.template.substitute(rule.name, rule.right))


@dispatch(SubstReduce, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    theorem = Subst(rule.body, rule.name, rule.replacement)
    if context.contains(theorem):
        return context.with_formula(rule.body.substitute(rule.name, rule.replacement))
    return _fail(rule, f"did not deduce theorem {theorem}")


@dispatch(ForAllIntro, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    if context.has_const(rule.name):
        return _fail(rule, f"cannot redefine constant {rule.name!r}")
    instance = rule.body.substitute(rule.name, Const(rule.name))
    result = _descend(rule.work, context.with_const(rule.name), depth)
    if result.contains(instance):
        return context.with_formula(ForAll(rule.name, rule.body))
    return _fail(rule, f"did not deduce formula {instance}{_because(result)}")


@dispatch(ForAllExtract, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    universal = ForAll(rule.name, rule.body)
    if context.contains(universal):
        return context.with_formula(rule.body.substitute(rule.name, rule.term))
    return _fail(rule, f"did not deduce formula {universal}")


@dispatch(ForAllSeqExtract, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    if len(rule.terms) != rule.arity:
        return _fail(rule, f"expected {rule.arity} terms for sequence variable "
                           f"{rule.name!r}, got {len(rule.terms)}")
    schema = ForAllSeq(rule.arity, rule.name, rule.body)
    if context.contains(schema):
        return context.with_formula(
            rule.body.substitute_seq(rule.arity, rule.name, rule.terms))
    return _fail(rule, f"did not deduce formula {schema}")


@dispatch(ExistsIntro, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    instance = rule.body.substitute(rule.name, rule.witness)
    if context.contains(instance):
        return context.with_formula(Exists(rule.name, rule.body))
    return _fail(rule, f"did not deduce formula {instance}")


@dispatch(ExistsExtract, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    if context.has_const(rule.fresh):
        return _fail(rule, f"cannot redefine constant {rule.fresh!r}")
    existential = Exists(rule.name, rule.body)
    if not context.contains(existential):
        return _fail(rule, f"did not deduce formula {existential}")
    instance = rule.body.substitute(rule.name, Const(rule.fresh))
    return context.with_const(rule.fresh).with_formula(instance)


@dispatch(Let, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    if context.has_const(rule.name):
        return _fail(rule, f"cannot redefine constant {rule.name!r}")
    if rule.params:
        head = Relation((Const(rule.name),) + tuple(Free(v) for v in rule.params))
        definition = reduce(lambda acc, v: ForAll(v, acc),
                            reversed(rule.params), Eq(head, rule.body))
    else:
        definition = Eq(Const(rule.name), rule.body)
    return context.with_const(rule.name).with_formula(definition)


@dispatch(Sequence, ResultBase, int)
def _evaluate(rule, context, depth):  # noqa: F811
    # every step runs, even after a failure: the last failing step's
    # message is the one that surfaces
    for step in rule.steps:
        context = _descend(step, context, depth)
    return context
