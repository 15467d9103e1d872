"""Scope checking for formulas.

A formula is well-formed relative to a knowledge base when every ``Free``
reference sits under a binder for its name, every ``Const`` is declared
in the knowledge base, and every sequence variable sits under a matching
``ForAllSeq``. The evaluator never calls this; knowledge-base
implementors use it to guard what they store.
"""

import logging

from natded.logic.dispatch import dispatch
from natded.logic.formula import (
    Binary,
    Const,
    Falsity,
    ForAllSeq,
    Free,
    FreeSeq,
    Head,
    Not,
    Quantifier,
    Relation,
    Spread,
    Subst,
    Tail,
    Truth,
)

logger = logging.getLogger(__name__)


def well_formed(formula, kb) -> bool:
    """Check ``formula`` against the constants ``kb`` reports.

    Formulas nested too deeply for the interpreter stack are reported
    as ill-formed rather than raising.
    """
    try:
        return _well_formed(formula, kb, (), ())
    except RecursionError:
        logger.warning("Formula too deeply nested to check; treating it as ill-formed")
        return False


# ``frees`` holds bound first-order names, ``freeseqs`` holds bound
# ``(arity, name)`` pairs. Both are tuples used as persistent stacks;
# a shadowed name simply appears twice.


@dispatch((Truth, Falsity), object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):
    return True


@dispatch(Binary, object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):  # noqa: F811
    return (_well_formed(formula.left, kb, frees, freeseqs)
            and _well_formed(formula.right, kb, frees, freeseqs))


@dispatch(Not, object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):  # noqa: F811
    return _well_formed(formula.body, kb, frees, freeseqs)


@dispatch(Relation, object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):  # noqa: F811
    return all(_well_formed(arg, kb, frees, freeseqs) for arg in formula.args)


@dispatch(Quantifier, object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):  # noqa: F811
    return _well_formed(formula.body, kb, (formula.name,) + frees, freeseqs)


@dispatch(ForAllSeq, object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):  # noqa: F811
    return _well_formed(formula.body, kb, frees,
                        ((formula.arity, formula.name),) + freeseqs)


@dispatch(Free, object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):  # noqa: F811
    return formula.name in frees


@dispatch(Const, object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):  # noqa: F811
    return kb.has_const(formula.name)


@dispatch(Subst, object, tuple, tuple)
def _well_formed(formula, kb, frees, freeseqs):  # noqa: F811
    # the substituted name is bound in the body only
    return (_well_formed(formula.body, kb, (formula.name,) + frees, freeseqs)
            and _well_formed(formula.replacement, kb, frees, freeseqs))


@dispatch((Head, Spread), object, tuple, tuple)
def _well_formed(expr, kb, frees, freeseqs):  # noqa: F811
    return _well_formed(expr.seq, kb, frees, freeseqs)


@dispatch(FreeSeq, object, tuple, tuple)
def _well_formed(seq, kb, frees, freeseqs):  # noqa: F811
    return (seq.length, seq.name) in freeseqs


@dispatch(Tail, object, tuple, tuple)
def _well_formed(seq, kb, frees, freeseqs):  # noqa: F811
    return _well_formed(seq.seq, kb, frees, freeseqs)
