"""
The natural-deduction proof kernel.

This package provides:

- `formula`: the immutable formula algebra and its two substitution
  operations (first-order and sequence-schema).
- `knowledge_base`: the ``KnowledgeBase`` query capability, the persistent
  ``ResultBase`` derivation context and an in-memory knowledge base.
- `deduction`: the closed set of inference rules and their evaluator.
- `wellformed`: scope checking used to guard what knowledge bases store.
- `encoding`: a stable dict/JSON encoding for formulas and deductions.

Example:
    >>> from natded.logic import And, Const, AndIntro, MemoryKnowledgeBase
    >>> p, q = Const("p"), Const("q")
    >>> kb = MemoryKnowledgeBase(constants=["p", "q"], theorems=[p, q])
    >>> AndIntro(p, q).deduced(kb, And(p, q))
    True
"""

from .formula import (
    FALSE,
    TRUE,
    And,
    ConstName,
    Const,
    Eq,
    Exists,
    Expr,
    Falsity,
    ForAll,
    ForAllSeq,
    Formula,
    Free,
    FreeSeq,
    Head,
    Iff,
    Implies,
    Not,
    Or,
    Relation,
    Seq,
    Spread,
    Subst,
    Tail,
    Truth,
    const_relation,
    relation,
)
from .knowledge_base import (
    ConstNode,
    Err,
    FormulaNode,
    KnowledgeBase,
    MemoryKnowledgeBase,
    ResultBase,
    Root,
)
from .wellformed import well_formed
from .deduction import (
    AndExtract,
    AndIntro,
    Branch,
    Deduction,
    EmptyStep,
    EqualityIntro,
    ExistsExtract,
    ExistsIntro,
    ForAllExtract,
    ForAllIntro,
    ForAllSeqExtract,
    IffExtract,
    IffIntro,
    ImplyExtract,
    ImplyIntro,
    Let,
    NotExtract,
    NotIntro,
    OrExtract,
    OrIntro,
    Sequence,
    SubstReduce,
    Substitution,
    Work,
    apply_work,
)
from .encoding import dumps, from_data, loads, to_data
