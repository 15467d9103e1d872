"""Tests for the formula algebra and its substitution operations."""

import pytest

from natded.logic.formula import (
    FALSE,
    TRUE,
    And,
    Const,
    Eq,
    Exists,
    ForAll,
    ForAllSeq,
    Free,
    FreeSeq,
    Head,
    Iff,
    Implies,
    Not,
    Or,
    Relation,
    Spread,
    Subst,
    Tail,
    const_relation,
    relation,
)

p, q, r = Const("p"), Const("q"), Const("r")
x, y = Free("x"), Free("y")


def test_structural_equality_and_hash():
    assert And(p, x) == And(Const("p"), Free("x"))
    assert hash(And(p, x)) == hash(And(Const("p"), Free("x")))
    assert And(p, q) != Or(p, q)
    assert Eq(p, q) != Iff(p, q)
    assert len({Implies(p, q), Implies(Const("p"), Const("q"))}) == 1


def test_no_alpha_equivalence():
    assert ForAll("x", x) != ForAll("y", y)
    assert Exists("x", Not(x)) != Exists("y", Not(y))


def test_text_and_numeric_names_are_distinct():
    assert Const("1") != Const(1)
    assert Free(0) != Free("0")


def test_invalid_names_rejected():
    with pytest.raises(TypeError):
        Const(True)
    with pytest.raises(TypeError):
        ForAll(1.5, TRUE)
    with pytest.raises(TypeError):
        And(p, "q")


def test_schema_arity_must_be_non_negative():
    with pytest.raises(ValueError):
        ForAllSeq(-1, "xs", TRUE)
    with pytest.raises(ValueError):
        FreeSeq(-2, "xs")


def test_relation_args_are_tuples():
    rel = Relation([p, q])
    assert rel.args == (p, q)
    assert rel == relation(p, q) == const_relation("p", "q")
    with pytest.raises(TypeError):
        Relation([p, "q"])


def test_substitute_replaces_free_occurrences():
    formula = And(x, Implies(y, x))
    assert formula.substitute("x", p) == And(p, Implies(y, p))


def test_substitute_leaves_constants_alone():
    formula = Or(Const("x"), x)
    assert formula.substitute("x", q) == Or(Const("x"), q)


def test_substitution_identity_without_occurrence():
    formula = ForAll("y", Implies(Relation((p, y)), Exists("z", Eq(Free("z"), r))))
    assert formula.substitute("c", Not(q)) == formula


def test_binder_shadows_its_name():
    inner = ForAll("x", And(x, y))
    assert inner.substitute("x", p) is inner
    assert inner.substitute("y", p) == ForAll("x", And(x, p))
    outer = And(x, Exists("x", x))
    assert outer.substitute("x", q) == And(q, Exists("x", x))


def test_forall_seq_is_transparent_to_first_order_substitution():
    schema = ForAllSeq(2, "x", Relation((x, Spread(FreeSeq(2, "x")))))
    assert schema.substitute("x", p) == ForAllSeq(2, "x", Relation((p, Spread(FreeSeq(2, "x")))))


def test_subst_binds_name_in_body_only():
    reified = Subst(And(x, y), "x", Or(x, y))
    assert reified.substitute("x", p) == Subst(And(x, y), "x", Or(p, y))
    assert reified.substitute("y", q) == Subst(And(x, q), "x", Or(x, q))


def test_substitute_relation_skips_sequence_wrappers():
    seq = Spread(FreeSeq(1, "xs"))
    assert Relation((x, seq)).substitute("x", p) == Relation((p, seq))


def test_substitute_seq_spreads_formulas():
    xs = FreeSeq(3, "xs")
    body = Relation((Const("f"), Spread(xs)))
    assert body.substitute_seq(3, "xs", (p, q, r)) == Relation((Const("f"), p, q, r))


def test_substitute_seq_head_and_tail():
    xs = FreeSeq(2, "xs")
    body = Relation((Head(xs), Head(Tail(xs)), Spread(Tail(xs))))
    assert body.substitute_seq(2, "xs", (p, q)) == Relation((p, q, q))


def test_head_of_exhausted_sequence_expands_to_nothing():
    xs = FreeSeq(1, "xs")
    body = Relation((Const("f"), Head(Tail(xs)), Spread(Tail(xs))))
    assert body.substitute_seq(1, "xs", (p,)) == Relation((Const("f"),))


def test_substitute_seq_ignores_other_schema_variables():
    other = Relation((Spread(FreeSeq(2, "ys")), Head(FreeSeq(3, "xs"))))
    assert other.substitute_seq(2, "xs", (p, q)) == other


def test_substitute_seq_shadowed_by_matching_schema_binder():
    inner = ForAllSeq(2, "xs", Relation((Spread(FreeSeq(2, "xs")),)))
    formula = And(Relation((Spread(FreeSeq(2, "xs")),)), inner)
    assert formula.substitute_seq(2, "xs", (p, q)) == And(Relation((p, q)), inner)


def test_substitute_seq_passes_through_other_binders():
    xs = Spread(FreeSeq(1, "xs"))
    formula = ForAll("x", Subst(Relation((xs, x)), "y", Not(Relation((xs,)))))
    expected = ForAll("x", Subst(Relation((p, x)), "y", Not(Relation((p,)))))
    assert formula.substitute_seq(1, "xs", (p,)) == expected
    different_arity = ForAllSeq(1, "xs", Relation((xs,)))
    assert ForAllSeq(2, "xs", different_arity).substitute_seq(1, "xs", (q,)) == \
        ForAllSeq(2, "xs", different_arity)


def test_seq_arity():
    xs = FreeSeq(1, "xs")
    assert xs.arity() == 1
    assert Tail(xs).arity() == 0
    assert Tail(Tail(xs)).arity() is None


def test_rendering():
    assert str(And(p, x)) == 'And("p", #"x")'
    assert str(Free(3)) == "#'3'"
    assert str(ForAllSeq(2, "xs", TRUE)) == 'ForAllSeq((2, "xs"), true)'
    assert str(Relation((Const("f"), Spread(FreeSeq(2, "xs"))))) == '("f", Seq("xs"...2))'
    assert str(Subst(x, "x", FALSE)) == 'Subst((#"x", "x"), false)'
    assert str(Head(Tail(FreeSeq(1, "xs")))) == 'Head(Tail("xs"...1))'
