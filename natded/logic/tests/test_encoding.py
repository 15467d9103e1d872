import json

from natded.tests import TestCase, atoms, main
from natded.logic.deduction import (
    Branch,
    EmptyStep,
    ForAllSeqExtract,
    ImplyExtract,
    Let,
    OrExtract,
    Sequence,
)
from natded.logic.encoding import dumps, from_data, loads, to_data
from natded.logic.formula import (
    FALSE,
    TRUE,
    And,
    Const,
    ForAllSeq,
    Free,
    FreeSeq,
    Head,
    Implies,
    Relation,
    Spread,
    Subst,
    Tail,
)
from natded.utils.exceptions import EncodingError

p, q, r = atoms("p", "q", "r")


class TestEncoding(TestCase):
    def test_formula_layout(self) -> None:
        self.assertEqual(to_data(And(p, Free(0))), {
            "kind": "And",
            "left": {"kind": "Const", "name": "p"},
            "right": {"kind": "Free", "name": 0},
        })
        self.assertEqual(to_data(TRUE), {"kind": "Truth"})

    def test_formulas_survive_round_trip(self) -> None:
        xs = FreeSeq(2, "xs")
        formulas = [
            Implies(p, FALSE),
            Subst(Free("x"), "x", Const(7)),
            ForAllSeq(2, "xs", Relation((Const("f"), Spread(xs), Head(Tail(xs))))),
        ]
        for formula in formulas:
            self.assertEqual(loads(dumps(formula)), formula)

    def test_singletons_decode_to_themselves(self) -> None:
        self.assertIs(from_data({"kind": "Truth"}), TRUE)
        self.assertIs(loads(dumps(FALSE)), FALSE)

    def test_numeric_and_text_names_stay_distinct(self) -> None:
        self.assertEqual(loads(dumps(Const(1))), Const(1))
        self.assertEqual(loads(dumps(Const("1"))), Const("1"))
        self.assertNotEqual(loads(dumps(Const(1))), Const("1"))

    def test_deductions_survive_round_trip(self) -> None:
        proof = Sequence([
            Let("f", ["x", "y"], And(Free("x"), Free("y"))),
            OrExtract(Branch(p, ImplyExtract(p, r)), Branch(q, ImplyExtract(q, r)), r),
            ForAllSeqExtract(2, "xs", Relation((Spread(FreeSeq(2, "xs")),)), [p, q]),
            EmptyStep(),
        ])
        decoded = loads(dumps(proof))
        self.assertEqual(decoded, proof)
        self.assertIsInstance(decoded.steps, tuple)

    def test_unknown_kind(self) -> None:
        with self.assertRaises(EncodingError):
            from_data({"kind": "Xor", "left": p, "right": q})
        with self.assertRaises(EncodingError):
            from_data({"name": "p"})

    def test_field_set_must_match(self) -> None:
        with self.assertRaises(EncodingError):
            from_data({"kind": "Const"})
        with self.assertRaises(EncodingError):
            from_data({"kind": "Const", "name": "p", "arity": 1})
        with self.assertRaises(EncodingError):
            from_data({"kind": "Truth", "value": True})

    def test_rejects_foreign_values(self) -> None:
        for value in (True, None, 1.5):
            with self.assertRaises(EncodingError):
                from_data({"kind": "Const", "name": value})
        with self.assertRaises(EncodingError):
            to_data(True)
        with self.assertRaises(EncodingError):
            to_data(object())

    def test_constructor_errors_are_wrapped(self) -> None:
        with self.assertRaises(EncodingError):
            from_data({"kind": "And", "left": "p", "right": "q"})
        with self.assertRaises(EncodingError):
            from_data({"kind": "FreeSeq", "length": -1, "name": "xs"})

    def test_invalid_json(self) -> None:
        with self.assertRaises(EncodingError):
            loads("{\"kind\": ")

    def test_too_deep_values_raise_encoding_error(self) -> None:
        proof = EmptyStep()
        for _ in range(5000):
            proof = Sequence([proof])
        with self.assertRaises(EncodingError):
            dumps(proof)
        with self.assertRaises(EncodingError):
            to_data(proof)

    def test_too_deep_data_raises_encoding_error(self) -> None:
        data = {"kind": "EmptyStep"}
        for _ in range(5000):
            data = {"kind": "Sequence", "steps": [data]}
        with self.assertRaises(EncodingError):
            from_data(data)
        with self.assertRaises(EncodingError):
            loads("[" * 100000 + "]" * 100000)

    def test_dumps_passes_json_options(self) -> None:
        text = dumps(p, sort_keys=True)
        self.assertEqual(json.loads(text), {"kind": "Const", "name": "p"})
        self.assertEqual(text, '{"kind": "Const", "name": "p"}')


if __name__ == "__main__":
    main()
