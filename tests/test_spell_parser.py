"""Spell parser tests.

Covers clause extraction, enum validation, bind/seal chaining and
script-level privileged keyword detection.
"""

import unittest

from aethercast_core import AnchorType, Focus, ShiftDirection, SpellParser, SpellSyntaxError, parse_spell


BASIC = """focus: Probability
anchor: Self
shift: +15%
cost: 30E
intent: "Increase odds of favorable outcome"
seal"""


class SpellParserTest(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = SpellParser()

    def test_parses_single_spell(self) -> None:
        spells = self.parser.parse(BASIC)

        self.assertEqual(len(spells), 1)
        spell = spells[0]
        self.assertEqual(spell.focus, Focus.PROBABILITY)
        self.assertEqual(spell.anchor.type, AnchorType.SELF)
        self.assertEqual(spell.anchor.params, {})
        self.assertEqual(spell.shift.direction, ShiftDirection.INCREASE)
        self.assertEqual(spell.shift.amount, 15)
        self.assertEqual(spell.cost, 30)
        self.assertEqual(spell.intent, "Increase odds of favorable outcome")
        self.assertFalse(spell.is_bound)
        self.assertTrue(spell.is_sealed)
        self.assertFalse(spell.uses_hidden_protocol)
        self.assertEqual(spell.protocol_keywords, [])

    def test_clause_order_is_irrelevant(self) -> None:
        source = """
        intent: "Slow things down"

        shift:   -40%
        cost: 5E
        anchor: Object
        focus: Time
        seal
        """
        spell = self.parser.parse(source)[0]

        self.assertEqual(spell.focus, Focus.TIME)
        self.assertEqual(spell.anchor.type, AnchorType.OBJECT)
        self.assertEqual(spell.shift.direction, ShiftDirection.DECREASE)
        self.assertEqual(spell.shift.amount, 40)
        self.assertEqual(spell.signed_shift, -40)

    def test_anchor_params_are_coerced(self) -> None:
        source = BASIC.replace("anchor: Self", "anchor: Zone(radius: 5, label:north, depth:2.5)")
        anchor = self.parser.parse(source)[0].anchor

        self.assertEqual(anchor.type, AnchorType.ZONE)
        self.assertEqual(anchor.params["radius"], 5)
        self.assertIsInstance(anchor.params["radius"], float)
        self.assertEqual(anchor.params["label"], "north")
        self.assertEqual(anchor.params["depth"], 2.5)
        self.assertEqual(anchor.radius, 5.0)

    def test_missing_anchor_names_clause(self) -> None:
        source = BASIC.replace("anchor: Self\n", "")

        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(source)

        self.assertEqual(ctx.exception.clause, "anchor")
        self.assertIn("anchor", str(ctx.exception))

    def test_invalid_focus_lists_valid_values(self) -> None:
        source = BASIC.replace("focus: Probability", "focus: Gravity")

        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(source)

        self.assertEqual(ctx.exception.clause, "focus")
        self.assertEqual(ctx.exception.valid_values, ("Energy", "Probability", "Entropy", "Time"))
        self.assertIn("Energy, Probability, Entropy, Time", str(ctx.exception))

    def test_invalid_anchor_type(self) -> None:
        source = BASIC.replace("anchor: Self", "anchor: Planet(radius:3)")

        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(source)

        self.assertEqual(ctx.exception.clause, "anchor")
        self.assertIn("Self, Object, Zone", str(ctx.exception))

    def test_malformed_anchor_param(self) -> None:
        source = BASIC.replace("anchor: Self", "anchor: Zone(radius)")

        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(source)
        self.assertEqual(ctx.exception.clause, "anchor")

    def test_malformed_shift(self) -> None:
        for bad in ("15%", "+15", "+abc%", "*15%"):
            with self.subTest(shift=bad):
                with self.assertRaises(SpellSyntaxError) as ctx:
                    self.parser.parse(BASIC.replace("+15%", bad))
                self.assertEqual(ctx.exception.clause, "shift")

    def test_out_of_range_anchor_number_fails(self) -> None:
        for bad in ("radius:1e309", "radius:-1e309", "radius:1e10", "depth:" + "9" * 400):
            with self.subTest(param=bad):
                source = BASIC.replace("anchor: Self", f"anchor: Zone({bad})")
                with self.assertRaises(SpellSyntaxError) as ctx:
                    self.parser.parse(source)
                self.assertEqual(ctx.exception.clause, "anchor")

    def test_oversized_shift_fails(self) -> None:
        for bad in ("+1000000001%", "-" + "9" * 400 + "%", "+" + "9" * 5000 + "%"):
            with self.subTest(shift=bad[:12]):
                with self.assertRaises(SpellSyntaxError) as ctx:
                    self.parser.parse(BASIC.replace("+15%", bad))
                self.assertEqual(ctx.exception.clause, "shift")

    def test_largest_shift_and_leading_zeros_accepted(self) -> None:
        self.assertEqual(self.parser.parse(BASIC.replace("+15%", "+1000000000%"))[0].shift.amount, 10**9)
        self.assertEqual(self.parser.parse(BASIC.replace("+15%", "+" + "0" * 50 + "15%"))[0].shift.amount, 15)

    def test_oversized_cost_fails(self) -> None:
        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(BASIC.replace("30E", "9" * 5000 + "E"))
        self.assertEqual(ctx.exception.clause, "cost")

    def test_missing_cost(self) -> None:
        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(BASIC.replace("cost: 30E\n", ""))
        self.assertEqual(ctx.exception.clause, "cost")

    def test_malformed_cost(self) -> None:
        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(BASIC.replace("30E", "thirty"))
        self.assertEqual(ctx.exception.clause, "cost")

    def test_intent_must_be_quoted_and_non_empty(self) -> None:
        for bad in ('intent: Increase odds', 'intent: ""', 'intent: "   "'):
            with self.subTest(intent=bad):
                source = BASIC.replace('intent: "Increase odds of favorable outcome"', bad)
                with self.assertRaises(SpellSyntaxError) as ctx:
                    self.parser.parse(source)
                self.assertEqual(ctx.exception.clause, "intent")

    def test_duplicate_clause_fails(self) -> None:
        source = BASIC.replace("focus: Probability", "focus: Probability\nfocus: Energy")

        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(source)
        self.assertEqual(ctx.exception.clause, "focus")

    def test_unsealed_script_fails(self) -> None:
        source = BASIC.replace("\nseal", "")

        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(source)
        self.assertIn("sealed", str(ctx.exception))

    def test_empty_script_fails(self) -> None:
        with self.assertRaises(SpellSyntaxError):
            self.parser.parse("   \n  ")

    def test_bind_chains_segments(self) -> None:
        first = BASIC.replace("\nseal", "")
        second = BASIC.replace("focus: Probability", "focus: Energy")
        spells = self.parser.parse(f"{first}\nbind\n{second}")

        self.assertEqual(len(spells), 2)
        self.assertTrue(spells[0].is_bound)
        self.assertFalse(spells[0].is_sealed)
        self.assertFalse(spells[1].is_bound)
        self.assertTrue(spells[1].is_sealed)
        self.assertEqual(spells[1].focus, Focus.ENERGY)

    def test_chain_without_final_seal_fails(self) -> None:
        first = BASIC.replace("\nseal", "")
        with self.assertRaises(SpellSyntaxError):
            self.parser.parse(f"{first}\nbind\n{first}")

    def test_trailing_bind_leaves_script_unsealed(self) -> None:
        first = BASIC.replace("\nseal", "")
        with self.assertRaises(SpellSyntaxError):
            self.parser.parse(f"{first}\nbind\n")

    def test_only_final_segment_may_be_sealed(self) -> None:
        with self.assertRaises(SpellSyntaxError) as ctx:
            self.parser.parse(f"{BASIC}\nbind\n{BASIC}")
        self.assertEqual(ctx.exception.clause, "seal")

    def test_parse_is_atomic(self) -> None:
        first = BASIC.replace("\nseal", "")
        broken = BASIC.replace("focus: Probability", "focus: Nothing")

        with self.assertRaises(SpellSyntaxError):
            self.parser.parse(f"{first}\nbind\n{broken}")

    def test_protocol_keyword_flags_every_segment(self) -> None:
        first = BASIC.replace("\nseal", "").replace(
            "Increase odds of favorable outcome", "whisper to kernel.space"
        )
        second = BASIC.replace("focus: Probability", "focus: Entropy")
        spells = self.parser.parse(f"{first}\nbind\n{second}")

        for spell in spells:
            self.assertTrue(spell.uses_hidden_protocol)
            self.assertEqual(spell.protocol_keywords, ["kernel.space"])

    def test_protocol_keywords_follow_table_order(self) -> None:
        source = BASIC.replace(
            "Increase odds of favorable outcome",
            "PARADOX.ENGINE then Kernel.Space then paradox.engine again",
        )
        spell = parse_spell(source)[0]

        self.assertEqual(spell.protocol_keywords, ["kernel.space", "paradox.engine"])


if __name__ == "__main__":
    unittest.main()
