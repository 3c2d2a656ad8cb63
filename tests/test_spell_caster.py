"""Spell caster tests.

The caster owns the compile -> cost -> gate -> apply -> spend pipeline.
"""

import unittest

from aethercast_core import FeedbackKind
from aethercast_engine import DEFAULT_SPELL, ResourceLedger, SimulationEngine, SpellCaster
from aethercast_engine.config import LedgerConfig


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


ENTROPY_PARADOX = """focus: Entropy
anchor: Self
shift: -50%
cost: 5E
intent: "Unmake the dust"
seal"""


class SpellCasterTest(unittest.TestCase):
    def make_caster(self, energy: float = 100) -> SpellCaster:
        engine = SimulationEngine(clock=FakeClock())
        ledger = ResourceLedger(LedgerConfig(initial_energy=energy))
        return SpellCaster(engine, ledger)

    def test_compile_default_spell(self) -> None:
        caster = self.make_caster()

        report = caster.compile(DEFAULT_SPELL)

        self.assertTrue(report.success)
        self.assertEqual(report.cost, 12)
        self.assertEqual(report.declared_cost, 30)
        self.assertEqual(report.message, "Spell compiled successfully. Energy cost: 12E (declared 30E)")
        self.assertEqual(caster.ledger.current_cost, 12)

    def test_compile_matching_declared_cost(self) -> None:
        report = self.make_caster().compile(DEFAULT_SPELL.replace("30E", "12E"))

        self.assertEqual(report.message, "Spell compiled successfully. Energy cost: 12E")

    def test_compile_empty_source(self) -> None:
        report = self.make_caster().compile("  \n ")

        self.assertFalse(report.success)
        self.assertEqual(report.message, "Empty spell code. Write a spell first.")

    def test_compile_syntax_error(self) -> None:
        report = self.make_caster().compile(DEFAULT_SPELL.replace("focus: Probability", "focus: Luck"))

        self.assertFalse(report.success)
        self.assertTrue(report.message.startswith("Spell error: "))
        self.assertIsNotNone(report.error)
        self.assertEqual(report.error.clause, "focus")

    def test_cast_spends_on_success(self) -> None:
        caster = self.make_caster()

        report = caster.cast(DEFAULT_SPELL)

        self.assertTrue(report.success)
        self.assertEqual(report.cost, 12)
        self.assertEqual(report.energy_remaining, 88)
        self.assertEqual(caster.engine.get_state().probability_shift, 15)

    def test_cast_gated_by_energy(self) -> None:
        caster = self.make_caster(energy=5)

        report = caster.cast(DEFAULT_SPELL)

        self.assertFalse(report.success)
        self.assertEqual(report.feedback, FeedbackKind.ENERGY_INSUFFICIENT)
        self.assertEqual(report.message, "Not enough energy. Need 12E, have 5E.")
        self.assertEqual(caster.ledger.energy, 5)
        self.assertEqual(caster.engine.get_state().probability_shift, 0)

    def test_rejected_cast_does_not_spend(self) -> None:
        caster = self.make_caster()

        report = caster.cast(ENTROPY_PARADOX)

        self.assertFalse(report.success)
        self.assertEqual(report.feedback, FeedbackKind.PARADOX)
        self.assertEqual(caster.ledger.energy, 100)

    def test_syntax_error_has_no_feedback(self) -> None:
        caster = self.make_caster()

        report = caster.cast(DEFAULT_SPELL.replace("\nseal", ""))

        self.assertFalse(report.success)
        self.assertIsNone(report.feedback)
        self.assertIsNone(report.cost)
        self.assertEqual(caster.ledger.energy, 100)

    def test_out_of_range_numbers_fail_as_reports(self) -> None:
        caster = self.make_caster()
        huge_radius = DEFAULT_SPELL.replace("anchor: Self", "anchor: Zone(radius:1e309)")
        huge_shift = DEFAULT_SPELL.replace("+15%", "+" + "9" * 400 + "%").replace(
            "favorable outcome", "kernel.space"
        )

        for source in (huge_radius, huge_shift):
            report = caster.cast(source)
            self.assertFalse(report.success)
            self.assertTrue(report.message.startswith("Spell error: "))
        self.assertEqual(caster.ledger.energy, 100)

    def test_largest_privileged_shift_applies(self) -> None:
        caster = self.make_caster()
        caster.ledger.energy = float(10**12)
        source = DEFAULT_SPELL.replace("+15%", "+1000000000%").replace("favorable outcome", "kernel.space")

        report = caster.cast(source)

        self.assertTrue(report.success)
        effect = caster.engine.get_state().active_effects[0]
        self.assertEqual(effect.shift_amount, 2 * 10**9)

    def test_regenerate(self) -> None:
        caster = self.make_caster(energy=50)

        self.assertEqual(caster.regenerate(), 60)


if __name__ == "__main__":
    unittest.main()
