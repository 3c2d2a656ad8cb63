"""Resource ledger tests."""

import unittest

from aethercast_engine.config import LedgerConfig
from aethercast_engine.ledger import ResourceLedger


class ResourceLedgerTest(unittest.TestCase):
    def test_defaults(self) -> None:
        ledger = ResourceLedger()

        self.assertEqual(ledger.energy, 100)
        self.assertEqual(ledger.current_cost, 0)

    def test_spend_floors_at_zero(self) -> None:
        ledger = ResourceLedger(LedgerConfig(initial_energy=10))

        self.assertEqual(ledger.spend(4), 6)
        self.assertEqual(ledger.spend(50), 0)

    def test_negative_spend_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ResourceLedger().spend(-1)

    def test_refresh_caps_at_max(self) -> None:
        ledger = ResourceLedger(LedgerConfig(initial_energy=85, max_energy=100, regeneration=10))

        self.assertEqual(ledger.refresh(), 95)
        self.assertEqual(ledger.refresh(), 100)
        self.assertEqual(ledger.refresh(), 100)

    def test_can_afford_is_inclusive(self) -> None:
        ledger = ResourceLedger(LedgerConfig(initial_energy=12))

        self.assertTrue(ledger.can_afford(12))
        self.assertFalse(ledger.can_afford(13))

    def test_set_current_cost(self) -> None:
        ledger = ResourceLedger()
        ledger.set_current_cost(34)

        self.assertEqual(ledger.current_cost, 34)


if __name__ == "__main__":
    unittest.main()
