import unittest

from rewardengine import Authority, InMemoryLedger, MintGate, MintOptions, SupplyCapGuard
from rewardengine.config import MAX_UINT256
from rewardengine.errors import MaxSupplyExceeded, MintLocked, OwnerMintLocked, Unauthorized


class TestLedger(unittest.TestCase):

    def setUp(self):
        self.ledger = InMemoryLedger()

    def test_mint_updates_balance_and_supply(self):
        self.ledger.mint("alice", 7)
        self.ledger.mint("bob", 3)
        self.assertEqual(self.ledger.balance_of("alice"), 7)
        self.assertEqual(self.ledger.total_supply(), 10)

    def test_zero_mint_is_noop(self):
        self.ledger.mint("alice", 0)
        self.assertFalse(self.ledger.exists("alice"))
        self.assertEqual(self.ledger.total_supply(), 0)

    def test_invalid_amounts(self):
        with self.assertRaises(ValueError):
            self.ledger.mint("alice", -1)
        with self.assertRaises(ValueError):
            self.ledger.mint("alice", 1.5)
        self.ledger.mint("alice", MAX_UINT256)
        with self.assertRaises(OverflowError):
            self.ledger.mint("bob", 1)


class TestSupplyCapGuard(unittest.TestCase):

    def setUp(self):
        self.ledger = InMemoryLedger()
        self.guard = SupplyCapGuard(self.ledger, 10)

    def test_clamp_to_headroom(self):
        self.ledger.mint("alice", 7)
        self.assertEqual(self.guard.remaining(), 3)
        self.assertEqual(self.guard.clamp(2), 2)
        self.assertEqual(self.guard.clamp(5), 3)

    def test_at_cap_raises(self):
        self.ledger.mint("alice", 10)
        self.assertEqual(self.guard.remaining(), 0)
        with self.assertRaises(MaxSupplyExceeded):
            self.guard.ensure_below_cap()

    def test_lowered_cap_never_negative(self):
        self.ledger.mint("alice", 8)
        self.guard.set_max_supply(5)
        self.assertEqual(self.guard.remaining(), 0)
        self.assertEqual(self.guard.clamp(4), 0)
        with self.assertRaises(MaxSupplyExceeded):
            self.guard.ensure_below_cap()

    def test_invalid_cap(self):
        with self.assertRaises(ValueError):
            SupplyCapGuard(self.ledger, -1)


class TestMintGate(unittest.TestCase):

    def setUp(self):
        self.ledger = InMemoryLedger()
        self.gate = MintGate(self.ledger, Authority("owner"))

    def test_unlocked_mints(self):
        self.gate.mint("alice", 5)
        self.gate.admin_mint("owner", "bob", 5)
        self.assertEqual(self.ledger.total_supply(), 10)

    def test_global_lock_blocks_every_mint(self):
        self.gate.options = MintOptions(mint_locked=True)
        with self.assertRaises(MintLocked):
            self.gate.mint("alice", 5)
        with self.assertRaises(MintLocked):
            self.gate.admin_mint("owner", "alice", 5)
        self.assertEqual(self.ledger.total_supply(), 0)

    def test_owner_lock_blocks_admin_only(self):
        self.gate.options = MintOptions(owner_mint_locked=True)
        with self.assertRaises(OwnerMintLocked):
            self.gate.admin_mint("owner", "alice", 5)
        self.gate.mint("alice", 5)
        self.assertEqual(self.ledger.balance_of("alice"), 5)

    def test_admin_mint_requires_authority(self):
        with self.assertRaises(Unauthorized):
            self.gate.admin_mint("mallory", "mallory", 5)

    def test_options_round_trip(self):
        options = MintOptions(True, False)
        self.assertEqual(MintOptions.from_dict(options.to_dict()).to_dict(), options.to_dict())


if __name__ == "__main__":
    unittest.main()
