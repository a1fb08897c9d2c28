import unittest

from rewardengine import MerkleTree, hash_pair, leaf_hash, to_bytes32, verify_proof
from rewardengine.config import ZERO_HASH


class TestMerkleProofs(unittest.TestCase):

    def setUp(self):
        self.conditions = {
            "alice": 3,
            "bob": 0,
            "carol": 1,
            "dave": 7,
            "erin": 2,
        }
        self.tree = MerkleTree.from_conditions(self.conditions)

    def test_leaf_is_deterministic(self):
        self.assertEqual(leaf_hash("alice", 3), leaf_hash("alice", 3))
        self.assertEqual(len(leaf_hash("alice", 3)), 32)
        self.assertNotEqual(leaf_hash("alice", 3), leaf_hash("alice", 4))
        self.assertNotEqual(leaf_hash("alice", 3), leaf_hash("alicf", 3))

    def test_leaf_rejects_negative_count(self):
        with self.assertRaises(ValueError):
            leaf_hash("alice", -1)

    def test_hash_pair_is_order_independent(self):
        a = leaf_hash("alice", 1)
        b = leaf_hash("bob", 2)
        self.assertEqual(hash_pair(a, b), hash_pair(b, a))

    def test_every_leaf_verifies(self):
        """Proofs built from the tree verify against its root."""
        for claimant, count in self.conditions.items():
            proof = self.tree.proof_for(claimant, count)
            self.assertIsNotNone(proof)
            self.assertTrue(verify_proof(proof, self.tree.root, leaf_hash(claimant, count)))

    def test_wrong_count_does_not_verify(self):
        proof = self.tree.proof_for("alice", 3)
        self.assertFalse(verify_proof(proof, self.tree.root, leaf_hash("alice", 4)))

    def test_single_bit_flip_breaks_proof(self):
        """Flipping any bit of any proof element fails verification."""
        for claimant, count in self.conditions.items():
            proof = self.tree.proof_for(claimant, count)
            leaf = leaf_hash(claimant, count)
            for i in range(len(proof)):
                for byte in range(len(proof[i])):
                    for bit in range(8):
                        tampered = list(proof)
                        node = bytearray(tampered[i])
                        node[byte] ^= 1 << bit
                        tampered[i] = bytes(node)
                        self.assertFalse(verify_proof(tampered, self.tree.root, leaf))

    def test_zero_root_never_verifies(self):
        self.assertFalse(verify_proof([], ZERO_HASH, ZERO_HASH))
        proof = self.tree.proof_for("alice", 3)
        self.assertFalse(verify_proof(proof, ZERO_HASH, leaf_hash("alice", 3)))

    def test_empty_proof_only_for_root_leaf(self):
        """A single-leaf tree has the leaf as root and an empty proof."""
        leaf = leaf_hash("solo", 5)
        tree = MerkleTree([leaf])
        self.assertEqual(tree.root, leaf)
        self.assertEqual(tree.proof(0), [])
        self.assertTrue(verify_proof([], tree.root, leaf))
        self.assertFalse(verify_proof([], self.tree.root, leaf))

    def test_proofs_accept_hex_nodes(self):
        proof = [node.hex() for node in self.tree.proof_for("dave", 7)]
        root = "0x" + self.tree.root.hex()
        self.assertTrue(verify_proof(proof, root, leaf_hash("dave", 7)))

    def test_malformed_proof_is_rejected_not_raised(self):
        self.assertFalse(verify_proof(["zz"], self.tree.root, leaf_hash("alice", 3)))
        self.assertFalse(verify_proof([b"short"], self.tree.root, leaf_hash("alice", 3)))

    def test_absent_proof_is_treated_as_empty(self):
        leaf = leaf_hash("solo", 5)
        self.assertTrue(verify_proof(None, leaf, leaf))
        self.assertFalse(verify_proof(None, self.tree.root, leaf_hash("alice", 3)))

    def test_wrongly_typed_proof_is_rejected_not_raised(self):
        leaf = leaf_hash("alice", 3)
        for proof in (7, [None], [123], object()):
            self.assertFalse(verify_proof(proof, self.tree.root, leaf))
        self.assertFalse(verify_proof([], None, leaf))

    def test_unknown_claimant_has_no_proof(self):
        self.assertIsNone(self.tree.proof_for("mallory", 1))
        with self.assertRaises(IndexError):
            self.tree.proof(len(self.conditions))

    def test_to_bytes32(self):
        node = leaf_hash("alice", 3)
        self.assertEqual(to_bytes32(node.hex()), node)
        self.assertEqual(to_bytes32("0x" + node.hex()), node)
        with self.assertRaises(ValueError):
            to_bytes32(b"\x01" * 31)
        with self.assertRaises(ValueError):
            to_bytes32("not-hex")

    def test_empty_tree_rejected(self):
        with self.assertRaises(ValueError):
            MerkleTree([])


if __name__ == "__main__":
    unittest.main()
