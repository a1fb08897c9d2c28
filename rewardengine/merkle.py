from typing import Dict, List, Optional, Sequence, Union

from nacl.encoding import RawEncoder
from nacl.hash import sha256

from rewardengine.config import HASH_SIZE, ZERO_HASH


def _sha256(data: bytes) -> bytes:
    return sha256(data, encoder=RawEncoder)


def to_bytes32(value: Union[bytes, str]) -> bytes:
    """
    Normalize a Merkle node to 32 raw bytes.
    Accepts raw bytes or a hex string with an optional 0x prefix.
    """
    if isinstance(value, str):
        text = value[2:] if value.startswith("0x") else value
        try:
            value = bytes.fromhex(text)
        except ValueError:
            raise ValueError(f"Invalid hex node: {text[:16]}")
    if not isinstance(value, (bytes, bytearray)) or len(value) != HASH_SIZE:
        raise ValueError(f"Merkle node must be {HASH_SIZE} bytes")
    return bytes(value)


def leaf_hash(claimant: str, condition_count: int) -> bytes:
    """
    Hash a (claimant, condition count) pair into a tree leaf.

    The claimant is length-prefixed so no two pairs share an encoding.
    """
    if not isinstance(condition_count, int) or condition_count < 0:
        raise ValueError("Condition count must be a non-negative integer")
    raw = claimant.encode("utf-8")
    encoded = len(raw).to_bytes(4, "big") + raw + condition_count.to_bytes(32, "big")
    return _sha256(encoded)


def hash_pair(a: bytes, b: bytes) -> bytes:
    """Combine two sibling nodes; the smaller node always goes first."""
    if a <= b:
        return _sha256(a + b)
    return _sha256(b + a)


def verify_proof(proof: Optional[Sequence[Union[bytes, str]]], root: Union[bytes, str], leaf: bytes) -> bool:
    """
    Check that folding the proof into the leaf reproduces the root.

    A zero root means proofs are disabled and nothing verifies. An empty
    proof only verifies a leaf that is itself the root, and a missing
    (None) proof is treated as empty.
    """
    if proof is None:
        proof = []

    try:
        root = to_bytes32(root)
        computed = to_bytes32(leaf)
        siblings = [to_bytes32(node) for node in proof]
    except (ValueError, TypeError):
        return False

    if root == ZERO_HASH:
        return False

    for sibling in siblings:
        computed = hash_pair(computed, sibling)

    return computed == root


class MerkleTree:
    """
    Binary Merkle tree over condition leaves.
    Odd levels duplicate their last node, as block Merkle roots do.
    """

    def __init__(self, leaves: List[bytes]):
        if not leaves:
            raise ValueError("Cannot build a Merkle tree without leaves")
        self.leaves = [to_bytes32(leaf) for leaf in leaves]
        self.levels = self._build_levels(self.leaves)
        self._claims: Dict[bytes, int] = {}

    @staticmethod
    def _build_levels(leaves):
        levels = [list(leaves)]
        level = list(leaves)
        while len(level) > 1:
            if len(level) % 2 != 0:
                level.append(level[-1])  # duplicate last if odd

            level = [hash_pair(level[i], level[i + 1]) for i in range(0, len(level), 2)]
            levels.append(level)
        return levels

    @classmethod
    def from_conditions(cls, conditions: Dict[str, int]) -> "MerkleTree":
        """Build a tree from a {claimant: condition_count} mapping (sorted by claimant)."""
        items = sorted(conditions.items())
        tree = cls([leaf_hash(claimant, count) for claimant, count in items])
        tree._claims = {leaf_hash(claimant, count): index for index, (claimant, count) in enumerate(items)}
        return tree

    @property
    def root(self) -> bytes:
        return self.levels[-1][0]

    def proof(self, index: int) -> List[bytes]:
        """Return the sibling path for the leaf at index, bottom-up."""
        if index < 0 or index >= len(self.leaves):
            raise IndexError(f"Leaf index {index} out of range")

        path = []
        for level in self.levels[:-1]:
            sibling_index = index ^ 1
            # A missing right sibling is the duplicated node itself
            path.append(level[sibling_index] if sibling_index < len(level) else level[index])
            index //= 2
        return path

    def proof_for(self, claimant: str, condition_count: int) -> Optional[List[bytes]]:
        """Return the proof for a claimant's leaf, or None if the leaf is not in the tree."""
        leaf = leaf_hash(claimant, condition_count)
        index = self._claims.get(leaf)
        if index is None:
            try:
                index = self.leaves.index(leaf)
            except ValueError:
                return None
        return self.proof(index)
