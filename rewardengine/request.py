import json
from nacl.signing import SigningKey, VerifyKey
from nacl.encoding import HexEncoder
from nacl.exceptions import BadSignatureError, CryptoError

from rewardengine.config import (
    ACTION_CLAIM_BASE_AUCTION,
    ACTION_CLAIM_HOLDING,
    ACTION_CLAIM_WEIGHTED_AUCTION,
)

ACTIONS = (ACTION_CLAIM_BASE_AUCTION, ACTION_CLAIM_WEIGHTED_AUCTION, ACTION_CLAIM_HOLDING)


class ClaimRequest:
    """
    A claim signed by the claimant's Ed25519 key.

    Replay protection comes from the per-sender nonce alone; the engine
    accepts each nonce once, in order.
    """

    def __init__(self, sender, action, params=None, nonce=0, signature=None):
        if action not in ACTIONS:
            raise ValueError(f"Unknown claim action: {action}")
        self.sender = sender        # Public key (Hex str)
        self.action = action
        self.params = params or {}
        self.nonce = nonce
        self.signature = signature  # Hex str

    def to_dict(self):
        return {
            "sender": self.sender,
            "action": self.action,
            "params": self.params,
            "nonce": self.nonce,
            "signature": self.signature,
        }

    @staticmethod
    def from_dict(data: dict) -> "ClaimRequest":
        return ClaimRequest(
            sender=data["sender"],
            action=data["action"],
            params=data.get("params"),
            nonce=data["nonce"],
            signature=data.get("signature"),
        )

    @staticmethod
    def weighted_auction(sender, proof, condition_count, nonce) -> "ClaimRequest":
        """Build a weighted auction claim; proof nodes are carried as hex strings."""
        params = {
            "proof": [node.hex() if isinstance(node, bytes) else node for node in proof],
            "condition_count": condition_count,
        }
        return ClaimRequest(sender, ACTION_CLAIM_WEIGHTED_AUCTION, params, nonce)

    @staticmethod
    def holding(sender, asset_ids, nonce) -> "ClaimRequest":
        return ClaimRequest(sender, ACTION_CLAIM_HOLDING, {"asset_ids": list(asset_ids)}, nonce)

    @property
    def signing_payload(self) -> bytes:
        """Canonical JSON of everything except the signature."""
        payload = {
            "sender": self.sender,
            "action": self.action,
            "params": self.params,
            "nonce": self.nonce,
        }
        return json.dumps(payload, sort_keys=True).encode("utf-8")

    def sign(self, signing_key: SigningKey):
        claimant = signing_key.verify_key.encode(encoder=HexEncoder).decode()
        if claimant != self.sender:
            raise ValueError("Signing key does not match sender")
        self.signature = signing_key.sign(self.signing_payload).signature.hex()

    def verify(self) -> bool:
        """True only for a well-formed signature by the sender over the current payload."""
        if not self.signature:
            return False

        try:
            VerifyKey(self.sender, encoder=HexEncoder).verify(
                self.signing_payload,
                bytes.fromhex(self.signature),
            )
        except (BadSignatureError, CryptoError, ValueError, TypeError):
            return False
        return True

    def __repr__(self):
        return f"Claim({self.sender[:8]}, {self.action}, nonce={self.nonce})"
