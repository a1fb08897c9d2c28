import logging

from nacl.encoding import HexEncoder
from nacl.hash import sha256

from rewardengine.config import MAX_UINT256

logger = logging.getLogger(__name__)


def derive_address(owner: str, label: str) -> str:
    """Derive a stable 40-hex-char address for an engine or collaborator."""
    raw = f"{owner}:{label}".encode()
    return sha256(raw, encoder=HexEncoder).decode()[:40]


class InMemoryLedger:
    """
    Fungible ledger primitive: balances and total supply.
    The reward engine only mints; transfers are not part of this surface.
    """

    def __init__(self):
        # { address: {'balance': int} }
        self.accounts = {}
        self._total_supply = 0

    def get_account(self, address):
        if address not in self.accounts:
            self.accounts[address] = {
                'balance': 0,
            }
        return self.accounts[address]

    def exists(self, address: str) -> bool:
        """Check if account exists."""
        return address in self.accounts

    def balance_of(self, address: str) -> int:
        """Get account balance (0 if account doesn't exist)."""
        return self.accounts.get(address, {"balance": 0})["balance"]

    def total_supply(self) -> int:
        return self._total_supply

    def mint(self, account: str, amount: int):
        """
        Credit newly created units to account.
        Raises ValueError for malformed amounts and OverflowError past uint256.
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError("Mint amount must be a non-negative integer")
        if not account:
            raise ValueError("Cannot mint to an empty address")

        if self._total_supply + amount > MAX_UINT256:
            raise OverflowError("Mint would overflow total supply")

        if amount == 0:
            return

        self.get_account(account)['balance'] += amount
        self._total_supply += amount
        logger.debug("Minted %d to %s...", amount, account[:8])
