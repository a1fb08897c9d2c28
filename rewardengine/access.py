import logging

from rewardengine.errors import Unauthorized

logger = logging.getLogger(__name__)


class Authority:
    """Single-owner ACL record gating configuration and administrative mint."""

    def __init__(self, owner: str):
        if not owner:
            raise ValueError("Authority owner must be a non-empty address")
        self.owner = owner

    def is_authority(self, caller: str) -> bool:
        return caller == self.owner

    def require(self, caller: str):
        if not self.is_authority(caller):
            logger.warning("Rejected privileged call from %s...", str(caller)[:8])
            raise Unauthorized(f"{str(caller)[:8]}... is not the authority")

    def transfer(self, caller: str, new_owner: str):
        self.require(caller)
        if not new_owner:
            raise ValueError("New owner must be a non-empty address")
        logger.info("Authority transferred %s... -> %s...", self.owner[:8], new_owner[:8])
        self.owner = new_owner
