import logging
import threading
from typing import Set

from .errors import InvalidInput, NotAuthorized

logger = logging.getLogger(__name__)


class AccessControl:
    """Fixed owner plus a set of authorized accounts"""

    def __init__(self, owner: str):
        if not owner:
            raise InvalidInput("Owner account cannot be empty")
        self._owner = owner
        # Maintained for callers that want to mark trusted accounts; no
        # ledger operation restricts itself to this set.
        self._authorized: Set[str] = set()
        self._lock = threading.Lock()

    @property
    def owner(self) -> str:
        return self._owner

    def _require_owner(self, caller: str, target: str) -> None:
        if caller != self._owner:
            logger.warning("Account %s is not the owner", caller)
            raise NotAuthorized("Only the owner can change authorizations")
        if not target:
            raise InvalidInput("Target account cannot be empty")

    def authorize(self, caller: str, target: str) -> None:
        self._require_owner(caller, target)
        with self._lock:
            self._authorized.add(target)
        logger.info("Authorized %s", target)

    def revoke(self, caller: str, target: str) -> None:
        self._require_owner(caller, target)
        with self._lock:
            self._authorized.discard(target)
        logger.info("Revoked %s", target)

    def is_authorized(self, account: str) -> bool:
        with self._lock:
            return account in self._authorized

    @property
    def authorized_users(self) -> Set[str]:
        with self._lock:
            return set(self._authorized)
