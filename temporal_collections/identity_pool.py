from __future__ import annotations

import logging
from typing import Any, Dict, Hashable, Optional

logger = logging.getLogger("temporal.identity")


class IdentityPool:
    """Surrogate identities freed by removals, waiting to be reused.

    Identities are parked under the logical key of the record that held them.
    Handing one back to a new record for the same slot lets the backing store
    update a row instead of deleting one and inserting another. A key holds at
    most one identity and claiming it empties the slot.
    """

    def __init__(self) -> None:
        self._identities: Dict[Hashable, Any] = {}

    def release(self, key: Hashable, identity: Any) -> None:
        if identity is None:
            return
        self._identities[key] = identity
        logger.debug("Released identity %r for %s", identity, key)

    def claim(self, key: Hashable) -> Optional[Any]:
        identity = self._identities.pop(key, None)
        if identity is not None:
            logger.debug("Reusing identity %r for %s", identity, key)
        return identity

    def clear(self) -> None:
        self._identities.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._identities

    def __len__(self) -> int:
        return len(self._identities)

    def __repr__(self) -> str:
        return f"IdentityPool({self._identities!r})"


__all__ = ["IdentityPool"]
