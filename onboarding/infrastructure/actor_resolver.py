"""Actor Resolver — maps a bearer API key onto an Actor.

Invariants:
    - Unknown, missing or malformed credentials resolve to None, never raise
    - Key comparison is constant-time
"""

import hmac

from onboarding.config import ApiKeyGrant
from onboarding.core.domain_types import Actor

BEARER_PREFIX = "bearer "


class ApiKeyActorResolver:
    """Looks the presented key up in the configured grant table."""

    def __init__(self, grants: dict[str, ApiKeyGrant]):
        self._grants = dict(grants)

    def resolve(self, authorization: str | None) -> Actor | None:
        if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
            return None
        presented = authorization[len(BEARER_PREFIX):].strip()
        if not presented:
            return None
        for key, grant in self._grants.items():
            if hmac.compare_digest(key.encode(), presented.encode()):
                return Actor(id=grant.id, permissions=frozenset(grant.permissions))
        return None
