"""Authorization Gate — yes/no capability check for an actor and a named action.

Invariants:
    - check() is a pure function of (actor, action)
    - Never receives an absent actor: NotAuthenticated is decided by the caller first
"""

from onboarding.core.domain_types import Action, Actor, WILDCARD_PERMISSION


class PermissionGate:
    """Grants an action when the actor holds it (or the wildcard)."""

    def check(self, actor: Actor, action: Action | str) -> bool:
        name = action.value if isinstance(action, Action) else action
        return name in actor.permissions or WILDCARD_PERMISSION in actor.permissions
