"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root; Activation is scoped by user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from onboarding.models.user import User  # noqa: F401
from onboarding.models.activation import Activation  # noqa: F401
