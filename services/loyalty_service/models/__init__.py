"""Loyalty Service models package.

Every model class must be listed here so SQLAlchemy's mapper registry and
Alembic see it on import.
"""

from services.loyalty_service.models.balance import LoyaltyPoints  # noqa: F401
from services.loyalty_service.models.history import PointsHistory  # noqa: F401

__all__ = [
    "LoyaltyPoints",
    "PointsHistory",
]
