"""Loyalty service schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _LoyaltyModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class RedeemRequest(_LoyaltyModel):
    points: int = Field(..., gt=0)


class RedeemResponse(_LoyaltyModel):
    success: bool = True
    discount: int


class PointsHistoryEntry(_LoyaltyModel):
    points: int
    description: Optional[str] = None
    date: datetime


class LoyaltySummaryResponse(_LoyaltyModel):
    points: int
    history: list[PointsHistoryEntry] = []
