from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from uuid import UUID

from src.models.common import NonEmptyStr, reject_null, validate_money

# ===== GOAL PYDANTIC MODELS =====

class GoalCreate(BaseModel):
    account_id: UUID = Field(..., description="Account the goal belongs to")
    name: NonEmptyStr = Field(..., description="Goal name")
    description: Optional[str] = None
    target_amount: Decimal = Field(..., gt=0, description="Amount to reach")
    current_amount: Decimal = Field(Decimal("0.00"), ge=0, description="Amount saved so far")
    target_date: Optional[date] = None

    @field_validator('target_amount', 'current_amount')
    @classmethod
    def validate_amounts(cls, v: Decimal) -> Decimal:
        return validate_money(v)


class GoalUpdate(BaseModel):
    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    target_amount: Optional[Decimal] = Field(None, gt=0)
    current_amount: Optional[Decimal] = Field(None, ge=0)
    target_date: Optional[date] = None
    is_achieved: Optional[bool] = None

    @field_validator('name', 'target_amount', 'current_amount', 'is_achieved')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator('target_amount', 'current_amount')
    @classmethod
    def validate_amounts(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return validate_money(v)


class GoalResponse(BaseModel):
    id: UUID
    account_id: UUID
    name: str
    description: Optional[str] = None
    target_amount: Decimal
    current_amount: Decimal
    target_date: Optional[date] = None
    is_achieved: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GoalListResponse(BaseModel):
    goals: List[GoalResponse]


class GoalDetail(BaseModel):
    goal: GoalResponse


class GoalMutation(GoalDetail):
    message: str
