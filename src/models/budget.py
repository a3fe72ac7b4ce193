from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from uuid import UUID
from typing_extensions import Self

from src.db.core import BudgetPeriod
from src.models.category import CategorySummary
from src.models.common import NonEmptyStr, reject_null, validate_money

# ===== BUDGET PYDANTIC MODELS =====

class BudgetCreate(BaseModel):
    account_id: UUID = Field(..., description="Account the budget belongs to")
    category_id: Optional[UUID] = Field(None, description="Limit the budget to one category")
    name: NonEmptyStr = Field(..., description="Budget name")
    amount: Decimal = Field(..., ge=0, description="Budgeted amount per period")
    period: BudgetPeriod = Field(..., description="monthly or yearly")
    start_date: date = Field(..., description="Budget start date")
    end_date: Optional[date] = Field(None, description="Budget end date, open-ended when omitted")
    alert_threshold: int = Field(80, ge=0, le=100, description="Alert when this percentage is spent")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return validate_money(v)

    @model_validator(mode="after")
    def check_date_range(self) -> Self:
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BudgetUpdate(BaseModel):
    name: Optional[NonEmptyStr] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    alert_threshold: Optional[int] = Field(None, ge=0, le=100)
    end_date: Optional[date] = None
    is_active: Optional[bool] = None

    @field_validator('name', 'amount', 'alert_threshold', 'is_active')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return validate_money(v)


class BudgetResponse(BaseModel):
    id: UUID
    account_id: UUID
    category_id: Optional[UUID] = None
    name: str
    amount: Decimal
    period: BudgetPeriod
    start_date: date
    end_date: Optional[date] = None
    alert_threshold: int
    is_active: bool
    category: Optional[CategorySummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BudgetListResponse(BaseModel):
    budgets: List[BudgetResponse]


class BudgetDetail(BaseModel):
    budget: BudgetResponse


class BudgetMutation(BudgetDetail):
    message: str
