from pydantic import BaseModel, Field, field_validator, computed_field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from uuid import UUID

from src.db.core import InvestmentType
from src.models.common import NonEmptyStr, reject_null, round_money, validate_money, validate_quantity


# ===== INVESTMENT ASSET PYDANTIC MODELS =====

class InvestmentCreate(BaseModel):
    account_id: UUID = Field(..., description="The account this asset belongs to")
    name: NonEmptyStr = Field(..., description="Asset name")
    type: InvestmentType = Field(..., description="Asset class")
    ticker: Optional[str] = Field(None, max_length=20, description="Ticker symbol")
    quantity: Optional[Decimal] = Field(None, ge=0, description="Number of shares/units owned")
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    current_price: Optional[Decimal] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator('quantity')
    @classmethod
    def check_quantity(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return validate_quantity(v)

    @field_validator('purchase_price', 'current_price')
    @classmethod
    def validate_prices(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return validate_money(v)

    @field_validator('ticker')
    @classmethod
    def validate_ticker(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class InvestmentUpdate(BaseModel):
    name: Optional[NonEmptyStr] = None
    ticker: Optional[str] = Field(None, max_length=20)
    quantity: Optional[Decimal] = Field(None, ge=0)
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    current_price: Optional[Decimal] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator('quantity')
    @classmethod
    def check_quantity(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return validate_quantity(v)

    @field_validator('purchase_price', 'current_price')
    @classmethod
    def validate_prices(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return validate_money(v)

    @field_validator('ticker')
    @classmethod
    def validate_ticker(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class InvestmentResponse(BaseModel):
    id: UUID
    account_id: UUID
    name: str
    type: InvestmentType
    ticker: Optional[str] = None
    quantity: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    current_price: Optional[Decimal] = None
    purchase_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def balance(self) -> Decimal:
        """Market value, always derived from quantity and current price"""
        if self.quantity is None or self.current_price is None:
            return Decimal("0.00")
        return round_money(self.quantity * self.current_price)

    class Config:
        from_attributes = True


class InvestmentListResponse(BaseModel):
    investments: List[InvestmentResponse]


class InvestmentDetail(BaseModel):
    investment: InvestmentResponse


class InvestmentMutation(InvestmentDetail):
    message: str
