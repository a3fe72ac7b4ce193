from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, date as date_type
from decimal import Decimal
from uuid import UUID

from src.db.core import TransactionType
from src.models.category import CategorySummary
from src.models.common import reject_null, validate_money

# ===== TRANSACTION PYDANTIC MODELS =====

class TransactionCreate(BaseModel):
    account_id: UUID = Field(..., description="Account ID for this transaction")
    date: date_type = Field(..., description="Date of the transaction (ISO 8601)")
    description: str = Field(..., min_length=1, max_length=500, description="Transaction description")
    amount: Decimal = Field(..., description="Signed amount: positive is income, negative is expense")
    category_id: Optional[UUID] = Field(None, description="The ID of the transaction's category")
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    is_recurring: bool = False

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return validate_money(v)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Description must not be empty')
        return v

    @field_validator('payment_method', 'notes')
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class TransactionUpdate(BaseModel):
    """Update transaction - all fields optional, type follows amount"""
    date: Optional[date_type] = None
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    amount: Optional[Decimal] = None
    category_id: Optional[UUID] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator('date', 'description', 'amount')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return validate_money(v)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError('Description must not be empty')
        return v


class TransactionResponse(BaseModel):
    id: UUID
    account_id: UUID
    category_id: Optional[UUID] = None
    created_by: UUID
    date: date_type
    description: str
    amount: Decimal
    type: TransactionType
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    is_recurring: bool
    category: Optional[CategorySummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]


class TransactionDetail(BaseModel):
    transaction: TransactionResponse


class TransactionMutation(TransactionDetail):
    message: str
