from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.db.core import AccountType, MemberRole, MemberStatus
from src.models.common import NonEmptyStr, HexColor, Icon, reject_null, validate_money


CURRENCY_PATTERN = r"^[A-Za-z]{3}$"


# ===== ACCOUNT PYDANTIC MODELS =====

class AccountCreate(BaseModel):
    name: NonEmptyStr = Field(..., description="Account name")
    type: AccountType = Field(..., description="Kind of ledger")
    initial_balance: Decimal = Field(Decimal("0.00"), description="Opening balance")
    currency: str = Field("BRL", pattern=CURRENCY_PATTERN, description="ISO 4217 currency code")
    color: Optional[HexColor] = None
    icon: Optional[Icon] = None

    @field_validator('initial_balance')
    @classmethod
    def validate_initial_balance(cls, v: Decimal) -> Decimal:
        return validate_money(v)

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return v.upper()


class AccountUpdate(BaseModel):
    """Update account - all fields optional"""
    name: Optional[NonEmptyStr] = None
    type: Optional[AccountType] = None
    currency: Optional[str] = Field(None, pattern=CURRENCY_PATTERN)
    color: Optional[HexColor] = None
    icon: Optional[Icon] = None
    is_active: Optional[bool] = None

    @field_validator('name', 'type', 'currency', 'is_active')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v


class AccountResponse(BaseModel):
    id: UUID
    name: str
    type: AccountType
    currency: str
    initial_balance: Decimal
    current_balance: Decimal
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool
    role: Optional[MemberRole] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AccountListResponse(BaseModel):
    accounts: List[AccountResponse]


class AccountDetail(BaseModel):
    account: AccountResponse


class AccountMutation(AccountDetail):
    message: str


# ===== MEMBERSHIP PYDANTIC MODELS =====

class MemberInvite(BaseModel):
    email: str = Field(..., description="Email of the user to invite")
    role: MemberRole = Field(MemberRole.VIEWER, description="Role granted once accepted")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return v.lower().strip()

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: MemberRole) -> MemberRole:
        if v is MemberRole.OWNER:
            raise ValueError('Ownership is handed over with a transfer, not an invitation')
        return v


class OwnershipTransfer(BaseModel):
    user_id: UUID = Field(..., description="Accepted member who becomes the owner")


class MemberResponse(BaseModel):
    id: UUID
    account_id: UUID
    user_id: UUID
    role: MemberRole
    status: MemberStatus
    invited_by: Optional[UUID] = None
    created_at: datetime
    accepted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MemberListResponse(BaseModel):
    members: List[MemberResponse]


class MemberMutation(BaseModel):
    message: str
    member: MemberResponse
