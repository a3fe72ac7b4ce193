from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from src.db.core import CategoryType
from src.models.common import NonEmptyStr, HexColor, Icon, reject_null

# ===== CATEGORY PYDANTIC MODELS =====

class CategoryCreate(BaseModel):
    account_id: UUID = Field(..., description="Account the category belongs to")
    name: NonEmptyStr = Field(..., description="Category name")
    type: CategoryType = Field(..., description="expense or income")
    color: Optional[HexColor] = None
    icon: Optional[Icon] = None
    parent_id: Optional[UUID] = Field(None, description="The ID of the parent category, for sub-categories")


class CategoryUpdate(BaseModel):
    name: Optional[NonEmptyStr] = None
    color: Optional[HexColor] = None
    icon: Optional[Icon] = None
    is_active: Optional[bool] = None

    @field_validator('name', 'is_active')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


class CategorySummary(BaseModel):
    id: UUID
    name: str
    type: CategoryType
    color: Optional[str] = None

    class Config:
        from_attributes = True


class CategoryResponse(CategorySummary):
    account_id: UUID
    parent_id: Optional[UUID] = None
    icon: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CategoryListResponse(BaseModel):
    categories: List[CategoryResponse]


class CategoryDetail(BaseModel):
    category: CategoryResponse


class CategoryMutation(CategoryDetail):
    message: str
