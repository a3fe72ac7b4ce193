from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from src.crud import crud_category
from src.db.core import CategoryType, get_db
from src.models import category as category_models
from src.models.common import MessageResponse
from src.services.auth import get_current_user_id
from src.services.permissions import Action

router = APIRouter(
    prefix="/api/categories",
    tags=["categories"],
)


@router.post("", response_model=category_models.CategoryMutation, status_code=status.HTTP_201_CREATED)
def create_category(
    category: category_models.CategoryCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_category = crud_category.create_db_category(db=db, user_id=user_id, category_data=category)
    return {"message": "Category created successfully", "category": db_category}


@router.get("", response_model=category_models.CategoryListResponse)
def read_categories(
    account_id: Optional[UUID] = None,
    type: Optional[CategoryType] = None,
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Retrieve categories of the current user's accounts, optionally narrowed
    to one account or one type.
    """
    categories = crud_category.read_db_categories(
        db=db, user_id=user_id, account_id=account_id, category_type=type, include_inactive=include_inactive
    )
    return {"categories": categories}


@router.get("/{category_id}", response_model=category_models.CategoryDetail)
def read_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    return {"category": crud_category.get_category_for(db, category_id, user_id, Action.READ)}


@router.put("/{category_id}", response_model=category_models.CategoryMutation)
def update_category(
    category_id: UUID,
    category: category_models.CategoryUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_category = crud_category.update_db_category(
        db=db, category_id=category_id, user_id=user_id, category_updates=category
    )
    return {"message": "Category updated successfully", "category": db_category}


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Delete a category. Categories still referenced by transactions are kept.
    """
    crud_category.delete_db_category(db=db, category_id=category_id, user_id=user_id)
    return {"message": "Category deleted successfully"}
