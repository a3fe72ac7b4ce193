from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from src.crud.crud_account import accessible_account_filter
from src.db.core import BudgetDB, CategoryDB, CategoryType, TransactionDB
from src.db.patch import CATEGORY_FIELDS, apply_patch, build_patch
from src.errors import BadRequestError, NotFoundError
from src.models.category import CategoryCreate, CategoryUpdate
from src.services.permissions import Action, require_permission

NOT_FOUND = "Category not found"


def check_category_in_account(db: Session, category_id: Optional[UUID], account_id: UUID) -> None:
    """Category references must stay inside the same account"""
    if category_id is None:
        return
    category = db.get(CategoryDB, category_id)
    if category is None or category.account_id != account_id:
        raise BadRequestError("Category does not belong to this account")


def create_db_category(db: Session, user_id: UUID, category_data: CategoryCreate) -> CategoryDB:
    require_permission(db, user_id, category_data.account_id, Action.CREATE)
    check_category_in_account(db, category_data.parent_id, category_data.account_id)

    db_category = CategoryDB(
        account_id=category_data.account_id,
        parent_id=category_data.parent_id,
        name=category_data.name,
        type=category_data.type,
        color=category_data.color,
        icon=category_data.icon,
        is_active=True,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_category)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_category)
    return db_category


def read_db_categories(db: Session, user_id: UUID, account_id: Optional[UUID] = None,
                       category_type: Optional[CategoryType] = None, include_inactive: bool = False) -> List[CategoryDB]:
    """Categories of every account the user belongs to"""
    query = db.query(CategoryDB).filter(*accessible_account_filter(CategoryDB.account_id, user_id, account_id))

    if category_type:
        query = query.filter(CategoryDB.type == category_type)
    if not include_inactive:
        query = query.filter(CategoryDB.is_active.is_(True))

    return query.order_by(CategoryDB.name).all()


def get_category_for(db: Session, category_id: UUID, user_id: UUID, action: Action) -> CategoryDB:
    """Load a category and check the caller may perform action on it"""
    db_category = db.get(CategoryDB, category_id)
    if db_category is None:
        raise NotFoundError(NOT_FOUND)
    require_permission(db, user_id, db_category.account_id, action, not_found=NOT_FOUND)
    return db_category


def update_db_category(db: Session, category_id: UUID, user_id: UUID, category_updates: CategoryUpdate) -> CategoryDB:
    db_category = get_category_for(db, category_id, user_id, Action.UPDATE)
    patch = build_patch(CATEGORY_FIELDS, category_updates.model_dump(exclude_unset=True))

    apply_patch(db, CategoryDB, category_id, patch)
    db.commit()
    db.refresh(db_category)
    return db_category


def delete_db_category(db: Session, category_id: UUID, user_id: UUID) -> None:
    """Delete a category that no transaction, subcategory or budget references"""
    db_category = get_category_for(db, category_id, user_id, Action.DELETE)

    linked = db.query(TransactionDB).filter(TransactionDB.category_id == category_id).count()
    if linked > 0:
        raise BadRequestError("Category has linked transactions")

    if db.query(CategoryDB).filter(CategoryDB.parent_id == category_id).count() > 0:
        raise BadRequestError("Category has subcategories")

    if db.query(BudgetDB).filter(BudgetDB.category_id == category_id).count() > 0:
        raise BadRequestError("Category has linked budgets")

    try:
        db.delete(db_category)
        db.commit()
    except Exception:
        db.rollback()
        raise
