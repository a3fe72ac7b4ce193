from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from src.crud.crud_account import accessible_account_filter
from src.crud.crud_category import check_category_in_account
from src.db.core import BudgetDB, BudgetPeriod
from src.db.patch import BUDGET_FIELDS, apply_patch, build_patch
from src.errors import BadRequestError, NotFoundError
from src.models.budget import BudgetCreate, BudgetUpdate
from src.services.permissions import Action, require_permission

NOT_FOUND = "Budget not found"


# ===== DATABASE OPERATIONS =====

def create_db_budget(db: Session, user_id: UUID, budget_data: BudgetCreate) -> BudgetDB:
    """Create a budget, optionally scoped to one of the account's categories"""
    require_permission(db, user_id, budget_data.account_id, Action.CREATE)
    check_category_in_account(db, budget_data.category_id, budget_data.account_id)

    db_budget = BudgetDB(
        account_id=budget_data.account_id,
        category_id=budget_data.category_id,
        name=budget_data.name,
        amount=budget_data.amount,
        period=budget_data.period,
        start_date=budget_data.start_date,
        end_date=budget_data.end_date,
        alert_threshold=budget_data.alert_threshold,
        is_active=True,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_budget)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_budget)
    return db_budget


def read_db_budgets(db: Session, user_id: UUID, account_id: Optional[UUID] = None,
                    period: Optional[BudgetPeriod] = None, include_inactive: bool = False) -> List[BudgetDB]:
    query = db.query(BudgetDB).options(joinedload(BudgetDB.category)).filter(
        *accessible_account_filter(BudgetDB.account_id, user_id, account_id)
    )

    if period:
        query = query.filter(BudgetDB.period == period)
    if not include_inactive:
        query = query.filter(BudgetDB.is_active.is_(True))

    return query.order_by(BudgetDB.created_at.desc()).all()


def get_budget_for(db: Session, budget_id: UUID, user_id: UUID, action: Action) -> BudgetDB:
    db_budget = db.get(BudgetDB, budget_id)
    if db_budget is None:
        raise NotFoundError(NOT_FOUND)
    require_permission(db, user_id, db_budget.account_id, action, not_found=NOT_FOUND)
    return db_budget


def update_db_budget(db: Session, budget_id: UUID, user_id: UUID, budget_updates: BudgetUpdate) -> BudgetDB:
    db_budget = get_budget_for(db, budget_id, user_id, Action.UPDATE)
    patch = build_patch(BUDGET_FIELDS, budget_updates.model_dump(exclude_unset=True))

    end_date = patch.get("end_date")
    if end_date is not None and end_date < db_budget.start_date:
        raise BadRequestError("end_date must not be before start_date")

    apply_patch(db, BudgetDB, budget_id, patch)
    db.commit()
    db.refresh(db_budget)
    return db_budget


def delete_db_budget(db: Session, budget_id: UUID, user_id: UUID) -> None:
    db_budget = get_budget_for(db, budget_id, user_id, Action.DELETE)
    db.delete(db_budget)
    db.commit()
