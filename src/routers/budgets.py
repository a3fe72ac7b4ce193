from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from src.crud import crud_budget
from src.db.core import BudgetPeriod, get_db
from src.models import budget as budget_models
from src.models.common import MessageResponse
from src.services.auth import get_current_user_id
from src.services.permissions import Action

router = APIRouter(
    prefix="/api/budgets",
    tags=["budgets"],
)


@router.post("", response_model=budget_models.BudgetMutation, status_code=status.HTTP_201_CREATED)
def create_budget(
    budget: budget_models.BudgetCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_budget = crud_budget.create_db_budget(db=db, user_id=user_id, budget_data=budget)
    return {"message": "Budget created successfully", "budget": db_budget}


@router.get("", response_model=budget_models.BudgetListResponse)
def read_budgets(
    account_id: Optional[UUID] = None,
    period: Optional[BudgetPeriod] = None,
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    budgets = crud_budget.read_db_budgets(
        db=db, user_id=user_id, account_id=account_id, period=period, include_inactive=include_inactive
    )
    return {"budgets": budgets}


@router.get("/{budget_id}", response_model=budget_models.BudgetDetail)
def read_budget(
    budget_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    return {"budget": crud_budget.get_budget_for(db, budget_id, user_id, Action.READ)}


@router.put("/{budget_id}", response_model=budget_models.BudgetMutation)
def update_budget(
    budget_id: UUID,
    budget: budget_models.BudgetUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_budget = crud_budget.update_db_budget(db=db, budget_id=budget_id, user_id=user_id, budget_updates=budget)
    return {"message": "Budget updated successfully", "budget": db_budget}


@router.delete("/{budget_id}", response_model=MessageResponse)
def delete_budget(
    budget_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    crud_budget.delete_db_budget(db=db, budget_id=budget_id, user_id=user_id)
    return {"message": "Budget deleted successfully"}
