from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from src.crud import crud_investment
from src.db.core import InvestmentType, get_db
from src.models import investment as investment_models
from src.models.common import MessageResponse
from src.services.auth import get_current_user_id
from src.services.permissions import Action

router = APIRouter(
    prefix="/api/investments",
    tags=["investments"],
)


@router.post("", response_model=investment_models.InvestmentMutation, status_code=status.HTTP_201_CREATED)
def create_investment(
    investment: investment_models.InvestmentCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_investment = crud_investment.create_db_investment(db=db, user_id=user_id, investment_data=investment)
    return {"message": "Investment created successfully", "investment": db_investment}


@router.get("", response_model=investment_models.InvestmentListResponse)
def read_investments(
    account_id: Optional[UUID] = None,
    type: Optional[InvestmentType] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Retrieve investment assets. Each one carries its market balance
    (quantity times current price).
    """
    investments = crud_investment.read_db_investments(
        db=db, user_id=user_id, account_id=account_id, investment_type=type
    )
    return {"investments": investments}


@router.get("/{investment_id}", response_model=investment_models.InvestmentDetail)
def read_investment(
    investment_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    return {"investment": crud_investment.get_investment_for(db, investment_id, user_id, Action.READ)}


@router.put("/{investment_id}", response_model=investment_models.InvestmentMutation)
def update_investment(
    investment_id: UUID,
    investment: investment_models.InvestmentUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_investment = crud_investment.update_db_investment(
        db=db, investment_id=investment_id, user_id=user_id, investment_updates=investment
    )
    return {"message": "Investment updated successfully", "investment": db_investment}


@router.delete("/{investment_id}", response_model=MessageResponse)
def delete_investment(
    investment_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    crud_investment.delete_db_investment(db=db, investment_id=investment_id, user_id=user_id)
    return {"message": "Investment deleted successfully"}
