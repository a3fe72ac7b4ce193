from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from src.crud import crud_transaction
from src.db.core import get_db
from src.models import transaction as transaction_models
from src.models.common import MessageResponse
from src.services.auth import get_current_user_id
from src.services.permissions import Action

router = APIRouter(
    prefix="/api/transactions",
    tags=["transactions"],
)


@router.post("", response_model=transaction_models.TransactionMutation, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction: transaction_models.TransactionCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Record a transaction. Its type is derived from the sign of the amount
    and the account balance moves with it.
    """
    db_transaction = crud_transaction.create_db_transaction(db=db, user_id=user_id, transaction_data=transaction)
    return {"message": "Transaction created successfully", "transaction": db_transaction}


@router.get("", response_model=transaction_models.TransactionListResponse)
def read_transactions(
    account_id: Optional[UUID] = None,
    category_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Retrieve transactions with optional filtering by account, category and date range.
    """
    transactions = crud_transaction.read_db_transactions(
        db=db,
        user_id=user_id,
        account_id=account_id,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit
    )
    return {"transactions": transactions}


@router.get("/{transaction_id}", response_model=transaction_models.TransactionDetail)
def read_transaction(
    transaction_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    return {"transaction": crud_transaction.get_transaction_for(db, transaction_id, user_id, Action.READ)}


@router.put("/{transaction_id}", response_model=transaction_models.TransactionMutation)
def update_transaction(
    transaction_id: UUID,
    transaction: transaction_models.TransactionUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_transaction = crud_transaction.update_db_transaction(
        db=db, transaction_id=transaction_id, user_id=user_id, transaction_updates=transaction
    )
    return {"message": "Transaction updated successfully", "transaction": db_transaction}


@router.delete("/{transaction_id}", response_model=MessageResponse)
def delete_transaction(
    transaction_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    crud_transaction.delete_db_transaction(db=db, transaction_id=transaction_id, user_id=user_id)
    return {"message": "Transaction deleted successfully"}
