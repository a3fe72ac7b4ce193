from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from uuid import UUID
from datetime import datetime, date
from decimal import Decimal

from src.crud.crud_account import accessible_account_filter, adjust_balance
from src.crud.crud_category import check_category_in_account
from src.db.core import TransactionDB
from src.db.patch import apply_patch, build_transaction_patch, transaction_type_for
from src.errors import NotFoundError
from src.models.transaction import TransactionCreate, TransactionUpdate
from src.services.permissions import Action, require_permission
from src.logging_config import get_logger

logger = get_logger(__name__)

NOT_FOUND = "Transaction not found"


# ===== DATABASE OPERATIONS =====

def create_db_transaction(db: Session, user_id: UUID, transaction_data: TransactionCreate) -> TransactionDB:
    """Record a transaction; its type follows the sign of the amount"""
    require_permission(db, user_id, transaction_data.account_id, Action.CREATE)
    check_category_in_account(db, transaction_data.category_id, transaction_data.account_id)

    db_transaction = TransactionDB(
        account_id=transaction_data.account_id,
        category_id=transaction_data.category_id,
        created_by=user_id,
        date=transaction_data.date,
        description=transaction_data.description,
        amount=transaction_data.amount,
        type=transaction_type_for(transaction_data.amount),
        payment_method=transaction_data.payment_method,
        notes=transaction_data.notes,
        tags=transaction_data.tags,
        is_recurring=transaction_data.is_recurring,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_transaction)
        adjust_balance(db, transaction_data.account_id, transaction_data.amount)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_transaction)
    return db_transaction


def read_db_transactions(db: Session, user_id: UUID, account_id: Optional[UUID] = None,
                         category_id: Optional[UUID] = None, start_date: Optional[date] = None,
                         end_date: Optional[date] = None, skip: int = 0, limit: int = 100) -> List[TransactionDB]:
    """Transactions from every account the user belongs to, newest first"""
    query = db.query(TransactionDB).options(joinedload(TransactionDB.category)).filter(
        *accessible_account_filter(TransactionDB.account_id, user_id, account_id)
    )

    if category_id:
        query = query.filter(TransactionDB.category_id == category_id)
    if start_date:
        query = query.filter(TransactionDB.date >= start_date)
    if end_date:
        query = query.filter(TransactionDB.date <= end_date)

    query = query.order_by(TransactionDB.date.desc(), TransactionDB.created_at.desc())
    return query.offset(skip).limit(limit).all()


def get_transaction_for(db: Session, transaction_id: UUID, user_id: UUID, action: Action) -> TransactionDB:
    db_transaction = db.get(TransactionDB, transaction_id)
    if db_transaction is None:
        raise NotFoundError(NOT_FOUND)
    require_permission(db, user_id, db_transaction.account_id, action, not_found=NOT_FOUND)
    return db_transaction


def update_db_transaction(db: Session, transaction_id: UUID, user_id: UUID,
                          transaction_updates: TransactionUpdate) -> TransactionDB:
    """Apply a partial update, re-deriving type and the account balance when amount changes"""
    db_transaction = get_transaction_for(db, transaction_id, user_id, Action.UPDATE)
    patch = build_transaction_patch(transaction_updates.model_dump(exclude_unset=True))

    if "category_id" in patch.assignments:
        check_category_in_account(db, patch.get("category_id"), db_transaction.account_id)

    previous_amount = db_transaction.amount
    try:
        apply_patch(db, TransactionDB, transaction_id, patch)
        if "amount" in patch.assignments:
            adjust_balance(db, db_transaction.account_id, Decimal(patch.get("amount")) - previous_amount)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_transaction)
    return db_transaction


def delete_db_transaction(db: Session, transaction_id: UUID, user_id: UUID) -> None:
    db_transaction = get_transaction_for(db, transaction_id, user_id, Action.DELETE)

    try:
        adjust_balance(db, db_transaction.account_id, -db_transaction.amount)
        db.delete(db_transaction)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"User {user_id} deleted transaction {transaction_id}")
