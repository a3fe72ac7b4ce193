from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from src.crud.crud_account import accessible_account_filter
from src.db.core import InvestmentAssetDB, InvestmentType
from src.db.patch import INVESTMENT_FIELDS, apply_patch, build_patch
from src.errors import NotFoundError
from src.models.investment import InvestmentCreate, InvestmentUpdate
from src.services.permissions import Action, require_permission

NOT_FOUND = "Investment not found"


# ===== INVESTMENT ASSET OPERATIONS =====

def create_db_investment(db: Session, user_id: UUID, investment_data: InvestmentCreate) -> InvestmentAssetDB:
    require_permission(db, user_id, investment_data.account_id, Action.CREATE)

    db_investment = InvestmentAssetDB(
        account_id=investment_data.account_id,
        name=investment_data.name,
        type=investment_data.type,
        ticker=investment_data.ticker,
        quantity=investment_data.quantity,
        purchase_price=investment_data.purchase_price,
        current_price=investment_data.current_price,
        purchase_date=investment_data.purchase_date,
        notes=investment_data.notes,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_investment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_investment)
    return db_investment


def read_db_investments(db: Session, user_id: UUID, account_id: Optional[UUID] = None,
                        investment_type: Optional[InvestmentType] = None) -> List[InvestmentAssetDB]:
    query = db.query(InvestmentAssetDB).filter(
        *accessible_account_filter(InvestmentAssetDB.account_id, user_id, account_id)
    )
    if investment_type:
        query = query.filter(InvestmentAssetDB.type == investment_type)
    return query.order_by(InvestmentAssetDB.created_at.desc()).all()


def get_investment_for(db: Session, investment_id: UUID, user_id: UUID, action: Action) -> InvestmentAssetDB:
    db_investment = db.get(InvestmentAssetDB, investment_id)
    if db_investment is None:
        raise NotFoundError(NOT_FOUND)
    require_permission(db, user_id, db_investment.account_id, action, not_found=NOT_FOUND)
    return db_investment


def update_db_investment(db: Session, investment_id: UUID, user_id: UUID,
                         investment_updates: InvestmentUpdate) -> InvestmentAssetDB:
    db_investment = get_investment_for(db, investment_id, user_id, Action.UPDATE)
    patch = build_patch(INVESTMENT_FIELDS, investment_updates.model_dump(exclude_unset=True))

    apply_patch(db, InvestmentAssetDB, investment_id, patch)
    db.commit()
    db.refresh(db_investment)
    return db_investment


def delete_db_investment(db: Session, investment_id: UUID, user_id: UUID) -> None:
    db_investment = get_investment_for(db, investment_id, user_id, Action.DELETE)
    db.delete(db_investment)
    db.commit()
