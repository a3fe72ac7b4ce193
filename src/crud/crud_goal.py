from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from src.crud.crud_account import accessible_account_filter
from src.db.core import GoalDB
from src.db.patch import GOAL_FIELDS, apply_patch, build_patch
from src.errors import NotFoundError
from src.models.goal import GoalCreate, GoalUpdate
from src.services.permissions import Action, require_permission

NOT_FOUND = "Goal not found"


def create_db_goal(db: Session, user_id: UUID, goal_data: GoalCreate) -> GoalDB:
    require_permission(db, user_id, goal_data.account_id, Action.CREATE)

    db_goal = GoalDB(
        account_id=goal_data.account_id,
        name=goal_data.name,
        description=goal_data.description,
        target_amount=goal_data.target_amount,
        current_amount=goal_data.current_amount,
        target_date=goal_data.target_date,
        is_achieved=goal_data.current_amount >= goal_data.target_amount,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_goal)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_goal)
    return db_goal


def read_db_goals(db: Session, user_id: UUID, account_id: Optional[UUID] = None) -> List[GoalDB]:
    """Open goals first, then by target date"""
    return (
        db.query(GoalDB)
        .filter(*accessible_account_filter(GoalDB.account_id, user_id, account_id))
        .order_by(GoalDB.is_achieved.asc(), GoalDB.target_date.asc(), GoalDB.created_at.desc())
        .all()
    )


def get_goal_for(db: Session, goal_id: UUID, user_id: UUID, action: Action) -> GoalDB:
    db_goal = db.get(GoalDB, goal_id)
    if db_goal is None:
        raise NotFoundError(NOT_FOUND)
    require_permission(db, user_id, db_goal.account_id, action, not_found=NOT_FOUND)
    return db_goal


def update_db_goal(db: Session, goal_id: UUID, user_id: UUID, goal_updates: GoalUpdate) -> GoalDB:
    """
    Partial update of a goal.

    When either amount changes and the request does not set is_achieved
    itself, the flag is recomputed from the new amounts.
    """
    db_goal = get_goal_for(db, goal_id, user_id, Action.UPDATE)
    patch = build_patch(GOAL_FIELDS, goal_updates.model_dump(exclude_unset=True))

    amounts_changed = "target_amount" in patch.assignments or "current_amount" in patch.assignments
    if amounts_changed and "is_achieved" not in patch.assignments:
        target = patch.get("target_amount", db_goal.target_amount)
        current = patch.get("current_amount", db_goal.current_amount)
        patch.assignments.append("is_achieved")
        patch.values.append(current >= target)

    apply_patch(db, GoalDB, goal_id, patch)
    db.commit()
    db.refresh(db_goal)
    return db_goal


def delete_db_goal(db: Session, goal_id: UUID, user_id: UUID) -> None:
    db_goal = get_goal_for(db, goal_id, user_id, Action.DELETE)
    db.delete(db_goal)
    db.commit()
