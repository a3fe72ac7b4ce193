from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from src.crud import crud_goal
from src.db.core import get_db
from src.models import goal as goal_models
from src.models.common import MessageResponse
from src.services.auth import get_current_user_id
from src.services.permissions import Action

router = APIRouter(
    prefix="/api/goals",
    tags=["goals"],
)


@router.post("", response_model=goal_models.GoalMutation, status_code=status.HTTP_201_CREATED)
def create_goal(
    goal: goal_models.GoalCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_goal = crud_goal.create_db_goal(db=db, user_id=user_id, goal_data=goal)
    return {"message": "Goal created successfully", "goal": db_goal}


@router.get("", response_model=goal_models.GoalListResponse)
def read_goals(
    account_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Retrieve savings goals, open ones first.
    """
    return {"goals": crud_goal.read_db_goals(db=db, user_id=user_id, account_id=account_id)}


@router.get("/{goal_id}", response_model=goal_models.GoalDetail)
def read_goal(
    goal_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    return {"goal": crud_goal.get_goal_for(db, goal_id, user_id, Action.READ)}


@router.put("/{goal_id}", response_model=goal_models.GoalMutation)
def update_goal(
    goal_id: UUID,
    goal: goal_models.GoalUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_goal = crud_goal.update_db_goal(db=db, goal_id=goal_id, user_id=user_id, goal_updates=goal)
    return {"message": "Goal updated successfully", "goal": db_goal}


@router.delete("/{goal_id}", response_model=MessageResponse)
def delete_goal(
    goal_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    crud_goal.delete_db_goal(db=db, goal_id=goal_id, user_id=user_id)
    return {"message": "Goal deleted successfully"}
