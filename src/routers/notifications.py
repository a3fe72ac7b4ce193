from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from src.crud import crud_notification
from src.db.core import get_db
from src.models import notification as notification_models
from src.services.auth import get_current_user_id

router = APIRouter(
    prefix="/api/notifications",
    tags=["notifications"],
)


@router.get("", response_model=notification_models.NotificationListResponse)
def read_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    The current user's most recent notifications, newest first.
    """
    return {
        "notifications": crud_notification.read_db_notifications(db, user_id, unread_only=unread_only),
        "unread_count": crud_notification.count_unread(db, user_id),
    }


# Declared before /{notification_id}/read so "read-all" is never parsed as an id
@router.put("/read-all", response_model=notification_models.NotificationsMarked)
def mark_all_read(
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    updated = crud_notification.mark_all_read(db, user_id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.put("/{notification_id}/read", response_model=notification_models.NotificationMutation)
def mark_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    notification = crud_notification.mark_read(db, notification_id, user_id)
    return {"message": "Notification marked as read", "notification": notification}
