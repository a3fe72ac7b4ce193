from sqlalchemy.orm import Session
from sqlalchemy import update
from typing import List
from uuid import UUID

from src.db.core import NotificationDB
from src.errors import NotFoundError

# Only the most recent notifications are listed
MAX_NOTIFICATIONS = 50


def read_db_notifications(db: Session, user_id: UUID, unread_only: bool = False) -> List[NotificationDB]:
    query = db.query(NotificationDB).filter(NotificationDB.user_id == user_id)
    if unread_only:
        query = query.filter(NotificationDB.is_read.is_(False))
    return query.order_by(NotificationDB.created_at.desc()).limit(MAX_NOTIFICATIONS).all()


def count_unread(db: Session, user_id: UUID) -> int:
    return db.query(NotificationDB).filter(
        NotificationDB.user_id == user_id,
        NotificationDB.is_read.is_(False)
    ).count()


def mark_read(db: Session, notification_id: UUID, user_id: UUID) -> NotificationDB:
    """Notifications are private: another user's id is reported as not found"""
    notification = db.query(NotificationDB).filter(
        NotificationDB.id == notification_id,
        NotificationDB.user_id == user_id
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    result = db.execute(
        update(NotificationDB)
        .where(NotificationDB.user_id == user_id, NotificationDB.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount
