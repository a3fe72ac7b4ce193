from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import datetime

from src.db.core import UserDB
from src.errors import ConflictError, ForbiddenError, NotFoundError, UnauthenticatedError
from src.models.user import UserRegister
from src.services.auth import hash_password, verify_password
from src.logging_config import get_logger

logger = get_logger(__name__)

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid email or password"


# ===== DATABASE OPERATIONS =====

def create_db_user(db: Session, user_data: UserRegister, bcrypt_rounds: int = 10) -> UserDB:
    """Register a new user"""

    existing_user = read_db_user(db, email=user_data.email)
    if existing_user:
        raise ConflictError("Email already registered")

    db_user = UserDB(
        email=user_data.email,
        password_hash=hash_password(user_data.password, rounds=bcrypt_rounds),
        full_name=user_data.full_name,
        is_active=True,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id}")
    return db_user


def read_db_user(db: Session, user_id: Optional[UUID] = None, email: Optional[str] = None) -> Optional[UserDB]:
    """Read a user from the database by id or email"""

    query = db.query(UserDB)

    if user_id:
        return query.filter(UserDB.id == user_id).first()
    elif email:
        return query.filter(UserDB.email == email.lower()).first()
    else:
        raise ValueError("Must provide at least one identifier (user_id or email)")


def get_user_or_404(db: Session, user_id: UUID) -> UserDB:
    db_user = read_db_user(db, user_id=user_id)
    if not db_user:
        raise NotFoundError("User not found")
    return db_user


def authenticate_user(db: Session, email: str, password: str) -> UserDB:
    """
    Check credentials and stamp the login time.

    Raises:
        UnauthenticatedError: unknown email or wrong password (same message)
        ForbiddenError: the credentials match a deactivated user
    """
    user = read_db_user(db, email=email)
    if not user or not verify_password(password, user.password_hash):
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    if not user.is_active:
        raise ForbiddenError("Account is deactivated")

    user.last_login_at = datetime.utcnow()
    db.commit()
    db.refresh(user)

    return user
