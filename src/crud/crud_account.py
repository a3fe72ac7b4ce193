from sqlalchemy.orm import Session
from sqlalchemy import select, update
from typing import List, Optional, Tuple
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from src.db.core import AccountDB, AccountMemberDB, NotificationDB, UserDB, MemberRole, MemberStatus
from src.db.patch import ACCOUNT_FIELDS, apply_patch, build_patch
from src.errors import BadRequestError, ConflictError, NotFoundError
from src.models.account import AccountCreate, AccountUpdate, MemberInvite
from src.services.permissions import Action, member_account_ids, require_permission
from src.logging_config import get_logger

logger = get_logger(__name__)


# ===== DATABASE OPERATIONS =====

def create_db_account(db: Session, user_id: UUID, account_data: AccountCreate) -> AccountDB:
    """
    Create an account and make the creator its accepted owner.

    Both rows are written in one transaction: an account without an
    owning member could never be reached again.
    """
    now = datetime.utcnow()
    db_account = AccountDB(
        name=account_data.name,
        type=account_data.type,
        currency=account_data.currency,
        initial_balance=account_data.initial_balance,
        current_balance=account_data.initial_balance,
        color=account_data.color,
        icon=account_data.icon,
        is_active=True,
        created_at=now,
        updated_at=now
    )

    try:
        db.add(db_account)
        db.flush()  # Get the account id without committing

        db.add(AccountMemberDB(
            account_id=db_account.id,
            user_id=user_id,
            role=MemberRole.OWNER,
            status=MemberStatus.ACCEPTED,
            created_at=now,
            accepted_at=now
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_account)
    logger.info(f"User {user_id} created account {db_account.id}")
    return db_account


def read_db_accounts(db: Session, user_id: UUID) -> List[Tuple[AccountDB, MemberRole]]:
    """Accounts the user belongs to, with the user's role on each"""
    rows = db.execute(
        select(AccountDB, AccountMemberDB.role)
        .join(AccountMemberDB, AccountMemberDB.account_id == AccountDB.id)
        .where(
            AccountMemberDB.user_id == user_id,
            AccountMemberDB.status == MemberStatus.ACCEPTED,
            AccountDB.deleted_at.is_(None)
        )
        .order_by(AccountDB.created_at.desc())
    ).all()
    return [(account, role) for account, role in rows]


def read_db_account(db: Session, account_id: UUID, user_id: UUID) -> Tuple[AccountDB, MemberRole]:
    role = require_permission(db, user_id, account_id, Action.READ)
    return db.get(AccountDB, account_id), role


def update_db_account(db: Session, account_id: UUID, user_id: UUID,
                      account_updates: AccountUpdate) -> Tuple[AccountDB, MemberRole]:
    """Update the allow-listed account fields present in the request"""
    role = require_permission(db, user_id, account_id, Action.UPDATE)
    patch = build_patch(ACCOUNT_FIELDS, account_updates.model_dump(exclude_unset=True))

    db_account = db.get(AccountDB, account_id)
    apply_patch(db, AccountDB, account_id, patch)
    db.commit()
    db.refresh(db_account)
    return db_account, role


def delete_db_account(db: Session, account_id: UUID, user_id: UUID) -> None:
    """Soft delete; only the owner may do this"""
    require_permission(db, user_id, account_id, Action.MANAGE)

    db.execute(
        update(AccountDB)
        .where(AccountDB.id == account_id)
        .values(deleted_at=datetime.utcnow())
    )
    db.commit()
    logger.info(f"User {user_id} deleted account {account_id}")


def adjust_balance(db: Session, account_id: UUID, delta: Decimal) -> None:
    """Shift the running balance; the caller commits"""
    if not delta:
        return
    db.execute(
        update(AccountDB)
        .where(AccountDB.id == account_id)
        .values(current_balance=AccountDB.current_balance + delta)
        .execution_options(synchronize_session="fetch")
    )


# ===== MEMBERSHIP OPERATIONS =====

def read_db_members(db: Session, account_id: UUID, user_id: UUID) -> List[AccountMemberDB]:
    require_permission(db, user_id, account_id, Action.READ)
    return (
        db.query(AccountMemberDB)
        .filter(AccountMemberDB.account_id == account_id)
        .order_by(AccountMemberDB.created_at)
        .all()
    )


def invite_member(db: Session, account_id: UUID, user_id: UUID, invite: MemberInvite) -> AccountMemberDB:
    """Owner invites an existing user; the invitee is notified and must accept"""
    require_permission(db, user_id, account_id, Action.MANAGE)

    invitee = db.query(UserDB).filter(UserDB.email == invite.email).first()
    if not invitee:
        raise NotFoundError("User not found")

    existing = db.query(AccountMemberDB).filter(
        AccountMemberDB.account_id == account_id,
        AccountMemberDB.user_id == invitee.id
    ).first()
    if existing:
        raise ConflictError("User is already a member of this account")

    account = db.get(AccountDB, account_id)
    member = AccountMemberDB(
        account_id=account_id,
        user_id=invitee.id,
        invited_by=user_id,
        role=invite.role,
        status=MemberStatus.PENDING,
        created_at=datetime.utcnow()
    )
    notification = NotificationDB(
        user_id=invitee.id,
        type="account_invite",
        title="Account invitation",
        message=f"You were invited to join '{account.name}' as {invite.role.value}",
        data={"account_id": str(account_id)},
        is_read=False,
        created_at=datetime.utcnow()
    )

    try:
        db.add(member)
        db.add(notification)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(member)
    return member


def accept_invitation(db: Session, account_id: UUID, user_id: UUID) -> AccountMemberDB:
    member = db.query(AccountMemberDB).join(AccountDB, AccountDB.id == AccountMemberDB.account_id).filter(
        AccountMemberDB.account_id == account_id,
        AccountMemberDB.user_id == user_id,
        AccountMemberDB.status == MemberStatus.PENDING,
        AccountDB.deleted_at.is_(None)
    ).first()
    if not member:
        raise NotFoundError("Invitation not found")

    member.status = MemberStatus.ACCEPTED
    member.accepted_at = datetime.utcnow()
    db.commit()
    db.refresh(member)
    return member


def transfer_ownership(db: Session, account_id: UUID, user_id: UUID, new_owner_id: UUID) -> AccountMemberDB:
    """Hand the account to another accepted member; the old owner stays on as editor"""
    require_permission(db, user_id, account_id, Action.MANAGE)
    if new_owner_id == user_id:
        raise BadRequestError("You already own this account")

    new_owner = db.query(AccountMemberDB).filter(
        AccountMemberDB.account_id == account_id,
        AccountMemberDB.user_id == new_owner_id,
        AccountMemberDB.status == MemberStatus.ACCEPTED
    ).first()
    if not new_owner:
        raise NotFoundError("Member not found")

    current_owner = db.query(AccountMemberDB).filter(
        AccountMemberDB.account_id == account_id,
        AccountMemberDB.user_id == user_id
    ).one()

    try:
        current_owner.role = MemberRole.EDITOR
        new_owner.role = MemberRole.OWNER
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(new_owner)
    logger.info(f"Account {account_id} transferred from {user_id} to {new_owner_id}")
    return new_owner


def accessible_account_filter(column, user_id: UUID, account_id: Optional[UUID] = None) -> list:
    """Filter clauses restricting an account_id column to the caller's accounts"""
    clauses = [column.in_(member_account_ids(user_id))]
    if account_id is not None:
        clauses.append(column == account_id)
    return clauses
