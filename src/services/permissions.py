"""
Account membership checks shared by every resource handler.

A caller reaches an account's data only through an accepted membership on
an account that has not been soft-deleted. A caller without one gets
NotFound, never Forbidden, so account existence is not leaked.
"""
import enum
from typing import Dict, FrozenSet
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.db.core import AccountDB, AccountMemberDB, MemberRole, MemberStatus
from src.errors import ForbiddenError, NotFoundError


class Action(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    # Destructive or ownership operations on the account itself
    MANAGE = "manage"


LEDGER_WRITE = frozenset({Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE})

PERMISSIONS: Dict[MemberRole, FrozenSet[Action]] = {
    MemberRole.VIEWER: frozenset({Action.READ}),
    MemberRole.EDITOR: LEDGER_WRITE,
    MemberRole.OWNER: LEDGER_WRITE | {Action.MANAGE},
}


def member_account_ids(user_id: UUID):
    """Subquery of live account ids the user has accepted membership on."""
    return (
        select(AccountMemberDB.account_id)
        .join(AccountDB, AccountDB.id == AccountMemberDB.account_id)
        .where(
            AccountMemberDB.user_id == user_id,
            AccountMemberDB.status == MemberStatus.ACCEPTED,
            AccountDB.deleted_at.is_(None),
        )
    )


def resolve_role(db: Session, user_id: UUID, account_id: UUID, not_found: str = "Account not found") -> MemberRole:
    role = db.execute(
        select(AccountMemberDB.role)
        .join(AccountDB, AccountDB.id == AccountMemberDB.account_id)
        .where(
            AccountMemberDB.account_id == account_id,
            AccountMemberDB.user_id == user_id,
            AccountMemberDB.status == MemberStatus.ACCEPTED,
            AccountDB.deleted_at.is_(None),
        )
    ).scalar_one_or_none()
    if role is None:
        raise NotFoundError(not_found)
    return role


def authorize(role: MemberRole, action: Action) -> None:
    if action not in PERMISSIONS[role]:
        if action is Action.MANAGE:
            raise ForbiddenError("Only the account owner can perform this action")
        raise ForbiddenError(f"Role '{role.value}' is not allowed to {action.value} this resource")


def require_permission(db: Session, user_id: UUID, account_id: UUID, action: Action,
                       not_found: str = "Account not found") -> MemberRole:
    """Resolve the caller's role on the account, then check it allows the action."""
    role = resolve_role(db, user_id, account_id, not_found=not_found)
    authorize(role, action)
    return role
