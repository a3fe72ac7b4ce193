from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID

from src.crud import crud_account
from src.db.core import AccountDB, MemberRole, get_db
from src.models import account as account_models
from src.models.common import MessageResponse
from src.services.auth import get_current_user_id

router = APIRouter(
    prefix="/api/accounts",
    tags=["accounts"],
)


def _with_role(db_account: AccountDB, role: MemberRole) -> account_models.AccountResponse:
    return account_models.AccountResponse.model_validate(db_account).model_copy(update={"role": role})


@router.post("", response_model=account_models.AccountMutation, status_code=status.HTTP_201_CREATED)
def create_account(
    account: account_models.AccountCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Create an account owned by the current user.
    """
    db_account = crud_account.create_db_account(db=db, user_id=user_id, account_data=account)
    return {"message": "Account created successfully", "account": _with_role(db_account, MemberRole.OWNER)}


@router.get("", response_model=account_models.AccountListResponse)
def read_accounts(
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Retrieve every account the current user is an accepted member of.
    """
    rows = crud_account.read_db_accounts(db=db, user_id=user_id)
    return {"accounts": [_with_role(db_account, role) for db_account, role in rows]}


@router.get("/{account_id}", response_model=account_models.AccountDetail)
def read_account(
    account_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_account, role = crud_account.read_db_account(db=db, account_id=account_id, user_id=user_id)
    return {"account": _with_role(db_account, role)}


@router.put("/{account_id}", response_model=account_models.AccountMutation)
def update_account(
    account_id: UUID,
    account: account_models.AccountUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    db_account, role = crud_account.update_db_account(
        db=db, account_id=account_id, user_id=user_id, account_updates=account
    )
    return {"message": "Account updated successfully", "account": _with_role(db_account, role)}


@router.delete("/{account_id}", response_model=MessageResponse)
def delete_account(
    account_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Soft delete an account. Only its owner may do this.
    """
    crud_account.delete_db_account(db=db, account_id=account_id, user_id=user_id)
    return {"message": "Account deleted successfully"}


# ===== MEMBERS =====

@router.get("/{account_id}/members", response_model=account_models.MemberListResponse)
def read_members(
    account_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    return {"members": crud_account.read_db_members(db=db, account_id=account_id, user_id=user_id)}


@router.post("/{account_id}/members", response_model=account_models.MemberMutation,
             status_code=status.HTTP_201_CREATED)
def invite_member(
    account_id: UUID,
    invite: account_models.MemberInvite,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    """
    Invite an existing user by email. The invitation stays pending until
    the invitee accepts it.
    """
    member = crud_account.invite_member(db=db, account_id=account_id, user_id=user_id, invite=invite)
    return {"message": "Invitation sent", "member": member}


@router.post("/{account_id}/members/accept", response_model=account_models.MemberMutation)
def accept_invitation(
    account_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    member = crud_account.accept_invitation(db=db, account_id=account_id, user_id=user_id)
    return {"message": "Invitation accepted", "member": member}


@router.post("/{account_id}/transfer", response_model=account_models.MemberMutation)
def transfer_ownership(
    account_id: UUID,
    transfer: account_models.OwnershipTransfer,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    member = crud_account.transfer_ownership(
        db=db, account_id=account_id, user_id=user_id, new_owner_id=transfer.user_id
    )
    return {"message": "Ownership transferred", "member": member}
