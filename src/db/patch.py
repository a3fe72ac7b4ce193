"""
Partial updates built from an allow-list of mutable columns.

Only keys present both in the allow-list and in the request body become
assignments. Column names always come from the allow-list, never from
the client, and values are sent as bound parameters.
"""
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, NamedTuple, Type
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session

from src.db.core import Base, TransactionType
from src.errors import EmptyPatchError


ACCOUNT_FIELDS = ("name", "type", "currency", "color", "icon", "is_active")
CATEGORY_FIELDS = ("name", "color", "icon", "is_active")
TRANSACTION_FIELDS = ("date", "description", "amount", "category_id", "payment_method", "notes", "tags")
BUDGET_FIELDS = ("name", "amount", "alert_threshold", "end_date", "is_active")
GOAL_FIELDS = ("name", "description", "target_amount", "current_amount", "target_date", "is_achieved")
INVESTMENT_FIELDS = ("name", "ticker", "quantity", "purchase_price", "current_price", "purchase_date", "notes")


class Patch(NamedTuple):
    assignments: List[str]
    values: List[Any]

    def as_dict(self) -> dict:
        return dict(zip(self.assignments, self.values))

    def get(self, field: str, default: Any = None) -> Any:
        if field in self.assignments:
            return self.values[self.assignments.index(field)]
        return default


def build_patch(allowed_fields: Iterable[str], body: Mapping[str, Any]) -> Patch:
    """
    Select the allow-listed fields present in body, in allow-list order.

    Raises:
        EmptyPatchError: if no allow-listed field is present
    """
    assignments = []
    values = []
    for field in allowed_fields:
        if field in body:
            assignments.append(field)
            values.append(body[field])

    if not assignments:
        raise EmptyPatchError()
    return Patch(assignments, values)


def transaction_type_for(amount) -> TransactionType:
    return TransactionType.INCOME if Decimal(str(amount)) >= 0 else TransactionType.EXPENSE


def build_transaction_patch(body: Mapping[str, Any]) -> Patch:
    """Like build_patch, appending the derived type whenever amount changes."""
    patch = build_patch(TRANSACTION_FIELDS, body)
    if "amount" in patch.assignments:
        patch.assignments.append("type")
        patch.values.append(transaction_type_for(patch.get("amount")))
    return patch


def apply_patch(db: Session, model: Type[Base], row_id: UUID, patch: Patch) -> None:
    """Issue a single UPDATE for the row; the caller commits."""
    statement = (
        update(model)
        .where(model.id == row_id)
        .values(patch.as_dict())
        .execution_options(synchronize_session="fetch")
    )
    db.execute(statement)
