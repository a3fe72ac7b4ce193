from pydantic import BaseModel, StringConstraints
from decimal import Decimal
from typing import Optional, List, Any
from typing_extensions import Annotated


# ===== SHARED FIELD TYPES =====

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
HexColor = Annotated[str, StringConstraints(pattern=r"^#[0-9A-Fa-f]{6}$")]
Icon = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]


def reject_null(v: Any) -> Any:
    """Explicit nulls are refused for columns that cannot be cleared"""
    if v is None:
        raise ValueError("Field cannot be null")
    return v


# Integer digits left by the DECIMAL(15, 2) and DECIMAL(18, 6) columns
MONEY_INTEGER_DIGITS = 13
QUANTITY_INTEGER_DIGITS = 12


def round_money(v):
    return round(v, 2) if v is not None else v


def _bounded(v: Optional[Decimal], places: int, integer_digits: int) -> Optional[Decimal]:
    """Round to ``places`` and refuse values the column cannot hold"""
    if v is None:
        return v
    # Checked before rounding: quantizing 1e30 overflows the decimal context
    limit = Decimal(10) ** integer_digits
    if abs(v) >= limit or abs(round(v, places)) >= limit:
        raise ValueError(f"Must have at most {integer_digits} digits before the decimal point")
    return round(v, places)


def validate_money(v: Optional[Decimal]) -> Optional[Decimal]:
    return _bounded(v, 2, MONEY_INTEGER_DIGITS)


def validate_quantity(v: Optional[Decimal]) -> Optional[Decimal]:
    return _bounded(v, 6, QUANTITY_INTEGER_DIGITS)


# ===== ENVELOPES =====

class MessageResponse(BaseModel):
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every failed request"""
    error: str
    message: str
    statusCode: int
    errors: Optional[List[FieldError]] = None
    stack: Optional[str] = None
