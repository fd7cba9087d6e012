"""
Amount derivation — deterministic, fully testable.

    total_amount = round2(base_amount - discount)

Rounding is ROUND_HALF_UP on Decimal values. Monetary inputs are normalised
to cents before the subtraction, so the stored base_amount, discount and
total_amount always satisfy the identity exactly.

Design principle: pure functions, no DB access. The item handler calls
`resolve_amounts` on create and `merge_amounts` on update; both go through
`derive_total`, so the total can never drift from its inputs.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from app.errors import ValidationError
from app.services.pricing.patch import AmountPatch, value_or

CENT = Decimal("0.01")
ZERO = Decimal("0")
# Largest value a Numeric(12, 2) column holds
MAX_MONEY = Decimal("9999999999.99")


def to_decimal(value: Any, field: str, label: str) -> Decimal:
    """
    Coerce a request value to a finite Decimal.
    Floats go through str() so 18.99 stays 18.99 rather than its binary expansion.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{label} must be a number", field=field)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number", field=field)
    if not amount.is_finite():
        raise ValidationError(f"{label} must be a finite number", field=field)
    return amount


def round2(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _money(value: Any, field: str, label: str) -> Decimal:
    """Checked but unrounded amount."""
    amount = to_decimal(value, field, label)
    if amount < 0:
        raise ValidationError(f"{label} must be a non-negative number", field=field)
    # compared before quantize, which fails on very large exponents
    if amount >= MAX_MONEY + CENT / 2:
        raise ValidationError(f"{label} cannot exceed {MAX_MONEY}", field=field)
    return amount


def derive_total(base_amount: Any, discount: Any = ZERO) -> Decimal:
    """
    Compute the total for a base amount and a discount.

    Raises ValidationError naming the offending field when either input is
    negative, not a finite number or too large, or when the discount exceeds
    the base. The comparison uses the amounts as sent, before rounding.
    """
    base = _money(base_amount, "baseAmount", "Base amount")
    off = _money(discount, "discount", "Discount")
    if off > base:
        raise ValidationError(
            "Discount cannot be greater than base amount", field="discount"
        )
    return round2(round2(base) - round2(off))


@dataclass(frozen=True)
class AmountState:
    base_amount: Decimal
    discount: Decimal
    total_amount: Decimal

    @classmethod
    def of(cls, record: Any) -> "AmountState":
        return cls(
            base_amount=record.base_amount,
            discount=record.discount,
            total_amount=record.total_amount,
        )

    def as_columns(self) -> dict[str, Decimal]:
        return {
            "base_amount": self.base_amount,
            "discount": self.discount,
            "total_amount": self.total_amount,
        }


def _build(base_amount: Any, discount: Any) -> AmountState:
    if base_amount is None:
        raise ValidationError("Base amount is required", field="baseAmount")
    # Explicit null discount means "back to the default"
    if discount is None:
        discount = ZERO
    total = derive_total(base_amount, discount)
    return AmountState(
        base_amount=round2(to_decimal(base_amount, "baseAmount", "Base amount")),
        discount=round2(to_decimal(discount, "discount", "Discount")),
        total_amount=total,
    )


def resolve_amounts(patch: AmountPatch) -> AmountState:
    """Amounts for a new item. discount defaults to 0."""
    return _build(value_or(patch.base_amount, None), value_or(patch.discount, ZERO))


def merge_amounts(current: AmountState, patch: AmountPatch) -> AmountState:
    """
    Amounts after a partial update, re-derived from the merged inputs —
    a discount-only change is checked against the stored base amount.
    """
    return _build(
        value_or(patch.base_amount, current.base_amount),
        value_or(patch.discount, current.discount),
    )
