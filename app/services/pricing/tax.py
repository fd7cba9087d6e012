"""
Tax resolution — pure functions, no DB access.

Produces the effective tax triple (tax_applicability, tax, tax_type) for a
record from a TaxPatch:

  Category     — no parent; tax_applicability defaults to False
  SubCategory  — each field independently falls back to the parent
                 Category's current value (copy-on-create, never live)
  Item         — no inheritance; tax_applicability must be supplied

Every resolution ends in `validate_tax`, which enforces:
  - applicable  → tax and tax_type present, tax >= 0, tax_type known,
                  tax <= 100 when tax_type is percentage
  - not applicable → tax and tax_type cleared, whatever was supplied
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from app.errors import ValidationError
from app.models.catalog import TaxType
from app.services.pricing.amounts import to_decimal
from app.services.pricing.patch import TaxPatch, is_set, value_or

logger = logging.getLogger(__name__)

MAX_PERCENTAGE = Decimal("100")
# Largest value a Numeric(12, 4) column holds
MAX_TAX = Decimal("99999999.9999")

TAX_FIELDS_REQUIRED = "Tax amount and tax type are required when tax is applicable"


@dataclass(frozen=True)
class TaxState:
    """The effective tax triple of a record."""

    tax_applicability: bool = False
    tax: Optional[Decimal] = None
    tax_type: Optional[str] = None

    @classmethod
    def of(cls, record: Any) -> "TaxState":
        """Read the stored triple off a Category, SubCategory or Item row."""
        return cls(
            tax_applicability=bool(record.tax_applicability),
            tax=record.tax,
            tax_type=record.tax_type,
        )

    def as_columns(self) -> dict[str, Any]:
        return {
            "tax_applicability": self.tax_applicability,
            "tax": self.tax,
            "tax_type": self.tax_type,
        }


def validate_tax(
    tax_applicability: Any, tax: Any = None, tax_type: Any = None
) -> TaxState:
    """Check a merged candidate triple and return it normalised."""
    if not isinstance(tax_applicability, bool):
        raise ValidationError(
            "Tax applicability must be true or false", field="taxApplicability"
        )

    if not tax_applicability:
        return TaxState()

    if tax is None or tax_type is None:
        field = "tax" if tax is None else "taxType"
        raise ValidationError(TAX_FIELDS_REQUIRED, field=field)

    if tax_type not in TaxType.ALL:
        raise ValidationError(
            f"Tax type must be one of: {', '.join(TaxType.ALL)}", field="taxType"
        )

    amount = to_decimal(tax, "tax", "Tax")
    if amount < 0:
        raise ValidationError("Tax cannot be negative", field="tax")
    if tax_type == TaxType.PERCENTAGE and amount > MAX_PERCENTAGE:
        raise ValidationError("Tax cannot exceed 100%", field="tax")
    if amount >= MAX_TAX + Decimal("0.00005"):
        raise ValidationError(f"Tax cannot exceed {MAX_TAX}", field="tax")

    return TaxState(tax_applicability=True, tax=amount, tax_type=tax_type)


def resolve_category_tax(patch: TaxPatch) -> TaxState:
    applicability = value_or(patch.tax_applicability, False)
    return validate_tax(
        applicability, value_or(patch.tax, None), value_or(patch.tax_type, None)
    )


def resolve_sub_category_tax(patch: TaxPatch, parent: TaxState) -> TaxState:
    """
    Field-by-field inheritance: an omitted field takes the parent's value,
    a supplied one (explicit null included) always wins.
    """
    state = validate_tax(
        value_or(patch.tax_applicability, parent.tax_applicability),
        value_or(patch.tax, parent.tax),
        value_or(patch.tax_type, parent.tax_type),
    )
    inherited = [
        name
        for name in ("tax_applicability", "tax", "tax_type")
        if not is_set(getattr(patch, name))
    ]
    if inherited:
        logger.debug("Sub-category inherited tax fields from parent: %s", inherited)
    return state


def resolve_item_tax(patch: TaxPatch) -> TaxState:
    if not is_set(patch.tax_applicability) or patch.tax_applicability is None:
        raise ValidationError(
            "Tax applicability is required", field="taxApplicability"
        )
    return validate_tax(
        patch.tax_applicability,
        value_or(patch.tax, None),
        value_or(patch.tax_type, None),
    )


def merge_tax(current: TaxState, patch: TaxPatch) -> TaxState:
    """
    Apply a partial update to a stored triple.

    The stored triple already satisfies the invariants, so a record switching
    from not-applicable to applicable has nothing to fall back on: tax and
    tax_type must arrive in the same patch.
    """
    if patch.is_empty():
        return current
    return validate_tax(
        value_or(patch.tax_applicability, current.tax_applicability),
        value_or(patch.tax, current.tax),
        value_or(patch.tax_type, current.tax_type),
    )

