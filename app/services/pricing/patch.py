"""
Explicit patch structures for partial writes.

Every patch field is in one of three states:
  UNSET     — the caller did not send the field; nothing changes
  None      — the caller sent an explicit null; clear the field
  a value   — the caller sent a value; use it

Request schemas build these from `model_fields_set`, so "not provided" and
"provided as falsy" (False, 0, "") never collapse into each other.
"""

from dataclasses import dataclass, fields
from typing import Any


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


def value_or(value: Any, fallback: Any) -> Any:
    """Return `value` unless it is UNSET, in which case return `fallback`."""
    return fallback if value is UNSET else value


class _Patch:
    def is_empty(self) -> bool:
        return not any(is_set(getattr(self, f.name)) for f in fields(self))

    def provided(self) -> dict[str, Any]:
        """Only the fields the caller sent, explicit nulls included."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if is_set(getattr(self, f.name))
        }


@dataclass(frozen=True)
class TaxPatch(_Patch):
    tax_applicability: Any = UNSET
    tax: Any = UNSET
    tax_type: Any = UNSET


@dataclass(frozen=True)
class AmountPatch(_Patch):
    base_amount: Any = UNSET
    discount: Any = UNSET


@dataclass(frozen=True)
class OwnerPatch(_Patch):
    category_id: Any = UNSET
    sub_category_id: Any = UNSET
