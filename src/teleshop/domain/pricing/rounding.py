# ➗ teleshop/domain/pricing/rounding.py
"""
➗ Утиліти округлення грошей.

🔹 `q2` — до копійок (ROUND_HALF_UP), приймає Decimal/int/str/float.
🔹 `to_decimal` — безпечне приведення без проміжного float-шуму.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

Number = Union[Decimal, int, float, str]

_CENTS = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Приводить значення до Decimal (float — через str, щоб уникнути 0.1000000001)."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Не вдалося привести {value!r} до Decimal") from exc


def q2(value: Number) -> Decimal:
    """Округлює до 2 знаків після коми."""
    return to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


__all__ = ["Number", "q2", "to_decimal"]
