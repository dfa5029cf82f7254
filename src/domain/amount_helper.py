# src/domain/amount_helper.py

from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR, localcontext
from typing import Any, Dict, Iterable, Mapping, Optional, Union

AmountInput = Union[int, float, str, Decimal, None]

ONE_DECIMAL = Decimal("0.1")
ZERO = Decimal("0")


def to_decimal(value: Union[int, float, str, Decimal]) -> Decimal:
    """
    Gelen değeri Decimal'e çevirir.
    float'lar str() üzerinden çevrilir (0.1 → Decimal('0.1'), binary artığı taşımaz).
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        return Decimal(value.strip())
    return Decimal(value)


def truncate(amount: AmountInput) -> Optional[Decimal]:
    """
    Tutarı tek ondalık basamağa keser (yuvarlama YAPMAZ).

    Kural: floor(amount * 10) / 10
      - truncate(1.27)  -> 1.2
      - truncate(-1.27) -> -1.3   (negatiflerde de floor)
      - truncate(None) / truncate("") / truncate("  ") -> None
    """
    if amount is None or (isinstance(amount, str) and amount.strip() == ""):
        return None

    value = to_decimal(amount)
    if not value.is_finite():
        return value

    # quantize, sonucun tüm basamaklarını tutacak hassasiyette çalışmalı
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(ONE_DECIMAL, rounding=ROUND_FLOOR)


def truncate_or_zero(amount: AmountInput) -> Decimal:
    result = truncate(amount)
    return ZERO if result is None else result


def truncate_amounts(data: Mapping[str, Any], amount_fields: Iterable[str]) -> Dict[str, Any]:
    """
    Bir dict içindeki tutar alanlarını toplu olarak keser.
    Alan yoksa veya None ise dokunulmaz. Orijinal dict değiştirilmez.
    """
    result = dict(data)
    for field in amount_fields:
        if result.get(field) is not None:
            result[field] = truncate(result[field])
    return result
