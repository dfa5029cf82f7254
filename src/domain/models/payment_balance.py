# src/domain/models/payment_balance.py

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from src.domain.amount_helper import ZERO, to_decimal

_AMOUNT_FIELDS = (
    "revenue",
    "net_income",
    "fuel_subsidy",
    "reward_penalty",
    "payment_due_auto",
    "payment_receivable_auto",
    "payment_due_corrected",
    "payment_receivable_corrected",
)


@dataclass(frozen=True)
class VehiclePaymentBalance:
    """
    Bir aracın aylık tahsilat/ödeme dengesi satırı.

    fark = ortalama gelir - aracın net geliri
      - payment_due_*        : fark negatifse |fark| (araç öder)
      - payment_receivable_* : fark pozitifse fark (araç alır)
    *_auto otomatik ortalamaya, *_corrected elle düzeltilmiş ortalamaya göredir.
    """
    vehicle_id: str
    conductor_id: Optional[str] = None
    revenue: Decimal = ZERO
    net_income: Decimal = ZERO
    turn_count: int = 0
    fuel_subsidy: Decimal = ZERO
    reward_penalty: Decimal = ZERO
    payment_due_auto: Decimal = ZERO
    payment_receivable_auto: Decimal = ZERO
    payment_due_corrected: Decimal = ZERO
    payment_receivable_corrected: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "vehicle_id": self.vehicle_id,
            "conductor_id": self.conductor_id,
            "turn_count": self.turn_count,
        }
        for name in _AMOUNT_FIELDS:
            data[name] = float(getattr(self, name))
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VehiclePaymentBalance":
        """
        Snapshot JSON'undan geri okur.
        """
        return cls(
            vehicle_id=data["vehicle_id"],
            conductor_id=data.get("conductor_id"),
            turn_count=int(data.get("turn_count") or 0),
            **{name: to_decimal(data.get(name) or 0) for name in _AMOUNT_FIELDS},
        )


@dataclass(frozen=True)
class PaymentBalanceSnapshot:
    """
    Kaydedilmiş aylık denge. (year, month) UNIQUE.
    manager_salary kayıt anındaki değerdir (geçmiş kayıt), global ayar değişse de değişmez.
    """
    id: Optional[int]
    year: int
    month: int
    auto_average_income: Decimal
    manual_average_income: Optional[Decimal]
    manager_salary: Decimal
    vehicle_details: List[VehiclePaymentBalance] = field(default_factory=list)
    operator_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PaymentBalance:
    """
    Ekrana dönen aylık denge: snapshot varsa onun içeriği (is_saved=True),
    yoksa canlı hesaplama (is_saved=False).
    """
    year: int
    month: int
    auto_average_income: Decimal
    manual_average_income: Optional[Decimal]
    manager_salary: Decimal
    vehicle_details: List[VehiclePaymentBalance]
    is_saved: bool = False
    operator_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_snapshot(cls, snapshot: PaymentBalanceSnapshot) -> "PaymentBalance":
        return cls(
            year=snapshot.year,
            month=snapshot.month,
            auto_average_income=snapshot.auto_average_income,
            manual_average_income=snapshot.manual_average_income,
            manager_salary=snapshot.manager_salary,
            vehicle_details=list(snapshot.vehicle_details),
            is_saved=True,
            operator_name=snapshot.operator_name,
            created_at=snapshot.created_at,
            updated_at=snapshot.updated_at,
        )
