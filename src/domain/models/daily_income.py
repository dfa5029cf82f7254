# src/domain/models/daily_income.py

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from src.domain.amount_helper import AmountInput, ZERO, truncate, truncate_or_zero

TURN_FIELDS = (
    "turn1_amount",
    "turn2_amount",
    "turn3_amount",
    "turn4_amount",
    "turn5_amount",
)


@dataclass(frozen=True)
class DailyIncome:
    """
    Bir aracın bir güne ait gelir kaydı.
    DB'deki daily_incomes tablosunun domain karşılığı, UNIQUE(income_date, vehicle_id).

    revenue / net_income / turn_count türetilmiş alanlardır,
    doğrudan değil DailyIncome.create(...) üzerinden hesaplanır.
    """
    id: Optional[int]
    income_date: date
    vehicle_id: str
    conductor_id: str
    turn1_amount: Optional[Decimal]
    turn2_amount: Optional[Decimal]
    turn3_amount: Optional[Decimal]
    turn4_amount: Optional[Decimal]
    turn5_amount: Optional[Decimal]
    wechat_amount: Decimal
    fuel_subsidy: Decimal
    reward_penalty: Decimal
    revenue: Decimal
    net_income: Decimal
    turn_count: int
    is_overtime: bool = False
    operator_name: str = ""
    remark: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def turn_amounts(self) -> tuple:
        return tuple(getattr(self, f) for f in TURN_FIELDS)

    @property
    def turn_total(self) -> Decimal:
        """5 turun nakit toplamı (wechat hariç)."""
        return truncate_or_zero(sum((t for t in self.turn_amounts if t is not None), ZERO))

    # ---- Factory ---- #

    @classmethod
    def create(
        cls,
        income_date: date,
        vehicle_id: str,
        conductor_id: str,
        turn1_amount: AmountInput = None,
        turn2_amount: AmountInput = None,
        turn3_amount: AmountInput = None,
        turn4_amount: AmountInput = None,
        turn5_amount: AmountInput = None,
        wechat_amount: AmountInput = None,
        fuel_subsidy: AmountInput = None,
        reward_penalty: AmountInput = None,
        is_overtime: bool = False,
        operator_name: str = "",
        remark: Optional[str] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> "DailyIncome":
        """
        Girilen tutarları keser ve türetilmiş alanları hesaplar:
          - revenue    = tur toplamı + wechat
          - net_income = revenue - fuel_subsidy + reward_penalty
          - turn_count = 1-4. turlardan tutarı > 0 olanlar (5. tur sayılmaz)
        """
        turns = [
            truncate(turn1_amount),
            truncate(turn2_amount),
            truncate(turn3_amount),
            truncate(turn4_amount),
            truncate(turn5_amount),
        ]
        wechat = truncate_or_zero(wechat_amount)
        fuel = truncate_or_zero(fuel_subsidy)
        reward = truncate_or_zero(reward_penalty)

        turn_sum = sum((t for t in turns if t is not None), ZERO)
        revenue = truncate_or_zero(turn_sum + wechat)
        net_income = truncate_or_zero(revenue - fuel + reward)
        turn_count = sum(1 for t in turns[:4] if t is not None and t > 0)

        return cls(
            id=id,
            income_date=income_date,
            vehicle_id=vehicle_id,
            conductor_id=conductor_id,
            turn1_amount=turns[0],
            turn2_amount=turns[1],
            turn3_amount=turns[2],
            turn4_amount=turns[3],
            turn5_amount=turns[4],
            wechat_amount=wechat,
            fuel_subsidy=fuel,
            reward_penalty=reward,
            revenue=revenue,
            net_income=net_income,
            turn_count=turn_count,
            is_overtime=is_overtime,
            operator_name=operator_name,
            remark=remark,
            created_at=created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        def _f(value: Optional[Decimal]) -> Optional[float]:
            return None if value is None else float(value)

        return {
            "id": self.id,
            "date": self.income_date.isoformat(),
            "vehicle_id": self.vehicle_id,
            "conductor_id": self.conductor_id,
            "turn1_amount": _f(self.turn1_amount),
            "turn2_amount": _f(self.turn2_amount),
            "turn3_amount": _f(self.turn3_amount),
            "turn4_amount": _f(self.turn4_amount),
            "turn5_amount": _f(self.turn5_amount),
            "wechat_amount": float(self.wechat_amount),
            "fuel_subsidy": float(self.fuel_subsidy),
            "reward_penalty": float(self.reward_penalty),
            "revenue": float(self.revenue),
            "net_income": float(self.net_income),
            "turn_count": self.turn_count,
            "is_overtime": self.is_overtime,
            "operator_name": self.operator_name,
            "remark": self.remark,
        }
