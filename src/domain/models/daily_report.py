# src/domain/models/daily_report.py

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from src.domain.models.daily_statistics import DailyStatistics


@dataclass(frozen=True)
class VehicleDailyLine:
    """
    Günlük raporda tek bir aktif aracın satırı.
    Kaydı girilmemiş araçlarda tutarlar 0, has_income=False.
    """
    vehicle_id: str
    conductor_id: Optional[str]
    revenue: Decimal
    net_income: Decimal
    turn_count: int
    turn_total: Decimal
    turn1_amount: Decimal
    turn2_amount: Decimal
    turn3_amount: Decimal
    turn4_amount: Decimal
    turn5_amount: Decimal
    wechat_amount: Decimal
    fuel_subsidy: Decimal
    reward_penalty: Decimal
    payment_amount: Decimal
    remark: str
    has_income: bool
    is_overtime: bool


@dataclass(frozen=True)
class DailyReport:
    statistics: DailyStatistics
    total_vehicle_count: int
    vehicles: List[VehicleDailyLine]
