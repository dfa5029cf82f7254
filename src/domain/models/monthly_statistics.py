# src/domain/models/monthly_statistics.py

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from src.domain.amount_helper import ZERO


@dataclass
class VehicleMonthlyTotals:
    """
    Bir aracın ay içindeki toplamları.

    Not:
      - turnN_amount alanları AY İÇİNDEKİ EN YÜKSEK tek tur tutarıdır (toplam değil).
      - payment_amount = ortalama net gelir - aracın net geliri
        (pozitif: araç para alır, negatif: araç para öder)
    """
    vehicle_id: str
    conductor_id: Optional[str] = None
    revenue: Decimal = ZERO
    net_income: Decimal = ZERO
    turn_count: int = 0
    turn1_amount: Decimal = ZERO
    turn2_amount: Decimal = ZERO
    turn3_amount: Decimal = ZERO
    turn4_amount: Decimal = ZERO
    turn5_amount: Decimal = ZERO
    turn_total: Decimal = ZERO
    wechat_amount: Decimal = ZERO
    fuel_subsidy: Decimal = ZERO
    reward_penalty: Decimal = ZERO
    payment_amount: Decimal = ZERO
    has_income: bool = False
    is_overtime: bool = False
    dates: List[date] = field(default_factory=list)


@dataclass(frozen=True)
class OvertimeVehicle:
    vehicle_id: str
    dates: List[date]


@dataclass(frozen=True)
class RewardPenaltyEntry:
    """
    Ödül/ceza sıralamasındaki tek satır.
    is_ellipsis=True olan satır sadece "..." ayracıdır, diğer alanlar boştur.
    """
    rank: int
    income_date: Optional[date] = None
    vehicle_id: Optional[str] = None
    conductor_id: Optional[str] = None
    reward_penalty: Optional[Decimal] = None
    is_overtime: bool = False
    is_ellipsis: bool = False


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    total_revenue: Decimal
    total_net_income: Decimal
    vehicle_count: int            # ay içinde en az bir kaydı olan araç sayısı
    total_vehicle_count: int      # aktif filo
    income_record_count: int
    total_overtime_count: int
    average_revenue: Decimal
    average_net_income: Decimal


@dataclass(frozen=True)
class MonthlyReport:
    statistics: MonthlySummary
    overtime_vehicles: List[OvertimeVehicle]
    vehicles: List[VehicleMonthlyTotals]
    reward_penalty_ranking: List[RewardPenaltyEntry]


@dataclass(frozen=True)
class RevenueMatrixRow:
    vehicle_id: str
    daily_revenues: Dict[int, Decimal]
    monthly_total: Decimal


@dataclass(frozen=True)
class RevenueMatrix:
    """
    Aktif araçlar x ayın günleri ciro tablosu.
    """
    year: int
    month: int
    days_in_month: int
    vehicles: List[RevenueMatrixRow]
    daily_totals: Dict[int, Decimal]
    grand_total: Decimal
