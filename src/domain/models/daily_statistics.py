# src/domain/models/daily_statistics.py

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DailyStatistics:
    """
    Bir güne ait gelir istatistiği.
    DB'deki daily_statistics tablosunun domain karşılığı (stat_date UNIQUE).

    - vehicle_count: o gün gelir kaydı girilmiş araç sayısı (filo büyüklüğü DEĞİL)
    - average_*: toplam / aktif araç sayısı
    """
    id: Optional[int]
    stat_date: date
    total_revenue: Decimal
    total_net_income: Decimal
    vehicle_count: int
    average_revenue: Decimal
    average_net_income: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.stat_date.isoformat(),
            "total_revenue": float(self.total_revenue),
            "total_net_income": float(self.total_net_income),
            "vehicle_count": self.vehicle_count,
            "average_revenue": float(self.average_revenue),
            "average_net_income": float(self.average_net_income),
        }
