# src/domain/models/vehicle.py

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class VehicleStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Vehicle:
    """
    'vehicles' tablosunun domain karşılığı.

    Not:
      - id plakanın son üç hanesidir (örn: "023"), auto increment değildir.
      - Ortalama hesaplarında sadece ACTIVE araçlar sayılır.
    """
    id: str
    sort_order: int = 0
    status: VehicleStatus = VehicleStatus.ACTIVE
    remark: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == VehicleStatus.ACTIVE
