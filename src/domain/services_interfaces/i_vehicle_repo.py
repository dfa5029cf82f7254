# src/domain/services_interfaces/i_vehicle_repo.py

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.models.vehicle import Vehicle, VehicleStatus


class IVehicleRepository(ABC):
    """
    'vehicles' tablosuna erişim için soyut arayüz.

    Bu projede araç kayıtları sadece OKUNUR; CRUD ayrı bir modülün işi.
    """

    @abstractmethod
    def count_by_status(self, status: VehicleStatus) -> int:
        """
        Verilen statüdeki araç sayısını döner. Her çağrıda DB'den taze okunur.
        """
        raise NotImplementedError

    @abstractmethod
    def get_active_vehicles(self) -> List[Vehicle]:
        """
        ACTIVE statüdeki araçlar, id'ye göre sıralı.
        """
        raise NotImplementedError

    @abstractmethod
    def get_vehicle_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        """
        Bulunamazsa None.
        """
        raise NotImplementedError
