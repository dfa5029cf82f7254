# src/infrastructure/db/vehicle_repository.py

from __future__ import annotations

from typing import List, Optional

from src.domain.models.vehicle import Vehicle, VehicleStatus
from src.domain.services_interfaces.i_vehicle_repo import IVehicleRepository
from .mysql_connection import MySQLConnectionProvider


class MySQLVehicleRepository(IVehicleRepository):
    """
    IVehicleRepository'nin MySQL implementasyonu.
    'vehicles' tablosunu sadece okur.
    """

    def __init__(self, connection_provider: MySQLConnectionProvider) -> None:
        self._cp = connection_provider

    def _row_to_vehicle(self, row: dict) -> Vehicle:
        return Vehicle(
            id=row["id"],
            sort_order=row.get("sort_order") or 0,
            status=VehicleStatus(row["status"]),
            remark=row.get("remark"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def count_by_status(self, status: VehicleStatus) -> int:
        sql = "SELECT COUNT(*) FROM vehicles WHERE status = %s"
        with self._cp.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, (status.value,))
            (count,) = cursor.fetchone()

        return int(count)

    def get_active_vehicles(self) -> List[Vehicle]:
        sql = """
            SELECT id, sort_order, status, remark, created_at, updated_at
            FROM vehicles
            WHERE status = %s
            ORDER BY id
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(sql, (VehicleStatus.ACTIVE.value,))
            rows = cursor.fetchall()

        return [self._row_to_vehicle(r) for r in rows]

    def get_vehicle_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        sql = """
            SELECT id, sort_order, status, remark, created_at, updated_at
            FROM vehicles
            WHERE id = %s
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(sql, (vehicle_id,))
            row = cursor.fetchone()

        if row is None:
            return None
        return self._row_to_vehicle(row)
