# src/infrastructure/db/payment_balance_repository.py

from __future__ import annotations

import json
from decimal import Decimal
from typing import Optional

from src.domain.models.payment_balance import PaymentBalanceSnapshot, VehiclePaymentBalance
from src.domain.services_interfaces.i_payment_balance_repo import IPaymentBalanceRepository
from .mysql_connection import MySQLConnectionProvider

_SELECT_COLUMNS = """
    id, year, month, auto_average_income, manual_average_income, manager_salary,
    vehicle_details, operator_name, created_at, updated_at
"""


def _as_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class MySQLPaymentBalanceRepository(IPaymentBalanceRepository):
    """
    IPaymentBalanceRepository'nin MySQL implementasyonu.
    vehicle_details JSON kolonunda saklanır.
    """

    def __init__(self, connection_provider: MySQLConnectionProvider) -> None:
        self._cp = connection_provider

    # ---------- Row → Domain Mapper ---------- #

    def _row_to_snapshot(self, row: dict) -> PaymentBalanceSnapshot:
        details = row["vehicle_details"]
        if isinstance(details, (bytes, bytearray)):
            details = details.decode("utf-8")
        if isinstance(details, str):
            details = json.loads(details)

        return PaymentBalanceSnapshot(
            id=row["id"],
            year=int(row["year"]),
            month=int(row["month"]),
            auto_average_income=_as_decimal(row["auto_average_income"]) or Decimal("0"),
            manual_average_income=_as_decimal(row["manual_average_income"]),
            manager_salary=_as_decimal(row["manager_salary"]) or Decimal("0"),
            vehicle_details=[VehiclePaymentBalance.from_dict(d) for d in details or []],
            operator_name=row.get("operator_name"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    # ---------- READ operasyonları ---------- #

    def get_snapshot(self, year: int, month: int) -> Optional[PaymentBalanceSnapshot]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM payment_balance_snapshots
            WHERE year = %s AND month = %s
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(sql, (year, month))
            row = cursor.fetchone()

        if row is None:
            return None
        return self._row_to_snapshot(row)

    # ---------- WRITE operasyonları (UPSERT) ---------- #

    def upsert_snapshot(self, snapshot: PaymentBalanceSnapshot) -> PaymentBalanceSnapshot:
        """
        UNIQUE(year, month) üzerinden INSERT ... ON DUPLICATE KEY UPDATE,
        ardından satır aynı connection üzerinden tekrar okunur.
        """
        sql = """
            INSERT INTO payment_balance_snapshots (
                year, month, auto_average_income, manual_average_income,
                manager_salary, vehicle_details, operator_name
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE
                auto_average_income = VALUES(auto_average_income),
                manual_average_income = VALUES(manual_average_income),
                manager_salary = VALUES(manager_salary),
                vehicle_details = VALUES(vehicle_details),
                operator_name = VALUES(operator_name)
        """
        select_sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM payment_balance_snapshots
            WHERE year = %s AND month = %s
        """
        details_json = json.dumps(
            [d.to_dict() for d in snapshot.vehicle_details],
            ensure_ascii=False,
        )
        manual = snapshot.manual_average_income

        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(
                sql,
                (
                    snapshot.year,
                    snapshot.month,
                    str(snapshot.auto_average_income),
                    None if manual is None else str(manual),
                    str(snapshot.manager_salary),
                    details_json,
                    snapshot.operator_name,
                ),
            )
            cursor.execute(select_sql, (snapshot.year, snapshot.month))
            row = cursor.fetchone()

        return self._row_to_snapshot(row)
