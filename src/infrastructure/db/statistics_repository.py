# src/infrastructure/db/statistics_repository.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from src.domain.models.daily_statistics import DailyStatistics
from src.domain.services_interfaces.i_statistics_repo import IStatisticsRepository
from .mysql_connection import MySQLConnectionProvider

_SELECT_COLUMNS = """
    id, stat_date, total_revenue, total_net_income, vehicle_count,
    average_revenue, average_net_income, created_at, updated_at
"""


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value if value is not None else 0))


class MySQLStatisticsRepository(IStatisticsRepository):
    """
    IStatisticsRepository'nin MySQL implementasyonu.
    daily_statistics tablosuna erişir.
    """

    def __init__(self, connection_provider: MySQLConnectionProvider) -> None:
        self._cp = connection_provider

    # ---------- Row → Domain Mapper ---------- #

    def _row_to_statistics(self, row: dict) -> DailyStatistics:
        return DailyStatistics(
            id=row["id"],
            stat_date=row["stat_date"],
            total_revenue=_as_decimal(row["total_revenue"]),
            total_net_income=_as_decimal(row["total_net_income"]),
            vehicle_count=int(row["vehicle_count"]),
            average_revenue=_as_decimal(row["average_revenue"]),
            average_net_income=_as_decimal(row["average_net_income"]),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    # ---------- READ operasyonları ---------- #

    def get_by_date(self, stat_date: date) -> Optional[DailyStatistics]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_statistics
            WHERE stat_date = %s
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(sql, (stat_date,))
            row = cursor.fetchone()

        if row is None:
            return None
        return self._row_to_statistics(row)

    def get_between(self, start_date: date, end_date: date) -> List[DailyStatistics]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_statistics
            WHERE stat_date BETWEEN %s AND %s
            ORDER BY stat_date DESC
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(sql, (start_date, end_date))
            rows = cursor.fetchall()

        return [self._row_to_statistics(r) for r in rows]

    # ---------- WRITE operasyonları (UPSERT) ---------- #

    def upsert_daily_statistics(self, statistics: DailyStatistics) -> DailyStatistics:
        """
        INSERT ... ON DUPLICATE KEY UPDATE, UNIQUE(stat_date) constraint'ine dayanır.
        Yazımdan sonra satır aynı connection üzerinden tekrar okunur (id, timestamp'ler için).
        """
        sql = """
            INSERT INTO daily_statistics (
                stat_date, total_revenue, total_net_income, vehicle_count,
                average_revenue, average_net_income
            )
            VALUES (%s, %s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE
                total_revenue = VALUES(total_revenue),
                total_net_income = VALUES(total_net_income),
                vehicle_count = VALUES(vehicle_count),
                average_revenue = VALUES(average_revenue),
                average_net_income = VALUES(average_net_income)
        """
        select_sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_statistics
            WHERE stat_date = %s
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(
                sql,
                (
                    statistics.stat_date,
                    str(statistics.total_revenue),
                    str(statistics.total_net_income),
                    statistics.vehicle_count,
                    str(statistics.average_revenue),
                    str(statistics.average_net_income),
                ),
            )
            cursor.execute(select_sql, (statistics.stat_date,))
            row = cursor.fetchone()

        return self._row_to_statistics(row)
