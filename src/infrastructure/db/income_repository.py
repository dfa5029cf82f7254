# src/infrastructure/db/income_repository.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from src.domain.models.daily_income import DailyIncome
from src.domain.services_interfaces.i_income_repo import IIncomeRepository
from .mysql_connection import MySQLConnectionProvider

_SELECT_COLUMNS = """
    id, income_date, vehicle_id, conductor_id,
    turn1_amount, turn2_amount, turn3_amount, turn4_amount, turn5_amount,
    wechat_amount, fuel_subsidy, reward_penalty,
    revenue, net_income, turn_count, is_overtime, operator_name, remark,
    created_at, updated_at
"""

_WRITE_COLUMNS = (
    "income_date", "vehicle_id", "conductor_id",
    "turn1_amount", "turn2_amount", "turn3_amount", "turn4_amount", "turn5_amount",
    "wechat_amount", "fuel_subsidy", "reward_penalty",
    "revenue", "net_income", "turn_count", "is_overtime", "operator_name", "remark",
)


def _opt_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _opt_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


class MySQLIncomeRepository(IIncomeRepository):
    """
    IIncomeRepository'nin MySQL implementasyonu.
    daily_incomes tablosuna erişir.
    """

    def __init__(self, connection_provider: MySQLConnectionProvider) -> None:
        self._cp = connection_provider

    # ---------- Row → Domain Mapper ---------- #

    def _row_to_income(self, row: dict) -> DailyIncome:
        return DailyIncome(
            id=row["id"],
            income_date=row["income_date"],
            vehicle_id=row["vehicle_id"],
            conductor_id=row["conductor_id"],
            turn1_amount=_opt_decimal(row["turn1_amount"]),
            turn2_amount=_opt_decimal(row["turn2_amount"]),
            turn3_amount=_opt_decimal(row["turn3_amount"]),
            turn4_amount=_opt_decimal(row["turn4_amount"]),
            turn5_amount=_opt_decimal(row["turn5_amount"]),
            wechat_amount=_opt_decimal(row["wechat_amount"]) or Decimal("0"),
            fuel_subsidy=_opt_decimal(row["fuel_subsidy"]) or Decimal("0"),
            reward_penalty=_opt_decimal(row["reward_penalty"]) or Decimal("0"),
            revenue=_opt_decimal(row["revenue"]) or Decimal("0"),
            net_income=_opt_decimal(row["net_income"]) or Decimal("0"),
            turn_count=int(row["turn_count"] or 0),
            is_overtime=bool(row["is_overtime"]),
            operator_name=row.get("operator_name") or "",
            remark=row.get("remark"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def _income_to_params(self, income: DailyIncome) -> tuple:
        return (
            income.income_date,
            income.vehicle_id,
            income.conductor_id,
            _opt_str(income.turn1_amount),
            _opt_str(income.turn2_amount),
            _opt_str(income.turn3_amount),
            _opt_str(income.turn4_amount),
            _opt_str(income.turn5_amount),
            str(income.wechat_amount),
            str(income.fuel_subsidy),
            str(income.reward_penalty),
            str(income.revenue),
            str(income.net_income),
            income.turn_count,
            int(income.is_overtime),
            income.operator_name,
            income.remark,
        )

    def _fetch_all(self, sql: str, params: tuple) -> List[DailyIncome]:
        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(sql, params)
            rows = cursor.fetchall()

        return [self._row_to_income(r) for r in rows]

    def _fetch_one(self, sql: str, params: tuple) -> Optional[DailyIncome]:
        with self._cp.get_connection() as conn:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(sql, params)
            row = cursor.fetchone()

        if row is None:
            return None
        return self._row_to_income(row)

    # ---------- READ operasyonları ---------- #

    def get_incomes_for_date(self, income_date: date) -> List[DailyIncome]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_incomes
            WHERE income_date = %s
            ORDER BY vehicle_id
        """
        return self._fetch_all(sql, (income_date,))

    def get_incomes_between(self, start_date: date, end_date: date) -> List[DailyIncome]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_incomes
            WHERE income_date BETWEEN %s AND %s
            ORDER BY income_date, vehicle_id
        """
        return self._fetch_all(sql, (start_date, end_date))

    def get_vehicle_incomes_between(
        self,
        vehicle_id: str,
        start_date: date,
        end_date: date,
    ) -> List[DailyIncome]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_incomes
            WHERE vehicle_id = %s AND income_date BETWEEN %s AND %s
            ORDER BY income_date
        """
        return self._fetch_all(sql, (vehicle_id, start_date, end_date))

    def get_income_by_id(self, income_id: int) -> Optional[DailyIncome]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_incomes
            WHERE id = %s
        """
        return self._fetch_one(sql, (income_id,))

    def get_income_for_vehicle(self, income_date: date, vehicle_id: str) -> Optional[DailyIncome]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_incomes
            WHERE income_date = %s AND vehicle_id = %s
        """
        return self._fetch_one(sql, (income_date, vehicle_id))

    # ---------- WRITE operasyonları ---------- #

    def insert_income(self, income: DailyIncome) -> DailyIncome:
        placeholders = ", ".join(["%s"] * len(_WRITE_COLUMNS))
        sql = f"""
            INSERT INTO daily_incomes ({", ".join(_WRITE_COLUMNS)})
            VALUES ({placeholders})
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, self._income_to_params(income))
            new_id = cursor.lastrowid

        return self.get_income_by_id(new_id)

    def update_income(self, income: DailyIncome) -> DailyIncome:
        assignments = ", ".join(f"{col} = %s" for col in _WRITE_COLUMNS)
        sql = f"""
            UPDATE daily_incomes
            SET {assignments}
            WHERE id = %s
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, self._income_to_params(income) + (income.id,))

        return self.get_income_by_id(income.id)

    def upsert_incomes_bulk(self, incomes: Iterable[DailyIncome]) -> None:
        incomes_list = list(incomes)
        if not incomes_list:
            return

        placeholders = ", ".join(["%s"] * len(_WRITE_COLUMNS))
        # UNIQUE(income_date, vehicle_id) anahtarı güncellenmez
        updates = ", ".join(
            f"{col} = VALUES({col})"
            for col in _WRITE_COLUMNS
            if col not in ("income_date", "vehicle_id")
        )
        sql = f"""
            INSERT INTO daily_incomes ({", ".join(_WRITE_COLUMNS)})
            VALUES ({placeholders})
            ON DUPLICATE KEY UPDATE {updates}
        """
        params = [self._income_to_params(i) for i in incomes_list]

        with self._cp.get_connection() as conn:
            cursor = conn.cursor()
            cursor.executemany(sql, params)
