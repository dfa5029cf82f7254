# src/application/services/monthly_statistics_service.py

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from src.domain.amount_helper import ZERO, truncate_or_zero
from src.domain.date_range import month_bounds
from src.domain.models.daily_income import DailyIncome
from src.domain.models.monthly_statistics import (
    MonthlyReport,
    MonthlySummary,
    OvertimeVehicle,
    RevenueMatrix,
    RevenueMatrixRow,
    RewardPenaltyEntry,
    VehicleMonthlyTotals,
)
from src.domain.models.vehicle import VehicleStatus
from src.domain.services_interfaces.i_income_repo import IIncomeRepository
from src.domain.services_interfaces.i_statistics_repo import IStatisticsRepository
from src.domain.services_interfaces.i_vehicle_repo import IVehicleRepository

# Sıralama bu sayıyı aşarsa ilk RANKING_HEAD + son RANKING_TAIL satır gösterilir
RANKING_LIMIT = 24
RANKING_HEAD = 20
RANKING_TAIL = 3


def accumulate_vehicle_totals(incomes: List[DailyIncome]) -> Dict[str, VehicleMonthlyTotals]:
    """
    Gelir kayıtlarını araç bazında toplar (kesme yapmadan).
    Tur alanları toplam değil, dönem içindeki en yüksek tek turdur;
    kondüktör olarak son dolu değer kalır.
    """
    result: Dict[str, VehicleMonthlyTotals] = {}
    for income in incomes:
        totals = result.setdefault(income.vehicle_id, VehicleMonthlyTotals(vehicle_id=income.vehicle_id))
        totals.revenue += income.revenue
        totals.net_income += income.net_income
        totals.turn_count += income.turn_count
        totals.turn1_amount = max(totals.turn1_amount, income.turn1_amount or ZERO)
        totals.turn2_amount = max(totals.turn2_amount, income.turn2_amount or ZERO)
        totals.turn3_amount = max(totals.turn3_amount, income.turn3_amount or ZERO)
        totals.turn4_amount = max(totals.turn4_amount, income.turn4_amount or ZERO)
        totals.turn5_amount = max(totals.turn5_amount, income.turn5_amount or ZERO)
        totals.wechat_amount += income.wechat_amount
        totals.fuel_subsidy += income.fuel_subsidy
        totals.reward_penalty += income.reward_penalty
        totals.has_income = True
        totals.is_overtime = totals.is_overtime or income.is_overtime
        if income.conductor_id:
            totals.conductor_id = income.conductor_id
        totals.dates.append(income.income_date)
    return result


class MonthlyStatisticsService:
    """
    Aylık istatistikler:
      - Ay özeti (daily_statistics toplamları, aktif filoya göre ortalama)
      - Araç bazlı ay toplamları ve ödeme farkları
      - Ödül/ceza sıralaması
      - Araç x gün ciro matrisi
    """

    def __init__(
        self,
        income_repo: IIncomeRepository,
        vehicle_repo: IVehicleRepository,
        statistics_repo: IStatisticsRepository,
    ) -> None:
        self._income_repo = income_repo
        self._vehicle_repo = vehicle_repo
        self._statistics_repo = statistics_repo

    # ---------- Ay özeti ---------- #

    def get_by_month(self, year: int, month: int) -> MonthlyReport:
        """
        Raises:
            ValueError: Ay 1-12 aralığında değilse
        """
        start_date, end_date = month_bounds(year, month)

        total_vehicle_count = self._vehicle_repo.count_by_status(VehicleStatus.ACTIVE)
        daily_stats = self._statistics_repo.get_between(start_date, end_date)

        total_revenue = sum((s.total_revenue for s in daily_stats), ZERO)
        total_net_income = sum((s.total_net_income for s in daily_stats), ZERO)

        if total_vehicle_count > 0:
            average_revenue = truncate_or_zero(total_revenue / Decimal(total_vehicle_count))
            average_net_income = truncate_or_zero(total_net_income / Decimal(total_vehicle_count))
        else:
            average_revenue = ZERO
            average_net_income = ZERO

        incomes = self._income_repo.get_incomes_between(start_date, end_date)
        totals_by_vehicle = accumulate_vehicle_totals(incomes)

        vehicles: List[VehicleMonthlyTotals] = []
        for vehicle in self._vehicle_repo.get_active_vehicles():
            totals = totals_by_vehicle.get(vehicle.id) or VehicleMonthlyTotals(vehicle_id=vehicle.id)
            totals.payment_amount = truncate_or_zero(average_net_income - totals.net_income)
            totals.revenue = truncate_or_zero(totals.revenue)
            totals.net_income = truncate_or_zero(totals.net_income)
            totals.turn_total = truncate_or_zero(
                totals.turn1_amount + totals.turn2_amount + totals.turn3_amount
                + totals.turn4_amount + totals.turn5_amount
            )
            totals.wechat_amount = truncate_or_zero(totals.wechat_amount)
            totals.fuel_subsidy = truncate_or_zero(totals.fuel_subsidy)
            totals.reward_penalty = truncate_or_zero(totals.reward_penalty)
            vehicles.append(totals)

        overtime_incomes = [i for i in incomes if i.is_overtime]

        summary = MonthlySummary(
            year=year,
            month=month,
            total_revenue=truncate_or_zero(total_revenue),
            total_net_income=truncate_or_zero(total_net_income),
            vehicle_count=sum(1 for v in vehicles if v.has_income),
            total_vehicle_count=total_vehicle_count,
            income_record_count=len(incomes),
            total_overtime_count=len(overtime_incomes),
            average_revenue=average_revenue,
            average_net_income=average_net_income,
        )

        return MonthlyReport(
            statistics=summary,
            overtime_vehicles=self._group_overtime(overtime_incomes),
            vehicles=vehicles,
            reward_penalty_ranking=self._build_reward_penalty_ranking(incomes),
        )

    # ---------- Araç detayı ---------- #

    def get_vehicle_detail_by_month(self, vehicle_id: str, year: int, month: int) -> List[DailyIncome]:
        """
        Aracın ay içindeki günlük kayıtları, tarihe göre artan.
        """
        start_date, end_date = month_bounds(year, month)
        return self._income_repo.get_vehicle_incomes_between(vehicle_id, start_date, end_date)

    # ---------- Ciro matrisi ---------- #

    def get_revenue_matrix(self, year: int, month: int) -> RevenueMatrix:
        start_date, end_date = month_bounds(year, month)
        days_in_month = end_date.day

        vehicles = self._vehicle_repo.get_active_vehicles()
        matrix: Dict[str, Dict[int, Decimal]] = {
            v.id: {day: ZERO for day in range(1, days_in_month + 1)} for v in vehicles
        }
        daily_totals: Dict[int, Decimal] = {day: ZERO for day in range(1, days_in_month + 1)}

        for income in self._income_repo.get_incomes_between(start_date, end_date):
            row = matrix.get(income.vehicle_id)
            if row is None:
                continue
            day = income.income_date.day
            revenue = truncate_or_zero(income.revenue)
            row[day] = revenue
            daily_totals[day] += revenue

        rows = [
            RevenueMatrixRow(
                vehicle_id=v.id,
                daily_revenues=matrix[v.id],
                monthly_total=sum(matrix[v.id].values(), ZERO),
            )
            for v in vehicles
        ]

        return RevenueMatrix(
            year=year,
            month=month,
            days_in_month=days_in_month,
            vehicles=rows,
            daily_totals=daily_totals,
            grand_total=truncate_or_zero(sum((r.monthly_total for r in rows), ZERO)),
        )

    # ---------- Yardımcılar ---------- #

    def _group_overtime(self, overtime_incomes: List[DailyIncome]) -> List[OvertimeVehicle]:
        dates_by_vehicle: Dict[str, set] = {}
        for income in overtime_incomes:
            dates_by_vehicle.setdefault(income.vehicle_id, set()).add(income.income_date)

        return [
            OvertimeVehicle(vehicle_id=vehicle_id, dates=sorted(dates))
            for vehicle_id, dates in dates_by_vehicle.items()
        ]

    def _build_reward_penalty_ranking(self, incomes: List[DailyIncome]) -> List[RewardPenaltyEntry]:
        """
        Ödül/ceza sıfırdan farklı her kayıt ayrı satırdır.
        Önce pozitifler, sonra negatifler; aynı işarette mutlak değere göre azalan.
        """
        raw = [i for i in incomes if i.reward_penalty != ZERO]
        raw.sort(key=lambda i: (0 if i.reward_penalty > 0 else 1, -abs(i.reward_penalty)))

        def _entry(rank: int, income: DailyIncome) -> RewardPenaltyEntry:
            return RewardPenaltyEntry(
                rank=rank,
                income_date=income.income_date,
                vehicle_id=income.vehicle_id,
                conductor_id=income.conductor_id,
                reward_penalty=income.reward_penalty,
                is_overtime=income.is_overtime,
            )

        total = len(raw)
        if total <= RANKING_LIMIT:
            return [_entry(idx + 1, income) for idx, income in enumerate(raw)]

        ranking = [_entry(idx + 1, income) for idx, income in enumerate(raw[:RANKING_HEAD])]
        ranking.append(RewardPenaltyEntry(rank=RANKING_HEAD + 1, is_ellipsis=True))
        tail_start = total - RANKING_TAIL
        ranking.extend(
            _entry(tail_start + idx + 1, income)
            for idx, income in enumerate(raw[tail_start:])
        )
        return ranking
