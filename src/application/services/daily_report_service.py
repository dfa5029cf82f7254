# src/application/services/daily_report_service.py

from __future__ import annotations

from typing import Optional

from src.application.services.statistics_service import StatisticsService
from src.domain.amount_helper import ZERO, truncate_or_zero
from src.domain.date_range import DateInput, parse_date
from src.domain.models.daily_income import DailyIncome
from src.domain.models.daily_report import DailyReport, VehicleDailyLine
from src.domain.models.daily_statistics import DailyStatistics
from src.domain.models.vehicle import Vehicle
from src.domain.services_interfaces.i_income_repo import IIncomeRepository
from src.domain.services_interfaces.i_vehicle_repo import IVehicleRepository


class DailyReportService:
    """
    Günlük istatistik ekranı için rapor üretir.

    - Günün istatistiği yoksa önce hesaplanır,
    - Her aktif araç için satır üretilir (kaydı olmayanlar 0 ile),
    - payment_amount = ortalama net gelir - aracın net geliri
    """

    def __init__(
        self,
        statistics_service: StatisticsService,
        income_repo: IIncomeRepository,
        vehicle_repo: IVehicleRepository,
    ) -> None:
        self._statistics_service = statistics_service
        self._income_repo = income_repo
        self._vehicle_repo = vehicle_repo

    def get_daily_report(self, report_date: DateInput) -> DailyReport:
        day = parse_date(report_date)

        statistics = self._statistics_service.get_by_date(day)
        if statistics is None:
            statistics = self._statistics_service.calculate_and_update(day)

        vehicles = self._vehicle_repo.get_active_vehicles()
        incomes = {i.vehicle_id: i for i in self._income_repo.get_incomes_for_date(day)}

        lines = [
            self._build_line(vehicle, incomes.get(vehicle.id), statistics)
            for vehicle in vehicles
        ]

        return DailyReport(
            statistics=statistics,
            total_vehicle_count=len(vehicles),
            vehicles=lines,
        )

    def _build_line(
        self,
        vehicle: Vehicle,
        income: Optional[DailyIncome],
        statistics: DailyStatistics,
    ) -> VehicleDailyLine:
        if income is None:
            return VehicleDailyLine(
                vehicle_id=vehicle.id,
                conductor_id=None,
                revenue=ZERO,
                net_income=ZERO,
                turn_count=0,
                turn_total=ZERO,
                turn1_amount=ZERO,
                turn2_amount=ZERO,
                turn3_amount=ZERO,
                turn4_amount=ZERO,
                turn5_amount=ZERO,
                wechat_amount=ZERO,
                fuel_subsidy=ZERO,
                reward_penalty=ZERO,
                payment_amount=truncate_or_zero(statistics.average_net_income),
                remark="",
                has_income=False,
                is_overtime=False,
            )

        turns = [truncate_or_zero(t) for t in income.turn_amounts]
        return VehicleDailyLine(
            vehicle_id=vehicle.id,
            conductor_id=income.conductor_id,
            revenue=income.revenue,
            net_income=income.net_income,
            turn_count=income.turn_count,
            turn_total=income.turn_total,
            turn1_amount=turns[0],
            turn2_amount=turns[1],
            turn3_amount=turns[2],
            turn4_amount=turns[3],
            turn5_amount=turns[4],
            wechat_amount=income.wechat_amount,
            fuel_subsidy=income.fuel_subsidy,
            reward_penalty=income.reward_penalty,
            payment_amount=truncate_or_zero(statistics.average_net_income - income.net_income),
            remark=income.remark or "",
            has_income=True,
            is_overtime=income.is_overtime,
        )
