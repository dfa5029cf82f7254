# src/application/services/payment_balance_service.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple

from src.application.services.monthly_statistics_service import accumulate_vehicle_totals
from src.domain.amount_helper import AmountInput, ZERO, to_decimal, truncate, truncate_or_zero
from src.domain.date_range import month_bounds
from src.domain.models.payment_balance import (
    PaymentBalance,
    PaymentBalanceSnapshot,
    VehiclePaymentBalance,
)
from src.domain.models.vehicle import VehicleStatus
from src.domain.services_interfaces.i_income_repo import IIncomeRepository
from src.domain.services_interfaces.i_payment_balance_repo import IPaymentBalanceRepository
from src.domain.services_interfaces.i_statistics_repo import IStatisticsRepository
from src.domain.services_interfaces.i_system_setting_repo import ISystemSettingRepository
from src.domain.services_interfaces.i_vehicle_repo import IVehicleRepository

logger = logging.getLogger(__name__)

MANAGER_SALARY_KEY = "manager_salary"
MANAGER_SALARY_DESCRIPTION = "Yönetici maaşı (global ayar)"
MIN_YEAR = 2000
MAX_YEAR = 2100


class PaymentBalanceError(ValueError):
    """
    Aylık denge parametre hatası.
    errors: { alan_adı: [mesaj, ...] }
    """

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


def split_payment(average: Decimal, net_income: Decimal) -> Tuple[Decimal, Decimal]:
    """
    (ödenecek, alınacak) çifti: fark = average - net_income.
    Fark negatifse araç öder, pozitifse araç alır; ikisi birden dolu olmaz.
    """
    difference = average - net_income
    due = -difference if difference < 0 else ZERO
    receivable = difference if difference > 0 else ZERO
    return truncate_or_zero(due), truncate_or_zero(receivable)


class PaymentBalanceService:
    """
    Aylık tahsilat/ödeme dengesi.

    otomatik ortalama = (aydaki toplam net gelir - yönetici maaşı) / aktif araç sayısı
    Her aktif araç için ortalamaya göre ödenecek / alınacak tutar hesaplanır.
    Elle girilen ortalama verilirse *_corrected alanları ona göre yeniden hesaplanır.

    Kaydedilen ay (snapshot) artık canlı veriden değil, kayıttan okunur.
    """

    def __init__(
        self,
        income_repo: IIncomeRepository,
        vehicle_repo: IVehicleRepository,
        statistics_repo: IStatisticsRepository,
        snapshot_repo: IPaymentBalanceRepository,
        setting_repo: ISystemSettingRepository,
    ) -> None:
        self._income_repo = income_repo
        self._vehicle_repo = vehicle_repo
        self._statistics_repo = statistics_repo
        self._snapshot_repo = snapshot_repo
        self._setting_repo = setting_repo

    # ---------- Yönetici maaşı ---------- #

    def get_manager_salary(self) -> Decimal:
        return truncate_or_zero(self._setting_repo.get_value(MANAGER_SALARY_KEY, "0"))

    def set_manager_salary(self, salary: Decimal) -> None:
        self._setting_repo.set_value(MANAGER_SALARY_KEY, str(salary), MANAGER_SALARY_DESCRIPTION)

    # ---------- READ ---------- #

    def get_by_month(self, year: int, month: int) -> PaymentBalance:
        """
        Snapshot varsa onu (kayıttaki maaş ile), yoksa global maaşla canlı hesaplamayı döner.

        Raises:
            ValueError: Ay 1-12 aralığında değilse
        """
        start_date, end_date = month_bounds(year, month)

        snapshot = self._snapshot_repo.get_snapshot(year, month)
        if snapshot is not None:
            return PaymentBalance.from_snapshot(snapshot)

        manager_salary = self.get_manager_salary()
        auto_average, details = self._calculate(start_date, end_date, manager_salary)
        return PaymentBalance(
            year=year,
            month=month,
            auto_average_income=auto_average,
            manual_average_income=None,
            manager_salary=manager_salary,
            vehicle_details=details,
        )

    def preview(
        self,
        year: int,
        month: int,
        manager_salary: AmountInput,
        manual_average_income: AmountInput = None,
    ) -> PaymentBalance:
        """
        Verilen maaş / elle ortalama ile hesaplar, hiçbir şey kaydetmez.
        """
        salary, manual = self._validate(year, month, manager_salary, manual_average_income)
        start_date, end_date = month_bounds(year, month)

        auto_average, details = self._calculate(start_date, end_date, salary)
        final_average = auto_average if manual is None else manual

        return PaymentBalance(
            year=year,
            month=month,
            auto_average_income=auto_average,
            manual_average_income=manual,
            manager_salary=salary,
            vehicle_details=self._apply_corrected_average(details, final_average),
        )

    # ---------- WRITE ---------- #

    def save(
        self,
        year: int,
        month: int,
        manager_salary: AmountInput,
        manual_average_income: AmountInput,
        operator_name: Optional[str],
    ) -> PaymentBalanceSnapshot:
        """
        Ayın dengesini yeniden hesaplayıp snapshot olarak kaydeder (varsa ezer).

        Verilen maaş aynı zamanda global ayar olur: kaydedilmemiş tüm aylar
        bundan sonra bu maaşla hesaplanır.
        """
        salary, manual = self._validate(year, month, manager_salary, manual_average_income)
        start_date, end_date = month_bounds(year, month)

        self.set_manager_salary(salary)

        auto_average, details = self._calculate(start_date, end_date, salary)
        final_average = auto_average if manual is None else manual

        saved = self._snapshot_repo.upsert_snapshot(
            PaymentBalanceSnapshot(
                id=None,
                year=year,
                month=month,
                auto_average_income=auto_average,
                manual_average_income=manual,
                manager_salary=salary,
                vehicle_details=self._apply_corrected_average(details, final_average),
                operator_name=operator_name,
            )
        )
        logger.info(
            "Saved payment balance %04d-%02d (auto=%s manual=%s salary=%s) by %s",
            year, month, auto_average, manual, salary, operator_name,
        )
        return saved

    # ---------- Yardımcılar ---------- #

    def _calculate(
        self,
        start_date: date,
        end_date: date,
        manager_salary: Decimal,
    ) -> Tuple[Decimal, List[VehiclePaymentBalance]]:
        total_vehicle_count = self._vehicle_repo.count_by_status(VehicleStatus.ACTIVE)
        daily_stats = self._statistics_repo.get_between(start_date, end_date)
        total_net_income = sum((s.total_net_income for s in daily_stats), ZERO)

        if total_vehicle_count > 0:
            auto_average = truncate_or_zero((total_net_income - manager_salary) / Decimal(total_vehicle_count))
        else:
            auto_average = ZERO

        totals_by_vehicle = accumulate_vehicle_totals(
            self._income_repo.get_incomes_between(start_date, end_date)
        )

        details: List[VehiclePaymentBalance] = []
        for vehicle in self._vehicle_repo.get_active_vehicles():
            totals = totals_by_vehicle.get(vehicle.id)
            net_income = totals.net_income if totals else ZERO
            due, receivable = split_payment(auto_average, net_income)
            details.append(
                VehiclePaymentBalance(
                    vehicle_id=vehicle.id,
                    conductor_id=totals.conductor_id if totals else None,
                    revenue=truncate_or_zero(totals.revenue if totals else ZERO),
                    net_income=truncate_or_zero(net_income),
                    turn_count=totals.turn_count if totals else 0,
                    fuel_subsidy=truncate_or_zero(totals.fuel_subsidy if totals else ZERO),
                    reward_penalty=truncate_or_zero(totals.reward_penalty if totals else ZERO),
                    payment_due_auto=due,
                    payment_receivable_auto=receivable,
                    payment_due_corrected=due,
                    payment_receivable_corrected=receivable,
                )
            )
        return auto_average, details

    def _apply_corrected_average(
        self,
        details: List[VehiclePaymentBalance],
        average: Decimal,
    ) -> List[VehiclePaymentBalance]:
        corrected = []
        for detail in details:
            due, receivable = split_payment(average, detail.net_income)
            corrected.append(
                replace(detail, payment_due_corrected=due, payment_receivable_corrected=receivable)
            )
        return corrected

    def _validate(
        self,
        year: int,
        month: int,
        manager_salary: AmountInput,
        manual_average_income: AmountInput,
    ) -> Tuple[Decimal, Optional[Decimal]]:
        errors: Dict[str, List[str]] = {}

        if not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
            errors["year"] = [f"{MIN_YEAR}-{MAX_YEAR} arasında olmalı"]
        if not isinstance(month, int) or not 1 <= month <= 12:
            errors["month"] = ["1-12 arasında olmalı"]

        salary = self._non_negative_amount("manager_salary", manager_salary, errors, required=True)
        manual = self._non_negative_amount("manual_average_income", manual_average_income, errors, required=False)

        if errors:
            raise PaymentBalanceError("Doğrulama başarısız", errors)
        return salary, manual

    @staticmethod
    def _non_negative_amount(
        field_name: str,
        value: AmountInput,
        errors: Dict[str, List[str]],
        required: bool,
    ) -> Optional[Decimal]:
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                errors[field_name] = ["Zorunlu alan"]
            return None
        try:
            amount = to_decimal(value)
        except (InvalidOperation, ValueError, TypeError):
            errors[field_name] = ["Sayısal olmalı"]
            return None
        if not amount.is_finite():
            errors[field_name] = ["Sayısal olmalı"]
            return None
        if amount < 0:
            errors[field_name] = ["Negatif olamaz"]
            return None
        return truncate(amount)
