# src/domain/services_interfaces/i_income_repo.py

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional

from src.domain.models.daily_income import DailyIncome


class IIncomeRepository(ABC):
    """
    Günlük gelir (daily_incomes) verisine erişim için soyut arayüz.

    İstatistik hesabı, gelir girişi ve aylık raporlar bu interface
    üzerinden çalışır.
    """

    # --------- READ operasyonları --------- #

    @abstractmethod
    def get_incomes_for_date(self, income_date: date) -> List[DailyIncome]:
        """
        Verilen güne ait tüm gelir kayıtlarını döner (vehicle_id sıralı).
        Kayıt yoksa boş liste.
        """
        raise NotImplementedError

    @abstractmethod
    def get_incomes_between(self, start_date: date, end_date: date) -> List[DailyIncome]:
        """
        [start_date, end_date] aralığındaki tüm kayıtlar, tarih ve araç sıralı.
        """
        raise NotImplementedError

    @abstractmethod
    def get_vehicle_incomes_between(
        self,
        vehicle_id: str,
        start_date: date,
        end_date: date,
    ) -> List[DailyIncome]:
        """
        Tek bir aracın aralıktaki kayıtları, tarihe göre artan.
        """
        raise NotImplementedError

    @abstractmethod
    def get_income_by_id(self, income_id: int) -> Optional[DailyIncome]:
        raise NotImplementedError

    @abstractmethod
    def get_income_for_vehicle(self, income_date: date, vehicle_id: str) -> Optional[DailyIncome]:
        """
        (income_date, vehicle_id) çiftine ait kayıt. Bulunamazsa None.
        """
        raise NotImplementedError

    # --------- WRITE operasyonları --------- #

    @abstractmethod
    def insert_income(self, income: DailyIncome) -> DailyIncome:
        """
        Yeni kaydı ekler, id'si atanmış DailyIncome döner.
        """
        raise NotImplementedError

    @abstractmethod
    def update_income(self, income: DailyIncome) -> DailyIncome:
        """
        income.id ile eşleşen kaydın tüm alanlarını günceller.
        """
        raise NotImplementedError

    @abstractmethod
    def upsert_incomes_bulk(self, incomes: Iterable[DailyIncome]) -> None:
        """
        Birden fazla kaydı UNIQUE(income_date, vehicle_id) üzerinden
        tek transaction içinde UPSERT eder.
        """
        raise NotImplementedError
