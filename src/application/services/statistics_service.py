# src/application/services/statistics_service.py

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional

from src.domain.amount_helper import ZERO, truncate
from src.domain.date_range import DateInput, iter_days, parse_date
from src.domain.models.daily_statistics import DailyStatistics
from src.domain.models.vehicle import VehicleStatus
from src.domain.services_interfaces.i_income_repo import IIncomeRepository
from src.domain.services_interfaces.i_statistics_repo import IStatisticsRepository
from src.domain.services_interfaces.i_vehicle_repo import IVehicleRepository

logger = logging.getLogger(__name__)


class StatisticsService:
    """
    Günlük gelir istatistiklerini hesaplayan ve saklayan application servisi.

    Bu servis:
      - Verilen güne ait gelir kayıtlarını toplar,
      - Ortalamaları AKTİF filo büyüklüğüne böler (girilen kayıt sayısına değil),
      - Sonucu daily_statistics tablosuna tarih üzerinden UPSERT eder.

    Repository hataları yakalanmaz, çağırana aynen çıkar.
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

    # --------- Hesaplama --------- #

    def calculate_and_update(self, stat_date: DateInput) -> DailyStatistics:
        """
        Verilen günün istatistiğini hesaplar ve UPSERT eder.

        Parametreler:
            stat_date: 'YYYY-MM-DD' veya date

        Dönüş:
            DB'ye yazılmış DailyStatistics
        """
        day = parse_date(stat_date)

        incomes = self._income_repo.get_incomes_for_date(day)

        total_revenue = sum((i.revenue for i in incomes), ZERO)
        total_net_income = sum((i.net_income for i in incomes), ZERO)
        entered_vehicle_count = len(incomes)

        # Geçmiş bir gün için bile bugünkü filo sayılır
        total_vehicle_count = self._vehicle_repo.count_by_status(VehicleStatus.ACTIVE)

        if total_vehicle_count > 0:
            average_revenue = truncate(total_revenue / Decimal(total_vehicle_count))
            average_net_income = truncate(total_net_income / Decimal(total_vehicle_count))
        else:
            average_revenue = ZERO
            average_net_income = ZERO

        statistics = DailyStatistics(
            id=None,
            stat_date=day,
            total_revenue=truncate(total_revenue),
            total_net_income=truncate(total_net_income),
            vehicle_count=entered_vehicle_count,
            average_revenue=average_revenue,
            average_net_income=average_net_income,
        )

        saved = self._statistics_repo.upsert_daily_statistics(statistics)
        logger.debug(
            "Daily statistics for %s: revenue=%s net=%s entered=%d fleet=%d",
            day, saved.total_revenue, saved.total_net_income,
            entered_vehicle_count, total_vehicle_count,
        )
        return saved

    def recalculate(self, stat_date: DateInput) -> DailyStatistics:
        """
        Veri düzeltme amaçlı yeniden hesaplama. calculate_and_update ile aynı.
        """
        logger.info("Recalculating daily statistics for %s", stat_date)
        return self.calculate_and_update(stat_date)

    def batch_recalculate(self, start_date: DateInput, end_date: DateInput) -> int:
        """
        [start_date, end_date] aralığındaki her gün için sırayla yeniden hesaplar.

        Her gün bağımsız bir UPSERT'tür; aradaki bir hata kalan günleri
        işlemeden yukarı çıkar, önceki günler yazılmış olarak kalır.

        Dönüş:
            İşlenen gün sayısı (ters aralıkta 0).
        """
        count = 0
        for day in iter_days(start_date, end_date):
            self.calculate_and_update(day)
            count += 1

        logger.info("Batch recalculated %d day(s) between %s and %s", count, start_date, end_date)
        return count

    # --------- Okuma --------- #

    def get_by_date(self, stat_date: DateInput) -> Optional[DailyStatistics]:
        return self._statistics_repo.get_by_date(parse_date(stat_date))

    def get_by_date_range(self, start_date: DateInput, end_date: DateInput) -> List[DailyStatistics]:
        """
        Aralıktaki satırlar, en yeni tarih en başta.
        """
        return self._statistics_repo.get_between(parse_date(start_date), parse_date(end_date))
