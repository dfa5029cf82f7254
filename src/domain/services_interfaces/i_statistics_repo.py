# src/domain/services_interfaces/i_statistics_repo.py

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from src.domain.models.daily_statistics import DailyStatistics


class IStatisticsRepository(ABC):
    """
    Günlük istatistik (daily_statistics) verisine erişim için soyut arayüz.
    stat_date UNIQUE; her gün için en fazla bir satır bulunur.
    """

    # --------- READ operasyonları --------- #

    @abstractmethod
    def get_by_date(self, stat_date: date) -> Optional[DailyStatistics]:
        """
        Verilen güne ait satır. Bulunamazsa None.
        """
        raise NotImplementedError

    @abstractmethod
    def get_between(self, start_date: date, end_date: date) -> List[DailyStatistics]:
        """
        [start_date, end_date] (dahil) aralığındaki satırlar, tarihe göre AZALAN.
        start_date > end_date ise boş liste.
        """
        raise NotImplementedError

    # --------- WRITE operasyonları --------- #

    @abstractmethod
    def upsert_daily_statistics(self, statistics: DailyStatistics) -> DailyStatistics:
        """
        stat_date üzerinden UPSERT:
          - satır yoksa ekler,
          - varsa tarih dışındaki tüm alanları ezer.

        Dönüş:
          - DB'ye yazılmış (id'si dolu) DailyStatistics.
        """
        raise NotImplementedError
