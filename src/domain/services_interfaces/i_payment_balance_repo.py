# src/domain/services_interfaces/i_payment_balance_repo.py

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.models.payment_balance import PaymentBalanceSnapshot


class IPaymentBalanceRepository(ABC):
    """
    payment_balance_snapshots tablosu için soyut arayüz.
    (year, month) UNIQUE; her ay için en fazla bir snapshot bulunur.
    """

    @abstractmethod
    def get_snapshot(self, year: int, month: int) -> Optional[PaymentBalanceSnapshot]:
        raise NotImplementedError

    @abstractmethod
    def upsert_snapshot(self, snapshot: PaymentBalanceSnapshot) -> PaymentBalanceSnapshot:
        """
        (year, month) üzerinden UPSERT. Dönüş: id'si dolu snapshot.
        """
        raise NotImplementedError
