# src/application/services/income_entry_service.py

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from src.application.services.statistics_service import StatisticsService
from src.domain.amount_helper import AmountInput, to_decimal
from src.domain.date_range import DateInput, parse_date
from src.domain.models.daily_income import TURN_FIELDS, DailyIncome
from src.domain.services_interfaces.i_income_repo import IIncomeRepository
from src.domain.services_interfaces.i_vehicle_repo import IVehicleRepository

logger = logging.getLogger(__name__)

VEHICLE_ID_PATTERN = re.compile(r"^\d{3}$")
NON_NEGATIVE_FIELDS = TURN_FIELDS + ("wechat_amount", "fuel_subsidy")
REMARK_MAX_LENGTH = 1000
# None gelirse mevcut değeri koruyan alanlar
KEEP_ON_NONE_FIELDS = ("wechat_amount", "fuel_subsidy", "reward_penalty")


class IncomeEntryError(ValueError):
    """
    Gelir girişi doğrulama hatası.
    errors: { alan_adı: [mesaj, ...] }
    """

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


class IncomeNotFoundError(LookupError):
    pass


class IncomeDeletionForbiddenError(IncomeEntryError):
    pass


@dataclass
class IncomeDraft:
    """
    Tek bir araç için girilen ham gelir verisi (henüz hesaplanmamış).
    """
    vehicle_id: str
    conductor_id: str
    turn1_amount: AmountInput = None
    turn2_amount: AmountInput = None
    turn3_amount: AmountInput = None
    turn4_amount: AmountInput = None
    turn5_amount: AmountInput = None
    wechat_amount: AmountInput = None
    fuel_subsidy: AmountInput = None
    reward_penalty: AmountInput = None
    is_overtime: bool = False
    remark: Optional[str] = None


@dataclass(frozen=True)
class VehicleIncomeSlot:
    vehicle_id: str
    has_income: bool
    income: Optional[DailyIncome]


class IncomeEntryService:
    """
    Günlük gelir girişi servisi.

    Her yazma işleminden sonra ilgili günün istatistiği yeniden hesaplanır,
    böylece daily_statistics her zaman daily_incomes ile tutarlı kalır.
    """

    def __init__(
        self,
        income_repo: IIncomeRepository,
        vehicle_repo: IVehicleRepository,
        statistics_service: StatisticsService,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._income_repo = income_repo
        self._vehicle_repo = vehicle_repo
        self._statistics_service = statistics_service
        self._today = today

    # ---------- Okuma ---------- #

    def get_by_date(self, income_date: DateInput) -> List[VehicleIncomeSlot]:
        """
        Her aktif araç için o günkü kaydı (yoksa None) döner.
        """
        day = parse_date(income_date)
        incomes = {i.vehicle_id: i for i in self._income_repo.get_incomes_for_date(day)}

        return [
            VehicleIncomeSlot(
                vehicle_id=v.id,
                has_income=v.id in incomes,
                income=incomes.get(v.id),
            )
            for v in self._vehicle_repo.get_active_vehicles()
        ]

    # ---------- Yazma ---------- #

    def create_income(
        self,
        income_date: DateInput,
        draft: IncomeDraft,
        operator_name: str,
    ) -> DailyIncome:
        """
        Tek bir gelir kaydı oluşturur.

        Raises:
            IncomeEntryError: Doğrulama hatası veya aynı gün/araç için kayıt zaten varsa
        """
        day = parse_date(income_date)
        errors = self._validate_date(day)
        errors.update(self._validate_draft(draft))
        if errors:
            raise IncomeEntryError("Doğrulama başarısız", errors)

        if self._income_repo.get_income_for_vehicle(day, draft.vehicle_id) is not None:
            raise IncomeEntryError(
                f"{day} tarihli {draft.vehicle_id} aracı için kayıt zaten var, güncelleme kullanın"
            )

        income = self._income_repo.insert_income(self._build_income(day, draft, operator_name))
        self._statistics_service.calculate_and_update(day)
        return income

    def batch_save(
        self,
        income_date: DateInput,
        drafts: Sequence[IncomeDraft],
        operator_name: str,
    ) -> List[DailyIncome]:
        """
        Aynı gün için birden fazla aracın gelirini toplu kaydeder (insert veya update).

        Dönüş:
            O güne ait (güncel) tüm kayıtlar
        """
        day = parse_date(income_date)
        errors = self._validate_date(day)
        if not drafts:
            errors["incomes"] = ["En az bir kayıt gerekli"]

        for idx, draft in enumerate(drafts):
            for field_name, messages in self._validate_draft(draft).items():
                errors[f"incomes.{idx}.{field_name}"] = messages

        if errors:
            raise IncomeEntryError("Doğrulama başarısız", errors)

        incomes = [self._build_income(day, d, operator_name) for d in drafts]
        self._income_repo.upsert_incomes_bulk(incomes)
        self._statistics_service.calculate_and_update(day)

        logger.info("Saved %d income record(s) for %s", len(incomes), day)
        return self._income_repo.get_incomes_for_date(day)

    def update_income(
        self,
        income_id: int,
        changes: Mapping[str, Any],
        operator_name: str,
    ) -> DailyIncome:
        """
        Var olan kaydı günceller. Sadece içinde bulunulan ayın kayıtları değiştirilebilir.

        changes içinde olmayan alanlar aynen kalır.
        wechat_amount / fuel_subsidy / reward_penalty None gelirse mevcut değer korunur;
        tur tutarları None gelirse temizlenir.
        """
        existing = self._income_repo.get_income_by_id(income_id)
        if existing is None:
            raise IncomeNotFoundError(f"Gelir kaydı bulunamadı: {income_id}")

        today = self._today()
        if (existing.income_date.year, existing.income_date.month) != (today.year, today.month):
            raise IncomeEntryError("Sadece içinde bulunulan ayın kayıtları güncellenebilir")

        is_overtime = changes.get("is_overtime")
        merged = IncomeDraft(
            vehicle_id=existing.vehicle_id,
            conductor_id=changes.get("conductor_id") or existing.conductor_id,
            is_overtime=existing.is_overtime if is_overtime is None else bool(is_overtime),
            remark=changes.get("remark", existing.remark),
        )
        for field_name in TURN_FIELDS + KEEP_ON_NONE_FIELDS:
            current = getattr(existing, field_name)
            value = changes.get(field_name, current)
            if value is None and field_name in KEEP_ON_NONE_FIELDS:
                value = current
            setattr(merged, field_name, value)

        errors = self._validate_draft(merged)
        if errors:
            raise IncomeEntryError("Doğrulama başarısız", errors)

        rebuilt = self._build_income(existing.income_date, merged, operator_name)
        updated = self._income_repo.update_income(
            replace(rebuilt, id=existing.id, created_at=existing.created_at)
        )
        self._statistics_service.calculate_and_update(existing.income_date)
        return updated

    def delete_income(self, income_id: int) -> None:
        raise IncomeDeletionForbiddenError("Gelir kayıtları silinemez, sadece güncellenebilir")

    # ---------- Yardımcılar ---------- #

    def _build_income(self, day: date, draft: IncomeDraft, operator_name: str) -> DailyIncome:
        return DailyIncome.create(
            income_date=day,
            vehicle_id=draft.vehicle_id,
            conductor_id=draft.conductor_id,
            turn1_amount=draft.turn1_amount,
            turn2_amount=draft.turn2_amount,
            turn3_amount=draft.turn3_amount,
            turn4_amount=draft.turn4_amount,
            turn5_amount=draft.turn5_amount,
            wechat_amount=draft.wechat_amount,
            fuel_subsidy=draft.fuel_subsidy,
            reward_penalty=draft.reward_penalty,
            is_overtime=draft.is_overtime,
            operator_name=operator_name,
            remark=draft.remark,
        )

    def _validate_date(self, day: date) -> Dict[str, List[str]]:
        if day > self._today():
            return {"date": ["Tarih bugünden sonra olamaz"]}
        return {}

    def _validate_draft(self, draft: IncomeDraft) -> Dict[str, List[str]]:
        errors: Dict[str, List[str]] = {}

        for field_name in ("vehicle_id", "conductor_id"):
            value = getattr(draft, field_name)
            if not isinstance(value, str) or not VEHICLE_ID_PATTERN.match(value):
                errors[field_name] = ["3 haneli sayı olmalı"]
            elif self._vehicle_repo.get_vehicle_by_id(value) is None:
                errors[field_name] = [f"Araç bulunamadı: {value}"]

        for field_name in TURN_FIELDS + ("wechat_amount", "fuel_subsidy", "reward_penalty"):
            value = getattr(draft, field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            try:
                amount = to_decimal(value)
            except (InvalidOperation, ValueError, TypeError):
                errors[field_name] = ["Sayısal olmalı"]
                continue
            if not amount.is_finite():
                errors[field_name] = ["Sayısal olmalı"]
            elif field_name in NON_NEGATIVE_FIELDS and amount < Decimal("0"):
                errors[field_name] = ["Negatif olamaz"]

        if draft.remark is not None and len(draft.remark) > REMARK_MAX_LENGTH:
            errors["remark"] = [f"En fazla {REMARK_MAX_LENGTH} karakter"]

        return errors
