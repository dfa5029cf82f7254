"""Tests for the monthly payment balance: averages, due/receivable split and snapshots."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.application.services.payment_balance_service import PaymentBalanceError, split_payment
from src.domain.models.vehicle import VehicleStatus
from tests.fakes import make_income


@pytest.fixture
def fleet(vehicle_repo):
    vehicle_repo.add("001")
    vehicle_repo.add("002")
    vehicle_repo.add("009", VehicleStatus.INACTIVE)


@pytest.fixture
def january(fleet, income_repo, statistics_service):
    # net: 001 → 300, 002 → 100; toplam 400
    income_repo.add(make_income(date(2024, 1, 3), "001", revenue=200))
    income_repo.add(make_income(date(2024, 1, 4), "001", revenue=110, fuel_subsidy=10))
    income_repo.add(make_income(date(2024, 1, 4), "002", revenue=100, conductor_id="C7"))
    statistics_service.batch_recalculate("2024-01-01", "2024-01-31")


def _details(balance):
    return {d.vehicle_id: d for d in balance.vehicle_details}


# ═══════════════════════════════════════════════════════════════
# split_payment
# ═══════════════════════════════════════════════════════════════

class TestSplitPayment:
    def test_vehicle_above_average_pays(self):
        assert split_payment(Decimal("150"), Decimal("300")) == (Decimal("150.0"), Decimal("0"))

    def test_vehicle_below_average_receives(self):
        assert split_payment(Decimal("150"), Decimal("100")) == (Decimal("0"), Decimal("50.0"))

    def test_equal_to_average_is_zero_both_ways(self):
        assert split_payment(Decimal("150"), Decimal("150")) == (Decimal("0"), Decimal("0"))

    def test_result_is_truncated(self):
        due, receivable = split_payment(Decimal("10.09"), Decimal("0"))
        assert due == 0
        assert receivable == Decimal("10.0")


# ═══════════════════════════════════════════════════════════════
# get_by_month
# ═══════════════════════════════════════════════════════════════

class TestGetByMonth:
    def test_live_calculation_uses_global_salary(self, january, payment_balance_service, setting_repo):
        setting_repo.values["manager_salary"] = "100"

        balance = payment_balance_service.get_by_month(2024, 1)

        # (400 - 100) / 2 aktif araç
        assert balance.is_saved is False
        assert balance.manager_salary == Decimal("100.0")
        assert balance.auto_average_income == Decimal("150.0")
        assert balance.manual_average_income is None

        details = _details(balance)
        assert sorted(details) == ["001", "002"]
        assert details["001"].net_income == Decimal("300.0")
        assert details["001"].revenue == Decimal("310.0")
        assert details["001"].fuel_subsidy == Decimal("10.0")
        assert details["001"].turn_count == 2
        assert details["001"].payment_due_auto == Decimal("150.0")
        assert details["001"].payment_receivable_auto == 0
        assert details["002"].conductor_id == "C7"
        assert details["002"].payment_due_auto == 0
        assert details["002"].payment_receivable_auto == Decimal("50.0")

    def test_corrected_values_equal_auto_without_manual_average(self, january, payment_balance_service):
        for detail in payment_balance_service.get_by_month(2024, 1).vehicle_details:
            assert detail.payment_due_corrected == detail.payment_due_auto
            assert detail.payment_receivable_corrected == detail.payment_receivable_auto

    def test_active_vehicle_without_income_receives_average(self, january, vehicle_repo, payment_balance_service):
        vehicle_repo.add("003")

        balance = payment_balance_service.get_by_month(2024, 1)

        # 400 / 3 = 133.33 → 133.3
        assert balance.auto_average_income == Decimal("133.3")
        idle = _details(balance)["003"]
        assert idle.net_income == 0
        assert idle.conductor_id is None
        assert idle.payment_receivable_auto == Decimal("133.3")

    def test_empty_fleet_gives_zero_average(self, payment_balance_service):
        balance = payment_balance_service.get_by_month(2024, 1)

        assert balance.auto_average_income == 0
        assert balance.vehicle_details == []

    def test_salary_above_income_gives_negative_average(self, january, payment_balance_service, setting_repo):
        setting_repo.values["manager_salary"] = "1000"

        balance = payment_balance_service.get_by_month(2024, 1)

        assert balance.auto_average_income == Decimal("-300.0")
        assert _details(balance)["002"].payment_due_auto == Decimal("400.0")

    def test_invalid_month_raises(self, payment_balance_service):
        with pytest.raises(ValueError):
            payment_balance_service.get_by_month(2024, 13)


# ═══════════════════════════════════════════════════════════════
# preview
# ═══════════════════════════════════════════════════════════════

class TestPreview:
    def test_manual_average_only_changes_corrected_values(self, january, payment_balance_service):
        balance = payment_balance_service.preview(2024, 1, "100", "200")

        assert balance.auto_average_income == Decimal("150.0")
        assert balance.manual_average_income == Decimal("200.0")
        details = _details(balance)
        assert details["001"].payment_due_auto == Decimal("150.0")
        assert details["001"].payment_due_corrected == Decimal("100.0")
        assert details["002"].payment_receivable_auto == Decimal("50.0")
        assert details["002"].payment_receivable_corrected == Decimal("100.0")

    def test_zero_manual_average_is_applied(self, january, payment_balance_service):
        balance = payment_balance_service.preview(2024, 1, 0, 0)

        assert balance.manual_average_income == 0
        assert _details(balance)["002"].payment_due_corrected == Decimal("100.0")

    def test_nothing_is_saved(self, january, payment_balance_service, snapshot_repo, setting_repo):
        payment_balance_service.preview(2024, 1, "500", None)

        assert snapshot_repo.rows == {}
        assert setting_repo.values["manager_salary"] == "0"

    def test_amounts_are_truncated(self, january, payment_balance_service):
        balance = payment_balance_service.preview(2024, 1, "100.09", "149.99")

        assert balance.manager_salary == Decimal("100.0")
        assert balance.manual_average_income == Decimal("149.9")


# ═══════════════════════════════════════════════════════════════
# save
# ═══════════════════════════════════════════════════════════════

class TestSave:
    def test_save_stores_snapshot_and_global_salary(self, january, payment_balance_service, snapshot_repo, setting_repo):
        saved = payment_balance_service.save(2024, 1, "100", "200", "ayse")

        assert saved.id == 1
        assert (saved.year, saved.month) == (2024, 1)
        assert saved.operator_name == "ayse"
        assert setting_repo.values["manager_salary"] == "100.0"

        stored = snapshot_repo.rows[(2024, 1)]
        assert stored.auto_average_income == Decimal("150.0")
        assert stored.manual_average_income == Decimal("200.0")
        assert _details(stored)["001"].payment_due_corrected == Decimal("100.0")

    def test_saved_month_keeps_its_own_salary(self, january, payment_balance_service):
        payment_balance_service.save(2024, 1, "100", None, "ayse")
        # başka bir ayın kaydı global maaşı değiştirir
        payment_balance_service.save(2024, 2, "300", None, "ayse")

        january_balance = payment_balance_service.get_by_month(2024, 1)
        march_balance = payment_balance_service.get_by_month(2024, 3)

        assert january_balance.is_saved is True
        assert january_balance.manager_salary == Decimal("100.0")
        assert january_balance.auto_average_income == Decimal("150.0")
        assert january_balance.operator_name == "ayse"
        assert march_balance.is_saved is False
        assert march_balance.manager_salary == Decimal("300.0")

    def test_saved_month_ignores_later_incomes(self, january, income_repo, statistics_service, payment_balance_service):
        payment_balance_service.save(2024, 1, "0", None, "ayse")

        income_repo.add(make_income(date(2024, 1, 5), "002", revenue=600))
        statistics_service.calculate_and_update("2024-01-05")

        assert payment_balance_service.get_by_month(2024, 1).auto_average_income == Decimal("200.0")

    def test_saving_twice_overwrites_same_month(self, january, payment_balance_service, snapshot_repo):
        first = payment_balance_service.save(2024, 1, "100", None, "ayse")
        second = payment_balance_service.save(2024, 1, "100", "120", "mehmet")

        assert second.id == first.id
        assert len(snapshot_repo.rows) == 1
        assert snapshot_repo.rows[(2024, 1)].manual_average_income == Decimal("120.0")
        assert snapshot_repo.rows[(2024, 1)].operator_name == "mehmet"


# ═══════════════════════════════════════════════════════════════
# Doğrulama
# ═══════════════════════════════════════════════════════════════

class TestValidation:
    def test_salary_is_required(self, payment_balance_service):
        with pytest.raises(PaymentBalanceError) as exc_info:
            payment_balance_service.preview(2024, 1, None)

        assert exc_info.value.errors == {"manager_salary": ["Zorunlu alan"]}

    def test_negative_amounts_are_rejected(self, payment_balance_service):
        with pytest.raises(PaymentBalanceError) as exc_info:
            payment_balance_service.preview(2024, 1, "-1", "-5")

        assert set(exc_info.value.errors) == {"manager_salary", "manual_average_income"}

    def test_non_numeric_salary_is_rejected(self, payment_balance_service):
        with pytest.raises(PaymentBalanceError) as exc_info:
            payment_balance_service.preview(2024, 1, "abc")

        assert exc_info.value.errors["manager_salary"] == ["Sayısal olmalı"]

    def test_year_and_month_ranges(self, payment_balance_service):
        with pytest.raises(PaymentBalanceError) as exc_info:
            payment_balance_service.save(1999, 0, "0", None, "ayse")

        assert set(exc_info.value.errors) == {"year", "month"}

    def test_failed_save_changes_nothing(self, payment_balance_service, snapshot_repo, setting_repo):
        with pytest.raises(PaymentBalanceError):
            payment_balance_service.save(2024, 1, "-100", None, "ayse")

        assert snapshot_repo.rows == {}
        assert setting_repo.values["manager_salary"] == "0"
