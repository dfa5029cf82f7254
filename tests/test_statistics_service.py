"""Tests for daily statistics aggregation, upsert, reads and batch recalculation."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.application.services.statistics_service import StatisticsService
from src.domain.models.vehicle import VehicleStatus
from tests.fakes import FailingStatisticsRepository, make_income

DAY = date(2024, 1, 1)


# ═══════════════════════════════════════════════════════════════════════════
# calculate_and_update
# ═══════════════════════════════════════════════════════════════════════════


class TestCalculateAndUpdate:
    def test_empty_day_with_empty_fleet_is_all_zero(self, statistics_service, statistics_repo):
        stats = statistics_service.calculate_and_update("2024-01-01")

        assert stats.stat_date == DAY
        assert stats.total_revenue == 0
        assert stats.total_net_income == 0
        assert stats.vehicle_count == 0
        assert stats.average_revenue == 0
        assert stats.average_net_income == 0
        assert list(statistics_repo.rows) == [DAY]

    def test_average_uses_active_fleet_not_entered_count(
        self, statistics_service, income_repo, vehicle_repo
    ):
        for vid in ("001", "002", "003"):
            vehicle_repo.add(vid)
        income_repo.add(make_income(DAY, "001", revenue=100, net_income=80))
        income_repo.add(make_income(DAY, "002", revenue=50, net_income=40))

        stats = statistics_service.calculate_and_update(DAY)

        assert stats.total_revenue == Decimal("150")
        assert stats.total_net_income == Decimal("120")
        assert stats.vehicle_count == 2
        assert stats.average_revenue == Decimal("50.0")
        assert stats.average_net_income == Decimal("40.0")

    def test_inactive_vehicles_do_not_count(self, statistics_service, income_repo, vehicle_repo):
        vehicle_repo.add("001")
        vehicle_repo.add("002", VehicleStatus.INACTIVE)
        income_repo.add(make_income(DAY, "001", revenue=90))

        stats = statistics_service.calculate_and_update(DAY)

        assert stats.average_revenue == Decimal("90.0")

    def test_averages_are_floored(self, statistics_service, income_repo, vehicle_repo):
        for vid in ("001", "002", "003"):
            vehicle_repo.add(vid)
        income_repo.add(make_income(DAY, "001", revenue=100, net_income=-100))

        stats = statistics_service.calculate_and_update(DAY)

        assert stats.average_revenue == Decimal("33.3")
        assert stats.average_net_income == Decimal("-33.4")

    def test_totals_are_floored(self, statistics_service, income_repo, vehicle_repo):
        vehicle_repo.add("001")
        income_repo.add(replace(make_income(DAY, "001"), revenue=Decimal("10.19"), net_income=Decimal("-1.27")))

        stats = statistics_service.calculate_and_update(DAY)

        assert stats.total_revenue == Decimal("10.1")
        assert stats.total_net_income == Decimal("-1.3")

    def test_very_large_totals_are_stored(self, statistics_service, income_repo, vehicle_repo):
        vehicle_repo.add("001")
        vehicle_repo.add("002")
        income_repo.add(make_income(DAY, "001", revenue=Decimal("1E+28")))

        stats = statistics_service.calculate_and_update("2024-01-01")

        assert stats.total_revenue == Decimal("1E+28")
        assert stats.average_revenue == Decimal("5E+27")

    def test_incomes_with_fleet_emptied_later_give_zero_averages(
        self, statistics_service, income_repo
    ):
        income_repo.add(make_income(DAY, "001", revenue=100))

        stats = statistics_service.calculate_and_update(DAY)

        assert stats.total_revenue == Decimal("100")
        assert stats.vehicle_count == 1
        assert stats.average_revenue == 0

    def test_only_the_requested_date_is_summed(self, statistics_service, income_repo, vehicle_repo):
        vehicle_repo.add("001")
        income_repo.add(make_income(DAY, "001", revenue=10))
        income_repo.add(make_income(date(2024, 1, 2), "001", revenue=999))

        assert statistics_service.calculate_and_update(DAY).total_revenue == Decimal("10")

    def test_fleet_is_counted_on_every_call(self, statistics_service, income_repo, vehicle_repo):
        vehicle_repo.add("001")
        income_repo.add(make_income(DAY, "001", revenue=100))
        assert statistics_service.calculate_and_update(DAY).average_revenue == Decimal("100.0")

        vehicle_repo.add("002")
        assert statistics_service.calculate_and_update(DAY).average_revenue == Decimal("50.0")
        assert vehicle_repo.count_calls == 2

    def test_recalculation_overwrites_single_row(
        self, statistics_service, income_repo, vehicle_repo, statistics_repo
    ):
        vehicle_repo.add("001")
        vehicle_repo.add("002")
        income_repo.add(make_income(DAY, "001", revenue=100))
        first = statistics_service.calculate_and_update("2024-01-01")

        income_repo.add(make_income(DAY, "002", revenue=60))
        second = statistics_service.calculate_and_update("2024-01-01")

        assert len(statistics_repo.rows) == 1
        assert second.id == first.id
        assert statistics_repo.get_by_date(DAY).total_revenue == Decimal("160")
        assert statistics_repo.get_by_date(DAY).vehicle_count == 2

    def test_malformed_date_raises_before_touching_store(self, statistics_service, statistics_repo):
        with pytest.raises(ValueError):
            statistics_service.calculate_and_update("2024-02-30")
        assert statistics_repo.rows == {}

    def test_store_failure_propagates(self, income_repo, vehicle_repo):
        service = StatisticsService(income_repo, vehicle_repo, FailingStatisticsRepository(fail_on=DAY))
        with pytest.raises(ConnectionError):
            service.calculate_and_update(DAY)


# ═══════════════════════════════════════════════════════════════════════════
# Reads
# ═══════════════════════════════════════════════════════════════════════════


class TestReads:
    def test_get_by_date_missing_returns_none(self, statistics_service, statistics_repo):
        assert statistics_service.get_by_date("2024-01-01") is None
        assert statistics_repo.upserted_dates == []

    def test_get_by_date_returns_stored_row(self, statistics_service):
        stored = statistics_service.calculate_and_update(DAY)
        assert statistics_service.get_by_date("2024-01-01") == stored

    def test_range_is_inclusive_and_newest_first(self, statistics_service):
        for day in ("2023-12-31", "2024-01-01", "2024-01-03", "2024-01-04"):
            statistics_service.calculate_and_update(day)

        rows = statistics_service.get_by_date_range("2024-01-01", "2024-01-03")

        assert [r.stat_date for r in rows] == [date(2024, 1, 3), date(2024, 1, 1)]

    def test_reversed_range_is_empty(self, statistics_service):
        statistics_service.calculate_and_update(DAY)
        assert statistics_service.get_by_date_range("2024-01-03", "2024-01-01") == []

    def test_reads_do_not_write(self, statistics_service, statistics_repo):
        statistics_service.calculate_and_update(DAY)
        statistics_service.get_by_date(DAY)
        statistics_service.get_by_date_range(DAY, DAY)
        assert statistics_repo.upserted_dates == [DAY]


# ═══════════════════════════════════════════════════════════════════════════
# recalculate / batch_recalculate
# ═══════════════════════════════════════════════════════════════════════════


class TestRecalculate:
    def test_recalculate_matches_calculate_and_update(self, statistics_service, income_repo, vehicle_repo):
        vehicle_repo.add("001")
        income_repo.add(make_income(DAY, "001", revenue=42))

        assert statistics_service.recalculate("2024-01-01") == statistics_service.calculate_and_update(DAY)

    def test_batch_processes_each_day_ascending(self, statistics_service, statistics_repo):
        count = statistics_service.batch_recalculate("2024-01-01", "2024-01-03")

        assert count == 3
        assert statistics_repo.upserted_dates == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]

    def test_batch_reversed_range_processes_nothing(self, statistics_service, statistics_repo):
        assert statistics_service.batch_recalculate("2024-01-03", "2024-01-01") == 0
        assert statistics_repo.upserted_dates == []

    def test_batch_single_day(self, statistics_service):
        assert statistics_service.batch_recalculate("2024-01-01", "2024-01-01") == 1

    def test_batch_aborts_on_failure_keeping_earlier_days(self, income_repo, vehicle_repo):
        repo = FailingStatisticsRepository(fail_on=date(2024, 1, 2))
        service = StatisticsService(income_repo, vehicle_repo, repo)

        with pytest.raises(ConnectionError):
            service.batch_recalculate("2024-01-01", "2024-01-03")

        assert list(repo.rows) == [date(2024, 1, 1)]
