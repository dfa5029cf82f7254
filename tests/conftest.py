from __future__ import annotations

import pytest

from src.application.services.daily_report_service import DailyReportService
from src.application.services.income_entry_service import IncomeEntryService
from src.application.services.monthly_statistics_service import MonthlyStatisticsService
from src.application.services.payment_balance_service import PaymentBalanceService
from src.application.services.statistics_service import StatisticsService
from tests.fakes import (
    TODAY,
    InMemoryIncomeRepository,
    InMemoryPaymentBalanceRepository,
    InMemoryStatisticsRepository,
    InMemorySystemSettingRepository,
    InMemoryVehicleRepository,
)


@pytest.fixture
def vehicle_repo():
    return InMemoryVehicleRepository()


@pytest.fixture
def income_repo():
    return InMemoryIncomeRepository()


@pytest.fixture
def statistics_repo():
    return InMemoryStatisticsRepository()


@pytest.fixture
def statistics_service(income_repo, vehicle_repo, statistics_repo):
    return StatisticsService(income_repo, vehicle_repo, statistics_repo)


@pytest.fixture
def income_entry_service(income_repo, vehicle_repo, statistics_service):
    return IncomeEntryService(income_repo, vehicle_repo, statistics_service, today=lambda: TODAY)


@pytest.fixture
def daily_report_service(statistics_service, income_repo, vehicle_repo):
    return DailyReportService(statistics_service, income_repo, vehicle_repo)


@pytest.fixture
def monthly_service(income_repo, vehicle_repo, statistics_repo):
    return MonthlyStatisticsService(income_repo, vehicle_repo, statistics_repo)


@pytest.fixture
def snapshot_repo():
    return InMemoryPaymentBalanceRepository()


@pytest.fixture
def setting_repo():
    return InMemorySystemSettingRepository({"manager_salary": "0"})


@pytest.fixture
def payment_balance_service(income_repo, vehicle_repo, statistics_repo, snapshot_repo, setting_repo):
    return PaymentBalanceService(income_repo, vehicle_repo, statistics_repo, snapshot_repo, setting_repo)
