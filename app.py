import uvicorn

from config.logging_config import configure_logging
from config.settings_loader import load_app_settings, load_settings
from src.infrastructure.db.mysql_connection import MySQLConnectionProvider
from src.infrastructure.db.income_repository import MySQLIncomeRepository
from src.infrastructure.db.statistics_repository import MySQLStatisticsRepository
from src.infrastructure.db.payment_balance_repository import MySQLPaymentBalanceRepository
from src.infrastructure.db.system_setting_repository import MySQLSystemSettingRepository
from src.infrastructure.db.vehicle_repository import MySQLVehicleRepository

from src.application.services.statistics_service import StatisticsService
from src.application.services.daily_report_service import DailyReportService
from src.application.services.monthly_statistics_service import MonthlyStatisticsService
from src.application.services.income_entry_service import IncomeEntryService
from src.application.services.payment_balance_service import PaymentBalanceService

from src.api.server import ApiServices, create_app


def build_app():
    # 1) DB config & connection pool
    db_config = load_settings()
    conn_provider = MySQLConnectionProvider(db_config)

    # 2) Repositories
    income_repo = MySQLIncomeRepository(conn_provider)
    vehicle_repo = MySQLVehicleRepository(conn_provider)
    statistics_repo = MySQLStatisticsRepository(conn_provider)
    snapshot_repo = MySQLPaymentBalanceRepository(conn_provider)
    setting_repo = MySQLSystemSettingRepository(conn_provider)

    # 3) Services
    statistics_service = StatisticsService(income_repo, vehicle_repo, statistics_repo)
    services = ApiServices(
        statistics_service=statistics_service,
        daily_report_service=DailyReportService(statistics_service, income_repo, vehicle_repo),
        monthly_statistics_service=MonthlyStatisticsService(income_repo, vehicle_repo, statistics_repo),
        income_entry_service=IncomeEntryService(income_repo, vehicle_repo, statistics_service),
        payment_balance_service=PaymentBalanceService(
            income_repo, vehicle_repo, statistics_repo, snapshot_repo, setting_repo,
        ),
    )

    # 4) API
    return create_app(services)


def main():
    settings = load_app_settings()
    configure_logging(settings.log_level)

    uvicorn.run(
        build_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
