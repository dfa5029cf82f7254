import sys
import os
import logging
from datetime import date, datetime

# Proje ana dizinini Python yoluna ekle (Modüllerin bulunabilmesi için)
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, '..'))
sys.path.append(project_root)

from config.logging_config import configure_logging
from config.settings_loader import load_app_settings, load_settings
from src.infrastructure.db.mysql_connection import MySQLConnectionProvider
from src.infrastructure.db.income_repository import MySQLIncomeRepository
from src.infrastructure.db.statistics_repository import MySQLStatisticsRepository
from src.infrastructure.db.vehicle_repository import MySQLVehicleRepository
from src.application.services.statistics_service import StatisticsService
from src.application.services.excel_export_service import ExcelExportService

logger = logging.getLogger("export_daily_statistics")


def get_date_input(prompt: str) -> date:
    while True:
        d_str = input(prompt + " (YYYY-MM-DD): ").strip()
        try:
            return datetime.strptime(d_str, "%Y-%m-%d").date()
        except ValueError:
            print("❌ Hatalı format! Lütfen YYYY-AA-GG şeklinde giriniz.")


def main_interactive():
    configure_logging(load_app_settings().log_level)

    print("#############################################")
    print("#   GÜNLÜK İSTATİSTİK → EXCEL               #")
    print("#############################################")

    start_date = get_date_input("Başlangıç Tarihi")
    end_date = get_date_input("Bitiş Tarihi (Bu gün DAHİL)")
    if start_date > end_date:
        print("❌ Hata: Başlangıç tarihi bitiş tarihinden sonra olamaz.")
        return

    default_name = f"gunluk_istatistik_{start_date}_{end_date}.xlsx"
    file_path = input(f"Dosya yolu [{default_name}]: ").strip() or default_name

    try:
        provider = MySQLConnectionProvider(load_settings())
        statistics_service = StatisticsService(
            MySQLIncomeRepository(provider),
            MySQLVehicleRepository(provider),
            MySQLStatisticsRepository(provider),
        )
        path = ExcelExportService(statistics_service).export_daily_statistics(start_date, end_date, file_path)
    except PermissionError as e:
        print(f"HATA: {e}")
        return
    except Exception as e:
        logger.exception("Export failed")
        print(f"HATA: Dışa aktarma başarısız: {e}")
        return

    print(f"\n✅ Kaydedildi: {path}")


if __name__ == "__main__":
    main_interactive()
