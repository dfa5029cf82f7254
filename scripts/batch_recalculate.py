import sys
import os
import logging
from datetime import date, datetime

# Proje ana dizinini Python yoluna ekle (Modüllerin bulunabilmesi için)
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, '..'))
sys.path.append(project_root)

# Gerekli modülleri import et
from config.logging_config import configure_logging
from config.settings_loader import load_app_settings, load_settings
from src.infrastructure.db.mysql_connection import MySQLConnectionProvider
from src.infrastructure.db.income_repository import MySQLIncomeRepository
from src.infrastructure.db.statistics_repository import MySQLStatisticsRepository
from src.infrastructure.db.vehicle_repository import MySQLVehicleRepository
from src.application.services.statistics_service import StatisticsService

logger = logging.getLogger("batch_recalculate")


def build_statistics_service() -> StatisticsService:
    config = load_settings()
    db_provider = MySQLConnectionProvider(config)
    db_provider.check_connection()
    return StatisticsService(
        MySQLIncomeRepository(db_provider),
        MySQLVehicleRepository(db_provider),
        MySQLStatisticsRepository(db_provider),
    )


def recalculate_process(start_date: date, end_date: date) -> None:
    """
    Verilen tarih aralığı (iki uç dahil) için günlük istatistikleri yeniden hesaplar.
    """
    print(f"\n--- Yeniden Hesaplama Başlatılıyor ---")
    print(f"Hedef: {start_date} ile {end_date} arası")

    # 1. Bağlantı
    try:
        service = build_statistics_service()
        print("Veritabanı bağlantısı sağlandı.")
    except Exception as e:
        logger.exception("Database connection failed")
        print(f"HATA: Veritabanı bağlantısı kurulamadı: {e}")
        return

    # 2. Hesaplama (hata olursa o güne kadar yazılan günler kalır)
    try:
        if start_date == end_date:
            stats = service.recalculate(start_date)
            print(
                f"\n✅ {stats.stat_date}: ciro={stats.total_revenue} net={stats.total_net_income} "
                f"araç={stats.vehicle_count} ort.net={stats.average_net_income}"
            )
        else:
            count = service.batch_recalculate(start_date, end_date)
            print(f"\n✅ BAŞARILI: {count} gün yeniden hesaplandı.")
    except Exception as e:
        logger.exception("Recalculation aborted")
        print(f"HATA: Hesaplama yarıda kesildi: {e}")


def get_date_input(prompt: str) -> date:
    """Kullanıcıdan YYYY-MM-DD formatında tarih alır."""
    while True:
        d_str = input(prompt + " (YYYY-MM-DD): ").strip()
        try:
            return datetime.strptime(d_str, "%Y-%m-%d").date()
        except ValueError:
            print("❌ Hatalı format! Lütfen YYYY-AA-GG şeklinde giriniz. (Örn: 2026-02-11)")


def main_interactive():
    configure_logging(load_app_settings().log_level)

    print("#############################################")
    print("#   FİLO GELİR - İSTATİSTİK YENİDEN HESAP   #")
    print("#############################################")
    print("1. Tek Bir Gün")
    print("2. Belirli Bir Tarih Aralığı")
    print("3. Çıkış")

    choice = input("\nSeçiminiz (1/2/3): ").strip()

    if choice == '1':
        print("\n--- Tek Gün Modu ---")
        target_date = get_date_input("Hangi günü yeniden hesaplamak istiyorsunuz?")
        recalculate_process(target_date, target_date)

    elif choice == '2':
        print("\n--- Tarih Aralığı Modu ---")
        start_date = get_date_input("Başlangıç Tarihi")
        end_date = get_date_input("Bitiş Tarihi (Bu gün DAHİL)")

        if start_date > end_date:
            print("❌ Hata: Başlangıç tarihi bitiş tarihinden sonra olamaz.")
            return

        recalculate_process(start_date, end_date)

    elif choice == '3':
        print("Çıkış yapılıyor.")
        return
    else:
        print("Geçersiz seçim.")


if __name__ == "__main__":
    main_interactive()
