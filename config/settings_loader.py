# config/settings_loader.py

from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from dotenv import load_dotenv
from src.infrastructure.db.mysql_connection import MySQLConfig


@dataclass(frozen=True)
class AppSettings:
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    log_level: str = "INFO"


def _load_env() -> None:
    load_dotenv()  # .env otomatik yukarıya doğru taranır (Geliştirme ortamı için)

    # Exe modunda (Nuitka/PyInstaller) .env dosyasını temp klasöründen oku (Gömülü dosya)
    if getattr(sys, 'frozen', False):
        # Bu dosya: config/settings_loader.py. İki üst klasör root'tur.
        base_path = os.path.dirname(os.path.dirname(__file__))
        env_path = os.path.join(base_path, '.env')

        if os.path.exists(env_path):
            load_dotenv(env_path)


def load_settings() -> MySQLConfig:
    """
    .env dosyasını okuyarak MySQLConfig nesnesi oluşturur.
    """
    _load_env()

    return MySQLConfig(
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", "3306")),
        user=os.getenv("DB_USER", "root"),
        password=os.getenv("DB_PASSWORD", ""),
        database=os.getenv("DB_NAME", "fleet_office"),
        pool_name=os.getenv("POOL_NAME", "fleet_pool"),
        pool_size=int(os.getenv("POOL_SIZE", "5")),
    )


def load_app_settings() -> AppSettings:
    """
    API sunucusu ve loglama ayarları.
    """
    _load_env()

    return AppSettings(
        api_host=os.getenv("API_HOST", "127.0.0.1"),
        api_port=int(os.getenv("API_PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
