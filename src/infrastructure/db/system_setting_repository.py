# src/infrastructure/db/system_setting_repository.py

from __future__ import annotations

from typing import Optional

from src.domain.services_interfaces.i_system_setting_repo import ISystemSettingRepository
from .mysql_connection import MySQLConnectionProvider


class MySQLSystemSettingRepository(ISystemSettingRepository):
    """
    system_settings tablosu (key UNIQUE).
    """

    def __init__(self, connection_provider: MySQLConnectionProvider) -> None:
        self._cp = connection_provider

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        sql = "SELECT `value` FROM system_settings WHERE `key` = %s"
        with self._cp.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, (key,))
            row = cursor.fetchone()

        if row is None or row[0] is None:
            return default
        return row[0]

    def set_value(self, key: str, value: str, description: Optional[str] = None) -> None:
        sql = """
            INSERT INTO system_settings (`key`, `value`, description)
            VALUES (%s, %s, %s)
            ON DUPLICATE KEY UPDATE
                `value` = VALUES(`value`),
                description = VALUES(description)
        """
        with self._cp.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, (key, value, description))
