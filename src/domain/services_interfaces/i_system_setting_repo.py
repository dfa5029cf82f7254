# src/domain/services_interfaces/i_system_setting_repo.py

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class ISystemSettingRepository(ABC):
    """
    Anahtar/değer şeklindeki global ayarlar (system_settings tablosu).
    Değerler metin olarak saklanır; tip dönüşümü çağıranın işidir.
    """

    @abstractmethod
    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def set_value(self, key: str, value: str, description: Optional[str] = None) -> None:
        raise NotImplementedError
