"""Конфигурация для Nexway Connect API клиента.

Настройки берутся из секции nexway YAML-файла (путь в NEXWAY_CONFIG)
и могут быть переопределены переменными окружения NEXWAY_*.
Переменные окружения автоматически загружаются из .env файла.
"""

from functools import lru_cache
from os import getenv
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr
from yaml import CSafeLoader as SafeLoader
from yaml import load

# Автоматически загружаем переменные из .env файла
load_dotenv()

ROOT_KEY = "nexway"

# Поле конфигурации -> переменная окружения, которая его переопределяет
ENV_OVERRIDES = {
    "client_secret": "NEXWAY_CLIENT_SECRET",
    "realm_name": "NEXWAY_REALM_NAME",
    "staging": "NEXWAY_STAGING",
    "verify_ssl": "NEXWAY_VERIFY_SSL",
    "timeout": "NEXWAY_TIMEOUT",
}


class NexwayConfig(BaseModel):
    """Конфигурация для подключения к Nexway Connect API."""

    # OAuth client secret партнёра
    client_secret: SecretStr

    # Имя realm партнёра
    realm_name: str

    # true — staging (uat), false — production
    staging: bool = True

    # Проверка TLS-сертификатов; false только для совместимости
    verify_ssl: bool = True

    # Таймаут HTTP-запроса, секунды
    timeout: float = Field(default=30.0, gt=0)


def _read_nexway_section() -> dict[str, Any]:
    """Секция nexway из файла NEXWAY_CONFIG (пустая, если файл не задан)."""
    file_path = getenv("NEXWAY_CONFIG")
    if file_path is None:
        return {}

    with open(file_path, "rb") as file:
        config_data = load(file, Loader=SafeLoader)

    if not isinstance(config_data, dict):
        raise ValueError("Конфигурация должна быть словарём")
    if ROOT_KEY not in config_data:
        raise ValueError(f"Ключ '{ROOT_KEY}' не найден в конфигурации")
    section = config_data[ROOT_KEY]
    if not isinstance(section, dict):
        raise ValueError(f"Секция '{ROOT_KEY}' должна быть словарём")
    return section


@lru_cache
def get_nexway_config() -> NexwayConfig:
    """Получить конфигурацию Nexway.

    Значения из YAML перекрываются переменными NEXWAY_CLIENT_SECRET,
    NEXWAY_REALM_NAME, NEXWAY_STAGING, NEXWAY_VERIFY_SSL, NEXWAY_TIMEOUT.

    Returns:
        Экземпляр NexwayConfig

    Raises:
        ValueError: Если нет ни файла, ни переменных окружения,
            или файл имеет неверную структуру
        FileNotFoundError: Если файл не найден
    """
    values = _read_nexway_section()
    for field, env_name in ENV_OVERRIDES.items():
        env_value = getenv(env_name)
        if env_value is not None:
            values[field] = env_value

    if not values:
        raise ValueError(
            "Переменная окружения NEXWAY_CONFIG не задана. "
            "Укажите путь к файлу конфигурации или переменные NEXWAY_*."
        )
    return NexwayConfig.model_validate(values)
