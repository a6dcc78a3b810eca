"""Пример использования Nexway Connect API клиента."""

import asyncio
import logging
from os import getenv

from nexwayconnect import NexwayApiClientManager, get_nexway_config

# Настраиваем логирование
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


async def main() -> None:
    """Основная функция."""
    # Загружаем конфигурацию из config.yml
    config = get_nexway_config()
    print(f"Окружение: {'staging' if config.staging else 'production'}")

    # Секрет API для заголовка secret
    secret = getenv("NEXWAY_API_SECRET", "")

    async with NexwayApiClientManager.from_config(config) as manager:
        try:
            systems = await manager.get_operating_systems(secret)
            print(f"\nОперационные системы: {systems}")
        finally:
            # Сбрасываем токены
            await manager.invalidate_token()
            print("\nТокены сброшены.")


if __name__ == "__main__":
    asyncio.run(main())
