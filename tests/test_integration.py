"""Интеграционные тесты с реальными запросами к Nexway Connect API.

Эти тесты используют реальный API и требуют:
1. Настроенный config.yml с валидными client_secret и realm_name
2. Переменную окружения NEXWAY_CONFIG

Запуск только интеграционных тестов:
    uv run pytest -m integration -v

Запуск всех тестов кроме интеграционных:
    uv run pytest -m "not integration" -v
"""

# mypy: disable-error-code="no-untyped-def"

from __future__ import annotations

import pytest

from nexwayconnect import (
    ApiCredentials,
    AuthError,
    NexwayApiClientManager,
    TransportError,
)

# Маркируем весь модуль как интеграционные и медленные тесты
pytestmark = [pytest.mark.integration, pytest.mark.slow]


class TestInvalidCredentials:
    """Тесты с некорректными учетными данными."""

    async def test_invalid_credentials_raise_auth_error(self, manager) -> None:
        """Неверный client secret -> ошибка авторизации или 400."""
        credentials = ApiCredentials(
            client_secret="invalid-secret",
            realm_name="invalid-realm",
            staging=manager.endpoints.environment.value == "staging",
        )
        async with NexwayApiClientManager(credentials) as bad_manager:
            with pytest.raises((AuthError, TransportError)):
                await bad_manager.get_access_token()


class TestTokenLifecycle:
    """Получение, обновление и сброс токена."""

    async def test_acquire_token(self, manager: NexwayApiClientManager) -> None:
        token = await manager.get_access_token()

        assert token
        assert manager.token_manager.is_authenticated

    async def test_refresh_token(self, manager: NexwayApiClientManager) -> None:
        await manager.get_access_token()
        if manager.token_manager.token.refresh_token is None:
            pytest.skip("Сервер не выдал refresh_token")

        token = await manager.get_access_token(force_refresh=True)

        assert token

    async def test_invalidate(self, manager: NexwayApiClientManager) -> None:
        await manager.get_access_token()

        await manager.invalidate_token()

        assert not manager.token_manager.is_authenticated
