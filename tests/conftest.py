"""Общие фикстуры для тестов nexwayconnect.

Содержит фикстуры, используемые в различных тестовых модулях.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from os import getenv
from unittest.mock import AsyncMock, MagicMock

import pytest

from nexwayconnect import (
    ApiClient,
    ApiCredentials,
    NexwayApiClientManager,
    get_nexway_config,
)


# ========== Unit-фикстуры ==========


@pytest.fixture
def mock_api_client() -> MagicMock:
    """Создать мок ApiClient с асинхронным execute."""
    client = MagicMock(spec=ApiClient)
    client.execute = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def credentials() -> ApiCredentials:
    return ApiCredentials(client_secret="client-secret", realm_name="realm")


@pytest.fixture
def client_manager(
    credentials: ApiCredentials, mock_api_client: MagicMock
) -> NexwayApiClientManager:
    """Менеджер с замоканным исполнителем запросов."""
    return NexwayApiClientManager(credentials, api_client=mock_api_client)


# ========== Интеграционные фикстуры ==========


@pytest.fixture
async def manager() -> AsyncGenerator[NexwayApiClientManager, None]:
    """Создать менеджер из реальной конфигурации."""
    if getenv("NEXWAY_CONFIG") is None:
        pytest.skip("NEXWAY_CONFIG не задана")
    config = get_nexway_config()
    mgr = NexwayApiClientManager.from_config(config)
    yield mgr
    # Cleanup после каждого теста
    await mgr.invalidate_token()
    await mgr.close()
