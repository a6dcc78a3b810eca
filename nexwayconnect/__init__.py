"""Модуль для работы с Nexway Connect API.

Предоставляет клиента с управлением токенами (client_credentials /
refresh_token) и методами для заказов, подписок, каталога и склада.

Пример использования:
    from nexwayconnect import get_nexway_config, NexwayApiClientManager

    config = get_nexway_config()
    async with NexwayApiClientManager.from_config(config) as manager:
        # Склад
        stock = await manager.get_stock_status(secret, "PRODUCT-REF")

        # Заказы
        order = await manager.get_order(secret, "ORDER-ID")
"""

from nexwayconnect.api_client import ApiClient
from nexwayconnect.api_client_manager import (
    ApiCredentials,
    NexwayApiClientManager,
    normalize_refs,
)
from nexwayconnect.config_reader import NexwayConfig, get_nexway_config
from nexwayconnect.endpoints import EndpointConfig, Environment
from nexwayconnect.exceptions import (
    AuthError,
    EmptyResponseError,
    InvalidRequestError,
    InvalidResponseError,
    MissingParameterError,
    NexwayException,
    TokenNotFoundError,
    TransportError,
)
from nexwayconnect.models import TokenFailure, TokenSuccess, parse_token_response
from nexwayconnect.token_manager import TokenManager

__all__ = [
    # API Client Manager
    "ApiClient",
    "ApiCredentials",
    "NexwayApiClientManager",
    "normalize_refs",
    # Configuration
    "NexwayConfig",
    "get_nexway_config",
    "EndpointConfig",
    "Environment",
    # Exceptions
    "AuthError",
    "EmptyResponseError",
    "InvalidRequestError",
    "InvalidResponseError",
    "MissingParameterError",
    "NexwayException",
    "TokenNotFoundError",
    "TransportError",
    # Token Management
    "TokenFailure",
    "TokenManager",
    "TokenSuccess",
    "parse_token_response",
]
