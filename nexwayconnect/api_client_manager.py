"""Фасад Nexway Connect API.

Каждый метод проверяет свои параметры, получает bearer-токен через
TokenManager и выполняет один запрос через ApiClient.
"""

import json
import logging
from collections.abc import Mapping, Sequence, Sized
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from nexwayconnect.api_client import DEFAULT_TIMEOUT, ApiClient, RequestBody
from nexwayconnect.config_reader import NexwayConfig
from nexwayconnect.endpoints import EndpointConfig, Environment
from nexwayconnect.exceptions import (
    EmptyResponseError,
    InvalidResponseError,
    MissingParameterError,
)
from nexwayconnect.token_manager import TokenManager

logger = logging.getLogger(__name__)
logger.setLevel(level=logging.DEBUG)

DEFAULT_REASON_CODE = 2


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, Sized) and len(value) == 0


def _require(operation: str, **params: Any) -> None:
    """Проверить, что все параметры непустые."""
    missing = [name for name, value in params.items() if _is_blank(value)]
    if missing:
        raise MissingParameterError(operation, missing)


def normalize_refs(value: Any) -> list[Any]:
    """Привести одно значение или список к списку.

    Всё, что не list и не tuple, считается одним значением.

    >>> normalize_refs("P1")
    ['P1']
    >>> normalize_refs(["P1", "P2"])
    ['P1', 'P2']
    >>> normalize_refs(12345)
    [12345]
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def parse_reason_code(value: Any) -> int | None:
    """Целочисленный код причины отмены или None.

    Принимаются только целые значения: int, float без дробной части
    и строки из цифр. Дробные значения (1.5, "1.5") и bool отклоняются.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("+-").isdigit():
            return int(stripped)
    return None


def _path_segment(value: str) -> str:
    return quote(str(value), safe="")


@dataclass(frozen=True)
class ApiCredentials:
    """Учетные данные Nexway.

    Attributes:
        client_secret: OAuth client secret
        realm_name: Имя realm партнёра
        staging: Использовать staging окружение
    """

    client_secret: str
    realm_name: str
    staging: bool = True

    def __post_init__(self) -> None:
        _require(
            "ApiCredentials",
            client_secret=self.client_secret,
            realm_name=self.realm_name,
        )

    @property
    def environment(self) -> Environment:
        return Environment.from_staging_flag(self.staging)


class NexwayApiClientManager:
    """Фасад для работы с Nexway Connect API.

    Содержит: ApiClient, TokenManager.
    Перед каждым вызовом API токен запрашивается заново (или обновляется
    по refresh-токену, если он уже есть).

    Использование:
        async with NexwayApiClientManager(credentials) as manager:
            stock = await manager.get_stock_status(secret, ["REF1", "REF2"])
    """

    def __init__(
        self,
        credentials: ApiCredentials,
        api_client: ApiClient | None = None,
        verify_ssl: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Инициализация менеджера.

        Args:
            credentials: Учетные данные API
            api_client: Готовый исполнитель запросов (по умолчанию создаётся)
            verify_ssl: Проверять TLS-сертификаты
            timeout: Таймаут HTTP-запроса в секундах
        """
        self._credentials = credentials
        self._endpoints = EndpointConfig.for_environment(credentials.environment)
        self._api_client = api_client or ApiClient(
            timeout=timeout, verify_ssl=verify_ssl
        )
        self._token_manager = TokenManager(
            api_client=self._api_client,
            client_secret=credentials.client_secret,
            realm_name=credentials.realm_name,
            endpoints=self._endpoints,
        )
        logger.debug(
            "Создан экземпляр NexwayApiClientManager: environment=%s, realm=%s",
            credentials.environment.value,
            credentials.realm_name,
        )

    @classmethod
    def create(
        cls,
        client_secret: str,
        realm_name: str,
        staging: bool = True,
        verify_ssl: bool = True,
    ) -> "NexwayApiClientManager":
        """Создать менеджер по client secret и realm."""
        credentials = ApiCredentials(
            client_secret=client_secret,
            realm_name=realm_name,
            staging=staging,
        )
        return cls(credentials=credentials, verify_ssl=verify_ssl)

    @classmethod
    def from_config(cls, config: NexwayConfig) -> "NexwayApiClientManager":
        """Создать экземпляр из конфигурации Nexway.

        Args:
            config: Конфигурация из YAML-файла

        Returns:
            Экземпляр NexwayApiClientManager
        """
        credentials = ApiCredentials(
            client_secret=config.client_secret.get_secret_value(),
            realm_name=config.realm_name,
            staging=config.staging,
        )
        return cls(
            credentials=credentials,
            verify_ssl=config.verify_ssl,
            timeout=config.timeout,
        )

    async def close(self) -> None:
        """Закрыть HTTP-сессию."""
        await self._api_client.close()
        logger.debug("Закрыто соединение для realm=%s", self._credentials.realm_name)

    async def __aenter__(self) -> "NexwayApiClientManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def endpoints(self) -> EndpointConfig:
        return self._endpoints

    @property
    def token_manager(self) -> TokenManager:
        return self._token_manager

    # ========== Токены ==========

    async def get_access_token(self, force_refresh: bool = False) -> str:
        """Получить токен доступа (client_credentials или refresh_token)."""
        return await self._token_manager.acquire(force_refresh=force_refresh)

    async def invalidate_token(self) -> None:
        """Сбросить токены на сервере и очистить локальный токен."""
        await self._token_manager.invalidate()

    # ========== Общий шаблон запроса ==========

    @staticmethod
    def _decode(url: str, raw: str) -> Any:
        if not raw:
            raise EmptyResponseError(url)
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise InvalidResponseError(
                f"Ответ {url} не является JSON", original_error=exc
            ) from exc

    async def execute_authorized(
        self,
        method: str,
        path: str,
        secret: str | None,
        body: RequestBody = None,
    ) -> Any:
        """Выполнить авторизованный запрос к /connect/... и разобрать JSON.

        Args:
            method: HTTP-метод
            path: Путь относительно хоста API
            secret: Секрет API для заголовка secret (None — без заголовка)
            body: Тело запроса

        Returns:
            Разобранный JSON-документ

        Raises:
            EmptyResponseError: Пустое тело ответа
            InvalidResponseError: Тело не JSON
        """
        bearer = await self._token_manager.acquire(force_refresh=True)
        headers: dict[str, str] = {}
        if secret:
            headers["secret"] = secret
        headers.update(
            {
                "Authorization": f"Bearer {bearer}",
                "Content-Type": "application/json",
                "Cache-Control": "no-cache",
            }
        )
        url = self._endpoints.connect_url(path)
        raw = await self._api_client.execute(url, method, body, headers)
        return self._decode(url, raw)

    # ========== Продукты ==========

    async def get_stock_status(
        self, secret: str, product_ref: str | int | Sequence[str]
    ) -> Any:
        """Получить наличие продуктов на складе.

        Args:
            secret: Секрет API
            product_ref: Один productRef или список

        Returns:
            Ответ API
        """
        _require("get_stock_status", secret=secret, product_ref=product_ref)
        product_refs = normalize_refs(product_ref)
        return await self.execute_authorized(
            "POST", "/connect/stock", secret, {"productRefs": product_refs}
        )

    async def get_cross_up_sell(
        self, secret: str, language: str, products: str | int | Sequence[str]
    ) -> Any:
        """Получить cross-sell и up-sell продукты.

        Args:
            secret: Секрет API
            language: Код языка
            products: Один productRef или список

        Returns:
            Ответ API
        """
        _require(
            "get_cross_up_sell", secret=secret, language=language, products=products
        )
        return await self.execute_authorized(
            "POST",
            "/connect/order/crossupsell",
            secret,
            {"language": language, "products": normalize_refs(products)},
        )

    # ========== Заказы ==========

    async def create_order(self, secret: str, order: Mapping[str, Any] | str) -> Any:
        """Создать заказ.

        Документ заказа передаётся без изменений: строкой JSON или словарём.
        """
        _require("create_order", secret=secret, order=order)
        return await self.execute_authorized("POST", "/connect/order/new", secret, order)

    async def cancel_order(
        self,
        secret: str,
        partner_order_number: str,
        reason_code: int | str = DEFAULT_REASON_CODE,
        comment: str = "",
    ) -> Any:
        """Отменить заказ.

        Args:
            secret: Секрет API
            partner_order_number: Номер заказа партнёра
            reason_code: Числовой код причины отмены
            comment: Комментарий

        Returns:
            Ответ API
        """
        _require(
            "cancel_order",
            secret=secret,
            partner_order_number=partner_order_number,
        )
        code = parse_reason_code(reason_code)
        if code is None:
            raise MissingParameterError("cancel_order", ["reason_code"])
        return await self.execute_authorized(
            "PUT",
            "/connect/order/cancel",
            secret,
            {
                "comment": comment,
                "partnerOrderNumber": partner_order_number,
                "reasonCode": code,
            },
        )

    async def get_order(self, secret: str, order_id: str) -> Any:
        """Получить информацию о заказе."""
        _require("get_order", secret=secret, order_id=order_id)
        return await self.execute_authorized(
            "GET", f"/connect/order/{_path_segment(order_id)}", secret
        )

    async def get_order_download_info(self, secret: str, order_id: str) -> Any:
        """Получить информацию о загрузках по заказу."""
        _require("get_order_download_info", secret=secret, order_id=order_id)
        return await self.execute_authorized(
            "GET", f"/connect/order/{_path_segment(order_id)}/download", secret
        )

    async def update_download_time(
        self,
        partner_order_number: str,
        value: str,
        secret: str | None = None,
    ) -> Any:
        """Обновить срок доступности загрузки.

        Args:
            partner_order_number: Номер заказа партнёра
            value: Новое значение срока
            secret: Секрет API; заголовок отправляется, только если задан

        Returns:
            Ответ API
        """
        _require(
            "update_download_time",
            partner_order_number=partner_order_number,
            value=value,
        )
        return await self.execute_authorized(
            "PUT",
            "/connect/order/download",
            secret,
            {"partnerOrderNumber": partner_order_number, "value": value},
        )

    # ========== Фид каталога ==========

    async def get_product_feed(self, secret: str, provider: str, config: str) -> str:
        """Получить XML-фид каталога.

        Запрос без авторизации, XML возвращается без разбора.
        """
        _require("get_product_feed", secret=secret, provider=provider, config=config)
        url = self._endpoints.catalog_feed_url
        raw = await self._api_client.execute(
            url,
            "GET",
            {"secret": secret, "provider": provider, "config": config},
        )
        if not raw:
            raise EmptyResponseError(url)
        return raw

    # ========== Подписки ==========

    def _subscription_body(
        self,
        operation: str,
        secret: str,
        partner_order_number: str,
        subscription_id: str,
    ) -> dict[str, str]:
        _require(
            operation,
            secret=secret,
            partner_order_number=partner_order_number,
            subscription_id=subscription_id,
        )
        return {
            "partnerOrderNumber": partner_order_number,
            "subscriptionId": subscription_id,
        }

    async def get_subscription_status(
        self, secret: str, partner_order_number: str, subscription_id: str
    ) -> Any:
        """Получить статус подписки."""
        body = self._subscription_body(
            "get_subscription_status", secret, partner_order_number, subscription_id
        )
        return await self.execute_authorized(
            "POST", "/connect/subscription", secret, body
        )

    async def cancel_subscription(
        self, secret: str, partner_order_number: str, subscription_id: str
    ) -> Any:
        """Отменить подписку."""
        body = self._subscription_body(
            "cancel_subscription", secret, partner_order_number, subscription_id
        )
        return await self.execute_authorized("PUT", "/connect/subscription", secret, body)

    async def renew_subscription(
        self, secret: str, partner_order_number: str, subscription_id: str
    ) -> Any:
        """Продлить подписку."""
        body = self._subscription_body(
            "renew_subscription", secret, partner_order_number, subscription_id
        )
        return await self.execute_authorized(
            "PUT", "/connect/subscription/renew", secret, body
        )

    # ========== Каталог ==========

    async def get_categories(self, secret: str, language: str) -> Any:
        """Получить список категорий Nexway на языке language."""
        _require("get_categories", secret=secret, language=language)
        return await self.execute_authorized(
            "GET", f"/connect/catalog/categories/{_path_segment(language)}", secret
        )

    async def get_operating_systems(self, secret: str) -> Any:
        """Получить список операционных систем."""
        _require("get_operating_systems", secret=secret)
        return await self.execute_authorized("GET", "/connect/catalog/oslist", secret)
