"""Менеджер токенов для Nexway Connect API.

Управляет получением, обновлением и сбросом токена доступа.
Токен хранится только в памяти экземпляра и не отслеживает срок жизни:
он запрашивается (или обновляется) перед каждым вызовом API.
"""

import json
import logging

from nexwayconnect.api_client import ApiClient
from nexwayconnect.endpoints import EndpointConfig
from nexwayconnect.exceptions import (
    AuthError,
    EmptyResponseError,
    InvalidResponseError,
    NexwayException,
)
from nexwayconnect.models import TokenFailure, TokenSuccess, parse_token_response

logger = logging.getLogger(__name__)
logger.setLevel(level=logging.DEBUG)

GRANT_CLIENT_CREDENTIALS = "client_credentials"
GRANT_REFRESH_TOKEN = "refresh_token"


class TokenManager:
    """Владелец пары access/refresh токенов.

    Состояния: без токена -> с токеном (acquire) -> без токена (invalidate).
    """

    def __init__(
        self,
        api_client: ApiClient,
        client_secret: str,
        realm_name: str,
        endpoints: EndpointConfig,
    ) -> None:
        """Инициализация менеджера токенов.

        Args:
            api_client: Исполнитель HTTP-запросов
            client_secret: OAuth client secret
            realm_name: Имя realm партнёра
            endpoints: Адреса выбранного окружения
        """
        self._api_client = api_client
        self._client_secret = client_secret
        self._realm_name = realm_name
        self._endpoints = endpoints
        self._token: TokenSuccess | None = None

    @property
    def token(self) -> TokenSuccess | None:
        """Текущий токен или None."""
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def _build_grant(self, force_refresh: bool) -> dict[str, str]:
        payload = {
            "clientSecret": self._client_secret,
            "realmName": self._realm_name,
        }
        refresh_token = self._token.refresh_token if self._token is not None else None
        if force_refresh and refresh_token:
            payload["grantType"] = GRANT_REFRESH_TOKEN
            payload["refreshToken"] = refresh_token
        else:
            payload["grantType"] = GRANT_CLIENT_CREDENTIALS
        return payload

    async def acquire(self, force_refresh: bool = False) -> str:
        """Получить токен доступа.

        Если force_refresh и есть refresh-токен — используется grant
        refresh_token, иначе client_credentials.

        Args:
            force_refresh: Предпочесть обновление по refresh-токену

        Returns:
            Строка access_token

        Raises:
            AuthError: Сервер вернул error
            EmptyResponseError: Пустое тело ответа
            TokenNotFoundError: Нет ни access_token, ни error
            InvalidResponseError: Ответ не JSON-объект
            TransportError: Сетевая ошибка или 400
        """
        payload = self._build_grant(force_refresh)
        grant_type = payload["grantType"]
        url = self._endpoints.tokens_url
        logger.debug("Запрос токена (grantType=%s) для realm=%s", grant_type, self._realm_name)

        raw = await self._api_client.execute(
            url,
            "POST",
            payload,
            {"Content-Type": "application/json"},
        )
        if not raw:
            raise EmptyResponseError(url)

        try:
            decoded = json.loads(raw)
        except ValueError as exc:
            raise InvalidResponseError(
                "Формат ответа сервера токенов не поддерживается", original_error=exc
            ) from exc

        result = parse_token_response(decoded)
        if isinstance(result, TokenFailure):
            logger.error(
                "Ошибка получения токена для realm=%s: %s",
                self._realm_name,
                result.error,
            )
            raise AuthError(result.error, result.message)

        self._token = result
        logger.info(
            "Токен получен успешно для realm=%s (grantType=%s)",
            self._realm_name,
            grant_type,
        )
        return result.access_token

    async def invalidate(self) -> None:
        """Сбросить токены на сервере и локально.

        Ошибка запроса сброса только логируется: локальный токен
        очищается в любом случае.
        """
        headers: dict[str, str] = {"Cache-Control": "no-cache"}
        if self._token is not None:
            headers["Authorization"] = f"Bearer {self._token.access_token}"

        try:
            await self._api_client.execute(
                self._endpoints.tokens_reset_url, "DELETE", None, headers
            )
            logger.info("Токены сброшены для realm=%s", self._realm_name)
        except NexwayException as exc:
            logger.warning(
                "Ошибка при сбросе токенов для realm=%s: %s",
                self._realm_name,
                exc,
            )
        finally:
            self._token = None
