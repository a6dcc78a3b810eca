"""Универсальный исполнитель HTTP-запросов к Nexway Connect API.

Выполняет один обмен запрос/ответ и возвращает сырое тело ответа.
Разбор JSON выполняется уровнем выше.
"""

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from nexwayconnect.exceptions import InvalidRequestError, TransportError

logger = logging.getLogger(__name__)
logger.setLevel(level=logging.DEBUG)

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})
DEFAULT_TIMEOUT = 30.0

RequestBody = Mapping[str, Any] | str | None


def _is_json_content(headers: Mapping[str, str]) -> bool:
    for name, value in headers.items():
        if name.lower() == "content-type":
            return value.split(";")[0].strip().lower() == "application/json"
    return False


class ApiClient:
    """HTTP-клиент поверх aiohttp.ClientSession.

    Таймаут 30 секунд, редиректы не выполняются, заголовки передаются
    как есть. Проверка TLS-сертификата включена по умолчанию.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
    ) -> None:
        """Инициализация клиента.

        Args:
            timeout: Общий таймаут запроса в секундах
            verify_ssl: Проверять TLS-сертификат и имя хоста.
                False оставлен только для совместимости со старым поведением.
        """
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._verify_ssl = verify_ssl
        self._session: aiohttp.ClientSession | None = None

        if not verify_ssl:
            logger.warning(
                "Проверка TLS-сертификатов отключена (режим совместимости)"
            )

    @property
    def verify_ssl(self) -> bool:
        return self._verify_ssl

    async def _get_session(self) -> aiohttp.ClientSession:
        """Получить или создать HTTP-сессию."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        """Закрыть HTTP-сессию."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def execute(
        self,
        url: str,
        method: str,
        body: RequestBody = None,
        headers: Mapping[str, str] | None = None,
    ) -> str:
        """Выполнить HTTP-запрос.

        Для GET словарь body превращается в query string, тело не отправляется.
        Для POST/PUT/DELETE словарь кодируется в JSON, если в заголовках
        указан Content-Type: application/json, иначе как форма.
        Строка отправляется без изменений.

        Args:
            url: Полный URL
            method: GET, POST, PUT или DELETE (регистр не важен)
            body: Словарь параметров или готовая строка
            headers: Заголовки запроса

        Returns:
            Сырое тело ответа

        Raises:
            InvalidRequestError: Пустой URL или неподдерживаемый метод
            TransportError: Сетевая ошибка или ответ 400
        """
        verb = method.upper() if isinstance(method, str) else ""
        if not url or verb not in SUPPORTED_METHODS:
            raise InvalidRequestError(method, url)

        request_headers = dict(headers or {})
        params: Mapping[str, Any] | None = None
        data: Any = None

        if verb == "GET":
            if isinstance(body, Mapping):
                params = body
            elif body:
                url = f"{url}?{body}"
        elif isinstance(body, Mapping):
            if _is_json_content(request_headers):
                data = json.dumps(body)
            else:
                data = dict(body)
        elif body:
            data = body

        session = await self._get_session()
        logger.debug("%s %s", verb, url)
        try:
            async with session.request(
                verb,
                url,
                params=params,
                data=data,
                headers=request_headers,
                allow_redirects=False,
                ssl=self._verify_ssl,
            ) as response:
                status = response.status
                # кодировка может не совпадать с заголовком (XML-фид)
                text = await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.debug("Сетевая ошибка %s %s: %s", verb, url, exc)
            raise TransportError(
                f"Ошибка запроса {verb} {url}: {exc}", original_error=exc
            ) from exc

        logger.debug("%s %s -> %d", verb, url, status)
        if status == 400:
            raise TransportError(f"400 Bad Request: {verb} {url}", status=status)
        return text
