"""Модели ответа эндпоинта /iam/tokens.

Ответ сервера токенов — либо TokenSuccess, либо TokenFailure.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nexwayconnect.exceptions import InvalidResponseError, TokenNotFoundError


class TokenSuccess(BaseModel):
    """Успешно выданный токен.

    Сервер может вернуть дополнительные поля (срок жизни, scope и т.д.),
    они сохраняются как есть.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(min_length=1)
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    refresh_expires_in: int | None = None


class TokenFailure(BaseModel):
    """Явная ошибка от сервера токенов."""

    model_config = ConfigDict(extra="allow")

    error: str
    message: str = ""


TokenResult = TokenSuccess | TokenFailure


def parse_token_response(payload: Any) -> TokenResult:
    """Разобрать декодированный ответ сервера токенов.

    Args:
        payload: Результат json.loads тела ответа

    Returns:
        TokenSuccess или TokenFailure

    Raises:
        InvalidResponseError: Если ответ не JSON-объект
        TokenNotFoundError: Если нет ни error, ни непустого access_token
    """
    if not isinstance(payload, dict):
        raise InvalidResponseError("Формат ответа сервера токенов не поддерживается")

    try:
        # error проверяется раньше access_token
        if payload.get("error") is not None:
            return TokenFailure.model_validate(
                {
                    **payload,
                    "error": str(payload["error"]),
                    "message": str(payload.get("message") or ""),
                }
            )
        if payload.get("access_token"):
            return TokenSuccess.model_validate(payload)
    except ValidationError as exc:
        raise InvalidResponseError(
            f"Некорректный ответ сервера токенов: {exc}", original_error=exc
        ) from exc
    raise TokenNotFoundError("Токен не найден в ответе сервера")
