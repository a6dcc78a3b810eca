"""Исключения для работы с Nexway Connect API.

Все ошибки пробрасываются вызывающему коду сразу, без повторов.
"""


class NexwayException(Exception):
    """Базовое исключение для ошибок Nexway Connect API."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class MissingParameterError(NexwayException):
    """Обязательный параметр не передан, пуст или имеет неверный тип.

    Выбрасывается до любого сетевого запроса.
    """

    def __init__(self, operation: str, parameters: list[str]) -> None:
        self.operation = operation
        self.parameters = parameters
        super().__init__(
            f"{operation}: не заданы обязательные параметры: {', '.join(parameters)}"
        )


class AuthError(NexwayException):
    """Сервер токенов вернул явную ошибку (поля error и message)."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"Ошибка авторизации {code}: {message}")


class TokenNotFoundError(NexwayException):
    """В ответе сервера токенов нет ни access_token, ни error."""


class EmptyResponseError(NexwayException):
    """Сервер вернул пустое тело там, где ожидался результат."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Пустой ответ от {url}")


class InvalidResponseError(NexwayException):
    """Тело ответа не удалось разобрать как ожидаемый JSON."""


class TransportError(NexwayException):
    """Сетевая ошибка или ответ 400 Bad Request."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error=original_error)
        self.status = status


class InvalidRequestError(NexwayException):
    """Неподдерживаемый HTTP-метод или пустой URL."""

    def __init__(self, method: str, url: str = "") -> None:
        self.method = method
        self.url = url
        super().__init__(f"Неподдерживаемый запрос: method={method!r}, url={url!r}")
