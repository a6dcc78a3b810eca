"""Адреса Nexway Connect API для production и staging окружений."""

from dataclasses import dataclass
from enum import Enum


class Environment(str, Enum):
    """Окружение Nexway."""

    PRODUCTION = "production"
    STAGING = "staging"

    @classmethod
    def from_staging_flag(cls, staging: bool) -> "Environment":
        return cls.STAGING if staging else cls.PRODUCTION


@dataclass(frozen=True)
class EndpointConfig:
    """Базовые URL одного окружения.

    Attributes:
        environment: Окружение, из которого взяты все три адреса
        token_url: База для /iam/tokens
        host_url: База для /connect/... и /iam/tokens/reset
        feed_url: База для фида каталога (getCatalog.xml)
    """

    environment: Environment
    token_url: str
    host_url: str
    feed_url: str

    @classmethod
    def for_environment(cls, environment: Environment) -> "EndpointConfig":
        """Получить набор адресов для окружения."""
        return _ENDPOINTS[environment]

    @property
    def tokens_url(self) -> str:
        return f"{self.token_url}/iam/tokens"

    @property
    def tokens_reset_url(self) -> str:
        return f"{self.host_url}/iam/tokens/reset"

    @property
    def catalog_feed_url(self) -> str:
        return f"{self.feed_url}/getCatalog.xml"

    def connect_url(self, path: str) -> str:
        """Полный URL для пути вида /connect/..."""
        return f"{self.host_url}{path}"


_ENDPOINTS: dict[Environment, EndpointConfig] = {
    Environment.PRODUCTION: EndpointConfig(
        environment=Environment.PRODUCTION,
        token_url="https://api.nexway.store",
        host_url="https://api.nexway.store",
        feed_url="http://webservices.nexway.com",
    ),
    Environment.STAGING: EndpointConfig(
        environment=Environment.STAGING,
        token_url="https://api.staging.nexway.build",
        host_url="https://api-uat.staging.nexway.build",
        feed_url="http://connect-uat.nexway.build",
    ),
}
