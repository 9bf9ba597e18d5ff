from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import requests

from ..common.validators import require_locale
from ..core.constants import DEFAULT_LOCALE, DEFAULT_REQUEST_TIMEOUT


@dataclass
class ApiConfig:
    base_url: str
    locale: str = DEFAULT_LOCALE
    timeout: float = DEFAULT_REQUEST_TIMEOUT
    cookies: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.locale = require_locale(self.locale)


class ApiConnection:
    """Shared HTTP session to the school API.

    The API authenticates with a cookie session, so cookies configured here are
    sent with every request (the browser's `credentials: include`).
    """

    _instance: Optional["ApiConnection"] = None

    def __init__(self, config: ApiConfig, *, session: Optional[requests.Session] = None):
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Accept-Language": config.locale,
            }
        )
        for name, value in config.cookies.items():
            self._session.cookies.set(name, value)

    @classmethod
    def get_instance(cls, config: ApiConfig) -> "ApiConnection":
        if cls._instance is None:
            cls._instance = ApiConnection(config)
        return cls._instance

    @property
    def config(self) -> ApiConfig:
        return self._config

    @property
    def session(self) -> requests.Session:
        return self._session

    def url_for(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def close(self) -> None:
        self._session.close()
        if ApiConnection._instance is self:
            ApiConnection._instance = None
