"""
Gateway protocol definitions and store configuration for WorkLedger.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Protocol
from urllib.parse import parse_qsl, urlparse

from ..errors import StoreConfigurationError


class Gateway(Protocol):
    """
    Persistence operations for a single type tag.
    """

    def load_by_identity(self, criteria: Mapping[str, Any]) -> Any:
        """
        Return the stored record matching ``criteria`` or ``None``.
        """

    def add_insert(self, entity: Any) -> None:
        """
        Queue an entity for the next ``execute_inserts`` batch.
        """

    def execute_inserts(self) -> None:
        """
        Write every queued insert. Must be a no-op when nothing is queued.
        """

    def update(self, entity: Any) -> None:
        """
        Overwrite the stored record of ``entity``.
        """

    def delete(self, entity: Any) -> None:
        """
        Remove the stored record of ``entity``.
        """


class GatewayFactory(Protocol):
    def gateway_for(self, type_tag: type) -> Gateway: ...


GatewayBuilder = Callable[[type], Gateway]


class GatewayRegistry:
    """
    Resolves gateways through builders registered per type tag.

    A ``default`` builder serves every type tag without its own registration.
    """

    def __init__(self, default: Optional[GatewayBuilder] = None) -> None:
        self._builders: Dict[type, GatewayBuilder] = {}
        self.default = default

    def register(self, type_tag: type, builder: GatewayBuilder) -> None:
        self._builders[type_tag] = builder

    def unregister(self, type_tag: type) -> None:
        self._builders.pop(type_tag, None)

    def __contains__(self, type_tag: type) -> bool:
        return type_tag in self._builders or self.default is not None

    def gateway_for(self, type_tag: type) -> Gateway:
        builder = self._builders.get(type_tag, self.default)
        if builder is None:
            raise StoreConfigurationError(
                f"No gateway registered for type '{type_tag.__name__}'"
            )
        return builder(type_tag)


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise StoreConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def _parse_float(value: str, *, key: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise StoreConfigurationError(f"Invalid float value for '{key}': {value!r}") from exc


@dataclass
class StoreConfig:
    """
    Normalized connection settings for store-backed gateways.
    """

    url: str
    autocommit: bool = False
    timeout: float | None = None
    options: dict[str, Any] | None = None
    source: str | None = None

    @property
    def scheme(self) -> str:
        return urlparse(self.url).scheme

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "StoreConfig":
        """
        Build a config from a URL, lifting ``autocommit`` and ``timeout``
        query options into fields and keeping the rest as ``options``.
        """

        parsed = urlparse(url)
        if not parsed.scheme:
            raise StoreConfigurationError(f"Store URL is missing a scheme: {url!r}")
        query = dict(parse_qsl(parsed.query))

        autocommit = kwargs.pop("autocommit", None)
        if autocommit is None and "autocommit" in query:
            autocommit = _parse_bool(query.pop("autocommit"), key="autocommit")
        else:
            query.pop("autocommit", None)
        timeout = kwargs.pop("timeout", None)
        if timeout is None and "timeout" in query:
            timeout = _parse_float(query.pop("timeout"), key="timeout")
        else:
            query.pop("timeout", None)

        options = dict(query)
        options.update(kwargs.pop("options", None) or {})
        base_url = url.split("?", 1)[0]

        return cls(
            url=base_url,
            autocommit=bool(autocommit),
            timeout=timeout,
            options=options or None,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_var: str, **kwargs: Any) -> "StoreConfig":
        value = os.getenv(env_var)
        if not value:
            raise StoreConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_url(value, source=env_var, **kwargs)

    def descriptive_label(self) -> str:
        if self.source:
            return f"{self.source} ({self.url})"
        return self.url
