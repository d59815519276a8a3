"""
Destination resolver: URL prefix -> Connector.

The default registry holds the built-in connectors enabled by
``settings.DESTINATION_DEFAULT_SCHEMES``; it is created once per process.
"""

import logging
import threading
from collections.abc import Iterable

from app.core.config import settings
from app.core.errors import UnsupportedDestinationError

from .connect import BUILTIN_CONNECTORS, Connector

_log = logging.getLogger(__name__)


class ConnectorRegistry:
    """Connectors keyed by URL prefix; the longest matching prefix wins."""

    def __init__(self, connectors: Iterable[Connector] = ()) -> None:
        self._by_prefix: dict[str, Connector] = {}
        self._lock = threading.Lock()
        for c in connectors:
            self.register(c)

    def register(self, connector: Connector) -> None:
        if not connector.schemes:
            raise ValueError(f"{connector!r} declares no URL schemes")
        with self._lock:
            for prefix in connector.schemes:
                prev = self._by_prefix.get(prefix)
                if prev is not None and prev is not connector:
                    _log.warning(
                        "Destination prefix %r: %r replaces %r", prefix, connector, prev
                    )
                self._by_prefix[prefix] = connector

    def schemes(self) -> list[str]:
        with self._lock:
            return sorted(self._by_prefix)

    def resolve(self, url: str) -> Connector:
        """Return the connector for *url*; raise UnsupportedDestinationError if none."""
        if not isinstance(url, str) or not url:
            raise UnsupportedDestinationError(url)
        with self._lock:
            matches = [p for p in self._by_prefix if url.startswith(p)]
            if not matches:
                raise UnsupportedDestinationError(url)
            return self._by_prefix[max(matches, key=len)]


def build_default_registry(names: Iterable[str] | None = None) -> ConnectorRegistry:
    names = list(settings.DESTINATION_DEFAULT_SCHEMES if names is None else names)
    connectors: list[Connector] = []
    for name in names:
        cls = BUILTIN_CONNECTORS.get(name.strip().lower())
        if cls is None:
            raise ValueError(
                f"Unknown destination connector: {name!r} "
                f"(expected one of {sorted(BUILTIN_CONNECTORS)})"
            )
        connectors.append(cls())
    return ConnectorRegistry(connectors)


_registry: ConnectorRegistry | None = None
_registry_lock = threading.Lock()


def get_connector_registry() -> ConnectorRegistry:
    """Return the process-wide default registry (thread-safe double-checked locking)."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = build_default_registry()
    return _registry
