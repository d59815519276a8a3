"""
Destination databases: URL-keyed connectors and positional prepared statements.
"""

from .connect import (
    BUILTIN_CONNECTORS,
    Connector,
    MySQLConnector,
    PostgresConnector,
    TrinoConnector,
    parse_destination_url,
)
from .resolver import ConnectorRegistry, build_default_registry, get_connector_registry
from .statement import PreparedStatement

__all__ = [
    "BUILTIN_CONNECTORS",
    "Connector",
    "ConnectorRegistry",
    "MySQLConnector",
    "PostgresConnector",
    "PreparedStatement",
    "TrinoConnector",
    "build_default_registry",
    "get_connector_registry",
    "parse_destination_url",
]
