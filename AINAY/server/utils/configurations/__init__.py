from __future__ import annotations

from AINAY.server.utils.configurations.base import (
    ensure_mapping,
    load_configuration_data,
)

from AINAY.server.utils.configurations.server import (
    InteractionsSettings,
    ServerSettings,
    build_server_settings,
    get_server_settings,
    server_settings,
)

__all__ = [
    "ensure_mapping",
    "load_configuration_data",
    "InteractionsSettings",
    "ServerSettings",
    "build_server_settings",
    "get_server_settings",
    "server_settings",
]
