"""
Store: modelo, tabla de flags, loader y constructor de la invocación.
"""

from storegw.core.store.models import StoreConfig, Ensure, LogLevel, LogFormat
from storegw.core.store.flags import STORE_FLAGS, PROTECTED_FLAGS
from storegw.core.store.loader import parse_store_config, load_store_config
from storegw.core.store.builder import (
    SERVICE_NAME,
    build_invocation,
    generate_args,
    overlay_extra_params,
    resolve_run_state,
)

__all__ = [
    "StoreConfig",
    "Ensure",
    "LogLevel",
    "LogFormat",
    "STORE_FLAGS",
    "PROTECTED_FLAGS",
    "parse_store_config",
    "load_store_config",
    "SERVICE_NAME",
    "build_invocation",
    "generate_args",
    "overlay_extra_params",
    "resolve_run_state",
]
