"""
Resolución de rutas y ajustes del proceso desde variables de entorno.

El core NO escribe en disco; solo expone estos valores. La CLI carga .env
antes de consultarlos.
"""

import os
from pathlib import Path


DEFAULT_UNIT_DIR = Path("/etc/systemd/system")
DEFAULT_UNIT_PREFIX = "thanos-"
DEFAULT_SYSTEMCTL = "systemctl"
DEFAULT_CONFIG_PATH = Path("/etc/thanos/store.yaml")


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


def unit_dir() -> Path:
    """Directorio donde se escriben las units de systemd."""
    explicit = _env("STOREGW_UNIT_DIR")
    if explicit:
        return Path(explicit).expanduser()
    return DEFAULT_UNIT_DIR


def unit_prefix() -> str:
    """Prefijo del nombre de unit (thanos-store.service)."""
    return os.environ.get("STOREGW_UNIT_PREFIX", DEFAULT_UNIT_PREFIX)


def systemctl_bin() -> str:
    return _env("STOREGW_SYSTEMCTL") or DEFAULT_SYSTEMCTL


def default_config_path() -> Path:
    """Ruta del YAML del store si la CLI no recibe una explícita."""
    explicit = _env("STOREGW_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    return DEFAULT_CONFIG_PATH
