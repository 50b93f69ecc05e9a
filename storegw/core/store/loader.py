"""
Loader del registro de configuración del store.
Carga YAML y lo convierte al modelo Pydantic.
"""

from pathlib import Path
from typing import Any, Mapping

import yaml

from storegw.core.errors import ConfigError, InvalidConfiguration
from storegw.core.store.models import StoreConfig


_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class StoreYamlLoader(yaml.SafeLoader):
    """SafeLoader sin resolución implícita de timestamps: min_time/max_time quedan como texto."""


StoreYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _unwrap(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """Compatibilidad: YAML con raíz 'store:' se trata como el registro."""
    if set(data.keys()) == {"store"} and isinstance(data["store"], Mapping):
        return data["store"]
    return data


def parse_store_config(data: Any) -> StoreConfig:
    """
    Valida un mapping y devuelve el StoreConfig.

    Raises:
        InvalidConfiguration: si no es un mapping o algún campo no cumple el modelo
    """
    if isinstance(data, StoreConfig):
        return data
    if not isinstance(data, Mapping):
        raise InvalidConfiguration(
            f"La configuración del store debe ser un diccionario, recibido {type(data).__name__}"
        )
    data = _unwrap(data)
    bad_keys = [k for k in data.keys() if not isinstance(k, str)]
    if bad_keys:
        raise InvalidConfiguration(
            "Claves no textuales en la configuración",
            [f"{k!r}: la clave debe ser texto" for k in bad_keys],
        )
    return StoreConfig(**data)


def load_store_config(path: Path) -> StoreConfig:
    """
    Carga el YAML del store.

    Raises:
        ConfigError: archivo faltante, ilegible o YAML inválido
        InvalidConfiguration: contenido que no cumple el modelo
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"No existe el archivo de configuración: {path}")
    try:
        with open(path, "r") as f:
            data = yaml.load(f, Loader=StoreYamlLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML inválido en {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"No se pudo leer {path}: {e}") from e
    if data is None:
        raise InvalidConfiguration(f"El archivo {path} está vacío")
    return parse_store_config(data)
