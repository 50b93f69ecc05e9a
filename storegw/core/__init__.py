"""
Core: lógica pura de storegw.

- Este paquete NO importa storegw.cli ni storegw.providers.
- Sin I/O salvo loader (lectura de YAML) y resolver (solo variables de entorno).
- Los providers y la CLI importan desde core; nunca al revés.
"""

from storegw.core.errors import (
    StoreGatewayError,
    InvalidConfiguration,
    ConflictingOverride,
    ConfigError,
    ProviderError,
)

__all__ = [
    "StoreGatewayError",
    "InvalidConfiguration",
    "ConflictingOverride",
    "ConfigError",
    "ProviderError",
]
