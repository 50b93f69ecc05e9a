"""
Modelo del nodo store (registro de configuración).

Se construye una vez por evaluación y no se muta (frozen). Solo valida la
forma de cada valor; duraciones, tamaños y rangos de tiempo los interpreta el
binario al arrancar.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from storegw.core.errors import InvalidConfiguration


class Ensure(str, Enum):
    """Intención declarativa del recurso"""
    PRESENT = "present"
    ABSENT = "absent"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class LogFormat(str, Enum):
    LOGFMT = "logfmt"
    JSON = "json"


ExtraValue = Union[bool, int, float, str, None]

_PATH_FIELDS = (
    "bin_path",
    "data_dir",
    "tracing_config_file",
    "grpc_server_tls_cert",
    "grpc_server_tls_key",
    "grpc_server_tls_client_ca",
    "index_cache_config_file",
    "objstore_config_file",
    "selector_relabel_config_file",
)


def _has_control(value: str) -> bool:
    return any(ord(c) < 0x20 or ord(c) == 0x7f for c in value)


def format_validation_errors(exc: PydanticValidationError) -> List[str]:
    """Convierte los errores de Pydantic en mensajes 'campo: motivo'."""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<registro>"
        messages.append(f"{loc}: {err.get('msg', 'valor inválido')}")
    return messages


class StoreConfig(BaseModel):
    """
    Configuración deseada del nodo store.

    None es el único valor "sin definir": el campo no genera flag.
    Un 0 (p. ej. store_grpc_series_sample_limit) es un valor y sí se emite.
    """

    # Proceso
    ensure: Ensure = Field(..., description="present | absent")
    user: str = Field(..., min_length=1, description="Usuario que ejecuta el proceso")
    group: str = Field(..., min_length=1, description="Grupo que ejecuta el proceso")
    bin_path: str = Field(..., description="Ruta absoluta al ejecutable")
    max_open_files: Optional[int] = Field(None, gt=0, strict=True, description="LimitNOFILE; None = default de la plataforma")

    # Opciones del binario
    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.LOGFMT
    tracing_config_file: Optional[str] = None
    http_address: str = Field("0.0.0.0:10902", min_length=1)
    http_grace_period: str = Field("2m", min_length=1)
    grpc_address: str = Field("0.0.0.0:10901", min_length=1)
    grpc_grace_period: str = Field("2m", min_length=1)
    grpc_server_tls_cert: Optional[str] = None
    grpc_server_tls_key: Optional[str] = None
    grpc_server_tls_client_ca: Optional[str] = None
    data_dir: str = "/var/lib/thanos-store"
    index_cache_config_file: Optional[str] = None
    index_cache_size: str = Field("250MB", min_length=1)
    chunck_pool_size: str = Field("2GB", min_length=1)
    store_grpc_series_sample_limit: int = Field(0, ge=0, strict=True, description="0 = sin límite")
    store_grpc_series_max_concurrency: int = Field(20, gt=0, strict=True)
    objstore_config_file: str = "/etc/thanos/storage.yaml"
    sync_block_duration: str = Field("3m", min_length=1)
    block_sync_concurrency: int = Field(20, gt=0, strict=True)
    min_time: Optional[str] = Field(None, min_length=1)
    max_time: Optional[str] = Field(None, min_length=1)
    selector_relabel_config_file: Optional[str] = None
    consistency_delay: Optional[str] = Field(None, min_length=1)
    ignore_deletion_marks_delay: Optional[str] = Field(None, min_length=1)
    web_external_prefix: Optional[str] = Field(None, min_length=1)
    web_prefix_header: Optional[str] = Field(None, min_length=1)

    # Flags no modelados; se aplican al final y ganan sobre los generados
    extra_params: Dict[str, ExtraValue] = Field(default_factory=dict, validate_default=True)

    class Config:
        frozen = True
        extra = "forbid"
        use_enum_values = True

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise InvalidConfiguration(
                "Configuración del store inválida",
                format_validation_errors(e),
            ) from e

    @field_validator(*_PATH_FIELDS)
    @classmethod
    def check_absolute_path(cls, v):
        if v is not None and not str(v).startswith("/"):
            raise ValueError(f"debe ser una ruta absoluta, recibido {v!r}")
        return v

    @field_validator("user", "group")
    @classmethod
    def check_identity(cls, v):
        if _has_control(v):
            raise ValueError("no puede contener caracteres de control")
        return v

    @field_validator("extra_params")
    @classmethod
    def check_extra_keys(cls, v):
        for key in v:
            if not key or not key.strip():
                raise ValueError("las claves de extra_params no pueden estar vacías")
            if key.startswith("-"):
                raise ValueError(f"clave '{key}': escribir el flag sin guiones iniciales")
            if "=" in key or _has_control(key) or any(c.isspace() for c in key):
                raise ValueError(f"clave {key!r}: un flag no lleva '=', espacios ni caracteres de control")
        # copia de solo lectura: el registro no cambia después de construirse
        return MappingProxyType(dict(v))
