"""
Constructor de la invocación del store (lógica pura).

Entrada = StoreConfig; salida = ServiceInvocation. No toca el filesystem ni
los procesos; aplicarla es trabajo del gestor de ciclo de vida.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from storegw.core.errors import ConflictingOverride
from storegw.core.runtime.contracts import RunState, ServiceInvocation
from storegw.core.store.flags import STORE_FLAGS
from storegw.core.store.loader import parse_store_config
from storegw.core.store.models import Ensure, StoreConfig


SERVICE_NAME = "store"


def resolve_run_state(ensure: Union[Ensure, str]) -> RunState:
    """present → running; cualquier otro valor → stopped."""
    if ensure == Ensure.PRESENT:
        return RunState.RUNNING
    return RunState.STOPPED


def format_value(value: Any) -> str:
    """Texto literal del valor, sin formato dependiente del locale."""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def generate_args(config: StoreConfig) -> Dict[str, str]:
    """Recorre la tabla de flags: None → se omite; valor → flag=texto."""
    args: Dict[str, str] = {}
    for field_name, flag in STORE_FLAGS.items():
        value = getattr(config, field_name)
        if value is None:
            continue
        args[flag] = format_value(value)
    return args


def overlay_extra_params(
    generated: Mapping[str, str],
    extra: Mapping[str, Any],
    protected: Iterable[str] = (),
) -> Dict[str, str]:
    """
    Aplica extra_params sobre los argumentos generados; los extras ganan.

    - clave existente → se reemplaza el valor
    - clave nueva → se agrega al final
    - valor None → se quita el flag
    - clave en protected con valor distinto → ConflictingOverride
    """
    protected = set(protected)
    merged: Dict[str, str] = dict(generated)
    for key, value in extra.items():
        new_value: Optional[str] = None if value is None else format_value(value)
        if key in protected and key in merged and merged[key] != new_value:
            raise ConflictingOverride(key, merged[key], new_value)
        if new_value is None:
            merged.pop(key, None)
        else:
            merged[key] = new_value
    return merged


def build_invocation(
    config: Union[StoreConfig, Mapping[str, Any]],
    protected: Iterable[str] = (),
) -> ServiceInvocation:
    """
    Traduce la configuración del store a la invocación del proceso.

    Args:
        config: StoreConfig o mapping con sus campos
        protected: flags que extra_params no puede cambiar (vacío = los extras siempre ganan)

    Raises:
        InvalidConfiguration: si el mapping no cumple el modelo
        ConflictingOverride: si extra_params pisa un flag protegido
    """
    config = parse_store_config(config)
    args = overlay_extra_params(generate_args(config), config.extra_params, protected)
    return ServiceInvocation(
        service_name=SERVICE_NAME,
        run_state=resolve_run_state(config.ensure),
        bin_path=config.bin_path,
        user=config.user,
        group=config.group,
        max_open_files=config.max_open_files,
        args=args,
    )
