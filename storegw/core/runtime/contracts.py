"""
Contratos con el gestor de ciclo de vida del proceso.

El core solo describe el proceso deseado (ServiceInvocation); quien lo
converge (systemd, contenedor, etc.) implementa ProcessLifecycleManager.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Protocol


class RunState(str, Enum):
    """Estado operativo al que se debe llevar el proceso"""
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class ServiceInvocation:
    """Proceso deseado: binario, identidad, límites y argumentos ya fusionados."""
    service_name: str
    run_state: RunState
    bin_path: str
    user: str
    group: str
    max_open_files: Optional[int] = None
    args: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # vista de solo lectura sobre una copia: la invocación no se muta
        object.__setattr__(self, "args", MappingProxyType(dict(self.args)))

    def argv(self) -> List[str]:
        """Línea de comandos: [bin_path, service_name, --flag=valor, ...]"""
        return [self.bin_path, self.service_name] + [f"--{k}={v}" for k, v in self.args.items()]


class ApplyResult:
    """Resultado de plan/converge."""
    def __init__(
        self,
        changed: bool,
        actions: List[str],
        summary: str = ""
    ):
        self.changed = changed
        self.actions = actions
        self.summary = summary


class ProcessLifecycleManager(Protocol):
    """
    Contrato mínimo del gestor de procesos.
    Dado el estado deseado, converge el estado real del SO de forma
    determinista e idempotente: un segundo converge no cambia nada.
    """
    @property
    def name(self) -> str:
        """Identificador del gestor (ej: systemd)."""
        ...

    def plan(self, invocation: ServiceInvocation) -> ApplyResult:
        """Calcula qué acciones se ejecutarían (sin ejecutar)."""
        ...

    def converge(self, invocation: ServiceInvocation) -> ApplyResult:
        """Lleva el proceso real al estado de la invocación."""
        ...


class BaseManager:
    """Base opcional para gestores; no obligatorio usar herencia."""

    name: str = "base"

    def plan(self, invocation: ServiceInvocation) -> ApplyResult:
        """Por defecto: sin acciones."""
        return ApplyResult(changed=False, actions=[], summary="No plan defined")

    def converge(self, invocation: ServiceInvocation) -> ApplyResult:
        """Por defecto: no aplica nada."""
        return ApplyResult(changed=False, actions=[], summary="Nothing to converge")
