"""
Runtime: contratos con el gestor de procesos y ajustes del entorno.
"""

from storegw.core.runtime.contracts import (
    RunState,
    ServiceInvocation,
    ApplyResult,
    ProcessLifecycleManager,
    BaseManager,
)
from storegw.core.runtime.resolver import unit_dir, unit_prefix, systemctl_bin, default_config_path

__all__ = [
    "RunState",
    "ServiceInvocation",
    "ApplyResult",
    "ProcessLifecycleManager",
    "BaseManager",
    "unit_dir",
    "unit_prefix",
    "systemctl_bin",
    "default_config_path",
]
