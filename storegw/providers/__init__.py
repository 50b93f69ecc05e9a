"""
Gestores de ciclo de vida que implementan ProcessLifecycleManager.
"""

from storegw.providers.systemd import SystemdServiceManager

__all__ = ["SystemdServiceManager"]
