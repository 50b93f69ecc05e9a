"""
Gestor de ciclo de vida sobre systemd.

Escribe la unit <prefijo><servicio>.service a partir de la invocación y lleva
el servicio a running/stopped con systemctl. Las operaciones que escriben en
/etc/systemd/system o llaman a systemctl pueden requerir ejecución con sudo.
"""

import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from storegw.core.errors import ProviderError
from storegw.core.runtime import resolver
from storegw.core.runtime.contracts import ApplyResult, BaseManager, RunState, ServiceInvocation

Runner = Callable[[List[str]], Tuple[bool, str]]

_NEEDS_QUOTES = set(" \"'\\;")

_C_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _run(cmd: List[str]) -> Tuple[bool, str]:
    """Ejecuta comando; retorna (éxito, salida)."""
    try:
        r = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=60,
        )
        out = (r.stdout or "") + (r.stderr or "")
        return (r.returncode == 0, out.strip())
    except (OSError, subprocess.SubprocessError) as e:
        return (False, str(e))


def _is_control(c: str) -> bool:
    return ord(c) < 0x20 or ord(c) == 0x7f


def _escape_char(c: str) -> str:
    if c in _C_ESCAPES:
        return _C_ESCAPES[c]
    if _is_control(c):
        return "\\x%02x" % ord(c)
    return c


def quote_exec_arg(arg: str) -> str:
    """
    Escapa un argumento para ExecStart (especificadores %, variables $ y comillas).
    Los caracteres de control van como escapes C dentro de comillas; un valor
    nunca parte la línea de ExecStart.
    """
    arg = arg.replace("%", "%%").replace("$", "$$")
    if not arg or any(c in _NEEDS_QUOTES or _is_control(c) for c in arg):
        arg = '"' + "".join(_escape_char(c) for c in arg) + '"'
    return arg


class SystemdServiceManager(BaseManager):
    """Converge el proceso del store mediante una unit de systemd."""

    name = "systemd"

    def __init__(
        self,
        unit_dir: Optional[Path] = None,
        unit_prefix: Optional[str] = None,
        systemctl: Optional[str] = None,
        console: Optional[Console] = None,
        dry_run: bool = False,
        runner: Optional[Runner] = None,
    ):
        self.unit_dir = Path(unit_dir) if unit_dir else resolver.unit_dir()
        self.unit_prefix = resolver.unit_prefix() if unit_prefix is None else unit_prefix
        self.systemctl = systemctl or resolver.systemctl_bin()
        self.console = console
        self.dry_run = dry_run
        self._runner = runner or _run

    def unit_name(self, invocation: ServiceInvocation) -> str:
        return f"{self.unit_prefix}{invocation.service_name}.service"

    def unit_path(self, invocation: ServiceInvocation) -> Path:
        return self.unit_dir / self.unit_name(invocation)

    def render_unit(self, invocation: ServiceInvocation) -> str:
        """Genera el contenido de la unit (determinista para la misma invocación)."""
        exec_start = " ".join(quote_exec_arg(a) for a in invocation.argv())
        lines = [
            "[Unit]",
            f"Description=Thanos {invocation.service_name}",
            "Wants=network-online.target",
            "After=network-online.target",
            "",
            "[Service]",
            "Type=simple",
            f"User={invocation.user}",
            f"Group={invocation.group}",
            f"ExecStart={exec_start}",
        ]
        if invocation.max_open_files is not None:
            lines.append(f"LimitNOFILE={invocation.max_open_files}")
        lines += [
            "Restart=always",
            "",
            "[Install]",
            "WantedBy=multi-user.target",
            "",
        ]
        return "\n".join(lines)

    def _current_unit(self, invocation: ServiceInvocation) -> Optional[str]:
        path = self.unit_path(invocation)
        if not path.exists():
            return None
        try:
            return path.read_text()
        except OSError as e:
            raise ProviderError(f"No se pudo leer {path}: {e}") from e

    def _systemctl(self, *args: str) -> Tuple[bool, str]:
        return self._runner([self.systemctl, *args])

    def is_active(self, invocation: ServiceInvocation) -> bool:
        ok, _ = self._systemctl("is-active", "--quiet", self.unit_name(invocation))
        return ok

    def is_enabled(self, invocation: ServiceInvocation) -> bool:
        ok, _ = self._systemctl("is-enabled", "--quiet", self.unit_name(invocation))
        return ok

    def _pending(self, invocation: ServiceInvocation) -> Tuple[bool, List[List[str]]]:
        """(¿hay que escribir la unit?, comandos systemctl pendientes)"""
        unit = self.unit_name(invocation)
        write_unit = self._current_unit(invocation) != self.render_unit(invocation)
        active = self.is_active(invocation)
        enabled = self.is_enabled(invocation)

        commands: List[List[str]] = []
        if write_unit:
            commands.append([self.systemctl, "daemon-reload"])
        if invocation.run_state == RunState.RUNNING:
            if not enabled:
                commands.append([self.systemctl, "enable", unit])
            if not active:
                commands.append([self.systemctl, "start", unit])
            elif write_unit:
                # la unit cambió con el servicio corriendo: aplicar los nuevos argumentos
                commands.append([self.systemctl, "restart", unit])
        else:
            if active:
                commands.append([self.systemctl, "stop", unit])
            if enabled:
                commands.append([self.systemctl, "disable", unit])
        return write_unit, commands

    def plan(self, invocation: ServiceInvocation) -> ApplyResult:
        """Acciones necesarias para converger, sin ejecutarlas."""
        write_unit, commands = self._pending(invocation)
        actions: List[str] = []
        if write_unit:
            actions.append(f"Escribir {self.unit_path(invocation)}")
        actions.extend(" ".join(c) for c in commands)
        summary = "Sin cambios" if not actions else f"{len(actions)} acción(es) pendiente(s)"
        return ApplyResult(changed=bool(actions), actions=actions, summary=summary)

    def converge(self, invocation: ServiceInvocation) -> ApplyResult:
        """
        Lleva la unit y el servicio al estado de la invocación.
        Idempotente: si nada difiere no se ejecuta ningún comando.

        Raises:
            ProviderError: si falla la escritura de la unit o un comando systemctl
        """
        write_unit, commands = self._pending(invocation)
        unit = self.unit_name(invocation)
        path = self.unit_path(invocation)
        actions: List[str] = []

        if not write_unit and not commands:
            if self.console:
                self.console.print(f"  [dim]{escape(unit)} ya está en estado {invocation.run_state.value}[/dim]")
            return ApplyResult(changed=False, actions=[], summary="Sin cambios")

        if write_unit:
            actions.append(f"Escribir {path}")
            if self.dry_run:
                if self.console:
                    self.console.print(f"  [dim](dry-run) Escribir: {escape(str(path))}[/dim]")
            else:
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_text(self.render_unit(invocation))
                except OSError as e:
                    raise ProviderError(f"No se pudo escribir {path}: {e}") from e
                if self.console:
                    self.console.print(f"  [green]✓[/green] Unit: [cyan]{escape(str(path))}[/cyan]")

        for cmd in commands:
            actions.append(" ".join(cmd))
            if self.dry_run:
                if self.console:
                    self.console.print(f"  [dim](dry-run) {escape(' '.join(cmd))}[/dim]")
                continue
            ok, out = self._runner(cmd)
            if not ok:
                raise ProviderError(f"Falló: {' '.join(cmd)}", command=cmd, output=out)
            if self.console:
                self.console.print(f"  [green]✓[/green] {escape(' '.join(cmd))}")

        summary = f"{unit} → {invocation.run_state.value}"
        if self.dry_run:
            summary = f"(dry-run) {summary}"
        return ApplyResult(changed=True, actions=actions, summary=summary)
