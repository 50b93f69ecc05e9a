"""
Aplicación CLI de storegw.

Solo compone comandos; la lógica vive en core (modelo, builder) y providers (systemd).
"""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from storegw import __version__
from storegw.core.errors import StoreGatewayError
from storegw.core.runtime import default_config_path
from storegw.core.runtime.contracts import RunState, ServiceInvocation
from storegw.core.store import PROTECTED_FLAGS, STORE_FLAGS, build_invocation, load_store_config
from storegw.core.store.flags import IDENTITY_FIELDS
from storegw.providers.systemd import SystemdServiceManager

# Cargar .env del directorio de trabajo antes de resolver rutas
_env = Path.cwd() / ".env"
if _env.exists():
    load_dotenv(_env)

app = typer.Typer(
    name="storegw",
    help=(
        "Declaración del nodo store (gateway de bloques en object storage)\n\n"
        "Traduce el YAML del store a la línea de comandos del binario y\n"
        "converge el servicio systemd al estado deseado (running/stopped)."
    ),
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

ConfigArg = typer.Argument(None, help="YAML del store (default: $STOREGW_CONFIG o /etc/thanos/store.yaml)")
StrictOpt = typer.Option(False, "--strict", help="Rechaza extra_params que cambien data-dir")


def _build(config_path: Optional[Path], strict: bool) -> ServiceInvocation:
    """Carga el YAML y construye la invocación; errores → mensaje en rojo y exit 1."""
    path = config_path or default_config_path()
    try:
        config = load_store_config(path)
        return build_invocation(config, protected=PROTECTED_FLAGS if strict else ())
    except StoreGatewayError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _state_style(state: RunState) -> str:
    return "[green]running[/green]" if state == RunState.RUNNING else "[yellow]stopped[/yellow]"


@app.command()
def plan(
    config_path: Optional[Path] = ConfigArg,
    strict: bool = StrictOpt,
):
    """Muestra la invocación que se generaría (sin tocar el sistema)"""
    invocation = _build(config_path, strict)
    console.print(Panel.fit(
        f"[bold cyan]Servicio {escape(invocation.service_name)}[/bold cyan]\n"
        f"[bold]Estado:[/bold] {_state_style(invocation.run_state)}\n"
        f"[bold]Binario:[/bold] {escape(invocation.bin_path)}\n"
        f"[bold]Usuario:[/bold] {escape(invocation.user)}:{escape(invocation.group)}\n"
        f"[bold]LimitNOFILE:[/bold] {invocation.max_open_files or '(default)'}",
        border_style="cyan",
    ))
    table = Table(title="Argumentos", show_header=True, header_style="bold cyan")
    table.add_column("Flag", style="cyan")
    table.add_column("Valor", style="green")
    for flag, value in invocation.args.items():
        table.add_row(escape(f"--{flag}"), escape(value))
    console.print(table)


@app.command("render-unit")
def render_unit(
    config_path: Optional[Path] = ConfigArg,
    strict: bool = StrictOpt,
):
    """Imprime la unit de systemd generada"""
    invocation = _build(config_path, strict)
    manager = SystemdServiceManager()
    typer.echo(manager.render_unit(invocation), nl=False)


@app.command()
def apply(
    config_path: Optional[Path] = ConfigArg,
    strict: bool = StrictOpt,
    dry_run: bool = typer.Option(False, "--dry-run", help="Muestra las acciones sin ejecutarlas"),
    unit_dir: Optional[Path] = typer.Option(None, "--unit-dir", help="Directorio de units (default: $STOREGW_UNIT_DIR)"),
):
    """
    Converge el servicio systemd al estado deseado

    ⚠️  Escribir la unit y llamar a systemctl requiere permisos de root.
    """
    invocation = _build(config_path, strict)
    manager = SystemdServiceManager(unit_dir=unit_dir, console=console, dry_run=dry_run)
    console.print(Panel.fit(
        f"[bold cyan]Aplicando {escape(manager.unit_name(invocation))}[/bold cyan]\n"
        f"[dim]estado deseado=[/dim] {_state_style(invocation.run_state)}",
        border_style="cyan",
    ))
    try:
        result = manager.converge(invocation)
    except StoreGatewayError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        output = getattr(e, "output", "")
        if output:
            console.print(f"[dim]{escape(output)}[/dim]")
        raise typer.Exit(code=1)
    mark = "[green]✓[/green]" if result.changed else "[dim]=[/dim]"
    console.print(f"\n{mark} {escape(result.summary)}")


@app.command()
def flags():
    """Lista la correspondencia campo → flag del binario"""
    table = Table(title="Opciones del store", show_header=True, header_style="bold cyan")
    table.add_column("Campo", style="cyan")
    table.add_column("Flag", style="yellow")
    for field_name in IDENTITY_FIELDS:
        table.add_row(field_name, "[dim](proceso, sin flag)[/dim]")
    for field_name, flag in STORE_FLAGS.items():
        suffix = " [dim](protegido en --strict)[/dim]" if flag in PROTECTED_FLAGS else ""
        table.add_row(field_name, f"--{flag}{suffix}")
    console.print(table)


@app.command()
def version():
    """Muestra la versión de storegw"""
    console.print(f"storegw {__version__}")


def main():
    app()
