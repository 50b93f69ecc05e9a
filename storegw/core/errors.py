"""
Errores de storegw.

El core solo define excepciones; la CLI se encarga del formato de salida.
"""

from typing import List, Optional


class StoreGatewayError(Exception):
    """Error base de storegw."""
    pass


class InvalidConfiguration(StoreGatewayError):
    """Campo obligatorio ausente o con forma/tipo incorrecto."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        base = super().__str__()
        if not self.errors:
            return base
        return base + "\n" + "\n".join(f"  - {e}" for e in self.errors)


class ConflictingOverride(StoreGatewayError):
    """extra_params intenta pisar un flag protegido (solo en modo estricto)."""

    def __init__(self, flag: str, generated: str, override: Optional[str]):
        super().__init__(
            f"extra_params no puede sobrescribir '{flag}' "
            f"(generado={generated!r}, extra={override!r})"
        )
        self.flag = flag
        self.generated = generated
        self.override = override


class ConfigError(StoreGatewayError):
    """Error de archivo de configuración (faltante, ilegible, YAML inválido)."""
    pass


class ProviderError(StoreGatewayError):
    """Error delegado desde el gestor de ciclo de vida (systemd, etc.)."""

    def __init__(self, message: str, command: Optional[List[str]] = None, output: str = ""):
        super().__init__(message)
        self.command = command or []
        self.output = output
