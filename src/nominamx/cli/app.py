"""Aplicacion CLI principal NominaMX."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

import nominamx
from nominamx.errores import ArgumentoInvalido, ErrorConfiguracion
from nominamx.mexico.configuracion import cargar_tablas
from nominamx.mexico.tarifas import TablasFiscales, obtener_tablas

app = typer.Typer(
    name="nmx",
    help="NominaMX - Calculo de nomina, ISR, IMSS y finiquitos en Mexico",
    no_args_is_help=True,
)

console = Console()

# Opciones globales guardadas por el callback
_anio: int = 2026
_ruta_tablas: Path | None = None


def obtener_tablas_activas() -> TablasFiscales:
    """Tablas del archivo --tablas si se indico, si no las del ejercicio --anio."""
    if _ruta_tablas is not None:
        return cargar_tablas(_ruta_tablas)
    return obtener_tablas(_anio)


@contextmanager
def errores_a_salida() -> Iterator[None]:
    """Convierte los errores de calculo o configuracion en un mensaje y codigo 1."""
    try:
        yield
    except (ArgumentoInvalido, ErrorConfiguracion) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"NominaMX version {nominamx.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    anio: int = typer.Option(
        2026, "--anio", "-a", help="Ejercicio fiscal de las tablas integradas",
    ),
    tablas: Optional[str] = typer.Option(
        None, "--tablas", "-t", help="Archivo YAML de tablas fiscales (sustituye --anio)",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Mostrar el detalle del calculo (logs DEBUG)",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Mostrar la version de NominaMX",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """NominaMX - Motor de calculo de remuneraciones para Mexico."""
    global _anio, _ruta_tablas
    _anio = anio
    _ruta_tablas = Path(tablas) if tablas else None
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# Importacion y registro de los subcomandos
from nominamx.cli.liquidacion import liquidacion  # noqa: E402
from nominamx.cli.nomina import app as nomina_app  # noqa: E402
from nominamx.cli.tablas import app as tablas_app  # noqa: E402

app.add_typer(nomina_app, name="nomina", help="Calculo de nomina (neto y bruto)")
app.add_typer(tablas_app, name="tablas", help="Tablas fiscales (exportar, validar)")
app.command(name="liquidacion", help="Calcular un finiquito o una liquidacion")(liquidacion)
