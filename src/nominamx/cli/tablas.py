"""Comandos CLI de tablas fiscales.

Uso:
    nmx --anio 2025 tablas exportar --salida tablas-2025.yaml
    nmx tablas validar tablas-2027.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nominamx.cli.app import errores_a_salida, obtener_tablas_activas
from nominamx.mexico.configuracion import cargar_tablas, exportar_tablas
from nominamx.mexico.puntos_base import formatear

app = typer.Typer()
console = Console()


@app.command("exportar")
def exportar(
    salida: Optional[str] = typer.Option(
        None, "--salida", "-o", help="Archivo YAML de salida (por defecto stdout)",
    ),
) -> None:
    """Exportar las tablas activas en formato YAML (montos en pb)."""
    with errores_a_salida():
        documento = exportar_tablas(obtener_tablas_activas())
    if salida is None:
        typer.echo(documento, nl=False)
        return
    Path(salida).write_text(documento, encoding="utf-8")
    console.print(f"[green]Tablas exportadas a {salida}[/green]")


@app.command("validar")
def validar(
    ruta: str = typer.Argument(..., help="Archivo YAML de tablas fiscales"),
) -> None:
    """Validar un archivo YAML de tablas fiscales."""
    with errores_a_salida():
        tablas = cargar_tablas(ruta)
    console.print(
        f"[green]Tablas {tablas.anio} validas[/green]: "
        f"{len(tablas.isr)} tarifas ISR, {len(tablas.subsidio)} tablas de subsidio, "
        f"{len(tablas.cuotas_imss)} cuotas IMSS, UMA {formatear(tablas.uma_diaria)}"
    )
