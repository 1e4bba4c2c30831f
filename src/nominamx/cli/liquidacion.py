"""Comando CLI de finiquitos y liquidaciones.

Uso:
    nmx liquidacion 500 2020-01-01 2024-06-15 --tipo renuncia_voluntaria
    nmx liquidacion 500 2020-01-01 2024-06-15 --tipo despido_injustificado --topar-prima
    nmx liquidacion 500 2020-01-01 2024-06-15 --aguinaldo-pagado 5
"""

from __future__ import annotations

import datetime

import typer
from rich.console import Console
from rich.table import Table

from nominamx.cli.app import errores_a_salida, obtener_tablas_activas
from nominamx.mexico.liquidacion import (
    ResultadoLiquidacion,
    TipoLiquidacion,
    calcular_liquidacion,
)
from nominamx.mexico.puntos_base import desde_pesos, desde_porcentaje, formatear

console = Console()

_FORMATO_FECHA = ["%Y-%m-%d"]


def liquidacion(
    salario_diario: str = typer.Argument(..., help="Salario diario (ej: 500.00)"),
    fecha_ingreso: datetime.datetime = typer.Argument(
        ..., formats=_FORMATO_FECHA, help="Fecha de ingreso (AAAA-MM-DD)",
    ),
    fecha_baja: datetime.datetime = typer.Argument(
        ..., formats=_FORMATO_FECHA, help="Fecha de baja (AAAA-MM-DD)",
    ),
    tipo: TipoLiquidacion = typer.Option(
        TipoLiquidacion.RENUNCIA_VOLUNTARIA, "--tipo", help="Tipo de terminacion",
    ),
    dias_aguinaldo: int = typer.Option(
        15, "--aguinaldo", help="Dias de aguinaldo anuales (minimo 15)",
    ),
    prima_vacacional: str = typer.Option(
        "25", "--prima-vacacional", help="Prima vacacional en % (minimo 25)",
    ),
    vacaciones_tomadas: int = typer.Option(
        0, "--vacaciones-tomadas", help="Dias de vacaciones ya gozados en el anio",
    ),
    aguinaldo_pagado: int = typer.Option(
        0, "--aguinaldo-pagado", help="Dias de aguinaldo ya pagados en el anio",
    ),
    topar_prima: bool = typer.Option(
        False, "--topar-prima",
        help="Topar la prima de antiguedad a dos salarios minimos (LFT art. 486)",
    ),
) -> None:
    """Calcular un finiquito o una liquidacion."""
    with errores_a_salida():
        tablas = obtener_tablas_activas()
        tope = None
        if topar_prima:
            tope = 2 * tablas.salario_minimo
        resultado = calcular_liquidacion(
            desde_pesos(salario_diario),
            fecha_ingreso.date(),
            fecha_baja.date(),
            tipo,
            dias_aguinaldo=dias_aguinaldo,
            prima_vacacional=desde_porcentaje(prima_vacacional),
            dias_vacaciones_tomados=vacaciones_tomadas,
            dias_aguinaldo_pagados=aguinaldo_pagado,
            tope_prima_antiguedad=tope,
            uma_diaria=tablas.uma_diaria,
        )
    _mostrar_liquidacion(resultado)


def _mostrar_liquidacion(resultado: ResultadoLiquidacion) -> None:
    table = Table(
        title=(
            f"{resultado.documento.capitalize()} - {resultado.tipo.value} "
            f"({resultado.anios_antiguedad} anios)"
        ),
        show_header=True,
        header_style="bold",
    )
    table.add_column("Concepto", style="cyan")
    table.add_column("Calculo", style="dim")
    table.add_column("Monto", justify="right", no_wrap=True)

    for concepto in resultado.conceptos:
        table.add_row(concepto.etiqueta, concepto.formula, formatear(concepto.total))

    table.add_section()
    table.add_row("Exento (LISR art. 93)", "", formatear(resultado.total_exento))
    table.add_row("Gravado", "", formatear(resultado.total_gravado))
    table.add_row(
        "[bold green]Total[/bold green]", "",
        f"[bold green]{formatear(resultado.total)}[/bold green]",
    )
    console.print(table)
