"""Comandos CLI de nomina.

Uso:
    nmx nomina neto 15000 --periodo mensual
    nmx nomina bruto 20000 --periodo quincenal --dias 15
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from nominamx.cli.app import errores_a_salida, obtener_tablas_activas
from nominamx.mexico.nomina.imss import ResultadoIMSS, calcular_imss_patron
from nominamx.mexico.nomina.inverso import ResultadoInverso, calcular_bruto_desde_neto
from nominamx.mexico.nomina.motor import ResultadoNomina, calcular_neto_desde_bruto
from nominamx.mexico.puntos_base import a_porcentaje, desde_pesos, desde_porcentaje, formatear
from nominamx.mexico.tarifas import TipoPeriodo

app = typer.Typer()
console = Console()


@app.command("neto")
def neto(
    monto_bruto: str = typer.Argument(..., help="Percepcion bruta del periodo (ej: 15000.00)"),
    periodo: TipoPeriodo = typer.Option(
        TipoPeriodo.MENSUAL, "--periodo", "-p", help="Periodicidad de pago",
    ),
    dias: Optional[int] = typer.Option(
        None, "--dias", "-d", help="Dias del periodo (por defecto los del tipo)",
    ),
    prima_riesgo: Optional[str] = typer.Option(
        None, "--prima-riesgo", help="Prima de riesgo de trabajo en % (ej: 0.54)",
    ),
) -> None:
    """Calcular el neto a pagar a partir del bruto."""
    with errores_a_salida():
        tablas = obtener_tablas_activas()
        resultado = calcular_neto_desde_bruto(desde_pesos(monto_bruto), tablas, periodo, dias)
        patron = calcular_imss_patron(
            resultado.salario_diario,
            resultado.dias,
            tablas,
            prima_riesgo=desde_porcentaje(prima_riesgo) if prima_riesgo else None,
        )
    _mostrar_nomina(resultado, f"Nomina {periodo.value} {tablas.anio}")
    _mostrar_patron(patron)


@app.command("bruto")
def bruto(
    monto_neto: str = typer.Argument(..., help="Neto garantizado del periodo (ej: 20000.00)"),
    periodo: TipoPeriodo = typer.Option(
        TipoPeriodo.MENSUAL, "--periodo", "-p", help="Periodicidad de pago",
    ),
    dias: Optional[int] = typer.Option(
        None, "--dias", "-d", help="Dias del periodo (por defecto los del tipo)",
    ),
    tolerancia: str = typer.Option(
        "0.01", "--tolerancia", help="Diferencia aceptable en pesos",
    ),
    max_iteraciones: int = typer.Option(
        100, "--max-iteraciones", help="Tope de iteraciones",
    ),
    biseccion: bool = typer.Option(
        True, "--biseccion/--sin-biseccion", help="Respaldo por biseccion",
    ),
) -> None:
    """Calcular el bruto necesario para pagar un neto garantizado."""
    with errores_a_salida():
        tablas = obtener_tablas_activas()
        inverso = calcular_bruto_desde_neto(
            desde_pesos(monto_neto),
            tablas,
            periodo,
            dias,
            max_iteraciones=max_iteraciones,
            tolerancia=desde_pesos(tolerancia),
            biseccion=biseccion,
        )
        detalle = calcular_neto_desde_bruto(inverso.bruto, tablas, periodo, dias)
    _mostrar_nomina(detalle, f"Bruto para neto {formatear(desde_pesos(monto_neto))}")
    _mostrar_convergencia(inverso)


def _mostrar_nomina(resultado: ResultadoNomina, titulo: str) -> None:
    """Muestra el desglose completo de un periodo con Rich."""
    table = Table(title=titulo, show_header=True, header_style="bold")
    table.add_column("Concepto", style="cyan")
    table.add_column("Monto", justify="right", no_wrap=True)

    table.add_row("Percepcion bruta", formatear(resultado.bruto))
    table.add_row(f"Salario diario ({resultado.dias} dias)", formatear(resultado.salario_diario))

    # IMSS trabajador
    table.add_section()
    table.add_row("[bold]IMSS trabajador[/bold]", "")
    _filas_imss(table, resultado.imss)

    # ISR
    table.add_section()
    table.add_row("Base gravable", formatear(resultado.base_gravable))
    table.add_row("  ISR causado", formatear(resultado.isr))
    table.add_row("  Subsidio al empleo", formatear(resultado.subsidio))
    table.add_row("  ISR retenido", formatear(resultado.isr_retenido))
    table.add_row(
        "[bold]Total retenciones[/bold]",
        f"[bold red]{formatear(resultado.total_retenciones)}[/bold red]",
    )

    table.add_section()
    table.add_row(
        "[bold green]Neto a pagar[/bold green]",
        f"[bold green]{formatear(resultado.neto)}[/bold green]",
    )
    console.print(table)


def _filas_imss(table: Table, imss: ResultadoIMSS) -> None:
    for cuota in imss.desglose:
        table.add_row(
            f"  {cuota.concepto} ({a_porcentaje(cuota.tasa)} %)", formatear(cuota.monto)
        )
    if imss.tope_aplicado:
        table.add_row("  [yellow]SBC topado a 25 UMA[/yellow]", formatear(imss.sbc_topado))
    table.add_row("  Total IMSS", formatear(imss.total))


def _mostrar_patron(patron: ResultadoIMSS) -> None:
    table = Table(title="Cuotas patronales", show_header=True, header_style="bold")
    table.add_column("Concepto", style="cyan")
    table.add_column("Monto", justify="right", no_wrap=True)
    _filas_imss(table, patron)
    console.print(table)


def _mostrar_convergencia(inverso: ResultadoInverso) -> None:
    if inverso.convergencia:
        console.print(
            f"[green]Convergencia en {inverso.iteraciones} iteraciones "
            f"(varianza {formatear(inverso.varianza, decimales=4)})[/green]"
        )
    else:
        console.print(
            f"[yellow]Sin convergencia tras {inverso.iteraciones} iteraciones: "
            f"mejor estimacion con varianza {formatear(inverso.varianza, decimales=4)}[/yellow]"
        )
