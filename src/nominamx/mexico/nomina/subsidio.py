"""Subsidio al empleo y ISR retenido.

El subsidio es un monto fijo por rango de ingreso (no una formula marginal).
ISR retenido = max(0, ISR causado - subsidio): el subsidio no utilizado no se
entrega al trabajador.
"""

from __future__ import annotations

from dataclasses import dataclass

from nominamx.mexico.nomina.isr import calcular_isr, tramo_aplicable
from nominamx.mexico.puntos_base import exigir_no_negativo
from nominamx.mexico.tarifas import TablaISR, TablaSubsidio, TramoISR, buscar_tramo


@dataclass(frozen=True)
class ResultadoISR:
    """ISR causado, subsidio y retencion de un periodo."""

    isr: int
    subsidio: int
    isr_retenido: int
    tramo: TramoISR | None


def calcular_subsidio(base: int, tabla: TablaSubsidio) -> int:
    """Subsidio al empleo del rango que contiene la base (0 fuera de rango)."""
    exigir_no_negativo(base, "base gravable")
    indice = buscar_tramo(tabla.tramos, base, f"subsidio {tabla.periodo.value}")
    if indice is None:
        return 0
    return tabla.tramos[indice].subsidio


def calcular_retencion(
    base: int, tabla_isr: TablaISR, tabla_subsidio: TablaSubsidio
) -> ResultadoISR:
    """Calcula el ISR a retener despues de aplicar el subsidio al empleo."""
    isr = calcular_isr(base, tabla_isr)
    subsidio = calcular_subsidio(base, tabla_subsidio)
    return ResultadoISR(
        isr=isr,
        subsidio=subsidio,
        isr_retenido=max(0, isr - subsidio),
        tramo=tramo_aplicable(base, tabla_isr),
    )
