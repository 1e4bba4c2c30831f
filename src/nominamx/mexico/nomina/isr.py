"""Calculo del ISR por tarifa progresiva (art. 96 LISR).

Formula: ISR = cuota fija + (base - limite inferior) x tasa sobre excedente,
con el tramo cuyo rango [inferior, superior] (inclusivo) contiene la base.

Todos los montos estan en pb (int), jamas float.
"""

from __future__ import annotations

from nominamx.mexico.puntos_base import exigir_no_negativo, multiplicar_por_tasa
from nominamx.mexico.tarifas import TablaISR, TramoISR, buscar_tramo


def tramo_aplicable(base: int, tabla: TablaISR) -> TramoISR | None:
    """Tramo de la tarifa que contiene la base, o None debajo del primero.

    Raises:
        ArgumentoInvalido: Si la base es negativa o no es un int.
        ErrorConfiguracion: Si la tarifa no cubre la base.
    """
    exigir_no_negativo(base, "base gravable")
    indice = buscar_tramo(tabla.tramos, base, f"ISR {tabla.periodo.value}")
    return None if indice is None else tabla.tramos[indice]


def calcular_isr(base: int, tabla: TablaISR) -> int:
    """Calcula el ISR antes de subsidio para una base gravable del periodo.

    Args:
        base: Base gravable del periodo en pb.
        tabla: Tarifa ISR del periodo.

    Returns:
        ISR causado en pb (>= 0).
    """
    tramo = tramo_aplicable(base, tabla)
    if tramo is None:
        return 0
    excedente = base - tramo.limite_inferior
    return tramo.cuota_fija + multiplicar_por_tasa(excedente, tramo.tasa)


def tasa_marginal(base: int, tabla: TablaISR) -> int:
    """Tasa sobre excedente del tramo aplicable (0 debajo del primer tramo)."""
    tramo = tramo_aplicable(base, tabla)
    return 0 if tramo is None else tramo.tasa
