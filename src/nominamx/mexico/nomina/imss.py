"""Cuotas obrero-patronales IMSS por ramo de seguro.

Pasos:
1. Topar el SBC diario a 25 UMA; todos los ramos usan el SBC topado.
2. Base diaria por ramo: SBC topado, excedente sobre 3 UMA, o una UMA fija.
3. Monto del ramo = (base diaria x dias) x tasa, con un solo redondeo.

Fuente: LSS arts. 25, 106, 107, 147, 168 y 211; Ley INFONAVIT art. 29.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from nominamx.errores import ArgumentoInvalido
from nominamx.mexico.puntos_base import (
    exigir_dias,
    exigir_no_negativo,
    multiplicar_por_tasa,
)
from nominamx.mexico.tarifas import CuotaIMSS, TablasFiscales, TipoBaseCuota


class Lado(str, Enum):
    TRABAJADOR = "trabajador"
    PATRON = "patron"


@dataclass(frozen=True)
class CuotaCalculada:
    """Monto de un ramo para el periodo."""

    ramo: str
    concepto: str
    base_diaria: int
    tasa: int
    monto: int


@dataclass(frozen=True)
class ResultadoIMSS:
    """Desglose de cuotas IMSS de un lado (trabajador o patron)."""

    lado: Lado
    sbc_diario: int
    sbc_topado: int
    tope_aplicado: bool
    dias: int
    desglose: tuple[CuotaCalculada, ...]
    total: int


def topar_sbc(sbc_diario: int, tablas: TablasFiscales) -> tuple[int, bool]:
    """Aplica el tope de cotizacion (25 UMA) al SBC diario.

    Returns:
        (sbc topado, True si se aplico el tope).
    """
    exigir_no_negativo(sbc_diario, "SBC diario")
    if sbc_diario > tablas.tope_cotizacion:
        return tablas.tope_cotizacion, True
    return sbc_diario, False


def base_diaria_cuota(cuota: CuotaIMSS, sbc_topado: int, tablas: TablasFiscales) -> int:
    """Base diaria sobre la que se aplica la tasa de un ramo."""
    if cuota.base is TipoBaseCuota.UMA_FIJA:
        return tablas.uma_diaria
    if cuota.base is TipoBaseCuota.EXCEDENTE_3UMA:
        return max(0, sbc_topado - tablas.umbral_excedente)
    return sbc_topado


def _calcular_cuotas(
    sbc_diario: int,
    dias: int,
    tablas: TablasFiscales,
    lado: Lado,
    prima_riesgo: int | None = None,
) -> ResultadoIMSS:
    exigir_dias(dias)
    sbc_topado, tope_aplicado = topar_sbc(sbc_diario, tablas)

    desglose: list[CuotaCalculada] = []
    for cuota in tablas.cuotas_imss:
        if lado is Lado.TRABAJADOR:
            tasa = cuota.tasa_trabajador
        elif cuota.riesgo_trabajo and prima_riesgo is not None:
            tasa = prima_riesgo
        else:
            tasa = cuota.tasa_patron
        if tasa == 0:
            continue

        base_diaria = base_diaria_cuota(cuota, sbc_topado, tablas)
        desglose.append(
            CuotaCalculada(
                ramo=cuota.ramo,
                concepto=cuota.concepto,
                base_diaria=base_diaria,
                tasa=tasa,
                monto=multiplicar_por_tasa(base_diaria * dias, tasa),
            )
        )

    return ResultadoIMSS(
        lado=lado,
        sbc_diario=sbc_diario,
        sbc_topado=sbc_topado,
        tope_aplicado=tope_aplicado,
        dias=dias,
        desglose=tuple(desglose),
        total=sum(c.monto for c in desglose),
    )


def calcular_imss_trabajador(
    sbc_diario: int, dias: int, tablas: TablasFiscales
) -> ResultadoIMSS:
    """Cuotas IMSS a cargo del trabajador (retencion de nomina).

    Args:
        sbc_diario: Salario base de cotizacion diario en pb.
        dias: Dias cotizados en el periodo.
        tablas: Tablas fiscales del ejercicio.
    """
    return _calcular_cuotas(sbc_diario, dias, tablas, Lado.TRABAJADOR)


def calcular_imss_patron(
    sbc_diario: int,
    dias: int,
    tablas: TablasFiscales,
    prima_riesgo: int | None = None,
) -> ResultadoIMSS:
    """Cuotas IMSS e INFONAVIT a cargo del patron.

    Args:
        prima_riesgo: Prima de riesgo de trabajo de la empresa en pb; sustituye
            la prima media de la tabla cuando se indica.
    """
    if prima_riesgo is not None:
        exigir_no_negativo(prima_riesgo, "prima de riesgo")
        if prima_riesgo > 1500:
            raise ArgumentoInvalido(
                f"Prima de riesgo de trabajo fuera de rango (max 15 %): {prima_riesgo}"
            )
    return _calcular_cuotas(sbc_diario, dias, tablas, Lado.PATRON, prima_riesgo)
