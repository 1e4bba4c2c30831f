"""Factor de integracion, SDI y SBC (LSS art. 27, LFT arts. 76, 80 y 87).

Factor = 1 + (dias de aguinaldo + dias de vacaciones x prima vacacional) / 365,
expresado en diezmilesimas (10493 = 1.0493) para operar como una tasa en pb.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from nominamx.errores import ArgumentoInvalido
from nominamx.mexico.puntos_base import (
    TASA_UNIDAD,
    dividir_redondeado,
    exigir_no_negativo,
    multiplicar_por_tasa,
)
from nominamx.mexico.tarifas import TablasFiscales

DIAS_ANIO = 365
DIAS_AGUINALDO_LEY = 15
PRIMA_VACACIONAL_LEY = 2500  # 25 %


class ZonaSalarial(str, Enum):
    """Zona de salario minimo."""

    GENERAL = "general"
    FRONTERA = "frontera"  # Zona Libre de la Frontera Norte


@dataclass(frozen=True)
class ResultadoSBC:
    sbc: int
    tope_aplicado: bool
    minimo_aplicado: bool


def dias_vacaciones_ley(anios_completos: int) -> int:
    """Dias de vacaciones por antiguedad (LFT art. 76, reforma 2023).

    Primer a cuarto anio de servicio: 12, 14, 16, 18. Quinto al noveno: 20.
    A partir del decimo: +2 dias por cada bloque de 5 anios.
    """
    if anios_completos < 0:
        raise ArgumentoInvalido(f"Antiguedad negativa: {anios_completos}")
    if anios_completos < 4:
        return 12 + 2 * anios_completos
    if anios_completos < 10:
        return 20
    return 20 + 2 * ((anios_completos - 5) // 5)


def calcular_factor_integracion(
    dias_vacaciones: int,
    prima_vacacional: int = PRIMA_VACACIONAL_LEY,
    dias_aguinaldo: int = DIAS_AGUINALDO_LEY,
) -> int:
    """Calcula el factor de integracion en diezmilesimas.

    12 dias de vacaciones, 25 % de prima, 15 dias de aguinaldo:
    1 + (15 + 12 x 0.25) / 365 = 1.0493 -> 10493.

    Raises:
        ArgumentoInvalido: Si las prestaciones son inferiores a las de ley.
    """
    if dias_vacaciones < 0:
        raise ArgumentoInvalido(f"Dias de vacaciones negativos: {dias_vacaciones}")
    if dias_aguinaldo < DIAS_AGUINALDO_LEY:
        raise ArgumentoInvalido(
            f"Aguinaldo inferior al minimo de ley ({DIAS_AGUINALDO_LEY} dias): {dias_aguinaldo}"
        )
    if prima_vacacional < PRIMA_VACACIONAL_LEY:
        raise ArgumentoInvalido(
            f"Prima vacacional inferior al 25 %: {prima_vacacional} pb"
        )
    # (aguinaldo + vacaciones x prima) / 365, en diezmilesimas
    numerador = dias_aguinaldo * TASA_UNIDAD + dias_vacaciones * prima_vacacional
    return TASA_UNIDAD + dividir_redondeado(numerador, DIAS_ANIO)


def calcular_sdi(salario_diario: int, factor: int) -> int:
    """Salario diario integrado = salario diario x factor de integracion."""
    exigir_no_negativo(salario_diario, "salario diario")
    if factor < TASA_UNIDAD:
        raise ArgumentoInvalido(f"Factor de integracion menor que 1: {factor}")
    return multiplicar_por_tasa(salario_diario, factor)


def calcular_sbc(
    sdi: int, tablas: TablasFiscales, zona: ZonaSalarial = ZonaSalarial.GENERAL
) -> ResultadoSBC:
    """Aplica el tope de 25 UMA y el piso de un salario minimo al SDI.

    Args:
        sdi: Salario diario integrado en pb.
        tablas: Tablas fiscales del ejercicio.
        zona: Zona de salario minimo que define el piso del SBC.

    Raises:
        ArgumentoInvalido: Si el SDI es negativo o la zona no existe.
    """
    exigir_no_negativo(sdi, "SDI")
    try:
        zona = ZonaSalarial(zona)
    except ValueError as e:
        raise ArgumentoInvalido(f"Zona salarial desconocida: {zona!r}") from e
    if zona is ZonaSalarial.FRONTERA:
        minimo = tablas.salario_minimo_frontera
    else:
        minimo = tablas.salario_minimo

    sbc = sdi
    tope_aplicado = minimo_aplicado = False
    if sbc > tablas.tope_cotizacion:
        sbc = tablas.tope_cotizacion
        tope_aplicado = True
    if sbc < minimo:
        sbc = minimo
        minimo_aplicado = True
    return ResultadoSBC(sbc=sbc, tope_aplicado=tope_aplicado, minimo_aplicado=minimo_aplicado)
