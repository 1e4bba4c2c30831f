"""Calculo inverso: bruto necesario para pagar un neto garantizado.

El pipeline bruto -> neto es lineal por tramos (tarifa ISR, tope IMSS), asi
que no tiene inversa cerrada. Se itera con un paso tipo Newton:

    ajuste = varianza / (1 - tasa marginal de retencion) x amortiguacion

con bruto acotado a [neto, 2.5 x neto]. El solver conserva el intervalo
[bajo, alto] que encierra la solucion; tras tres oscilaciones, o si el paso
sale del intervalo, biseca en lugar de seguir el paso de Newton.

La no convergencia no es un error: se devuelve la mejor estimacion con
convergencia=False y el llamador decide.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from nominamx.errores import ArgumentoInvalido
from nominamx.mexico.nomina.isr import tasa_marginal
from nominamx.mexico.nomina.motor import (
    ResultadoNomina,
    calcular_neto_desde_bruto,
    resolver_dias,
)
from nominamx.mexico.puntos_base import (
    TASA_UNIDAD,
    dividir_redondeado,
    exigir_no_negativo,
    formatear,
    multiplicar_por_tasa,
)
from nominamx.mexico.tarifas import TablasFiscales, TipoPeriodo

logger = logging.getLogger(__name__)

FACTOR_INICIAL = 13500  # bruto0 = neto x 1.35
FACTOR_MAXIMO = 25000  # bruto <= neto x 2.5
TASA_IMSS_APROXIMADA = 250  # 2.5 %
DERIVADA_RESPALDO = 7000
AMORTIGUACION_RESPALDO = 5000
DERIVADA_MINIMA = 3000
AMORTIGUACION_BAJA = 7000
OSCILACIONES_BISECCION = 3


@dataclass(frozen=True)
class ResultadoInverso:
    """Resultado del calculo bruto desde neto."""

    bruto: int
    salario_diario: int
    neto_calculado: int
    isr: int
    subsidio: int
    isr_retenido: int
    imss_trabajador: int
    varianza: int
    iteraciones: int
    convergencia: bool


def _resultado(
    nomina: ResultadoNomina, neto_deseado: int, iteraciones: int, convergencia: bool
) -> ResultadoInverso:
    return ResultadoInverso(
        bruto=nomina.bruto,
        salario_diario=nomina.salario_diario,
        neto_calculado=nomina.neto,
        isr=nomina.isr,
        subsidio=nomina.subsidio,
        isr_retenido=nomina.isr_retenido,
        imss_trabajador=nomina.imss_trabajador,
        varianza=nomina.neto - neto_deseado,
        iteraciones=iteraciones,
        convergencia=convergencia,
    )


def _paso_newton(
    varianza: int, nomina: ResultadoNomina, tablas: TablasFiscales
) -> int:
    """Ajuste del bruto segun la tasa marginal de retencion local."""
    retencion = (
        tasa_marginal(nomina.base_gravable, tablas.tabla_isr(nomina.periodo))
        + TASA_IMSS_APROXIMADA
    )
    derivada = TASA_UNIDAD - retencion
    if derivada <= 0 or derivada > TASA_UNIDAD:
        derivada, amortiguacion = DERIVADA_RESPALDO, AMORTIGUACION_RESPALDO
    elif derivada < DERIVADA_MINIMA:
        amortiguacion = AMORTIGUACION_BAJA
    else:
        amortiguacion = TASA_UNIDAD
    return dividir_redondeado(varianza * amortiguacion, derivada)


def _evaluar(
    bruto: int,
    neto_deseado: int,
    tablas: TablasFiscales,
    periodo: TipoPeriodo,
    dias: int,
    iteracion: int,
) -> ResultadoNomina:
    nomina = calcular_neto_desde_bruto(bruto, tablas, periodo, dias)
    logger.debug(
        "Iteracion %d: bruto=%s neto=%s varianza=%d",
        iteracion, formatear(bruto), formatear(nomina.neto), nomina.neto - neto_deseado,
    )
    return nomina


def calcular_bruto_desde_neto(
    neto_deseado: int,
    tablas: TablasFiscales,
    periodo: TipoPeriodo,
    dias: int | None = None,
    max_iteraciones: int = 100,
    tolerancia: int = 100,
    biseccion: bool = True,
) -> ResultadoInverso:
    """Encuentra el bruto cuyo neto calculado iguala el neto deseado.

    Args:
        neto_deseado: Neto garantizado del periodo en pb.
        tablas: Tablas fiscales del ejercicio.
        periodo: Periodicidad de pago.
        dias: Dias del periodo; por defecto los del tipo de periodo.
        max_iteraciones: Tope de iteraciones (garantiza terminacion).
        tolerancia: |neto calculado - neto deseado| aceptable en pb
            (100 pb = 1 centavo).
        biseccion: Respaldo por biseccion del intervalo [bajo, alto].

    Returns:
        ResultadoInverso; si no converge, la estimacion con menor |varianza|.

    Raises:
        ArgumentoInvalido: Si el neto es negativo o los parametros no son validos.
    """
    exigir_no_negativo(neto_deseado, "neto deseado")
    exigir_no_negativo(tolerancia, "tolerancia")
    if max_iteraciones < 1:
        raise ArgumentoInvalido(f"max_iteraciones debe ser >= 1: {max_iteraciones}")
    dias = resolver_dias(periodo, dias)

    if neto_deseado == 0:
        nomina = calcular_neto_desde_bruto(0, tablas, periodo, dias)
        return _resultado(nomina, 0, 1, True)

    minimo = neto_deseado
    maximo = multiplicar_por_tasa(neto_deseado, FACTOR_MAXIMO)
    bruto = min(max(multiplicar_por_tasa(neto_deseado, FACTOR_INICIAL), minimo), maximo)

    # neto(bruto) <= bruto y las retenciones no llegan a 60 %: la solucion
    # esta en [minimo, maximo].
    bajo, alto = minimo, maximo
    varianza_anterior: int | None = None
    oscilaciones = 0

    iteracion = 1
    nomina = _evaluar(bruto, neto_deseado, tablas, periodo, dias, iteracion)
    mejor = nomina
    while True:
        varianza = nomina.neto - neto_deseado
        if abs(varianza) < abs(mejor.neto - neto_deseado):
            mejor = nomina
        if abs(varianza) <= tolerancia:
            return _resultado(nomina, neto_deseado, iteracion, True)

        if varianza < 0:
            bajo = max(bajo, bruto)
        else:
            alto = min(alto, bruto)
        if iteracion >= max_iteraciones or (biseccion and alto - bajo <= 1):
            break

        oscilacion = varianza_anterior is not None and (varianza > 0) != (
            varianza_anterior > 0
        )
        if oscilacion:
            oscilaciones += 1
        varianza_anterior = varianza

        if biseccion and oscilaciones >= OSCILACIONES_BISECCION:
            bruto = (bajo + alto) // 2
        else:
            ajuste = _paso_newton(varianza, nomina, tablas)
            if oscilacion:
                ajuste = dividir_redondeado(ajuste, 2)
            siguiente = min(max(bruto - ajuste, minimo), maximo)
            if biseccion and not bajo < siguiente < alto:
                siguiente = (bajo + alto) // 2
            bruto = siguiente

        iteracion += 1
        nomina = _evaluar(bruto, neto_deseado, tablas, periodo, dias, iteracion)

    logger.warning(
        "Calculo inverso sin convergencia tras %d iteraciones: neto deseado %s, "
        "mejor bruto %s (varianza %d pb)",
        iteracion, formatear(neto_deseado), formatear(mejor.bruto),
        mejor.neto - neto_deseado,
    )
    return _resultado(mejor, neto_deseado, iteracion, False)
