"""Calculo de finiquitos y liquidaciones (LFT arts. 50, 76, 80, 87, 162 y 486).

Cada tipo de terminacion selecciona una lista ordenada de generadores de
conceptos en REGLAS_LIQUIDACION. Cada concepto es auditable:

    total = round(monto unitario x cantidad)
    total = exento + gravado

donde la cantidad es una fraccion exacta (dias, anios o porcentaje), de modo
que el unico redondeo ocurre al final de cada concepto. La parte exenta se
limita en UMA segun LISR art. 93 (aguinaldo 30 UMA, prima vacacional 15 UMA,
indemnizaciones 90 UMA y 20 UMA por anio). El total de la liquidacion es la
suma exacta de los totales de los conceptos.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from fractions import Fraction
from types import MappingProxyType

from nominamx.errores import ArgumentoInvalido
from nominamx.mexico.nomina.integracion import (
    DIAS_AGUINALDO_LEY,
    DIAS_ANIO,
    PRIMA_VACACIONAL_LEY,
    dias_vacaciones_ley,
)
from nominamx.mexico.puntos_base import (
    TASA_UNIDAD,
    a_porcentaje,
    exigir_no_negativo,
    formatear,
    multiplicar_por_fraccion,
)
from nominamx.mexico.tarifas import TABLAS

DIAS_POR_ANIO_JULIANO = Fraction(1461, 4)  # 365.25
DIAS_INDEMNIZACION_CONSTITUCIONAL = 90
DIAS_PRIMA_ANTIGUEDAD = 12
DIAS_POR_ANIO_INDEMNIZACION = 20

# Limites de exencion en UMA diarias (LISR art. 93)
UMAS_EXENTAS_AGUINALDO = 30
UMAS_EXENTAS_PRIMA_VACACIONAL = 15
UMAS_EXENTAS_INDEMNIZACION = 90
UMAS_EXENTAS_POR_ANIO = 20


class TipoLiquidacion(str, Enum):
    RENUNCIA_VOLUNTARIA = "renuncia_voluntaria"
    DESPIDO_INJUSTIFICADO = "despido_injustificado"
    DESPIDO_JUSTIFICADO = "despido_justificado"

    @property
    def documento(self) -> str:
        """Tipo de documento legal: 'liquidacion' o 'finiquito'."""
        if self is TipoLiquidacion.DESPIDO_INJUSTIFICADO:
            return "liquidacion"
        return "finiquito"


@dataclass(frozen=True)
class ConceptoLiquidacion:
    """Linea auditable de un finiquito o liquidacion."""

    etiqueta: str
    formula: str
    monto_unitario: int
    cantidad: Fraction
    total: int
    exento: int
    gravado: int


@dataclass(frozen=True)
class DatosLiquidacion:
    """Entradas validadas y derivadas comunes a todos los generadores."""

    salario_diario: int
    fecha_ingreso: datetime.date
    fecha_baja: datetime.date
    antiguedad: Fraction
    dias_transcurridos: int
    dias_aguinaldo: int
    prima_vacacional: int
    dias_vacaciones_tomados: int
    dias_aguinaldo_pagados: int
    tope_prima_antiguedad: int | None
    uma_diaria: int


@dataclass(frozen=True)
class ResultadoLiquidacion:
    """Conceptos ordenados y total de una terminacion laboral."""

    tipo: TipoLiquidacion
    antiguedad: Fraction
    dias_transcurridos: int
    conceptos: tuple[ConceptoLiquidacion, ...]
    total: int
    total_exento: int
    total_gravado: int

    @property
    def documento(self) -> str:
        return self.tipo.documento

    @property
    def anios_antiguedad(self) -> Decimal:
        """Antiguedad en anios con 4 decimales, para mostrar."""
        return _a_decimal(self.antiguedad)


GeneradorConcepto = Callable[[DatosLiquidacion], ConceptoLiquidacion]


def _a_decimal(valor: Fraction, decimales: int = 4) -> Decimal:
    cociente = Decimal(valor.numerator) / Decimal(valor.denominator)
    return cociente.quantize(Decimal(1).scaleb(-decimales), rounding=ROUND_HALF_UP)


def _concepto(
    etiqueta: str,
    formula: str,
    monto_unitario: int,
    cantidad: Fraction | int,
    limite_exento: int | None = 0,
) -> ConceptoLiquidacion:
    """Arma un concepto; limite_exento None exenta el total completo."""
    cantidad = Fraction(cantidad)
    total = multiplicar_por_fraccion(monto_unitario, cantidad)
    exento = total if limite_exento is None else min(total, limite_exento)
    return ConceptoLiquidacion(
        etiqueta=etiqueta,
        formula=formula,
        monto_unitario=monto_unitario,
        cantidad=cantidad,
        total=total,
        exento=exento,
        gravado=total - exento,
    )


def calcular_antiguedad(
    fecha_ingreso: datetime.date, fecha_baja: datetime.date
) -> Fraction:
    """Antiguedad en anios: dias transcurridos / 365.25, como fraccion exacta."""
    return Fraction((fecha_baja - fecha_ingreso).days) / DIAS_POR_ANIO_JULIANO


def dias_transcurridos_en_anio(
    fecha_ingreso: datetime.date, fecha_baja: datetime.date
) -> int:
    """Dias desde max(1 de enero, ingreso) hasta la baja, ambos inclusive."""
    inicio = max(datetime.date(fecha_baja.year, 1, 1), fecha_ingreso)
    return (fecha_baja - inicio).days + 1


# =============================================================================
# Generadores de conceptos
# =============================================================================
def _dias_pendientes(datos: DatosLiquidacion) -> ConceptoLiquidacion:
    """Salario de los dias trabajados en el mes de la baja."""
    dias = min(
        datos.fecha_baja.day, (datos.fecha_baja - datos.fecha_ingreso).days + 1
    )
    return _concepto(
        "Dias trabajados pendientes",
        f"{dias} dias x {formatear(datos.salario_diario)}",
        datos.salario_diario,
        dias,
    )


def _aguinaldo(datos: DatosLiquidacion) -> ConceptoLiquidacion:
    """Aguinaldo proporcional (LFT art. 87), menos los dias ya pagados."""
    proporcional = Fraction(datos.dias_aguinaldo * datos.dias_transcurridos, DIAS_ANIO)
    cantidad = max(Fraction(0), proporcional - datos.dias_aguinaldo_pagados)
    formula = (
        f"({datos.dias_aguinaldo} / {DIAS_ANIO}) x {datos.dias_transcurridos} dias "
        f"x {formatear(datos.salario_diario)}"
    )
    if datos.dias_aguinaldo_pagados:
        formula += f" - {datos.dias_aguinaldo_pagados} dias pagados"
    return _concepto(
        "Aguinaldo proporcional",
        formula,
        datos.salario_diario,
        cantidad,
        UMAS_EXENTAS_AGUINALDO * datos.uma_diaria,
    )


def _vacaciones(datos: DatosLiquidacion) -> ConceptoLiquidacion:
    """Vacaciones proporcionales no gozadas (LFT art. 76)."""
    dias_ley = dias_vacaciones_ley(int(datos.antiguedad))
    proporcionales = Fraction(dias_ley * datos.dias_transcurridos, DIAS_ANIO)
    cantidad = max(Fraction(0), proporcionales - datos.dias_vacaciones_tomados)
    formula = (
        f"({dias_ley} / {DIAS_ANIO}) x {datos.dias_transcurridos} dias "
        f"x {formatear(datos.salario_diario)}"
    )
    if datos.dias_vacaciones_tomados:
        formula += f" - {datos.dias_vacaciones_tomados} dias tomados"
    return _concepto(
        "Vacaciones proporcionales", formula, datos.salario_diario, cantidad, None
    )


def _prima_vacacional(datos: DatosLiquidacion) -> ConceptoLiquidacion:
    """Prima vacacional sobre el monto de vacaciones (LFT art. 80)."""
    vacaciones = _vacaciones(datos)
    return _concepto(
        f"Prima vacacional ({a_porcentaje(datos.prima_vacacional)} %)",
        f"{formatear(vacaciones.total)} x {a_porcentaje(datos.prima_vacacional)} %",
        vacaciones.total,
        Fraction(datos.prima_vacacional, TASA_UNIDAD),
        UMAS_EXENTAS_PRIMA_VACACIONAL * datos.uma_diaria,
    )


def _indemnizacion_constitucional(datos: DatosLiquidacion) -> ConceptoLiquidacion:
    """Tres meses de salario (LFT art. 50, fraccion III)."""
    return _concepto(
        "Indemnizacion constitucional",
        f"{DIAS_INDEMNIZACION_CONSTITUCIONAL} dias x {formatear(datos.salario_diario)}",
        datos.salario_diario,
        DIAS_INDEMNIZACION_CONSTITUCIONAL,
        UMAS_EXENTAS_INDEMNIZACION * datos.uma_diaria,
    )


def _prima_antiguedad(datos: DatosLiquidacion) -> ConceptoLiquidacion:
    """12 dias por anio de servicio (LFT art. 162), con tope opcional (art. 486)."""
    salario = datos.salario_diario
    formula_salario = formatear(salario)
    if datos.tope_prima_antiguedad is not None and salario > datos.tope_prima_antiguedad:
        salario = datos.tope_prima_antiguedad
        formula_salario = f"{formatear(salario)} (topado)"
    return _concepto(
        "Prima de antiguedad",
        f"{_a_decimal(datos.antiguedad)} anios x {DIAS_PRIMA_ANTIGUEDAD} dias "
        f"x {formula_salario}",
        salario,
        datos.antiguedad * DIAS_PRIMA_ANTIGUEDAD,
        None,
    )


def _veinte_dias_por_anio(datos: DatosLiquidacion) -> ConceptoLiquidacion:
    """20 dias de salario por anio de servicio (LFT art. 50, fraccion II)."""
    return _concepto(
        "20 dias por anio de servicio",
        f"{_a_decimal(datos.antiguedad)} anios x {DIAS_POR_ANIO_INDEMNIZACION} dias "
        f"x {formatear(datos.salario_diario)}",
        datos.salario_diario,
        datos.antiguedad * DIAS_POR_ANIO_INDEMNIZACION,
        multiplicar_por_fraccion(
            datos.uma_diaria, datos.antiguedad * UMAS_EXENTAS_POR_ANIO
        ),
    )


_CONCEPTOS_COMUNES: tuple[GeneradorConcepto, ...] = (
    _dias_pendientes,
    _aguinaldo,
    _vacaciones,
    _prima_vacacional,
)

REGLAS_LIQUIDACION: Mapping[TipoLiquidacion, tuple[GeneradorConcepto, ...]] = (
    MappingProxyType(
        {
            TipoLiquidacion.RENUNCIA_VOLUNTARIA: _CONCEPTOS_COMUNES,
            TipoLiquidacion.DESPIDO_INJUSTIFICADO: _CONCEPTOS_COMUNES
            + (_indemnizacion_constitucional, _prima_antiguedad, _veinte_dias_por_anio),
            TipoLiquidacion.DESPIDO_JUSTIFICADO: _CONCEPTOS_COMUNES + (_prima_antiguedad,),
        }
    )
)


def calcular_liquidacion(
    salario_diario: int,
    fecha_ingreso: datetime.date,
    fecha_baja: datetime.date,
    tipo: TipoLiquidacion,
    *,
    dias_aguinaldo: int = DIAS_AGUINALDO_LEY,
    prima_vacacional: int = PRIMA_VACACIONAL_LEY,
    dias_vacaciones_tomados: int = 0,
    dias_aguinaldo_pagados: int = 0,
    tope_prima_antiguedad: int | None = None,
    uma_diaria: int | None = None,
) -> ResultadoLiquidacion:
    """Calcula el finiquito o la liquidacion de una terminacion laboral.

    Args:
        salario_diario: Salario diario en pb.
        fecha_ingreso: Fecha de ingreso.
        fecha_baja: Fecha de terminacion (inclusive).
        tipo: Tipo de terminacion.
        dias_aguinaldo: Dias de aguinaldo anuales (minimo 15).
        prima_vacacional: Prima vacacional en pb (minimo 2500 = 25 %).
        dias_vacaciones_tomados: Dias de vacaciones ya gozados en el anio.
        dias_aguinaldo_pagados: Dias de aguinaldo ya cubiertos en el anio.
        tope_prima_antiguedad: Salario diario maximo para la prima de
            antiguedad (dos salarios minimos segun LFT art. 486), o None.
        uma_diaria: UMA diaria en pb para los limites de exencion. Por
            omision, la del ejercicio registrado mas reciente.

    Returns:
        ResultadoLiquidacion con los conceptos en orden, su suma exacta y
        la separacion entre montos exentos y gravados.

    Raises:
        ArgumentoInvalido: Si el salario es negativo, las fechas estan
            invertidas o las prestaciones son inferiores a las de ley.
    """
    exigir_no_negativo(salario_diario, "salario diario")
    if fecha_baja < fecha_ingreso:
        raise ArgumentoInvalido(
            f"Fecha de baja ({fecha_baja}) anterior a la de ingreso ({fecha_ingreso})"
        )
    if dias_aguinaldo < DIAS_AGUINALDO_LEY:
        raise ArgumentoInvalido(
            f"Aguinaldo inferior al minimo de ley ({DIAS_AGUINALDO_LEY} dias): {dias_aguinaldo}"
        )
    if prima_vacacional < PRIMA_VACACIONAL_LEY:
        raise ArgumentoInvalido(f"Prima vacacional inferior al 25 %: {prima_vacacional} pb")
    if dias_vacaciones_tomados < 0:
        raise ArgumentoInvalido(
            f"Dias de vacaciones tomados negativos: {dias_vacaciones_tomados}"
        )
    if dias_aguinaldo_pagados < 0:
        raise ArgumentoInvalido(
            f"Dias de aguinaldo pagados negativos: {dias_aguinaldo_pagados}"
        )
    if tope_prima_antiguedad is not None:
        exigir_no_negativo(tope_prima_antiguedad, "tope de prima de antiguedad")
    if uma_diaria is None:
        uma_diaria = TABLAS[max(TABLAS)].uma_diaria
    exigir_no_negativo(uma_diaria, "UMA diaria")

    tipo = TipoLiquidacion(tipo)
    datos = DatosLiquidacion(
        salario_diario=salario_diario,
        fecha_ingreso=fecha_ingreso,
        fecha_baja=fecha_baja,
        antiguedad=calcular_antiguedad(fecha_ingreso, fecha_baja),
        dias_transcurridos=dias_transcurridos_en_anio(fecha_ingreso, fecha_baja),
        dias_aguinaldo=dias_aguinaldo,
        prima_vacacional=prima_vacacional,
        dias_vacaciones_tomados=dias_vacaciones_tomados,
        dias_aguinaldo_pagados=dias_aguinaldo_pagados,
        tope_prima_antiguedad=tope_prima_antiguedad,
        uma_diaria=uma_diaria,
    )

    conceptos = tuple(generador(datos) for generador in REGLAS_LIQUIDACION[tipo])
    return ResultadoLiquidacion(
        tipo=tipo,
        antiguedad=datos.antiguedad,
        dias_transcurridos=datos.dias_transcurridos,
        conceptos=conceptos,
        total=sum(c.total for c in conceptos),
        total_exento=sum(c.exento for c in conceptos),
        total_gravado=sum(c.gravado for c in conceptos),
    )
