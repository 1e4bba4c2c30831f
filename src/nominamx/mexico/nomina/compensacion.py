"""Anclas de compensacion e instantaneas calculadas.

Un ancla fija el monto garantizado de un empleado: un bruto pactado (esquema
BRUTO) o un neto garantizado (esquema NETO). Recalcular un ancla produce una
instantanea inmutable que el llamador persiste para auditoria.
"""

from __future__ import annotations

import datetime
import logging
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from nominamx.mexico.nomina.integracion import (
    calcular_factor_integracion,
    calcular_sbc,
    calcular_sdi,
)
from nominamx.mexico.nomina.inverso import calcular_bruto_desde_neto
from nominamx.mexico.nomina.motor import calcular_neto_desde_bruto
from nominamx.mexico.puntos_base import formatear
from nominamx.mexico.tarifas import TablasFiscales, TipoPeriodo

logger = logging.getLogger(__name__)


def _rechazar_float(v: Any) -> Any:
    """Rechaza float y bool: los montos son int en puntos base."""
    if isinstance(v, (float, bool)):
        raise ValueError(
            "Los montos deben ser int en puntos base, jamas float. "
            "Use puntos_base.desde_decimal('15000.00')."
        )
    return v


MontoPB = Annotated[int, BeforeValidator(_rechazar_float), Field(ge=0)]


class TipoEsquema(str, Enum):
    BRUTO = "bruto"
    NETO = "neto"


class AnclaCompensacion(BaseModel):
    """Registro salarial vigente en un rango de fechas."""

    model_config = ConfigDict(frozen=True)

    id: str
    tipo_esquema: TipoEsquema
    monto_ancla: MontoPB = Field(description="Bruto pactado o neto garantizado, en pb")
    vigente_desde: datetime.date
    vigente_hasta: datetime.date | None = None

    @model_validator(mode="after")
    def _validar_vigencia(self) -> AnclaCompensacion:
        if self.vigente_hasta is not None and self.vigente_hasta < self.vigente_desde:
            raise ValueError(
                f"vigente_hasta ({self.vigente_hasta}) anterior a vigente_desde "
                f"({self.vigente_desde})"
            )
        return self

    def vigente_el(self, fecha: datetime.date) -> bool:
        """Indica si el ancla aplica en una fecha dada."""
        if fecha < self.vigente_desde:
            return False
        return self.vigente_hasta is None or fecha <= self.vigente_hasta


class InstantaneaCompensacion(BaseModel):
    """Resultado calculado de un ancla, listo para persistir."""

    model_config = ConfigDict(frozen=True)

    ancla_id: str
    tipo_esquema: TipoEsquema
    periodo: TipoPeriodo
    bruto_total: int
    neto: int
    base_cotizacion: int = Field(description="SBC diario derivado, en pb")
    factor_integracion: int = Field(description="Diezmilesimas (10493 = 1.0493)")
    convergencia: bool
    iteraciones: int
    varianza: int
    calculado_el: datetime.datetime


def recalcular_compensacion(
    ancla: AnclaCompensacion,
    tablas: TablasFiscales,
    periodo: TipoPeriodo,
    dias: int | None = None,
    dias_vacaciones: int = 12,
    calculado_el: datetime.datetime | None = None,
) -> InstantaneaCompensacion:
    """Resuelve el par bruto/neto de un ancla y deriva su base de cotizacion.

    Esquema NETO: calculo inverso (bruto desde neto garantizado).
    Esquema BRUTO: calculo directo; convergencia trivial en una iteracion.

    Args:
        ancla: Ancla de compensacion.
        tablas: Tablas fiscales del ejercicio.
        periodo: Periodicidad de pago.
        dias: Dias del periodo; por defecto los del tipo de periodo.
        dias_vacaciones: Dias de vacaciones anuales para el factor de integracion.
        calculado_el: Marca de tiempo; por defecto ahora (UTC).
    """
    if ancla.tipo_esquema is TipoEsquema.NETO:
        inverso = calcular_bruto_desde_neto(ancla.monto_ancla, tablas, periodo, dias)
        bruto, salario_diario, neto = (
            inverso.bruto,
            inverso.salario_diario,
            inverso.neto_calculado,
        )
        convergencia, iteraciones, varianza = (
            inverso.convergencia,
            inverso.iteraciones,
            inverso.varianza,
        )
        if not convergencia:
            logger.warning(
                "Ancla %s: neto garantizado %s sin convergencia (varianza %d pb)",
                ancla.id, formatear(ancla.monto_ancla), varianza,
            )
    else:
        nomina = calcular_neto_desde_bruto(ancla.monto_ancla, tablas, periodo, dias)
        bruto, salario_diario, neto = nomina.bruto, nomina.salario_diario, nomina.neto
        convergencia, iteraciones, varianza = True, 1, 0

    factor = calcular_factor_integracion(dias_vacaciones)
    sbc = calcular_sbc(calcular_sdi(salario_diario, factor), tablas)

    return InstantaneaCompensacion(
        ancla_id=ancla.id,
        tipo_esquema=ancla.tipo_esquema,
        periodo=periodo,
        bruto_total=bruto,
        neto=neto,
        base_cotizacion=sbc.sbc,
        factor_integracion=factor,
        convergencia=convergencia,
        iteraciones=iteraciones,
        varianza=varianza,
        calculado_el=calculado_el or datetime.datetime.now(datetime.timezone.utc),
    )
