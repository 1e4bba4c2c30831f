"""Motor de nomina: calculo directo bruto -> neto de un periodo.

Orquesta las cuotas IMSS del trabajador (imss.py), el ISR (isr.py) y el
subsidio al empleo (subsidio.py). El calculo inverso (inverso.py) llama a
esta misma funcion en cada iteracion.
"""

from __future__ import annotations

from dataclasses import dataclass

from nominamx.mexico.nomina.imss import ResultadoIMSS, calcular_imss_trabajador
from nominamx.mexico.nomina.subsidio import calcular_retencion
from nominamx.mexico.puntos_base import (
    dividir_redondeado,
    exigir_dias,
    exigir_no_negativo,
)
from nominamx.mexico.tarifas import TablasFiscales, TipoPeriodo, TramoISR


@dataclass(frozen=True)
class ResultadoNomina:
    """Resultado completo del calculo de un periodo de nomina."""

    periodo: TipoPeriodo
    dias: int
    bruto: int
    salario_diario: int

    # Retenciones trabajador
    imss: ResultadoIMSS
    base_gravable: int
    isr: int
    subsidio: int
    isr_retenido: int
    tramo: TramoISR | None

    neto: int

    @property
    def imss_trabajador(self) -> int:
        return self.imss.total

    @property
    def total_retenciones(self) -> int:
        return self.isr_retenido + self.imss.total


def resolver_dias(periodo: TipoPeriodo, dias: int | None) -> int:
    """Dias del periodo: los indicados, o los dias por defecto del periodo."""
    dias = periodo.dias if dias is None else dias
    exigir_dias(dias)
    return dias


def calcular_neto_desde_bruto(
    bruto: int,
    tablas: TablasFiscales,
    periodo: TipoPeriodo,
    dias: int | None = None,
) -> ResultadoNomina:
    """Calcula el neto a pagar a partir del bruto del periodo.

    1. Salario diario = bruto / dias (redondeado al pb)
    2. IMSS trabajador sobre el salario diario
    3. Base gravable = bruto - IMSS
    4. ISR retenido = max(0, ISR - subsidio)
    5. Neto = bruto - ISR retenido - IMSS

    Args:
        bruto: Percepcion bruta del periodo en pb.
        tablas: Tablas fiscales del ejercicio.
        periodo: Periodicidad de pago (define la tarifa ISR y el subsidio).
        dias: Dias del periodo; por defecto los del tipo de periodo.

    Raises:
        ArgumentoInvalido: Si el bruto es negativo o los dias no son > 0.
    """
    exigir_no_negativo(bruto, "bruto")
    dias = resolver_dias(periodo, dias)

    salario_diario = dividir_redondeado(bruto, dias)
    imss = calcular_imss_trabajador(salario_diario, dias, tablas)

    base_gravable = max(0, bruto - imss.total)
    retencion = calcular_retencion(
        base_gravable, tablas.tabla_isr(periodo), tablas.tabla_subsidio(periodo)
    )

    return ResultadoNomina(
        periodo=periodo,
        dias=dias,
        bruto=bruto,
        salario_diario=salario_diario,
        imss=imss,
        base_gravable=base_gravable,
        isr=retencion.isr,
        subsidio=retencion.subsidio,
        isr_retenido=retencion.isr_retenido,
        tramo=retencion.tramo,
        neto=bruto - retencion.isr_retenido - imss.total,
    )
