# nominamx.mexico.nomina - Calculo de nomina (ISR, subsidio, IMSS, neto/bruto)
#
# Modules:
#   isr.py          - Tarifa progresiva ISR (art. 96 LISR)
#   subsidio.py     - Subsidio al empleo e ISR retenido
#   imss.py         - Cuotas obrero-patronales por ramo
#   motor.py        - Calculo directo bruto -> neto
#   inverso.py      - Calculo inverso neto -> bruto (iterativo)
#   integracion.py  - Factor de integracion, SDI, SBC
#   compensacion.py - Anclas de compensacion e instantaneas

from nominamx.mexico.nomina.compensacion import (
    AnclaCompensacion,
    InstantaneaCompensacion,
    TipoEsquema,
    recalcular_compensacion,
)
from nominamx.mexico.nomina.imss import (
    ResultadoIMSS,
    calcular_imss_patron,
    calcular_imss_trabajador,
)
from nominamx.mexico.nomina.integracion import (
    ZonaSalarial,
    calcular_factor_integracion,
    calcular_sbc,
    calcular_sdi,
)
from nominamx.mexico.nomina.inverso import ResultadoInverso, calcular_bruto_desde_neto
from nominamx.mexico.nomina.isr import calcular_isr, tasa_marginal
from nominamx.mexico.nomina.motor import ResultadoNomina, calcular_neto_desde_bruto
from nominamx.mexico.nomina.subsidio import (
    ResultadoISR,
    calcular_retencion,
    calcular_subsidio,
)

__all__ = [
    "AnclaCompensacion",
    "InstantaneaCompensacion",
    "ResultadoIMSS",
    "ResultadoISR",
    "ResultadoInverso",
    "ResultadoNomina",
    "TipoEsquema",
    "ZonaSalarial",
    "calcular_bruto_desde_neto",
    "calcular_factor_integracion",
    "calcular_imss_patron",
    "calcular_imss_trabajador",
    "calcular_isr",
    "calcular_neto_desde_bruto",
    "calcular_retencion",
    "calcular_sbc",
    "calcular_sdi",
    "calcular_subsidio",
    "recalcular_compensacion",
    "tasa_marginal",
]
