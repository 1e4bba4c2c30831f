# nominamx.mexico.liquidacion - Finiquitos y liquidaciones (LFT)
#
# Modules:
#   calculo.py - Conceptos por tipo de terminacion y total

from nominamx.mexico.liquidacion.calculo import (
    REGLAS_LIQUIDACION,
    ConceptoLiquidacion,
    ResultadoLiquidacion,
    TipoLiquidacion,
    calcular_antiguedad,
    calcular_liquidacion,
    dias_transcurridos_en_anio,
)

__all__ = [
    "REGLAS_LIQUIDACION",
    "ConceptoLiquidacion",
    "ResultadoLiquidacion",
    "TipoLiquidacion",
    "calcular_antiguedad",
    "calcular_liquidacion",
    "dias_transcurridos_en_anio",
]
