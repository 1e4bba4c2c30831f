"""Carga de tablas fiscales desde YAML.

Permite versionar las tablas de un ejercicio fuera del codigo. Todos los
montos del YAML estan en puntos base (int); los float se rechazan.

Ejemplo minimo:

    anio: 2027
    uma_diaria: 1131400
    salario_minimo: 3150400
    isr:
      mensual:
        - {limite_inferior: 0, limite_superior: 8445999, cuota_fija: 0, tasa: 192}
        - {limite_inferior: 8446000, limite_superior: null, cuota_fija: 162200, tasa: 640}
    subsidio:
      mensual:
        - {limite_inferior: 0, limite_superior: null, subsidio: 0}
    cuotas_imss:
      - {ramo: Retiro, concepto: Retiro, tasa_patron: 200, tasa_trabajador: 0}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from nominamx.errores import ErrorConfiguracion
from nominamx.mexico.tarifas import (
    CuotaIMSS,
    TablaISR,
    TablasFiscales,
    TablaSubsidio,
    TipoBaseCuota,
    TipoPeriodo,
    TramoISR,
    TramoSubsidio,
)

logger = logging.getLogger(__name__)


def _rechazar_float(v: Any) -> Any:
    """Rechaza float: las tablas se expresan en puntos base enteros."""
    if isinstance(v, float):
        raise ValueError("Los montos y tasas deben ser int en puntos base, jamas float")
    return v


EnteroPB = Annotated[int, BeforeValidator(_rechazar_float), Field(ge=0)]


# ---------------------------------------------------------------------------
# Modelos Pydantic para la validacion del YAML
# ---------------------------------------------------------------------------


class _Modelo(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TramoISRConfig(_Modelo):
    limite_inferior: EnteroPB
    limite_superior: EnteroPB | None = None
    cuota_fija: EnteroPB
    tasa: EnteroPB


class TramoSubsidioConfig(_Modelo):
    limite_inferior: EnteroPB
    limite_superior: EnteroPB | None = None
    subsidio: EnteroPB


class CuotaIMSSConfig(_Modelo):
    ramo: str
    concepto: str
    tasa_patron: EnteroPB
    tasa_trabajador: EnteroPB
    base: TipoBaseCuota = TipoBaseCuota.SBC
    riesgo_trabajo: bool = False


class TablasFiscalesConfig(_Modelo):
    """Documento YAML de un ejercicio fiscal."""

    anio: int
    uma_diaria: EnteroPB
    salario_minimo: EnteroPB
    salario_minimo_frontera: EnteroPB | None = None
    tope_cotizacion_umas: int = Field(default=25, ge=1)
    umbral_excedente_umas: int = Field(default=3, ge=0)
    isr: dict[TipoPeriodo, list[TramoISRConfig]]
    subsidio: dict[TipoPeriodo, list[TramoSubsidioConfig]]
    cuotas_imss: list[CuotaIMSSConfig] = Field(min_length=1)


def tablas_desde_dict(raw: Any) -> TablasFiscales:
    """Valida un documento ya deserializado y construye las tablas.

    Raises:
        ErrorConfiguracion: Si el esquema es invalido o alguna tabla no es
            una particion de [0, +inf).
    """
    if not isinstance(raw, dict):
        raise ErrorConfiguracion("El documento de tablas debe ser un mapeo YAML")
    try:
        config = TablasFiscalesConfig.model_validate(raw)
    except ValidationError as e:
        raise ErrorConfiguracion(f"Tablas fiscales invalidas:\n{e}") from e

    isr = {
        periodo: TablaISR(
            periodo=periodo,
            tramos=tuple(TramoISR(**t.model_dump()) for t in tramos),
        )
        for periodo, tramos in config.isr.items()
    }
    subsidio = {
        periodo: TablaSubsidio(
            periodo=periodo,
            tramos=tuple(TramoSubsidio(**t.model_dump()) for t in tramos),
        )
        for periodo, tramos in config.subsidio.items()
    }
    return TablasFiscales(
        anio=config.anio,
        uma_diaria=config.uma_diaria,
        salario_minimo=config.salario_minimo,
        salario_minimo_frontera=(
            config.salario_minimo_frontera
            if config.salario_minimo_frontera is not None
            else config.salario_minimo
        ),
        isr=isr,
        subsidio=subsidio,
        cuotas_imss=tuple(CuotaIMSS(**c.model_dump()) for c in config.cuotas_imss),
        tope_cotizacion_umas=config.tope_cotizacion_umas,
        umbral_excedente_umas=config.umbral_excedente_umas,
    )


def cargar_tablas(ruta: str | Path) -> TablasFiscales:
    """Carga y valida las tablas fiscales de un ejercicio desde un archivo YAML.

    Args:
        ruta: Ruta del archivo YAML.

    Returns:
        TablasFiscales inmutables.

    Raises:
        ErrorConfiguracion: Si el archivo no existe, no es YAML valido o no
            cumple el esquema.
    """
    path = Path(ruta)
    if not path.exists():
        raise ErrorConfiguracion(f"Archivo de tablas no encontrado: {ruta}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ErrorConfiguracion(f"YAML invalido en {ruta}: {e}") from e

    tablas = tablas_desde_dict(raw)
    logger.info(
        "Tablas fiscales %d cargadas desde %s (%d periodos ISR, %d cuotas IMSS)",
        tablas.anio, path, len(tablas.isr), len(tablas.cuotas_imss),
    )
    return tablas


def tablas_a_dict(tablas: TablasFiscales) -> dict[str, Any]:
    """Serializa tablas fiscales al esquema del YAML (montos en pb)."""
    return {
        "anio": tablas.anio,
        "uma_diaria": tablas.uma_diaria,
        "salario_minimo": tablas.salario_minimo,
        "salario_minimo_frontera": tablas.salario_minimo_frontera,
        "tope_cotizacion_umas": tablas.tope_cotizacion_umas,
        "umbral_excedente_umas": tablas.umbral_excedente_umas,
        "isr": {
            periodo.value: [
                {
                    "limite_inferior": t.limite_inferior,
                    "limite_superior": t.limite_superior,
                    "cuota_fija": t.cuota_fija,
                    "tasa": t.tasa,
                }
                for t in tabla.tramos
            ]
            for periodo, tabla in tablas.isr.items()
        },
        "subsidio": {
            periodo.value: [
                {
                    "limite_inferior": t.limite_inferior,
                    "limite_superior": t.limite_superior,
                    "subsidio": t.subsidio,
                }
                for t in tabla.tramos
            ]
            for periodo, tabla in tablas.subsidio.items()
        },
        "cuotas_imss": [
            {
                "ramo": c.ramo,
                "concepto": c.concepto,
                "tasa_patron": c.tasa_patron,
                "tasa_trabajador": c.tasa_trabajador,
                "base": c.base.value,
                "riesgo_trabajo": c.riesgo_trabajo,
            }
            for c in tablas.cuotas_imss
        ],
    }


def exportar_tablas(tablas: TablasFiscales) -> str:
    """Documento YAML de unas tablas, para versionarlo o editarlo."""
    return yaml.safe_dump(tablas_a_dict(tablas), sort_keys=False, allow_unicode=True)
