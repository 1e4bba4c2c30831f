"""Tablas fiscales anuales: ISR, subsidio al empleo, cuotas IMSS, UMA.

Todas las cantidades estan en puntos base (int) -- jamas float.
Fuentes: Anexo 8 RMF 2025 (DOF 30/12/2024) y RMF 2026 (DOF 28/12/2025),
decreto de subsidio al empleo (DOF 31/12/2024 y 31/12/2025), LSS arts. 25,
106, 107, 147, 168 y 211, CONASAMI.

Cada tabla de tramos es una particion ordenada de [0, +inf): el limite
inferior del tramo i+1 es el limite superior del tramo i mas 1 pb, y solo el
ultimo tramo no tiene limite superior. Se valida al construir.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Protocol

from nominamx.errores import ErrorConfiguracion
from nominamx.mexico.puntos_base import desde_decimal, desde_porcentaje


class TipoPeriodo(str, Enum):
    """Periodicidad de pago."""

    DIARIO = "diario"
    SEMANAL = "semanal"
    DECENAL = "decenal"
    CATORCENAL = "catorcenal"
    QUINCENAL = "quincenal"
    MENSUAL = "mensual"

    @property
    def dias(self) -> int:
        """Dias por defecto del periodo."""
        return _DIAS_PERIODO[self]


_DIAS_PERIODO: dict[TipoPeriodo, int] = {
    TipoPeriodo.DIARIO: 1,
    TipoPeriodo.SEMANAL: 7,
    TipoPeriodo.DECENAL: 10,
    TipoPeriodo.CATORCENAL: 14,
    TipoPeriodo.QUINCENAL: 15,
    TipoPeriodo.MENSUAL: 30,
}


class TipoBaseCuota(str, Enum):
    """Base sobre la que se aplica la tasa de una cuota IMSS."""

    SBC = "sbc"  # SBC topado a 25 UMA
    EXCEDENTE_3UMA = "excedente_3uma"  # Parte del SBC topado que excede 3 UMA
    UMA_FIJA = "uma_fija"  # Una UMA por dia (cuota fija patronal)


# =============================================================================
# Tramos
# =============================================================================
class _Tramo(Protocol):
    limite_inferior: int
    limite_superior: int | None


@dataclass(frozen=True)
class TramoISR:
    """Tramo de la tarifa ISR: cuota fija + tasa sobre el excedente."""

    limite_inferior: int
    limite_superior: int | None
    cuota_fija: int
    tasa: int


@dataclass(frozen=True)
class TramoSubsidio:
    """Rango de ingreso con un subsidio al empleo fijo."""

    limite_inferior: int
    limite_superior: int | None
    subsidio: int


def validar_particion(tramos: Sequence[_Tramo], nombre: str) -> None:
    """Verifica que los tramos formen una particion sin huecos ni traslapes.

    Raises:
        ErrorConfiguracion: Si la tabla esta vacia, tiene huecos, traslapes,
            limites invertidos o un tramo no acotado antes del ultimo.
    """
    if not tramos:
        raise ErrorConfiguracion(f"Tabla {nombre} sin tramos")
    if tramos[0].limite_inferior < 0:
        raise ErrorConfiguracion(f"Tabla {nombre}: limite inferior negativo")

    for i, tramo in enumerate(tramos):
        ultimo = i == len(tramos) - 1
        if tramo.limite_superior is None:
            if not ultimo:
                raise ErrorConfiguracion(
                    f"Tabla {nombre}: tramo {i + 1} sin limite superior antes del ultimo"
                )
            continue
        if ultimo:
            raise ErrorConfiguracion(
                f"Tabla {nombre}: el ultimo tramo debe ser no acotado"
            )
        if tramo.limite_superior < tramo.limite_inferior:
            raise ErrorConfiguracion(
                f"Tabla {nombre}: tramo {i + 1} con limites invertidos"
            )
        siguiente = tramos[i + 1].limite_inferior
        if siguiente != tramo.limite_superior + 1:
            raise ErrorConfiguracion(
                f"Tabla {nombre}: hueco o traslape entre tramos {i + 1} y {i + 2} "
                f"({tramo.limite_superior} -> {siguiente})"
            )


def buscar_tramo(tramos: Sequence[_Tramo], base: int, nombre: str) -> int | None:
    """Indice del tramo que contiene la base (limites inclusivos).

    Returns:
        Indice (base 0) del tramo, o None si la base esta debajo del primer
        limite inferior.

    Raises:
        ErrorConfiguracion: Si ningun tramo contiene la base.
    """
    if base < tramos[0].limite_inferior:
        return None
    for i, tramo in enumerate(tramos):
        if tramo.limite_inferior <= base and (
            tramo.limite_superior is None or base <= tramo.limite_superior
        ):
            return i
    raise ErrorConfiguracion(f"Tabla {nombre}: ningun tramo contiene la base {base}")


@dataclass(frozen=True)
class TablaISR:
    """Tarifa ISR de un periodo."""

    periodo: TipoPeriodo
    tramos: tuple[TramoISR, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tramos", tuple(self.tramos))
        validar_particion(self.tramos, f"ISR {self.periodo.value}")


@dataclass(frozen=True)
class TablaSubsidio:
    """Tabla de subsidio al empleo de un periodo."""

    periodo: TipoPeriodo
    tramos: tuple[TramoSubsidio, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tramos", tuple(self.tramos))
        validar_particion(self.tramos, f"subsidio {self.periodo.value}")


@dataclass(frozen=True)
class CuotaIMSS:
    """Rama de cotizacion IMSS con tasas patron / trabajador."""

    ramo: str
    concepto: str
    tasa_patron: int
    tasa_trabajador: int
    base: TipoBaseCuota = TipoBaseCuota.SBC
    riesgo_trabajo: bool = False  # Tasa patronal sustituible por la prima de riesgo


@dataclass(frozen=True)
class TablasFiscales:
    """Configuracion fiscal completa e inmutable de un ejercicio."""

    anio: int
    uma_diaria: int
    salario_minimo: int
    salario_minimo_frontera: int
    isr: Mapping[TipoPeriodo, TablaISR]
    subsidio: Mapping[TipoPeriodo, TablaSubsidio]
    cuotas_imss: tuple[CuotaIMSS, ...]
    tope_cotizacion_umas: int = 25
    umbral_excedente_umas: int = 3

    def __post_init__(self) -> None:
        object.__setattr__(self, "isr", MappingProxyType(dict(self.isr)))
        object.__setattr__(self, "subsidio", MappingProxyType(dict(self.subsidio)))
        object.__setattr__(self, "cuotas_imss", tuple(self.cuotas_imss))
        if self.uma_diaria <= 0:
            raise ErrorConfiguracion(f"UMA {self.anio} debe ser positiva")
        if not self.isr:
            raise ErrorConfiguracion(f"Tablas {self.anio} sin tarifa ISR")
        # Cada periodo con tarifa ISR necesita su tabla de subsidio
        faltantes = [p.value for p in TipoPeriodo if p in self.isr and p not in self.subsidio]
        if faltantes:
            raise ErrorConfiguracion(
                f"Tabla de subsidio {self.anio} faltante para: {', '.join(faltantes)}"
            )
        if not self.cuotas_imss:
            raise ErrorConfiguracion(f"Tablas {self.anio} sin cuotas IMSS")
        if self.umbral_excedente_umas > self.tope_cotizacion_umas:
            raise ErrorConfiguracion(
                f"Umbral de excedente ({self.umbral_excedente_umas} UMA) mayor "
                f"que el tope de cotizacion ({self.tope_cotizacion_umas} UMA)"
            )

    @property
    def tope_cotizacion(self) -> int:
        """Tope diario del SBC (25 UMA)."""
        return self.uma_diaria * self.tope_cotizacion_umas

    @property
    def umbral_excedente(self) -> int:
        """Umbral diario del excedente de enfermedades y maternidad (3 UMA)."""
        return self.uma_diaria * self.umbral_excedente_umas

    def tabla_isr(self, periodo: TipoPeriodo) -> TablaISR:
        if periodo not in self.isr:
            raise ErrorConfiguracion(
                f"Tarifa ISR {self.anio} no disponible para el periodo {periodo.value}"
            )
        return self.isr[periodo]

    def tabla_subsidio(self, periodo: TipoPeriodo) -> TablaSubsidio:
        if periodo not in self.subsidio:
            raise ErrorConfiguracion(
                f"Tabla de subsidio {self.anio} no disponible para el periodo {periodo.value}"
            )
        return self.subsidio[periodo]


# =============================================================================
# Constructores a partir de cifras publicadas
# =============================================================================
_TASAS_ISR = (
    "1.92", "6.40", "10.88", "16.00", "17.92", "21.36",
    "23.52", "30.00", "32.00", "34.00", "35.00",
)


def construir_tabla_isr(
    periodo: TipoPeriodo,
    limites_inferiores: Iterable[str],
    cuotas_fijas: Iterable[str],
    porcentajes: Iterable[str] = _TASAS_ISR,
) -> TablaISR:
    """Construye una tarifa ISR a partir de las cifras del DOF (en pesos).

    El limite superior de cada tramo es el inferior del siguiente menos 1 pb,
    de modo que la tarifa cubre [0, +inf) sin huecos.
    """
    inferiores = [desde_decimal(v) for v in limites_inferiores]
    cuotas = [desde_decimal(v) for v in cuotas_fijas]
    tasas = [desde_porcentaje(v) for v in porcentajes]
    if not len(inferiores) == len(cuotas) == len(tasas):
        raise ErrorConfiguracion(
            f"Tarifa ISR {periodo.value}: columnas de longitud distinta"
        )
    superiores: list[int | None] = [s - 1 for s in inferiores[1:]] + [None]
    return TablaISR(
        periodo=periodo,
        tramos=tuple(
            TramoISR(inf, sup, cuota, tasa)
            for inf, sup, cuota, tasa in zip(inferiores, superiores, cuotas, tasas)
        ),
    )


def escalar_tabla_isr(base: TablaISR, periodo: TipoPeriodo, factor: int) -> TablaISR:
    """Deriva una tarifa multiplicando limites y cuotas por un factor entero.

    La tarifa decenal es la diaria multiplicada por 10.
    """
    inferiores = [t.limite_inferior * factor for t in base.tramos]
    superiores: list[int | None] = [s - 1 for s in inferiores[1:]] + [None]
    return TablaISR(
        periodo=periodo,
        tramos=tuple(
            TramoISR(inf, sup, t.cuota_fija * factor, t.tasa)
            for inf, sup, t in zip(inferiores, superiores, base.tramos)
        ),
    )


def construir_tabla_subsidio(
    periodo: TipoPeriodo, limite_ingreso: str, subsidio: str
) -> TablaSubsidio:
    """Subsidio de cuota fija: el monto aplica si el ingreso <= limite."""
    limite = desde_decimal(limite_ingreso)
    return TablaSubsidio(
        periodo=periodo,
        tramos=(
            TramoSubsidio(0, limite, desde_decimal(subsidio)),
            TramoSubsidio(limite + 1, None, 0),
        ),
    )


# =============================================================================
# Cuotas IMSS (LSS; tasas redondeadas al punto base)
# =============================================================================
CUOTAS_IMSS_2025: tuple[CuotaIMSS, ...] = (
    CuotaIMSS(
        "Enfermedades y Maternidad", "Cuota fija",
        tasa_patron=2040, tasa_trabajador=0, base=TipoBaseCuota.UMA_FIJA,
    ),
    CuotaIMSS(
        "Enfermedades y Maternidad", "Excedente 3 UMA",
        tasa_patron=110, tasa_trabajador=40, base=TipoBaseCuota.EXCEDENTE_3UMA,
    ),
    CuotaIMSS(
        "Enfermedades y Maternidad", "Prestaciones en dinero",
        tasa_patron=70, tasa_trabajador=25,
    ),
    CuotaIMSS(
        "Enfermedades y Maternidad", "Gastos medicos pensionados",
        tasa_patron=105, tasa_trabajador=38,  # 0.375 %
    ),
    CuotaIMSS(
        "Invalidez y Vida", "Invalidez y vida",
        tasa_patron=175, tasa_trabajador=63,  # 0.625 %
    ),
    CuotaIMSS(
        "Riesgos de Trabajo", "Riesgos de trabajo (prima media)",
        tasa_patron=54, tasa_trabajador=0, riesgo_trabajo=True,  # 0.54355 %
    ),
    CuotaIMSS(
        "Guarderias y Prestaciones Sociales", "Guarderias",
        tasa_patron=100, tasa_trabajador=0,
    ),
    CuotaIMSS("Retiro", "Retiro", tasa_patron=200, tasa_trabajador=0),
    CuotaIMSS(
        "Cesantia en Edad Avanzada y Vejez", "Cesantia y vejez",
        tasa_patron=424, tasa_trabajador=113,  # 4.241 % / 1.125 %
    ),
    CuotaIMSS("INFONAVIT", "Aportacion vivienda", tasa_patron=500, tasa_trabajador=0),
)


# =============================================================================
# 2025
# =============================================================================
_ISR_2025_DIARIO = construir_tabla_isr(
    TipoPeriodo.DIARIO,
    ("0", "24.88", "211.08", "370.94", "431.20", "516.27",
     "1041.23", "1641.11", "3133.14", "4177.52", "12532.53"),
    ("0", "0.48", "12.39", "29.79", "39.43", "54.67",
     "166.80", "307.90", "755.51", "1089.71", "3930.41"),
)

_ISR_2025: dict[TipoPeriodo, TablaISR] = {
    TipoPeriodo.MENSUAL: construir_tabla_isr(
        TipoPeriodo.MENSUAL,
        ("0", "746.05", "6332.06", "11128.02", "12935.83", "15487.72",
         "31236.50", "49233.01", "93993.91", "125325.21", "375975.62"),
        ("0", "14.32", "371.83", "893.63", "1182.88", "1640.18",
         "5004.12", "9236.89", "22665.17", "32691.18", "117912.32"),
    ),
    TipoPeriodo.QUINCENAL: construir_tabla_isr(
        TipoPeriodo.QUINCENAL,
        ("0", "373.03", "3166.04", "5564.02", "6467.92", "7743.87",
         "15618.26", "24616.51", "46996.96", "62662.61", "187987.82"),
        ("0", "7.16", "185.92", "446.82", "591.44", "820.09",
         "2502.06", "4618.45", "11332.59", "16345.59", "58956.16"),
    ),
    TipoPeriodo.CATORCENAL: construir_tabla_isr(
        TipoPeriodo.CATORCENAL,
        ("0", "348.16", "2954.97", "5193.08", "6036.73", "7227.61",
         "14577.04", "22975.41", "43863.83", "58485.11", "175455.30"),
        ("0", "6.68", "173.52", "417.03", "552.01", "765.42",
         "2335.26", "4310.55", "10577.08", "15255.88", "55025.75"),
    ),
    TipoPeriodo.SEMANAL: construir_tabla_isr(
        TipoPeriodo.SEMANAL,
        ("0", "174.09", "1477.49", "2596.55", "3018.37", "3613.81",
         "7288.53", "11487.71", "21931.92", "29242.56", "87727.65"),
        ("0", "3.34", "86.76", "208.52", "276.01", "382.71",
         "1167.63", "2155.27", "5288.54", "7627.94", "27512.88"),
    ),
    TipoPeriodo.DIARIO: _ISR_2025_DIARIO,
    TipoPeriodo.DECENAL: escalar_tabla_isr(_ISR_2025_DIARIO, TipoPeriodo.DECENAL, 10),
}

# Desde 2025 el subsidio es una cuota fija (13.8 % de la UMA mensual) para
# ingresos <= $10,171 mensuales, proporcional a dias / 30.4 por periodo.
_SUBSIDIO_2025: dict[TipoPeriodo, TablaSubsidio] = {
    periodo: construir_tabla_subsidio(periodo, limite, monto)
    for periodo, limite, monto in (
        (TipoPeriodo.MENSUAL, "10171.00", "475.00"),
        (TipoPeriodo.QUINCENAL, "5018.59", "234.38"),
        (TipoPeriodo.CATORCENAL, "4683.99", "218.75"),
        (TipoPeriodo.DECENAL, "3345.72", "156.25"),
        (TipoPeriodo.SEMANAL, "2341.99", "109.38"),
        (TipoPeriodo.DIARIO, "334.57", "15.63"),
    )
}

TABLAS_2025 = TablasFiscales(
    anio=2025,
    uma_diaria=desde_decimal("113.14"),
    salario_minimo=desde_decimal("278.80"),
    salario_minimo_frontera=desde_decimal("419.88"),
    isr=_ISR_2025,
    subsidio=_SUBSIDIO_2025,
    cuotas_imss=CUOTAS_IMSS_2025,
)


# =============================================================================
# 2026 (factor de actualizacion 1.1321, tasas sin cambio)
# =============================================================================
_ISR_2026_DIARIO = construir_tabla_isr(
    TipoPeriodo.DIARIO,
    ("0", "28.16", "238.96", "420.00", "488.11", "584.54",
     "1178.75", "1858.02", "3547.69", "4729.82", "14189.43"),
    ("0", "0.54", "14.03", "33.72", "44.62", "61.90",
     "188.84", "348.63", "855.53", "1233.81", "4450.08"),
)

_ISR_2026: dict[TipoPeriodo, TablaISR] = {
    TipoPeriodo.MENSUAL: construir_tabla_isr(
        TipoPeriodo.MENSUAL,
        ("0", "844.60", "7168.46", "12599.67", "14643.98", "17529.78",
         "35360.61", "55741.64", "106431.93", "141909.24", "425727.72"),
        ("0", "16.22", "420.94", "1011.68", "1338.77", "1856.47",
         "5665.17", "10459.38", "25666.46", "37019.30", "133517.58"),
    ),
    TipoPeriodo.QUINCENAL: construir_tabla_isr(
        TipoPeriodo.QUINCENAL,
        ("0", "422.31", "3584.24", "6299.84", "7322.00", "8764.90",
         "17680.31", "27870.83", "53215.97", "70954.63", "212863.87"),
        ("0", "8.11", "210.47", "505.84", "669.39", "928.24",
         "2832.59", "5229.69", "12833.23", "18509.65", "66758.79"),
    ),
    TipoPeriodo.CATORCENAL: construir_tabla_isr(
        TipoPeriodo.CATORCENAL,
        ("0", "394.15", "3345.32", "5879.86", "6833.39", "8183.39",
         "16502.29", "26012.10", "49667.57", "66217.31", "198651.90"),
        ("0", "7.56", "196.44", "472.11", "624.64", "866.56",
         "2643.75", "4880.90", "11977.54", "17273.46", "62281.02"),
    ),
    TipoPeriodo.SEMANAL: construir_tabla_isr(
        TipoPeriodo.SEMANAL,
        ("0", "197.08", "1672.67", "2939.94", "3416.70", "4091.70",
         "8251.15", "13006.06", "24833.79", "33108.66", "99325.96"),
        ("0", "3.78", "98.22", "236.06", "312.32", "433.28",
         "1321.88", "2440.45", "5988.77", "8636.73", "31140.51"),
    ),
    TipoPeriodo.DIARIO: _ISR_2026_DIARIO,
    TipoPeriodo.DECENAL: escalar_tabla_isr(_ISR_2026_DIARIO, TipoPeriodo.DECENAL, 10),
}

# Subsidio 2026 (febrero a diciembre): 15.02 % de la UMA mensual,
# ingresos <= $11,492.66 mensuales.
_SUBSIDIO_2026: dict[TipoPeriodo, TablaSubsidio] = {
    periodo: construir_tabla_subsidio(periodo, limite, monto)
    for periodo, limite, monto in (
        (TipoPeriodo.MENSUAL, "11492.66", "536.22"),
        (TipoPeriodo.QUINCENAL, "5668.75", "264.58"),
        (TipoPeriodo.CATORCENAL, "5290.49", "246.96"),
        (TipoPeriodo.DECENAL, "3780.48", "176.39"),
        (TipoPeriodo.SEMANAL, "2645.24", "123.48"),
        (TipoPeriodo.DIARIO, "377.89", "17.64"),
    )
}

TABLAS_2026 = TablasFiscales(
    anio=2026,
    # TODO: reemplazar por la UMA 2026 una vez aplicada en los recibos de febrero
    uma_diaria=desde_decimal("113.14"),
    salario_minimo=desde_decimal("315.04"),
    salario_minimo_frontera=desde_decimal("440.87"),
    isr=_ISR_2026,
    subsidio=_SUBSIDIO_2026,
    cuotas_imss=CUOTAS_IMSS_2025,
)

# Registro multi-anual
TABLAS: Mapping[int, TablasFiscales] = MappingProxyType(
    {2025: TABLAS_2025, 2026: TABLAS_2026}
)


def obtener_tablas(anio: int) -> TablasFiscales:
    """Retorna las tablas fiscales de un ejercicio.

    Raises:
        ErrorConfiguracion: Si no hay tablas para el ejercicio solicitado.
    """
    if anio not in TABLAS:
        raise ErrorConfiguracion(
            f"Tablas no disponibles para el ejercicio {anio}. "
            f"Ejercicios disponibles: {sorted(TABLAS.keys())}"
        )
    return TABLAS[anio]
