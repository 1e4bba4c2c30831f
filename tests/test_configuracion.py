"""Tests de la carga de tablas fiscales desde YAML."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from nominamx.errores import ErrorConfiguracion
from nominamx.mexico.configuracion import (
    cargar_tablas,
    exportar_tablas,
    tablas_a_dict,
    tablas_desde_dict,
)
from nominamx.mexico.nomina.motor import calcular_neto_desde_bruto
from nominamx.mexico.tarifas import TablasFiscales, TipoBaseCuota, TipoPeriodo

YAML_MINIMO = """\
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


def _escribir(tmp_path: Path, contenido: str) -> Path:
    ruta = tmp_path / "tablas.yaml"
    ruta.write_text(contenido, encoding="utf-8")
    return ruta


class TestCargarTablas:
    def test_documento_minimo(self, tmp_path: Path) -> None:
        tablas = cargar_tablas(_escribir(tmp_path, YAML_MINIMO))
        assert tablas.anio == 2027
        assert tablas.salario_minimo_frontera == tablas.salario_minimo
        assert tablas.tope_cotizacion_umas == 25
        tramos = tablas.tabla_isr(TipoPeriodo.MENSUAL).tramos
        assert tramos[1].cuota_fija == 162200
        assert tablas.cuotas_imss[0].base is TipoBaseCuota.SBC

    def test_calculo_con_tablas_cargadas(self, tmp_path: Path) -> None:
        tablas = cargar_tablas(_escribir(tmp_path, YAML_MINIMO))
        r = calcular_neto_desde_bruto(100000000, tablas, TipoPeriodo.MENSUAL)
        # Sin cuotas de trabajador: ISR = 16.22 + (10,000 - 844.60) x 6.40 %
        assert r.imss_trabajador == 0
        assert r.isr == 162200 + 5859456
        assert r.neto == 100000000 - r.isr

    def test_log_de_carga(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="nominamx.mexico.configuracion"):
            cargar_tablas(_escribir(tmp_path, YAML_MINIMO))
        assert "Tablas fiscales 2027 cargadas" in caplog.text

    def test_archivo_inexistente(self, tmp_path: Path) -> None:
        with pytest.raises(ErrorConfiguracion, match="no encontrado"):
            cargar_tablas(tmp_path / "no-existe.yaml")

    def test_yaml_invalido(self, tmp_path: Path) -> None:
        with pytest.raises(ErrorConfiguracion, match="YAML invalido"):
            cargar_tablas(_escribir(tmp_path, "anio: [2027\n"))

    def test_documento_no_mapeo(self, tmp_path: Path) -> None:
        with pytest.raises(ErrorConfiguracion, match="mapeo"):
            cargar_tablas(_escribir(tmp_path, "- 1\n- 2\n"))

    def test_float_rechazado(self, tmp_path: Path) -> None:
        contenido = YAML_MINIMO.replace("uma_diaria: 1131400", "uma_diaria: 113.14")
        with pytest.raises(ErrorConfiguracion, match="float"):
            cargar_tablas(_escribir(tmp_path, contenido))

    def test_campo_desconocido(self, tmp_path: Path) -> None:
        with pytest.raises(ErrorConfiguracion, match="invalidas"):
            cargar_tablas(_escribir(tmp_path, YAML_MINIMO + "inflacion: 4\n"))

    def test_periodo_desconocido(self, tmp_path: Path) -> None:
        contenido = YAML_MINIMO.replace("isr:\n  mensual:", "isr:\n  bimestral:")
        with pytest.raises(ErrorConfiguracion):
            cargar_tablas(_escribir(tmp_path, contenido))

    def test_tarifa_con_hueco(self, tmp_path: Path) -> None:
        contenido = YAML_MINIMO.replace(
            "limite_inferior: 8446000", "limite_inferior: 8446100"
        )
        with pytest.raises(ErrorConfiguracion, match="hueco"):
            cargar_tablas(_escribir(tmp_path, contenido))

    def test_subsidio_obligatorio(self, tmp_path: Path) -> None:
        contenido = YAML_MINIMO.replace(
            "subsidio:\n  mensual:\n    - {limite_inferior: 0, limite_superior: null, subsidio: 0}\n",
            "",
        )
        with pytest.raises(ErrorConfiguracion, match="subsidio"):
            cargar_tablas(_escribir(tmp_path, contenido))

    def test_subsidio_faltante_para_un_periodo(self, tmp_path: Path) -> None:
        contenido = YAML_MINIMO.replace("subsidio:\n  mensual:", "subsidio:\n  semanal:")
        with pytest.raises(ErrorConfiguracion, match="faltante para: mensual"):
            cargar_tablas(_escribir(tmp_path, contenido))

    def test_cuotas_imss_obligatorias(self, tmp_path: Path) -> None:
        contenido = YAML_MINIMO.split("cuotas_imss:")[0]
        with pytest.raises(ErrorConfiguracion, match="cuotas_imss"):
            cargar_tablas(_escribir(tmp_path, contenido))

    def test_cuotas_imss_vacias(self, tmp_path: Path) -> None:
        contenido = YAML_MINIMO.split("cuotas_imss:")[0] + "cuotas_imss: []\n"
        with pytest.raises(ErrorConfiguracion, match="cuotas_imss"):
            cargar_tablas(_escribir(tmp_path, contenido))


class TestExportar:
    def test_exportar_y_recargar(self, tablas_2025: TablasFiscales, tmp_path: Path) -> None:
        ruta = _escribir(tmp_path, exportar_tablas(tablas_2025))
        recargadas = cargar_tablas(ruta)
        assert recargadas.anio == 2025
        assert recargadas.cuotas_imss == tablas_2025.cuotas_imss
        for periodo in TipoPeriodo:
            assert recargadas.tabla_isr(periodo) == tablas_2025.tabla_isr(periodo)
            assert recargadas.tabla_subsidio(periodo) == tablas_2025.tabla_subsidio(periodo)

    def test_mismo_resultado_que_las_integradas(
        self, tablas_2025: TablasFiscales
    ) -> None:
        recargadas = tablas_desde_dict(tablas_a_dict(tablas_2025))
        for bruto in (80000000, 150000000, 1000000000):
            assert calcular_neto_desde_bruto(
                bruto, recargadas, TipoPeriodo.MENSUAL
            ) == calcular_neto_desde_bruto(bruto, tablas_2025, TipoPeriodo.MENSUAL)

    def test_montos_enteros(self, tablas_2025: TablasFiscales) -> None:
        documento = yaml.safe_load(exportar_tablas(tablas_2025))
        assert documento["uma_diaria"] == 1131400
        assert documento["isr"]["mensual"][0]["tasa"] == 192
        assert documento["cuotas_imss"][0]["base"] == "uma_fija"
