"""Tests de las tablas fiscales: tarifas ISR, subsidio, cuotas IMSS y registro."""

from __future__ import annotations

import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from nominamx.errores import ErrorConfiguracion
from nominamx.mexico.tarifas import (
    CUOTAS_IMSS_2025,
    TABLAS,
    TablaISR,
    TablasFiscales,
    TablaSubsidio,
    TipoPeriodo,
    TramoISR,
    TramoSubsidio,
    buscar_tramo,
    obtener_tablas,
    validar_particion,
)


class TestRegistro:
    def test_ejercicios_disponibles(self) -> None:
        assert sorted(TABLAS) == [2025, 2026]

    def test_obtener_tablas(self) -> None:
        assert obtener_tablas(2025).anio == 2025
        assert obtener_tablas(2026).anio == 2026

    def test_ejercicio_desconocido(self) -> None:
        with pytest.raises(ErrorConfiguracion, match="2099"):
            obtener_tablas(2099)

    def test_todos_los_periodos(self) -> None:
        for tablas in TABLAS.values():
            assert set(tablas.isr) == set(TipoPeriodo)
            assert set(tablas.subsidio) == set(TipoPeriodo)


class TestPeriodos:
    @pytest.mark.parametrize(
        "periodo,dias",
        [
            (TipoPeriodo.DIARIO, 1),
            (TipoPeriodo.SEMANAL, 7),
            (TipoPeriodo.DECENAL, 10),
            (TipoPeriodo.CATORCENAL, 14),
            (TipoPeriodo.QUINCENAL, 15),
            (TipoPeriodo.MENSUAL, 30),
        ],
    )
    def test_dias_por_periodo(self, periodo: TipoPeriodo, dias: int) -> None:
        assert periodo.dias == dias


class TestTarifaISR2025:
    """Tarifa mensual 2025 publicada (Anexo 8 RMF)."""

    def test_once_tramos(self, tablas_2025: TablasFiscales) -> None:
        assert len(tablas_2025.tabla_isr(TipoPeriodo.MENSUAL).tramos) == 11

    def test_primer_tramo(self, tablas_2025: TablasFiscales) -> None:
        primero = tablas_2025.tabla_isr(TipoPeriodo.MENSUAL).tramos[0]
        assert primero == TramoISR(0, 7460499, 0, 192)

    def test_segundo_tramo(self, tablas_2025: TablasFiscales) -> None:
        segundo = tablas_2025.tabla_isr(TipoPeriodo.MENSUAL).tramos[1]
        assert segundo.limite_inferior == 7460500
        assert segundo.cuota_fija == 143200
        assert segundo.tasa == 640

    def test_ultimo_tramo_no_acotado(self, tablas_2025: TablasFiscales) -> None:
        ultimo = tablas_2025.tabla_isr(TipoPeriodo.MENSUAL).tramos[-1]
        assert ultimo.limite_superior is None
        assert ultimo.tasa == 3500

    def test_decenal_derivada_de_diaria(self, tablas_2025: TablasFiscales) -> None:
        diaria = tablas_2025.tabla_isr(TipoPeriodo.DIARIO).tramos[1]
        decenal = tablas_2025.tabla_isr(TipoPeriodo.DECENAL).tramos[1]
        assert decenal.limite_inferior == diaria.limite_inferior * 10 == 2488000
        assert decenal.cuota_fija == diaria.cuota_fija * 10 == 48000
        assert decenal.tasa == diaria.tasa


class TestSubsidio:
    def test_subsidio_mensual_2025(self, tablas_2025: TablasFiscales) -> None:
        tramos = tablas_2025.tabla_subsidio(TipoPeriodo.MENSUAL).tramos
        assert tramos[0] == TramoSubsidio(0, 101710000, 4750000)
        assert tramos[1] == TramoSubsidio(101710001, None, 0)

    def test_subsidio_mensual_2026(self, tablas_2026: TablasFiscales) -> None:
        primero = tablas_2026.tabla_subsidio(TipoPeriodo.MENSUAL).tramos[0]
        assert primero.limite_superior == 114926600
        assert primero.subsidio == 5362200


class TestTablasFiscales:
    def test_tope_y_umbral(self, tablas_2025: TablasFiscales) -> None:
        assert tablas_2025.tope_cotizacion == 28285000
        assert tablas_2025.umbral_excedente == 3394200

    def test_salarios_minimos_2026(self, tablas_2026: TablasFiscales) -> None:
        assert tablas_2026.salario_minimo == 3150400
        assert tablas_2026.salario_minimo_frontera == 4408700

    def test_inmutables(self, tablas_2025: TablasFiscales) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            tablas_2025.uma_diaria = 0  # type: ignore[misc]
        with pytest.raises(TypeError):
            tablas_2025.isr[TipoPeriodo.MENSUAL] = None  # type: ignore[index]

    def test_periodo_faltante(self, tablas_2025: TablasFiscales) -> None:
        parcial = dataclasses.replace(
            tablas_2025,
            isr={TipoPeriodo.MENSUAL: tablas_2025.tabla_isr(TipoPeriodo.MENSUAL)},
            subsidio={TipoPeriodo.MENSUAL: tablas_2025.tabla_subsidio(TipoPeriodo.MENSUAL)},
        )
        with pytest.raises(ErrorConfiguracion, match="semanal"):
            parcial.tabla_isr(TipoPeriodo.SEMANAL)
        with pytest.raises(ErrorConfiguracion, match="semanal"):
            parcial.tabla_subsidio(TipoPeriodo.SEMANAL)

    def test_subsidio_faltante_para_periodo_isr(self, tablas_2025: TablasFiscales) -> None:
        subsidio = dict(tablas_2025.subsidio)
        del subsidio[TipoPeriodo.QUINCENAL]
        with pytest.raises(ErrorConfiguracion, match="quincenal"):
            dataclasses.replace(tablas_2025, subsidio=subsidio)

    def test_sin_tarifa_isr(self, tablas_2025: TablasFiscales) -> None:
        with pytest.raises(ErrorConfiguracion, match="ISR"):
            dataclasses.replace(tablas_2025, isr={}, subsidio={})

    def test_sin_cuotas_imss(self, tablas_2025: TablasFiscales) -> None:
        with pytest.raises(ErrorConfiguracion, match="IMSS"):
            dataclasses.replace(tablas_2025, cuotas_imss=())

    def test_uma_no_positiva(self, tablas_2025: TablasFiscales) -> None:
        with pytest.raises(ErrorConfiguracion, match="UMA"):
            dataclasses.replace(tablas_2025, uma_diaria=0)

    def test_umbral_mayor_que_tope(self, tablas_2025: TablasFiscales) -> None:
        with pytest.raises(ErrorConfiguracion, match="Umbral"):
            dataclasses.replace(tablas_2025, umbral_excedente_umas=30)

    def test_cuotas_imss(self) -> None:
        riesgo = [c for c in CUOTAS_IMSS_2025 if c.riesgo_trabajo]
        assert len(riesgo) == 1
        assert riesgo[0].tasa_trabajador == 0
        trabajador = sum(c.tasa_trabajador for c in CUOTAS_IMSS_2025)
        assert trabajador == 279  # 0.40 + 0.25 + 0.38 + 0.63 + 1.13


class TestParticion:
    """Cada tabla debe cubrir [0, +inf) sin huecos ni traslapes."""

    def test_tablas_integradas_contiguas(self) -> None:
        for tablas in TABLAS.values():
            for tabla in [*tablas.isr.values(), *tablas.subsidio.values()]:
                tramos = tabla.tramos
                assert tramos[0].limite_inferior == 0
                assert tramos[-1].limite_superior is None
                for actual, siguiente in zip(tramos, tramos[1:]):
                    assert siguiente.limite_inferior == actual.limite_superior + 1

    def test_tabla_vacia(self) -> None:
        with pytest.raises(ErrorConfiguracion, match="sin tramos"):
            TablaISR(TipoPeriodo.MENSUAL, ())

    def test_hueco(self) -> None:
        with pytest.raises(ErrorConfiguracion, match="hueco"):
            TablaISR(
                TipoPeriodo.MENSUAL,
                (TramoISR(0, 99, 0, 192), TramoISR(101, None, 2, 640)),
            )

    def test_traslape(self) -> None:
        with pytest.raises(ErrorConfiguracion, match="traslape"):
            TablaSubsidio(
                TipoPeriodo.MENSUAL,
                (TramoSubsidio(0, 100, 5), TramoSubsidio(50, None, 0)),
            )

    def test_no_acotado_antes_del_ultimo(self) -> None:
        with pytest.raises(ErrorConfiguracion, match="antes del ultimo"):
            validar_particion(
                [TramoISR(0, None, 0, 192), TramoISR(100, None, 2, 640)], "prueba"
            )

    def test_ultimo_acotado(self) -> None:
        with pytest.raises(ErrorConfiguracion, match="no acotado"):
            validar_particion([TramoISR(0, 99, 0, 192)], "prueba")

    def test_limites_invertidos(self) -> None:
        with pytest.raises(ErrorConfiguracion, match="invertidos"):
            validar_particion(
                [TramoISR(100, 50, 0, 192), TramoISR(51, None, 0, 640)], "prueba"
            )

    def test_limite_negativo(self) -> None:
        with pytest.raises(ErrorConfiguracion, match="negativo"):
            validar_particion([TramoISR(-1, None, 0, 192)], "prueba")

    def test_buscar_tramo_sin_cobertura(self) -> None:
        """Una lista sin validar con hueco no encuentra la base."""
        tramos = [TramoISR(0, 10, 0, 0), TramoISR(20, None, 0, 0)]
        with pytest.raises(ErrorConfiguracion, match="ningun tramo"):
            buscar_tramo(tramos, 15, "prueba")

    def test_buscar_tramo_debajo_del_primero(self) -> None:
        tramos = [TramoISR(100, None, 0, 192)]
        assert buscar_tramo(tramos, 50, "prueba") is None

    @given(
        anio=st.sampled_from(sorted(TABLAS)),
        periodo=st.sampled_from(list(TipoPeriodo)),
        base=st.integers(min_value=0, max_value=10**13),
    )
    def test_cobertura_exacta(self, anio: int, periodo: TipoPeriodo, base: int) -> None:
        """Toda base no negativa cae en exactamente un tramo."""
        tramos = TABLAS[anio].tabla_isr(periodo).tramos
        coincidencias = [
            t
            for t in tramos
            if t.limite_inferior <= base
            and (t.limite_superior is None or base <= t.limite_superior)
        ]
        assert len(coincidencias) == 1
        assert tramos[buscar_tramo(tramos, base, "prueba")] is coincidencias[0]
