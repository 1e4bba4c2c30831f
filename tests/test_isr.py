"""Tests del ISR por tarifa progresiva y del subsidio al empleo."""

from __future__ import annotations

import pytest

from nominamx.errores import ArgumentoInvalido
from nominamx.mexico.nomina.isr import calcular_isr, tasa_marginal, tramo_aplicable
from nominamx.mexico.nomina.subsidio import calcular_retencion, calcular_subsidio
from nominamx.mexico.tarifas import (
    TablaISR,
    TablasFiscales,
    TablaSubsidio,
    TipoPeriodo,
    TramoISR,
)


@pytest.fixture
def isr_mensual(tablas_2025: TablasFiscales) -> TablaISR:
    return tablas_2025.tabla_isr(TipoPeriodo.MENSUAL)


@pytest.fixture
def subsidio_mensual(tablas_2025: TablasFiscales) -> TablaSubsidio:
    return tablas_2025.tabla_subsidio(TipoPeriodo.MENSUAL)


class TestCalcularISR:
    """Tarifa mensual 2025."""

    def test_base_cero(self, isr_mensual: TablaISR) -> None:
        assert calcular_isr(0, isr_mensual) == 0

    def test_limite_superior_primer_tramo(self, isr_mensual: TablaISR) -> None:
        """$746.04 x 1.92 % = $14.3240 (redondeo de 14.32397)."""
        assert calcular_isr(7460400, isr_mensual) == 143240

    def test_limite_inferior_segundo_tramo(self, isr_mensual: TablaISR) -> None:
        """En el limite inferior solo aplica la cuota fija."""
        assert calcular_isr(7460500, isr_mensual) == 143200

    def test_tercer_tramo(self, isr_mensual: TablaISR) -> None:
        """$10,000: 371.83 + (10,000 - 6,332.06) x 10.88 % = $770.9019."""
        assert calcular_isr(100000000, isr_mensual) == 7709019

    def test_ultimo_tramo(self, isr_mensual: TablaISR) -> None:
        """$500,000: 117,912.32 + (500,000 - 375,975.62) x 35 %."""
        assert calcular_isr(5000000000, isr_mensual) == 1613208530

    def test_base_negativa(self, isr_mensual: TablaISR) -> None:
        with pytest.raises(ArgumentoInvalido, match="negativo"):
            calcular_isr(-1, isr_mensual)

    def test_base_float(self, isr_mensual: TablaISR) -> None:
        with pytest.raises(ArgumentoInvalido, match="float"):
            calcular_isr(1000.0, isr_mensual)  # type: ignore[arg-type]

    def test_debajo_del_primer_tramo(self) -> None:
        """Una tarifa que empieza arriba de 0 no causa ISR debajo de ella."""
        tabla = TablaISR(
            TipoPeriodo.MENSUAL,
            (TramoISR(100, 199, 0, 1000), TramoISR(200, None, 10, 2000)),
        )
        assert calcular_isr(50, tabla) == 0
        assert tramo_aplicable(50, tabla) is None
        assert calcular_isr(150, tabla) == 5

    def test_tasa_marginal(self, isr_mensual: TablaISR) -> None:
        assert tasa_marginal(150000000, isr_mensual) == 1792
        assert tasa_marginal(0, isr_mensual) == 192

    def test_isr_no_decreciente(self, isr_mensual: TablaISR) -> None:
        """Al cruzar cada limite el ISR no baja mas de un centavo."""
        for tramo in isr_mensual.tramos[1:]:
            antes = calcular_isr(tramo.limite_inferior - 1, isr_mensual)
            despues = calcular_isr(tramo.limite_inferior, isr_mensual)
            assert despues >= antes - 100


class TestSubsidio:
    def test_dentro_del_rango(self, subsidio_mensual: TablaSubsidio) -> None:
        assert calcular_subsidio(100000000, subsidio_mensual) == 4750000

    def test_en_el_limite(self, subsidio_mensual: TablaSubsidio) -> None:
        assert calcular_subsidio(101710000, subsidio_mensual) == 4750000
        assert calcular_subsidio(101710001, subsidio_mensual) == 0

    def test_base_negativa(self, subsidio_mensual: TablaSubsidio) -> None:
        with pytest.raises(ArgumentoInvalido):
            calcular_subsidio(-5, subsidio_mensual)


class TestRetencion:
    def test_subsidio_reduce_el_isr(
        self, isr_mensual: TablaISR, subsidio_mensual: TablaSubsidio
    ) -> None:
        """$8,000: ISR $553.3019 - subsidio $475.00 = $78.3019."""
        resultado = calcular_retencion(80000000, isr_mensual, subsidio_mensual)
        assert resultado.isr == 5533019
        assert resultado.subsidio == 4750000
        assert resultado.isr_retenido == 783019
        assert resultado.tramo is isr_mensual.tramos[2]

    def test_subsidio_no_se_entrega(
        self, isr_mensual: TablaISR, subsidio_mensual: TablaSubsidio
    ) -> None:
        """$3,000: ISR $158.5728 < subsidio; la retencion queda en 0."""
        resultado = calcular_retencion(30000000, isr_mensual, subsidio_mensual)
        assert resultado.isr == 1585728
        assert resultado.isr_retenido == 0

    def test_sin_subsidio(
        self, isr_mensual: TablaISR, subsidio_mensual: TablaSubsidio
    ) -> None:
        resultado = calcular_retencion(150000000, isr_mensual, subsidio_mensual)
        assert resultado.subsidio == 0
        assert resultado.isr_retenido == resultado.isr
