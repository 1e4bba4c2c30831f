"""Aritmetica de punto fijo en puntos base (pb).

Conversion:
- 1 peso = 10,000 pb  ($15,234.5678 = 152,345,678 pb)
- Tasas: 10,000 pb = 100 %  (10.5 % = 1,050 pb)

Los montos son int de Python (precision arbitraria), asi que ningun calculo
puede desbordarse, aun para salarios anuales de miles de millones. Todas las
operaciones son exactas salvo dividir_redondeado, el unico punto donde se
redondea (ROUND_HALF_UP al punto base mas cercano).

Nunca float: toda entrada float se rechaza con ArgumentoInvalido.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from fractions import Fraction

from nominamx.errores import ArgumentoInvalido

BP_POR_PESO = 10_000
TASA_UNIDAD = 10_000  # 100 %
_DECIMALES_PB = 4
_DECIMALES_TASA = 2


def _exigir_entero(valor: object, nombre: str) -> None:
    if isinstance(valor, bool) or not isinstance(valor, int):
        raise ArgumentoInvalido(
            f"{nombre} debe ser un int en puntos base, no {type(valor).__name__}"
        )


def exigir_no_negativo(monto: int, nombre: str) -> None:
    """Valida que un monto sea un int en pb y >= 0.

    Raises:
        ArgumentoInvalido: Si el monto es float, bool, otro tipo, o negativo.
    """
    _exigir_entero(monto, nombre)
    if monto < 0:
        raise ArgumentoInvalido(f"{nombre} no puede ser negativo: {monto}")


def exigir_dias(dias: int) -> None:
    """Valida un numero de dias de periodo (int > 0)."""
    _exigir_entero(dias, "dias")
    if dias <= 0:
        raise ArgumentoInvalido(f"Los dias del periodo deben ser > 0: {dias}")


def sumar(a: int, b: int) -> int:
    """Suma exacta de dos montos en pb."""
    return a + b


def restar(a: int, b: int) -> int:
    """Resta exacta de dos montos en pb."""
    return a - b


def dividir_redondeado(numerador: int, divisor: int) -> int:
    """Divide dos enteros y redondea al entero mas cercano.

    Redondeo half-up, alejandose de cero en las mitades:
    5 / 2 = 3, -5 / 2 = -3, 150050000 / 30 = 5001667.

    Raises:
        ArgumentoInvalido: Si el divisor es cero.
    """
    if divisor == 0:
        raise ArgumentoInvalido("Division entre cero")
    negativo = (numerador < 0) != (divisor < 0)
    cociente, residuo = divmod(abs(numerador), abs(divisor))
    if 2 * residuo >= abs(divisor):
        cociente += 1
    return -cociente if negativo else cociente


def multiplicar_por_tasa(monto: int, tasa: int) -> int:
    """Multiplica un monto en pb por una tasa en pb.

    $15,000 x 10 % = $1,500:  multiplicar_por_tasa(150000000, 1000) == 15000000
    """
    return dividir_redondeado(monto * tasa, TASA_UNIDAD)


def multiplicar_por_fraccion(monto: int, fraccion: Fraction | int) -> int:
    """Multiplica un monto por una fraccion exacta con un solo redondeo.

    Sirve para prorrateos (15/365 x dias) sin acumular error intermedio.
    """
    fraccion = Fraction(fraccion)
    return dividir_redondeado(monto * fraccion.numerator, fraccion.denominator)


def a_decimal(monto: int) -> Decimal:
    """Convierte pb a pesos (Decimal con exactamente 4 decimales).

    a_decimal(152345678) == Decimal("15234.5678")
    """
    _exigir_entero(monto, "monto")
    signo, digitos, _ = Decimal(monto).as_tuple()
    return Decimal((signo, digitos, -_DECIMALES_PB))


def desde_decimal(valor: Decimal | int | str) -> int:
    """Convierte pesos (Decimal, int o str) a pb, sin perdida.

    Raises:
        ArgumentoInvalido: Si el valor es float, no numerico, o tiene mas
            de 4 decimales significativos.
    """
    return _escalar(valor, _DECIMALES_PB, "monto")


def desde_porcentaje(valor: Decimal | int | str) -> int:
    """Convierte un porcentaje publicado a tasa en pb ("1.92" -> 192)."""
    return _escalar(valor, _DECIMALES_TASA, "porcentaje")


def a_porcentaje(tasa: int) -> Decimal:
    """Convierte una tasa en pb a porcentaje (192 -> Decimal("1.92"))."""
    _exigir_entero(tasa, "tasa")
    signo, digitos, _ = Decimal(tasa).as_tuple()
    return Decimal((signo, digitos, -_DECIMALES_TASA))


def _escalar(valor: Decimal | int | str, decimales: int, nombre: str) -> int:
    if isinstance(valor, (float, bool)):
        raise ArgumentoInvalido(
            f"El {nombre} debe ser Decimal, int o str, jamas float: {valor!r}"
        )
    try:
        numero = valor if isinstance(valor, Decimal) else Decimal(valor)
    except (InvalidOperation, TypeError) as e:
        raise ArgumentoInvalido(f"{nombre.capitalize()} invalido: {valor!r}") from e
    if not numero.is_finite():
        raise ArgumentoInvalido(f"{nombre.capitalize()} invalido: {valor!r}")

    signo, digitos, exponente = numero.as_tuple()
    coeficiente = int("".join(map(str, digitos)) or "0")
    desplazamiento = exponente + decimales
    if desplazamiento >= 0:
        resultado = coeficiente * 10**desplazamiento
    else:
        cociente, residuo = divmod(coeficiente, 10**-desplazamiento)
        if residuo:
            raise ArgumentoInvalido(
                f"{nombre.capitalize()} con mas de {decimales} decimales: {valor!r}"
            )
        resultado = cociente
    return -resultado if signo else resultado


def desde_pesos(texto: str) -> int:
    """Interpreta un texto de pesos ("$15,234.57", "15234.57") en pb."""
    limpio = texto.strip().replace("$", "").replace(",", "").replace(" ", "")
    if not limpio:
        raise ArgumentoInvalido(f"Monto vacio: {texto!r}")
    return desde_decimal(limpio)


def formatear(monto: int, decimales: int = 2) -> str:
    """Formatea pb como pesos mexicanos: 152345678 -> "$15,234.57"."""
    valor = a_decimal(monto).quantize(
        Decimal(1).scaleb(-decimales), rounding=ROUND_HALF_UP
    )
    if valor < 0:
        return f"-${-valor:,.{decimales}f}"
    return f"${valor:,.{decimales}f}"
