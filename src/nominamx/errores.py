"""Excepciones del motor de calculo."""


class ArgumentoInvalido(ValueError):
    """Entrada rechazada antes de entrar a cualquier calculo.

    Salarios negativos, dias de periodo <= 0, rangos de fechas invertidos,
    division entre cero o montos en float.
    """


class ErrorConfiguracion(Exception):
    """Tabla fiscal mal formada o ausente.

    Es un defecto de construccion de las tablas, no una condicion
    recuperable en tiempo de ejecucion.
    """
