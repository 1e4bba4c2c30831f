"""NominaMX - Motor de calculo de remuneraciones para Mexico."""

__version__ = "0.1.0"
