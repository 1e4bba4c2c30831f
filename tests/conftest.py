"""Fixtures compartidas de NominaMX."""

from __future__ import annotations

import pytest

from nominamx.mexico.tarifas import TABLAS_2025, TABLAS_2026, TablasFiscales


@pytest.fixture
def tablas_2025() -> TablasFiscales:
    """Tablas fiscales 2025 integradas."""
    return TABLAS_2025


@pytest.fixture
def tablas_2026() -> TablasFiscales:
    """Tablas fiscales 2026 integradas."""
    return TABLAS_2026
