"""Shared fixtures for the commission tests."""

import pytest

from app.services.commission import BulkCommissionCalculator

from factories import build_calculator


@pytest.fixture
def calculator_factory():
    return build_calculator


@pytest.fixture
def bulk_factory():
    def _build(employees=(), periods=None, directory_error=None, **kwargs):
        calculator = build_calculator(employees, periods, directory_error=directory_error)
        return BulkCommissionCalculator(calculator, **kwargs)

    return _build
