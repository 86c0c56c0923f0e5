"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import List
from fastapi.testclient import TestClient
from rule37_service.api.main import create_app
from rule37_service.domain.models import LedgerEntry

from ledger_factories import payment, purchase


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def mixed_ledger() -> List[LedgerEntry]:
    """Two suppliers: one paid late in FIFO order, one with an unpaid and an at-risk purchase"""
    return [
        purchase(date(2024, 10, 1), Decimal("50000"), "Supplier C"),
        purchase(date(2024, 10, 15), Decimal("30000"), "Supplier C"),
        payment(date(2025, 5, 1), Decimal("60000"), "Supplier C"),
        payment(date(2025, 5, 15), Decimal("20000"), "Supplier C"),
        purchase(date(2024, 11, 1), Decimal("59000"), "Supplier B"),
        purchase(date(2024, 12, 23), Decimal("75000"), "Supplier B"),
    ]
