from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from payment_plans.types import (
    InstallmentWeightCounts,
    PaymentPlan,
    PaymentPlanKind,
    PaymentProgress,
)

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username="admin",
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        is_staff=True,
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def mixed_counts():
    return InstallmentWeightCounts(triple=2, double=1, simple=1)


@pytest.fixture
def installment_plan(mixed_counts):
    return PaymentPlan(
        kind=PaymentPlanKind.INSTALLMENTS,
        unit_value=Decimal("1000.00"),
        multiplier_factor=Decimal("9"),
        counts=mixed_counts,
        due_day=10,
        start_month=date(2024, 1, 1),
    )


@pytest.fixture
def monthly_plan():
    """Twelve simple installments of 1.000,00 due on the 10th from January 2024."""
    return PaymentPlan(
        kind=PaymentPlanKind.INSTALLMENTS,
        unit_value=Decimal("1000.00"),
        multiplier_factor=Decimal("12"),
        counts=InstallmentWeightCounts(simple=12),
        due_day=10,
        start_month=date(2024, 1, 1),
    )


@pytest.fixture
def cash_plan():
    return PaymentPlan(
        kind=PaymentPlanKind.CASH,
        unit_value=Decimal("1000.00"),
        multiplier_factor=Decimal("9"),
        cash_due_date=date(2024, 5, 1),
    )


@pytest.fixture
def down_payment_plan(mixed_counts):
    return PaymentPlan(
        kind=PaymentPlanKind.DOWN_PAYMENT_PLUS_INSTALLMENTS,
        unit_value=Decimal("1000.00"),
        multiplier_factor=Decimal("9"),
        counts=mixed_counts,
        down_payment=Decimal("500.00"),
        due_day=10,
        start_month=date(2024, 1, 1),
        down_payment_due_date=date(2023, 12, 20),
    )


@pytest.fixture
def fresh_progress():
    return PaymentProgress()


@pytest.fixture
def plan_payload():
    """Record fields for a down payment plus 2 triple, 1 double and 1 simple installments."""
    return {
        "tipoPagamento": "entrada_parcelamento",
        "valorLance": "1.000,00",
        "fatorMultiplicador": "9",
        "parcelasTriplas": 2,
        "parcelasDuplas": 1,
        "parcelasSimples": 1,
        "valorEntrada": "500,00",
        "diaVencimentoMensal": 10,
        "mesInicioPagamento": "2024-01",
    }
