"""Draft snapshots of a payment plan.

A snapshot is a plain dict keyed by the stored record field names. The
caller owns it (browser storage, a draft row, a file); restoring runs it
back through :class:`~payment_plans.serializers.PaymentPlanInputSerializer`
so a snapshot gets exactly the same validation as a live form.
"""
from __future__ import annotations

from core.currency import format_brl
from payment_plans.dates import format_start_month
from payment_plans.serializers import PaymentPlanInputSerializer, PlanInput


def _money(value):
    return "" if value is None else format_brl(value)


def _iso(value):
    return value.isoformat() if value is not None else None


def snapshot_plan(plan_input: PlanInput) -> dict:
    """Serialize ``plan_input`` into a JSON-compatible dict."""
    plan = plan_input.plan
    progress = plan_input.progress
    policy = plan_input.policy
    return {
        "tipoPagamento": str(plan.kind),
        "valorLance": _money(plan.unit_value),
        "fatorMultiplicador": None if plan.multiplier_factor is None else str(plan.multiplier_factor),
        "parcelasTriplas": plan.counts.triple,
        "parcelasDuplas": plan.counts.double,
        "parcelasSimples": plan.counts.simple,
        "valorEntrada": _money(plan.down_payment),
        "diaVencimentoMensal": plan.due_day,
        "mesInicioPagamento": format_start_month(plan.start_month) if plan.start_month else "",
        "dataVencimentoVista": _iso(plan.cash_due_date),
        "dataEntrada": _iso(plan.down_payment_due_date),
        "parcelasPagas": progress.installments_paid,
        "pago": progress.paid,
        "entradaPaga": progress.down_payment_paid,
        "percentualJurosAtraso": str(policy.rate_percent_per_month),
        "tipoJurosAtraso": str(policy.compounding),
        "valorReferencia": _money(plan_input.reference_amount),
        "percentualComissao": str(plan_input.commission_percent),
    }


def restore_plan(data: dict) -> PlanInput:
    """Rebuild a :class:`PlanInput` from a snapshot.

    Raises
    ------
    rest_framework.exceptions.ValidationError
        If the snapshot no longer passes validation.
    """
    serializer = PaymentPlanInputSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.build()
