"""REST API endpoints for auction payment plans.

Every endpoint takes the plan fields in the request body (the same names
stored on sponsor, bidder and lot records) and answers from the engine in
``payment_plans``. Nothing is persisted here.
"""
from datetime import date

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.currency import format_brl
from payment_plans.dates import format_start_month
from payment_plans.exceptions import PaymentPlanError
from payment_plans.reminders import needs_reminder
from payment_plans.serializers import PaymentPlanInputSerializer
from payment_plans.status import register_payment, summarize
from payment_plans.structuring import (
    bid_total,
    build_dated_schedule,
    plan_total,
    total_weighted_factor,
)
from payment_plans.types import PaymentStatus
from payment_plans.validation import reconcile


def _parse_today(value):
    if not value:
        return timezone.localdate()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def _money(value):
    return None if value is None else format_brl(value)


def _iso(value):
    return value.isoformat() if value else None


def _advisory_data(advisory):
    return {"code": advisory.code, "message": advisory.message}


def _plan_input(request):
    serializer = PaymentPlanInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.build()


def _progress_data(progress):
    return {
        "parcelasPagas": progress.installments_paid,
        "pago": progress.paid,
        "entradaPaga": progress.down_payment_paid,
    }


class PaymentPlanPreviewAPIView(APIView):
    """Schedule, totals and reconciliation for the posted plan."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        plan_input = _plan_input(request)
        plan = plan_input.plan
        try:
            reconciliation = reconcile(
                plan, plan_input.reference_amount, warnings=plan_input.warnings,
            )
        except PaymentPlanError as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        schedule = [
            {
                "numero": entry.ordinal,
                "tipo": entry.label,
                "peso": entry.weight,
                "valor": format_brl(entry.amount),
                "vencimento": _iso(entry.due_date),
            }
            for entry in build_dated_schedule(plan)
        ]
        data = {
            "tipoPagamento": str(plan.kind),
            "mesInicioPagamento": format_start_month(plan.start_month) if plan.start_month else None,
            "diaVencimentoMensal": plan.due_day,
            "fatorCalculado": str(total_weighted_factor(plan.counts)),
            "totalParcelas": plan.total_installments,
            "valorTotal": format_brl(plan_total(plan)),
            "valorTotalLance": format_brl(
                bid_total(plan.unit_value, plan.multiplier_factor, plan_input.commission_percent)
            ),
            "parcelas": schedule,
            "conferido": reconciliation.is_reconciled,
            "avisos": [_advisory_data(item) for item in reconciliation.advisories],
        }
        return Response(data)


class PaymentPlanStatusAPIView(APIView):
    """Status, next due date, late interest and balances on a given day."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        today = _parse_today(request.data.get("today"))
        if today is None:
            return Response(
                {"today": ["Data invalida. Utilize AAAA-MM-DD."]},
                status=status.HTTP_400_BAD_REQUEST,
            )

        plan_input = _plan_input(request)
        plan = plan_input.plan
        situation = summarize(plan, plan_input.progress, today, plan_input.policy)
        data = {
            "today": today.isoformat(),
            "status": str(situation.status),
            "statusLabel": PaymentStatus(situation.status).label,
            "proximoVencimento": _iso(situation.next_due_date),
            "valorDevido": _money(situation.amount_due),
            "jurosAtraso": format_brl(situation.late_interest),
            "valorPago": format_brl(situation.amount_paid),
            "saldoDevedor": format_brl(situation.outstanding),
            "lembrete": needs_reminder(plan, plan_input.progress, today),
            "itensAtrasados": [
                {
                    "tipo": item.kind,
                    "numero": item.ordinal,
                    "valor": format_brl(item.amount),
                    "vencimento": _iso(item.due_date),
                }
                for item in situation.overdue_items
            ],
        }
        return Response(data)


class PaymentPlanConfirmPaymentAPIView(APIView):
    """Confirm the next due item and return the advanced progress fields."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        plan_input = _plan_input(request)
        try:
            progress = register_payment(plan_input.plan, plan_input.progress)
        except PaymentPlanError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(_progress_data(progress))
