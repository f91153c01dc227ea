"""Boundary serializers: raw record fields in, typed payment plans out.

Field names match the ones stored on the sponsor/bidder/lot records, so a
stored row (or a draft snapshot) can be posted as-is. Validation happens
once, here; the engine modules trust what they receive.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from rest_framework import serializers

from core.currency import InvalidFormat, format_brl, parse_brl
from payment_plans.conf import get_default_compounding, get_default_due_day
from payment_plans.dates import MAX_DUE_DAY, MIN_DUE_DAY, clamp_due_day, parse_start_month
from payment_plans.exceptions import InvalidStartMonth, InvalidWeights
from payment_plans.types import (
    InstallmentWeightCounts,
    InterestCompounding,
    LateInterestPolicy,
    PaymentPlan,
    PaymentPlanKind,
    PaymentProgress,
)
from payment_plans.validation import InvalidDueDay, validate_weights

logger = logging.getLogger("leilao")


@dataclass(frozen=True)
class PlanInput:
    """Everything a request carries about one plan, already typed."""

    plan: PaymentPlan
    progress: PaymentProgress
    policy: LateInterestPolicy
    reference_amount: Decimal | None = None
    commission_percent: Decimal = Decimal("0")
    warnings: tuple = field(default_factory=tuple)


class BrazilianCurrencyField(serializers.Field):
    """Accept ``"1.234,56"`` strings (or plain numbers); render the same format."""

    default_error_messages = {
        "invalid": "Valor monetario invalido. Utilize o formato 1.234,56.",
    }

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail("invalid")
        if isinstance(data, (int, float, Decimal)):
            return Decimal(str(data))
        try:
            return parse_brl(data)
        except InvalidFormat:
            self.fail("invalid")

    def to_representation(self, value):
        if value is None:
            return ""
        return format_brl(value)


class PaymentPlanInputSerializer(serializers.Serializer):
    tipoPagamento = serializers.ChoiceField(
        choices=PaymentPlanKind.choices,
        default=PaymentPlanKind.INSTALLMENTS,
    )
    valorLance = BrazilianCurrencyField(required=False, allow_null=True)
    fatorMultiplicador = serializers.DecimalField(
        max_digits=12, decimal_places=4, required=False, allow_null=True,
    )
    parcelasTriplas = serializers.IntegerField(required=False, default=0)
    parcelasDuplas = serializers.IntegerField(required=False, default=0)
    parcelasSimples = serializers.IntegerField(required=False, default=0)
    valorEntrada = BrazilianCurrencyField(required=False, allow_null=True)
    diaVencimentoMensal = serializers.IntegerField(required=False, allow_null=True)
    mesInicioPagamento = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    dataVencimentoVista = serializers.DateField(required=False, allow_null=True)
    dataEntrada = serializers.DateField(required=False, allow_null=True)
    parcelasPagas = serializers.IntegerField(required=False, default=0, min_value=0)
    pago = serializers.BooleanField(required=False, default=False)
    entradaPaga = serializers.BooleanField(required=False, default=False)
    percentualJurosAtraso = serializers.DecimalField(
        max_digits=7, decimal_places=4, required=False, default=Decimal("0"), min_value=Decimal("0"),
    )
    tipoJurosAtraso = serializers.ChoiceField(
        choices=InterestCompounding.choices, required=False, allow_blank=True,
    )
    valorReferencia = BrazilianCurrencyField(required=False, allow_null=True)
    percentualComissao = serializers.DecimalField(
        max_digits=7, decimal_places=4, required=False, default=Decimal("0"), min_value=Decimal("0"),
    )

    def validate_valorLance(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("O valor da parcela deve ser maior que zero.")
        return value

    def validate_fatorMultiplicador(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("O fator multiplicador deve ser maior que zero.")
        return value

    def validate_valorEntrada(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("O valor da entrada nao pode ser negativo.")
        return value

    def validate_mesInicioPagamento(self, value):
        if not value:
            return None
        try:
            return parse_start_month(value)
        except InvalidStartMonth as exc:
            raise serializers.ValidationError(str(exc))

    def validate(self, attrs):
        counts = InstallmentWeightCounts(
            triple=attrs.get("parcelasTriplas", 0),
            double=attrs.get("parcelasDuplas", 0),
            simple=attrs.get("parcelasSimples", 0),
        )
        try:
            validate_weights(counts)
        except InvalidWeights as exc:
            raise serializers.ValidationError(
                {name: str(exc) for name in _count_fields(exc.details)}
            )

        kind = attrs.get("tipoPagamento", PaymentPlanKind.INSTALLMENTS)
        paid_count = attrs.get("parcelasPagas", 0)
        if kind != PaymentPlanKind.CASH and paid_count > counts.total_installments:
            raise serializers.ValidationError(
                {"parcelasPagas": "Parcelas pagas excedem o total de parcelas do plano."}
            )

        attrs["counts"] = counts
        return attrs

    def build(self) -> PlanInput:
        """Turn ``validated_data`` into typed engine input.

        ``parcelasPagas`` counts installments only. The down payment has
        its own ``entradaPaga`` flag, so a legacy record that counted a
        paid entrada as parcela 1 must be posted with ``parcelasPagas``
        reduced by one and ``entradaPaga=True``.
        """
        data = self.validated_data
        kind = data.get("tipoPagamento", PaymentPlanKind.INSTALLMENTS)
        counts = data["counts"]
        warnings = []

        due_day = data.get("diaVencimentoMensal")
        if due_day is None:
            due_day = get_default_due_day()
        elif not MIN_DUE_DAY <= due_day <= MAX_DUE_DAY:
            clamped = clamp_due_day(due_day)
            warnings.append(InvalidDueDay(original=due_day, clamped=clamped))
            logger.warning("Due day %s out of range, clamped to %s", due_day, clamped)
            due_day = clamped

        plan = PaymentPlan(
            kind=kind,
            unit_value=data.get("valorLance"),
            multiplier_factor=data.get("fatorMultiplicador"),
            counts=counts,
            down_payment=data.get("valorEntrada"),
            due_day=due_day,
            start_month=data.get("mesInicioPagamento"),
            cash_due_date=data.get("dataVencimentoVista"),
            down_payment_due_date=data.get("dataEntrada"),
        )

        paid = data.get("pago", False)
        installments_paid = data.get("parcelasPagas", 0)
        down_payment_paid = data.get("entradaPaga", False)
        if paid and kind != PaymentPlanKind.CASH:
            # A settled plan has every installment confirmed.
            installments_paid = counts.total_installments
            down_payment_paid = plan.has_down_payment
        if kind == PaymentPlanKind.CASH:
            installments_paid = 0

        progress = PaymentProgress(
            installments_paid=installments_paid,
            paid=paid,
            down_payment_paid=down_payment_paid,
        )
        policy = LateInterestPolicy(
            rate_percent_per_month=data.get("percentualJurosAtraso", Decimal("0")),
            compounding=data.get("tipoJurosAtraso") or get_default_compounding(),
        )
        return PlanInput(
            plan=plan,
            progress=progress,
            policy=policy,
            reference_amount=data.get("valorReferencia"),
            commission_percent=data.get("percentualComissao", Decimal("0")),
            warnings=tuple(warnings),
        )


_COUNT_FIELDS = {
    "triple": "parcelasTriplas",
    "double": "parcelasDuplas",
    "simple": "parcelasSimples",
}


def _count_fields(details):
    return [_COUNT_FIELDS[name] for name in details if name in _COUNT_FIELDS]
