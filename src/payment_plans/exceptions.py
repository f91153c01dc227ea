"""Hard errors raised by the payment plan engine.

Business-level mismatches (factor or total not reconciling) are *not*
exceptions; see :mod:`payment_plans.validation`.
"""


class PaymentPlanError(ValueError):
    """Base class for structurally invalid payment plan input."""

    default_message = "Plano de pagamento invalido."

    def __init__(self, message=None, **details):
        self.details = details
        super().__init__(message or self.default_message)


class InvalidWeights(PaymentPlanError):
    default_message = "As quantidades de parcelas devem ser inteiros nao negativos."


class InvalidUnitValue(PaymentPlanError):
    default_message = "O valor da parcela deve ser maior que zero."


class InvalidStartMonth(PaymentPlanError):
    default_message = "Mes de inicio invalido. Utilize AAAA-MM."


class PlanAlreadySettled(PaymentPlanError):
    default_message = "Todas as parcelas deste plano ja foram pagas."
