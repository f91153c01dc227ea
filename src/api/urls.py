"""Main API URL router for /api/v1/."""
from django.urls import path

from api.v1 import payment_plan_views

urlpatterns = [
    path(
        "payment-plans/preview/",
        payment_plan_views.PaymentPlanPreviewAPIView.as_view(),
        name="api-payment-plan-preview",
    ),
    path(
        "payment-plans/status/",
        payment_plan_views.PaymentPlanStatusAPIView.as_view(),
        name="api-payment-plan-status",
    ),
    path(
        "payment-plans/confirm-payment/",
        payment_plan_views.PaymentPlanConfirmPaymentAPIView.as_view(),
        name="api-payment-plan-confirm-payment",
    ),
]
