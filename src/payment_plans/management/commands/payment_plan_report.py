"""Print the schedule and payment situation of a saved plan snapshot."""
import json
from datetime import date

from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import ValidationError

from core.currency import format_brl_display
from payment_plans.exceptions import PaymentPlanError
from payment_plans.snapshots import restore_plan
from payment_plans.status import summarize
from payment_plans.structuring import build_dated_schedule, plan_total
from payment_plans.types import PaymentPlanKind, PaymentStatus
from payment_plans.validation import reconcile


class Command(BaseCommand):
    help = "Show schedule, reconciliation, status and late interest for a plan snapshot (JSON)"

    def add_arguments(self, parser):
        parser.add_argument("snapshot", help="Path to a JSON snapshot file")
        parser.add_argument(
            "--today",
            help="Reference date (YYYY-MM-DD). Defaults to the current date.",
        )

    def handle(self, *args, **options):
        today = self._parse_today(options.get("today"))
        try:
            with open(options["snapshot"], encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise CommandError(f"Snapshot ilegivel: {exc}")

        try:
            plan_input = restore_plan(data)
            reconciliation = reconcile(
                plan_input.plan,
                plan_input.reference_amount,
                warnings=plan_input.warnings,
            )
        except ValidationError as exc:
            raise CommandError(f"Snapshot invalido: {exc.detail}")
        except PaymentPlanError as exc:
            raise CommandError(str(exc))

        plan = plan_input.plan
        self.stdout.write(f"Plano: {PaymentPlanKind(plan.kind).label}")
        for entry in build_dated_schedule(plan):
            due = entry.due_date.isoformat() if entry.due_date else "-"
            self.stdout.write(
                f"  {entry.ordinal:>3}  {entry.label:<8} {due:<10}  {format_brl_display(entry.amount)}"
            )
        self.stdout.write(f"Total: {format_brl_display(plan_total(plan))}")

        if reconciliation.is_reconciled:
            self.stdout.write(self.style.SUCCESS("Plano confere com o valor de referencia"))
        for advisory in reconciliation.advisories:
            self.stdout.write(self.style.WARNING(advisory.message))

        situation = summarize(plan, plan_input.progress, today, plan_input.policy)
        next_due = situation.next_due_date.isoformat() if situation.next_due_date else "-"
        self.stdout.write(f"Status em {today.isoformat()}: {PaymentStatus(situation.status).label}")
        self.stdout.write(f"Proximo vencimento: {next_due}")
        self.stdout.write(f"Pago: {format_brl_display(situation.amount_paid)}")
        self.stdout.write(f"Pendente: {format_brl_display(situation.outstanding)}")
        self.stdout.write(f"Juros de atraso: {format_brl_display(situation.late_interest)}")

    def _parse_today(self, value):
        if not value:
            return date.today()
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise CommandError("Data invalida. Utilize AAAA-MM-DD.")
