"""Management command to cancel and refund expired redemptions."""

from django.core.management.base import BaseCommand

from giya.exceptions import GiyaError
from giya.services import redemption


class Command(BaseCommand):
    help = "Cancel issued redemptions past their expires_at and refund the points"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List expired redemptions without cancelling them",
        )

    def handle(self, *args, **options):
        token_ids = list(redemption.expired_tokens().values_list("token_id", flat=True))

        if options["dry_run"]:
            self.stdout.write(f"{len(token_ids)} expired redemptions.")
            return

        cancelled = 0
        for token_id in token_ids:
            try:
                redemption.cancel(token_id, reason="expired")
            except GiyaError as exc:
                # Consumed or cancelled since the query ran
                self.stderr.write(f"Skipped {token_id[:12]}…: {exc.code}")
                continue
            cancelled += 1

        self.stdout.write(
            self.style.SUCCESS(f"Cancelled {cancelled} expired redemptions.")
        )
