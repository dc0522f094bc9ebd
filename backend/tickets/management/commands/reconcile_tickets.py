from django.core.management.base import BaseCommand
import logging

from services.ledger import reconcile_balances, repair_balances

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Compare ticket balances with the sum of their transaction logs."

    def add_arguments(self, parser):
        parser.add_argument(
            "--fix",
            action="store_true",
            help="Reset mismatched balances to their ledger totals.",
        )

    def handle(self, *args, **options):
        mismatches = reconcile_balances()

        if not mismatches:
            self.stdout.write(self.style.SUCCESS("All ticket balances match their ledgers."))
            return

        for mismatch in mismatches:
            self.stdout.write(
                self.style.WARNING(
                    f"user {mismatch.user_id}: balance={mismatch.balance} ledger={mismatch.ledger_total}"
                )
            )

        if options["fix"]:
            repaired = repair_balances(mismatches)
            logger.info("Repaired %d ticket balances", repaired)
            self.stdout.write(self.style.SUCCESS(f"Repaired {repaired} balances."))
        else:
            self.stdout.write(self.style.WARNING(f"{len(mismatches)} mismatched balances (run with --fix to repair)."))
