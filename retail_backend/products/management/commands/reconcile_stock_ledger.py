# products/management/commands/reconcile_stock_ledger.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from products.models import ProductInventory
from products.services.stock_movements import reconcile_rows


class Command(BaseCommand):
    help = (
        "Replay stock movements per (product, location) and report inventory rows "
        "whose movement chain is broken or disagrees with the on-hand quantity."
    )

    def add_arguments(self, parser):
        parser.add_argument("--location", type=str, default="", help="Location id filter.")
        parser.add_argument("--product", type=str, default="", help="Product id filter.")
        parser.add_argument(
            "--fail-on-mismatch",
            action="store_true",
            help="Exit non-zero when any row is inconsistent (CI / cron alerts).",
        )

    def handle(self, *args, **options):
        qs = ProductInventory.objects.all()
        if options.get("location"):
            qs = qs.filter(location_id=options["location"])
        if options.get("product"):
            qs = qs.filter(product_id=options["product"])

        reports = reconcile_rows(qs)
        bad = [r for r in reports if not r.is_consistent]

        for r in bad:
            self.stdout.write(
                f"MISMATCH product={r.product_id} location={r.location_id} "
                f"current={r.current_quantity} replayed={r.replayed_quantity} "
                f"breaks={r.breaks}"
            )

        self.stdout.write(f"Checked: {len(reports)}  Inconsistent: {len(bad)}")

        if bad and options.get("fail_on_mismatch"):
            raise CommandError(f"{len(bad)} inventory row(s) failed reconciliation.")
