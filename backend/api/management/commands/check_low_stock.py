from django.core.management.base import BaseCommand
from django.db.models import F
import logging
from api.services.stock_service import StockService

logger = logging.getLogger(__name__)

class Command(BaseCommand):
    help = 'Report ingredients at or below their minimum stock and alert tenant dashboards'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List low stock ingredients without broadcasting alerts',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        if dry_run:
            from api.models import Ingredient
            low_stock = Ingredient.objects.filter(
                is_active=True,
                tenant__is_active=True,
                current_stock__lte=F('min_stock')
            ).select_related('tenant').order_by('tenant__slug', 'name')

            for ingredient in low_stock:
                self.stdout.write(
                    f"{ingredient.tenant.slug}: {ingredient.name} "
                    f"{ingredient.current_stock}/{ingredient.min_stock} {ingredient.unit}"
                )
            self.stdout.write(self.style.WARNING(f"DRY RUN: {low_stock.count()} ingredients at or below minimum"))
            return

        tenants_alerted = StockService.check_low_stock_levels()
        if tenants_alerted > 0:
            self.stdout.write(self.style.SUCCESS(f"Low stock alerts sent to {tenants_alerted} tenants"))
        else:
            self.stdout.write("No low stock ingredients")
