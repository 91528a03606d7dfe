from django.core.management.base import BaseCommand
from django.utils import timezone
import logging
from api.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

class Command(BaseCommand):
    help = 'Move trial subscriptions past their end date to past_due'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show which trials would expire without changing them',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        if dry_run:
            from api.models import Subscription
            expired = Subscription.objects.filter(
                status='trialing',
                trial_ends_at__lt=timezone.now()
            ).select_related('tenant')
            for subscription in expired:
                self.stdout.write(f"{subscription.tenant.slug}: trial ended {subscription.trial_ends_at:%Y-%m-%d}")
            self.stdout.write(self.style.WARNING(f"DRY RUN: Would expire {expired.count()} trials"))
            return

        expired_count = SubscriptionService.expire_trials()
        if expired_count > 0:
            self.stdout.write(self.style.SUCCESS(f"Expired {expired_count} trial subscriptions"))
        else:
            self.stdout.write("No trials to expire")
