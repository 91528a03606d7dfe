import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from ..exceptions import PlanLimitExceeded
from ..models import Order, Subscription

logger = logging.getLogger(__name__)


class SubscriptionService:

    @staticmethod
    def start_trial(tenant, plan=None):
        now = timezone.now()
        return Subscription.objects.create(
            tenant=tenant,
            plan=plan,
            status='trialing',
            current_period_start=now,
            trial_ends_at=now + timedelta(days=settings.TRIAL_DAYS),
        )

    @staticmethod
    def get_subscription(tenant):
        if tenant is None:
            return None
        return Subscription.objects.select_related('plan').filter(tenant=tenant).first()

    @staticmethod
    def enabled_modules(tenant):
        subscription = SubscriptionService.get_subscription(tenant)
        return subscription.enabled_modules() if subscription else []

    @staticmethod
    def tenant_has_module(tenant, module):
        subscription = SubscriptionService.get_subscription(tenant)
        return bool(subscription and subscription.has_module(module))

    @staticmethod
    def check_limit(tenant, limit_name):
        """
        Raise PlanLimitExceeded when creating one more user, product or
        order would exceed the plan. Trials and plans without limit pass.
        """
        subscription = SubscriptionService.get_subscription(tenant)
        if subscription is None or subscription.status == 'trialing' or subscription.plan is None:
            return

        limit = getattr(subscription.plan, f"max_{limit_name}", None)
        if limit is None:
            return

        if limit_name == 'users':
            current = tenant.users.filter(is_active=True).count()
        elif limit_name == 'products':
            current = tenant.products.filter(is_active=True).count()
        elif limit_name == 'stores':
            current = tenant.stores.count()
        elif limit_name == 'orders_per_month':
            month_start = timezone.localtime().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
            current = Order.objects.filter(tenant=tenant, created_at__gte=month_start).count()
        else:
            return

        if current >= limit:
            raise PlanLimitExceeded(
                f"Your plan allows at most {limit} {limit_name.replace('_', ' ')}."
            )

    @staticmethod
    def expire_trials():
        """Move trials past their end date to past_due."""
        expired = Subscription.objects.filter(status='trialing', trial_ends_at__lt=timezone.now())
        count = 0
        for subscription in expired.select_related('tenant'):
            subscription.status = 'past_due'
            subscription.save(update_fields=['status', 'updated_at'])
            logger.info(f"Trial expired for tenant {subscription.tenant.slug}")
            count += 1
        return count
