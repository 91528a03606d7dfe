from celery import shared_task
from logging import getLogger

logger = getLogger(__name__)


@shared_task
def check_low_stock_levels():
    """Broadcast the low-stock list of every tenant with items at or below minimum."""
    from .services.stock_service import StockService

    tenants_alerted = StockService.check_low_stock_levels()
    return f"Low stock alerts sent to {tenants_alerted} tenants"


@shared_task
def expire_trial_subscriptions():
    from .services.subscription_service import SubscriptionService

    expired = SubscriptionService.expire_trials()
    if expired:
        logger.info(f"Expired {expired} trial subscriptions")
    return f"Expired {expired} trials"


@shared_task
def close_stale_kitchen_tickets(hours=12):
    """Kitchen tickets left open overnight are marked as served."""
    from .services.kitchen_service import KitchenService

    closed = KitchenService.close_stale_tickets(hours=hours)
    return f"Closed {closed} stale tickets"
