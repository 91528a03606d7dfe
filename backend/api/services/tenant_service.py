import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone
from django.utils.text import slugify

from ..models import Order, Store, Tenant, User
from .subscription_service import SubscriptionService

logger = logging.getLogger(__name__)


class TenantService:

    @staticmethod
    def unique_slug(name):
        base = slugify(name)[:100] or 'loja'
        slug = base
        counter = 2
        while Tenant.objects.filter(slug=slug).exists():
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    @staticmethod
    def signup(data, partner_resolution=None):
        """
        Bootstrap an account: tenant, admin user, headquarters store and a
        trial subscription. Signups on a partner app domain join that partner.
        """
        from .partner_service import PartnerService
        from ..models import Partner

        with transaction.atomic():
            tenant = Tenant.objects.create(
                name=data['business_name'],
                slug=TenantService.unique_slug(data['business_name']),
                business_category=data.get('business_category', 'restaurant'),
                phone=data.get('phone', ''),
                email=data['email'],
            )

            store = Store.objects.create(
                tenant=tenant,
                name=data.get('store_name') or data['business_name'],
                code='MATRIZ',
                phone=data.get('phone', ''),
                email=data['email'],
            )

            user = User.objects.create_user(
                username=data['email'],
                email=data['email'],
                password=data['password'],
                first_name=data.get('first_name', ''),
                last_name=data.get('last_name', ''),
                role='admin',
                tenant=tenant,
                store=store,
            )

            SubscriptionService.start_trial(tenant)

            partner_info = (partner_resolution or {}).get('partner')
            if partner_info and partner_resolution.get('domain_type') == 'app':
                partner = Partner.objects.get(pk=partner_info['id'])
                PartnerService.attach_tenant(partner, tenant)

        logger.info(f"Signup: tenant {tenant.slug} created by {user.email}")
        return tenant, user, store

    @staticmethod
    def get_store_stats(tenant):
        """Orders today, revenue today and average ticket per store."""
        today_start = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)
        rows = (
            Order.objects
            .filter(tenant=tenant, created_at__gte=today_start, status__in=Order.REVENUE_STATUSES)
            .values('store_id')
            .annotate(orders_today=Count('id'), revenue_today=Sum('total'))
        )
        by_store = {row['store_id']: row for row in rows}

        stats = []
        for store in tenant.stores.all():
            row = by_store.get(store.pk, {})
            orders_today = row.get('orders_today', 0)
            revenue_today = row.get('revenue_today') or Decimal('0')
            stats.append({
                'store_id': store.pk,
                'store_name': store.name,
                'code': store.code,
                'is_headquarters': store.is_headquarters,
                'is_active': store.is_active,
                'is_open': store.is_open,
                'orders_today': orders_today,
                'revenue_today': revenue_today,
                'average_ticket': round(revenue_today / orders_today, 2) if orders_today else Decimal('0'),
            })
        return stats
