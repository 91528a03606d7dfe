from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.utils import timezone
from django.utils.text import slugify
from rest_framework.test import APIClient, APITestCase

from api.models import Category, Product, Store, Subscription, SubscriptionPlan, Tenant, User

PASSWORD = 'Testpass123!'


def create_tenant(name='Pizzaria Teste', status='trialing', plan=None):
    tenant = Tenant.objects.create(name=name, slug=slugify(name))
    store = Store.objects.create(tenant=tenant, name=f"{name} Matriz", code='MATRIZ')
    Subscription.objects.create(
        tenant=tenant,
        plan=plan,
        status=status,
        current_period_start=timezone.now(),
        trial_ends_at=timezone.now() + timedelta(days=14) if status == 'trialing' else None,
    )
    return tenant, store


def create_plan(slug='basico', modules=None, **limits):
    return SubscriptionPlan.objects.create(
        name=slug.title(),
        slug=slug,
        monthly_price=Decimal('99.90'),
        modules=modules if modules is not None else ['pos'],
        **limits
    )


def create_user(tenant, role='admin', username=None, store=None):
    username = username or f"{role}-{tenant.slug}"
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password=PASSWORD,
        role=role,
        tenant=tenant,
        store=store,
    )


def create_product(tenant, name='Pizza Margherita', price='40.00', category=None):
    return Product.objects.create(tenant=tenant, name=name, base_price=Decimal(price), category=category)


class TenantAPITestCase(APITestCase):
    """
    One trialing tenant with its headquarters store, an admin user and a
    small catalog.
    """

    def setUp(self):
        # Throttle counters live in the cache
        cache.clear()
        self.client = APIClient()
        self.tenant, self.store = create_tenant()
        self.admin = create_user(self.tenant, 'admin', store=self.store)
        self.category = Category.objects.create(tenant=self.tenant, name='Pizzas')
        self.pizza = create_product(self.tenant, 'Pizza Margherita', '40.00', category=self.category)
        self.soda = create_product(self.tenant, 'Refrigerante', '6.50')
        self.client.force_authenticate(user=self.admin)

    def login_as(self, user):
        self.client.force_authenticate(user=user)

    def create_order(self, items=None, **extra):
        from api.services.order_service import OrderService

        data = {'items': items or [{'product': self.pizza, 'quantity': 1}]}
        data.update(extra)
        order, _ = OrderService.create_order(self.tenant, data, user=self.admin, store=self.store)
        return order
