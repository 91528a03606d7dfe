import os
from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from api.models import Ingredient, KitchenTicket, Subscription, User
from api.services.websocket_services import tenant_group
from api.tasks import check_low_stock_levels, close_stale_kitchen_tickets, expire_trial_subscriptions
from api.tests.utils import create_product, create_tenant, create_user


class ExpireTrialsTests(TestCase):
    def setUp(self):
        self.tenant, _ = create_tenant()
        self.current, _ = create_tenant('Trial Vigente')
        Subscription.objects.filter(tenant=self.tenant).update(trial_ends_at=timezone.now() - timedelta(days=1))

    def test_dry_run_changes_nothing(self):
        out = StringIO()
        call_command('expire_trials', '--dry-run', stdout=out)
        self.assertIn('DRY RUN: Would expire 1 trials', out.getvalue())
        self.assertEqual(Subscription.objects.get(tenant=self.tenant).status, 'trialing')

    def test_expire(self):
        out = StringIO()
        call_command('expire_trials', stdout=out)
        self.assertIn('Expired 1 trial subscriptions', out.getvalue())
        self.assertEqual(Subscription.objects.get(tenant=self.tenant).status, 'past_due')
        self.assertEqual(Subscription.objects.get(tenant=self.current).status, 'trialing')

    def test_task(self):
        self.assertEqual(expire_trial_subscriptions(), 'Expired 1 trials')


class LowStockTests(TestCase):
    def setUp(self):
        self.tenant, _ = create_tenant()
        Ingredient.objects.create(
            tenant=self.tenant, name='Farinha', current_stock=Decimal('1'), min_stock=Decimal('5')
        )
        Ingredient.objects.create(
            tenant=self.tenant, name='Sal', current_stock=Decimal('10'), min_stock=Decimal('1')
        )

    def test_dry_run_lists_ingredients(self):
        out = StringIO()
        call_command('check_low_stock', '--dry-run', stdout=out)
        self.assertIn('pizzaria-teste: Farinha', out.getvalue())
        self.assertIn('DRY RUN: 1 ingredients', out.getvalue())

    def test_alert_reaches_tenant_group(self):
        channel_layer = get_channel_layer()
        channel_name = async_to_sync(channel_layer.new_channel)()
        async_to_sync(channel_layer.group_add)(tenant_group(self.tenant.pk), channel_name)

        out = StringIO()
        call_command('check_low_stock', stdout=out)
        self.assertIn('Low stock alerts sent to 1 tenants', out.getvalue())

        event = async_to_sync(channel_layer.receive)(channel_name)
        self.assertEqual(event['message']['type'], 'low_stock_summary')
        self.assertEqual(event['message']['data']['items'][0]['name'], 'Farinha')

    def test_task(self):
        self.assertEqual(check_low_stock_levels(), 'Low stock alerts sent to 1 tenants')


class StaleTicketTests(TestCase):
    def test_close_stale_tickets(self):
        from api.services.order_service import OrderService

        tenant, store = create_tenant()
        user = create_user(tenant)
        product = create_product(tenant)
        old_order, _ = OrderService.create_order(tenant, {'items': [{'product': product, 'quantity': 1}]}, user=user, store=store)
        new_order, _ = OrderService.create_order(tenant, {'items': [{'product': product, 'quantity': 1}]}, user=user, store=store)
        KitchenTicket.objects.filter(order=old_order).update(created_at=timezone.now() - timedelta(hours=13))

        self.assertEqual(close_stale_kitchen_tickets(), 'Closed 1 stale tickets')
        self.assertEqual(KitchenTicket.objects.get(order=old_order).status, 'served')
        self.assertEqual(KitchenTicket.objects.get(order=new_order).status, 'pending')


class CreateSuperuserFromEnvTests(TestCase):
    @patch.dict(os.environ, {
        'SUPERUSER_USERNAME': 'plataforma',
        'SUPERUSER_EMAIL': 'ops@example.com',
        'SUPERUSER_PASSWORD': 'Testpass123!',
    })
    def test_creates_platform_operator(self):
        out = StringIO()
        call_command('create_superuser_form_env', stdout=out)
        user = User.objects.get(username='plataforma')
        self.assertEqual(user.role, 'super_admin')
        self.assertIsNone(user.tenant)
        self.assertTrue(user.is_super_admin)

        call_command('create_superuser_form_env', stdout=out)
        self.assertIn('already exists', out.getvalue())

    @patch.dict(os.environ, {}, clear=True)
    def test_skips_without_env(self):
        out = StringIO()
        call_command('create_superuser_form_env', stdout=out)
        self.assertIn('skipping', out.getvalue())
        self.assertFalse(User.objects.exists())
