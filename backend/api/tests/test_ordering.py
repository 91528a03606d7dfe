from decimal import Decimal

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APIClient

from api.models import (
    Delivery, Ingredient, KitchenTicket, Order, OrderStatusHistory, ProductAddon, ProductVariation,
    Recipe, RecipeItem, StockMovement, StoreProduct, Table
)
from api.services.order_service import OrderService
from api.services.stock_service import StockService
from api.services.websocket_services import order_group
from api.tests.utils import TenantAPITestCase


class OrderCreationTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.large = ProductVariation.objects.create(product=self.pizza, name='Grande', price_modifier=Decimal('12.00'))
        self.border = ProductAddon.objects.create(product=self.pizza, name='Borda recheada', price=Decimal('8.00'))

    def test_create_pos_order(self):
        """Prices come from the catalog, not from the client"""
        response = self.client.post('/api/orders/', {
            'customer_name': 'João',
            'payment_method': 'pix',
            'discount': '5.00',
            'items': [
                {
                    'product': self.pizza.pk,
                    'variation': self.large.pk,
                    'quantity': 2,
                    'unit_price': '1.00',
                    'addons': [{'addon': self.border.pk, 'quantity': 1}],
                },
                {'product': self.soda.pk, 'quantity': 1},
            ],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        # (40 + 12) * 2 + 8 * 2 + 6.50 - 5
        self.assertEqual(Decimal(response.data['subtotal']), Decimal('126.50'))
        self.assertEqual(Decimal(response.data['total']), Decimal('121.50'))
        self.assertEqual(response.data['status'], 'paid')
        self.assertEqual(response.data['order_number'], 1)
        self.assertEqual(response.data['store'], self.store.pk)
        self.assertEqual(response.data['next_action']['status'], 'confirmed')

        order = Order.objects.get(pk=response.data['id'])
        payment = order.payments.get()
        self.assertEqual(payment.status, 'approved')
        self.assertEqual(payment.payment_method, 'pix')
        self.assertEqual(payment.amount, Decimal('121.50'))
        self.assertIsNotNone(order.paid_at)
        self.assertEqual(order.status_history.count(), 1)
        self.assertEqual(KitchenTicket.objects.filter(order=order).count(), 2)

    def test_order_numbers_are_sequential_per_tenant(self):
        first = self.create_order()
        second = self.create_order()
        self.assertEqual((first.order_number, second.order_number), (1, 2))

    def test_pending_payment_order(self):
        response = self.client.post('/api/orders/', {
            'status': 'pending_payment',
            'items': [{'product': self.pizza.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get(pk=response.data['id'])
        self.assertIsNone(order.paid_at)
        self.assertEqual(order.payments.get().status, 'pending')

    def test_order_requires_items(self):
        response = self.client.post('/api/orders/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unavailable_product_is_rejected(self):
        self.pizza.is_available = False
        self.pizza.save()
        response = self.client.post('/api/orders/', {
            'items': [{'product': self.pizza.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_variation_of_other_product_is_rejected(self):
        response = self.client.post('/api/orders/', {
            'items': [{'product': self.soda.pk, 'variation': self.large.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delivery_order_needs_address(self):
        response = self.client.post('/api/orders/', {
            'is_delivery': True,
            'items': [{'product': self.pizza.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delivery_order_creates_delivery(self):
        response = self.client.post('/api/orders/', {
            'is_delivery': True,
            'delivery_address': 'Rua das Flores, 10',
            'delivery_neighborhood': 'Centro',
            'delivery_fee': '7.00',
            'items': [{'product': self.pizza.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['total']), Decimal('47.00'))
        self.assertEqual(response.data['delivery_status'], 'pending')

        delivery = Delivery.objects.get(order_id=response.data['id'])
        self.assertEqual(delivery.neighborhood, 'Centro')
        self.assertEqual(delivery.delivery_fee, Decimal('7.00'))

    def test_list_and_search_orders(self):
        self.create_order(customer_name='Ana Souza')
        self.create_order(customer_name='Bruno Lima', customer_phone='11999990000')

        response = self.client.get('/api/orders/', {'q': 'ana'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['customer_name'], 'Ana Souza')

        response = self.client.get('/api/orders/', {'q': '#2'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['order_number'], 2)

        response = self.client.get('/api/orders/', {'q': '99999'})
        self.assertEqual(response.data['results'][0]['customer_name'], 'Bruno Lima')


class OrderLifecycleTests(TenantAPITestCase):
    def test_advance_through_counter_flow(self):
        order = self.create_order()
        expected = ['confirmed', 'preparing', 'ready', 'delivered']
        for next_status in expected:
            response = self.client.post(f'/api/orders/{order.pk}/advance/')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data['status'], next_status)

        order.refresh_from_db()
        self.assertIsNotNone(order.confirmed_at)
        self.assertIsNotNone(order.ready_at)
        self.assertIsNotNone(order.delivered_at)
        self.assertIsNone(response.data['next_action'])
        self.assertEqual(len(response.data['status_history']), 5)

        response = self.client.post(f'/api/orders/{order.pk}/advance/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_ready_delivery_order_goes_out_for_delivery(self):
        order = self.create_order(is_delivery=True, delivery_address='Rua A, 1')
        for next_status in ('confirmed', 'preparing', 'ready'):
            OrderService.apply_status(order, next_status)
        self.assertEqual(OrderService.get_next_status(order), 'out_for_delivery')

    def test_pending_payment_advances_to_paid(self):
        order = self.create_order(status='pending_payment')
        response = self.client.post(f'/api/orders/{order.pk}/advance/')
        self.assertEqual(response.data['status'], 'paid')
        self.assertEqual(order.payments.get().status, 'approved')

    def test_skipping_status_is_rejected(self):
        order = self.create_order()
        response = self.client.post(f'/api/orders/{order.pk}/status/', {'status': 'ready'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        order.refresh_from_db()
        self.assertEqual(order.status, 'paid')

    def test_set_next_status(self):
        order = self.create_order()
        response = self.client.post(
            f'/api/orders/{order.pk}/status/',
            {'status': 'confirmed', 'notes': 'ok'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry = OrderStatusHistory.objects.filter(order=order).last()
        self.assertEqual((entry.previous_status, entry.status, entry.notes), ('paid', 'confirmed', 'ok'))

    def test_cancel_order(self):
        order = self.create_order()
        response = self.client.post(f'/api/orders/{order.pk}/cancel/', {'reason': 'Cliente desistiu'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')
        self.assertEqual(response.data['cancellation_reason'], 'Cliente desistiu')

        order.refresh_from_db()
        self.assertIsNotNone(order.cancelled_at)
        self.assertEqual(order.payments.get().status, 'refunded')
        self.assertFalse(order.kitchen_tickets.exclude(status='cancelled').exists())

    def test_cancel_terminal_order(self):
        order = self.create_order()
        OrderService.apply_status(order, 'delivered')
        response = self.client.post(f'/api/orders/{order.pk}/cancel/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_cancel_fails_open_delivery(self):
        order = self.create_order(is_delivery=True, delivery_address='Rua A, 1')
        OrderService.cancel_order(order, reason='Endereço errado')
        self.assertEqual(Delivery.objects.get(order=order).status, 'failed')

    def test_status_change_is_broadcast(self):
        order = self.create_order()
        channel_layer = get_channel_layer()
        channel_name = async_to_sync(channel_layer.new_channel)()
        async_to_sync(channel_layer.group_add)(order_group(order.order_uuid), channel_name)

        OrderService.advance(order)

        event = async_to_sync(channel_layer.receive)(channel_name)
        self.assertEqual(event['type'], 'send_message')
        self.assertEqual(event['message']['type'], 'order_update')
        self.assertEqual(event['message']['data']['status'], 'confirmed')


class OrderStockTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.flour = Ingredient.objects.create(
            tenant=self.tenant, name='Farinha', unit='kg',
            current_stock=Decimal('10'), min_stock=Decimal('9.5'), cost_per_unit=Decimal('5.00')
        )
        self.cheese = Ingredient.objects.create(
            tenant=self.tenant, name='Mussarela', unit='kg',
            current_stock=Decimal('2'), min_stock=Decimal('0'), cost_per_unit=Decimal('40.00')
        )
        recipe = Recipe.objects.create(tenant=self.tenant, product=self.pizza)
        RecipeItem.objects.create(recipe=recipe, ingredient=self.flour, quantity=Decimal('0.3'))
        RecipeItem.objects.create(recipe=recipe, ingredient=self.cheese, quantity=Decimal('0.2'))

    def test_order_consumes_recipe(self):
        response = self.client.post('/api/orders/', {
            'items': [{'product': self.pizza.pk, 'quantity': 2}, {'product': self.soda.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['stock']['reduced_items']), 2)
        self.assertEqual(response.data['stock']['errors'], [])

        self.flour.refresh_from_db()
        self.cheese.refresh_from_db()
        self.assertEqual(self.flour.current_stock, Decimal('9.4'))
        self.assertEqual(self.cheese.current_stock, Decimal('1.6'))

        movement = StockMovement.objects.get(ingredient=self.flour)
        self.assertEqual(movement.movement_type, 'exit')
        self.assertEqual(movement.previous_stock, Decimal('10'))
        self.assertEqual(movement.order_id, response.data['id'])

    def test_variation_recipe_takes_precedence(self):
        large = ProductVariation.objects.create(product=self.pizza, name='Grande', price_modifier=Decimal('10'))
        recipe = Recipe.objects.create(tenant=self.tenant, product=self.pizza, variation=large)
        RecipeItem.objects.create(recipe=recipe, ingredient=self.flour, quantity=Decimal('0.5'))

        self.create_order(items=[{'product': self.pizza, 'variation': large, 'quantity': 1}])
        self.flour.refresh_from_db()
        self.cheese.refresh_from_db()
        self.assertEqual(self.flour.current_stock, Decimal('9.5'))
        self.assertEqual(self.cheese.current_stock, Decimal('2'))

    def test_stock_may_go_negative(self):
        self.create_order(items=[{'product': self.pizza, 'quantity': 20}])
        self.cheese.refresh_from_db()
        self.assertEqual(self.cheese.current_stock, Decimal('-2'))

    def test_cancel_returns_stock_once(self):
        order = self.create_order(items=[{'product': self.pizza, 'quantity': 2}])
        OrderService.cancel_order(order)

        StockService.reverse_stock_for_order(order)

        self.flour.refresh_from_db()
        self.assertEqual(self.flour.current_stock, Decimal('10'))
        self.assertEqual(order.stock_movements.filter(movement_type='reversal').count(), 2)


class PublicTrackingTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.order = self.create_order(customer_name='Carlos Andrade')
        self.public = APIClient()

    def test_track_order(self):
        response = self.public.get(f'/public/track/{self.tenant.slug}/{self.order.order_number}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'paid')
        self.assertEqual(response.data['customer_first_name'], 'Carlos')
        self.assertEqual(response.data['order_uuid'], str(self.order.order_uuid))
        self.assertNotIn('customer_phone', response.data)

    def test_unknown_order(self):
        response = self.public.get(f'/public/track/{self.tenant.slug}/999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_public_menu(self):
        cache.clear()
        response = self.public.get(f'/public/menu/{self.tenant.slug}/', {'table': '4'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['table'], '4')
        groups = {group['name']: group for group in response.data['categories']}
        self.assertEqual([p['name'] for p in groups['Pizzas']['products']], ['Pizza Margherita'])
        self.assertEqual([p['name'] for p in groups['Outros']['products']], ['Refrigerante'])

    def test_public_menu_hides_products_switched_off_for_store(self):
        cache.clear()
        Table.objects.create(tenant=self.tenant, store=self.store, number=4)
        StoreProduct.objects.create(store=self.store, product=self.soda, is_available=False)

        response = self.public.get(f'/public/menu/{self.tenant.slug}/', {'table': '4'})
        names = [p['name'] for group in response.data['categories'] for p in group['products']]
        self.assertEqual(names, ['Pizza Margherita'])

        response = self.public.get(f'/public/menu/{self.tenant.slug}/')
        names = [p['name'] for group in response.data['categories'] for p in group['products']]
        self.assertIn('Refrigerante', names)


class StoreAvailabilityTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        StoreProduct.objects.create(store=self.store, product=self.soda, is_available=False)

    def test_order_rejects_product_switched_off_for_store(self):
        response = self.client.post('/api/orders/', {
            'items': [{'product': self.soda.pk, 'quantity': 1}],
        }, format='json', HTTP_X_STORE_ID=str(self.store.pk))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Order.objects.exists())

        response = self.client.post('/api/orders/', {
            'items': [{'product': self.pizza.pk, 'quantity': 1}],
        }, format='json', HTTP_X_STORE_ID=str(self.store.pk))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_table_rejects_product_switched_off_for_store(self):
        table = Table.objects.create(tenant=self.tenant, store=self.store, number=8)
        response = self.client.post(f'/api/tables/{table.pk}/open_session/', {}, format='json')
        url = f"/api/table-sessions/{response.data['id']}/add_item/"

        response = self.client.post(url, {'product': self.soda.pk, 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(url, {'product': self.pizza.pk, 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
