from rest_framework import status

from api.models import KitchenDisplayConfig, KitchenStation, KitchenTicket
from api.tests.utils import TenantAPITestCase, create_user


class KitchenQueueTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.order = self.create_order(
            items=[{'product': self.pizza, 'quantity': 1}, {'product': self.soda, 'quantity': 2}],
            customer_name='Marcos',
        )
        self.pizza_ticket = KitchenTicket.objects.get(order=self.order, order_item__product=self.pizza)
        self.soda_ticket = KitchenTicket.objects.get(order=self.order, order_item__product=self.soda)

    def test_queue_lists_open_tickets(self):
        response = self.client.get('/api/kitchen/queue/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['order_number'], self.order.order_number)
        self.assertEqual(response.data[0]['customer_name'], 'Marcos')

    def test_queue_orders_by_priority(self):
        self.client.post(f'/api/kitchen/tickets/{self.soda_ticket.pk}/priority/', {'priority': 5}, format='json')
        response = self.client.get('/api/kitchen/queue/')
        self.assertEqual(response.data[0]['id'], self.soda_ticket.pk)

    def test_priority_out_of_range(self):
        response = self.client.post(
            f'/api/kitchen/tickets/{self.pizza_ticket.pk}/priority/', {'priority': 11}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_hide_customer_name(self):
        KitchenDisplayConfig.objects.update_or_create(tenant=self.tenant, defaults={'show_customer_name': False})
        response = self.client.get('/api/kitchen/queue/')
        self.assertIsNone(response.data[0]['customer_name'])

    def test_ticket_status_stamps_times(self):
        url = f'/api/kitchen/tickets/{self.pizza_ticket.pk}/status/'
        response = self.client.post(url, {'status': 'preparing'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['started_at'])

        response = self.client.post(url, {'status': 'ready'}, format='json')
        self.assertIsNotNone(response.data['completed_at'])

        queue = self.client.get('/api/kitchen/queue/').data
        self.assertEqual([ticket['id'] for ticket in queue], [self.soda_ticket.pk])

    def test_ticket_cannot_be_cancelled_from_kitchen(self):
        response = self.client.post(
            f'/api/kitchen/tickets/{self.pizza_ticket.pk}/status/', {'status': 'cancelled'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bump(self):
        response = self.client.post(f'/api/kitchen/tickets/{self.pizza_ticket.pk}/bump/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ready')
        self.assertIsNotNone(response.data['bumped_at'])

    def test_stats(self):
        self.client.post(f'/api/kitchen/tickets/{self.pizza_ticket.pk}/status/', {'status': 'preparing'}, format='json')
        response = self.client.get('/api/kitchen/stats/')
        self.assertEqual(response.data['pending'], 1)
        self.assertEqual(response.data['preparing'], 1)
        self.assertEqual(response.data['alert_threshold_minutes'], 15)

    def test_kitchen_role_has_access(self):
        self.login_as(create_user(self.tenant, 'kitchen'))
        self.assertEqual(self.client.get('/api/kitchen/queue/').status_code, status.HTTP_200_OK)

    def test_cashier_has_no_kitchen_access(self):
        self.login_as(create_user(self.tenant, 'cashier'))
        self.assertEqual(self.client.get('/api/kitchen/queue/').status_code, status.HTTP_403_FORBIDDEN)


class AutoAdvanceTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        KitchenDisplayConfig.objects.update_or_create(tenant=self.tenant, defaults={'auto_advance': True})
        self.order = self.create_order(items=[
            {'product': self.pizza, 'quantity': 1},
            {'product': self.soda, 'quantity': 1},
        ])
        self.tickets = list(KitchenTicket.objects.filter(order=self.order))

    def set_ticket(self, ticket, new_status):
        return self.client.post(f'/api/kitchen/tickets/{ticket.pk}/status/', {'status': new_status}, format='json')

    def test_first_ticket_in_preparation_moves_order(self):
        self.set_ticket(self.tickets[0], 'preparing')
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'preparing')

    def test_all_tickets_ready_moves_order(self):
        self.set_ticket(self.tickets[0], 'ready')
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'preparing')

        self.set_ticket(self.tickets[1], 'ready')
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'ready')
        self.assertIsNotNone(self.order.ready_at)

    def test_disabled_auto_advance(self):
        KitchenDisplayConfig.objects.filter(tenant=self.tenant).update(auto_advance=False)
        for ticket in self.tickets:
            self.set_ticket(ticket, 'ready')
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'paid')


class KitchenBoardTests(TenantAPITestCase):
    def test_board_lists_kitchen_orders(self):
        waiting = self.create_order()
        confirmed = self.create_order()
        self.client.post(f'/api/orders/{confirmed.pk}/advance/')

        response = self.client.get('/api/kitchen/board/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([order['id'] for order in response.data], [confirmed.pk])
        self.assertEqual(response.data[0]['next_action']['status'], 'preparing')
        self.assertNotIn(waiting.pk, [order['id'] for order in response.data])

    def test_advance_from_board(self):
        order = self.create_order()
        response = self.client.post(f'/api/kitchen/orders/{order.pk}/advance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'confirmed')
        self.assertEqual(response.data['next_action']['status'], 'preparing')

    def test_config_update(self):
        response = self.client.get('/api/kitchen/config/')
        self.assertEqual(response.data['display_mode'], 'kanban')

        response = self.client.patch(
            '/api/kitchen/config/', {'auto_advance': True, 'alert_threshold_minutes': 20}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        config = KitchenDisplayConfig.objects.get(tenant=self.tenant)
        self.assertTrue(config.auto_advance)
        self.assertEqual(config.alert_threshold_minutes, 20)

        response = self.client.patch('/api/kitchen/config/', {'display_mode': 'carousel'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class StationRoutingTests(TenantAPITestCase):
    def test_create_station(self):
        response = self.client.post('/api/kitchen/stations/', {
            'name': 'Forno',
            'categories': [self.category.pk],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        station = KitchenStation.objects.get(pk=response.data['id'])
        self.assertEqual(station.tenant, self.tenant)

    def test_tickets_route_by_category(self):
        grill = KitchenStation.objects.create(tenant=self.tenant, name='Chapa', display_order=2)
        oven = KitchenStation.objects.create(tenant=self.tenant, name='Forno', display_order=1)
        grill.categories.add(self.category)
        oven.categories.add(self.category)

        order = self.create_order(items=[
            {'product': self.pizza, 'quantity': 1},
            {'product': self.soda, 'quantity': 1},
        ])
        self.assertEqual(KitchenTicket.objects.get(order=order, order_item__product=self.pizza).station, oven)
        self.assertIsNone(KitchenTicket.objects.get(order=order, order_item__product=self.soda).station)

        response = self.client.get('/api/kitchen/queue/', {'station': oven.pk})
        self.assertEqual(len(response.data), 1)

    def test_inactive_station_is_skipped(self):
        oven = KitchenStation.objects.create(tenant=self.tenant, name='Forno', is_active=False)
        oven.categories.add(self.category)
        order = self.create_order()
        self.assertIsNone(KitchenTicket.objects.get(order=order).station)
