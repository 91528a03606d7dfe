from rest_framework import status

from api.models import Courier, Delivery, Order
from api.tests.utils import TenantAPITestCase, create_tenant, create_user


class DeliveryTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.courier_user = create_user(self.tenant, 'delivery', username='motoboy')
        self.courier = Courier.objects.create(tenant=self.tenant, user=self.courier_user, name='Paulo')
        self.order = self.create_order(is_delivery=True, delivery_address='Rua B, 20', customer_name='Lia')
        self.delivery = Delivery.objects.get(order=self.order)

    def assign(self, courier=None):
        return self.client.post(
            f'/api/deliveries/{self.delivery.pk}/assign/',
            {'courier': (courier or self.courier).pk},
            format='json'
        )

    def test_assign_courier(self):
        response = self.assign()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'assigned')
        self.assertEqual(response.data['courier_name'], 'Paulo')
        self.assertEqual(response.data['next_action']['status'], 'picked_up')

    def test_assign_courier_of_other_tenant(self):
        other_tenant, _ = create_tenant('Outra Pizzaria')
        stranger = Courier.objects.create(tenant=other_tenant, name='Estranho')
        response = self.assign(stranger)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_advance_mirrors_order_status(self):
        self.assign()
        url = f'/api/deliveries/{self.delivery.pk}/advance/'

        response = self.client.post(url)
        self.assertEqual(response.data['status'], 'picked_up')
        self.assertIsNotNone(response.data['picked_up_at'])

        response = self.client.post(url)
        self.assertEqual(response.data['status'], 'in_route')
        self.assertEqual(Order.objects.get(pk=self.order.pk).status, 'out_for_delivery')

        response = self.client.post(url)
        self.assertEqual(response.data['status'], 'delivered')
        order = Order.objects.get(pk=self.order.pk)
        self.assertEqual(order.status, 'delivered')
        self.assertIsNotNone(order.delivered_at)

        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_status_cannot_skip(self):
        self.assign()
        response = self.client.post(
            f'/api/deliveries/{self.delivery.pk}/status/', {'status': 'delivered'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_failed_delivery(self):
        self.assign()
        response = self.client.post(
            f'/api/deliveries/{self.delivery.pk}/status/',
            {'status': 'failed', 'reason': 'Cliente ausente'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['failure_reason'], 'Cliente ausente')
        self.assertIsNone(response.data['next_action'])

    def test_courier_sees_only_own_deliveries(self):
        other_order = self.create_order(is_delivery=True, delivery_address='Rua C, 30')
        self.assign()
        self.login_as(self.courier_user)

        response = self.client.get('/api/deliveries/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([d['id'] for d in response.data['results']], [self.delivery.pk])

        other_delivery = Delivery.objects.get(order=other_order)
        response = self.client.get(f'/api/deliveries/{other_delivery.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_courier_cannot_assign(self):
        self.assign()
        self.login_as(self.courier_user)
        response = self.assign()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_courier_advances_own_delivery(self):
        self.assign()
        self.login_as(self.courier_user)
        response = self.client.post(f'/api/deliveries/{self.delivery.pk}/advance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'picked_up')

    def test_courier_today_and_stats(self):
        self.assign()
        self.login_as(self.courier_user)

        response = self.client.get('/api/courier/today/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['courier']['name'], 'Paulo')
        self.assertEqual(response.data['deliveries'][0]['customer_name'], 'Lia')

        response = self.client.get('/api/courier/stats/')
        self.assertEqual(response.data, {'pending': 1, 'in_route': 0, 'completed': 0})

    def test_courier_endpoints_need_profile(self):
        response = self.client.get('/api/courier/today/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class CourierTests(TenantAPITestCase):
    def test_create_courier(self):
        response = self.client.post('/api/couriers/', {'name': 'Rafa', 'vehicle_type': 'bicycle'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Courier.objects.get(pk=response.data['id']).tenant, self.tenant)

    def test_delete_deactivates_courier(self):
        courier = Courier.objects.create(tenant=self.tenant, name='Rafa')
        response = self.client.delete(f'/api/couriers/{courier.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        courier.refresh_from_db()
        self.assertFalse(courier.is_active)
        self.assertFalse(courier.is_available)

    def test_toggle_availability(self):
        courier = Courier.objects.create(tenant=self.tenant, name='Rafa')
        response = self.client.post(f'/api/couriers/{courier.pk}/toggle_availability/')
        self.assertFalse(response.data['is_available'])
