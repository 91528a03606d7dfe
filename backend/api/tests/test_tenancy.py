from decimal import Decimal

from rest_framework import status

from api.models import Product, Store, Subscription
from api.tests.utils import TenantAPITestCase, create_plan, create_product, create_tenant, create_user


class TenantIsolationTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.other_tenant, self.other_store = create_tenant('Hamburgueria Vizinha')
        self.other_product = create_product(self.other_tenant, 'X-Burger', '25.00')

    def test_products_are_scoped_to_tenant(self):
        response = self.client.get('/api/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = {product['name'] for product in response.data['results']}
        self.assertEqual(names, {'Pizza Margherita', 'Refrigerante'})

    def test_other_tenant_product_is_not_found(self):
        response = self.client.get(f'/api/products/{self.other_product.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_product_stamps_tenant(self):
        response = self.client.post('/api/products/', {
            'name': 'Calzone',
            'base_price': '38.00',
            'category': self.category.pk,
            'variations': [{'name': 'Grande', 'price_modifier': '10.00'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = Product.objects.get(pk=response.data['id'])
        self.assertEqual(product.tenant, self.tenant)
        self.assertEqual(product.variations.count(), 1)

    def test_cannot_reference_other_tenant_category(self):
        from api.models import Category
        foreign_category = Category.objects.create(tenant=self.other_tenant, name='Lanches')
        response = self.client.post('/api/products/', {
            'name': 'Calzone',
            'base_price': '38.00',
            'category': foreign_category.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_order_with_other_tenant_product_is_rejected(self):
        response = self.client.post('/api/orders/', {
            'items': [{'product': self.other_product.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_store_header_outside_tenant_is_forbidden(self):
        response = self.client.get('/api/orders/', HTTP_X_STORE_ID=str(self.other_store.pk))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_store_header_filters_orders(self):
        branch = Store.objects.create(tenant=self.tenant, name='Filial', code='FIL1')
        self.create_order()
        response = self.client.get('/api/orders/', HTTP_X_STORE_ID=str(branch.pk))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 0)

        response = self.client.get('/api/orders/', HTTP_X_STORE_ID=str(self.store.pk))
        self.assertEqual(response.data['count'], 1)

    def test_user_without_tenant_is_rejected(self):
        from api.models import User
        loose = User.objects.create_user(username='solto', email='solto@example.com', password='Testpass123!')
        self.login_as(loose)
        response = self.client.get('/api/products/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class RoleAccessTests(TenantAPITestCase):
    def test_kitchen_role_cannot_create_orders(self):
        self.login_as(create_user(self.tenant, 'kitchen'))
        response = self.client.post('/api/orders/', {
            'items': [{'product': self.pizza.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_kitchen_role_can_read_orders(self):
        self.login_as(create_user(self.tenant, 'kitchen'))
        response = self.client.get('/api/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_cashier_reads_but_cannot_edit_products(self):
        self.login_as(create_user(self.tenant, 'cashier'))
        self.assertEqual(self.client.get('/api/products/').status_code, status.HTTP_200_OK)
        response = self.client.patch(f'/api/products/{self.pizza.pk}/', {'base_price': '1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delivery_role_cannot_see_reports(self):
        self.login_as(create_user(self.tenant, 'delivery'))
        response = self.client.get('/api/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_cannot_grant_admin(self):
        self.login_as(create_user(self.tenant, 'manager'))
        response = self.client.post('/api/users/', {
            'username': 'novo',
            'email': 'novo@example.com',
            'password': 'Testpass123!',
            'role': 'admin',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_creates_tenant_user(self):
        response = self.client.post('/api/users/', {
            'username': 'cozinha',
            'email': 'cozinha@example.com',
            'password': 'Testpass123!',
            'role': 'kitchen',
            'store': self.store.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('password', response.data)
        from api.models import User
        user = User.objects.get(username='cozinha')
        self.assertEqual(user.tenant, self.tenant)
        self.assertTrue(user.check_password('Testpass123!'))

    def test_deleting_user_deactivates(self):
        user = create_user(self.tenant, 'cashier')
        response = self.client.delete(f'/api/users/{user.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        user.refresh_from_db()
        self.assertFalse(user.is_active)

    def test_manager_cannot_change_admin(self):
        self.login_as(create_user(self.tenant, 'manager'))
        url = f'/api/users/{self.admin.pk}/'

        response = self.client.patch(url, {'password': 'Hijacked-Pass-99'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.patch(url, {'role': 'cashier'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.admin.refresh_from_db()
        self.assertTrue(self.admin.check_password('Testpass123!'))
        self.assertEqual(self.admin.role, 'admin')
        self.assertTrue(self.admin.is_active)

    def test_manager_edits_staff(self):
        self.login_as(create_user(self.tenant, 'manager'))
        cashier = create_user(self.tenant, 'cashier')
        response = self.client.patch(f'/api/users/{cashier.pk}/', {'role': 'kitchen'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        cashier.refresh_from_db()
        self.assertEqual(cashier.role, 'kitchen')

    def test_admin_cannot_reset_other_admin_password(self):
        other = create_user(self.tenant, 'admin', username='socio')
        response = self.client.patch(f'/api/users/{other.pk}/', {'password': 'Outra-Senha-123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        other.refresh_from_db()
        self.assertTrue(other.check_password('Testpass123!'))


class SubscriptionGatingTests(TenantAPITestCase):
    def activate_plan(self, **plan_kwargs):
        plan = create_plan(**plan_kwargs)
        subscription = Subscription.objects.get(tenant=self.tenant)
        subscription.plan = plan
        subscription.status = 'active'
        subscription.save()
        return plan

    def test_trial_enables_every_module(self):
        response = self.client.get('/api/stock/ingredients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_module_missing_from_plan(self):
        self.activate_plan(modules=['pos'])
        response = self.client.get('/api/stock/ingredients/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['detail'].code, 'module_not_enabled')

    def test_past_due_subscription_has_no_modules(self):
        Subscription.objects.filter(tenant=self.tenant).update(status='past_due')
        response = self.client.post('/api/orders/', {
            'items': [{'product': self.pizza.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_product_limit(self):
        self.activate_plan(modules=['pos'], max_products=2)
        response = self.client.post('/api/products/', {'name': 'Calzone', 'base_price': '38.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Product.objects.filter(tenant=self.tenant).count(), 2)

    def test_order_limit(self):
        self.activate_plan(modules=['pos'], max_orders_per_month=1)
        self.create_order()
        response = self.client.post('/api/orders/', {
            'items': [{'product': self.pizza.pk, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_subscription_endpoint(self):
        response = self.client.get('/api/subscription/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'trialing')
        self.assertIn('multi_store', response.data['enabled_modules'])


class StoreTests(TenantAPITestCase):
    def test_second_store_needs_multi_store(self):
        plan = create_plan(modules=['pos'])
        Subscription.objects.filter(tenant=self.tenant).update(plan=plan, status='active')
        response = self.client.post('/api/stores/', {'name': 'Filial Centro', 'code': 'centro'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_branch(self):
        response = self.client.post('/api/stores/', {'name': 'Filial Centro', 'code': 'centro'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'CENTRO')
        self.assertFalse(response.data['is_headquarters'])

    def test_duplicate_store_code(self):
        response = self.client.post('/api/stores/', {'name': 'Outra', 'code': 'matriz'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_headquarters_cannot_be_deleted(self):
        response = self.client.delete(f'/api/stores/{self.store.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Store.objects.filter(pk=self.store.pk).exists())

    def test_store_stats(self):
        self.create_order()
        response = self.client.get('/api/stores/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        row = response.data[0]
        self.assertEqual(row['orders_today'], 1)
        self.assertEqual(row['revenue_today'], Decimal('40.00'))

    def test_store_price_override(self):
        from api.models import StoreProduct
        StoreProduct.objects.create(store=self.store, product=self.pizza, price_override=Decimal('35.00'))
        order = self.create_order()
        self.assertEqual(order.total, Decimal('35.00'))
