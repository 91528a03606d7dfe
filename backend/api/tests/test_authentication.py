from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from api.models import KitchenDisplayConfig, Store, Subscription, Tenant, User
from api.tests.utils import PASSWORD, create_tenant, create_user


class SignupTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.signup_url = reverse('signup')

    def signup_data(self, **overrides):
        data = {
            'business_name': 'Cantina da Nonna',
            'business_category': 'restaurant',
            'first_name': 'Maria',
            'last_name': 'Silva',
            'email': 'maria@cantina.com',
            'password': 'StrongPass123!',
        }
        data.update(overrides)
        return data

    def test_signup_bootstraps_tenant(self):
        """Signup creates tenant, headquarters store, admin and a trial"""
        response = self.client.post(self.signup_url, self.signup_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data['tokens'])

        tenant = Tenant.objects.get(slug='cantina-da-nonna')
        user = User.objects.get(email='maria@cantina.com')
        self.assertEqual(user.tenant, tenant)
        self.assertEqual(user.role, 'admin')

        store = Store.objects.get(tenant=tenant)
        self.assertTrue(store.is_headquarters)
        self.assertEqual(user.store, store)

        subscription = Subscription.objects.get(tenant=tenant)
        self.assertEqual(subscription.status, 'trialing')
        self.assertIsNotNone(subscription.trial_ends_at)
        self.assertTrue(KitchenDisplayConfig.objects.filter(tenant=tenant).exists())

    def test_signup_slug_is_unique(self):
        create_tenant('Cantina da Nonna')
        response = self.client.post(self.signup_url, self.signup_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(Tenant.objects.filter(slug='cantina-da-nonna-2').exists())

    def test_signup_duplicate_email(self):
        self.client.post(self.signup_url, self.signup_data(), format='json')
        response = self.client.post(
            self.signup_url,
            self.signup_data(business_name='Outro Lugar', email='MARIA@cantina.com'),
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)
        self.assertEqual(Tenant.objects.count(), 1)

    def test_signup_weak_password(self):
        response = self.client.post(self.signup_url, self.signup_data(password='123'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)


class LoginTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.login_url = reverse('login')
        self.tenant, self.store = create_tenant()
        self.user = create_user(self.tenant, 'cashier', username='caixa', store=self.store)

    def test_login_success(self):
        response = self.client.post(self.login_url, {'username': 'caixa', 'password': PASSWORD}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', response.data['tokens'])
        self.assertEqual(response.data['user']['role'], 'cashier')
        self.assertEqual(sorted(response.data['user']['allowed_areas']), ['orders', 'pos', 'tables'])

    def test_login_invalid_credentials(self):
        response = self.client.post(self.login_url, {'username': 'caixa', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_inactive_tenant(self):
        self.tenant.is_active = False
        self.tenant.save()
        response = self.client.post(self.login_url, {'username': 'caixa', 'password': PASSWORD}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_token_authenticates_current_user(self):
        response = self.client.post(self.login_url, {'username': 'caixa', 'password': PASSWORD}, format='json')
        access = response.data['tokens']['access']

        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
        response = client.get(reverse('current_user'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'caixa')
        self.assertEqual(response.data['tenant']['slug'], self.tenant.slug)
        self.assertIn('pos', response.data['enabled_modules'])

    def test_token_endpoint_is_throttled(self):
        url = reverse('token_obtain_pair')
        codes = [
            self.client.post(url, {'username': 'caixa', 'password': 'wrong'}, format='json').status_code
            for _ in range(25)
        ]
        self.assertEqual(codes[0], status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(codes[-1], status.HTTP_429_TOO_MANY_REQUESTS)

    def test_token_endpoint_inactive_tenant(self):
        url = reverse('token_obtain_pair')
        response = self.client.post(url, {'username': 'caixa', 'password': PASSWORD}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

        self.tenant.is_active = False
        self.tenant.save()
        response = self.client.post(url, {'username': 'caixa', 'password': PASSWORD}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_current_user_requires_authentication(self):
        response = self.client.get(reverse('current_user'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
