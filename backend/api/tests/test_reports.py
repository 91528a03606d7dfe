from decimal import Decimal

from rest_framework import status

from api.models import Ingredient, Recipe, RecipeItem, SalesGoal, Subscription
from api.services.order_service import OrderService
from api.tests.utils import TenantAPITestCase, create_plan, create_tenant, create_user


class ReportTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        flour = Ingredient.objects.create(
            tenant=self.tenant, name='Farinha', unit='kg', current_stock=Decimal('50'), cost_per_unit=Decimal('4.00')
        )
        recipe = Recipe.objects.create(tenant=self.tenant, product=self.pizza)
        RecipeItem.objects.create(recipe=recipe, ingredient=flour, quantity=Decimal('0.3'))

        self.create_order(items=[{'product': self.pizza, 'quantity': 2}], payment_method='pix')
        self.create_order(items=[{'product': self.soda, 'quantity': 1}], payment_method='cash')
        cancelled = self.create_order()
        OrderService.cancel_order(cancelled)

    def test_sales_report(self):
        response = self.client.get('/api/reports/sales/', {'days': 7})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_revenue'], Decimal('86.50'))
        self.assertEqual(response.data['order_count'], 2)
        self.assertEqual(response.data['average_ticket'], Decimal('43.25'))
        self.assertEqual(len(response.data['daily']), 7)
        self.assertEqual(response.data['daily'][-1]['total'], Decimal('86.50'))
        self.assertEqual(response.data['by_payment_method'][0]['method'], 'pix')

    def test_invalid_period(self):
        response = self.client.get('/api/reports/sales/', {'days': 0})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cmv_report(self):
        response = self.client.get('/api/reports/cmv/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        pizza, soda = response.data['products']
        self.assertEqual(pizza['product_name'], 'Pizza Margherita')
        self.assertEqual(pizza['quantity'], 2)
        self.assertEqual(pizza['cost'], Decimal('2.40'))
        self.assertEqual(pizza['margin_percent'], Decimal('97.00'))
        self.assertTrue(pizza['has_recipe'])
        self.assertFalse(soda['has_recipe'])
        self.assertEqual(response.data['total_cost'], Decimal('2.40'))

    def test_dashboard(self):
        response = self.client.get('/api/reports/dashboard/')
        self.assertEqual(response.data['today_sales'], Decimal('86.50'))
        self.assertEqual(response.data['today_orders'], 2)
        self.assertEqual(response.data['pending_orders'], 2)

    def test_distributions(self):
        response = self.client.get('/api/reports/hourly/')
        self.assertEqual(len(response.data), 24)
        self.assertEqual(sum(bucket['orders'] for bucket in response.data), 2)

        response = self.client.get('/api/reports/weekday/')
        self.assertEqual([bucket['label'] for bucket in response.data][0], 'Segunda')

        response = self.client.get('/api/reports/origins/')
        self.assertEqual(response.data[0]['origin'], 'pos')
        self.assertEqual(response.data[0]['orders'], 2)

        response = self.client.get('/api/reports/top_products/', {'limit': 1})
        self.assertEqual(response.data[0]['product_name'], 'Pizza Margherita')

    def test_export_csv(self):
        response = self.client.post('/api/reports/export/', {'report_type': 'sales', 'format': 'csv', 'days': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'text/csv')
        lines = response.content.decode().strip().splitlines()
        self.assertEqual(lines[0], 'Data,Pedidos,Total')
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[-1].endswith(',2,86.50'))

    def test_export_excel(self):
        response = self.client.post('/api/reports/export/', {'report_type': 'cmv', 'format': 'excel'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        self.assertIn('.xlsx', response['Content-Disposition'])

    def test_export_pdf(self):
        response = self.client.post('/api/reports/export/', {'report_type': 'sales', 'format': 'pdf'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_export_unknown_report(self):
        response = self.client.post('/api/reports/export/', {'report_type': 'stock'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class SalesGoalTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.create_order(items=[{'product': self.pizza, 'quantity': 2}], payment_method='pix')
        self.create_order(items=[{'product': self.soda, 'quantity': 1}], payment_method='cash')

    def set_goal(self, goal_type, target):
        return self.client.post('/api/reports/goals/', {'goal_type': goal_type, 'target_amount': target}, format='json')

    def test_daily_goal_progress(self):
        response = self.set_goal('daily', '100.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['start_date'], response.data['end_date'])

        daily = self.client.get('/api/reports/goals/').data['daily']
        self.assertEqual(daily['current_amount'], Decimal('86.50'))
        self.assertEqual(daily['percentage'], Decimal('86.50'))
        self.assertEqual(daily['remaining'], Decimal('13.50'))

    def test_new_goal_replaces_active_one(self):
        self.set_goal('daily', '100.00')
        self.set_goal('daily', '50.00')
        self.assertEqual(SalesGoal.objects.filter(tenant=self.tenant, goal_type='daily', is_active=True).count(), 1)

        daily = self.client.get('/api/reports/dashboard/').data['goals']['daily']
        self.assertEqual(daily['goal']['target_amount'], Decimal('50.00'))
        self.assertEqual(daily['percentage'], Decimal('100'))
        self.assertEqual(daily['remaining'], Decimal('0'))

    def test_weekly_goal_spans_monday_to_sunday(self):
        response = self.set_goal('weekly', '1000.00')
        goal = SalesGoal.objects.get(pk=response.data['id'])
        self.assertEqual(goal.start_date.weekday(), 0)
        self.assertEqual((goal.end_date - goal.start_date).days, 6)

    def test_progress_without_goal(self):
        weekly = self.client.get('/api/reports/goals/').data['weekly']
        self.assertIsNone(weekly['goal'])
        self.assertEqual(weekly['current_amount'], Decimal('86.50'))

    def test_goal_must_be_positive(self):
        response = self.set_goal('daily', '0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(SalesGoal.objects.exists())

    def test_other_tenant_goals_are_separate(self):
        self.set_goal('daily', '100.00')
        other_tenant, _ = create_tenant('Outra Cozinha')
        self.login_as(create_user(other_tenant, 'admin'))
        daily = self.client.get('/api/reports/goals/').data['daily']
        self.assertIsNone(daily['goal'])
        self.assertEqual(daily['current_amount'], Decimal('0'))


class ReportGatingTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        plan = create_plan(modules=['pos', 'reports'])
        Subscription.objects.filter(tenant=self.tenant).update(plan=plan, status='active')

    def test_basic_reports_available(self):
        self.assertEqual(self.client.get('/api/reports/dashboard/').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get('/api/reports/sales/').status_code, status.HTTP_200_OK)

    def test_cmv_needs_module(self):
        response = self.client.get('/api/reports/cmv/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.post('/api/reports/export/', {'report_type': 'cmv', 'format': 'csv'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_advanced_reports_need_module(self):
        response = self.client.get('/api/reports/hourly/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_reads_reports(self):
        self.login_as(create_user(self.tenant, 'manager'))
        self.assertEqual(self.client.get('/api/reports/sales/').status_code, status.HTTP_200_OK)
