from decimal import Decimal

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone
from rest_framework import status

from api.models import Ingredient, ProductVariation, Recipe, RecipeItem, StockMovement
from api.services.websocket_services import WebSocketService, tenant_group
from api.tests.utils import TenantAPITestCase, create_tenant, create_user


class StockMovementTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.flour = Ingredient.objects.create(
            tenant=self.tenant, name='Farinha', unit='kg',
            current_stock=Decimal('10'), min_stock=Decimal('5'), cost_per_unit=Decimal('4.50')
        )

    def register(self, movement_type, quantity, **extra):
        data = {'ingredient': self.flour.pk, 'movement_type': movement_type, 'quantity': quantity}
        data.update(extra)
        return self.client.post('/api/stock/movements/register/', data, format='json')

    def test_entry_adds_stock(self):
        response = self.register('entry', '2.5', reason='Compra semanal', unit_cost='4.20')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['previous_stock']), Decimal('10'))
        self.assertEqual(Decimal(response.data['new_stock']), Decimal('12.5'))
        self.assertEqual(response.data['created_by'], self.admin.pk)

        self.flour.refresh_from_db()
        self.assertEqual(self.flour.current_stock, Decimal('12.5'))

    def test_exit_and_loss_subtract(self):
        self.register('exit', '3')
        self.register('loss', '1')
        self.flour.refresh_from_db()
        self.assertEqual(self.flour.current_stock, Decimal('6'))

    def test_adjustment_sets_level(self):
        response = self.register('adjustment', '0', reason='Inventário')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.flour.refresh_from_db()
        self.assertEqual(self.flour.current_stock, Decimal('0'))

    def test_zero_quantity_only_for_adjustment(self):
        response = self.register('entry', '0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(StockMovement.objects.exists())

    def test_negative_quantity(self):
        response = self.register('exit', '-1')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_ingredient_of_other_tenant(self):
        other_tenant, _ = create_tenant('Outra Cozinha')
        foreign = Ingredient.objects.create(tenant=other_tenant, name='Sal')
        response = self.client.post('/api/stock/movements/register/', {
            'ingredient': foreign.pk, 'movement_type': 'entry', 'quantity': '1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_current_stock_is_read_only(self):
        response = self.client.patch(
            f'/api/stock/ingredients/{self.flour.pk}/', {'current_stock': '999'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.flour.refresh_from_db()
        self.assertEqual(self.flour.current_stock, Decimal('10'))

    def test_crossing_minimum_broadcasts_low_stock(self):
        channel_layer = get_channel_layer()
        channel_name = async_to_sync(channel_layer.new_channel)()
        async_to_sync(channel_layer.group_add)(tenant_group(self.tenant.pk), channel_name)

        self.register('exit', '6')
        event = async_to_sync(channel_layer.receive)(channel_name)
        self.assertEqual(event['message']['type'], 'low_stock')
        self.assertEqual(event['message']['data']['name'], 'Farinha')
        self.assertEqual(Decimal(event['message']['data']['current_stock']), Decimal('4'))

        # Already below the minimum: only the marker arrives
        self.register('exit', '1')
        WebSocketService.broadcast_to_tenant(self.tenant.pk, 'marker', {})
        event = async_to_sync(channel_layer.receive)(channel_name)
        self.assertEqual(event['message']['type'], 'marker')

    def test_ingredient_movements(self):
        self.register('entry', '1')
        self.register('exit', '2')
        response = self.client.get(f'/api/stock/ingredients/{self.flour.pk}/movements/')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/stock/movements/', {'movement_type': 'exit'})
        self.assertEqual(response.data['count'], 1)

    def test_movement_date_filters(self):
        self.register('entry', '1')
        today = timezone.localdate().isoformat()

        response = self.client.get('/api/stock/movements/', {'date_from': today, 'date_to': today})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/stock/movements/', {'date_from': 'ontem'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class IngredientTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.flour = Ingredient.objects.create(
            tenant=self.tenant, name='Farinha', unit='kg',
            current_stock=Decimal('3'), min_stock=Decimal('5'), cost_per_unit=Decimal('4.00')
        )
        self.oil = Ingredient.objects.create(
            tenant=self.tenant, name='Azeite', unit='l',
            current_stock=Decimal('2'), min_stock=Decimal('1'), cost_per_unit=Decimal('30.00')
        )

    def test_create_ingredient(self):
        response = self.client.post('/api/stock/ingredients/', {
            'name': 'Tomate', 'unit': 'kg', 'min_stock': '2', 'cost_per_unit': '6.00'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Ingredient.objects.get(pk=response.data['id']).tenant, self.tenant)

    def test_low_stock_filter(self):
        response = self.client.get('/api/stock/ingredients/', {'low_stock': '1'})
        self.assertEqual([item['name'] for item in response.data['results']], ['Farinha'])
        self.assertTrue(response.data['results'][0]['is_low_stock'])

    def test_summary(self):
        response = self.client.get('/api/stock/ingredients/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_ingredients'], 2)
        self.assertEqual(response.data['total_value'], Decimal('72.00'))
        self.assertEqual(response.data['low_stock_count'], 1)
        self.assertEqual(response.data['low_stock_items'][0]['name'], 'Farinha')

    def test_delete_unused_ingredient(self):
        response = self.client.delete(f'/api/stock/ingredients/{self.oil.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Ingredient.objects.filter(pk=self.oil.pk).exists())

    def test_delete_ingredient_with_history_deactivates(self):
        self.client.post('/api/stock/movements/register/', {
            'ingredient': self.oil.pk, 'movement_type': 'entry', 'quantity': '1'
        }, format='json')
        response = self.client.delete(f'/api/stock/ingredients/{self.oil.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.oil.refresh_from_db()
        self.assertFalse(self.oil.is_active)

    def test_stock_role_access(self):
        self.login_as(create_user(self.tenant, 'stock'))
        self.assertEqual(self.client.get('/api/stock/ingredients/').status_code, status.HTTP_200_OK)

    def test_cashier_has_no_stock_access(self):
        self.login_as(create_user(self.tenant, 'cashier'))
        self.assertEqual(self.client.get('/api/stock/ingredients/').status_code, status.HTTP_403_FORBIDDEN)


class RecipeTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.flour = Ingredient.objects.create(tenant=self.tenant, name='Farinha', unit='kg', cost_per_unit=Decimal('4.00'))
        self.cheese = Ingredient.objects.create(tenant=self.tenant, name='Queijo', unit='kg', cost_per_unit=Decimal('40.00'))

    def test_create_recipe(self):
        response = self.client.post('/api/stock/recipes/', {
            'product': self.pizza.pk,
            'items': [
                {'ingredient': self.flour.pk, 'quantity': '0.300'},
                {'ingredient': self.cheese.pk, 'quantity': '0.200'},
            ],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['items']), 2)
        self.assertEqual(Decimal(response.data['unit_cost']), Decimal('9.2'))

        recipe = Recipe.objects.get(pk=response.data['id'])
        self.assertEqual(recipe.tenant, self.tenant)
        self.assertIsNone(recipe.variation)

    def test_duplicate_recipe(self):
        Recipe.objects.create(tenant=self.tenant, product=self.pizza)
        response = self.client.post('/api/stock/recipes/', {
            'product': self.pizza.pk,
            'items': [{'ingredient': self.flour.pk, 'quantity': '1'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_replace_recipe_items(self):
        response = self.client.post('/api/stock/recipes/', {
            'product': self.pizza.pk,
            'items': [{'ingredient': self.flour.pk, 'quantity': '0.300'}],
        }, format='json')
        recipe_id = response.data['id']

        response = self.client.patch(f'/api/stock/recipes/{recipe_id}/', {
            'items': [{'ingredient': self.cheese.pk, 'quantity': '0.250'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['ingredient_name'] for item in response.data['items']], ['Queijo'])

    def test_product_edit_keeps_variation_recipes(self):
        large = ProductVariation.objects.create(product=self.pizza, name='Grande', price_modifier=Decimal('10.00'))
        small = ProductVariation.objects.create(product=self.pizza, name='Broto', price_modifier=Decimal('-5.00'))
        recipe = Recipe.objects.create(tenant=self.tenant, product=self.pizza, variation=large)
        RecipeItem.objects.create(recipe=recipe, ingredient=self.cheese, quantity=Decimal('0.300'))

        response = self.client.patch(f'/api/products/{self.pizza.pk}/', {
            'variations': [
                {'name': 'Grande', 'price_modifier': '12.00'},
                {'name': 'Família', 'price_modifier': '20.00'},
            ],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        large.refresh_from_db()
        self.assertEqual(large.price_modifier, Decimal('12.00'))
        self.assertTrue(Recipe.objects.filter(pk=recipe.pk, variation=large).exists())
        small.refresh_from_db()
        self.assertFalse(small.is_active)
        self.assertEqual(self.pizza.variations.filter(is_active=True).count(), 2)

        response = self.client.patch(f'/api/products/{self.pizza.pk}/', {
            'variations': [{'id': large.pk, 'name': 'Grande (8 fatias)', 'price_modifier': '12.00'}],
        }, format='json')
        large.refresh_from_db()
        self.assertEqual(large.name, 'Grande (8 fatias)')
        self.assertEqual(Recipe.objects.filter(variation=large).count(), 1)
