import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import ValidationError

from ..models import Ingredient, Recipe, StockMovement, Tenant
from .websocket_services import WebSocketService

logger = logging.getLogger(__name__)


class StockService:
    """
    Ingredient ledger: every stock change goes through register_movement.
    """

    INCREASING_TYPES = ('entry', 'reversal')
    DECREASING_TYPES = ('exit', 'loss')

    @staticmethod
    def register_movement(ingredient, movement_type, quantity, reason='', user=None, order=None, unit_cost=None):
        """
        Apply a movement to an ingredient and write the ledger row.

        entry/reversal add, exit/loss subtract, adjustment sets the absolute
        stock level. The ingredient row is locked for the duration.
        """
        quantity = Decimal(str(quantity))
        if movement_type not in dict(StockMovement.MOVEMENT_TYPE_CHOICES):
            raise ValidationError({'movement_type': f"Unknown movement type '{movement_type}'."})
        if quantity < 0 or (quantity == 0 and movement_type != 'adjustment'):
            raise ValidationError({'quantity': 'Quantity must be greater than zero.'})

        with transaction.atomic():
            locked = Ingredient.objects.select_for_update().get(pk=ingredient.pk)
            previous_stock = locked.current_stock

            if movement_type in StockService.INCREASING_TYPES:
                new_stock = previous_stock + quantity
            elif movement_type in StockService.DECREASING_TYPES:
                new_stock = previous_stock - quantity
            else:
                new_stock = quantity

            locked.current_stock = new_stock
            locked.save(update_fields=['current_stock', 'updated_at'])

            movement = StockMovement.objects.create(
                tenant_id=locked.tenant_id,
                ingredient=locked,
                movement_type=movement_type,
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=new_stock,
                unit_cost=unit_cost if unit_cost is not None else locked.cost_per_unit,
                order=order,
                reason=reason,
                created_by=user,
            )

        ingredient.current_stock = new_stock
        if new_stock < 0:
            logger.warning(f"Ingredient {locked.name} ({locked.pk}) went negative: {new_stock}")
        if previous_stock > locked.min_stock >= new_stock:
            StockService.notify_low_stock(locked)

        return movement

    @staticmethod
    def notify_low_stock(ingredient):
        logger.warning(
            f"Low stock for tenant {ingredient.tenant_id}: {ingredient.name} "
            f"{ingredient.current_stock}/{ingredient.min_stock} {ingredient.unit}"
        )
        WebSocketService.broadcast_to_tenant(ingredient.tenant_id, 'low_stock', {
            'ingredient_id': ingredient.pk,
            'name': ingredient.name,
            'current_stock': str(ingredient.current_stock),
            'min_stock': str(ingredient.min_stock),
            'unit': ingredient.unit,
        })

    @staticmethod
    def find_recipe(product_id, variation_id=None):
        """Variation recipe first, then the product's variation-less recipe."""
        recipes = Recipe.objects.filter(product_id=product_id, is_active=True)
        if variation_id:
            recipe = recipes.filter(variation_id=variation_id).first()
            if recipe:
                return recipe
        return recipes.filter(variation__isnull=True).first()

    @staticmethod
    def reduce_stock_for_order(order, user=None):
        """
        Consume the recipe ingredients of every order item.

        Items without a recipe are skipped. Failures are collected in
        `errors` and never abort the sale.
        """
        result = {'reduced_items': [], 'errors': []}

        for item in order.items.select_related('product', 'variation'):
            if not item.product_id:
                continue
            recipe = StockService.find_recipe(item.product_id, item.variation_id)
            if recipe is None:
                continue

            for recipe_item in recipe.items.select_related('ingredient'):
                quantity = recipe_item.quantity * item.quantity
                try:
                    StockService.register_movement(
                        recipe_item.ingredient,
                        'exit',
                        quantity,
                        reason=f"Venda - Pedido #{order.order_number}",
                        user=user,
                        order=order,
                    )
                    result['reduced_items'].append({
                        'ingredient_id': recipe_item.ingredient_id,
                        'ingredient_name': recipe_item.ingredient.name,
                        'quantity': str(quantity),
                        'product_name': item.product_name,
                    })
                except Exception as e:
                    logger.error(
                        f"Stock reduction failed for order {order.pk}, ingredient {recipe_item.ingredient_id}: {str(e)}"
                    )
                    result['errors'].append({
                        'ingredient_id': recipe_item.ingredient_id,
                        'product_name': item.product_name,
                        'error': str(e),
                    })

        if result['reduced_items']:
            logger.info(f"Order #{order.order_number} consumed {len(result['reduced_items'])} ingredient lines")
        return result

    @staticmethod
    def reverse_stock_for_order(order, user=None):
        """
        Return every ingredient consumed by an order. Running it twice is a no-op.
        """
        result = {'reversed_items': [], 'errors': []}

        if order.stock_movements.filter(movement_type='reversal').exists():
            return result

        exits = order.stock_movements.filter(movement_type='exit').select_related('ingredient')
        for movement in exits:
            try:
                StockService.register_movement(
                    movement.ingredient,
                    'reversal',
                    movement.quantity,
                    reason=f"Estorno - Pedido #{order.order_number} cancelado",
                    user=user,
                    order=order,
                    unit_cost=movement.unit_cost,
                )
                result['reversed_items'].append({
                    'ingredient_id': movement.ingredient_id,
                    'quantity': str(movement.quantity),
                })
            except Exception as e:
                logger.error(f"Stock reversal failed for order {order.pk}, movement {movement.pk}: {str(e)}")
                result['errors'].append({'movement_id': movement.pk, 'error': str(e)})

        return result

    @staticmethod
    def get_stock_summary(tenant):
        ingredients = Ingredient.objects.filter(tenant=tenant, is_active=True)
        total_value = sum((ingredient.stock_value for ingredient in ingredients), Decimal('0'))
        low_stock = ingredients.filter(current_stock__lte=F('min_stock'))

        return {
            'total_ingredients': ingredients.count(),
            'total_value': round(total_value, 2),
            'low_stock_count': low_stock.count(),
            'low_stock_items': [
                {
                    'id': ingredient.pk,
                    'name': ingredient.name,
                    'current_stock': ingredient.current_stock,
                    'min_stock': ingredient.min_stock,
                    'unit': ingredient.unit,
                }
                for ingredient in low_stock
            ],
        }

    @staticmethod
    def check_low_stock_levels():
        """
        Sweep every active tenant and broadcast its low-stock list.
        Returns the number of tenants with at least one low item.
        """
        tenants_alerted = 0
        for tenant in Tenant.objects.filter(is_active=True):
            low_stock = list(
                Ingredient.objects.filter(tenant=tenant, is_active=True, current_stock__lte=F('min_stock'))
                .values('id', 'name', 'current_stock', 'min_stock', 'unit')
            )
            if not low_stock:
                continue
            tenants_alerted += 1
            logger.warning(f"Tenant {tenant.slug} has {len(low_stock)} ingredients at or below minimum stock")
            WebSocketService.broadcast_to_tenant(tenant.pk, 'low_stock_summary', {
                'count': len(low_stock),
                'items': [
                    {**item, 'current_stock': str(item['current_stock']), 'min_stock': str(item['min_stock'])}
                    for item in low_stock
                ],
            })
        return tenants_alerted
