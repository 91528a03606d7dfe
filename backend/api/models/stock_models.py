from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator


class Ingredient(models.Model):
    UNIT_CHOICES = (
        ('kg', 'Kilogram'),
        ('g', 'Gram'),
        ('ml', 'Millilitre'),
        ('l', 'Litre'),
        ('un', 'Unit'),
    )

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='ingredients')
    name = models.CharField(max_length=200)
    unit = models.CharField(max_length=5, choices=UNIT_CHOICES, default='un')
    current_stock = models.DecimalField(max_digits=12, decimal_places=3, default=0)
    min_stock = models.DecimalField(max_digits=12, decimal_places=3, default=0, validators=[MinValueValidator(0)])
    cost_per_unit = models.DecimalField(max_digits=10, decimal_places=4, default=0, validators=[MinValueValidator(0)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'ingredients'
        ordering = ['name']
        indexes = [
            models.Index(fields=['tenant', 'is_active'], name='ingredients_tenant_is_acti_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.current_stock} {self.unit})"

    @property
    def is_low_stock(self):
        return self.current_stock <= self.min_stock

    @property
    def stock_value(self):
        return Decimal(self.current_stock) * Decimal(self.cost_per_unit)


class Recipe(models.Model):
    """Technical sheet: ingredients consumed by one unit of a product."""
    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='recipes')
    product = models.ForeignKey('api.Product', on_delete=models.CASCADE, related_name='recipes')
    variation = models.ForeignKey(
        'api.ProductVariation',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='recipes'
    )
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'recipes'
        unique_together = ['product', 'variation']

    def __str__(self):
        if self.variation_id:
            return f"Recipe: {self.product.name} - {self.variation.name}"
        return f"Recipe: {self.product.name}"

    @property
    def unit_cost(self):
        return sum(
            (item.quantity * item.ingredient.cost_per_unit for item in self.items.select_related('ingredient')),
            Decimal('0')
        )


class RecipeItem(models.Model):
    recipe = models.ForeignKey('api.Recipe', on_delete=models.CASCADE, related_name='items')
    ingredient = models.ForeignKey('api.Ingredient', on_delete=models.PROTECT, related_name='recipe_items')
    quantity = models.DecimalField(max_digits=12, decimal_places=4, validators=[MinValueValidator(0)])

    class Meta:
        db_table = 'recipe_items'
        unique_together = ['recipe', 'ingredient']

    def __str__(self):
        return f"{self.quantity} {self.ingredient.unit} {self.ingredient.name}"


class StockMovement(models.Model):
    MOVEMENT_TYPE_CHOICES = (
        ('entry', 'Entry'),
        ('exit', 'Exit'),
        ('adjustment', 'Adjustment'),
        ('reversal', 'Reversal'),
        ('loss', 'Loss'),
    )

    tenant = models.ForeignKey('api.Tenant', on_delete=models.CASCADE, related_name='stock_movements')
    ingredient = models.ForeignKey('api.Ingredient', on_delete=models.CASCADE, related_name='movements')
    movement_type = models.CharField(max_length=20, choices=MOVEMENT_TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    previous_stock = models.DecimalField(max_digits=12, decimal_places=3)
    new_stock = models.DecimalField(max_digits=12, decimal_places=3)
    unit_cost = models.DecimalField(max_digits=10, decimal_places=4, null=True, blank=True)
    order = models.ForeignKey(
        'api.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_movements'
    )
    reason = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        'api.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_movements'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'created_at'], name='stock_movements_tenant_cre_idx'),
            models.Index(fields=['order', 'movement_type'], name='stock_movements_order_move_idx'),
        ]

    def __str__(self):
        return f"{self.get_movement_type_display()} {self.quantity} {self.ingredient.name}"
