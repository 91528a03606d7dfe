from rest_framework import serializers

from ..models import Ingredient, Product, ProductVariation, Recipe, RecipeItem, StockMovement
from .catalogSerializers import TenantOwnedRelatedField


class IngredientSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)
    stock_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Ingredient
        fields = [
            'id', 'name', 'unit', 'current_stock', 'min_stock', 'cost_per_unit',
            'is_active', 'is_low_stock', 'stock_value', 'created_at', 'updated_at'
        ]
        # Stock only changes through movements
        read_only_fields = ['id', 'current_stock', 'created_at', 'updated_at']


class RecipeItemSerializer(serializers.ModelSerializer):
    ingredient = TenantOwnedRelatedField(queryset=Ingredient.objects.all())
    ingredient_name = serializers.CharField(source='ingredient.name', read_only=True)
    unit = serializers.CharField(source='ingredient.unit', read_only=True)

    class Meta:
        model = RecipeItem
        fields = ['id', 'ingredient', 'ingredient_name', 'unit', 'quantity']


class RecipeSerializer(serializers.ModelSerializer):
    product = TenantOwnedRelatedField(queryset=Product.objects.all())
    variation = serializers.PrimaryKeyRelatedField(queryset=ProductVariation.objects.all(), allow_null=True, required=False)
    product_name = serializers.CharField(source='product.name', read_only=True)
    variation_name = serializers.CharField(source='variation.name', read_only=True, default=None)
    items = RecipeItemSerializer(many=True)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=4, read_only=True)

    class Meta:
        model = Recipe
        fields = [
            'id', 'product', 'product_name', 'variation', 'variation_name',
            'notes', 'is_active', 'items', 'unit_cost', 'created_at'
        ]
        read_only_fields = ['id', 'created_at']
        # Duplicates are checked in validate(); variation stays optional
        validators = []

    def validate(self, attrs):
        product = attrs.get('product') or getattr(self.instance, 'product', None)
        variation = attrs.get('variation', getattr(self.instance, 'variation', None))
        if variation is not None and variation.product_id != product.pk:
            raise serializers.ValidationError({'variation': 'Variation does not belong to this product.'})

        duplicates = Recipe.objects.filter(product=product, variation=variation)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('A recipe for this product and variation already exists.')
        return attrs

    def create(self, validated_data):
        items = validated_data.pop('items', [])
        recipe = Recipe.objects.create(**validated_data)
        for item in items:
            RecipeItem.objects.create(recipe=recipe, **item)
        return recipe

    def update(self, instance, validated_data):
        items = validated_data.pop('items', None)
        instance = super().update(instance, validated_data)
        if items is not None:
            instance.items.all().delete()
            for item in items:
                RecipeItem.objects.create(recipe=instance, **item)
        return instance


class StockMovementSerializer(serializers.ModelSerializer):
    ingredient_name = serializers.CharField(source='ingredient.name', read_only=True)
    created_by_name = serializers.CharField(source='created_by.get_full_name', read_only=True, default=None)
    order_number = serializers.IntegerField(source='order.order_number', read_only=True, default=None)

    class Meta:
        model = StockMovement
        fields = [
            'id', 'ingredient', 'ingredient_name', 'movement_type', 'quantity',
            'previous_stock', 'new_stock', 'unit_cost', 'order', 'order_number',
            'reason', 'created_by', 'created_by_name', 'created_at'
        ]
        read_only_fields = fields


class RegisterMovementSerializer(serializers.Serializer):
    ingredient = TenantOwnedRelatedField(queryset=Ingredient.objects.all())
    movement_type = serializers.ChoiceField(choices=StockMovement.MOVEMENT_TYPE_CHOICES)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=4, required=False, allow_null=True)

    def validate(self, attrs):
        if attrs['quantity'] == 0 and attrs['movement_type'] != 'adjustment':
            raise serializers.ValidationError({'quantity': 'Quantity must be greater than zero.'})
        return attrs
