from rest_framework import serializers

from ..models import Category, Product, ProductAddon, ProductVariation, StoreProduct


class TenantOwnedRelatedField(serializers.PrimaryKeyRelatedField):
    """
    Primary key field limited to rows of the tenant in the serializer context.
    """
    tenant_lookup = 'tenant'

    def get_queryset(self):
        queryset = super().get_queryset()
        tenant = self.context.get('tenant')
        if tenant is None:
            return queryset.none()
        return queryset.filter(**{self.tenant_lookup: tenant})


class CategorySerializer(serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'display_order', 'is_active', 'product_count', 'created_at']
        read_only_fields = ['id', 'created_at']

    def get_product_count(self, obj):
        return obj.products.filter(is_active=True).count()


class ProductVariationSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(required=False)

    class Meta:
        model = ProductVariation
        fields = ['id', 'name', 'price_modifier', 'is_active']


class ProductAddonSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(required=False)

    class Meta:
        model = ProductAddon
        fields = ['id', 'name', 'price', 'is_active']


def sync_product_rows(product, manager, model, rows):
    """
    Upserts nested variation/addon rows by id, falling back to the name.
    Rows left out are deactivated; recipes and past orders still point at them.
    """
    existing = {row.pk: row for row in manager.all()}
    by_name = {row.name: row for row in existing.values()}
    kept = set()
    for data in rows:
        data = dict(data)
        row = existing.get(data.pop('id', None)) or by_name.get(data.get('name'))
        if row is None or row.pk in kept:
            row = model.objects.create(product=product, **data)
        else:
            data.setdefault('is_active', True)
            for field, value in data.items():
                setattr(row, field, value)
            row.save()
        kept.add(row.pk)
    manager.exclude(pk__in=kept).update(is_active=False)


class ProductSerializer(serializers.ModelSerializer):
    category = TenantOwnedRelatedField(queryset=Category.objects.all(), allow_null=True, required=False)
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    variations = ProductVariationSerializer(many=True, required=False)
    addons = ProductAddonSerializer(many=True, required=False)

    class Meta:
        model = Product
        fields = [
            'id', 'category', 'category_name', 'name', 'description', 'sku', 'base_price',
            'image_url', 'is_available', 'is_active', 'display_order',
            'variations', 'addons', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def create(self, validated_data):
        variations = validated_data.pop('variations', [])
        addons = validated_data.pop('addons', [])
        product = Product.objects.create(**validated_data)
        sync_product_rows(product, product.variations, ProductVariation, variations)
        sync_product_rows(product, product.addons, ProductAddon, addons)
        return product

    def update(self, instance, validated_data):
        variations = validated_data.pop('variations', None)
        addons = validated_data.pop('addons', None)
        instance = super().update(instance, validated_data)
        if variations is not None:
            sync_product_rows(instance, instance.variations, ProductVariation, variations)
        if addons is not None:
            sync_product_rows(instance, instance.addons, ProductAddon, addons)
        return instance


class StoreProductSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    base_price = serializers.DecimalField(source='product.base_price', max_digits=10, decimal_places=2, read_only=True)
    effective_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = StoreProduct
        fields = [
            'id', 'store', 'product', 'product_name', 'base_price', 'price_override',
            'effective_price', 'is_available', 'stock_quantity', 'updated_at'
        ]
        read_only_fields = ['id', 'updated_at']

    def validate(self, attrs):
        tenant = self.context.get('tenant')
        store = attrs.get('store') or getattr(self.instance, 'store', None)
        product = attrs.get('product') or getattr(self.instance, 'product', None)
        if tenant is not None and (store.tenant_id != tenant.pk or product.tenant_id != tenant.pk):
            raise serializers.ValidationError('Store and product must belong to your tenant.')
        return attrs


class PublicProductSerializer(serializers.ModelSerializer):
    variations = serializers.SerializerMethodField()
    addons = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'name', 'description', 'base_price', 'image_url', 'variations', 'addons']

    def get_variations(self, obj):
        return ProductVariationSerializer(obj.variations.filter(is_active=True), many=True).data

    def get_addons(self, obj):
        return ProductAddonSerializer(obj.addons.filter(is_active=True), many=True).data
