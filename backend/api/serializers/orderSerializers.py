from rest_framework import serializers

from ..models import (
    Order,
    OrderItem,
    OrderItemAddon,
    OrderStatusHistory,
    Payment,
    Product,
    ProductAddon,
    ProductVariation,
    Store,
)
from ..services.order_service import OrderService
from .catalogSerializers import TenantOwnedRelatedField


class OrderItemAddonSerializer(serializers.ModelSerializer):
    total_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItemAddon
        fields = ['id', 'addon', 'addon_name', 'quantity', 'unit_price', 'total_price']


class OrderItemSerializer(serializers.ModelSerializer):
    addons = OrderItemAddonSerializer(many=True, read_only=True)
    kitchen_status = serializers.CharField(source='kitchen_ticket.status', read_only=True, default=None)

    class Meta:
        model = OrderItem
        fields = [
            'id', 'product', 'variation', 'product_name', 'variation_name', 'quantity',
            'unit_price', 'total_price', 'notes', 'addons', 'kitchen_status'
        ]


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    changed_by_name = serializers.CharField(source='changed_by.get_full_name', read_only=True, default=None)

    class Meta:
        model = OrderStatusHistory
        fields = ['id', 'status', 'previous_status', 'notes', 'changed_by', 'changed_by_name', 'created_at']


class PaymentSerializer(serializers.ModelSerializer):
    payment_method_display = serializers.CharField(source='get_payment_method_display', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'payment_method', 'payment_method_display', 'status', 'amount', 'transaction_id', 'paid_at', 'created_at']


class OrderSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)
    status_history = OrderStatusHistorySerializer(many=True, read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True, default=None)
    delivery_status = serializers.SerializerMethodField()
    next_action = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_uuid', 'order_number', 'origin', 'status', 'status_display',
            'store', 'store_name', 'table_session', 'customer_name', 'customer_phone',
            'is_delivery', 'delivery_address', 'delivery_neighborhood', 'delivery_city',
            'subtotal', 'delivery_fee', 'discount', 'total', 'notes', 'estimated_time_minutes',
            'cancellation_reason', 'items', 'payments', 'status_history', 'delivery_status',
            'next_action', 'created_by', 'created_at', 'updated_at', 'paid_at', 'confirmed_at',
            'preparing_at', 'ready_at', 'out_for_delivery_at', 'delivered_at', 'cancelled_at'
        ]
        read_only_fields = fields

    def get_delivery_status(self, obj):
        delivery = getattr(obj, 'delivery', None) if obj.is_delivery else None
        return delivery.status if delivery else None

    def get_next_action(self, obj):
        return OrderService.get_next_action(obj)


class OrderListSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    item_count = serializers.SerializerMethodField()
    next_action = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_uuid', 'order_number', 'origin', 'status', 'status_display', 'store',
            'customer_name', 'is_delivery', 'total', 'item_count', 'next_action', 'created_at'
        ]

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())

    def get_next_action(self, obj):
        return OrderService.get_next_action(obj)


class OrderItemAddonInputSerializer(serializers.Serializer):
    addon = serializers.PrimaryKeyRelatedField(queryset=ProductAddon.objects.filter(is_active=True))
    quantity = serializers.IntegerField(min_value=1, default=1)


class OrderItemInputSerializer(serializers.Serializer):
    product = TenantOwnedRelatedField(queryset=Product.objects.filter(is_active=True))
    variation = serializers.PrimaryKeyRelatedField(
        queryset=ProductVariation.objects.filter(is_active=True),
        required=False,
        allow_null=True
    )
    quantity = serializers.IntegerField(min_value=1, default=1)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    addons = OrderItemAddonInputSerializer(many=True, required=False, default=list)

    def validate(self, attrs):
        product = attrs['product']
        variation = attrs.get('variation')
        if variation is not None and variation.product_id != product.pk:
            raise serializers.ValidationError({'variation': 'Variation does not belong to this product.'})
        for addon_data in attrs.get('addons', []):
            if addon_data['addon'].product_id != product.pk:
                raise serializers.ValidationError({'addons': 'Addon does not belong to this product.'})
        if not product.is_available:
            raise serializers.ValidationError({'product': f"{product.name} is not available."})
        return attrs


class OrderCreateSerializer(serializers.Serializer):
    """
    POS order input. Prices are not accepted from the client; they are read
    from the catalog when the order is created.
    """
    origin = serializers.ChoiceField(choices=Order.ORIGIN_CHOICES, default='pos')
    status = serializers.ChoiceField(choices=[('paid', 'Paid'), ('pending_payment', 'Pending Payment')], default='paid')
    payment_method = serializers.ChoiceField(choices=Payment.PAYMENT_METHOD_CHOICES, default='cash')
    store = TenantOwnedRelatedField(queryset=Store.objects.filter(is_active=True), required=False, allow_null=True)
    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    customer_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    is_delivery = serializers.BooleanField(default=False)
    delivery_address = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    delivery_neighborhood = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    delivery_city = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    delivery_fee = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=0)
    discount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=0)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    estimated_time_minutes = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    items = OrderItemInputSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('An order needs at least one item.')
        return value

    def validate(self, attrs):
        if attrs.get('is_delivery') and not attrs.get('delivery_address'):
            raise serializers.ValidationError({'delivery_address': 'Delivery orders need an address.'})
        return attrs


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.ORDER_STATUS_CHOICES)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class OrderCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
