from rest_framework import serializers

from ..models import Courier, Delivery, User
from ..services.delivery_service import DeliveryService
from .catalogSerializers import TenantOwnedRelatedField


class CourierSerializer(serializers.ModelSerializer):
    user = TenantOwnedRelatedField(queryset=User.objects.filter(role='delivery'), required=False, allow_null=True)

    class Meta:
        model = Courier
        fields = ['id', 'user', 'name', 'phone', 'vehicle_type', 'vehicle_plate', 'is_active', 'is_available', 'created_at']
        read_only_fields = ['id', 'created_at']


class DeliverySerializer(serializers.ModelSerializer):
    order_number = serializers.IntegerField(source='order.order_number', read_only=True)
    order_status = serializers.CharField(source='order.status', read_only=True)
    customer_name = serializers.CharField(source='order.customer_name', read_only=True)
    customer_phone = serializers.CharField(source='order.customer_phone', read_only=True)
    order_total = serializers.DecimalField(source='order.total', max_digits=10, decimal_places=2, read_only=True)
    courier_name = serializers.CharField(source='courier.name', read_only=True, default=None)
    next_action = serializers.SerializerMethodField()

    class Meta:
        model = Delivery
        fields = [
            'id', 'order', 'order_number', 'order_status', 'customer_name', 'customer_phone',
            'order_total', 'courier', 'courier_name', 'status', 'address', 'neighborhood', 'city',
            'delivery_fee', 'notes', 'failure_reason', 'next_action', 'assigned_at',
            'picked_up_at', 'delivered_at', 'failed_at', 'created_at'
        ]
        read_only_fields = [field for field in fields if field != 'notes']

    def get_next_action(self, obj):
        return DeliveryService.get_next_action(obj)


class AssignCourierSerializer(serializers.Serializer):
    courier = TenantOwnedRelatedField(queryset=Courier.objects.filter(is_active=True))


class DeliveryStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        choice for choice in Delivery.STATUS_CHOICES if choice[0] not in ('pending', 'assigned')
    ])
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
