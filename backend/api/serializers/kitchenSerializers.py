from django.utils import timezone
from rest_framework import serializers

from ..models import Category, KitchenDisplayConfig, KitchenStation, KitchenTicket
from .catalogSerializers import TenantOwnedRelatedField


class KitchenDisplayConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = KitchenDisplayConfig
        fields = [
            'display_mode', 'auto_advance', 'alert_threshold_minutes', 'show_customer_name',
            'sound_enabled', 'group_by_category', 'updated_at'
        ]
        read_only_fields = ['updated_at']


class KitchenStationSerializer(serializers.ModelSerializer):
    categories = TenantOwnedRelatedField(queryset=Category.objects.all(), many=True, required=False)
    open_tickets = serializers.SerializerMethodField()

    class Meta:
        model = KitchenStation
        fields = ['id', 'name', 'store', 'categories', 'color', 'display_order', 'is_active', 'open_tickets', 'created_at']
        read_only_fields = ['id', 'created_at']

    def get_open_tickets(self, obj):
        return obj.tickets.filter(status__in=KitchenTicket.OPEN_STATUSES).count()


class KitchenTicketSerializer(serializers.ModelSerializer):
    order_number = serializers.IntegerField(source='order.order_number', read_only=True)
    order_status = serializers.CharField(source='order.status', read_only=True)
    customer_name = serializers.SerializerMethodField()
    product_name = serializers.CharField(source='order_item.product_name', read_only=True)
    variation_name = serializers.CharField(source='order_item.variation_name', read_only=True)
    quantity = serializers.IntegerField(source='order_item.quantity', read_only=True)
    station_name = serializers.CharField(source='station.name', read_only=True, default=None)
    age_minutes = serializers.SerializerMethodField()

    class Meta:
        model = KitchenTicket
        fields = [
            'id', 'order', 'order_number', 'order_status', 'customer_name', 'order_item',
            'product_name', 'variation_name', 'quantity', 'notes', 'station', 'station_name',
            'status', 'priority', 'age_minutes', 'created_at', 'started_at', 'completed_at', 'bumped_at'
        ]
        read_only_fields = fields

    def get_customer_name(self, obj):
        config = self.context.get('kitchen_config')
        if config is not None and not config.show_customer_name:
            return None
        return obj.order.customer_name

    def get_age_minutes(self, obj):
        return int((timezone.now() - obj.created_at).total_seconds() // 60)


class TicketStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        choice for choice in KitchenTicket.STATUS_CHOICES if choice[0] != 'cancelled'
    ])


class TicketPrioritySerializer(serializers.Serializer):
    priority = serializers.IntegerField(min_value=0, max_value=10)
