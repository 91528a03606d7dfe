from rest_framework import serializers

from ..models import Payment, Product, ProductVariation, ServiceCall, Table, TableSession, TableSessionItem
from .catalogSerializers import TenantOwnedRelatedField


class TableSessionItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = TableSessionItem
        fields = [
            'id', 'product', 'variation', 'product_name', 'quantity', 'unit_price',
            'total_price', 'status', 'notes', 'added_by', 'created_at'
        ]
        read_only_fields = fields


class TableSessionSerializer(serializers.ModelSerializer):
    table_number = serializers.IntegerField(source='table.number', read_only=True)
    items = TableSessionItemSerializer(many=True, read_only=True)

    class Meta:
        model = TableSession
        fields = [
            'id', 'table', 'table_number', 'status', 'customer_name', 'guests_count',
            'subtotal', 'discount', 'total', 'payment_method', 'notes', 'items',
            'opened_by', 'closed_by', 'opened_at', 'closed_at'
        ]
        read_only_fields = fields


class TableSerializer(serializers.ModelSerializer):
    active_session = serializers.SerializerMethodField()

    class Meta:
        model = Table
        fields = ['id', 'number', 'name', 'capacity', 'store', 'qr_code_url', 'is_active', 'active_session', 'created_at']
        read_only_fields = ['id', 'qr_code_url', 'created_at']

    def get_active_session(self, obj):
        session = obj.active_session
        if session is None:
            return None
        return {
            'id': session.pk,
            'customer_name': session.customer_name,
            'guests_count': session.guests_count,
            'total': str(session.total),
            'opened_at': session.opened_at,
        }

    def validate_number(self, value):
        tenant = self.context.get('tenant')
        queryset = Table.objects.filter(tenant=tenant, number=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if tenant is not None and queryset.exists():
            raise serializers.ValidationError('A table with this number already exists.')
        return value

    def validate_store(self, value):
        tenant = self.context.get('tenant')
        if value is not None and tenant is not None and value.tenant_id != tenant.pk:
            raise serializers.ValidationError('Store does not belong to your tenant.')
        return value


class OpenSessionSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    guests_count = serializers.IntegerField(min_value=1, default=1)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class AddSessionItemSerializer(serializers.Serializer):
    product = TenantOwnedRelatedField(queryset=Product.objects.filter(is_active=True))
    variation = serializers.PrimaryKeyRelatedField(
        queryset=ProductVariation.objects.filter(is_active=True),
        required=False,
        allow_null=True
    )
    quantity = serializers.IntegerField(min_value=1, default=1)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        variation = attrs.get('variation')
        if variation is not None and variation.product_id != attrs['product'].pk:
            raise serializers.ValidationError({'variation': 'Variation does not belong to this product.'})
        return attrs


class SessionItemStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TableSessionItem.STATUS_CHOICES)


class CloseSessionSerializer(serializers.Serializer):
    discount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=0)
    payment_method = serializers.ChoiceField(choices=Payment.PAYMENT_METHOD_CHOICES, required=False, allow_null=True)


class ServiceCallSerializer(serializers.ModelSerializer):
    table_number = serializers.IntegerField(source='table.number', read_only=True, default=None)
    call_type_display = serializers.CharField(source='get_call_type_display', read_only=True)

    class Meta:
        model = ServiceCall
        fields = [
            'id', 'table', 'table_number', 'session', 'call_type', 'call_type_display', 'status',
            'priority', 'notes', 'acknowledged_by', 'acknowledged_at', 'response_time_seconds',
            'resolved_by', 'resolved_at', 'escalated_at', 'escalation_level', 'created_at'
        ]
        read_only_fields = fields


class PublicServiceCallSerializer(serializers.Serializer):
    table = serializers.IntegerField(min_value=1)
    call_type = serializers.ChoiceField(choices=ServiceCall.CALL_TYPE_CHOICES, default='waiter')
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class ResolveServiceCallSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
