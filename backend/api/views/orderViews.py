import logging

from django.db.models import Q
from django_filters import rest_framework as django_filters
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from ..mixins import TenantScopedMixin
from ..models import Order
from ..permissions import TENANT_PERMISSIONS
from ..serializers import (
    OrderCancelSerializer,
    OrderCreateSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
)
from ..services.order_service import OrderService
from ..services.subscription_service import SubscriptionService
from ..throttles import PublicEndpointThrottle

logger = logging.getLogger(__name__)


class OrderFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')
    q = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Order
        fields = ['status', 'origin', 'store', 'is_delivery', 'table_session']

    def filter_search(self, queryset, name, value):
        value = value.strip().lstrip('#')
        if value.isdigit():
            return queryset.filter(Q(order_number=int(value)) | Q(customer_phone__icontains=value))
        return queryset.filter(customer_name__icontains=value)


class OrderViewSet(TenantScopedMixin, mixins.CreateModelMixin, mixins.ListModelMixin,
                   mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Orders of the tenant. Orders are created from the POS and then moved
    along the status lifecycle through `advance`, `status` and `cancel`.
    """
    queryset = (
        Order.objects
        .select_related('store', 'delivery')
        .prefetch_related('items__addons', 'items__kitchen_ticket', 'payments', 'status_history')
    )
    permission_classes = TENANT_PERMISSIONS
    read_areas = ('kitchen', 'deliveries', 'reports')
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = OrderFilter
    ordering_fields = ['created_at', 'order_number', 'total']
    ordering = ['-created_at']

    @property
    def permission_area(self):
        return 'pos' if self.action == 'create' else 'orders'

    @property
    def required_module(self):
        return 'pos' if self.action == 'create' else None

    def get_serializer_class(self):
        if self.action == 'create':
            return OrderCreateSerializer
        if self.action == 'list':
            return OrderListSerializer
        return OrderSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        store = self.get_active_store()
        if store is not None:
            queryset = queryset.filter(store=store)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        tenant = self.get_tenant()
        SubscriptionService.check_limit(tenant, 'orders_per_month')

        data = serializer.validated_data
        store = data.pop('store', None) or self.get_active_store() or request.user.store
        unavailable = [item['product'].name for item in data['items'] if not item['product'].is_available_at(store)]
        if unavailable:
            return Response(
                {'items': [f"{name} is not available at this store." for name in unavailable]},
                status=status.HTTP_400_BAD_REQUEST
            )
        order, stock_result = OrderService.create_order(tenant, data, user=request.user, store=store)

        payload = OrderSerializer(order, context=self.get_serializer_context()).data
        payload['stock'] = stock_result
        return Response(payload, status=status.HTTP_201_CREATED)

    def _detail_response(self, order):
        # Reload so prefetched items and history reflect the change
        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order, context=self.get_serializer_context()).data)

    @action(detail=True, methods=['post'])
    def advance(self, request, pk=None):
        order = self.get_object()
        OrderService.advance(order, user=request.user, notes=request.data.get('notes', ''))
        return self._detail_response(order)

    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        order = self.get_object()
        serializer = OrderStatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        OrderService.set_status(
            order,
            serializer.validated_data['status'],
            user=request.user,
            notes=serializer.validated_data['notes'],
        )
        return self._detail_response(order)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        order = self.get_object()
        serializer = OrderCancelSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        OrderService.cancel_order(order, user=request.user, reason=serializer.validated_data['reason'])
        logger.info(f"Order #{order.order_number} cancelled by user {request.user.pk}")
        return self._detail_response(order)


class PublicOrderTrackingView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicEndpointThrottle]

    def get(self, request, tenant_slug, order_number):
        try:
            tracking = OrderService.get_public_tracking(tenant_slug, order_number)
        except Order.DoesNotExist:
            return Response({'error': 'Order not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(tracking)
