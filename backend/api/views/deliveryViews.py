from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from ..mixins import TenantScopedMixin
from ..models import Courier, Delivery
from ..permissions import HasModuleAccess, IsCourier, IsTenantMember, TENANT_PERMISSIONS
from ..serializers import (
    AssignCourierSerializer,
    CourierSerializer,
    DeliverySerializer,
    DeliveryStatusSerializer,
)
from ..services.delivery_service import DeliveryService


class DeliveryViewSet(TenantScopedMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin,
                      mixins.UpdateModelMixin, viewsets.GenericViewSet):
    """
    Deliveries of the tenant. Delivery users only see the deliveries
    assigned to their own courier profile.
    """
    queryset = Delivery.objects.select_related('order', 'courier')
    serializer_class = DeliverySerializer
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'deliveries'
    read_areas = ('orders',)
    required_module = 'delivery'
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'courier']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user
        if user.role == 'delivery':
            courier = getattr(user, 'courier_profile', None)
            return queryset.filter(courier=courier) if courier else queryset.none()
        store = self.get_active_store()
        if store is not None:
            queryset = queryset.filter(order__store=store)
        return queryset

    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        delivery = self.get_object()
        if request.user.role == 'delivery':
            return Response({'error': 'Couriers cannot reassign deliveries.'}, status=status.HTTP_403_FORBIDDEN)

        serializer = AssignCourierSerializer(data=request.data, context=self.get_serializer_context())
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        delivery = DeliveryService.assign_courier(delivery, serializer.validated_data['courier'], user=request.user)
        return Response(self.get_serializer(delivery).data)

    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        delivery = self.get_object()
        serializer = DeliveryStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        delivery = DeliveryService.update_status(
            delivery,
            serializer.validated_data['status'],
            user=request.user,
            reason=serializer.validated_data['reason'],
        )
        return Response(self.get_serializer(delivery).data)

    @action(detail=True, methods=['post'])
    def advance(self, request, pk=None):
        delivery = self.get_object()
        next_action = DeliveryService.get_next_action(delivery)
        if next_action is None:
            return Response(
                {'error': f"Delivery in status '{delivery.status}' has no next status."},
                status=status.HTTP_409_CONFLICT
            )
        delivery = DeliveryService.update_status(delivery, next_action['status'], user=request.user)
        return Response(self.get_serializer(delivery).data)


class CourierViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    queryset = Courier.objects.select_related('user')
    serializer_class = CourierSerializer
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'deliveries'
    read_areas = ('orders',)
    required_module = 'delivery'
    filterset_fields = ['is_active', 'is_available']

    def destroy(self, request, *args, **kwargs):
        courier = self.get_object()
        courier.is_active = False
        courier.is_available = False
        courier.save(update_fields=['is_active', 'is_available'])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def toggle_availability(self, request, pk=None):
        courier = self.get_object()
        courier.is_available = not courier.is_available
        courier.save(update_fields=['is_available'])
        return Response(self.get_serializer(courier).data)


class CourierTodayView(APIView):
    """Deliveries of today for the logged-in courier."""
    permission_classes = [IsAuthenticated, IsTenantMember, IsCourier, HasModuleAccess]
    required_module = 'delivery'

    def get(self, request):
        courier = request.user.courier_profile
        deliveries = DeliveryService.get_courier_today(courier)
        return Response({
            'courier': CourierSerializer(courier).data,
            'deliveries': DeliverySerializer(deliveries, many=True).data,
        })


class CourierStatsView(APIView):
    permission_classes = [IsAuthenticated, IsTenantMember, IsCourier, HasModuleAccess]
    required_module = 'delivery'

    def get(self, request):
        return Response(DeliveryService.get_courier_stats(request.user.courier_profile))
