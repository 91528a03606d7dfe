from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from ..mixins import TenantScopedMixin
from ..models import KitchenStation, KitchenTicket, Order
from ..permissions import TENANT_PERMISSIONS
from ..serializers import (
    KitchenDisplayConfigSerializer,
    KitchenStationSerializer,
    KitchenTicketSerializer,
    OrderSerializer,
    TicketPrioritySerializer,
    TicketStatusSerializer,
)
from ..services.kitchen_service import KitchenService
from ..services.order_service import OrderService
from ..services.websocket_services import WebSocketService


class KitchenStationViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    queryset = KitchenStation.objects.prefetch_related('categories')
    serializer_class = KitchenStationSerializer
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'kitchen'
    required_module = 'kitchen_display'
    filterset_fields = ['is_active', 'store']


class KitchenViewSet(TenantScopedMixin, viewsets.GenericViewSet):
    """
    Kitchen display endpoints: ticket queue, stats, order board, display
    config and ticket actions.
    """
    queryset = KitchenTicket.objects.select_related('order', 'order_item', 'station')
    serializer_class = KitchenTicketSerializer
    permission_classes = TENANT_PERMISSIONS
    permission_area = 'kitchen'
    required_module = 'kitchen_display'

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['kitchen_config'] = KitchenService.get_config(self.get_tenant())
        return context

    def _get_ticket(self, pk):
        return get_object_or_404(self.get_queryset(), pk=pk)

    @action(detail=False, methods=['get'])
    def queue(self, request):
        tickets = KitchenService.get_queue(self.get_tenant(), station_id=request.query_params.get('station'))
        store = self.get_active_store()
        if store is not None:
            tickets = tickets.filter(order__store=store)
        return Response(self.get_serializer(tickets, many=True).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(KitchenService.get_stats(self.get_tenant()))

    @action(detail=False, methods=['get'])
    def board(self, request):
        board = KitchenService.get_board(self.get_tenant(), store=self.get_active_store())
        results = []
        for order, next_action in board:
            data = OrderSerializer(order, context=self.get_serializer_context()).data
            data['next_action'] = next_action
            results.append(data)
        return Response(results)

    @action(detail=False, methods=['get', 'put', 'patch'])
    def config(self, request):
        config = KitchenService.get_config(self.get_tenant())
        if request.method == 'GET':
            return Response(KitchenDisplayConfigSerializer(config).data)

        serializer = KitchenDisplayConfigSerializer(config, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
        WebSocketService.broadcast_to_kitchen(config.tenant_id, 'config_update', serializer.data)
        return Response(serializer.data)

    @action(detail=False, methods=['post'], url_path=r'tickets/(?P<ticket_id>\d+)/status')
    def ticket_status(self, request, ticket_id=None):
        ticket = self._get_ticket(ticket_id)
        serializer = TicketStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        ticket = KitchenService.update_ticket_status(ticket, serializer.validated_data['status'], user=request.user)
        return Response(self.get_serializer(ticket).data)

    @action(detail=False, methods=['post'], url_path=r'tickets/(?P<ticket_id>\d+)/bump')
    def bump(self, request, ticket_id=None):
        ticket = KitchenService.bump(self._get_ticket(ticket_id), user=request.user)
        return Response(self.get_serializer(ticket).data)

    @action(detail=False, methods=['post'], url_path=r'tickets/(?P<ticket_id>\d+)/priority')
    def priority(self, request, ticket_id=None):
        ticket = self._get_ticket(ticket_id)
        serializer = TicketPrioritySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        ticket.priority = serializer.validated_data['priority']
        ticket.save(update_fields=['priority'])
        WebSocketService.broadcast_to_kitchen(ticket.tenant_id, 'ticket_update', {
            'ticket_id': ticket.pk,
            'order_id': ticket.order_id,
            'priority': ticket.priority,
        })
        return Response(self.get_serializer(ticket).data)

    @action(detail=False, methods=['post'], url_path=r'orders/(?P<order_id>\d+)/advance')
    def advance_order(self, request, order_id=None):
        """Move a board order to its next status."""
        order = get_object_or_404(Order, pk=order_id, tenant=self.get_tenant())
        OrderService.advance(order, user=request.user)
        return Response({
            'id': order.pk,
            'order_number': order.order_number,
            'status': order.status,
            'next_action': OrderService.get_next_action(order),
        })
