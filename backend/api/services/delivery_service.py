import logging

from django.db import transaction
from django.utils import timezone

from ..exceptions import InvalidStatusTransition
from ..models import Delivery
from .websocket_services import WebSocketService

logger = logging.getLogger(__name__)


DELIVERY_NEXT_STATUS = {
    'assigned': 'picked_up',
    'picked_up': 'in_route',
    'in_route': 'delivered',
}

DELIVERY_NEXT_ACTION_LABELS = {
    'picked_up': 'Retirar pedido',
    'in_route': 'Iniciar rota',
    'delivered': 'Confirmar entrega',
}

# Order status mirrored when a delivery reaches these statuses
ORDER_STATUS_FOR_DELIVERY = {
    'in_route': 'out_for_delivery',
    'delivered': 'delivered',
}

PENDING_FOR_COURIER = ('pending', 'assigned', 'picked_up')


class DeliveryService:

    @staticmethod
    def get_next_action(delivery):
        next_status = DELIVERY_NEXT_STATUS.get(delivery.status)
        if next_status is None:
            return None
        return {'status': next_status, 'label': DELIVERY_NEXT_ACTION_LABELS[next_status]}

    @staticmethod
    def assign_courier(delivery, courier, user=None):
        if delivery.status in Delivery.TERMINAL_STATUSES:
            raise InvalidStatusTransition(delivery.status, 'assigned')
        if courier.tenant_id != delivery.tenant_id or not courier.is_active:
            raise InvalidStatusTransition(detail='Courier is not available for this tenant.')

        delivery.courier = courier
        delivery.status = 'assigned'
        delivery.assigned_at = timezone.now()
        delivery.save(update_fields=['courier', 'status', 'assigned_at', 'updated_at'])

        logger.info(f"Delivery {delivery.pk} assigned to courier {courier.pk}")
        WebSocketService.broadcast_to_courier(courier.pk, 'delivery_assigned', {
            'delivery_id': delivery.pk,
            'order_number': delivery.order.order_number,
            'address': delivery.address,
            'neighborhood': delivery.neighborhood,
        })
        WebSocketService.broadcast_to_tenant(delivery.tenant_id, 'delivery_update', {
            'delivery_id': delivery.pk,
            'status': delivery.status,
            'courier_id': courier.pk,
        })
        return delivery

    @staticmethod
    def update_status(delivery, new_status, user=None, reason=''):
        """
        Move along assigned -> picked_up -> in_route -> delivered, or to
        failed from any non-terminal status. Mirrors the order status.
        """
        from .order_service import OrderService

        if new_status == 'failed':
            if delivery.status in Delivery.TERMINAL_STATUSES:
                raise InvalidStatusTransition(delivery.status, new_status)
        elif DELIVERY_NEXT_STATUS.get(delivery.status) != new_status:
            raise InvalidStatusTransition(delivery.status, new_status)

        now = timezone.now()
        with transaction.atomic():
            delivery.status = new_status
            if new_status == 'picked_up':
                delivery.picked_up_at = now
            elif new_status == 'delivered':
                delivery.delivered_at = now
            elif new_status == 'failed':
                delivery.failed_at = now
                delivery.failure_reason = reason
            delivery.save()

            order = delivery.order
            order_status = ORDER_STATUS_FOR_DELIVERY.get(new_status)
            if order_status and not order.is_terminal and order.status != order_status:
                OrderService.apply_status(order, order_status, user=user, notes=f"Entrega: {delivery.get_status_display()}")

        if delivery.courier_id:
            WebSocketService.broadcast_to_courier(delivery.courier_id, 'delivery_update', {
                'delivery_id': delivery.pk,
                'status': delivery.status,
            })
        WebSocketService.broadcast_to_tenant(delivery.tenant_id, 'delivery_update', {
            'delivery_id': delivery.pk,
            'status': delivery.status,
        })
        return delivery

    @staticmethod
    def get_courier_today(courier):
        today_start = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)
        return (
            Delivery.objects
            .filter(courier=courier)
            .filter(created_at__gte=today_start)
            .select_related('order')
            .order_by('created_at')
        )

    @staticmethod
    def get_courier_stats(courier):
        deliveries = DeliveryService.get_courier_today(courier)
        return {
            'pending': deliveries.filter(status__in=PENDING_FOR_COURIER).count(),
            'in_route': deliveries.filter(status='in_route').count(),
            'completed': deliveries.filter(status='delivered').count(),
        }
