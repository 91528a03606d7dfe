import logging
from datetime import timedelta

from django.utils import timezone

from ..exceptions import InvalidStatusTransition
from ..models import KitchenDisplayConfig, KitchenStation, KitchenTicket, Order
from .websocket_services import WebSocketService

logger = logging.getLogger(__name__)


KITCHEN_BOARD_STATUSES = ('confirmed', 'preparing', 'ready')


class KitchenService:
    """
    Kitchen display: ticket routing, queue, status changes and auto advance.
    """

    @staticmethod
    def get_config(tenant):
        config, _ = KitchenDisplayConfig.objects.get_or_create(tenant=tenant)
        return config

    @staticmethod
    def route_item(order_item, tenant_id):
        """First active station, by display order, handling the product category."""
        product = order_item.product
        if product is None or product.category_id is None:
            return None
        return (
            KitchenStation.objects
            .filter(tenant_id=tenant_id, is_active=True, categories__id=product.category_id)
            .order_by('display_order', 'name')
            .first()
        )

    @staticmethod
    def create_tickets_for_order(order):
        tickets = []
        for item in order.items.select_related('product'):
            tickets.append(KitchenTicket.objects.create(
                tenant_id=order.tenant_id,
                order=order,
                order_item=item,
                station=KitchenService.route_item(item, order.tenant_id),
                notes=item.notes,
            ))

        if tickets:
            WebSocketService.broadcast_to_kitchen(order.tenant_id, 'new_tickets', {
                'order_id': order.pk,
                'order_number': order.order_number,
                'ticket_ids': [ticket.pk for ticket in tickets],
            })
        return tickets

    @staticmethod
    def get_queue(tenant, station_id=None):
        queryset = (
            KitchenTicket.objects
            .filter(tenant=tenant, status__in=KitchenTicket.OPEN_STATUSES)
            .select_related('order', 'order_item', 'station')
            .order_by('-priority', 'created_at')
        )
        if station_id:
            queryset = queryset.filter(station_id=station_id)
        return queryset

    @staticmethod
    def update_ticket_status(ticket, new_status, user=None):
        if new_status not in dict(KitchenTicket.STATUS_CHOICES) or new_status == 'cancelled':
            raise InvalidStatusTransition(detail=f"Unknown ticket status '{new_status}'.")
        if ticket.status == 'cancelled':
            raise InvalidStatusTransition(ticket.status, new_status)

        now = timezone.now()
        ticket.status = new_status
        if new_status == 'preparing' and ticket.started_at is None:
            ticket.started_at = now
        if new_status in ('ready', 'served') and ticket.completed_at is None:
            ticket.completed_at = now
        ticket.save(update_fields=['status', 'started_at', 'completed_at'])

        WebSocketService.broadcast_to_kitchen(ticket.tenant_id, 'ticket_update', {
            'ticket_id': ticket.pk,
            'order_id': ticket.order_id,
            'status': ticket.status,
        })

        KitchenService.auto_advance_order(ticket.order, user=user)
        return ticket

    @staticmethod
    def bump(ticket, user=None):
        ticket = KitchenService.update_ticket_status(ticket, 'ready', user=user)
        ticket.bumped_at = timezone.now()
        ticket.save(update_fields=['bumped_at'])
        return ticket

    @staticmethod
    def cancel_tickets_for_order(order):
        return KitchenTicket.objects.filter(
            order=order,
            status__in=KitchenTicket.OPEN_STATUSES,
        ).update(status='cancelled')

    @staticmethod
    def auto_advance_order(order, user=None):
        """
        With auto advance on: the first ticket in preparation moves a paid or
        confirmed order to preparing; all tickets ready moves it to ready.
        """
        from .order_service import OrderService

        config = KitchenService.get_config(order.tenant)
        if not config.auto_advance:
            return None

        order.refresh_from_db()
        tickets = order.kitchen_tickets.exclude(status='cancelled')
        if not tickets.exists():
            return None

        if order.status in ('paid', 'confirmed') and tickets.filter(status__in=('preparing', 'ready', 'served')).exists():
            OrderService.apply_status(order, 'preparing', user=user, notes='Preparo iniciado na cozinha')

        if order.status == 'preparing' and not tickets.exclude(status__in=('ready', 'served')).exists():
            OrderService.apply_status(order, 'ready', user=user, notes='Todos os itens prontos')

        return order.status

    @staticmethod
    def get_stats(tenant):
        config = KitchenService.get_config(tenant)
        now = timezone.now()
        today_start = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
        open_tickets = KitchenTicket.objects.filter(tenant=tenant, status__in=KitchenTicket.OPEN_STATUSES)

        completed_today = KitchenTicket.objects.filter(
            tenant=tenant,
            completed_at__gte=today_start,
            started_at__isnull=False,
        ).only('started_at', 'completed_at')
        prep_times = [ticket.prep_time_minutes for ticket in completed_today]
        avg_prep = sum(prep_times) / len(prep_times) if prep_times else 0

        return {
            'pending': open_tickets.filter(status='pending').count(),
            'preparing': open_tickets.filter(status='preparing').count(),
            'alert_items': open_tickets.filter(
                created_at__lt=now - timedelta(minutes=config.alert_threshold_minutes)
            ).count(),
            'avg_prep_time_minutes': round(avg_prep, 1),
            'alert_threshold_minutes': config.alert_threshold_minutes,
        }

    @staticmethod
    def get_board(tenant, store=None):
        """Orders the kitchen is working on, oldest first, with their next action."""
        from .order_service import OrderService

        orders = (
            Order.objects
            .filter(tenant=tenant, status__in=KITCHEN_BOARD_STATUSES)
            .prefetch_related('items')
            .order_by('created_at')
        )
        if store is not None:
            orders = orders.filter(store=store)
        return [(order, OrderService.get_next_action(order)) for order in orders]

    @staticmethod
    def close_stale_tickets(hours=12):
        """Mark tickets left open past `hours` as served."""
        cutoff = timezone.now() - timedelta(hours=hours)
        count = KitchenTicket.objects.filter(
            status__in=KitchenTicket.OPEN_STATUSES,
            created_at__lt=cutoff,
        ).update(status='served', completed_at=timezone.now())
        if count:
            logger.info(f"Closed {count} stale kitchen tickets")
        return count
