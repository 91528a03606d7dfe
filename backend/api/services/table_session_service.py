import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from ..exceptions import SessionAlreadyOpen, SessionNotOpen
from ..models import TableSession, TableSessionItem
from .websocket_services import WebSocketService

logger = logging.getLogger(__name__)


class TableSessionService:
    """
    Open tabs (comandas) on tables. Totals are recomputed after every
    item mutation from the non-cancelled items.
    """

    @staticmethod
    def _ensure_open(session):
        if session.status != 'open':
            raise SessionNotOpen()

    @staticmethod
    def _lock_open(session):
        """Re-read the session row under a lock; call inside transaction.atomic()."""
        locked = TableSession.objects.select_for_update().get(pk=session.pk)
        TableSessionService._ensure_open(locked)
        return locked

    @staticmethod
    def _broadcast(session, event):
        WebSocketService.broadcast_to_tenant(session.tenant_id, 'table_update', {
            'event': event,
            'table_id': session.table_id,
            'table_number': session.table.number,
            'session_id': session.pk,
            'status': session.status,
            'total': str(session.total),
        })

    @staticmethod
    def open_session(table, user=None, customer_name='', guests_count=1, notes=''):
        if table.sessions.filter(status='open').exists():
            raise SessionAlreadyOpen()

        try:
            with transaction.atomic():
                session = TableSession.objects.create(
                    tenant_id=table.tenant_id,
                    table=table,
                    customer_name=customer_name,
                    guests_count=guests_count,
                    notes=notes,
                    opened_by=user,
                )
        except IntegrityError:
            raise SessionAlreadyOpen()

        logger.info(f"Table {table.number} session {session.pk} opened (tenant {table.tenant_id})")
        TableSessionService._broadcast(session, 'opened')
        return session

    @staticmethod
    def recalculate(session):
        subtotal = sum(
            (item.total_price for item in session.items.exclude(status='cancelled')),
            Decimal('0')
        )
        session.subtotal = subtotal
        session.total = subtotal
        session.save(update_fields=['subtotal', 'total'])
        return session

    @staticmethod
    def add_item(session, product, quantity=1, variation=None, notes='', user=None):
        TableSessionService._ensure_open(session)
        if not product.is_available_at(session.table.store):
            raise ValidationError({'product': f"{product.name} is not available at this store."})

        unit_price = product.get_price(store=session.table.store, variation=variation)
        item = TableSessionItem.objects.create(
            session=session,
            product=product,
            variation=variation,
            product_name=product.name if variation is None else f"{product.name} - {variation.name}",
            quantity=quantity,
            unit_price=unit_price,
            total_price=unit_price * quantity,
            notes=notes,
            added_by=user,
        )
        TableSessionService.recalculate(session)
        TableSessionService._broadcast(session, 'item_added')
        return item

    @staticmethod
    def update_item_status(item, new_status):
        session = item.session
        TableSessionService._ensure_open(session)

        item.status = new_status
        item.save(update_fields=['status'])
        TableSessionService.recalculate(session)
        TableSessionService._broadcast(session, 'item_updated')
        return item

    @staticmethod
    def remove_item(item):
        session = item.session
        TableSessionService._ensure_open(session)

        item.delete()
        TableSessionService.recalculate(session)
        TableSessionService._broadcast(session, 'item_removed')
        return session

    @staticmethod
    def close_session(session, user=None, discount=0, payment_method=None):
        """
        Close the tab. With a payment method the non-cancelled items become
        a paid POS order linked to the session.
        """
        from .order_service import OrderService

        discount = Decimal(str(discount or 0))
        order = None

        with transaction.atomic():
            session = TableSessionService._lock_open(session)
            TableSessionService.recalculate(session)
            session.discount = discount
            session.total = max(Decimal('0'), session.subtotal - discount)
            session.status = 'closed'
            session.closed_at = timezone.now()
            session.closed_by = user
            session.payment_method = payment_method or ''
            session.save()

            items = [
                item for item in session.items.exclude(status='cancelled').select_related('product', 'variation')
                if item.product_id
            ]
            if payment_method and items:
                order, _ = OrderService.create_order(
                    session.tenant,
                    {
                        'origin': 'pos',
                        'status': 'paid',
                        'payment_method': payment_method,
                        'customer_name': session.customer_name,
                        'discount': discount,
                        'table_session': session,
                        'notes': f"Mesa {session.table.number}",
                        'items': [
                            {
                                'product': item.product,
                                'variation': item.variation,
                                'quantity': item.quantity,
                                'unit_price': item.unit_price,
                                'notes': item.notes,
                            }
                            for item in items
                        ],
                    },
                    user=user,
                    store=session.table.store,
                    create_kitchen_tickets=False,
                )

        logger.info(f"Table {session.table.number} session {session.pk} closed: total {session.total}")
        TableSessionService._broadcast(session, 'closed')
        return session, order

    @staticmethod
    def cancel_session(session, user=None):
        with transaction.atomic():
            session = TableSessionService._lock_open(session)
            session.status = 'cancelled'
            session.closed_at = timezone.now()
            session.closed_by = user
            session.save(update_fields=['status', 'closed_at', 'closed_by'])

        TableSessionService._broadcast(session, 'cancelled')
        return session

    @staticmethod
    def get_history(table, limit=50):
        return table.sessions.filter(status='closed').order_by('-closed_at')[:limit]
