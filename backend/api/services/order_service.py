import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from ..exceptions import InvalidStatusTransition
from ..models import (
    Delivery,
    Order,
    OrderItem,
    OrderItemAddon,
    OrderStatusHistory,
    Payment,
    Tenant,
)
from .websocket_services import WebSocketService

logger = logging.getLogger(__name__)


# Linear part of the order lifecycle; `ready` branches on is_delivery.
NEXT_STATUS = {
    'pending_payment': 'paid',
    'paid': 'confirmed',
    'confirmed': 'preparing',
    'preparing': 'ready',
    'out_for_delivery': 'delivered',
}

NEXT_ACTION_LABELS = {
    'paid': 'Confirmar pagamento',
    'confirmed': 'Confirmar pedido',
    'preparing': 'Iniciar preparo',
    'ready': 'Marcar como pronto',
    'out_for_delivery': 'Saiu para entrega',
    'delivered': 'Marcar como entregue',
}


class OrderService:

    @staticmethod
    def get_next_status(order):
        if order.status == 'ready':
            return 'out_for_delivery' if order.is_delivery else 'delivered'
        return NEXT_STATUS.get(order.status)

    @staticmethod
    def get_next_action(order):
        next_status = OrderService.get_next_status(order)
        if next_status is None:
            return None
        return {'status': next_status, 'label': NEXT_ACTION_LABELS[next_status]}

    @staticmethod
    def can_transition(order, new_status):
        if new_status == 'cancelled':
            return not order.is_terminal
        return new_status == OrderService.get_next_status(order)

    @staticmethod
    def _build_item(item_data, store):
        """
        Price a requested line from the catalog: store override or base
        price, plus variation modifier, plus addons.
        """
        product = item_data['product']
        variation = item_data.get('variation')
        quantity = int(item_data.get('quantity', 1))

        if 'unit_price' in item_data:
            unit_price = Decimal(str(item_data['unit_price']))
        else:
            unit_price = product.get_price(store=store, variation=variation)

        addons = []
        addons_total = Decimal('0')
        for addon_data in item_data.get('addons', []):
            addon = addon_data['addon']
            addon_quantity = int(addon_data.get('quantity', 1))
            addons.append((addon, addon_quantity))
            addons_total += addon.price * addon_quantity

        total_price = unit_price * quantity + addons_total * quantity
        return {
            'product': product,
            'variation': variation,
            'quantity': quantity,
            'unit_price': unit_price,
            'total_price': total_price,
            'notes': item_data.get('notes', ''),
            'addons': addons,
        }

    @staticmethod
    def create_order(tenant, data, user=None, store=None, create_kitchen_tickets=True):
        """
        Create an order with its items, payment, history, kitchen tickets and
        delivery record, then consume recipe stock.

        Returns (order, stock_result).
        """
        from .kitchen_service import KitchenService
        from .stock_service import StockService

        status = data.get('status', 'paid')
        payment_method = data.get('payment_method', 'cash')
        delivery_fee = Decimal(str(data.get('delivery_fee') or 0))
        discount = Decimal(str(data.get('discount') or 0))
        is_delivery = bool(data.get('is_delivery', False))

        lines = [OrderService._build_item(item_data, store) for item_data in data['items']]
        subtotal = sum((line['total_price'] for line in lines), Decimal('0'))
        total = max(Decimal('0'), subtotal + delivery_fee - discount)
        now = timezone.now()

        with transaction.atomic():
            # Serialises order numbering per tenant
            Tenant.objects.select_for_update().filter(pk=tenant.pk).first()

            order = Order(
                tenant=tenant,
                store=store,
                table_session=data.get('table_session'),
                origin=data.get('origin', 'pos'),
                status=status,
                customer_name=data.get('customer_name', ''),
                customer_phone=data.get('customer_phone', ''),
                is_delivery=is_delivery,
                delivery_address=data.get('delivery_address', ''),
                delivery_neighborhood=data.get('delivery_neighborhood', ''),
                delivery_city=data.get('delivery_city', ''),
                subtotal=subtotal,
                delivery_fee=delivery_fee,
                discount=discount,
                total=total,
                notes=data.get('notes', ''),
                estimated_time_minutes=data.get('estimated_time_minutes'),
                created_by=user,
            )
            timestamp_field = Order.STATUS_TIMESTAMP_FIELDS.get(status)
            if timestamp_field:
                setattr(order, timestamp_field, now)
            if status not in ('pending_payment', 'cancelled') and order.paid_at is None:
                order.paid_at = now
            order.save()

            for line in lines:
                order_item = OrderItem.objects.create(
                    order=order,
                    product=line['product'],
                    variation=line['variation'],
                    product_name=line['product'].name,
                    variation_name=line['variation'].name if line['variation'] else '',
                    quantity=line['quantity'],
                    unit_price=line['unit_price'],
                    total_price=line['total_price'],
                    notes=line['notes'],
                )
                for addon, addon_quantity in line['addons']:
                    OrderItemAddon.objects.create(
                        order_item=order_item,
                        addon=addon,
                        addon_name=addon.name,
                        quantity=addon_quantity,
                        unit_price=addon.price,
                    )

            payment_approved = status != 'pending_payment'
            payment = Payment.objects.create(
                tenant=tenant,
                order=order,
                payment_method=payment_method,
                status='approved' if payment_approved else 'pending',
                amount=total,
                paid_at=now if payment_approved else None,
            )

            OrderStatusHistory.objects.create(
                order=order,
                status=status,
                notes=f"Pedido criado via PDV - {payment.get_payment_method_display()}",
                changed_by=user,
            )

            if is_delivery:
                Delivery.objects.create(
                    tenant=tenant,
                    order=order,
                    address=order.delivery_address,
                    neighborhood=order.delivery_neighborhood,
                    city=order.delivery_city,
                    delivery_fee=delivery_fee,
                )

            if create_kitchen_tickets:
                KitchenService.create_tickets_for_order(order)

            stock_result = StockService.reduce_stock_for_order(order, user=user)

        logger.info(f"Order #{order.order_number} created for tenant {tenant.slug}: total {order.total}")
        WebSocketService.broadcast_order_update(order, 'new_order')
        return order, stock_result

    @staticmethod
    def apply_status(order, new_status, user=None, notes=''):
        """
        Write a status change without validating the transition: stamps the
        timestamp, inserts history and broadcasts.
        """
        previous_status = order.status
        now = timezone.now()

        with transaction.atomic():
            order.status = new_status
            timestamp_field = Order.STATUS_TIMESTAMP_FIELDS.get(new_status)
            update_fields = ['status', 'updated_at']
            if timestamp_field:
                setattr(order, timestamp_field, now)
                update_fields.append(timestamp_field)
            order.save(update_fields=update_fields)

            if new_status == 'paid':
                order.payments.filter(status='pending').update(status='approved', paid_at=now)

            OrderStatusHistory.objects.create(
                order=order,
                status=new_status,
                previous_status=previous_status,
                notes=notes,
                changed_by=user,
            )

        logger.info(f"Order #{order.order_number} ({order.tenant_id}): {previous_status} -> {new_status}")
        WebSocketService.broadcast_order_update(order)
        return order

    @staticmethod
    def set_status(order, new_status, user=None, notes=''):
        if new_status not in Order.STATUS_TIMESTAMP_FIELDS and new_status != 'pending_payment':
            raise InvalidStatusTransition(detail=f"Unknown status '{new_status}'.")
        if not OrderService.can_transition(order, new_status):
            raise InvalidStatusTransition(order.status, new_status)

        if new_status == 'cancelled':
            return OrderService.cancel_order(order, user=user, reason=notes)
        return OrderService.apply_status(order, new_status, user=user, notes=notes)

    @staticmethod
    def advance(order, user=None, notes=''):
        next_status = OrderService.get_next_status(order)
        if next_status is None:
            raise InvalidStatusTransition(detail=f"Order in status '{order.status}' has no next status.")
        return OrderService.apply_status(order, next_status, user=user, notes=notes)

    @staticmethod
    def cancel_order(order, user=None, reason=''):
        """
        Cancel a non-terminal order: return stock, cancel open kitchen tickets,
        fail the delivery and void payments.
        """
        from .kitchen_service import KitchenService
        from .stock_service import StockService

        if order.is_terminal:
            raise InvalidStatusTransition(order.status, 'cancelled')

        with transaction.atomic():
            order.cancellation_reason = reason or ''
            order.save(update_fields=['cancellation_reason', 'updated_at'])
            OrderService.apply_status(order, 'cancelled', user=user, notes=reason or 'Pedido cancelado')

            StockService.reverse_stock_for_order(order, user=user)
            KitchenService.cancel_tickets_for_order(order)

            delivery = Delivery.objects.filter(order=order).first()
            if delivery and delivery.status not in Delivery.TERMINAL_STATUSES:
                delivery.status = 'failed'
                delivery.failed_at = timezone.now()
                delivery.failure_reason = 'Pedido cancelado'
                delivery.save(update_fields=['status', 'failed_at', 'failure_reason', 'updated_at'])

            order.payments.filter(status='approved').update(status='refunded')
            order.payments.filter(status='pending').update(status='cancelled')

        return order

    @staticmethod
    def get_public_tracking(tenant_slug, order_number):
        """
        Tracking payload for the unauthenticated order page. Raises
        Order.DoesNotExist when the pair does not match.
        """
        order = Order.objects.select_related('tenant').prefetch_related('status_history', 'items').get(
            tenant__slug=tenant_slug,
            tenant__is_active=True,
            order_number=order_number,
        )

        return {
            'order_uuid': str(order.order_uuid),
            'order_number': order.order_number,
            'status': order.status,
            'status_display': order.get_status_display(),
            'customer_first_name': order.customer_first_name,
            'is_delivery': order.is_delivery,
            'total': order.total,
            'estimated_time_minutes': order.estimated_time_minutes,
            'created_at': order.created_at,
            'timestamps': {
                field: getattr(order, field)
                for field in Order.STATUS_TIMESTAMP_FIELDS.values()
            },
            'tenant': {
                'name': order.tenant.name,
                'logo_url': order.tenant.logo_url,
            },
            'items': [
                {'product_name': item.product_name, 'quantity': item.quantity}
                for item in order.items.all()
            ],
            'history': [
                {'status': entry.status, 'created_at': entry.created_at}
                for entry in order.status_history.all()
            ],
        }
