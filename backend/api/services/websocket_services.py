import logging
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

logger = logging.getLogger(__name__)


def tenant_group(tenant_id):
    return f"tenant_{tenant_id}"


def kitchen_group(tenant_id):
    return f"kitchen_{tenant_id}"


def order_group(order_uuid):
    return f"order_{order_uuid}"


def courier_group(courier_id):
    return f"courier_{courier_id}"


class WebSocketService:
    """
    Publishes events to the Channels groups the realtime screens subscribe to.
    Failures are logged and reported as False; they never abort the caller.
    """

    @staticmethod
    def _send(group, message_type, data):
        try:
            channel_layer = get_channel_layer()
            if channel_layer is None:
                return False

            message = {
                'type': message_type,
                'data': data,
                'timestamp': timezone.now().isoformat()
            }

            async_to_sync(channel_layer.group_send)(
                group,
                {
                    'type': 'send_message',
                    'message': message
                }
            )

            logger.debug(f"Broadcast to {group}: {message_type}")
            return True

        except Exception as e:
            logger.error(f"Error broadcasting {message_type} to {group}: {str(e)}")
            return False

    @staticmethod
    def broadcast_to_tenant(tenant_id, message_type, data):
        """Dashboard channel of a tenant (orders, stock alerts, tables)."""
        return WebSocketService._send(tenant_group(tenant_id), message_type, data)

    @staticmethod
    def broadcast_to_kitchen(tenant_id, message_type, data):
        return WebSocketService._send(kitchen_group(tenant_id), message_type, data)

    @staticmethod
    def broadcast_to_order(order_uuid, message_type, data):
        """Public tracking channel of a single order."""
        return WebSocketService._send(order_group(order_uuid), message_type, data)

    @staticmethod
    def broadcast_to_courier(courier_id, message_type, data):
        return WebSocketService._send(courier_group(courier_id), message_type, data)

    @staticmethod
    def broadcast_order_update(order, message_type='order_update'):
        """
        Fan an order change out to the order, tenant and kitchen channels.
        """
        data = {
            'order_id': order.pk,
            'order_uuid': str(order.order_uuid),
            'order_number': order.order_number,
            'status': order.status,
            'status_display': order.get_status_display(),
            'total': str(order.total),
            'is_delivery': order.is_delivery,
            'updated_at': timezone.now().isoformat(),
        }
        WebSocketService.broadcast_to_order(order.order_uuid, message_type, data)
        WebSocketService.broadcast_to_tenant(order.tenant_id, message_type, data)
        WebSocketService.broadcast_to_kitchen(order.tenant_id, message_type, data)
        return data
