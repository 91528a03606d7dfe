import json
import logging
from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async
from django.utils import timezone

from .services.websocket_services import courier_group, kitchen_group, order_group, tenant_group

logger = logging.getLogger(__name__)


class BaseRealtimeConsumer(AsyncWebsocketConsumer):
    """
    Joins a single Channels group on connect and relays `send_message`
    events from WebSocketService to the socket.
    """
    group_name = None

    async def get_group_name(self):
        raise NotImplementedError

    async def connect(self):
        try:
            self.group_name = await self.get_group_name()
        except Exception as e:
            logger.error(f"Error in {self.__class__.__name__} connect: {str(e)}")
            await self.close(code=4400)
            return

        if self.group_name is None:
            await self.close(code=4403)
            return

        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send(text_data=json.dumps({
            'type': 'connection_established',
            'group': self.group_name,
            'timestamp': timezone.now().isoformat()
        }))
        logger.info(f"{self.__class__.__name__} connected to {self.group_name}")

    async def disconnect(self, close_code):
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive(self, text_data):
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_error("Invalid JSON format")
            return

        if data.get('type') == 'ping':
            await self.send(text_data=json.dumps({
                'type': 'pong',
                'timestamp': timezone.now().isoformat()
            }))
        else:
            await self.send_error("Unknown message type")

    async def send_message(self, event):
        await self.send(text_data=json.dumps(event['message']))

    async def send_error(self, message):
        await self.send(text_data=json.dumps({
            'type': 'error',
            'message': message,
            'timestamp': timezone.now().isoformat()
        }))


class TenantMemberConsumer(BaseRealtimeConsumer):
    """Authenticated staff of the tenant in the URL."""

    def tenant_allowed(self):
        user = self.scope.get('user')
        if user is None or user.is_anonymous:
            return False
        tenant_id = int(self.scope['url_route']['kwargs']['tenant_id'])
        return user.is_super_admin or user.tenant_id == tenant_id


class KitchenConsumer(TenantMemberConsumer):

    async def get_group_name(self):
        if not self.tenant_allowed():
            return None
        return kitchen_group(self.scope['url_route']['kwargs']['tenant_id'])


class TenantDashboardConsumer(TenantMemberConsumer):

    async def get_group_name(self):
        if not self.tenant_allowed():
            return None
        return tenant_group(self.scope['url_route']['kwargs']['tenant_id'])


class OrderTrackingConsumer(BaseRealtimeConsumer):
    """Public: anyone holding the order UUID may follow it."""

    async def get_group_name(self):
        order_uuid = self.scope['url_route']['kwargs']['order_uuid']
        if not await self.order_exists(order_uuid):
            return None
        return order_group(order_uuid)

    @database_sync_to_async
    def order_exists(self, order_uuid):
        from .models import Order
        return Order.objects.filter(order_uuid=order_uuid).exists()


class CourierConsumer(BaseRealtimeConsumer):

    async def get_group_name(self):
        user = self.scope.get('user')
        if user is None or user.is_anonymous:
            return None
        courier_id = await self.get_courier_id(user)
        if courier_id is None:
            return None
        return courier_group(courier_id)

    @database_sync_to_async
    def get_courier_id(self, user):
        from .models import Courier
        return Courier.objects.filter(user=user, is_active=True).values_list('pk', flat=True).first()
