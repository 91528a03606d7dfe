from django.urls import re_path
from . import consumers

websocket_urlpatterns = [
    re_path(r'ws/kitchen/(?P<tenant_id>\d+)/$', consumers.KitchenConsumer.as_asgi()),
    re_path(r'ws/tenant/(?P<tenant_id>\d+)/$', consumers.TenantDashboardConsumer.as_asgi()),
    re_path(r'ws/orders/(?P<order_uuid>[0-9a-f-]+)/tracking/$', consumers.OrderTrackingConsumer.as_asgi()),
    re_path(r'ws/courier/$', consumers.CourierConsumer.as_asgi()),
]
