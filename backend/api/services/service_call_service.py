import logging

from django.db import transaction
from django.utils import timezone

from ..exceptions import InvalidStatusTransition
from ..models import ServiceCall, Table
from .websocket_services import WebSocketService

logger = logging.getLogger(__name__)


class ServiceCallService:
    """
    Calls raised from the table (waiter, bill, cash payment) and worked by
    the floor staff. Every change is pushed to the tenant group as a
    `service_call` event.
    """

    TARGETS = {
        'acknowledge': 'acknowledged',
        'start': 'in_progress',
        'resolve': 'resolved',
        'escalate': 'escalated',
    }

    # Statuses each operation may start from
    TRANSITIONS = {
        'acknowledge': ('pending', 'escalated'),
        'start': ('acknowledged',),
        'resolve': ('pending', 'acknowledged', 'in_progress', 'escalated'),
        'escalate': ('pending', 'acknowledged'),
    }

    @staticmethod
    def _broadcast(call, event):
        WebSocketService.broadcast_to_tenant(call.tenant_id, 'service_call', {
            'event': event,
            'id': call.pk,
            'call_type': call.call_type,
            'status': call.status,
            'priority': call.priority,
            'escalation_level': call.escalation_level,
            'table_number': call.table.number if call.table_id else None,
            'notes': call.notes,
        })

    @staticmethod
    def _lock(call, operation):
        """Re-read the call under a lock and check the operation is allowed."""
        locked = ServiceCall.objects.select_for_update().select_related('table').get(pk=call.pk)
        if locked.status not in ServiceCallService.TRANSITIONS[operation]:
            raise InvalidStatusTransition(locked.status, ServiceCallService.TARGETS[operation])
        return locked

    @staticmethod
    def create_public_call(tenant, table_number, call_type, notes=''):
        """
        Raise a call from the public menu. Raises Table.DoesNotExist for an
        unknown or inactive table. A pending call of the same type on the
        table is returned instead of a duplicate; the flag tells them apart.
        """
        table = Table.objects.get(tenant=tenant, number=table_number, is_active=True)

        with transaction.atomic():
            existing = (
                ServiceCall.objects.select_for_update()
                .filter(table=table, call_type=call_type, status='pending')
                .first()
            )
            if existing is not None:
                return existing, False

            call = ServiceCall.objects.create(
                tenant=tenant,
                table=table,
                session=table.active_session,
                call_type=call_type,
                notes=notes,
            )

        logger.info(f"Service call {call.pk} ({call_type}) raised at table {table.number} (tenant {tenant.pk})")
        ServiceCallService._broadcast(call, 'created')
        return call, True

    @staticmethod
    def acknowledge(call, user=None):
        with transaction.atomic():
            call = ServiceCallService._lock(call, 'acknowledge')
            now = timezone.now()
            call.status = 'acknowledged'
            call.acknowledged_by = user
            call.acknowledged_at = now
            if call.response_time_seconds is None:
                call.response_time_seconds = int((now - call.created_at).total_seconds())
            call.save(update_fields=['status', 'acknowledged_by', 'acknowledged_at', 'response_time_seconds'])

        ServiceCallService._broadcast(call, 'acknowledged')
        return call

    @staticmethod
    def start(call, user=None):
        with transaction.atomic():
            call = ServiceCallService._lock(call, 'start')
            call.status = 'in_progress'
            if user is not None:
                call.acknowledged_by = user
            call.save(update_fields=['status', 'acknowledged_by'])

        ServiceCallService._broadcast(call, 'in_progress')
        return call

    @staticmethod
    def resolve(call, user=None, notes=None):
        with transaction.atomic():
            call = ServiceCallService._lock(call, 'resolve')
            call.status = 'resolved'
            call.resolved_by = user
            call.resolved_at = timezone.now()
            if notes:
                call.notes = notes
            call.save(update_fields=['status', 'resolved_by', 'resolved_at', 'notes'])

        logger.info(f"Service call {call.pk} resolved (tenant {call.tenant_id})")
        ServiceCallService._broadcast(call, 'resolved')
        return call

    @staticmethod
    def escalate(call):
        """Bump the level and priority and release the call for anyone to pick up."""
        with transaction.atomic():
            call = ServiceCallService._lock(call, 'escalate')
            call.status = 'escalated'
            call.escalated_at = timezone.now()
            call.escalation_level += 1
            call.priority += 1
            call.acknowledged_by = None
            call.save(update_fields=['status', 'escalated_at', 'escalation_level', 'priority', 'acknowledged_by'])

        logger.warning(f"Service call {call.pk} escalated to level {call.escalation_level} (tenant {call.tenant_id})")
        ServiceCallService._broadcast(call, 'escalated')
        return call
