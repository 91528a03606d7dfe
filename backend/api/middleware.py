# middleware.py
import logging
from django.utils import timezone
from django.utils.functional import SimpleLazyObject

from .services.partner_service import PartnerService

logger = logging.getLogger('api.auth')


class AuthLoggingMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        # Log authentication events
        if hasattr(request, 'user') and request.user.is_authenticated:
            if not hasattr(request, '_auth_logged'):
                logger.info(
                    f"User {request.user.username} ({request.user.id}) "
                    f"tenant {request.user.tenant_id} "
                    f"{request.method} {request.path} -> {response.status_code} "
                    f"from {request.META.get('REMOTE_ADDR')} at {timezone.now()}"
                )
                request._auth_logged = True

        return response


class PartnerDomainMiddleware:
    """
    Attaches the white-label resolution of the request host as
    `request.partner_resolution`. Resolved on first access.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        host = request.META.get('HTTP_X_FORWARDED_HOST') or request.META.get('HTTP_HOST', '')
        request.partner_resolution = SimpleLazyObject(lambda: PartnerService.resolve(host))
        return self.get_response(request)
