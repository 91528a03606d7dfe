# throttles.py
from rest_framework.throttling import SimpleRateThrottle


class AuthThrottle(SimpleRateThrottle):
    """Login and signup attempts, keyed by client IP and submitted identifier."""
    scope = 'auth'

    def get_cache_key(self, request, view):
        ident = self.get_ident(request)
        data = request.data if hasattr(request.data, 'get') else {}
        login = data.get('username') or data.get('email')
        if login:
            ident = f"{ident}:{str(login).strip().lower()}"

        return self.cache_format % {
            'scope': self.scope,
            'ident': ident
        }


class PublicEndpointThrottle(SimpleRateThrottle):
    """Unauthenticated menu, tracking and branding lookups, keyed by client IP."""
    scope = 'public'

    def get_cache_key(self, request, view):
        return self.cache_format % {
            'scope': self.scope,
            'ident': self.get_ident(request)
        }
