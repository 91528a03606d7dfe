import logging

import requests
from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

from ..exceptions import PartnerLimitExceeded
from ..models import PartnerBranding, PartnerDomain, PartnerTenant

logger = logging.getLogger(__name__)


BRANDING_FIELDS = (
    'platform_name', 'logo_url', 'favicon_url', 'primary_color', 'secondary_color',
    'accent_color', 'support_email', 'support_phone', 'terms_url', 'privacy_url',
    'hero_title', 'hero_subtitle', 'powered_by_enabled', 'powered_by_text',
    'footer_text', 'meta_title', 'meta_description', 'og_image_url',
)


def normalize_hostname(host):
    """Lowercase, drop the port and any trailing dot."""
    if not host:
        return ''
    host = host.strip().lower()
    if host.startswith('['):
        # IPv6 literal
        host = host.split(']')[0] + ']'
    else:
        host = host.split(':')[0]
    return host.rstrip('.')


def is_platform_domain(hostname):
    if hostname in settings.PLATFORM_DOMAINS:
        return True
    return any(hostname.endswith(suffix) for suffix in settings.PLATFORM_DOMAIN_SUFFIXES)


def default_branding():
    return dict(settings.DEFAULT_BRANDING)


def branding_payload(branding):
    """Partner branding with empty values filled from the platform default."""
    payload = default_branding()
    if branding is None:
        return payload
    for field in BRANDING_FIELDS:
        value = getattr(branding, field)
        if value not in (None, ''):
            payload[field] = value
    return payload


class PartnerService:
    """
    White-label resolution of request hostnames to partner branding, plus
    the partner program operations (domain verification, tenant links).
    """

    CACHE_PREFIX = 'partner_resolution'

    @staticmethod
    def cache_key(hostname):
        return f"{PartnerService.CACHE_PREFIX}:{hostname}"

    @staticmethod
    def resolve(host):
        """
        Returns a dict with `is_partner_domain`, `partner`, `domain_type` and
        `branding`; platform and unknown hosts get the default branding.
        """
        hostname = normalize_hostname(host)
        fallback = {
            'hostname': hostname,
            'is_partner_domain': False,
            'domain_type': None,
            'partner': None,
            'branding': default_branding(),
        }
        if not hostname or is_platform_domain(hostname):
            return fallback

        cache_key = PartnerService.cache_key(hostname)
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        domain = (
            PartnerDomain.objects
            .select_related('partner', 'partner__branding')
            .filter(domain=hostname, is_verified=True, partner__is_active=True)
            .first()
        )

        if domain is None:
            result = fallback
        else:
            partner = domain.partner
            branding = PartnerBranding.objects.filter(partner=partner).first()
            result = {
                'hostname': hostname,
                'is_partner_domain': True,
                'domain_type': domain.domain_type,
                'partner': {
                    'id': partner.pk,
                    'name': partner.name,
                    'slug': partner.slug,
                },
                'branding': branding_payload(branding),
            }

        cache.set(cache_key, result, settings.PARTNER_RESOLUTION_CACHE_TIMEOUT)
        return result

    @staticmethod
    def invalidate_partner(partner):
        keys = [PartnerService.cache_key(domain) for domain in partner.domains.values_list('domain', flat=True)]
        if keys:
            cache.delete_many(keys)

    @staticmethod
    def invalidate_domain(hostname):
        cache.delete(PartnerService.cache_key(normalize_hostname(hostname)))

    @staticmethod
    def verification_url(domain):
        return f"https://{domain.domain}{settings.PARTNER_VERIFICATION_PATH}"

    @staticmethod
    def verify_domain(domain, timeout=10):
        """
        Fetch the verification file from the domain and compare it with the
        stored token. Returns (verified, message).
        """
        url = PartnerService.verification_url(domain)
        try:
            response = requests.get(url, timeout=timeout)
        except requests.RequestException as e:
            logger.warning(f"Verification request failed for {domain.domain}: {str(e)}")
            return False, f"Could not reach {url}"

        if response.status_code != 200:
            return False, f"Verification file returned HTTP {response.status_code}"

        if response.text.strip() != domain.verification_token:
            return False, 'Verification token does not match'

        domain.is_verified = True
        domain.verified_at = timezone.now()
        domain.save(update_fields=['is_verified', 'verified_at'])
        PartnerService.invalidate_domain(domain.domain)
        logger.info(f"Domain {domain.domain} verified for partner {domain.partner_id}")
        return True, 'Domain verified'

    @staticmethod
    def set_primary_domain(domain):
        with transaction.atomic():
            PartnerDomain.objects.filter(partner_id=domain.partner_id).exclude(pk=domain.pk).update(is_primary=False)
            domain.is_primary = True
            domain.save(update_fields=['is_primary'])
        return domain

    @staticmethod
    def attach_tenant(partner, tenant, partner_plan=None):
        """Link a tenant to a partner, honouring max_tenants."""
        if not partner.can_add_tenant():
            raise PartnerLimitExceeded(f"Partner {partner.name} reached its limit of {partner.max_tenants} tenants.")

        with transaction.atomic():
            link = PartnerTenant.objects.create(partner=partner, tenant=tenant, partner_plan=partner_plan)
            tenant.partner = partner
            tenant.save(update_fields=['partner', 'updated_at'])

        logger.info(f"Tenant {tenant.slug} joined partner {partner.slug}")
        return link

    @staticmethod
    def public_plans(partner):
        return partner.plans.filter(is_active=True).order_by('display_order', 'monthly_price')
