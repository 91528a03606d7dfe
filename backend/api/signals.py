import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from api.models import Partner, PartnerBranding, PartnerDomain, Tenant
from .services.partner_service import PartnerService

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Tenant)
def create_kitchen_config(sender, instance, created, **kwargs):
    """Every tenant gets a kitchen display config with defaults"""
    if created:
        from .services.kitchen_service import KitchenService
        KitchenService.get_config(instance)


@receiver(post_save, sender=Partner)
def create_default_branding(sender, instance, created, **kwargs):
    if created:
        PartnerBranding.objects.get_or_create(partner=instance)
        logger.info(f"Default branding created for partner {instance.slug}")


@receiver(post_save, sender=Partner)
def invalidate_partner_resolution(sender, instance, created, **kwargs):
    # Deactivation changes what its domains resolve to
    if not created:
        PartnerService.invalidate_partner(instance)


# Cached resolutions go stale whenever a domain or the branding changes
@receiver(post_save, sender=PartnerDomain)
@receiver(post_delete, sender=PartnerDomain)
def invalidate_domain_resolution(sender, instance, **kwargs):
    PartnerService.invalidate_domain(instance.domain)


@receiver(post_save, sender=PartnerBranding)
@receiver(post_delete, sender=PartnerBranding)
def invalidate_branding_resolution(sender, instance, **kwargs):
    PartnerService.invalidate_partner(instance.partner)
