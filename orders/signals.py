# Log order creation and every status change
import logging

from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from .models import Order

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Order)
def remember_previous_status(sender, instance, **kwargs):
    if instance._state.adding:
        instance._previous_status = None
        return
    instance._previous_status = (
        sender.objects.filter(pk=instance.pk).values_list('status', flat=True).first()
    )


@receiver(post_save, sender=Order)
def log_status_change(sender, instance, created, **kwargs):
    if created:
        logger.info("Order #%s created with status %s", instance.short_id, instance.status)
        return
    previous = getattr(instance, '_previous_status', None)
    if previous is not None and previous != instance.status:
        logger.info("Order #%s status changed: %s -> %s", instance.short_id, previous, instance.status)
