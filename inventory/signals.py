# Recording a purchase restocks its material at the purchase price
import logging

from django.db.models import F
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone

from .models import Material, Purchase

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Purchase)
def restock_material_on_purchase(sender, instance, created, **kwargs):
    """Stock += quantity and unit cost := price per unit. Edits and deletes do not touch stock."""
    if not created or instance.material_id is None:
        return
    Material.objects.filter(pk=instance.material_id).update(
        stock_quantity=F('stock_quantity') + instance.quantity,
        unit_cost=instance.price_per_unit,
        updated_at=timezone.now(),
    )
    logger.info("Purchase of %s %s recorded: stock +%s at %s per unit",
                instance.quantity, instance.item_name, instance.quantity, instance.price_per_unit)
