import logging

from django.conf import settings
from rest_framework.throttling import SimpleRateThrottle

from .exceptions import MissingIdentifiers

logger = logging.getLogger(__name__)


class OrderRateThrottle(SimpleRateThrottle):
    """
    Limits order submissions per client address.

    The rate is read from ``settings.ORDER_RATE_LIMIT`` on every request so it
    can be changed without touching ``REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']``.
    """
    scope = 'order_create'

    def get_rate(self):
        return getattr(settings, 'ORDER_RATE_LIMIT', '3/min')

    def get_cache_key(self, request, view):
        ident = self.get_ident(request)
        if not ident:
            logger.warning("Order submission without a client address rejected")
            raise MissingIdentifiers()
        return self.cache_format % {'scope': self.scope, 'ident': ident}
