"""Customer-facing notices for rejected order submissions."""
import re
from collections import namedtuple

OrderNotice = namedtuple('OrderNotice', ['kind', 'text'])

INSUFFICIENT_STOCK = 'insufficient_stock'
RATE_LIMIT = 'rate_limit'
MISSING_IDENTIFIERS = 'missing_identifiers'
GENERIC = 'generic'

COOLDOWN_NOTICE = 'Too many orders: Please wait 1 minute before placing another order.'
GENERIC_NOTICE = 'Failed to create order. Please try again.'

# Fallback when an error arrives without a structured code.
MESSAGE_PATTERNS = [
    (re.compile(r'insufficient stock', re.IGNORECASE), INSUFFICIENT_STOCK),
    (re.compile(r'rate limit', re.IGNORECASE), RATE_LIMIT),
    (re.compile(r'missing identifiers', re.IGNORECASE), MISSING_IDENTIFIERS),
]


def classify_order_error(code=None, message=''):
    """
    Turn an order-submission failure into the notice shown to the customer.

    The structured ``code`` wins; the message text is only matched when the
    code is unknown.
    """
    message = message or ''
    kind = code if code in (INSUFFICIENT_STOCK, RATE_LIMIT, MISSING_IDENTIFIERS) else None
    if kind is None:
        for pattern, matched in MESSAGE_PATTERNS:
            if pattern.search(message):
                kind = matched
                break

    if kind == INSUFFICIENT_STOCK:
        return OrderNotice(kind, message)
    if kind in (RATE_LIMIT, MISSING_IDENTIFIERS):
        return OrderNotice(kind, COOLDOWN_NOTICE)
    return OrderNotice(GENERIC, GENERIC_NOTICE)
