from orders.notices import COOLDOWN_NOTICE, GENERIC_NOTICE, classify_order_error


def test_stock_message_shown_verbatim():
    message = 'Insufficient stock for Cheesecake (available: 2)'
    notice = classify_order_error('insufficient_stock', message)
    assert notice.kind == 'insufficient_stock'
    assert notice.text == message


def test_rate_limit_and_missing_identifiers_share_cooldown():
    assert classify_order_error('rate_limit', 'slow down').text == COOLDOWN_NOTICE
    assert classify_order_error('missing_identifiers', '').text == COOLDOWN_NOTICE


def test_code_wins_over_message():
    notice = classify_order_error('rate_limit', 'Insufficient stock for Latte (available: 0)')
    assert notice.kind == 'rate_limit'


def test_message_fallback_is_case_insensitive():
    assert classify_order_error(None, 'INSUFFICIENT STOCK for Latte').kind == 'insufficient_stock'
    assert classify_order_error('error', 'Rate Limit exceeded').text == COOLDOWN_NOTICE
    assert classify_order_error(None, 'request had Missing Identifiers').text == COOLDOWN_NOTICE


def test_anything_else_is_generic():
    assert classify_order_error('error', 'connection reset').text == GENERIC_NOTICE
    assert classify_order_error().text == GENERIC_NOTICE
