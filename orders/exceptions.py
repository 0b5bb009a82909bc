from rest_framework import status
from rest_framework.exceptions import APIException


class InsufficientStock(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Insufficient stock.'
    default_code = 'insufficient_stock'
    domain_error = True

    def __init__(self, name, available):
        super().__init__(f"Insufficient stock for {name} (available: {available})")
        self.item_name = name
        self.available = available


class MissingIdentifiers(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Missing identifiers: the client address could not be determined.'
    default_code = 'missing_identifiers'
    domain_error = True


class CheckoutInProgress(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'An order from this session is already being submitted.'
    default_code = 'checkout_in_progress'
    domain_error = True


class EmptyCart(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Your cart is empty.'
    default_code = 'empty_cart'
    domain_error = True
