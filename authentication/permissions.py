from rest_framework import permissions

from orders.lifecycle import Actor


class IsBackOffice(permissions.BasePermission):
    """
    Managers and cashiers: inventory, purchases, costing and the orders manager
    """
    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_back_office)


class IsKitchenStaff(permissions.BasePermission):
    """
    Kitchen display access. Back-office staff may also work the kitchen screen.
    """
    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.is_kitchen or user.is_back_office


class IsManager(permissions.BasePermission):
    """
    Staff account management: managers and superusers only
    """
    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.is_superuser or user.role == user.ROLE_MANAGER


def actor_for_user(user):
    """Map a request user onto the lifecycle actor it acts as."""
    if user is None or not user.is_authenticated:
        return Actor.CUSTOMER
    if user.is_back_office:
        return Actor.STAFF
    if user.is_kitchen:
        return Actor.KITCHEN
    return Actor.CUSTOMER
