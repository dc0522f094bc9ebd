from rest_framework.permissions import BasePermission

from accounts.models import User


class HasRole(BasePermission):
    """
    Allows access only to users whose role is `required_role`.
    Keeps role check logic centralized.
    """
    required_role = None
    message = "You are not allowed to perform this action"

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "role", None) == self.required_role


class IsCustomer(HasRole):
    required_role = User.CUSTOMER
    message = "Only customers can access this endpoint"


class IsDriver(HasRole):
    required_role = User.DRIVER
    message = "Only drivers can access this endpoint"


class IsStore(HasRole):
    required_role = User.STORE
    message = "Only stores can access this endpoint"


class IsAdminRole(HasRole):
    required_role = User.ADMIN
    message = "Only admins can access this endpoint"


class IsTicketHolder(BasePermission):
    """Drivers and stores are the only roles that spend tickets."""
    message = "Only drivers and stores hold tickets"

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "role", None) in (User.DRIVER, User.STORE)
